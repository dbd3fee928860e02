"""Dependency injection providers for FastAPI."""

from voice_platform.db.database import Database
from voice_platform.scheduler.service import SchedulerService
from voice_platform.voice.fish_audio import FishAudioClient
from voice_platform.voice.whisper import WhisperService

# Global singleton instances (one event loop per process)
_database: Database | None = None
_whisper_service: WhisperService | None = None
_fish_audio_client: FishAudioClient | None = None
_scheduler: SchedulerService | None = None


def get_database() -> Database:
    """Return singleton Database instance."""
    global _database
    if _database is None:
        _database = Database()
    return _database


def get_whisper_service() -> WhisperService:
    """Return singleton WhisperService instance."""
    global _whisper_service
    if _whisper_service is None:
        _whisper_service = WhisperService()
    return _whisper_service


def get_fish_audio_client() -> FishAudioClient:
    """Return singleton FishAudioClient instance.

    Raises ``FishAudioError`` when no API token is configured, so routes
    that need the cloud service fail per request instead of at import.
    """
    global _fish_audio_client
    if _fish_audio_client is None:
        _fish_audio_client = FishAudioClient()
    return _fish_audio_client


def get_scheduler() -> SchedulerService:
    """Return singleton SchedulerService instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = SchedulerService()
    return _scheduler
