"""Voice module - Fish Audio TTS/cloning client and simulated Whisper STT."""

from .fish_audio import FishAudioClient, FishAudioError
from .whisper import SessionNotFoundError, WhisperService

__all__ = ["FishAudioClient", "FishAudioError", "SessionNotFoundError", "WhisperService"]
