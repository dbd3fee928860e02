"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Voice Platform"
    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    # Fish Audio
    fish_audio_api_token: str = ""
    fish_audio_base_url: str = "https://fishaudio.net/api/open"
    fish_audio_ws_url: str = "wss://api.fish.audio/v1/tts/live"
    fish_audio_timeout: float = 60.0

    # SQLite
    database_url: str = "./voice_clone.db"

    # Speech-to-text (simulated Whisper)
    stt_default_model: str = "base"
    stt_session_ttl_minutes: int = 30
    stt_final_retention_seconds: float = 5.0
    stt_sweep_interval_seconds: int = 60
    stt_latency_scale: float = 1.0

    # CORS
    frontend_url: str = "http://localhost:3000"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency for injecting settings."""
    return settings
