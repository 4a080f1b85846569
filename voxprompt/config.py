"""Application configuration using Pydantic Settings."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locations searched for the AI service config file when no key is in the environment
AI_CONFIG_FILENAME = ".z-ai-config"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "VoxPrompt"
    app_env: str = "development"
    debug: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "auto"  # auto (based on app_env), console, or json
    logs_dir: str = "./logs"
    log_to_file: bool = True
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    log_file_backup_count: int = 5

    # Database
    database_url: str = "sqlite+aiosqlite:///./voxprompt.db"
    require_migrations_on_startup: bool = True
    """If True, application won't start if database migrations are not up to date.
    If False, only logs a warning."""

    # AI service
    ai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("ZAI_API_KEY", "AI_API_KEY", "ai_api_key"),
    )
    ai_base_url: str = "https://api.z.ai/api/paas/v4"
    ai_config_path: str = ""
    ai_asr_path: str = "/audio/transcriptions"
    ai_asr_model: str = "glm-asr"
    ai_chat_model: str = "glm-4.6"
    ai_request_timeout_seconds: float = 90.0

    # Transcription retry policy
    transcription_max_attempts: int = 2
    transcription_retry_delay_seconds: float = 1.0
    transcription_retry_backoff: float = 1.0  # 1.0 = fixed delay

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def ai_config_candidates(self) -> list[Path]:
        """Config file locations, in lookup order."""
        if self.ai_config_path:
            return [Path(self.ai_config_path).expanduser()]
        return [
            Path.cwd() / AI_CONFIG_FILENAME,
            Path.home() / AI_CONFIG_FILENAME,
            Path("/etc") / AI_CONFIG_FILENAME,
        ]

    def resolve_ai_credentials(self) -> tuple[str, str] | None:
        """
        Return ``(api_key, base_url)`` for the AI service.

        The environment key wins; otherwise the first readable config file
        holding an ``apiKey`` is used. Returns None when nothing is configured.
        """
        api_key = self.ai_api_key.strip()
        if api_key:
            return api_key, self.ai_base_url

        for path in self.ai_config_candidates():
            if not path.is_file():
                continue
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                continue
            if not isinstance(payload, dict):
                continue
            file_key = str(payload.get("apiKey") or payload.get("api_key") or "").strip()
            if file_key:
                base_url = payload.get("baseUrl") or payload.get("base_url") or self.ai_base_url
                return file_key, str(base_url)

        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
