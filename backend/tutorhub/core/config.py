# backend/tutorhub/core/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only outside CI and test runs
if not os.getenv("CI") and not is_running_tests():
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime configuration for the scheduling core."""

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./tutorhub.db")
    sql_echo: bool = False

    # Identity layer (tokens are verified here, never issued)
    secret_key: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        description="Shared secret used to verify access tokens",
    )
    algorithm: str = "HS256"

    # Scheduling rules
    default_timezone: str = "UTC"
    slot_stride_minutes: int = Field(default=30, ge=1)
    max_suggested_slots: int = Field(default=50, ge=1)
    room_join_window_minutes: int = Field(default=30, ge=0)
    room_token_ttl_seconds: int = Field(default=3600, ge=60)

    # LiveKit room-token provider
    livekit_enabled: bool = False
    livekit_api_key: Optional[str] = None
    livekit_api_secret: Optional[SecretStr] = None
    livekit_ws_url: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_timezone")
    @classmethod
    def validate_default_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
