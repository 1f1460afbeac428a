"""Configuration objects for the parking watcher."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .classifier import ALMOST_FULL_THRESHOLD
from .utils import parse_titles

REQUIRED_FIELDS = {
    "webhook_url": "--webhook",
    "titles": "--titles",
    "data_url": "--data-url",
}


class Settings(BaseSettings):
    """Runtime configuration from environment variables, overridden by CLI flags."""

    webhook_url: Optional[SecretStr] = None
    titles: Optional[str] = None
    data_url: Optional[HttpUrl] = None
    status_file: Path = Path("status.json")
    almost_full_threshold: int = Field(ALMOST_FULL_THRESHOLD, ge=0)
    timezone: str = "UTC"
    timeout_seconds: float = Field(15.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PARKING_WATCH_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def monitored_titles(self) -> List[str]:
        return parse_titles(self.titles)

    def missing_required(self) -> List[str]:
        """CLI flag names of required values that are still unset."""
        present = {
            "webhook_url": bool(self.webhook_url and self.webhook_url.get_secret_value().strip()),
            "titles": bool(self.monitored_titles),
            "data_url": self.data_url is not None,
        }
        return [flag for field_name, flag in REQUIRED_FIELDS.items() if not present[field_name]]
