"""Configuration management using pydantic-settings."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import SettingsValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".vlp"
DEFAULT_SETTINGS_FILE = CONFIG_DIR / "settings.json"

# Fields owned by the user and written by SettingsStore.save
PERSISTED_FIELDS = frozenset({"show_thumbnail", "show_channel_icon", "youtube_api_key"})


def find_env_file() -> Path | None:
    """Find .env file in current or parent directories."""
    current = Path.cwd()
    root = Path("/")

    while current != root:
        env_path = current / ".env"
        if env_path.exists():
            return env_path
        current = current.parent

    home_env = CONFIG_DIR / ".env"
    if home_env.exists():
        return home_env

    return None


class Settings(BaseSettings):
    """Enrichment settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=find_env_file() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display options (user-tunable, persisted)
    show_thumbnail: bool = Field(default=True, description="Include thumbnail in replacement")
    show_channel_icon: bool = Field(
        default=True, description="Resolve and show the channel icon (requires API key)"
    )
    youtube_api_key: str = Field(
        default="", description="YouTube Data API v3 key used for channel icon lookups"
    )

    # Service endpoints
    oembed_endpoint: str = Field(
        default="https://noembed.com/embed", description="oEmbed-style lookup endpoint"
    )
    youtube_search_endpoint: str = Field(
        default="https://www.googleapis.com/youtube/v3/search",
        description="Channel directory search endpoint",
    )
    youtube_channels_endpoint: str = Field(
        default="https://www.googleapis.com/youtube/v3/channels",
        description="Channel detail endpoint",
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Per-request transport timeout in seconds"
    )

    # Logging
    log_file: Path = Field(
        default=CONFIG_DIR / "logs" / "enrich.log", description="Structured log file path"
    )

    @field_validator("oembed_endpoint", "youtube_search_endpoint", "youtube_channels_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure endpoints are absolute http(s) URLs."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Endpoint must be an http(s) URL: {v}")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    @field_validator("youtube_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()


def validate_for_save(settings: Settings) -> None:
    """Check that settings may be persisted.

    Channel icons need an API key, so enabling them without one is rejected.
    In-memory settings are never checked; only the save boundary is.

    Args:
        settings: Settings about to be saved

    Raises:
        SettingsValidationError: If channel icons are enabled without an API key
    """
    if settings.show_channel_icon and not settings.youtube_api_key:
        raise SettingsValidationError(
            "A YouTube API key is required to show channel icons. "
            "Add a key or turn channel icons off."
        )


class SettingsStore:
    """JSON file persistence for user-tunable settings."""

    def __init__(self, path: Path | None = None):
        """Initialize store.

        Args:
            path: Settings file (default: ~/.vlp/settings.json)
        """
        self.path = path or DEFAULT_SETTINGS_FILE

    def _read_stored(self) -> dict[str, object]:
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: expected a JSON object")
            return {}

        return {key: value for key, value in data.items() if key in PERSISTED_FIELDS}

    def load(self) -> Settings:
        """Load settings, merging stored values over environment and defaults.

        Returns:
            Settings instance
        """
        stored = self._read_stored()
        try:
            return Settings(**stored)
        except ValidationError as e:
            logger.warning(f"Stored settings are invalid, using defaults: {e}")
            return Settings()

    def save(self, settings: Settings) -> Path:
        """Persist user-tunable settings.

        Nothing is written when validation fails, so the previously
        persisted state stays as it was.

        Args:
            settings: Settings to persist

        Returns:
            Path to the settings file

        Raises:
            SettingsValidationError: If settings fail validate_for_save
        """
        validate_for_save(settings)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(settings.model_dump(include=set(PERSISTED_FIELDS)), f, indent=2)
        tmp_path.replace(self.path)

        logger.info(f"Saved settings to {self.path}")
        return self.path


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached singleton)."""
    return Settings()
