"""
Configuration for bibresolver.

Settings are read from the environment (and a local .env file) once and
cached for the process.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


# Upper bound for a single catalog call
MAX_SOURCE_TIMEOUT = 30.0


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Network
    source_timeout_seconds: float = 15.0
    user_agent: str = "bibresolver/1.0"

    # External APIs
    google_books_api_key: Optional[str] = None
    isbndb_api_key: Optional[str] = None

    # Comma separated source names to skip, e.g. "WorldCat Classify,ISBNdb"
    disabled_sources: str = ""

    # Title used when only classifications could be found
    unidentified_title: str = "Unidentified book"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Environment
    environment: str = "development"
    debug: bool = True

    def __post_init__(self):
        if self.source_timeout_seconds <= 0 or self.source_timeout_seconds > MAX_SOURCE_TIMEOUT:
            self.source_timeout_seconds = MAX_SOURCE_TIMEOUT

    @property
    def disabled_source_names(self) -> set[str]:
        """Disabled source names, lowercased."""
        return {
            name.strip().lower()
            for name in self.disabled_sources.split(",")
            if name.strip()
        }

    def is_source_enabled(self, name: str) -> bool:
        return name.lower() not in self.disabled_source_names

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        load_dotenv()
        return cls(
            source_timeout_seconds=float(os.getenv("BIBRESOLVER_SOURCE_TIMEOUT", cls.source_timeout_seconds)),
            user_agent=os.getenv("BIBRESOLVER_USER_AGENT", cls.user_agent),
            google_books_api_key=os.getenv("GOOGLE_BOOKS_API_KEY"),
            isbndb_api_key=os.getenv("ISBNDB_API_KEY"),
            disabled_sources=os.getenv("BIBRESOLVER_DISABLED_SOURCES", cls.disabled_sources),
            unidentified_title=os.getenv("BIBRESOLVER_UNIDENTIFIED_TITLE", cls.unidentified_title),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            log_json=_env_bool("LOG_JSON", "false"),
            environment=os.getenv("BIBRESOLVER_ENV", cls.environment),
            debug=_env_bool("DEBUG", "true"),
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
