"""
Configuration management for RecipeFind.

This module centralizes environment variable loading from the .env file at project root.
It is imported by every module that reads configuration, so .env is loaded before any
other code accesses environment variables.

When no .env exists, load_dotenv() is a no-op and process environment variables are used.

Environment Variables:
- RECIPEFIND_DATA_DIR: Optional, directory holding the local key-value files (default ".recipefind")
- RECIPEFIND_AUTH_DELAY: Optional, simulated latency for login/register in seconds (default 0.5)
- RECIPEFIND_RESET_DELAY: Optional, simulated latency for password reset in seconds (default 1.0)
- RECIPEFIND_REVIEW_DELAY: Optional, simulated latency for review submission in seconds (default 1.0)
- RECIPEFIND_SUGGEST_DEBOUNCE: Optional, quiet interval before a suggestion fetch in seconds (default 0.3)
- RECIPEFIND_SUGGEST_MIN_LENGTH: Optional, minimum query length for a suggestion fetch (default 3)
- RECIPEFIND_SUGGEST_LIMIT: Optional, maximum number of suggestions (default 8)
- RECIPEFIND_EVENT_LOG: Optional, path of the JSONL event log (default "events.log")
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env_file() -> None:
    """
    Load environment variables from the .env file at project root.

    The project root is located by going up from this file's location
    (recipefind/config.py -> recipefind/ -> project root).

    Safe to call multiple times. Existing environment variables take precedence.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using default %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r, using default %s", name, raw, default)
        return default
    return value


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using default %s", name, raw, default)
        return default
    return value


class StorageConfig:
    """Configuration for the local key-value storage."""

    @staticmethod
    def get_data_dir() -> Path:
        """
        Get the directory holding the stored keys.

        Returns:
            Path (default: ".recipefind" relative to the working directory)
        """
        return Path(os.getenv("RECIPEFIND_DATA_DIR", ".recipefind"))


class LatencyConfig:
    """Simulated network latency for the mock backend operations."""

    @staticmethod
    def get_auth_delay() -> float:
        """Delay for login and register, in seconds (default: 0.5)."""
        return _get_float("RECIPEFIND_AUTH_DELAY", 0.5)

    @staticmethod
    def get_reset_delay() -> float:
        """Delay for password reset, in seconds (default: 1.0)."""
        return _get_float("RECIPEFIND_RESET_DELAY", 1.0)

    @staticmethod
    def get_review_delay() -> float:
        """Delay for review submission, in seconds (default: 1.0)."""
        return _get_float("RECIPEFIND_REVIEW_DELAY", 1.0)


class SuggestionConfig:
    """Configuration for the typeahead suggestion engine."""

    @staticmethod
    def get_debounce() -> float:
        """Quiet interval before a suggestion fetch is issued (default: 0.3)."""
        return _get_float("RECIPEFIND_SUGGEST_DEBOUNCE", 0.3)

    @staticmethod
    def get_min_fetch_length() -> int:
        """Minimum query length that triggers an async fetch (default: 3)."""
        return _get_int("RECIPEFIND_SUGGEST_MIN_LENGTH", 3)

    @staticmethod
    def get_limit() -> int:
        """Maximum number of suggestions returned (default: 8)."""
        return _get_int("RECIPEFIND_SUGGEST_LIMIT", 8)


class EventsConfig:
    """Configuration for the analytics event log."""

    @staticmethod
    def get_log_file() -> Path:
        """Path of the JSONL event log (default: "events.log")."""
        return Path(os.getenv("RECIPEFIND_EVENT_LOG", "events.log"))
