"""Settings Manager - Handles tracker, storage and logging configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from doc_locator.core import TrackerConfig

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class SettingsManager:
    """
    Manages settings read from the environment.

    Values come from a .env file in the project root, overridden by variables
    already set in the process environment.
    """

    DEFAULT_DB_FILENAME = "doc_locator.db"

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_tracker_config(self) -> TrackerConfig:
        """Build a TrackerConfig, falling back to defaults for unset or invalid values."""
        defaults = TrackerConfig()
        return TrackerConfig(
            auto_save=self._get_bool("DOC_LOCATOR_AUTO_SAVE", defaults.auto_save),
            position_threshold=self._get_float(
                "DOC_LOCATOR_POSITION_THRESHOLD", defaults.position_threshold
            ),
            save_interval_ms=self._get_int("DOC_LOCATOR_SAVE_INTERVAL_MS", defaults.save_interval_ms),
            debounce_ms=self._get_int("DOC_LOCATOR_DEBOUNCE_MS", defaults.debounce_ms),
            track_scroll=self._get_bool("DOC_LOCATOR_TRACK_SCROLL", defaults.track_scroll),
            track_selection=self._get_bool("DOC_LOCATOR_TRACK_SELECTION", defaults.track_selection),
            strict_validation=self._get_bool(
                "DOC_LOCATOR_STRICT_VALIDATION", defaults.strict_validation
            ),
            fingerprint_positions=self._get_bool(
                "DOC_LOCATOR_FINGERPRINT_POSITIONS", defaults.fingerprint_positions
            ),
        )

    def get_database_path(self) -> Path:
        """SQLite file for saved positions and bookmarks (relative paths resolve from project root)."""
        raw = os.getenv("DOC_LOCATOR_DB_PATH")
        if raw and raw.strip():
            path = Path(raw.strip())
            return path if path.is_absolute() else self._project_root / path
        return self._project_root / self.DEFAULT_DB_FILENAME

    def get_environment(self) -> str:
        """Runtime environment name: development, production or test."""
        value = os.getenv("DOC_LOCATOR_ENV")
        return value.strip().lower() if value and value.strip() else "development"

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get_bool(name: str, default: bool) -> bool:
        value = os.getenv(name)
        if value is None:
            return default
        value = value.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        return default

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        value = os.getenv(name)
        if value is None or not value.strip():
            return default
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default

    @staticmethod
    def _get_float(name: str, default: float) -> float:
        value = os.getenv(name)
        if value is None or not value.strip():
            return default
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        return parsed if parsed >= 0 else default
