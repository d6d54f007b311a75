import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config() -> dict[str, str]:
    """
    Load configuration from environment variables.
    Called lazily to avoid reading the environment on import.
    """
    return {
        "DB_PATH": os.getenv("JOBLY_DB_PATH", "jobly.db"),
        "LOG_LEVEL": os.getenv("JOBLY_LOG_LEVEL", "INFO"),
    }


class _Config:
    """Lazy configuration that only validates when values are actually accessed."""

    def __init__(self) -> None:
        self._config: dict[str, str] | None = None

    def _load(self) -> None:
        if self._config is None:
            self._config = get_config()

    @property
    def DB_PATH(self) -> str:
        self._load()
        if self._config is None:
            raise RuntimeError("Config failed to load")
        path = self._config["DB_PATH"].strip()
        if not path:
            raise ValueError("JOBLY_DB_PATH must not be empty.")
        return path

    @property
    def LOG_LEVEL(self) -> int:
        """Logging level name, converted to its numeric value."""
        self._load()
        if self._config is None:
            raise RuntimeError("Config failed to load")
        raw = self._config["LOG_LEVEL"].strip().upper()
        if raw not in LOG_LEVELS:
            raise ValueError(f"JOBLY_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{raw}'")
        return logging.getLevelName(raw)


_cfg = _Config()

# Module-level type declarations for mypy.
# The actual values come from __getattr__ below.
DB_PATH: str
LOG_LEVEL: int


# Module-level lazy access using __getattr__ (PEP 562).
def __getattr__(name: str) -> str | int:
    if name == "DB_PATH":
        return _cfg.DB_PATH
    if name == "LOG_LEVEL":
        return _cfg.LOG_LEVEL
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
