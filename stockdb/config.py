import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Store settings loaded from environment variables (prefix ``STOCKDB_``)."""

    # Default dataset opened when no path is given
    data_file: str = "data/stock.smd"

    # History: disabling makes every record operation a no-op
    history_enabled: bool = True
    history_suffix: str = ".smdh"

    # Store file persistence
    backup_suffix: str = ".bak"
    pretty_json: bool = True

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # root logger
    log_level_store: str = "INFO"            # DataStore CRUD and lifecycle
    log_level_history: str = "INFO"          # HistoryLog recording / flushing
    log_level_storage: str = "WARNING"       # File adapters (load, write, backup)

    model_config = {
        "env_prefix": "STOCKDB_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Reject an empty history suffix, which would alias the store file."""
        if not self.history_suffix.strip():
            _config_logger.warning("Empty history_suffix: falling back to '.smdh'")
            object.__setattr__(self, "history_suffix", ".smdh")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
