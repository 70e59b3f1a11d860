"""Per-category log levels for the store.

Call ``setup_logging()`` once before opening a store. The file adapters are
noisy at INFO, so their category defaults to WARNING while store and history
activity stay visible.
"""

import logging
import sys

from stockdb.config import Settings, get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> loggers it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_store": (
        "stockdb.application.services.data_store",
        "stockdb.application.services.change_notifier",
        "stockdb.application.services.order_list",
    ),
    "log_level_history": (
        "stockdb.application.services.history_log",
        "stockdb.infrastructure.storage.jsonl_history_file",
    ),
    "log_level_storage": (
        "stockdb.infrastructure.storage.json_store_file",
    ),
}


def category_levels(settings: Settings) -> dict[str, int]:
    """Resolve every category logger to its numeric level."""
    levels: dict[str, int] = {}
    for field_name, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field_name))
        levels.update(dict.fromkeys(logger_names, level))
    return levels


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-category levels; add a stderr handler if none is installed."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(console)

    for name, level in category_levels(settings).items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Log levels: root=%s store=%s history=%s storage=%s",
        settings.log_level,
        settings.log_level_store,
        settings.log_level_history,
        settings.log_level_storage,
    )


def _parse_level(raw: str) -> int:
    """Map a level name to its logging constant. Unknown names mean INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
