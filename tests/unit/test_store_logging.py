"""Unit tests for logging setup and the colored store logger."""

import logging

import pytest

from stockdb.application.services import HistoryLog
from stockdb.config import Settings
from stockdb.domain.entities import Part
from stockdb.infrastructure.logging.colored_logger import StoreLogger, StoreStage
from stockdb.infrastructure.logging.log_config import _parse_level, category_levels, setup_logging


@pytest.fixture
def restore_levels():
    root = logging.getLogger()
    saved_root = root.level
    saved_handlers = list(root.handlers)
    saved = {
        name: logging.getLogger(name).level
        for name in (
            "stockdb.application.services.data_store",
            "stockdb.infrastructure.storage.json_store_file",
        )
    }
    yield
    root.setLevel(saved_root)
    root.handlers[:] = saved_handlers
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_setup_logging_applies_category_levels(monkeypatch, clear_settings_cache, restore_levels):
    monkeypatch.setenv("STOCKDB_LOG_LEVEL_STORE", "debug")
    monkeypatch.setenv("STOCKDB_LOG_LEVEL_STORAGE", "ERROR")

    setup_logging()

    assert logging.getLogger("stockdb.application.services.data_store").level == logging.DEBUG
    assert logging.getLogger("stockdb.infrastructure.storage.json_store_file").level == logging.ERROR


def test_parse_level():
    assert _parse_level("warning") == logging.WARNING
    assert _parse_level("chatty") == logging.INFO


def test_step_includes_stage_and_details(caplog):
    slog = StoreLogger("stockdb.test")
    with caplog.at_level(logging.INFO, logger="stockdb.test"):
        slog.step(StoreStage.PART, "Inserted part", mpn="R1")

    assert "PART" in caplog.text
    assert "mpn=R1" in caplog.text


def test_timed_step_logs_failure_and_reraises(caplog):
    slog = StoreLogger("stockdb.test")
    with caplog.at_level(logging.INFO, logger="stockdb.test"):
        with pytest.raises(OSError):
            with slog.timed_step(StoreStage.SAVE, "Saving"):
                raise OSError("disk full")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "disk full" in record.getMessage()


def test_category_levels_cover_every_category():
    levels = category_levels(Settings(log_level_history="DEBUG", log_level_storage="error"))

    assert levels["stockdb.application.services.history_log"] == logging.DEBUG
    assert levels["stockdb.infrastructure.storage.jsonl_history_file"] == logging.DEBUG
    assert levels["stockdb.infrastructure.storage.json_store_file"] == logging.ERROR
    assert levels["stockdb.application.services.data_store"] == logging.INFO


def test_history_flush_is_logged(history_repository, caplog):
    log = HistoryLog(history_repository)
    log.record_insert(Part("R1"))
    with caplog.at_level(logging.INFO, logger="stockdb.application.services.history_log"):
        log.save()

    assert "HISTORY" in caplog.text
    assert "events=1" in caplog.text
