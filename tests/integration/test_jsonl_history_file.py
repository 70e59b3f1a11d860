"""Integration tests for the append-only JSON-lines history file."""

import logging
from pathlib import Path

from stockdb.domain.entities import HistoryEvent, HistoryEventKind, Part
from stockdb.infrastructure.storage.jsonl_history_file import (
    JsonLinesHistoryRepository,
    history_path_for,
)


def _event(sequence: int, kind: HistoryEventKind, before=None, after=None) -> HistoryEvent:
    mpn = (before or after).mpn
    return HistoryEvent(sequence=sequence, kind=kind, mpn=mpn, before=before, after=after)


def test_history_path_for():
    assert history_path_for("data/stock.smd") == Path("data/stock.smd.smdh")
    assert history_path_for("stock", ".log") == Path("stock.log")


def test_history_path_is_unique_per_dataset():
    assert history_path_for("board.a") != history_path_for("board.b")
    assert history_path_for("stock.smdh") != Path("stock.smdh")
    assert history_path_for("stock.json", ".json") != Path("stock.json")


def test_missing_file_loads_empty(tmp_path):
    assert JsonLinesHistoryRepository(tmp_path / "none.smdh").load() == []


def test_append_never_rewrites_existing_lines(tmp_path):
    path = tmp_path / "stock.smdh"
    repository = JsonLinesHistoryRepository(path)

    repository.append([_event(1, HistoryEventKind.INSERT, after=Part("R1", stock="10"))])
    first = path.read_text(encoding="utf-8")

    repository.append([
        _event(2, HistoryEventKind.UPDATE, before=Part("R1", stock="10"), after=Part("R1", stock="3")),
        _event(3, HistoryEventKind.DELETE, before=Part("R1", stock="3")),
    ])
    content = path.read_text(encoding="utf-8")

    assert content.startswith(first)
    assert len(content.splitlines()) == 3

    events = repository.load()
    assert [e.sequence for e in events] == [1, 2, 3]
    assert events[1].before.stock == "10"
    assert events[1].after.stock == "3"
    assert events[2].after is None
    assert events[0].timestamp.tzinfo is not None


def test_unreadable_lines_are_skipped(tmp_path, caplog):
    path = tmp_path / "stock.smdh"
    repository = JsonLinesHistoryRepository(path)
    repository.append([_event(1, HistoryEventKind.INSERT, after=Part("R1"))])
    with path.open("a", encoding="utf-8") as handle:
        handle.write("garbage\n\n")
    repository.append([_event(2, HistoryEventKind.DELETE, before=Part("R1"))])

    with caplog.at_level(logging.WARNING, logger="stockdb.infrastructure.storage.jsonl_history_file"):
        events = repository.load()

    assert [e.sequence for e in events] == [1, 2]
    assert "line" in caplog.text


def test_append_nothing_creates_no_file(tmp_path):
    path = tmp_path / "stock.smdh"
    JsonLinesHistoryRepository(path).append([])
    assert not path.exists()
