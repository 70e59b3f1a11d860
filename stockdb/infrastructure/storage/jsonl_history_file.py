"""JSON-lines history file: one event per line, opened in append mode only."""

import logging
from pathlib import Path

from pydantic import ValidationError

from stockdb.application.interfaces import HistoryRepository
from stockdb.application.schemas import HistoryEventRecord
from stockdb.domain.entities import HistoryEvent
from stockdb.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def history_path_for(data_path: str | Path, suffix: str = ".smdh") -> Path:
    """Derive the history file path by appending ``suffix`` to the dataset file name.

    ``stock.smd`` maps to ``stock.smd.smdh``; two datasets never share a log and
    the log can never be the dataset itself.
    """
    path = Path(data_path)
    return path.with_name(path.name + suffix)


class JsonLinesHistoryRepository(HistoryRepository):
    """Infrastructure adapter for the append-only history file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[HistoryEvent]:
        """Read every event. Lines that cannot be parsed are skipped with a warning."""
        if not self._path.exists():
            return []

        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise PersistenceError(self._path, f"cannot read history: {exc}") from exc

        events: list[HistoryEvent] = []
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(HistoryEventRecord.model_validate_json(line).to_entity())
            except (ValidationError, ValueError) as exc:
                logger.warning("Skipping unreadable history line %s:%d: %s", self._path, line_no, exc)

        logger.debug("Loaded %d history events from %s", len(events), self._path)
        return events

    def append(self, events: list[HistoryEvent]) -> None:
        if not events:
            return

        payload = "".join(
            HistoryEventRecord.from_entity(event).model_dump_json() + "\n" for event in events
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(payload)
        except OSError as exc:
            raise PersistenceError(self._path, f"cannot append history: {exc}") from exc

        logger.info("Appended %d history events to %s", len(events), self._path)
