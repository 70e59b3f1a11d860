"""History log: append-only recorder of part inserts, updates and deletes."""

import logging

from stockdb.application.interfaces import HistoryRepository
from stockdb.domain.entities import HistoryEvent, HistoryEventKind, Part
from stockdb.infrastructure.logging.colored_logger import StoreLogger, StoreStage

logger = logging.getLogger(__name__)
slog = StoreLogger(__name__)


class HistoryLog:
    """Records one immutable event per part change and flushes them on ``save``.

    Events already persisted are loaded when the log is created so ``events``
    always shows the full sequence. ``save`` only appends the pending events;
    nothing written earlier is ever rewritten.

    A disabled log turns every record call into a no-op returning None. The
    data store behaves identically with or without history.
    """

    def __init__(self, repository: HistoryRepository | None, *, enabled: bool = True):
        self._repository = repository
        self._enabled = enabled and repository is not None
        self._events: list[HistoryEvent] = self._repository.load() if self._enabled else []
        self._pending: list[HistoryEvent] = []
        self._next_sequence = max((e.sequence for e in self._events), default=0) + 1

    @classmethod
    def disabled(cls) -> "HistoryLog":
        return cls(None, enabled=False)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def events(self) -> list[HistoryEvent]:
        """Every event, persisted and pending, in order of occurrence."""
        return list(self._events)

    @property
    def pending(self) -> list[HistoryEvent]:
        """Events recorded since the last successful ``save``."""
        return list(self._pending)

    def events_for(self, mpn: str) -> list[HistoryEvent]:
        """Events whose before or after snapshot carries ``mpn``."""
        return [e for e in self._events if e.touches(mpn)]

    # ── Recording ───────────────────────────────────────────────────

    def record_insert(self, part: Part) -> HistoryEvent | None:
        return self._append(HistoryEventKind.INSERT, part.mpn, before=None, after=part)

    def record_update(self, before: Part, after: Part) -> HistoryEvent | None:
        return self._append(HistoryEventKind.UPDATE, before.mpn, before=before, after=after)

    def record_delete(self, part: Part) -> HistoryEvent | None:
        return self._append(HistoryEventKind.DELETE, part.mpn, before=part, after=None)

    def _append(
        self,
        kind: HistoryEventKind,
        mpn: str,
        *,
        before: Part | None,
        after: Part | None,
    ) -> HistoryEvent | None:
        if not self._enabled:
            return None

        event = HistoryEvent(
            sequence=self._next_sequence,
            kind=kind,
            mpn=mpn,
            before=before.clone_for_history() if before is not None else None,
            after=after.clone_for_history() if after is not None else None,
        )
        self._next_sequence += 1
        self._events.append(event)
        self._pending.append(event)
        logger.debug("History #%d: %s %s", event.sequence, kind.value, mpn)
        return event

    # ── Persistence ─────────────────────────────────────────────────

    def save(self) -> int:
        """Append pending events to the backing file. Returns how many were written.

        On failure the events stay pending so a later save can retry.
        """
        if not self._enabled or not self._pending:
            return 0

        self._repository.append(self._pending)
        written = len(self._pending)
        self._pending.clear()
        slog.step(StoreStage.HISTORY, "History flushed", events=written)
        return written
