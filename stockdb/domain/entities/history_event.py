"""Domain entity for part history: one immutable audit record per change."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .part import Part


class HistoryEventKind(str, Enum):
    """The kind of change an event records."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class HistoryEvent:
    """Immutable record of one logical change to a part.

    ``before`` is None for inserts and ``after`` is None for deletes. Both
    are snapshots, independent of the live part.
    """

    sequence: int
    kind: HistoryEventKind
    mpn: str
    before: Part | None = None
    after: Part | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touches(self, mpn: str) -> bool:
        """True if the event concerns ``mpn`` before or after the change."""
        return any(p is not None and p.mpn == mpn for p in (self.before, self.after))

    @property
    def changed_parameters(self) -> list[str]:
        """Names of the parameters that differ between the snapshots (updates only)."""
        if self.before is None or self.after is None:
            return []
        before, after = self.before.parameters, self.after.parameters
        return [param.value for param in before if before[param] != after[param]]
