"""Pydantic schema for one line of the append-only history file."""

from datetime import datetime

from pydantic import BaseModel, Field

from stockdb.domain.entities import HistoryEvent, HistoryEventKind

from .store_document import PartRecord


class HistoryEventRecord(BaseModel):
    """Serialized form of a HistoryEvent: one JSON object per line."""

    sequence: int = Field(..., ge=1)
    kind: HistoryEventKind
    mpn: str
    before: PartRecord | None = None
    after: PartRecord | None = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, event: HistoryEvent) -> "HistoryEventRecord":
        return cls(
            sequence=event.sequence,
            kind=event.kind,
            mpn=event.mpn,
            before=PartRecord.from_entity(event.before) if event.before else None,
            after=PartRecord.from_entity(event.after) if event.after else None,
            timestamp=event.timestamp,
        )

    def to_entity(self) -> HistoryEvent:
        return HistoryEvent(
            sequence=self.sequence,
            kind=self.kind,
            mpn=self.mpn,
            before=self.before.to_entity() if self.before else None,
            after=self.after.to_entity() if self.after else None,
            timestamp=self.timestamp,
        )
