from .part import Part, PartParameter
from .project import Material, Project, ProjectVersion
from .history_event import HistoryEvent, HistoryEventKind

__all__ = [
    "Part",
    "PartParameter",
    "Material",
    "Project",
    "ProjectVersion",
    "HistoryEvent",
    "HistoryEventKind",
]
