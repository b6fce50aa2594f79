"""
Canonical record types for clients, workers and tasks.

Field names match the canonical column headers so a record converts to and
from a canonical-keyed row without renaming. Records are mutable because
the workspace edits them field by field.
"""

import copy
from dataclasses import dataclass, field, fields
from typing import Any


@dataclass(frozen=True)
class InvalidJSON:
    """
    AttributesJSON cell whose text could not be parsed.

    Distinct from ``None`` (an absent value). Keeps the original text so
    the cell survives export unchanged and can be fixed by the user.
    """

    raw: str

    def __bool__(self) -> bool:
        return False


def is_invalid_json(value: Any) -> bool:
    """Whether a value carries the parse-failed marker."""
    return isinstance(value, InvalidJSON)


def _record_dict(record: Any) -> dict[str, Any]:
    # asdict() would recurse into InvalidJSON and lose the marker
    return {f.name: copy.deepcopy(getattr(record, f.name)) for f in fields(record)}


@dataclass
class Client:
    """A client requesting tasks."""

    ClientID: str = ""
    ClientName: str = ""
    PriorityLevel: float = 0
    RequestedTaskIDs: list[str] = field(default_factory=list)
    GroupTag: str | None = None
    AttributesJSON: Any = None

    def to_dict(self) -> dict[str, Any]:
        return _record_dict(self)


@dataclass
class Worker:
    """A worker offering skills in a set of phases."""

    WorkerID: str = ""
    WorkerName: str = ""
    Skills: list[str] = field(default_factory=list)
    AvailableSlots: list[float] = field(default_factory=list)
    MaxLoadPerPhase: float = 0
    WorkerGroup: str | None = None
    QualificationLevel: str | float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _record_dict(self)


@dataclass
class Task:
    """A task to be allocated."""

    TaskID: str = ""
    TaskName: str = ""
    Category: str | None = None
    Duration: float = 0
    RequiredSkills: list[str] = field(default_factory=list)
    PreferredPhases: list[float] = field(default_factory=list)
    MaxConcurrent: float = 0

    def to_dict(self) -> dict[str, Any]:
        return _record_dict(self)


Record = Client | Worker | Task

CLIENT_FIELDS: list[str] = list(Client.__dataclass_fields__)
WORKER_FIELDS: list[str] = list(Worker.__dataclass_fields__)
TASK_FIELDS: list[str] = list(Task.__dataclass_fields__)
