"""
Validation issue types shared by the normalizer and the validator.

Issues are immutable values. A summary only stores the issue list; level
counts are derived from it on every access.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    """The three record collections handled by the toolkit."""

    CLIENTS = "clients"
    WORKERS = "workers"
    TASKS = "tasks"


class IssueLevel(str, Enum):
    """Severity of a validation finding."""

    ERROR = "error"
    WARNING = "warning"  # reserved, no check emits it yet
    INFO = "info"  # reserved, no check emits it yet


@dataclass(frozen=True)
class ValidationIssue:
    """One discrete validation finding."""

    id: str
    entity: EntityKind
    level: IssueLevel
    message: str
    row_id: str | None = None
    column: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain representation using the exported key names."""
        data: dict[str, Any] = {
            "id": self.id,
            "entity": self.entity.value,
            "level": self.level.value,
            "message": self.message,
        }
        if self.row_id is not None:
            data["rowId"] = self.row_id
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class ValidationSummary:
    """Ordered issue list plus per-level counts."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        """Number of issues per level, recomputed from ``issues``."""
        tally = Counter(issue.level for issue in self.issues)
        return {level.value: tally.get(level, 0) for level in IssueLevel}

    @property
    def has_errors(self) -> bool:
        """Whether any error-level issue is present."""
        return any(issue.level is IssueLevel.ERROR for issue in self.issues)

    def for_entity(self, entity: EntityKind) -> list[ValidationIssue]:
        """Issues scoped to one collection, in emission order."""
        return [issue for issue in self.issues if issue.entity is entity]

    def to_dict(self) -> dict[str, Any]:
        """Plain representation: ``{issues, counts}``."""
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "counts": self.counts,
        }
