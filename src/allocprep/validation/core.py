"""
Cross-entity validation of canonical records.

``validate`` runs a fixed sequence of independent checks over the three
collections and returns every finding. It never raises; records that break
a rule are reported, not removed.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Any

from allocprep.normalization.coercion import parse_list, parse_text
from allocprep.schemas.issues import (
    EntityKind,
    IssueLevel,
    ValidationIssue,
    ValidationSummary,
)
from allocprep.schemas.records import Client, Task, Worker, is_invalid_json
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

PRIORITY_MIN = 1
PRIORITY_MAX = 5


class _IssueCollector:
    """Accumulates issues and keeps their ids unique within one run."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []
        self._ids: set[str] = set()

    def error(
        self,
        issue_id: str,
        entity: EntityKind,
        message: str,
        *,
        index: int | None = None,
        row_id: str | None = None,
        column: str | None = None,
    ) -> None:
        # Two rows sharing an identifier would otherwise produce the same id
        if issue_id in self._ids and index is not None:
            issue_id = f"{issue_id}:{index}"
        self._ids.add(issue_id)
        self.issues.append(
            ValidationIssue(
                id=issue_id,
                entity=entity,
                level=IssueLevel.ERROR,
                message=message,
                row_id=row_id,
                column=column,
            )
        )


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _normalize_skills(values: Any) -> list[str]:
    return [skill.lower() for skill in parse_list(values)]


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _check_duplicates(
    out: _IssueCollector,
    entity: EntityKind,
    prefix: str,
    id_field: str,
    ids: Sequence[Any],
) -> None:
    seen: set[str] = set()
    for index, raw_id in enumerate(ids):
        record_id = parse_text(raw_id)
        if record_id in seen:
            out.error(
                f"dup-{prefix}:{record_id}:{index}",
                entity,
                f"Duplicate {id_field}",
                index=index,
                row_id=record_id,
                column=id_field,
            )
        seen.add(record_id)


def _check_clients(out: _IssueCollector, clients: Sequence[Client]) -> None:
    for index, client in enumerate(clients):
        record_id = parse_text(client.ClientID)
        level = client.PriorityLevel
        if not _is_number(level) or not PRIORITY_MIN <= level <= PRIORITY_MAX:
            out.error(
                f"client-priority:{record_id}",
                EntityKind.CLIENTS,
                f"PriorityLevel must be between {PRIORITY_MIN} and {PRIORITY_MAX}",
                index=index,
                row_id=record_id,
                column="PriorityLevel",
            )
        if is_invalid_json(client.AttributesJSON):
            out.error(
                f"client-attr:{record_id}",
                EntityKind.CLIENTS,
                "AttributesJSON contains invalid JSON",
                index=index,
                row_id=record_id,
                column="AttributesJSON",
            )


def _check_workers(out: _IssueCollector, workers: Sequence[Worker]) -> None:
    for index, worker in enumerate(workers):
        record_id = parse_text(worker.WorkerID)
        slots = worker.AvailableSlots
        if not isinstance(slots, (list, tuple)) or not all(_is_number(s) for s in slots):
            out.error(
                f"worker-slots:{record_id}",
                EntityKind.WORKERS,
                "AvailableSlots contains non-numeric entries",
                index=index,
                row_id=record_id,
                column="AvailableSlots",
            )
        if not _is_number(worker.MaxLoadPerPhase) or worker.MaxLoadPerPhase < 0:
            out.error(
                f"worker-maxload:{record_id}",
                EntityKind.WORKERS,
                "MaxLoadPerPhase must be >= 0",
                index=index,
                row_id=record_id,
                column="MaxLoadPerPhase",
            )


def _check_tasks(out: _IssueCollector, tasks: Sequence[Task]) -> None:
    for index, task in enumerate(tasks):
        record_id = parse_text(task.TaskID)
        if not _is_number(task.Duration) or task.Duration < 1:
            out.error(
                f"task-duration:{record_id}",
                EntityKind.TASKS,
                "Duration must be >= 1",
                index=index,
                row_id=record_id,
                column="Duration",
            )
        if not _is_number(task.MaxConcurrent) or task.MaxConcurrent < 1:
            out.error(
                f"task-concurrent:{record_id}",
                EntityKind.TASKS,
                "MaxConcurrent must be >= 1",
                index=index,
                row_id=record_id,
                column="MaxConcurrent",
            )


def _check_requested_tasks(
    out: _IssueCollector,
    clients: Sequence[Client],
    tasks: Sequence[Task],
) -> None:
    task_ids = {parse_text(task.TaskID) for task in tasks}
    for index, client in enumerate(clients):
        record_id = parse_text(client.ClientID)
        requested = parse_list(client.RequestedTaskIDs)
        unknown = _unique(task_id for task_id in requested if task_id not in task_ids)
        if unknown:
            out.error(
                f"client-unknown-tasks:{record_id}",
                EntityKind.CLIENTS,
                f"Unknown RequestedTaskIDs: {', '.join(unknown)}",
                index=index,
                row_id=record_id,
                column="RequestedTaskIDs",
            )


def _check_skill_coverage(
    out: _IssueCollector,
    workers: Sequence[Worker],
    tasks: Sequence[Task],
) -> None:
    offered = {skill for worker in workers for skill in _normalize_skills(worker.Skills)}
    required = _unique(
        skill for task in tasks for skill in _normalize_skills(task.RequiredSkills)
    )
    missing = [skill for skill in required if skill not in offered]
    if missing:
        out.error(
            "skill-coverage",
            EntityKind.TASKS,
            f"No workers possess required skills: {', '.join(missing)}",
        )


def validate(
    clients: Sequence[Client],
    workers: Sequence[Worker],
    tasks: Sequence[Task],
) -> ValidationSummary:
    """
    Validate the three collections against each other.

    Checks run in a fixed order so issue ids and ordering are reproducible:
    duplicate identifiers, client fields, worker fields, task fields,
    requested task references, skill coverage.

    Args:
        clients: Canonical client records.
        workers: Canonical worker records.
        tasks: Canonical task records.

    Returns:
        ValidationSummary with all issues in emission order.
    """
    out = _IssueCollector()

    _check_duplicates(
        out, EntityKind.CLIENTS, "client", "ClientID", [c.ClientID for c in clients]
    )
    _check_duplicates(
        out, EntityKind.WORKERS, "worker", "WorkerID", [w.WorkerID for w in workers]
    )
    _check_duplicates(
        out, EntityKind.TASKS, "task", "TaskID", [t.TaskID for t in tasks]
    )
    _check_clients(out, clients)
    _check_workers(out, workers)
    _check_tasks(out, tasks)
    _check_requested_tasks(out, clients, tasks)
    _check_skill_coverage(out, workers, tasks)

    summary = ValidationSummary(issues=out.issues)
    log.debug(
        "Validation complete",
        clients=len(clients),
        workers=len(workers),
        tasks=len(tasks),
        **summary.counts,
    )
    return summary
