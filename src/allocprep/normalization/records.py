"""
Row normalization into canonical records.

Each upload is reconciled against the entity's alias table, then every row
is coerced into a canonical record. Rows are never dropped: a blank
identifier yields an error issue and a record with an empty identifier.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from allocprep.normalization.coercion import (
    parse_json_field,
    parse_list,
    parse_number,
    parse_optional_text,
    parse_phases,
    parse_scalar,
    parse_text,
)
from allocprep.normalization.columns import (
    HEADER_ALIASES,
    map_row,
    reconcile_headers,
    unmapped_headers,
)
from allocprep.schemas.issues import EntityKind, IssueLevel, ValidationIssue
from allocprep.schemas.records import Client, Task, Worker
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R", Client, Worker, Task)


def normalize_client(row: dict[str, Any]) -> Client:
    """Build a Client from a canonical-keyed row."""
    return Client(
        ClientID=parse_text(row.get("ClientID")),
        ClientName=parse_text(row.get("ClientName")),
        PriorityLevel=_number_or_zero(row.get("PriorityLevel")),
        RequestedTaskIDs=parse_list(row.get("RequestedTaskIDs")),
        GroupTag=parse_optional_text(row.get("GroupTag")),
        AttributesJSON=parse_json_field(row.get("AttributesJSON")),
    )


def normalize_worker(row: dict[str, Any]) -> Worker:
    """Build a Worker from a canonical-keyed row."""
    return Worker(
        WorkerID=parse_text(row.get("WorkerID")),
        WorkerName=parse_text(row.get("WorkerName")),
        Skills=parse_list(row.get("Skills")),
        AvailableSlots=parse_phases(row.get("AvailableSlots")),
        MaxLoadPerPhase=_number_or_zero(row.get("MaxLoadPerPhase")),
        WorkerGroup=parse_optional_text(row.get("WorkerGroup")),
        QualificationLevel=parse_scalar(row.get("QualificationLevel")),
    )


def normalize_task(row: dict[str, Any]) -> Task:
    """Build a Task from a canonical-keyed row."""
    return Task(
        TaskID=parse_text(row.get("TaskID")),
        TaskName=parse_text(row.get("TaskName")),
        Category=parse_optional_text(row.get("Category")),
        Duration=_number_or_zero(row.get("Duration")),
        RequiredSkills=parse_list(row.get("RequiredSkills")),
        PreferredPhases=parse_phases(row.get("PreferredPhases")),
        MaxConcurrent=_number_or_zero(row.get("MaxConcurrent")),
    )


def _number_or_zero(value: Any) -> int | float:
    number = parse_number(value)
    return 0 if number is None else number


@dataclass(frozen=True)
class EntitySpec:
    """How one entity kind is reconciled and normalized."""

    kind: EntityKind
    id_field: str
    normalize: Callable[[dict[str, Any]], Any]

    @property
    def aliases(self) -> dict[str, list[str]]:
        return HEADER_ALIASES[self.kind]


ENTITY_SPECS: dict[EntityKind, EntitySpec] = {
    EntityKind.CLIENTS: EntitySpec(EntityKind.CLIENTS, "ClientID", normalize_client),
    EntityKind.WORKERS: EntitySpec(EntityKind.WORKERS, "WorkerID", normalize_worker),
    EntityKind.TASKS: EntitySpec(EntityKind.TASKS, "TaskID", normalize_task),
}


@dataclass
class ColumnMapResult(Generic[R]):
    """Outcome of reconciling and normalizing one upload."""

    mapped: list[R] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    header_map: dict[str, str] = field(default_factory=dict)
    entity: EntityKind | None = None

    @property
    def unmapped_headers(self) -> list[str]:
        """Uploaded headers kept under their own name."""
        if self.entity is None:
            return []
        return unmapped_headers(self.header_map, HEADER_ALIASES[self.entity])


def map_and_normalize(
    entity: EntityKind | str,
    rows: list[dict[str, Any]],
    headers: list[str],
) -> ColumnMapResult[Any]:
    """
    Reconcile headers and normalize every row of one upload.

    Args:
        entity: Which collection the upload holds.
        rows: Row mappings keyed by the uploaded headers.
        headers: Uploaded header row.

    Returns:
        ColumnMapResult with one record per input row, missing-identifier
        issues, and the header map.
    """
    entity_spec = ENTITY_SPECS[EntityKind(entity)]
    header_map = reconcile_headers(headers, entity_spec.aliases)

    result: ColumnMapResult[Any] = ColumnMapResult(header_map=header_map, entity=entity_spec.kind)
    for index, row in enumerate(rows):
        record = entity_spec.normalize(map_row(row, header_map))
        if not getattr(record, entity_spec.id_field):
            result.issues.append(
                ValidationIssue(
                    id=f"{entity_spec.kind.value}:{index}:{entity_spec.id_field}",
                    entity=entity_spec.kind,
                    level=IssueLevel.ERROR,
                    message=f"Missing {entity_spec.id_field}",
                    column=entity_spec.id_field,
                )
            )
        result.mapped.append(record)

    log.debug(
        "Normalized upload",
        entity=entity_spec.kind.value,
        rows=len(result.mapped),
        missing_ids=len(result.issues),
        unmapped=result.unmapped_headers,
    )
    return result


def map_and_normalize_clients(
    rows: list[dict[str, Any]], headers: list[str]
) -> ColumnMapResult[Client]:
    """Normalize a clients upload."""
    return map_and_normalize(EntityKind.CLIENTS, rows, headers)


def map_and_normalize_workers(
    rows: list[dict[str, Any]], headers: list[str]
) -> ColumnMapResult[Worker]:
    """Normalize a workers upload."""
    return map_and_normalize(EntityKind.WORKERS, rows, headers)


def map_and_normalize_tasks(
    rows: list[dict[str, Any]], headers: list[str]
) -> ColumnMapResult[Task]:
    """Normalize a tasks upload."""
    return map_and_normalize(EntityKind.TASKS, rows, headers)
