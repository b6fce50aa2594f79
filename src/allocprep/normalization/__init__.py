"""
Header reconciliation and row normalization.

Turns loosely structured uploaded rows into canonical Client, Worker and
Task records without ever raising on malformed cell values.
"""

from allocprep.normalization.coercion import (
    expand_phase_range,
    parse_json_field,
    parse_list,
    parse_number,
    parse_phases,
)
from allocprep.normalization.columns import (
    CLIENT_HEADER_ALIASES,
    HEADER_ALIASES,
    TASK_HEADER_ALIASES,
    WORKER_HEADER_ALIASES,
    map_row,
    missing_fields,
    reconcile_headers,
)
from allocprep.normalization.records import (
    ColumnMapResult,
    map_and_normalize,
    map_and_normalize_clients,
    map_and_normalize_tasks,
    map_and_normalize_workers,
    normalize_client,
    normalize_task,
    normalize_worker,
)

__all__ = [
    "CLIENT_HEADER_ALIASES",
    "HEADER_ALIASES",
    "TASK_HEADER_ALIASES",
    "WORKER_HEADER_ALIASES",
    "ColumnMapResult",
    "expand_phase_range",
    "map_and_normalize",
    "map_and_normalize_clients",
    "map_and_normalize_tasks",
    "map_and_normalize_workers",
    "map_row",
    "missing_fields",
    "normalize_client",
    "normalize_task",
    "normalize_worker",
    "parse_json_field",
    "parse_list",
    "parse_number",
    "parse_phases",
    "reconcile_headers",
]
