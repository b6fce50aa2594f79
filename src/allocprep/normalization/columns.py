"""
Header reconciliation.

Maps uploaded column headers onto canonical field names using per-entity
alias tables. Unknown headers are kept under their own (trimmed) name so
unmapped columns stay visible downstream.
"""

from typing import Any

from allocprep.schemas.issues import EntityKind
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

# Canonical field -> accepted header spellings (compared case-insensitively).
# The canonical name itself is always accepted. Alias sets must be disjoint
# within one table; the first matching canonical field wins.
CLIENT_HEADER_ALIASES: dict[str, list[str]] = {
    "ClientID": ["clientid", "client_id", "id"],
    "ClientName": ["clientname", "client_name", "name"],
    "PriorityLevel": ["priority", "priority_level"],
    "RequestedTaskIDs": ["requestedtasks", "requested_task_ids", "taskids", "tasks"],
    "GroupTag": ["group", "group_tag", "clientgroup"],
    "AttributesJSON": ["attributes", "meta", "attributes_json", "metadata"],
}

WORKER_HEADER_ALIASES: dict[str, list[str]] = {
    "WorkerID": ["workerid", "worker_id", "id"],
    "WorkerName": ["workername", "worker_name", "name"],
    "Skills": ["skill", "tags"],
    "AvailableSlots": ["availableslots", "slots", "availability"],
    "MaxLoadPerPhase": ["maxloadperphase", "max_load", "max_load_per_phase"],
    "WorkerGroup": ["group", "group_tag", "workergroup"],
    "QualificationLevel": ["qualification", "qualification_level", "level"],
}

TASK_HEADER_ALIASES: dict[str, list[str]] = {
    "TaskID": ["taskid", "task_id", "id"],
    "TaskName": ["taskname", "task_name", "name"],
    "Category": ["category", "type"],
    "Duration": ["duration", "phases"],
    "RequiredSkills": ["requiredskills", "skills", "req_skills"],
    "PreferredPhases": ["preferredphases", "phases_pref", "preferred"],
    "MaxConcurrent": ["maxconcurrent", "concurrency", "max_parallel"],
}

HEADER_ALIASES: dict[EntityKind, dict[str, list[str]]] = {
    EntityKind.CLIENTS: CLIENT_HEADER_ALIASES,
    EntityKind.WORKERS: WORKER_HEADER_ALIASES,
    EntityKind.TASKS: TASK_HEADER_ALIASES,
}


def reconcile_headers(
    headers: list[str],
    aliases: dict[str, list[str]],
) -> dict[str, str]:
    """
    Map raw headers to canonical field names.

    Args:
        headers: Header row as uploaded.
        aliases: Canonical field -> accepted spellings.

    Returns:
        Trimmed original header -> canonical field name. Headers without a
        match map to themselves.
    """
    lookup: dict[str, str] = {}
    for canonical, spellings in aliases.items():
        for spelling in [canonical, *spellings]:
            lookup.setdefault(spelling.lower(), canonical)

    header_map: dict[str, str] = {}
    for raw in headers:
        key = str(raw).strip()
        header_map[key] = lookup.get(key.lower(), key)

    unmapped = [k for k, v in header_map.items() if v not in aliases]
    if unmapped:
        log.debug("Headers without canonical match", unmapped=unmapped)

    return header_map


def map_row(row: dict[str, Any], header_map: dict[str, str]) -> dict[str, Any]:
    """
    Rename the keys of one row using a header map.

    Keys missing from the map are kept under their trimmed name. When two
    headers map to the same field the later column wins.
    """
    mapped: dict[str, Any] = {}
    for key, value in row.items():
        name = str(key).strip()
        mapped[header_map.get(name, name)] = value
    return mapped


def unmapped_headers(
    header_map: dict[str, str],
    aliases: dict[str, list[str]],
) -> list[str]:
    """Headers that did not resolve to any canonical field."""
    return [original for original, canonical in header_map.items() if canonical not in aliases]


def missing_fields(
    header_map: dict[str, str],
    aliases: dict[str, list[str]],
) -> list[str]:
    """
    Canonical fields that no uploaded header maps to.

    Args:
        header_map: Result of ``reconcile_headers``.
        aliases: Alias table the map was built from.

    Returns:
        Canonical field names in table order.
    """
    present = set(header_map.values())
    return [field for field in aliases if field not in present]
