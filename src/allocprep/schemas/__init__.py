"""
Data contracts: canonical records, validation issues and export schemas.

Records and issues are plain dataclasses passed between pure functions;
the cleaned export tables are described with Pandera.
"""

from allocprep.schemas.cleaned import (
    CleanedClientSchema,
    CleanedTaskSchema,
    CleanedWorkerSchema,
)
from allocprep.schemas.issues import (
    EntityKind,
    IssueLevel,
    ValidationIssue,
    ValidationSummary,
)
from allocprep.schemas.records import (
    CLIENT_FIELDS,
    TASK_FIELDS,
    WORKER_FIELDS,
    Client,
    InvalidJSON,
    Task,
    Worker,
    is_invalid_json,
)

__all__ = [
    "CLIENT_FIELDS",
    "TASK_FIELDS",
    "WORKER_FIELDS",
    "CleanedClientSchema",
    "CleanedTaskSchema",
    "CleanedWorkerSchema",
    "Client",
    "EntityKind",
    "InvalidJSON",
    "IssueLevel",
    "Task",
    "ValidationIssue",
    "ValidationSummary",
    "Worker",
    "is_invalid_json",
]
