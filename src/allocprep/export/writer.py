"""
Cleaned bundle export.

Writes one cleaned CSV per entity and a ``rules.json`` document. List and
mapping fields are written as JSON text so a re-upload parses them back
through the JSON-array branch of normalization.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd
import pandera.pandas as pa

from allocprep.rules.models import RulesBundle
from allocprep.schemas.cleaned import (
    CleanedClientSchema,
    CleanedTaskSchema,
    CleanedWorkerSchema,
)
from allocprep.schemas.issues import EntityKind
from allocprep.schemas.records import (
    CLIENT_FIELDS,
    TASK_FIELDS,
    WORKER_FIELDS,
    Client,
    InvalidJSON,
    Task,
    Worker,
)
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

EXPORT_FILES: dict[EntityKind, str] = {
    EntityKind.CLIENTS: "clients.cleaned.csv",
    EntityKind.WORKERS: "workers.cleaned.csv",
    EntityKind.TASKS: "tasks.cleaned.csv",
}
RULES_FILE = "rules.json"

_COLUMNS: dict[EntityKind, list[str]] = {
    EntityKind.CLIENTS: CLIENT_FIELDS,
    EntityKind.WORKERS: WORKER_FIELDS,
    EntityKind.TASKS: TASK_FIELDS,
}

_SCHEMAS: dict[EntityKind, type[pa.DataFrameModel]] = {
    EntityKind.CLIENTS: CleanedClientSchema,
    EntityKind.WORKERS: CleanedWorkerSchema,
    EntityKind.TASKS: CleanedTaskSchema,
}


@dataclass
class ExportBundle:
    """Everything the export writes."""

    clients: list[Client] = field(default_factory=list)
    workers: list[Worker] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    rules_bundle: RulesBundle = field(default_factory=RulesBundle)


def _cell(value: Any) -> Any:
    """Flatten one record value into a CSV cell."""
    if isinstance(value, InvalidJSON):
        return value.raw
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(list(value) if isinstance(value, tuple) else value, default=str)
    return value


def _attributes_cell(value: Any) -> str | None:
    """Encode AttributesJSON so any parsed JSON value reads back unchanged."""
    if value is None:
        return None
    if isinstance(value, InvalidJSON):
        return value.raw
    return json.dumps(value, default=str)


def records_to_frame(
    entity: EntityKind | str,
    records: Sequence[Client | Worker | Task],
) -> pd.DataFrame:
    """
    Build the cleaned table for one entity.

    Args:
        entity: Which collection the records belong to.
        records: Canonical records.

    Returns:
        DataFrame in canonical column order, checked against the cleaned schema.

    Raises:
        pandera.errors.SchemaError: If the table is structurally broken.
    """
    kind = EntityKind(entity)
    columns = _COLUMNS[kind]
    data = [
        {
            name: _attributes_cell(value) if name == "AttributesJSON" else _cell(value)
            for name, value in r.to_dict().items()
        }
        for r in records
    ]
    df = pd.DataFrame(data, columns=columns)
    return _SCHEMAS[kind].validate(df)


def write_bundle(bundle: ExportBundle, out_dir: Path) -> dict[str, Path]:
    """
    Write the cleaned CSVs and ``rules.json``.

    Args:
        bundle: Records, rules and priorities to export.
        out_dir: Target directory (created if missing).

    Returns:
        Mapping of file role (entity name or ``"rules"``) to written path.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    written: dict[str, Path] = {}

    collections = {
        EntityKind.CLIENTS: bundle.clients,
        EntityKind.WORKERS: bundle.workers,
        EntityKind.TASKS: bundle.tasks,
    }
    for kind, records in collections.items():
        path = out_dir / EXPORT_FILES[kind]
        records_to_frame(kind, records).to_csv(path, index=False, encoding="utf-8")
        written[kind.value] = path
        log.info("Wrote cleaned table", entity=kind.value, rows=len(records), path=str(path))

    rules_path = out_dir / RULES_FILE
    with rules_path.open("w", encoding="utf-8") as f:
        json.dump(bundle.rules_bundle.to_json_dict(), f, indent=2)
        f.write("\n")
    written["rules"] = rules_path
    log.info("Wrote rules bundle", rules=len(bundle.rules_bundle.rules), path=str(rules_path))

    return written


def load_rules_bundle(path: Path) -> RulesBundle:
    """
    Read a ``rules.json`` document.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the document does not match the model.
    """
    with Path(path).open(encoding="utf-8") as f:
        return RulesBundle.model_validate(json.load(f))
