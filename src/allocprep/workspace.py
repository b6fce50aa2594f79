"""
Workspace state.

The single stateful component: it owns the loaded collections, rules and
priorities, and recomputes the validation summary whenever records change.
Normalization and validation themselves stay pure.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from allocprep.config.settings import AppConfig
from allocprep.export.writer import ExportBundle, load_rules_bundle
from allocprep.ingestion.reader import read_table
from allocprep.normalization.records import ColumnMapResult, map_and_normalize
from allocprep.rules import authoring
from allocprep.rules.models import PrioritiesConfig, Rule, RulesBundle
from allocprep.schemas.issues import EntityKind, ValidationIssue, ValidationSummary
from allocprep.schemas.records import Client, Task, Worker
from allocprep.utils.logging import get_logger, log_context
from allocprep.validation.core import validate

log = get_logger(__name__)


class Workspace:
    """
    Holds one editing session.

    Every mutation of a record collection triggers a full revalidation
    unless ``auto_validate`` is off, in which case the caller batches edits
    and calls ``revalidate()`` itself.
    """

    def __init__(
        self,
        *,
        auto_validate: bool = True,
        priorities: PrioritiesConfig | None = None,
    ) -> None:
        """
        Initialize an empty workspace.

        Args:
            auto_validate: Revalidate after every record mutation.
            priorities: Starting priority weights.
        """
        self.auto_validate = auto_validate
        self.clients: list[Client] = []
        self.workers: list[Worker] = []
        self.tasks: list[Task] = []
        self.rules: list[Rule] = []
        self.priorities = priorities or PrioritiesConfig()
        self.validation = ValidationSummary()
        self.ingest_results: dict[EntityKind, ColumnMapResult[Any]] = {}

    @classmethod
    def from_config(cls, config: AppConfig) -> "Workspace":
        """
        Load every configured input file into a new workspace.

        Raises:
            FileNotFoundError: If a configured file is missing.
            ValueError: If a file type is not supported.
        """
        workspace = cls(auto_validate=False, priorities=config.priorities)
        paths = config.data_paths

        for kind in paths.configured_entities():
            workspace.load_file(
                kind,
                paths.resolve(kind.value),
                sep=config.ingestion.csv_separator,
                sheet=config.ingestion.sheet,
            )

        if paths.rules is not None:
            bundle = load_rules_bundle(paths.resolve("rules"))
            workspace.rules = list(bundle.rules)
            workspace.priorities = bundle.priorities
            log.info("Loaded rules bundle", rules=len(workspace.rules))

        workspace.auto_validate = True
        workspace.revalidate()
        return workspace

    # Loading

    def load(
        self,
        entity: EntityKind | str,
        rows: list[dict[str, Any]],
        headers: list[str],
    ) -> ColumnMapResult[Any]:
        """
        Normalize an upload and replace the matching collection.

        Returns:
            The normalization result (records, missing-id issues, header map).
        """
        kind = EntityKind(entity)
        with log_context(entity=kind.value):
            result = map_and_normalize(kind, rows, headers)
            self.ingest_results[kind] = result
            self._replace(kind, result.mapped)
        return result

    def load_file(
        self,
        entity: EntityKind | str,
        path: Path,
        *,
        sep: str | None = ",",
        sheet: str | int = 0,
    ) -> ColumnMapResult[Any]:
        """Read a CSV/XLSX file and load it as ``entity``."""
        table = read_table(path, sep=sep, sheet=sheet)
        return self.load(entity, table.rows, table.headers)

    def set_clients(self, records: Sequence[Client]) -> None:
        self._replace(EntityKind.CLIENTS, records)

    def set_workers(self, records: Sequence[Worker]) -> None:
        self._replace(EntityKind.WORKERS, records)

    def set_tasks(self, records: Sequence[Task]) -> None:
        self._replace(EntityKind.TASKS, records)

    def _replace(self, kind: EntityKind, records: Sequence[Any]) -> None:
        setattr(self, kind.value, list(records))
        self._changed()

    # Editing

    def update_client(self, index: int, **fields: Any) -> bool:
        """Edit fields of one client; see ``_update``."""
        return self._update(self.clients, index, fields)

    def update_worker(self, index: int, **fields: Any) -> bool:
        """Edit fields of one worker; see ``_update``."""
        return self._update(self.workers, index, fields)

    def update_task(self, index: int, **fields: Any) -> bool:
        """Edit fields of one task; see ``_update``."""
        return self._update(self.tasks, index, fields)

    def _update(self, records: list[Any], index: int, fields: dict[str, Any]) -> bool:
        """
        Assign raw field values to one record.

        Values are stored as given, without normalization, so the validator
        sees exactly what the user typed.

        Returns:
            False if ``index`` is out of range (nothing changes).

        Raises:
            KeyError: If a field name is not part of the record.
        """
        if not 0 <= index < len(records):
            return False
        record = records[index]
        unknown = [name for name in fields if name not in record.__dataclass_fields__]
        if unknown:
            msg = f"Unknown field(s) for {type(record).__name__}: {', '.join(unknown)}"
            raise KeyError(msg)
        for name, value in fields.items():
            setattr(record, name, value)
        self._changed()
        return True

    # Validation

    def _changed(self) -> None:
        if self.auto_validate:
            self.revalidate()

    def revalidate(self) -> ValidationSummary:
        """Recompute the validation summary from the current records."""
        self.validation = validate(self.clients, self.workers, self.tasks)
        log.debug("Revalidated workspace", **self.validation.counts)
        return self.validation

    @property
    def combined_validation(self) -> ValidationSummary:
        """Ingestion issues followed by validator issues, as one summary."""
        return ValidationSummary(issues=[*self.ingestion_issues, *self.validation.issues])

    @property
    def ingestion_issues(self) -> list[ValidationIssue]:
        """Missing-identifier issues from the latest upload of each entity."""
        return [
            issue
            for kind in EntityKind
            if kind in self.ingest_results
            for issue in self.ingest_results[kind].issues
        ]

    # Rules and priorities

    def add_rule(self, rule: Rule) -> None:
        self.rules = authoring.add_rule(self.rules, rule)

    def remove_rule(self, rule_id: str) -> None:
        self.rules = authoring.remove_rule(self.rules, rule_id)

    def reorder_rules(self, ordered_ids: Sequence[str]) -> None:
        self.rules = authoring.reorder_rules(self.rules, ordered_ids)

    def move_rule(self, index: int, offset: int) -> None:
        self.rules = authoring.move_rule(self.rules, index, offset)

    def set_priorities(self, priorities: PrioritiesConfig) -> None:
        self.priorities = priorities

    # Export

    def export_bundle(self) -> ExportBundle:
        """Snapshot of the records, rules and priorities for export."""
        return ExportBundle(
            clients=list(self.clients),
            workers=list(self.workers),
            tasks=list(self.tasks),
            rules_bundle=RulesBundle(rules=list(self.rules), priorities=self.priorities),
        )
