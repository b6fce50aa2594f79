"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: project (and usually data.clients/workers/tasks).
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from allocprep.config.settings import (
    AppConfig,
    DataPathsConfig,
    IngestionConfig,
    LoggingConfig,
    OutputConfig,
)
from allocprep.rules.models import PrioritiesConfig


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _optional_path(value: Any) -> Path | None:
    return Path(value) if value else None


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> AppConfig:
    """
    Load application configuration from YAML file(s).

    Layout::

        project: spring-intake
        data:
          root: ./data
          clients: clients.csv
          workers: workers.xlsx
          tasks: tasks.csv
          rules: rules.json        # optional
        ingestion:
          csv_separator: ","
        output:
          root: ./output
        logging:
          level: INFO
        priorities:
          profile: fairDistribution

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated AppConfig instance.

    Raises:
        ValueError: If required keys are missing.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        is_self = potential_base.resolve() == config_path.resolve()
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and not is_self
            else {}
        )

    merged = _deep_merge(base_data, load_yaml(config_path))

    project = merged.get("project")
    if not project:
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    data_data = merged.get("data", {})
    data_paths = DataPathsConfig(
        data_root=Path(data_data.get("root", "./data")),
        clients=_optional_path(data_data.get("clients")),
        workers=_optional_path(data_data.get("workers")),
        tasks=_optional_path(data_data.get("tasks")),
        rules=_optional_path(data_data.get("rules")),
    )

    ingestion_data = merged.get("ingestion", {})
    ingestion = IngestionConfig(
        csv_separator=ingestion_data.get("csv_separator", ","),
        sheet=ingestion_data.get("sheet", 0),
    )

    output_data = merged.get("output", {})
    output = OutputConfig(output_root=Path(output_data.get("root", "./output")))

    logging_data = merged.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=bool(logging_data.get("json", False)),
    )

    # Priorities use the exported (camelCase) key names
    priorities = PrioritiesConfig.model_validate(merged.get("priorities", {}))

    return AppConfig(
        project=str(project),
        data_paths=data_paths,
        ingestion=ingestion,
        output=output,
        logging=logging_config,
        priorities=priorities,
    )
