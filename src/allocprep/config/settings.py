"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from allocprep.rules.models import PrioritiesConfig
from allocprep.schemas.issues import EntityKind


class DataPathsConfig(BaseModel):
    """Input file paths.

    All paths are relative to data_root. Use resolve() to get absolute paths.
    Any of the three entity files may be omitted; a missing collection is
    validated as empty.
    """

    model_config = ConfigDict(frozen=True)

    data_root: Path = Field(
        default=Path("./data"), description="Root directory for all input files"
    )
    clients: Path | None = Field(default=None, description="Clients CSV/XLSX")
    workers: Path | None = Field(default=None, description="Workers CSV/XLSX")
    tasks: Path | None = Field(default=None, description="Tasks CSV/XLSX")
    rules: Path | None = Field(
        default=None, description="Existing rules.json to start from"
    )

    def resolve(self, path_attr: str) -> Path:
        """Resolve a relative path against data_root."""
        rel_path = getattr(self, path_attr)
        if rel_path is None:
            msg = f"Path '{path_attr}' is not configured"
            raise ValueError(msg)
        return self.data_root / rel_path

    def configured_entities(self) -> list[EntityKind]:
        """Entities with a configured input file, in canonical order."""
        return [kind for kind in EntityKind if getattr(self, kind.value) is not None]


class IngestionConfig(BaseModel):
    """How uploaded files are read."""

    model_config = ConfigDict(frozen=True)

    csv_separator: str | None = Field(
        default=",", description="CSV separator; null sniffs it per file"
    )
    sheet: str | int = Field(default=0, description="Worksheet name or index for XLSX")


class OutputConfig(BaseModel):
    """Output paths configuration.

    Exports land in ./output/{project}/ unless output_root is changed.
    """

    model_config = ConfigDict(frozen=True)

    output_root: Path = Field(
        default=Path("./output"), description="Root directory for all outputs"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return level


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'spring-intake')")

    data_paths: DataPathsConfig = Field(default_factory=DataPathsConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    priorities: PrioritiesConfig = Field(default_factory=PrioritiesConfig)

    @property
    def export_dir(self) -> Path:
        """Directory for the cleaned bundle."""
        return self.output.output_root / self.project
