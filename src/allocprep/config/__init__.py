"""
Configuration management with typed Pydantic models.

Provides YAML loading with environment interpolation and base-file
inheritance.
"""

from allocprep.config.loader import load_config
from allocprep.config.settings import (
    AppConfig,
    DataPathsConfig,
    IngestionConfig,
    LoggingConfig,
    OutputConfig,
)

__all__ = [
    "AppConfig",
    "DataPathsConfig",
    "IngestionConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
