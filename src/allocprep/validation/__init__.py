"""Cross-entity validation module."""

from allocprep.validation.core import validate
from allocprep.validation.reporter import ConsoleReporter

__all__ = ["ConsoleReporter", "validate"]
