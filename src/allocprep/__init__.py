"""
Allocprep: spreadsheet ingestion and rule authoring for resource allocation.

This package reconciles uploaded client, worker and task tables into
canonical records, validates them against each other, and exports a cleaned
bundle together with user-authored allocation rules and priority weights.
"""

from importlib.metadata import version

__version__ = version("allocprep")

__all__ = ["__version__"]
