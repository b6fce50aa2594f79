"""Export of cleaned tables and the rules bundle."""

from allocprep.export.writer import (
    EXPORT_FILES,
    RULES_FILE,
    ExportBundle,
    load_rules_bundle,
    records_to_frame,
    write_bundle,
)

__all__ = [
    "EXPORT_FILES",
    "RULES_FILE",
    "ExportBundle",
    "load_rules_bundle",
    "records_to_frame",
    "write_bundle",
]
