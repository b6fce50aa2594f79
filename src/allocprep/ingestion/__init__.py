"""File ingestion: CSV/XLSX to raw rows and headers."""

from allocprep.ingestion.reader import RawTable, read_table

__all__ = ["RawTable", "read_table"]
