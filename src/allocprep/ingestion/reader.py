"""
Spreadsheet reading.

Turns an uploaded CSV or XLSX file into ``{rows, headers}`` with every cell
left as raw as possible; all typing happens in normalization.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from allocprep.utils.logging import get_logger

log = get_logger(__name__)

CSV_SUFFIXES = {".csv", ".txt"}
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


@dataclass
class RawTable:
    """Rows keyed by header plus the header row in file order."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    source: Path | None = None


def _read_csv(path: Path, sep: str | None) -> pd.DataFrame:
    options: dict[str, Any] = {
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "sep": sep,
    }
    if sep is None:
        # Separator sniffing needs the python engine
        options["engine"] = "python"
    try:
        return pd.read_csv(path, encoding="utf-8-sig", **options)
    except UnicodeDecodeError:
        log.warning("UTF-8 decode failed, retrying with Latin-1", path=str(path))
        return pd.read_csv(path, encoding="latin-1", **options)


def _read_excel(path: Path, sheet: str | int) -> pd.DataFrame:
    df = pd.read_excel(path, sheet_name=sheet, engine="openpyxl", dtype=object)
    # Blank cells come back as NaN
    return df.astype(object).where(df.notna(), None)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def read_table(
    path: Path,
    *,
    sep: str | None = ",",
    sheet: str | int = 0,
) -> RawTable:
    """
    Read a CSV or XLSX file.

    Args:
        path: File to read.
        sep: CSV separator; ``None`` sniffs it from the file.
        sheet: Worksheet name or index for workbooks.

    Returns:
        RawTable with rows that are not entirely blank.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file type is not supported.
    """
    path = Path(path)
    if not path.exists():
        msg = f"File not found: {path}"
        raise FileNotFoundError(msg)

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        df = _read_csv(path, sep)
    elif suffix in EXCEL_SUFFIXES:
        df = _read_excel(path, sheet)
    else:
        msg = f"Unsupported file format: {suffix}"
        raise ValueError(msg)

    headers = [str(column) for column in df.columns]
    df.columns = headers
    rows = [
        row
        for row in df.to_dict(orient="records")
        if not all(_is_blank(value) for value in row.values())
    ]

    log.info("Read table", path=str(path), rows=len(rows), columns=len(headers))
    return RawTable(rows=rows, headers=headers, source=path)
