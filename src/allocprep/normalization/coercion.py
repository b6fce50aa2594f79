"""
Cell value coercions used by the record normalizers.

None of these raise on malformed input: unparsable values degrade to a safe
default (empty string, ``None``, empty list, or the ``InvalidJSON`` marker).
"""

import json
import math
import re
from typing import Any

from allocprep.schemas.records import InvalidJSON

_DELIMITERS = re.compile(r"[,;|]")
_PHASE_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def _is_missing(value: Any) -> bool:
    """None or a float NaN (blank spreadsheet cell)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _as_number(value: float) -> int | float:
    """Collapse integral floats so ``"3"`` and ``3.0`` both become ``3``."""
    return int(value) if value.is_integer() else value


def parse_text(value: Any) -> str:
    """Stringify and trim; missing values become ``""``."""
    if _is_missing(value):
        return ""
    return str(value).strip()


def parse_optional_text(value: Any) -> str | None:
    """Like ``parse_text`` but blank becomes ``None``."""
    text = parse_text(value)
    return text or None


def parse_number(value: Any) -> int | float | None:
    """
    Parse a finite number.

    Returns:
        The number, or ``None`` for blank, unparsable or non-finite input.
    """
    if _is_missing(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return _as_number(number)


def _clean_items(items: list[Any]) -> list[str]:
    return [text for text in (parse_text(item) for item in items) if text]


def _load_json_array(text: str) -> list[Any] | None:
    if not (text.startswith("[") and text.endswith("]")):
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None


def parse_list(value: Any) -> list[str]:
    """
    Parse a free-form list of tags or identifiers.

    Precedence: native list, bracketed JSON array, then a split on
    comma, semicolon or pipe. Items are trimmed; blanks are dropped.
    """
    if isinstance(value, (list, tuple)):
        return _clean_items(list(value))
    if _is_missing(value):
        return []
    text = str(value).strip()
    items = _load_json_array(text)
    if items is not None:
        return _clean_items(items)
    return _clean_items(_DELIMITERS.split(text))


def expand_phase_range(text: str) -> list[int]:
    """
    Expand an inclusive ``"<start>-<end>"`` phase range.

    Returns:
        ``[start..end]``, or ``[]`` when the text is not a range or
        ``end < start``.
    """
    match = _PHASE_RANGE.match(text.strip())
    if not match:
        return []
    start, end = int(match.group(1)), int(match.group(2))
    if end < start:
        return []
    return list(range(start, end + 1))


def _numbers(items: list[Any]) -> list[int | float]:
    return [n for n in (parse_number(item) for item in items) if n is not None]


def parse_phases(value: Any) -> list[int | float]:
    """
    Parse a list of phase numbers.

    Precedence is significant: native list, bracketed JSON array, a single
    ``start-end`` range, then a delimiter split. Non-finite entries are
    dropped at every stage.
    """
    if isinstance(value, (list, tuple)):
        return _numbers(list(value))
    if _is_missing(value):
        return []
    text = str(value).strip()
    items = _load_json_array(text)
    if items is not None:
        return _numbers(items)
    phases = expand_phase_range(text)
    if phases:
        return phases
    return _numbers(_DELIMITERS.split(text))


def parse_json_field(value: Any) -> Any:
    """
    Parse a free-form JSON cell.

    Returns:
        ``None`` when blank, the value itself when already structured, the
        decoded JSON otherwise, or ``InvalidJSON`` when the text is not JSON.
    """
    if _is_missing(value):
        return None
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return InvalidJSON(raw=text)


def parse_scalar(value: Any) -> str | int | float | None:
    """Keep numbers, trim strings, blank becomes ``None``."""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    return parse_optional_text(value)
