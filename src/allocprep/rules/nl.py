"""
Natural-language shortcuts for rules and task search.

Plain regex matching, no external service. Recognized phrases:

- ``co-run T1 T2`` (also ``corun``, ``co run``) -> CoRunRule
- ``phase window T3 phases 1-3`` -> PhaseWindowRule
- ``duration > 2``, ``duration at most 4``, ``phase 3`` -> task filter
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from allocprep.normalization.coercion import expand_phase_range, parse_number
from allocprep.rules.models import CoRunRule, PhaseWindowRule, Rule
from allocprep.schemas.records import Task
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

_CO_RUN = re.compile(r"co[- ]?run\s+([a-z0-9_-]+)\s+([a-z0-9_-]+)")
_PHASE_WINDOW = re.compile(r"phase\s*window\s+([a-z0-9_-]+).*?(\d+\s*-\s*\d+)")
_DURATION_OP = re.compile(r"duration\s*(>=|=>|<=|=<|==|>|<|=)\s*(\d+)")
_DURATION_WORDS = re.compile(
    r"duration\s*(?:is\s*)?(more than|greater than|over|at least|less than|under|at most)\s*(\d+)"
)
_PHASE = re.compile(r"phase\s*(\d+)")

# Operator -> (lower bound offset, upper bound offset); None disables the bound
_BOUNDS: dict[str, tuple[int | None, int | None]] = {
    ">": (1, None),
    "more than": (1, None),
    "greater than": (1, None),
    "over": (1, None),
    ">=": (0, None),
    "=>": (0, None),
    "at least": (0, None),
    "<": (None, -1),
    "less than": (None, -1),
    "under": (None, -1),
    "<=": (None, 0),
    "=<": (None, 0),
    "at most": (None, 0),
    "=": (0, 0),
    "==": (0, 0),
}


def rules_from_text(text: str) -> list[Rule]:
    """
    Convert a sentence into rules.

    Args:
        text: Free text; matching is case-insensitive.

    Returns:
        Zero, one or two rules. Task ids are upper-cased.
    """
    lowered = str(text or "").lower()
    rules: list[Rule] = []

    co_run = _CO_RUN.search(lowered)
    if co_run:
        rules.append(
            CoRunRule(
                tasks=[co_run.group(1).upper(), co_run.group(2).upper()],
                description="NL: co-run",
            )
        )

    window = _PHASE_WINDOW.search(lowered)
    if window:
        rules.append(
            PhaseWindowRule(
                task_id=window.group(1).upper(),
                allowed_phases=expand_phase_range(window.group(2)),
                description="NL: phase window",
            )
        )

    log.debug("Parsed rules from text", text=text, rules=len(rules))
    return rules


@dataclass(frozen=True)
class TaskQuery:
    """Filter derived from a search sentence."""

    min_duration: int | None = None
    max_duration: int | None = None
    phase: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.min_duration is None and self.max_duration is None and self.phase is None

    def matches(self, task: Task) -> bool:
        """Whether a task satisfies every bound of the query."""
        if self.min_duration is not None or self.max_duration is not None:
            duration = parse_number(task.Duration)
            if duration is None:
                return False
            if self.min_duration is not None and duration < self.min_duration:
                return False
            if self.max_duration is not None and duration > self.max_duration:
                return False
        if self.phase is not None:
            phases = task.PreferredPhases if isinstance(task.PreferredPhases, list) else []
            if self.phase not in phases:
                return False
        return True


def parse_task_query(text: str) -> TaskQuery:
    """
    Parse a search sentence into a TaskQuery.

    Every comparison operator is honoured with integer thresholds:
    ``> n`` means at least ``n + 1`` and ``< n`` at most ``n - 1``.
    """
    lowered = str(text or "").lower()
    min_duration: int | None = None
    max_duration: int | None = None

    match = _DURATION_OP.search(lowered) or _DURATION_WORDS.search(lowered)
    if match:
        value = int(match.group(2))
        lower, upper = _BOUNDS[match.group(1)]
        if lower is not None:
            min_duration = value + lower
        if upper is not None:
            max_duration = value + upper

    phase_match = _PHASE.search(lowered)
    phase = int(phase_match.group(1)) if phase_match else None

    return TaskQuery(min_duration=min_duration, max_duration=max_duration, phase=phase)


def filter_tasks(tasks: Sequence[Task], text: str) -> list[Task]:
    """Tasks matching a search sentence; an unparsed sentence keeps all tasks."""
    query = parse_task_query(text)
    results = [task for task in tasks if query.matches(task)]
    log.debug("Filtered tasks", query=text, matched=len(results), total=len(tasks))
    return results
