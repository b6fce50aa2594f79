"""
Rule authoring helpers.

Builders derive starter rules from the loaded records; list operations keep
rule order and ``priority`` numbering in sync. All functions return new
lists or models and leave their inputs untouched.
"""

from collections.abc import Sequence

from allocprep.rules.models import (
    CoRunRule,
    LoadLimitRule,
    PhaseWindowRule,
    PrioritiesConfig,
    PriorityWeights,
    ProfileName,
    Rule,
)
from allocprep.schemas.records import Task, Worker
from allocprep.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_WORKER_GROUP = "default"

PRESETS: dict[str, PriorityWeights] = {
    "maximizeFulfillment": PriorityWeights(
        client_priority_weight=0.4,
        requested_tasks_fulfillment_weight=0.4,
        fairness_weight=0.1,
        workload_balance_weight=0.05,
        duration_weight=0.025,
        skill_match_weight=0.025,
    ),
    "fairDistribution": PriorityWeights(
        client_priority_weight=0.2,
        requested_tasks_fulfillment_weight=0.25,
        fairness_weight=0.3,
        workload_balance_weight=0.15,
        duration_weight=0.05,
        skill_match_weight=0.05,
    ),
    "minimizeWorkload": PriorityWeights(
        client_priority_weight=0.2,
        requested_tasks_fulfillment_weight=0.25,
        fairness_weight=0.15,
        workload_balance_weight=0.3,
        duration_weight=0.05,
        skill_match_weight=0.05,
    ),
}


# Builders


def co_run_rule(tasks: Sequence[Task]) -> CoRunRule:
    """Co-run rule over the first two tasks."""
    return CoRunRule(tasks=[t.TaskID for t in tasks[:2]], description="Sample co-run")


def load_limit_rule(workers: Sequence[Worker], max_slots: int = 2) -> LoadLimitRule:
    """Load limit for the first worker group found, else ``"default"``."""
    group = next((w.WorkerGroup for w in workers if w.WorkerGroup), DEFAULT_WORKER_GROUP)
    return LoadLimitRule(
        worker_group=group,
        max_slots_per_phase=max_slots,
        description=f"Limit {group} to {max_slots}/phase",
    )


def phase_window_rule(tasks: Sequence[Task]) -> PhaseWindowRule | None:
    """Phase window from the first task's preferred phases; None without tasks."""
    if not tasks:
        return None
    task = tasks[0]
    return PhaseWindowRule(
        task_id=task.TaskID,
        allowed_phases=list(task.PreferredPhases),
        description=f"Phase window for {task.TaskID}",
    )


# Rule list operations


def add_rule(rules: Sequence[Rule], rule: Rule) -> list[Rule]:
    """Append a rule."""
    return [*rules, rule]


def remove_rule(rules: Sequence[Rule], rule_id: str) -> list[Rule]:
    """Drop the rule with ``rule_id``; unknown ids are ignored."""
    return [r for r in rules if r.id != rule_id]


def reorder_rules(rules: Sequence[Rule], ordered_ids: Sequence[str]) -> list[Rule]:
    """
    Reorder rules and renumber their priority from 1.

    Args:
        rules: Current rules.
        ordered_ids: Rule ids in the desired order.

    Returns:
        Rules listed in ``ordered_ids`` with ``priority`` set to their position.

    Raises:
        KeyError: If an id does not match any rule.
    """
    by_id = {r.id: r for r in rules}
    unknown = [rule_id for rule_id in ordered_ids if rule_id not in by_id]
    if unknown:
        msg = f"Unknown rule id(s): {', '.join(unknown)}"
        raise KeyError(msg)
    return [
        by_id[rule_id].model_copy(update={"priority": position})
        for position, rule_id in enumerate(ordered_ids, start=1)
    ]


def move_rule(rules: Sequence[Rule], index: int, offset: int) -> list[Rule]:
    """
    Swap the rule at ``index`` with its neighbour ``offset`` places away.

    Moves past either end leave the order unchanged (priorities are still
    renumbered).
    """
    ids = [r.id for r in rules]
    target = index + offset
    if 0 <= index < len(ids) and 0 <= target < len(ids):
        ids[index], ids[target] = ids[target], ids[index]
    return reorder_rules(rules, ids)


# Priority weights


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def set_weight(priorities: PrioritiesConfig, name: str, value: float) -> PrioritiesConfig:
    """
    Set one weight, clamped to [0, 1]; the profile becomes ``custom``.

    Raises:
        KeyError: If ``name`` is not a weight field.
    """
    if name not in PriorityWeights.model_fields:
        msg = f"Unknown weight '{name}'. Available: {', '.join(PriorityWeights.model_fields)}"
        raise KeyError(msg)
    weights = priorities.weights.model_copy(update={name: _clamp(value)})
    return priorities.model_copy(update={"profile": "custom", "weights": weights})


def apply_preset(priorities: PrioritiesConfig, name: ProfileName) -> PrioritiesConfig:
    """
    Replace the weights with a named preset.

    Raises:
        KeyError: If no preset has that name.
    """
    if name not in PRESETS:
        msg = f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}"
        raise KeyError(msg)
    log.debug("Applying priority preset", preset=name)
    return priorities.model_copy(update={"profile": name, "weights": PRESETS[name]})


def equalize(priorities: PrioritiesConfig) -> PrioritiesConfig:
    """Give every weight the same share, rounded to two decimals."""
    names = list(PriorityWeights.model_fields)
    share = round(1 / len(names), 2)
    weights = PriorityWeights(**{name: share for name in names})
    return priorities.model_copy(update={"profile": "custom", "weights": weights})
