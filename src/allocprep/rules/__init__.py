"""
Allocation rules, priority weights and natural-language shortcuts.

Rules are a closed set of Pydantic models discriminated by ``type``.
"""

from allocprep.rules.authoring import (
    PRESETS,
    add_rule,
    apply_preset,
    co_run_rule,
    equalize,
    load_limit_rule,
    move_rule,
    phase_window_rule,
    remove_rule,
    reorder_rules,
    set_weight,
)
from allocprep.rules.models import (
    RULE_TYPES,
    CoRunRule,
    LoadLimitRule,
    PatternMatchRule,
    PhaseWindowRule,
    PrecedenceOverrideRule,
    PrioritiesConfig,
    PriorityWeights,
    Rule,
    RulesBundle,
    SlotRestrictionRule,
    describe_rule,
    parse_rule,
)
from allocprep.rules.nl import TaskQuery, filter_tasks, parse_task_query, rules_from_text

__all__ = [
    "PRESETS",
    "RULE_TYPES",
    "CoRunRule",
    "LoadLimitRule",
    "PatternMatchRule",
    "PhaseWindowRule",
    "PrecedenceOverrideRule",
    "PrioritiesConfig",
    "PriorityWeights",
    "Rule",
    "RulesBundle",
    "SlotRestrictionRule",
    "TaskQuery",
    "add_rule",
    "apply_preset",
    "co_run_rule",
    "describe_rule",
    "equalize",
    "filter_tasks",
    "load_limit_rule",
    "move_rule",
    "parse_rule",
    "parse_task_query",
    "phase_window_rule",
    "remove_rule",
    "reorder_rules",
    "rules_from_text",
    "set_weight",
]
