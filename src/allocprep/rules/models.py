"""
Typed rule and priority models using Pydantic.

Rules form a closed set of variants discriminated by their ``type`` tag.
Field names are snake_case in Python and camelCase in exported documents.
"""

import re
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


def new_rule_id() -> str:
    """Random identifier for a newly authored rule."""
    return uuid4().hex


class RuleBase(BaseModel):
    """Fields shared by every rule variant."""

    model_config = _MODEL_CONFIG

    id: str = Field(default_factory=new_rule_id)
    description: str | None = None
    priority: int | None = Field(default=None, description="Precedence order, 1 first")


class CoRunRule(RuleBase):
    """Tasks that must run together."""

    type: Literal["coRun"] = "coRun"
    tasks: list[str] = Field(description="TaskIDs")


class TargetGroup(BaseModel):
    """Group of clients or workers a rule applies to."""

    model_config = _MODEL_CONFIG

    kind: Literal["client", "worker"]
    tag: str


class SlotRestrictionRule(RuleBase):
    """Members of a group must share a minimum number of slots."""

    type: Literal["slotRestriction"] = "slotRestriction"
    target_group: TargetGroup
    min_common_slots: int = Field(ge=0)


class LoadLimitRule(RuleBase):
    """Cap the slots per phase for a worker group."""

    type: Literal["loadLimit"] = "loadLimit"
    worker_group: str
    max_slots_per_phase: int = Field(ge=0)


class PhaseWindowRule(RuleBase):
    """Restrict a task to a set of phases."""

    type: Literal["phaseWindow"] = "phaseWindow"
    task_id: str
    allowed_phases: list[int | float] = Field(default_factory=list)


class PatternMatchRule(RuleBase):
    """Regex-driven rule rendered from a template."""

    type: Literal["patternMatch"] = "patternMatch"
    regex: str
    template: str
    params: dict[str, Any] | None = None

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Ensure the pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            msg = f"Invalid regex {v!r}: {e}"
            raise ValueError(msg) from e
        return v


class SpecificPriority(BaseModel):
    """Priority override for one entity id."""

    model_config = _MODEL_CONFIG

    id: str
    priority: int


class PrecedenceOverrideRule(RuleBase):
    """Override global or per-entity precedence."""

    type: Literal["precedenceOverride"] = "precedenceOverride"
    global_priority: int | None = None
    specific_priorities: list[SpecificPriority] | None = None


Rule = Annotated[
    CoRunRule
    | SlotRestrictionRule
    | LoadLimitRule
    | PhaseWindowRule
    | PatternMatchRule
    | PrecedenceOverrideRule,
    Field(discriminator="type"),
]

RULE_TYPES: tuple[str, ...] = (
    "coRun",
    "slotRestriction",
    "loadLimit",
    "phaseWindow",
    "patternMatch",
    "precedenceOverride",
)

_RULE_ADAPTER: TypeAdapter[Rule] = TypeAdapter(Rule)


def parse_rule(data: dict[str, Any]) -> Rule:
    """
    Build a rule from a plain mapping (camelCase or snake_case keys).

    Raises:
        pydantic.ValidationError: If the type tag is unknown or fields are invalid.
    """
    return _RULE_ADAPTER.validate_python(data)


def _phases_text(phases: list[int | float]) -> str:
    return ", ".join(str(p) for p in phases) or "none"


def describe_rule(rule: Rule) -> str:
    """One-line human readable rendering of a rule."""
    if isinstance(rule, CoRunRule):
        return f"Co-run tasks {', '.join(rule.tasks) or '(none)'}"
    if isinstance(rule, SlotRestrictionRule):
        group = rule.target_group
        return (
            f"{group.kind.capitalize()} group '{group.tag}' needs "
            f">= {rule.min_common_slots} common slots"
        )
    if isinstance(rule, LoadLimitRule):
        return f"Worker group '{rule.worker_group}' limited to {rule.max_slots_per_phase} slots/phase"
    if isinstance(rule, PhaseWindowRule):
        return f"Task {rule.task_id} allowed in phases {_phases_text(rule.allowed_phases)}"
    if isinstance(rule, PatternMatchRule):
        return f"Pattern /{rule.regex}/ -> {rule.template}"
    if isinstance(rule, PrecedenceOverrideRule):
        overrides = len(rule.specific_priorities or [])
        return f"Precedence override (global={rule.global_priority}, {overrides} specific)"
    msg = f"Unknown rule variant: {type(rule).__name__}"
    raise TypeError(msg)


# Priority weights

ProfileName = Literal["custom", "maximizeFulfillment", "fairDistribution", "minimizeWorkload"]

_Weight = Annotated[float, Field(ge=0.0, le=1.0)]


class PriorityWeights(BaseModel):
    """Relative importance of allocation criteria, each in [0, 1]."""

    model_config = _MODEL_CONFIG

    client_priority_weight: _Weight = 0.3
    requested_tasks_fulfillment_weight: _Weight = 0.3
    fairness_weight: _Weight = 0.2
    workload_balance_weight: _Weight = 0.1
    duration_weight: _Weight = 0.05
    skill_match_weight: _Weight = 0.05


class PrioritiesConfig(BaseModel):
    """Weight profile exported alongside the rules."""

    model_config = _MODEL_CONFIG

    profile: ProfileName = "custom"
    weights: PriorityWeights = Field(default_factory=PriorityWeights)
    ranking: list[str] | None = Field(default=None, description="Ordered criteria names")
    pairwise_matrix: list[list[float]] | None = Field(
        default=None, description="Optional AHP comparison matrix"
    )

    @field_validator("pairwise_matrix")
    @classmethod
    def validate_square(cls, v: list[list[float]] | None) -> list[list[float]] | None:
        """Ensure the comparison matrix is square."""
        if v is not None and any(len(row) != len(v) for row in v):
            msg = "pairwiseMatrix must be square"
            raise ValueError(msg)
        return v


class RulesBundle(BaseModel):
    """The exported ``rules.json`` document."""

    model_config = _MODEL_CONFIG

    rules: list[Rule] = Field(default_factory=list)
    priorities: PrioritiesConfig = Field(default_factory=PrioritiesConfig)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
