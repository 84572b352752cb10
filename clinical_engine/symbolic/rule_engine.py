"""Clinical Recommendation Rule Engine.

Implements rule-based reasoning for:
- Medication adherence interventions
- Cognitive impairment interventions
- Fall prevention interventions
- Care-tier specific monitoring requirements

Trigger rules are evaluated in their declared order and every matching rule
fires. The care-tier block is appended last. Output order is part of the
contract: callers render and audit recommendations in exactly this order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import structlog

from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.models import (
    AlertSeverity,
    AssessmentRecord,
    CareLevel,
    MedicationCompliance,
    RiskLevel,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Alert:
    """A severity-tagged clinical alert."""

    severity: AlertSeverity
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"severity": self.severity.value, "message": self.message}


@dataclass(frozen=True)
class RuleCondition:
    """A condition on one assessment field that must hold for a rule to fire."""

    field: str  # AssessmentRecord attribute (e.g., "fall_risk", "cognitive_score")
    operator: str  # Comparison operator (eq, lt)
    value: Any  # Value to compare against

    def evaluate(self, record: AssessmentRecord) -> bool:
        """Evaluate condition against a record.

        Args:
            record: Assessment record to check

        Returns:
            True if condition is met
        """
        if not hasattr(record, self.field):
            raise InvalidStateError(f"Rule references unknown field '{self.field}'")
        actual_value = getattr(record, self.field)

        # Apply operator
        if self.operator == "eq":
            return actual_value == self.value
        elif self.operator == "lt":
            return actual_value < self.value
        else:
            raise InvalidStateError(f"Unknown rule operator '{self.operator}'")


@dataclass(frozen=True)
class Rule:
    """A trigger rule emitting recommendations and an optional alert."""

    id: str
    name: str
    conditions: tuple[RuleCondition, ...]
    recommendations: tuple[str, ...]
    alert: Alert | None = None
    category: str = "general"

    def evaluate(self, record: AssessmentRecord) -> bool:
        """Check if all conditions are met."""
        return all(condition.evaluate(record) for condition in self.conditions)


@dataclass(frozen=True)
class RecommendationResult:
    """Result of recommendation evaluation."""

    recommendations: tuple[str, ...]
    alerts: tuple[Alert, ...]
    fired_rules: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_TRIGGER_RULES: tuple[Rule, ...] = (
    Rule(
        id="REC001",
        name="Poor Medication Compliance",
        conditions=(
            RuleCondition("medication_compliance", "eq", MedicationCompliance.POOR),
        ),
        recommendations=(
            "Implement medication adherence monitoring system",
            "Consider pill organizer or automated dispensing",
        ),
        alert=Alert(AlertSeverity.WARNING, "High medication non-compliance risk"),
        category="medication",
    ),
    Rule(
        id="REC002",
        name="Significant Cognitive Impairment",
        conditions=(
            RuleCondition("cognitive_score", "lt", 18),
        ),
        recommendations=(
            "Initiate cognitive stimulation therapy",
            "Implement memory aids and environmental modifications",
        ),
        alert=Alert(AlertSeverity.CRITICAL, "Significant cognitive impairment detected"),
        category="cognition",
    ),
    Rule(
        id="REC003",
        name="High Fall Risk",
        conditions=(
            RuleCondition("fall_risk", "eq", RiskLevel.HIGH),
        ),
        recommendations=(
            "Implement fall prevention protocols",
            "Environmental safety assessment required",
        ),
        alert=Alert(AlertSeverity.CRITICAL, "High fall risk - immediate intervention required"),
        category="fall_risk",
    ),
)

TIER_RECOMMENDATIONS: Mapping[CareLevel, tuple[str, ...]] = MappingProxyType({
    CareLevel.SPECIALIZED: (
        "24/7 monitoring protocols required",
        "Specialist consultation within 48 hours",
        "Advanced life support equipment on standby",
    ),
    CareLevel.ADVANCED: (
        "Enhanced monitoring protocols",
        "Weekly physician review",
        "Specialized nursing care",
    ),
    CareLevel.ROUTINE: (
        "Standard monitoring protocols",
        "Bi-weekly assessment reviews",
    ),
    CareLevel.SIMPLE: (
        "Basic monitoring protocols",
        "Monthly assessment reviews",
    ),
})


class RecommendationEngine:
    """Engine for generating clinical recommendations and alerts.

    Example:
        ```python
        engine = RecommendationEngine()
        recommendations, alerts = engine.recommend(record, CareLevel.ROUTINE)
        for alert in alerts:
            print(alert.severity.value, alert.message)
        ```
    """

    def __init__(
        self,
        rules: Iterable[Rule] | None = None,
        tier_recommendations: Mapping[CareLevel, tuple[str, ...]] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            rules: Trigger rules in evaluation order (default: built-in rules)
            tier_recommendations: Per-tier recommendation blocks
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_TRIGGER_RULES
        self.tier_recommendations = (
            tier_recommendations if tier_recommendations is not None else TIER_RECOMMENDATIONS
        )

    def evaluate(self, record: AssessmentRecord, tier: CareLevel) -> RecommendationResult:
        """Evaluate trigger rules and the tier block for a record.

        Args:
            record: Validated assessment record
            tier: Classified care tier

        Returns:
            RecommendationResult with ordered recommendations and alerts
        """
        if not isinstance(record, AssessmentRecord):
            raise InvalidInputError(
                f"Expected AssessmentRecord, got {type(record).__name__}", field="record"
            )

        tier_block = (
            self.tier_recommendations.get(tier) if isinstance(tier, CareLevel) else None
        )
        if tier_block is None:
            raise InvalidStateError(f"No recommendation block for care tier {tier!r}")

        recommendations: list[str] = []
        alerts: list[Alert] = []
        fired: list[str] = []

        for rule in self.rules:
            if not rule.evaluate(record):
                continue
            fired.append(rule.id)
            recommendations.extend(rule.recommendations)
            if rule.alert is not None:
                alerts.append(rule.alert)
            logger.debug("rule_fired", rule_id=rule.id, rule_name=rule.name)

        recommendations.extend(tier_block)

        return RecommendationResult(
            recommendations=tuple(recommendations),
            alerts=tuple(alerts),
            fired_rules=tuple(fired),
        )

    def recommend(
        self,
        record: AssessmentRecord,
        tier: CareLevel,
    ) -> tuple[tuple[str, ...], tuple[Alert, ...]]:
        """Get (recommendations, alerts) for a record and care tier."""
        result = self.evaluate(record, tier)
        return result.recommendations, result.alerts
