"""Clinical & Compliance Decision Engine facade.

Composes the engine components into one evaluation:
1. Score the assessment record
2. Classify the care tier
3. Generate recommendations and alerts
4. Check drug interactions
5. Generate the emergency protocol
6. Adjust outcome targets
7. Aggregate domain compliance

Every step is a pure function of its inputs. The first error raised by any
step propagates unchanged and no partial result is returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import structlog

from clinical_engine.compliance.aggregator import (
    DEFAULT_THRESHOLDS,
    ComplianceAggregator,
    ComplianceSummary,
    ComplianceThresholds,
)
from clinical_engine.models import AssessmentRecord, CareLevel, ComplianceDomain
from clinical_engine.protocols.emergency import EmergencyProtocol, EmergencyProtocolGenerator
from clinical_engine.protocols.outcomes import OutcomeMetric, OutcomeMetricsAdjuster
from clinical_engine.scoring.care_level import CareLevelClassifier
from clinical_engine.scoring.complexity import ComplexityBreakdown, ComplexityScorer
from clinical_engine.symbolic.drug_interactions import DrugInteractionChecker
from clinical_engine.symbolic.rule_engine import Alert, RecommendationEngine
from clinical_engine.symbolic.rule_tables import RULES_VERSION, DrugInteractionRule

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Snapshot of one evaluation."""

    care_level: CareLevel
    complexity_score: int
    complexity_breakdown: ComplexityBreakdown
    recommendations: tuple[str, ...]
    alerts: tuple[Alert, ...]
    drug_interactions: tuple[DrugInteractionRule, ...]
    emergency_protocol: EmergencyProtocol
    outcome_metrics: Mapping[str, OutcomeMetric]
    compliance: ComplianceSummary
    rules_version: str = RULES_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON response shape."""
        return {
            "rulesVersion": self.rules_version,
            "careLevel": self.care_level.value,
            "complexityScore": self.complexity_score,
            "complexityBreakdown": self.complexity_breakdown.to_dict(),
            "recommendations": list(self.recommendations),
            "alerts": [alert.to_dict() for alert in self.alerts],
            "drugInteractions": [rule.to_dict() for rule in self.drug_interactions],
            "emergencyProtocol": self.emergency_protocol.to_dict(),
            "outcomeMetrics": {
                name: metric.to_dict() for name, metric in self.outcome_metrics.items()
            },
            "compliance": self.compliance.to_dict(),
        }


class DecisionEngine:
    """Evaluates assessment records and domain compliance.

    Holds only its (stateless) components, so one instance can serve
    concurrent callers.

    Example:
        ```python
        engine = DecisionEngine()
        result = engine.evaluate(record, domains)

        if result.care_level == CareLevel.SPECIALIZED:
            print(result.emergency_protocol.response_time)  # "5 minutes"
        ```
    """

    def __init__(
        self,
        scorer: ComplexityScorer | None = None,
        classifier: CareLevelClassifier | None = None,
        recommender: RecommendationEngine | None = None,
        interaction_checker: DrugInteractionChecker | None = None,
        protocol_generator: EmergencyProtocolGenerator | None = None,
        outcome_adjuster: OutcomeMetricsAdjuster | None = None,
    ) -> None:
        """Initialize the engine with default or injected components."""
        self.scorer = scorer or ComplexityScorer()
        self.classifier = classifier or CareLevelClassifier()
        self.recommender = recommender or RecommendationEngine()
        self.interaction_checker = interaction_checker or DrugInteractionChecker()
        self.protocol_generator = protocol_generator or EmergencyProtocolGenerator()
        self.outcome_adjuster = outcome_adjuster or OutcomeMetricsAdjuster()

    def evaluate(
        self,
        record: AssessmentRecord,
        domains: Iterable[ComplianceDomain],
        thresholds: ComplianceThresholds = DEFAULT_THRESHOLDS,
    ) -> ValidationResult:
        """Run a full evaluation.

        Args:
            record: Validated assessment record
            domains: Per-domain compliance records, at least one
            thresholds: Compliance status thresholds (default: 95 / 80)

        Returns:
            ValidationResult

        Raises:
            InvalidInputError: On malformed input or an empty domain list
            InvalidStateError: On an internal rule table inconsistency
        """
        # 1. Score
        breakdown = self.scorer.breakdown(record)

        # 2. Classify
        care_level = self.classifier.classify(breakdown.total)

        # 3. Recommendations and alerts
        recommendations, alerts = self.recommender.recommend(record, care_level)

        # 4. Drug interactions
        interactions = self.interaction_checker.check(record.medications)

        # 5. Emergency protocol
        protocol = self.protocol_generator.generate(care_level, record)

        # 6. Outcome targets
        outcome_metrics = self.outcome_adjuster.adjust(care_level)

        # 7. Compliance
        compliance = ComplianceAggregator(thresholds).aggregate(domains)

        result = ValidationResult(
            care_level=care_level,
            complexity_score=breakdown.total,
            complexity_breakdown=breakdown,
            recommendations=recommendations,
            alerts=alerts,
            drug_interactions=interactions,
            emergency_protocol=protocol,
            outcome_metrics=MappingProxyType(outcome_metrics),
            compliance=compliance,
        )

        logger.info(
            "evaluation_completed",
            care_level=care_level.value,
            complexity_score=breakdown.total,
            alerts=len(alerts),
            drug_interactions=len(interactions),
            compliance_status=compliance.status.value,
        )

        return result


_default_engine = DecisionEngine()


def evaluate(
    record: AssessmentRecord,
    domains: Iterable[ComplianceDomain],
    thresholds: ComplianceThresholds = DEFAULT_THRESHOLDS,
) -> ValidationResult:
    """Evaluate a record and domain list with the default engine."""
    return _default_engine.evaluate(record, domains, thresholds)
