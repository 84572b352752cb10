"""Care Complexity Scoring.

Converts an assessment record into an integer complexity score from five
independently weighted factors:
- Cognition (MoCA/MMSE score, lower is worse)
- Functional impact
- Fall risk
- Medication compliance
- Social isolation

Each factor contributes points from its own field only; factors never
combine. The total ranges from 0 to 15.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from clinical_engine.errors import InvalidInputError
from clinical_engine.models import (
    AssessmentRecord,
    FunctionalImpact,
    MedicationCompliance,
    RiskLevel,
)

logger = structlog.get_logger(__name__)

MAX_COMPLEXITY_SCORE = 15


@dataclass(frozen=True)
class ComplexityBreakdown:
    """Per-factor points behind a complexity score."""

    cognition: int
    functional_impact: int
    fall_risk: int
    medication_compliance: int
    social_isolation: int

    @property
    def total(self) -> int:
        """Sum of all factor points."""
        return (
            self.cognition
            + self.functional_impact
            + self.fall_risk
            + self.medication_compliance
            + self.social_isolation
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cognition": self.cognition,
            "functionalImpact": self.functional_impact,
            "fallRisk": self.fall_risk,
            "medicationCompliance": self.medication_compliance,
            "socialIsolation": self.social_isolation,
            "total": self.total,
        }


class ComplexityScorer:
    """Scores assessment records for care-tier classification.

    Example:
        ```python
        scorer = ComplexityScorer()
        score = scorer.score(record)  # 0..15
        print(scorer.breakdown(record).to_dict())
        ```
    """

    # (exclusive upper bound, points); first matching bucket wins
    COGNITIVE_BUCKETS: tuple[tuple[int, int], ...] = (
        (12, 4),
        (18, 3),
        (24, 2),
        (26, 1),
    )

    FUNCTIONAL_IMPACT_POINTS: Mapping[FunctionalImpact, int] = {
        FunctionalImpact.SEVERE: 4,
        FunctionalImpact.MODERATE: 3,
        FunctionalImpact.MILD: 2,
        FunctionalImpact.NONE: 0,
    }

    FALL_RISK_POINTS: Mapping[RiskLevel, int] = {
        RiskLevel.HIGH: 3,
        RiskLevel.MODERATE: 2,
        RiskLevel.LOW: 0,
    }

    MEDICATION_COMPLIANCE_POINTS: Mapping[MedicationCompliance, int] = {
        MedicationCompliance.POOR: 2,
        MedicationCompliance.FAIR: 1,
        MedicationCompliance.GOOD: 0,
    }

    SOCIAL_ISOLATION_POINTS: Mapping[RiskLevel, int] = {
        RiskLevel.HIGH: 2,
        RiskLevel.MODERATE: 1,
        RiskLevel.LOW: 0,
    }

    def score(self, record: AssessmentRecord) -> int:
        """Compute the complexity score for a record.

        Args:
            record: Validated assessment record

        Returns:
            Integer complexity score, 0..15
        """
        return self.breakdown(record).total

    def breakdown(self, record: AssessmentRecord) -> ComplexityBreakdown:
        """Compute per-factor points for a record.

        Raises:
            InvalidInputError: If the record is not an AssessmentRecord or
                carries a value outside the known buckets.
        """
        if not isinstance(record, AssessmentRecord):
            raise InvalidInputError(
                f"Expected AssessmentRecord, got {type(record).__name__}", field="record"
            )

        result = ComplexityBreakdown(
            cognition=self._cognition_points(record.cognitive_score),
            functional_impact=self._lookup(
                self.FUNCTIONAL_IMPACT_POINTS, record.functional_impact, "functional_impact"
            ),
            fall_risk=self._lookup(self.FALL_RISK_POINTS, record.fall_risk, "fall_risk"),
            medication_compliance=self._lookup(
                self.MEDICATION_COMPLIANCE_POINTS,
                record.medication_compliance,
                "medication_compliance",
            ),
            social_isolation=self._lookup(
                self.SOCIAL_ISOLATION_POINTS, record.social_isolation, "social_isolation"
            ),
        )

        logger.debug("complexity_scored", **result.to_dict())

        return result

    def _cognition_points(self, cognitive_score: Any) -> int:
        if isinstance(cognitive_score, bool) or not isinstance(cognitive_score, int):
            raise InvalidInputError(
                f"cognitive_score must be an integer, got {cognitive_score!r}",
                field="cognitive_score",
            )
        for upper_bound, points in self.COGNITIVE_BUCKETS:
            if cognitive_score < upper_bound:
                return points
        return 0

    @staticmethod
    def _lookup(table: Mapping[Any, int], value: Any, field_name: str) -> int:
        try:
            return table[value]
        except (KeyError, TypeError):
            raise InvalidInputError(
                f"Invalid value {value!r} for '{field_name}'", field=field_name
            ) from None
