"""Domain model for the decision engine.

Enumerations and the validated assessment record that every engine component
consumes. Records are immutable and are validated on construction, so a
record that exists is a record the scoring rules can trust.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, TypeVar

from clinical_engine.errors import InvalidInputError

COGNITIVE_SCORE_MIN = 0
COGNITIVE_SCORE_MAX = 30


class FunctionalImpact(str, Enum):
    """Functional impact from dementia screening."""

    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class RiskLevel(str, Enum):
    """Three-step risk scale used for fall risk and social isolation."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class MedicationCompliance(str, Enum):
    """Observed medication compliance."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class CareLevel(str, Enum):
    """Care tiers, ordered Simple < Routine < Advanced < Specialized."""

    SIMPLE = "Simple"
    ROUTINE = "Routine"
    ADVANCED = "Advanced"
    SPECIALIZED = "Specialized"

    @property
    def rank(self) -> int:
        return _CARE_LEVEL_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CareLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CareLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CareLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CareLevel):
            return NotImplemented
        return self.rank >= other.rank


_CARE_LEVEL_RANK = {
    CareLevel.SIMPLE: 0,
    CareLevel.ROUTINE: 1,
    CareLevel.ADVANCED: 2,
    CareLevel.SPECIALIZED: 3,
}


class AlertSeverity(str, Enum):
    """Severity of a clinical alert."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class InteractionSeverity(str, Enum):
    """Severity levels for drug interactions."""

    MINOR = "minor"  # Monitor, usually safe
    MODERATE = "moderate"  # May need dose adjustment
    MAJOR = "major"  # Avoid combination if possible

    @property
    def rank(self) -> int:
        return list(InteractionSeverity).index(self)


class Trend(str, Enum):
    """Direction of an outcome metric."""

    STABLE = "stable"
    IMPROVING = "improving"
    DECLINING = "declining"


class ComplianceLevel(str, Enum):
    """Compliance level reported for one assessment domain."""

    FULL = "full"
    PARTIAL = "partial"
    MISSING = "missing"


class ComplianceStatus(str, Enum):
    """Overall compliance verdict."""

    COMPLIANT = "compliant"
    PARTIALLY_COMPLIANT = "partially-compliant"
    NON_COMPLIANT = "non-compliant"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Convert a member or its string value to ``enum_cls``.

    Raises:
        InvalidInputError: If the value is not a known member.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise InvalidInputError(
        f"Invalid value {value!r} for '{field_name}' (expected one of: {allowed})",
        field=field_name,
    )


def coerce_strings(values: Iterable[Any] | None, field_name: str) -> tuple[str, ...]:
    """Validate a sequence of strings and freeze it into a tuple."""
    if values is None:
        return ()
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidInputError(f"'{field_name}' must be a list of strings", field=field_name)

    items = tuple(values)
    for item in items:
        if not isinstance(item, str):
            raise InvalidInputError(
                f"'{field_name}' entries must be strings, got {type(item).__name__}",
                field=field_name,
            )
    return items


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class AssessmentRecord:
    """A validated cognitive and risk assessment for one patient.

    Enum fields accept either the enum member or its string value.
    """

    cognitive_score: int
    functional_impact: FunctionalImpact
    fall_risk: RiskLevel
    medication_compliance: MedicationCompliance
    social_isolation: RiskLevel
    medications: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not _is_int(self.cognitive_score):
            raise InvalidInputError(
                f"cognitive_score must be an integer, got {self.cognitive_score!r}",
                field="cognitive_score",
            )
        if not COGNITIVE_SCORE_MIN <= self.cognitive_score <= COGNITIVE_SCORE_MAX:
            raise InvalidInputError(
                f"cognitive_score {self.cognitive_score} outside "
                f"{COGNITIVE_SCORE_MIN}..{COGNITIVE_SCORE_MAX}",
                field="cognitive_score",
            )

        object.__setattr__(
            self, "functional_impact",
            coerce_enum(FunctionalImpact, self.functional_impact, "functional_impact"),
        )
        object.__setattr__(self, "fall_risk", coerce_enum(RiskLevel, self.fall_risk, "fall_risk"))
        object.__setattr__(
            self, "medication_compliance",
            coerce_enum(MedicationCompliance, self.medication_compliance, "medication_compliance"),
        )
        object.__setattr__(
            self, "social_isolation",
            coerce_enum(RiskLevel, self.social_isolation, "social_isolation"),
        )
        object.__setattr__(self, "medications", coerce_strings(self.medications, "medications"))


@dataclass(frozen=True)
class ComplianceDomain:
    """Compliance data for one assessment domain, supplied by the caller."""

    id: str
    name: str
    completeness: int
    compliance_level: ComplianceLevel
    implemented: bool = True
    gaps: tuple[str, ...] = field(default_factory=tuple)
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for attr in ("id", "name"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not value:
                raise InvalidInputError(f"Domain {attr} must be a non-empty string", field=attr)
        if not _is_int(self.completeness) or not 0 <= self.completeness <= 100:
            raise InvalidInputError(
                f"Domain '{self.id}' completeness must be an integer 0..100, "
                f"got {self.completeness!r}",
                field="completeness",
            )
        if not isinstance(self.implemented, bool):
            raise InvalidInputError(
                f"Domain '{self.id}' implemented flag must be a boolean",
                field="implemented",
            )

        object.__setattr__(
            self, "compliance_level",
            coerce_enum(ComplianceLevel, self.compliance_level, "compliance_level"),
        )
        object.__setattr__(self, "gaps", coerce_strings(self.gaps, "gaps"))
        object.__setattr__(
            self, "recommendations", coerce_strings(self.recommendations, "recommendations")
        )
