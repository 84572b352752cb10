"""Emergency response protocol generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.models import AssessmentRecord, CareLevel, MedicationCompliance, RiskLevel
from clinical_engine.symbolic.rule_tables import escalation_ladder

RESPONSE_TIMES = {
    CareLevel.SPECIALIZED: "5 minutes",
    CareLevel.ADVANCED: "10 minutes",
}
DEFAULT_RESPONSE_TIME = "15 minutes"

FALL_RISK_ALERT = "Fall risk protocol activated - immediate response required"
MEDICATION_MONITORING_ALERT = "Medication monitoring protocol - daily compliance checks"


@dataclass(frozen=True)
class EmergencyProtocol:
    """Response-time target, escalation ladder and risk-driven alerts."""

    response_time: str
    escalation_levels: tuple[str, ...]
    critical_alerts: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "responseTime": self.response_time,
            "escalationLevels": list(self.escalation_levels),
            "criticalAlerts": list(self.critical_alerts),
        }


class EmergencyProtocolGenerator:
    """Derives the emergency protocol for a care tier and risk profile."""

    def generate(self, tier: CareLevel, risk_factors: AssessmentRecord) -> EmergencyProtocol:
        """Generate the protocol.

        Args:
            tier: Classified care tier
            risk_factors: Record supplying fall risk and medication compliance

        Returns:
            EmergencyProtocol for the tier
        """
        if not isinstance(tier, CareLevel):
            raise InvalidStateError(f"Unknown care tier {tier!r}")
        if not isinstance(risk_factors, AssessmentRecord):
            raise InvalidInputError(
                f"Expected AssessmentRecord, got {type(risk_factors).__name__}",
                field="record",
            )

        critical_alerts: list[str] = []
        if risk_factors.fall_risk == RiskLevel.HIGH:
            critical_alerts.append(FALL_RISK_ALERT)
        if risk_factors.medication_compliance == MedicationCompliance.POOR:
            critical_alerts.append(MEDICATION_MONITORING_ALERT)

        return EmergencyProtocol(
            response_time=RESPONSE_TIMES.get(tier, DEFAULT_RESPONSE_TIME),
            escalation_levels=escalation_ladder(tier),
            critical_alerts=tuple(critical_alerts),
        )


def generate_protocol(tier: CareLevel, risk_factors: AssessmentRecord) -> EmergencyProtocol:
    """Generate the emergency protocol for a tier and risk profile."""
    return EmergencyProtocolGenerator().generate(tier, risk_factors)
