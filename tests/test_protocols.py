"""Tests for emergency protocols and outcome targets."""

import pytest

from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.models import AssessmentRecord, CareLevel, Trend
from clinical_engine.protocols import (
    EmergencyProtocolGenerator,
    OutcomeMetricsAdjuster,
    adjust_outcome_metrics,
    generate_protocol,
)
from clinical_engine.protocols.emergency import FALL_RISK_ALERT, MEDICATION_MONITORING_ALERT


def make_record(**overrides):
    values = {
        "cognitive_score": 28,
        "functional_impact": "none",
        "fall_risk": "low",
        "medication_compliance": "good",
        "social_isolation": "low",
    }
    values.update(overrides)
    return AssessmentRecord(**values)


class TestEmergencyProtocolGenerator:
    """Tests for emergency protocol generation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.generator = EmergencyProtocolGenerator()

    @pytest.mark.parametrize("tier,response_time", [
        (CareLevel.SPECIALIZED, "5 minutes"),
        (CareLevel.ADVANCED, "10 minutes"),
        (CareLevel.ROUTINE, "15 minutes"),
        (CareLevel.SIMPLE, "15 minutes"),
    ])
    def test_response_times(self, tier, response_time):
        """Response time depends on tier."""
        assert self.generator.generate(tier, make_record()).response_time == response_time

    def test_specialized_ladder(self):
        """Specialized tier gets the four-level ladder."""
        protocol = self.generator.generate(CareLevel.SPECIALIZED, make_record())
        assert protocol.escalation_levels == (
            "Level 1: Primary nurse response (0-5 min)",
            "Level 2: Charge nurse notification (5-10 min)",
            "Level 3: Physician consultation (10-15 min)",
            "Level 4: Emergency services activation (15+ min)",
        )

    def test_standard_ladder(self):
        """Other tiers get the three-level ladder."""
        protocol = self.generator.generate(CareLevel.ADVANCED, make_record())
        assert protocol.escalation_levels == (
            "Level 1: Primary nurse response (0-10 min)",
            "Level 2: Supervisor notification (10-20 min)",
            "Level 3: Physician consultation (20-30 min)",
        )

    @pytest.mark.parametrize("fall_risk,compliance,expected", [
        ("low", "good", ()),
        ("high", "good", (FALL_RISK_ALERT,)),
        ("moderate", "poor", (MEDICATION_MONITORING_ALERT,)),
        ("high", "poor", (FALL_RISK_ALERT, MEDICATION_MONITORING_ALERT)),
    ])
    def test_critical_alerts(self, fall_risk, compliance, expected):
        """Risk flags add alerts in fall risk, medication order."""
        record = make_record(fall_risk=fall_risk, medication_compliance=compliance)
        assert generate_protocol(CareLevel.ROUTINE, record).critical_alerts == expected

    def test_to_dict(self):
        """Protocol serializes with camelCase keys."""
        data = self.generator.generate(CareLevel.SIMPLE, make_record()).to_dict()
        assert set(data) == {"responseTime", "escalationLevels", "criticalAlerts"}

    def test_unknown_tier(self):
        """Unknown tiers are an internal error."""
        with pytest.raises(InvalidStateError):
            self.generator.generate("Urgent", make_record())

    def test_rejects_non_record(self):
        """Risk factors must come from a validated record."""
        with pytest.raises(InvalidInputError):
            self.generator.generate(CareLevel.SIMPLE, {"fallRisk": "high"})


class TestOutcomeMetricsAdjuster:
    """Tests for outcome target adjustment."""

    def setup_method(self):
        """Set up test fixtures."""
        self.adjuster = OutcomeMetricsAdjuster()

    def targets(self, tier):
        return {name: m.target for name, m in self.adjuster.adjust(tier).items()}

    def test_baseline_for_routine_and_advanced(self):
        """Middle tiers keep the baseline targets."""
        expected = {
            "patientSatisfaction": 85,
            "functionalImprovement": 70,
            "medicationAdherence": 90,
            "emergencyVisits": "<2/month",
            "qualityOfLife": 75,
        }
        assert self.targets(CareLevel.ROUTINE) == expected
        assert self.targets(CareLevel.ADVANCED) == expected

    def test_specialized_overrides(self):
        """Specialized tier overwrites three targets."""
        targets = self.targets(CareLevel.SPECIALIZED)
        assert targets["patientSatisfaction"] == 90
        assert targets["functionalImprovement"] == 60
        assert targets["medicationAdherence"] == 95
        assert targets["qualityOfLife"] == 75

    def test_simple_override(self):
        """Simple tier raises the functional improvement target."""
        targets = self.targets(CareLevel.SIMPLE)
        assert targets["functionalImprovement"] == 85
        assert targets["patientSatisfaction"] == 85

    def test_adjustment_does_not_leak_between_calls(self):
        """Adjusting one tier never changes another tier's result."""
        adjust_outcome_metrics(CareLevel.SPECIALIZED)
        assert self.targets(CareLevel.ROUTINE)["functionalImprovement"] == 70

    def test_metric_fields(self):
        """Metrics start at zero with their baseline trend."""
        metrics = self.adjuster.adjust(CareLevel.ROUTINE)
        assert metrics["functionalImprovement"].current == 0
        assert metrics["functionalImprovement"].trend == Trend.IMPROVING
        assert metrics["patientSatisfaction"].to_dict() == {
            "target": 85, "current": 0, "trend": "stable",
        }

    def test_unknown_tier(self):
        """Unknown tiers are an internal error."""
        with pytest.raises(InvalidStateError):
            self.adjuster.adjust("Intensive")
