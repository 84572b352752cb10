"""Tests for the rule tables and rule-driven components."""

import pytest

from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.models import (
    AlertSeverity,
    AssessmentRecord,
    CareLevel,
    InteractionSeverity,
    RiskLevel,
)
from clinical_engine.symbolic import (
    RULES_VERSION,
    DrugInteractionChecker,
    DrugInteractionRule,
    RecommendationEngine,
    Rule,
    RuleCondition,
    baseline_outcome_metrics,
    check_interactions,
    domain_catalog,
    escalation_ladder,
    highest_severity,
    interaction_rules,
)
from clinical_engine.symbolic.rule_tables import get_domain


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


class TestRuleTables:
    """Tests for the static rule tables."""

    def test_rules_version_present(self):
        """Rule tables carry a version."""
        assert RULES_VERSION

    def test_interaction_table_order(self):
        """Interaction rules keep their declared order."""
        rules = interaction_rules()
        assert [r.drugs for r in rules] == [
            ("warfarin", "aspirin"),
            ("metformin", "contrast"),
            ("digoxin", "furosemide"),
        ]
        assert [r.severity for r in rules] == [
            InteractionSeverity.MAJOR,
            InteractionSeverity.MAJOR,
            InteractionSeverity.MODERATE,
        ]

    def test_interaction_rule_requires_two_drugs(self):
        """A rule naming a single drug is a table inconsistency."""
        with pytest.raises(InvalidStateError):
            DrugInteractionRule(
                drugs=("warfarin", "Warfarin"),
                severity=InteractionSeverity.MINOR,
                description="",
                recommendation="",
            )

    def test_escalation_ladders(self):
        """Specialized gets four levels, everything else three."""
        assert len(escalation_ladder(CareLevel.SPECIALIZED)) == 4
        for tier in (CareLevel.ADVANCED, CareLevel.ROUTINE, CareLevel.SIMPLE):
            ladder = escalation_ladder(tier)
            assert len(ladder) == 3
            assert ladder[0] == "Level 1: Primary nurse response (0-10 min)"

    def test_baseline_metrics_are_copies(self):
        """Callers cannot modify the baseline table."""
        first = baseline_outcome_metrics()
        first["patientSatisfaction"] = (0, None)
        assert baseline_outcome_metrics()["patientSatisfaction"][0] == 85

    def test_domain_catalog(self):
        """Catalog lists the nine assessment domains."""
        catalog = domain_catalog()
        assert len(catalog) == 9
        assert len({d.id for d in catalog}) == 9
        medication = get_domain("medication-management")
        assert "Drug Interaction Checking System" in medication.required_components
        assert get_domain("unknown") is None


class TestDrugInteractionChecker:
    """Tests for drug interaction checking."""

    def setup_method(self):
        """Set up test fixtures."""
        self.checker = DrugInteractionChecker()

    def test_warfarin_aspirin_detected(self):
        """Dosage text around drug names still matches."""
        matches = self.checker.check(["Warfarin 5mg", "Aspirin 81mg"])
        assert len(matches) == 1
        assert matches[0].drugs == ("warfarin", "aspirin")
        assert matches[0].severity == InteractionSeverity.MAJOR

    def test_single_drug_no_match(self):
        """One half of a pair is not an interaction."""
        assert self.checker.check(["Metformin"]) == ()

    def test_empty_list(self):
        """Empty medication list returns no matches."""
        assert self.checker.check([]) == ()

    def test_all_matches_in_table_order(self):
        """Multiple matches are returned in table order."""
        meds = ["FUROSEMIDE 40mg", "digoxin", "aspirin", "warfarin", "metformin"]
        matches = self.checker.check(meds)
        assert [m.drugs[0] for m in matches] == ["warfarin", "digoxin"]

    def test_single_entry_can_satisfy_both_drugs(self):
        """Each rule drug only needs some entry containing it."""
        matches = self.checker.check(["warfarin/aspirin combination pack"])
        assert len(matches) == 1

    def test_non_string_entry_rejected(self):
        """Medication entries must be strings."""
        with pytest.raises(InvalidInputError):
            self.checker.check(["warfarin", None])

    def test_custom_table(self):
        """Checker accepts an injected table."""
        rule = DrugInteractionRule(
            drugs=("lisinopril", "spironolactone"),
            severity=InteractionSeverity.MODERATE,
            description="Hyperkalemia risk",
            recommendation="Monitor potassium",
        )
        checker = DrugInteractionChecker([rule])
        assert checker.check(["Lisinopril 10mg", "Spironolactone 25mg"]) == (rule,)

    def test_highest_severity(self):
        """Worst severity is reported."""
        matches = check_interactions(["digoxin", "furosemide", "warfarin", "aspirin"])
        assert highest_severity(matches) == InteractionSeverity.MAJOR
        assert highest_severity([]) is None


class TestRecommendationEngine:
    """Tests for recommendation and alert generation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = RecommendationEngine()

    def test_no_triggers_only_tier_block(self):
        """Without triggers only the tier block is emitted."""
        recommendations, alerts = self.engine.recommend(make_record(), CareLevel.SIMPLE)
        assert recommendations == ("Basic monitoring protocols", "Monthly assessment reviews")
        assert alerts == ()

    def test_all_triggers_in_declared_order(self):
        """Triggers fire in medication, cognition, fall risk order."""
        record = make_record(
            cognitive_score=10, fall_risk="high", medication_compliance="poor",
        )
        recommendations, alerts = self.engine.recommend(record, CareLevel.SPECIALIZED)

        assert recommendations == (
            "Implement medication adherence monitoring system",
            "Consider pill organizer or automated dispensing",
            "Initiate cognitive stimulation therapy",
            "Implement memory aids and environmental modifications",
            "Implement fall prevention protocols",
            "Environmental safety assessment required",
            "24/7 monitoring protocols required",
            "Specialist consultation within 48 hours",
            "Advanced life support equipment on standby",
        )
        assert [a.severity for a in alerts] == [
            AlertSeverity.WARNING,
            AlertSeverity.CRITICAL,
            AlertSeverity.CRITICAL,
        ]
        assert alerts[0].message == "High medication non-compliance risk"

    def test_cognition_threshold(self):
        """Cognition trigger fires below 18 only."""
        _, alerts_17 = self.engine.recommend(make_record(cognitive_score=17), CareLevel.ROUTINE)
        _, alerts_18 = self.engine.recommend(make_record(cognitive_score=18), CareLevel.ROUTINE)
        assert len(alerts_17) == 1
        assert alerts_18 == ()

    def test_fair_compliance_does_not_trigger(self):
        """Only poor compliance triggers the medication rule."""
        _, alerts = self.engine.recommend(
            make_record(medication_compliance="fair"), CareLevel.ROUTINE
        )
        assert alerts == ()

    @pytest.mark.parametrize("tier,size", [
        (CareLevel.SPECIALIZED, 3),
        (CareLevel.ADVANCED, 3),
        (CareLevel.ROUTINE, 2),
        (CareLevel.SIMPLE, 2),
    ])
    def test_tier_block_sizes(self, tier, size):
        """Each tier has its own block."""
        recommendations, _ = self.engine.recommend(make_record(), tier)
        assert len(recommendations) == size

    def test_unknown_tier_is_invalid_state(self):
        """An unmatched tier is an internal error."""
        with pytest.raises(InvalidStateError):
            self.engine.recommend(make_record(), "Intensive")

    def test_fired_rules_reported(self):
        """Evaluation reports which rules fired."""
        result = self.engine.evaluate(make_record(fall_risk="high"), CareLevel.ROUTINE)
        assert result.fired_rules == ("REC003",)

    def test_custom_rule(self):
        """Custom rules can replace the defaults."""
        rule = Rule(
            id="CUSTOM-001",
            name="Moderate Isolation",
            conditions=(RuleCondition("social_isolation", "eq", RiskLevel.MODERATE),),
            recommendations=("Refer to community programs",),
        )
        engine = RecommendationEngine(rules=[rule])
        recommendations, alerts = engine.recommend(
            make_record(social_isolation="moderate"), CareLevel.SIMPLE
        )
        assert recommendations[0] == "Refer to community programs"
        assert alerts == ()

    def test_rule_with_unknown_field_is_invalid_state(self):
        """Rules referencing unknown fields are a table bug."""
        rule = Rule(
            id="BROKEN",
            name="Broken",
            conditions=(RuleCondition("blood_pressure", "lt", 140),),
            recommendations=(),
        )
        with pytest.raises(InvalidStateError):
            RecommendationEngine(rules=[rule]).recommend(make_record(), CareLevel.SIMPLE)

    def test_rejects_non_record(self):
        """Plain dictionaries are rejected."""
        with pytest.raises(InvalidInputError):
            self.engine.recommend({"cognitive_score": 10}, CareLevel.SIMPLE)

    def test_rule_with_unknown_operator_is_invalid_state(self):
        """Rules using an unsupported operator are a table bug."""
        rule = Rule(
            id="BROKEN",
            name="Broken",
            conditions=(RuleCondition("cognitive_score", "gte", 18),),
            recommendations=(),
        )
        with pytest.raises(InvalidStateError):
            RecommendationEngine(rules=[rule]).recommend(make_record(), CareLevel.SIMPLE)
