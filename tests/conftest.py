"""Pytest configuration and fixtures."""

import pytest

from clinical_engine.models import AssessmentRecord, ComplianceDomain


@pytest.fixture
def minimal_risk_record():
    """Record with every factor at its least severe value."""
    return AssessmentRecord(
        cognitive_score=28,
        functional_impact="none",
        fall_risk="low",
        medication_compliance="good",
        social_isolation="low",
    )


@pytest.fixture
def high_risk_record():
    """Record with every factor at its most severe value."""
    return AssessmentRecord(
        cognitive_score=10,
        functional_impact="severe",
        fall_risk="high",
        medication_compliance="poor",
        social_isolation="high",
        medications=("Warfarin 5mg", "Aspirin 81mg"),
    )


@pytest.fixture
def sample_domains():
    """Three domains averaging 83% completeness."""
    return [
        ComplianceDomain(
            id="physical-health",
            name="Physical Health",
            completeness=85,
            compliance_level="partial",
            recommendations=("Implement automated vital signs trending",),
        ),
        ComplianceDomain(
            id="mental-health",
            name="Mental Health & Cognitive Status",
            completeness=95,
            compliance_level="full",
        ),
        ComplianceDomain(
            id="nutritional-assessment",
            name="Nutritional Assessment",
            completeness=70,
            compliance_level="partial",
            recommendations=("Implement Mini Nutritional Assessment (MNA)",),
        ),
    ]


@pytest.fixture
def raw_request():
    """Raw JSON request as received by the API or CLI."""
    return {
        "record": {
            "cognitiveScore": 10,
            "functionalImpact": "severe",
            "fallRisk": "high",
            "medicationCompliance": "poor",
            "socialIsolation": "high",
            "medications": ["Warfarin 5mg", "Aspirin 81mg"],
        },
        "domains": [
            {"id": "physical-health", "name": "Physical Health",
             "completeness": 85, "complianceLevel": "partial"},
            {"id": "mental-health", "name": "Mental Health & Cognitive Status",
             "completeness": 95, "complianceLevel": "full"},
            {"id": "nutritional-assessment", "name": "Nutritional Assessment",
             "completeness": 70, "complianceLevel": "partial"},
        ],
    }
