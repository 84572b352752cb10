"""Static rule tables for the decision engine.

Versioned constant data shipped with the code:
- Drug interaction pairs
- Escalation ladders per care tier
- Baseline outcome metric targets
- Assessment domain catalog (display metadata, not used for scoring)

Everything here is immutable and built once at import time. Accessors return
tuples or fresh copies so callers can never alter the tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from clinical_engine.errors import InvalidStateError
from clinical_engine.models import CareLevel, InteractionSeverity, Trend

RULES_VERSION = "2024.1"


@dataclass(frozen=True)
class DrugInteractionRule:
    """A known interaction between two or more drugs."""

    drugs: tuple[str, ...]
    severity: InteractionSeverity
    description: str
    recommendation: str

    def __post_init__(self) -> None:
        if len(set(d.lower() for d in self.drugs)) < 2:
            raise InvalidStateError(f"Interaction rule needs at least two drugs: {self.drugs}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "drugs": list(self.drugs),
            "severity": self.severity.value,
            "description": self.description,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class DomainDefinition:
    """Catalog entry for one assessment domain."""

    id: str
    name: str
    description: str
    required_components: tuple[str, ...] = ()
    validation_rules: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "requiredComponents": list(self.required_components),
            "validationRules": list(self.validation_rules),
        }


_INTERACTION_RULES: tuple[DrugInteractionRule, ...] = (
    DrugInteractionRule(
        drugs=("warfarin", "aspirin"),
        severity=InteractionSeverity.MAJOR,
        description="Increased bleeding risk",
        recommendation="Monitor INR closely, consider alternative antiplatelet",
    ),
    DrugInteractionRule(
        drugs=("metformin", "contrast"),
        severity=InteractionSeverity.MAJOR,
        description="Risk of lactic acidosis",
        recommendation="Discontinue metformin 48 hours before contrast",
    ),
    DrugInteractionRule(
        drugs=("digoxin", "furosemide"),
        severity=InteractionSeverity.MODERATE,
        description="Hypokalemia may increase digoxin toxicity",
        recommendation="Monitor potassium levels and digoxin levels",
    ),
)

SPECIALIZED_ESCALATION_LADDER: tuple[str, ...] = (
    "Level 1: Primary nurse response (0-5 min)",
    "Level 2: Charge nurse notification (5-10 min)",
    "Level 3: Physician consultation (10-15 min)",
    "Level 4: Emergency services activation (15+ min)",
)

STANDARD_ESCALATION_LADDER: tuple[str, ...] = (
    "Level 1: Primary nurse response (0-10 min)",
    "Level 2: Supervisor notification (10-20 min)",
    "Level 3: Physician consultation (20-30 min)",
)

# name -> (target, trend); current always starts at 0
_BASELINE_OUTCOME_METRICS = MappingProxyType({
    "patientSatisfaction": (85, Trend.STABLE),
    "functionalImprovement": (70, Trend.IMPROVING),
    "medicationAdherence": (90, Trend.STABLE),
    "emergencyVisits": ("<2/month", Trend.STABLE),
    "qualityOfLife": (75, Trend.IMPROVING),
})

_COGNITIVE_COMPONENTS = (
    "Montreal Cognitive Assessment (MoCA)",
    "Mini-Mental State Examination (MMSE)",
    "Dementia Screening Protocols",
    "Cognitive Decline Tracking",
    "Behavioral Assessment",
    "Functional Cognitive Assessment",
    "Risk Factor Analysis",
    "Care Recommendations",
)

_COGNITIVE_RULES = (
    "MoCA or MMSE must be completed for all patients over 65",
    "Dementia screening required for patients with cognitive complaints",
    "Baseline cognitive assessment must be established within 30 days",
    "Follow-up assessments scheduled based on risk level",
    "Behavioral symptoms must be documented and monitored",
)

_DOMAIN_CATALOG: tuple[DomainDefinition, ...] = (
    DomainDefinition(
        id="physical-health",
        name="Physical Health",
        description="Assessment and management of physical health conditions, "
        "vital signs, and medical status",
    ),
    DomainDefinition(
        id="mental-health",
        name="Mental Health & Cognitive Status",
        description="Evaluation of mental health, cognitive function, and "
        "psychological well-being",
        required_components=_COGNITIVE_COMPONENTS,
        validation_rules=_COGNITIVE_RULES,
    ),
    DomainDefinition(
        id="social-support",
        name="Social Support Systems",
        description="Assessment of family support, social networks, and community resources",
    ),
    DomainDefinition(
        id="environmental-safety",
        name="Environmental Safety",
        description="Home environment assessment for safety hazards and accessibility",
    ),
    DomainDefinition(
        id="functional-status",
        name="Functional Status",
        description="Activities of daily living (ADL) and instrumental activities assessment",
    ),
    DomainDefinition(
        id="cognitive-assessment",
        name="Cognitive Assessment",
        description="Detailed cognitive function evaluation and monitoring",
        required_components=_COGNITIVE_COMPONENTS,
        validation_rules=_COGNITIVE_RULES,
    ),
    DomainDefinition(
        id="nutritional-assessment",
        name="Nutritional Assessment",
        description="Nutritional status evaluation and dietary management",
    ),
    DomainDefinition(
        id="medication-management",
        name="Medication Management",
        description="Comprehensive medication review, reconciliation, and management "
        "with drug interaction checking",
        required_components=(
            "Drug Interaction Checking System",
            "Medication Reconciliation Process",
            "Adherence Monitoring Tools",
            "Polypharmacy Risk Assessment",
            "Electronic Medication Administration Record (eMAR)",
            "Automated Dispensing Integration",
            "Allergy and Contraindication Alerts",
            "Medication History Tracking",
        ),
        validation_rules=(
            "All medications must be checked for interactions before administration",
            "Medication reconciliation required at every care transition",
            "High-risk medications require enhanced monitoring protocols",
            "Patient education must be documented for all new medications",
            "Adherence monitoring required for chronic disease medications",
        ),
    ),
    DomainDefinition(
        id="skin-integrity",
        name="Skin Integrity and Wound Care",
        description="Assessment and management of skin conditions and wound healing",
        required_components=(
            "Wound Assessment Protocols",
            "Pressure Ulcer Prevention",
            "Skin Integrity Monitoring",
            "Wound Care Documentation",
            "Healing Progress Tracking",
            "Risk Factor Assessment",
        ),
        validation_rules=(
            "All wounds must be assessed at each visit",
            "Pressure ulcer risk assessment required weekly",
            "Wound photography required for documentation",
            "Healing progress must be tracked and documented",
        ),
    ),
)


def interaction_rules() -> tuple[DrugInteractionRule, ...]:
    """Get the drug interaction table in declared order."""
    return _INTERACTION_RULES


def escalation_ladder(tier: CareLevel) -> tuple[str, ...]:
    """Get the escalation ladder template for a care tier."""
    if tier == CareLevel.SPECIALIZED:
        return SPECIALIZED_ESCALATION_LADDER
    return STANDARD_ESCALATION_LADDER


def baseline_outcome_metrics() -> dict[str, tuple[int | str, Trend]]:
    """Get a fresh copy of the baseline outcome targets."""
    return dict(_BASELINE_OUTCOME_METRICS)


def domain_catalog() -> tuple[DomainDefinition, ...]:
    """Get the assessment domain catalog."""
    return _DOMAIN_CATALOG


def get_domain(domain_id: str) -> DomainDefinition | None:
    """Look up a catalog entry by id."""
    for domain in _DOMAIN_CATALOG:
        if domain.id == domain_id:
            return domain
    return None
