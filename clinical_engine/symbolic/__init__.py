"""Rule tables and rule-driven components of the decision engine."""

from clinical_engine.symbolic.rule_tables import (
    RULES_VERSION,
    DomainDefinition,
    DrugInteractionRule,
    baseline_outcome_metrics,
    domain_catalog,
    escalation_ladder,
    interaction_rules,
)
from clinical_engine.symbolic.drug_interactions import (
    DrugInteractionChecker,
    check_interactions,
    highest_severity,
)
from clinical_engine.symbolic.rule_engine import (
    Alert,
    RecommendationEngine,
    RecommendationResult,
    Rule,
    RuleCondition,
)

__all__ = [
    "RULES_VERSION",
    "DomainDefinition",
    "DrugInteractionRule",
    "baseline_outcome_metrics",
    "domain_catalog",
    "escalation_ladder",
    "interaction_rules",
    "DrugInteractionChecker",
    "check_interactions",
    "highest_severity",
    "Alert",
    "RecommendationEngine",
    "RecommendationResult",
    "Rule",
    "RuleCondition",
]
