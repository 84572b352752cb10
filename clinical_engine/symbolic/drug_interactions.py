"""Drug interaction checking against the static interaction table."""

from __future__ import annotations

from typing import Iterable

import structlog

from clinical_engine.models import InteractionSeverity, coerce_strings
from clinical_engine.symbolic.rule_tables import DrugInteractionRule, interaction_rules

logger = structlog.get_logger(__name__)


def _mentions(medications: tuple[str, ...], drug: str) -> bool:
    """Check if any medication entry contains the drug name, ignoring case."""
    drug_lower = drug.lower()
    return any(drug_lower in med.lower() for med in medications)


class DrugInteractionChecker:
    """Matches a medication list against the interaction table.

    A rule matches when every drug it names appears as a case-insensitive
    substring of some medication entry, so "Warfarin 5mg" matches "warfarin".

    Example:
        ```python
        checker = DrugInteractionChecker()
        matches = checker.check(["Warfarin 5mg", "Aspirin 81mg"])
        # -> (warfarin + aspirin, major)
        ```
    """

    def __init__(self, rules: Iterable[DrugInteractionRule] | None = None) -> None:
        """Initialize checker.

        Args:
            rules: Interaction table to check against (default: built-in table)
        """
        self.rules = tuple(rules) if rules is not None else interaction_rules()

    def check(self, medications: Iterable[str]) -> tuple[DrugInteractionRule, ...]:
        """Find every interaction rule satisfied by the medication list.

        Args:
            medications: Medication entries, free text such as "Aspirin 81mg"

        Returns:
            Matching rules in table order
        """
        meds = coerce_strings(medications, "medications")
        if not meds:
            return ()

        matches = tuple(
            rule for rule in self.rules
            if all(_mentions(meds, drug) for drug in rule.drugs)
        )

        if matches:
            logger.debug(
                "drug_interactions_detected",
                count=len(matches),
                pairs=["+".join(rule.drugs) for rule in matches],
            )
        return matches


def highest_severity(matches: Iterable[DrugInteractionRule]) -> InteractionSeverity | None:
    """Get the most severe interaction level among matches, if any."""
    severities = [rule.severity for rule in matches]
    if not severities:
        return None
    return max(severities, key=lambda s: s.rank)


def check_interactions(medications: Iterable[str]) -> tuple[DrugInteractionRule, ...]:
    """Check medications against the built-in interaction table."""
    return DrugInteractionChecker().check(medications)
