"""Outcome tracking targets adjusted per care tier.

Complex cases get higher satisfaction and adherence targets but a lower
functional improvement expectation; simple cases get a higher functional
improvement expectation. Adjustments overwrite the baseline target.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping

from clinical_engine.errors import InvalidStateError
from clinical_engine.models import CareLevel, Trend
from clinical_engine.symbolic.rule_tables import baseline_outcome_metrics


@dataclass(frozen=True)
class OutcomeMetric:
    """A tracked clinical outcome and its target."""

    name: str
    target: int | str
    current: int = 0
    trend: Trend = Trend.STABLE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "target": self.target,
            "current": self.current,
            "trend": self.trend.value,
        }


TIER_TARGET_OVERRIDES: Mapping[CareLevel, Mapping[str, int]] = MappingProxyType({
    CareLevel.SPECIALIZED: MappingProxyType({
        "patientSatisfaction": 90,
        "functionalImprovement": 60,
        "medicationAdherence": 95,
    }),
    CareLevel.SIMPLE: MappingProxyType({
        "functionalImprovement": 85,
    }),
})


class OutcomeMetricsAdjuster:
    """Builds outcome targets for a care tier from the baseline table."""

    def adjust(self, tier: CareLevel) -> dict[str, OutcomeMetric]:
        """Get outcome metrics for a tier.

        Args:
            tier: Classified care tier

        Returns:
            Mapping of metric name to OutcomeMetric
        """
        if not isinstance(tier, CareLevel):
            raise InvalidStateError(f"Unknown care tier {tier!r}")

        metrics = {
            name: OutcomeMetric(name=name, target=target, trend=trend)
            for name, (target, trend) in baseline_outcome_metrics().items()
        }

        for name, target in TIER_TARGET_OVERRIDES.get(tier, {}).items():
            if name not in metrics:
                raise InvalidStateError(f"Override for unknown outcome metric '{name}'")
            metrics[name] = replace(metrics[name], target=target)

        return metrics


def adjust_outcome_metrics(tier: CareLevel) -> dict[str, OutcomeMetric]:
    """Get outcome metrics for a care tier."""
    return OutcomeMetricsAdjuster().adjust(tier)
