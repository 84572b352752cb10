"""Multi-domain compliance aggregation.

Reduces per-domain compliance records into a single verdict:
- Overall completeness (mean, rounded half-up)
- Counts of fully, partially and non-compliant domains
- Overall compliance status against configurable thresholds
- Names of domains with missing compliance, in input order

Thresholds are passed in explicitly. Nothing here reads process-wide flags,
so two calls with the same arguments always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

import structlog

from clinical_engine.errors import InvalidInputError
from clinical_engine.models import ComplianceDomain, ComplianceLevel, ComplianceStatus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ComplianceThresholds:
    """Completeness thresholds for the overall status.

    Defaults: 95 or above is compliant, 80 or above is partially compliant,
    anything lower is non-compliant.
    """

    compliant: int = 95
    partially_compliant: int = 80

    def __post_init__(self) -> None:
        for name in ("compliant", "partially_compliant"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
                raise InvalidInputError(
                    f"Threshold '{name}' must be an integer 0..100, got {value!r}",
                    field=name,
                )
        if self.partially_compliant > self.compliant:
            raise InvalidInputError(
                "Partially-compliant threshold cannot exceed the compliant threshold",
                field="partially_compliant",
            )

    def status_for(self, completeness: int) -> ComplianceStatus:
        """Map an overall completeness percentage to a status."""
        if completeness >= self.compliant:
            return ComplianceStatus.COMPLIANT
        if completeness >= self.partially_compliant:
            return ComplianceStatus.PARTIALLY_COMPLIANT
        return ComplianceStatus.NON_COMPLIANT


DEFAULT_THRESHOLDS = ComplianceThresholds()


@dataclass(frozen=True)
class ComplianceSummary:
    """Aggregated compliance verdict across domains."""

    overall_completeness: int
    fully_compliant: int
    partially_compliant: int
    missing: int
    status: ComplianceStatus
    critical_gap_names: tuple[str, ...]
    implemented_domains: int
    total_domains: int
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "overallCompleteness": self.overall_completeness,
            "fullyCompliant": self.fully_compliant,
            "partiallyCompliant": self.partially_compliant,
            "missing": self.missing,
            "status": self.status.value,
            "criticalGaps": list(self.critical_gap_names),
            "implementedDomains": self.implemented_domains,
            "totalDomains": self.total_domains,
            "recommendations": list(self.recommendations),
        }


def mean_rounded_half_up(values: list[int]) -> int:
    """Arithmetic mean of integers rounded to the nearest integer, halves up."""
    mean = Decimal(sum(values)) / Decimal(len(values))
    return int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class ComplianceAggregator:
    """Aggregates domain compliance records into an overall verdict.

    Example:
        ```python
        aggregator = ComplianceAggregator()
        summary = aggregator.aggregate(domains)
        if summary.status != ComplianceStatus.COMPLIANT:
            print(summary.critical_gap_names)
        ```
    """

    def __init__(self, thresholds: ComplianceThresholds = DEFAULT_THRESHOLDS) -> None:
        """Initialize aggregator.

        Args:
            thresholds: Status thresholds (default: 95 / 80)
        """
        if not isinstance(thresholds, ComplianceThresholds):
            raise InvalidInputError("thresholds must be ComplianceThresholds", field="thresholds")
        self.thresholds = thresholds

    def aggregate(self, domains: Iterable[ComplianceDomain]) -> ComplianceSummary:
        """Aggregate domain records.

        Args:
            domains: Per-domain compliance records, at least one

        Returns:
            ComplianceSummary

        Raises:
            InvalidInputError: If no domains are given or an entry is not a
                ComplianceDomain.
        """
        if domains is None:
            raise InvalidInputError("At least one compliance domain is required", field="domains")
        items = list(domains)
        if not items:
            raise InvalidInputError("At least one compliance domain is required", field="domains")
        for item in items:
            if not isinstance(item, ComplianceDomain):
                raise InvalidInputError(
                    f"Expected ComplianceDomain, got {type(item).__name__}", field="domains"
                )

        overall = mean_rounded_half_up([d.completeness for d in items])
        by_level = {level: 0 for level in ComplianceLevel}
        for domain in items:
            by_level[domain.compliance_level] += 1

        summary = ComplianceSummary(
            overall_completeness=overall,
            fully_compliant=by_level[ComplianceLevel.FULL],
            partially_compliant=by_level[ComplianceLevel.PARTIAL],
            missing=by_level[ComplianceLevel.MISSING],
            status=self.thresholds.status_for(overall),
            critical_gap_names=tuple(
                d.name for d in items if d.compliance_level == ComplianceLevel.MISSING
            ),
            implemented_domains=sum(1 for d in items if d.implemented),
            total_domains=len(items),
            recommendations=tuple(rec for d in items for rec in d.recommendations),
        )

        logger.debug(
            "compliance_aggregated",
            overall_completeness=overall,
            status=summary.status.value,
            missing=summary.missing,
        )

        return summary


def aggregate_compliance(
    domains: Iterable[ComplianceDomain],
    thresholds: ComplianceThresholds = DEFAULT_THRESHOLDS,
) -> ComplianceSummary:
    """Aggregate domain records with the given thresholds."""
    return ComplianceAggregator(thresholds).aggregate(domains)
