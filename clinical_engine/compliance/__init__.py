"""Compliance aggregation across assessment domains."""

from clinical_engine.compliance.aggregator import (
    DEFAULT_THRESHOLDS,
    ComplianceAggregator,
    ComplianceSummary,
    ComplianceThresholds,
    aggregate_compliance,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "ComplianceAggregator",
    "ComplianceSummary",
    "ComplianceThresholds",
    "aggregate_compliance",
]
