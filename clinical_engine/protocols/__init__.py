"""Emergency protocols and outcome tracking targets."""

from clinical_engine.protocols.emergency import (
    EmergencyProtocol,
    EmergencyProtocolGenerator,
    generate_protocol,
)
from clinical_engine.protocols.outcomes import (
    OutcomeMetric,
    OutcomeMetricsAdjuster,
    adjust_outcome_metrics,
)

__all__ = [
    "EmergencyProtocol",
    "EmergencyProtocolGenerator",
    "generate_protocol",
    "OutcomeMetric",
    "OutcomeMetricsAdjuster",
    "adjust_outcome_metrics",
]
