"""Clinical & Compliance Decision Engine.

Deterministic, rule-based transformations that turn a structured assessment
record and per-domain compliance data into a care-level classification,
clinical recommendations, drug-interaction findings, an emergency protocol,
outcome targets and an aggregated compliance verdict.
"""

__version__ = "0.1.0"
__author__ = "Clinical Decision Engine Team"

from clinical_engine.engine import DecisionEngine, evaluate
from clinical_engine.errors import EngineError, InvalidInputError, InvalidStateError
from clinical_engine.normalization import (
    MissingFieldPolicy,
    NormalizedRecord,
    normalize_domains,
    normalize_record,
)

__all__ = [
    "DecisionEngine",
    "evaluate",
    "EngineError",
    "InvalidInputError",
    "InvalidStateError",
    "MissingFieldPolicy",
    "NormalizedRecord",
    "normalize_domains",
    "normalize_record",
]
