"""Complexity scoring and care-tier classification."""

from clinical_engine.scoring.complexity import (
    MAX_COMPLEXITY_SCORE,
    ComplexityBreakdown,
    ComplexityScorer,
)
from clinical_engine.scoring.care_level import (
    CARE_LEVEL_THRESHOLDS,
    CareLevelClassifier,
    classify,
)

__all__ = [
    "MAX_COMPLEXITY_SCORE",
    "ComplexityBreakdown",
    "ComplexityScorer",
    "CARE_LEVEL_THRESHOLDS",
    "CareLevelClassifier",
    "classify",
]
