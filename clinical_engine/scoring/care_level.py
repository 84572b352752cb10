"""Care-tier classification from a complexity score."""

from __future__ import annotations

from typing import Any

from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.models import CareLevel

# (inclusive lower bound, tier), highest first; the last bound must be 0
CARE_LEVEL_THRESHOLDS: tuple[tuple[int, CareLevel], ...] = (
    (10, CareLevel.SPECIALIZED),
    (7, CareLevel.ADVANCED),
    (4, CareLevel.ROUTINE),
    (0, CareLevel.SIMPLE),
)


def classify(score: Any) -> CareLevel:
    """Map a complexity score to its care tier.

    Raises:
        InvalidInputError: If the score is not a non-negative integer.
    """
    if isinstance(score, bool) or not isinstance(score, int) or score < 0:
        raise InvalidInputError(
            f"Complexity score must be a non-negative integer, got {score!r}",
            field="complexity_score",
        )

    for lower_bound, tier in CARE_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return tier

    # Unreachable: the final bound is 0 and negative scores are rejected above
    raise InvalidStateError(f"No care tier for score {score}")


class CareLevelClassifier:
    """Classifier wrapper for callers that inject components."""

    thresholds = CARE_LEVEL_THRESHOLDS

    def classify(self, score: int) -> CareLevel:
        """Map a complexity score to its care tier."""
        return classify(score)
