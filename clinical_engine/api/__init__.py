"""API layer for the Clinical & Compliance Decision Engine."""

from clinical_engine.api.main import app
from clinical_engine.api.schemas import (
    EvaluateRequest,
    EvaluateResponse,
    HealthCheckResponse,
)

__all__ = [
    "app",
    "EvaluateRequest",
    "EvaluateResponse",
    "HealthCheckResponse",
]
