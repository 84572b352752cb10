"""FastAPI application for the Clinical & Compliance Decision Engine.

Exposes the engine as a request/response service with:
- REST endpoint for full evaluations
- Drug interaction lookup and domain catalog endpoints
- Prometheus metrics integration
- Health checks
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from clinical_engine import __version__
from clinical_engine.api.schemas import (
    DomainInfo,
    DrugInteractionRequest,
    DrugInteractionResponse,
    ErrorResponse,
    EvaluateRequest,
    EvaluateResponse,
    HealthCheckResponse,
)
from clinical_engine.compliance import ComplianceThresholds
from clinical_engine.config import configure_logging, settings
from clinical_engine.engine import DecisionEngine
from clinical_engine.errors import InvalidInputError, InvalidStateError
from clinical_engine.normalization import normalize_domains, normalize_record
from clinical_engine.symbolic import (
    RULES_VERSION,
    DrugInteractionChecker,
    domain_catalog,
    highest_severity,
)
from clinical_engine.symbolic.rule_tables import get_domain

logger = structlog.get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "cce_requests_total",
    "Total requests",
    ["endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "cce_request_latency_seconds",
    "Request latency",
    ["endpoint"]
)
CARE_LEVEL_COUNT = Counter(
    "cce_care_level_total",
    "Care level classifications",
    ["care_level"]
)

# Engine components are stateless, so module-level instances are shared safely
decision_engine = DecisionEngine()
interaction_checker = DrugInteractionChecker()


def _thresholds() -> ComplianceThresholds:
    return ComplianceThresholds(
        compliant=settings.engine.compliant_threshold,
        partially_compliant=settings.engine.partial_threshold,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging(settings.log_level)
    logger.info("starting_decision_engine", rules_version=RULES_VERSION)

    # Fail at startup rather than on the first request
    _thresholds()

    yield

    logger.info("decision_engine_shutdown")


# Create FastAPI app
app = FastAPI(
    title="Clinical & Compliance Decision Engine",
    description="Deterministic care-level, clinical decision support and compliance engine",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Reject malformed input."""
    REQUEST_COUNT.labels(endpoint=request.url.path, status="invalid_input").inc()
    logger.warning("invalid_input", error=str(exc), field=exc.field, path=request.url.path)
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=str(exc),
            error_code="INVALID_INPUT",
            details={"field": exc.field} if exc.field else {},
        ).model_dump(mode="json"),
    )


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    """Report rule table inconsistencies."""
    REQUEST_COUNT.labels(endpoint=request.url.path, status="error").inc()
    logger.error("invalid_engine_state", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=str(exc),
            error_code="INVALID_STATE",
        ).model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error("unhandled_exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=str(exc),
            error_code="INTERNAL_ERROR",
        ).model_dump(mode="json"),
    )


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint."""
    components = {
        "api": "healthy",
        "rule_tables": "healthy" if domain_catalog() else "empty",
    }

    status = "healthy" if all(v == "healthy" for v in components.values()) else "degraded"

    return HealthCheckResponse(
        status=status,
        version=__version__,
        rules_version=RULES_VERSION,
        components=components,
    )


@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


@app.post("/api/v1/evaluate", response_model=EvaluateResponse)
async def evaluate(request: EvaluateRequest):
    """Evaluate an assessment record and domain compliance.

    1. Normalizes the raw record and domains at the boundary
    2. Runs the decision engine
    3. Returns the full validation result
    """
    start_time = time.perf_counter()

    policy = request.missing_field_policy or settings.engine.missing_field_policy
    normalized = normalize_record(request.record, policy)
    domains = normalize_domains(request.domains)

    result = decision_engine.evaluate(normalized.record, domains, _thresholds())

    payload = result.to_dict()
    payload["substitutedFields"] = list(normalized.substituted_fields)
    response = EvaluateResponse.model_validate(payload)

    latency_s = time.perf_counter() - start_time
    REQUEST_COUNT.labels(endpoint="/api/v1/evaluate", status="success").inc()
    REQUEST_LATENCY.labels(endpoint="/api/v1/evaluate").observe(latency_s)
    CARE_LEVEL_COUNT.labels(care_level=result.care_level.value).inc()

    return response


@app.post("/api/v1/interactions", response_model=DrugInteractionResponse)
async def check_interactions(request: DrugInteractionRequest):
    """Check a medication list for known drug-drug interactions."""
    matches = interaction_checker.check(request.medications)
    severity = highest_severity(matches)

    REQUEST_COUNT.labels(endpoint="/api/v1/interactions", status="success").inc()

    return DrugInteractionResponse.model_validate({
        "interactions": [rule.to_dict() for rule in matches],
        "overallSeverity": severity.value if severity else None,
    })


@app.get("/api/v1/domains", response_model=list[DomainInfo])
async def list_domains():
    """Get the assessment domain catalog."""
    return [DomainInfo.model_validate(domain.to_dict()) for domain in domain_catalog()]


@app.get("/api/v1/domains/{domain_id}", response_model=DomainInfo)
async def get_domain_info(domain_id: str):
    """Get one assessment domain from the catalog."""
    domain = get_domain(domain_id)
    if not domain:
        raise HTTPException(status_code=404, detail=f"Domain '{domain_id}' not found")
    return DomainInfo.model_validate(domain.to_dict())


def run_server():
    """Run the server (for CLI)."""
    import uvicorn
    uvicorn.run(
        "clinical_engine.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run_server()
