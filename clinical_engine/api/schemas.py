"""Pydantic schemas for API request/response validation.

Request bodies carry the raw assessment and domain objects; those are
validated by ``clinical_engine.normalization`` so the API, the CLI and
library callers share one boundary. Response fields are camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from clinical_engine.normalization import MissingFieldPolicy


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class EvaluateRequest(CamelModel):
    """Request for a full engine evaluation."""

    record: dict[str, Any] = Field(..., description="Assessment record")
    domains: list[dict[str, Any]] = Field(..., description="Per-domain compliance records")
    missing_field_policy: MissingFieldPolicy | None = Field(
        None, description="Override the configured missing-field policy"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "record": {
                        "cognitiveScore": 16,
                        "functionalImpact": "moderate",
                        "fallRisk": "high",
                        "medicationCompliance": "fair",
                        "socialIsolation": "low",
                        "medications": ["Warfarin 5mg", "Aspirin 81mg"],
                    },
                    "domains": [
                        {
                            "id": "physical-health",
                            "name": "Physical Health",
                            "completeness": 85,
                            "complianceLevel": "partial",
                        },
                        {
                            "id": "medication-management",
                            "name": "Medication Management",
                            "completeness": 95,
                            "complianceLevel": "full",
                        },
                    ],
                }
            ]
        }
    }


class AlertInfo(CamelModel):
    """Clinical alert."""

    severity: str = Field(..., description="info, warning or critical")
    message: str = Field(...)


class DrugInteractionInfo(CamelModel):
    """Matched drug interaction rule."""

    drugs: list[str] = Field(...)
    severity: str = Field(..., description="minor, moderate or major")
    description: str = Field(...)
    recommendation: str = Field(...)


class EmergencyProtocolInfo(CamelModel):
    """Emergency response protocol."""

    response_time: str = Field(..., description="Response-time target")
    escalation_levels: list[str] = Field(..., description="Ordered escalation ladder")
    critical_alerts: list[str] = Field(default_factory=list)


class OutcomeMetricInfo(CamelModel):
    """Outcome tracking target."""

    target: int | str = Field(...)
    current: int = Field(0)
    trend: str = Field(...)


class ComplexityBreakdownInfo(CamelModel):
    """Per-factor complexity points."""

    cognition: int
    functional_impact: int
    fall_risk: int
    medication_compliance: int
    social_isolation: int
    total: int


class ComplianceInfo(CamelModel):
    """Aggregated compliance verdict."""

    overall_completeness: int = Field(..., ge=0, le=100)
    fully_compliant: int = Field(...)
    partially_compliant: int = Field(...)
    missing: int = Field(...)
    status: str = Field(..., description="compliant, partially-compliant or non-compliant")
    critical_gaps: list[str] = Field(default_factory=list)
    implemented_domains: int = Field(...)
    total_domains: int = Field(...)
    recommendations: list[str] = Field(default_factory=list)


class EvaluateResponse(CamelModel):
    """Response for a full engine evaluation."""

    rules_version: str = Field(...)
    care_level: str = Field(..., description="Simple, Routine, Advanced or Specialized")
    complexity_score: int = Field(..., ge=0, le=15)
    complexity_breakdown: ComplexityBreakdownInfo = Field(...)
    recommendations: list[str] = Field(default_factory=list)
    alerts: list[AlertInfo] = Field(default_factory=list)
    drug_interactions: list[DrugInteractionInfo] = Field(default_factory=list)
    emergency_protocol: EmergencyProtocolInfo = Field(...)
    outcome_metrics: dict[str, OutcomeMetricInfo] = Field(default_factory=dict)
    compliance: ComplianceInfo = Field(...)
    substituted_fields: list[str] = Field(
        default_factory=list, description="Fields filled with defaults at the boundary"
    )


class DrugInteractionRequest(CamelModel):
    """Request for drug interaction check."""

    medications: list[str] = Field(..., description="Medication entries, e.g. 'Aspirin 81mg'")


class DrugInteractionResponse(CamelModel):
    """Response for drug interaction check."""

    interactions: list[DrugInteractionInfo] = Field(default_factory=list)
    overall_severity: str | None = Field(None, description="Worst matched severity")


class DomainInfo(CamelModel):
    """Assessment domain catalog entry."""

    id: str
    name: str
    description: str
    required_components: list[str] = Field(default_factory=list)
    validation_rules: list[str] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    rules_version: str = Field(..., description="Embedded rule table version")
    components: dict[str, str] = Field(default_factory=dict, description="Component statuses")
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)
