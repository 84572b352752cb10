"""Boundary normalization of raw assessment and domain payloads.

Raw payloads (JSON objects from the API, CLI or a form) are converted into
validated engine types here, once, before anything is scored. This is the
only place a missing field may be replaced by a default, and only when the
caller explicitly selects the ``substitute`` policy. Every substitution is
logged and reported back in ``NormalizedRecord.substituted_fields``.

Accepted record shapes:
- Flat: ``{"cognitiveScore", "functionalImpact", "fallRisk",
  "medicationCompliance", "socialIsolation", "medications"}``
- Assessment form: ``{"mocaScore" | "mmseScore" | "mocaComponents" |
  "mmseComponents", "dementiaScreening": {"functionalImpact"},
  "riskFactors": {"fallRisk", "medicationCompliance", "socialIsolation"},
  "medications"}``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

import structlog

from clinical_engine.errors import InvalidInputError
from clinical_engine.models import (
    COGNITIVE_SCORE_MAX,
    AssessmentRecord,
    ComplianceDomain,
    FunctionalImpact,
    MedicationCompliance,
    RiskLevel,
)

logger = structlog.get_logger(__name__)


class MissingFieldPolicy(str, Enum):
    """How missing assessment fields are handled at the boundary."""

    REJECT = "reject"  # Missing field is an input error
    SUBSTITUTE = "substitute"  # Apply conservative defaults and report them


# Least-severe values, matching the legacy assessment form
SUBSTITUTE_DEFAULTS: Mapping[str, Any] = {
    "cognitive_score": COGNITIVE_SCORE_MAX,
    "functional_impact": FunctionalImpact.NONE,
    "fall_risk": RiskLevel.LOW,
    "medication_compliance": MedicationCompliance.GOOD,
    "social_isolation": RiskLevel.LOW,
    "medications": (),
}

# record field -> (flat key, nested section, nested key)
_FIELD_SOURCES: Mapping[str, tuple[str, str | None, str | None]] = {
    "functional_impact": ("functionalImpact", "dementiaScreening", "functionalImpact"),
    "fall_risk": ("fallRisk", "riskFactors", "fallRisk"),
    "medication_compliance": ("medicationCompliance", "riskFactors", "medicationCompliance"),
    "social_isolation": ("socialIsolation", "riskFactors", "socialIsolation"),
    "medications": ("medications", None, None),
}


@dataclass(frozen=True)
class NormalizedRecord:
    """A validated record plus the fields that were filled with defaults."""

    record: AssessmentRecord
    substituted_fields: tuple[str, ...] = ()

    @property
    def was_substituted(self) -> bool:
        return bool(self.substituted_fields)


def component_total(components: Any, field_name: str) -> int:
    """Sum a cognitive test's component scores into its total.

    Raises:
        InvalidInputError: If components are not a mapping of non-negative
            integers or the total exceeds the test maximum.
    """
    if not isinstance(components, Mapping):
        raise InvalidInputError(f"'{field_name}' must be an object of scores", field=field_name)

    total = 0
    for name, value in components.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidInputError(
                f"'{field_name}.{name}' must be a non-negative integer, got {value!r}",
                field=field_name,
            )
        total += value

    if total > COGNITIVE_SCORE_MAX:
        raise InvalidInputError(
            f"'{field_name}' total {total} exceeds {COGNITIVE_SCORE_MAX}", field=field_name
        )
    return total


def _cognitive_score(raw: Mapping[str, Any]) -> Any:
    """Pick the cognitive score: explicit, then MoCA, then MMSE."""
    for key in ("cognitiveScore", "mocaScore", "mmseScore"):
        if raw.get(key) is not None:
            return raw[key]
    for key in ("mocaComponents", "mmseComponents"):
        if raw.get(key) is not None:
            return component_total(raw[key], key)
    return None


def _lookup(raw: Mapping[str, Any], field_name: str) -> Any:
    flat_key, section, nested_key = _FIELD_SOURCES[field_name]
    if raw.get(flat_key) is not None:
        return raw[flat_key]
    if section is None:
        return None

    nested = raw.get(section)
    if nested is None:
        return None
    if not isinstance(nested, Mapping):
        raise InvalidInputError(f"'{section}' must be an object", field=section)
    return nested.get(nested_key)


def normalize_record(
    raw: Mapping[str, Any],
    policy: MissingFieldPolicy | str = MissingFieldPolicy.REJECT,
) -> NormalizedRecord:
    """Validate a raw assessment payload.

    Args:
        raw: JSON-like assessment object
        policy: Missing-field policy (default: reject)

    Returns:
        NormalizedRecord with the validated record

    Raises:
        InvalidInputError: On malformed values, or on missing fields under
            the reject policy.
    """
    if not isinstance(raw, Mapping):
        raise InvalidInputError("Assessment record must be an object", field="record")
    try:
        policy = MissingFieldPolicy(policy)
    except ValueError:
        raise InvalidInputError(f"Unknown missing-field policy {policy!r}", field="policy") from None

    values: dict[str, Any] = {"cognitive_score": _cognitive_score(raw)}
    for field_name in _FIELD_SOURCES:
        values[field_name] = _lookup(raw, field_name)

    missing = [name for name, value in values.items() if value is None]
    # An absent medication list is an empty list, not missing risk data
    missing = [name for name in missing if name != "medications"]
    if values["medications"] is None:
        values["medications"] = ()

    if missing and policy == MissingFieldPolicy.REJECT:
        raise InvalidInputError(
            f"Missing required assessment fields: {', '.join(missing)}",
            field=missing[0],
        )

    for name in missing:
        values[name] = SUBSTITUTE_DEFAULTS[name]
        logger.warning(
            "default_substituted",
            field=name,
            default=getattr(SUBSTITUTE_DEFAULTS[name], "value", SUBSTITUTE_DEFAULTS[name]),
        )

    return NormalizedRecord(
        record=AssessmentRecord(**values),
        substituted_fields=tuple(missing),
    )


def normalize_domain(raw: Mapping[str, Any]) -> ComplianceDomain:
    """Validate one raw compliance domain object."""
    if not isinstance(raw, Mapping):
        raise InvalidInputError("Compliance domain must be an object", field="domains")

    level = raw.get("complianceLevel", raw.get("compliance_level"))
    for key, value in (
        ("id", raw.get("id")),
        ("name", raw.get("name")),
        ("completeness", raw.get("completeness")),
        ("complianceLevel", level),
    ):
        if value is None:
            raise InvalidInputError(f"Compliance domain missing '{key}'", field=key)

    return ComplianceDomain(
        id=raw["id"],
        name=raw["name"],
        completeness=raw["completeness"],
        compliance_level=level,
        implemented=raw.get("implemented", True),
        gaps=raw.get("gaps") or (),
        recommendations=raw.get("recommendations") or (),
    )


def normalize_domains(raw: Iterable[Mapping[str, Any]]) -> tuple[ComplianceDomain, ...]:
    """Validate a list of raw compliance domain objects."""
    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, Mapping)):
        raise InvalidInputError("Compliance domains must be a list", field="domains")
    return tuple(normalize_domain(item) for item in raw)
