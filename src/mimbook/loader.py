"""
Input loading and validation

Parses the incident and stakeholders YAML documents into typed records. Schema
problems are reported as field-level errors rather than raised, and soft
problems (missing optional data, unknown category, unfilled roles) as warnings
that never block generation.
"""

import logging
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError

from .categories import CANONICAL_CATEGORIES
from .exceptions import InputValidationError
from .models import Incident, IncidentFile, StakeholdersFile
from .roles import REQUIRED_ROLES, find_by_role

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FieldIssue(BaseModel):
    """One validation error or warning, located by a dotted field path"""

    field: str
    message: str


class LoadResult(BaseModel, Generic[T]):
    """Outcome of parsing one document"""

    data: Optional[T] = None
    errors: list[FieldIssue] = Field(default_factory=list)
    warnings: list[FieldIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.data is not None


class ValidationReport(BaseModel):
    """Combined outcome of validating both input documents"""

    valid: bool
    errors: list[FieldIssue] = Field(default_factory=list)
    warnings: list[FieldIssue] = Field(default_factory=list)


def _load_yaml(text: str) -> tuple[Any, list[FieldIssue]]:
    try:
        return yaml.safe_load(text), []
    except yaml.YAMLError as e:
        return None, [FieldIssue(field="yaml", message=f"YAML syntax error: {e}")]


def _format_validation_errors(error: ValidationError) -> list[FieldIssue]:
    return [
        FieldIssue(
            field=".".join(str(part) for part in e["loc"]) or "root",
            message=e["msg"],
        )
        for e in error.errors()
    ]


def incident_warnings(incident: Incident, raw: Any = None) -> list[FieldIssue]:
    """Advisory warnings for a valid incident record"""
    warnings = []

    if not incident.detected_at:
        warnings.append(
            FieldIssue(
                field="incident.detected_at",
                message="detected_at is missing; opened_at will be used as detection time",
            )
        )

    # The model defaults change_related, so look at what the document said
    raw_incident = raw.get("incident") if isinstance(raw, dict) else None
    if not isinstance(raw_incident, dict) or "change_related" not in raw_incident:
        warnings.append(
            FieldIssue(
                field="incident.change_related",
                message="change_related not specified; will default to false",
            )
        )

    if not incident.region:
        warnings.append(
            FieldIssue(
                field="incident.region",
                message="region not specified; region-specific guidance will be omitted from runbook",
            )
        )

    if incident.category not in CANONICAL_CATEGORIES:
        warnings.append(
            FieldIssue(
                field="incident.category",
                message=(
                    f"Category '{incident.category}' is not a standard category. "
                    f"Valid: {', '.join(CANONICAL_CATEGORIES)}. "
                    "Generic investigation steps will be used."
                ),
            )
        )

    return warnings


def stakeholder_warnings(data: StakeholdersFile) -> list[FieldIssue]:
    """Advisory warnings for a valid stakeholders document"""
    warnings = []

    for role in REQUIRED_ROLES:
        if find_by_role(data.stakeholders, role) is None:
            warnings.append(
                FieldIssue(
                    field="stakeholders",
                    message=f"No stakeholder with role '{role}' found. Escalation matrix may be incomplete.",
                )
            )

    if not any(s.bridge_url for s in data.stakeholders):
        warnings.append(
            FieldIssue(
                field="stakeholders",
                message=(
                    "No stakeholder has a bridge_url set. A bridge placeholder will be "
                    "used in communication templates."
                ),
            )
        )

    if not data.vendor_escalations:
        warnings.append(
            FieldIssue(
                field="vendor_escalations",
                message="No vendor escalations configured. Vendor escalation table will be omitted.",
            )
        )

    return warnings


def parse_incident_yaml(text: str) -> LoadResult[Incident]:
    """Parse an incident document ('incident:' root key)"""
    raw, errors = _load_yaml(text)
    if errors:
        return LoadResult[Incident](errors=errors)

    try:
        parsed = IncidentFile.model_validate(raw)
    except ValidationError as e:
        return LoadResult[Incident](errors=_format_validation_errors(e))

    warnings = incident_warnings(parsed.incident, raw)
    for warning in warnings:
        logger.warning(f"{warning.field}: {warning.message}")
    return LoadResult[Incident](data=parsed.incident, warnings=warnings)


def parse_stakeholders_yaml(text: str) -> LoadResult[StakeholdersFile]:
    """Parse a stakeholders document ('stakeholders:' and optional 'vendor_escalations:')"""
    raw, errors = _load_yaml(text)
    if errors:
        return LoadResult[StakeholdersFile](errors=errors)

    try:
        parsed = StakeholdersFile.model_validate(raw)
    except ValidationError as e:
        return LoadResult[StakeholdersFile](errors=_format_validation_errors(e))

    warnings = stakeholder_warnings(parsed)
    for warning in warnings:
        logger.warning(f"{warning.field}: {warning.message}")
    return LoadResult[StakeholdersFile](data=parsed, warnings=warnings)


def validate_both(incident_text: str, stakeholders_text: str) -> ValidationReport:
    """Validate both documents and merge their errors and warnings"""
    incident_result = parse_incident_yaml(incident_text)
    stakeholders_result = parse_stakeholders_yaml(stakeholders_text)

    return ValidationReport(
        valid=not incident_result.errors and not stakeholders_result.errors,
        errors=incident_result.errors + stakeholders_result.errors,
        warnings=incident_result.warnings + stakeholders_result.warnings,
    )


def load_incident_file(path: str) -> LoadResult[Incident]:
    """Read and parse an incident file, raising InputValidationError on errors"""
    result = parse_incident_yaml(Path(path).read_text(encoding="utf-8"))
    if result.errors:
        raise InputValidationError(path, result.errors)
    return result


def load_stakeholders_file(path: str) -> LoadResult[StakeholdersFile]:
    """Read and parse a stakeholders file, raising InputValidationError on errors"""
    result = parse_stakeholders_yaml(Path(path).read_text(encoding="utf-8"))
    if result.errors:
        raise InputValidationError(path, result.errors)
    return result
