"""Models — enums and frozen pydantic schemas."""

from mandate_compliance.models.enums import RequestCategory, Severity, ViolationKind
from mandate_compliance.models.schemas import (
    ComplianceReport,
    Mandate,
    PipelineResult,
    RequestClassificationRule,
    RuleTables,
    Violation,
)

__all__ = [
    "RequestCategory",
    "Severity",
    "ViolationKind",
    "ComplianceReport",
    "Mandate",
    "PipelineResult",
    "RequestClassificationRule",
    "RuleTables",
    "Violation",
]
