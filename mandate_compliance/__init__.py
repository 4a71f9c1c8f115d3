"""
Mandate Compliance Validator.

Classifies a natural-language request, selects the mandates that apply to
it and scores a draft artifact against them:

    from mandate_compliance import process
    result = process("I need authentication", draft)
    result.category, result.mandates, result.report
"""

__version__ = "0.1.0"

from mandate_compliance.models.enums import RequestCategory, Severity, ViolationKind
from mandate_compliance.models.schemas import (
    ComplianceReport,
    Mandate,
    PipelineResult,
    RequestClassificationRule,
    RuleTables,
    Violation,
)
from mandate_compliance.rules import (
    ComplianceValidator,
    ConfigError,
    RuleStore,
    classify,
    get_rule_tables,
    load_classification_rules,
    load_mandates,
    select_mandates,
    validate,
)
from mandate_compliance.orchestration import CompliancePipeline, process

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
    "ComplianceValidator",
    "ConfigError",
    "RuleStore",
    "classify",
    "get_rule_tables",
    "load_classification_rules",
    "load_mandates",
    "select_mandates",
    "validate",
    "CompliancePipeline",
    "process",
    "__version__",
]
