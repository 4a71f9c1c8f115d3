"""
Rule engines — rule store, request classifier, mandate selector and
compliance validator. All of them are pure functions of their inputs and
the immutable rule tables.
"""

from .rules_config import (
    ConfigError,
    RuleStore,
    build_rule_tables,
    get_rule_tables,
    load_classification_rules,
    load_mandates,
)
from .classifier import EMPTY_INPUT, classify
from .mandate_selector import select_mandates
from .compliance_validator import SEVERITY_PENALTIES, ComplianceValidator, validate

__all__ = [
    "ConfigError",
    "RuleStore",
    "build_rule_tables",
    "get_rule_tables",
    "load_classification_rules",
    "load_mandates",
    "EMPTY_INPUT",
    "classify",
    "select_mandates",
    "SEVERITY_PENALTIES",
    "ComplianceValidator",
    "validate",
]
