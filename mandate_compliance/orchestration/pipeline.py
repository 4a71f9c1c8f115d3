"""
Pipeline Orchestrator — the single entry point over the rule engines.

    from mandate_compliance.orchestration import process
    result = process("I need authentication", draft_prompt)
    if not result.report.passed:
        ...  # regenerate, reject, ask for more detail: caller's policy

ConfigError from loading the rule tables surfaces on first use (normally
at startup). Every per-request outcome is returned as data.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from mandate_compliance.config import get_settings
from mandate_compliance.models.schemas import PipelineResult, RuleTables
from mandate_compliance.orchestration.graph import build_graph
from mandate_compliance.rules.compliance_validator import ComplianceValidator
from mandate_compliance.rules.rules_config import get_rule_tables

logger = logging.getLogger(__name__)


class CompliancePipeline:
    """
    Holds immutable rule tables and a graph compiled once.
    Safe to share across threads: process() only touches its arguments.
    """

    def __init__(self, tables: RuleTables, validator: ComplianceValidator | None = None):
        self.tables = tables
        self.validator = validator or ComplianceValidator(
            pass_threshold=get_settings().compliance_pass_threshold
        )
        self.fingerprint = tables.fingerprint
        self._graph = build_graph(tables, self.validator)

    def process(self, raw_input: str, draft_artifact: str) -> PipelineResult:
        """Classify the request, select its mandates and score the draft."""
        if not isinstance(raw_input, str) or not isinstance(draft_artifact, str):
            raise TypeError("raw_input and draft_artifact must be str")

        final = self._graph.invoke({"raw_input": raw_input, "draft_artifact": draft_artifact})

        result = PipelineResult(
            category=final["category"],
            mandates=final["mandates"],
            report=final["report"],
            rules_fingerprint=self.fingerprint,
        )
        logger.debug(
            f"[Pipeline] category={result.category} mandates={len(result.mandates)} "
            f"score={result.report.score} passed={result.report.passed}"
        )
        return result


@lru_cache()
def get_pipeline() -> CompliancePipeline:
    """Process-wide pipeline over get_rule_tables(), built on first use."""
    return CompliancePipeline(get_rule_tables())


def process(raw_input: str, draft_artifact: str) -> PipelineResult:
    return get_pipeline().process(raw_input, draft_artifact)
