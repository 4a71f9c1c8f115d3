"""
Mandate Compliance Validator — Main Entry Point

Import and run programmatically:
    from mandate_compliance.main import run
    result = run("I need authentication", draft_prompt)

run() configures logging and logs a readable summary; hosts that manage
their own logging should call mandate_compliance.process() directly.
"""

from __future__ import annotations

import logging

from mandate_compliance.config import get_settings
from mandate_compliance.models.schemas import PipelineResult
from mandate_compliance.orchestration.pipeline import process
from mandate_compliance.utils.logger import setup_logging


def run(raw_input: str, draft_artifact: str) -> PipelineResult:
    """Run the full pipeline once and return the result."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name.upper()}")
    logger.info("=" * 60)

    result = process(raw_input, draft_artifact)
    _log_summary(result)
    return result


def _log_summary(result: PipelineResult) -> None:
    """Log a human-readable summary of one pipeline result."""
    logger = logging.getLogger(__name__)
    report = result.report

    logger.info("-" * 60)
    logger.info(f"  Category:       {result.category}")
    logger.info(f"  Mandates:       {len(result.mandates)} applicable")
    logger.info(f"  Score:          {report.score}/100")
    logger.info(f"  Passed:         {report.passed}")
    logger.info(f"  Rules:          {result.rules_fingerprint[:16]}...")
    logger.info("-" * 60)

    for v in report.violations:
        logger.info(f"    {v.severity.value:<8} | {v.mandate_id} | {v.message}")
