"""
Compliance Validator — scores an artifact against a mandate set.

Two independent checks per mandate:
  • anti-pattern present  → always a CRITICAL violation
  • no required reference → violation at the mandate's own severity
Each violation deducts a fixed penalty from 100; the score is clamped to
0..100 and the report passes only with score >= threshold and no CRITICAL.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from functools import lru_cache

from mandate_compliance.models.enums import Severity, ViolationKind
from mandate_compliance.models.schemas import (
    REGEX_PREFIX,
    ComplianceReport,
    Mandate,
    Violation,
)

logger = logging.getLogger(__name__)

SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}

DEFAULT_PASS_THRESHOLD = 90

MISSING_REFERENCE_MESSAGE = "required reference missing"


@lru_cache(maxsize=512)
def _compile(expression: str) -> re.Pattern[str]:
    return re.compile(expression, re.IGNORECASE)


def pattern_matches(pattern: str, artifact: str, artifact_lower: str) -> bool:
    """Case-insensitive substring match, or regex search for 're:' patterns."""
    if pattern.startswith(REGEX_PREFIX):
        return _compile(pattern[len(REGEX_PREFIX):]).search(artifact) is not None
    return pattern.lower() in artifact_lower


class ComplianceValidator:
    """Severity-weighted compliance scoring."""

    def __init__(
        self,
        pass_threshold: int = DEFAULT_PASS_THRESHOLD,
        penalties: Mapping[Severity, int] | None = None,
    ):
        if not 0 <= pass_threshold <= 100:
            raise ValueError(f"pass_threshold must be within 0..100, got {pass_threshold}")
        merged = dict(SEVERITY_PENALTIES)
        merged.update(penalties or {})
        if any(p < 0 for p in merged.values()):
            raise ValueError("Severity penalties must be non-negative")

        self.pass_threshold = pass_threshold
        self.penalties = merged

    def check_mandate(self, mandate: Mandate, artifact: str, artifact_lower: str) -> list[Violation]:
        """Violations one mandate contributes (0, 1 or 2)."""
        violations: list[Violation] = []

        # ── Anti-pattern check (always CRITICAL) ─────────
        for pattern in mandate.violation_patterns:
            if pattern_matches(pattern, artifact, artifact_lower):
                violations.append(Violation(
                    mandate_id=mandate.id,
                    severity=Severity.CRITICAL,
                    message=f"anti-pattern detected: {pattern}",
                    kind=ViolationKind.ANTI_PATTERN,
                ))
                break

        # ── Required reference check ─────────────────────
        tokens = mandate.required_reference_tokens
        if tokens and not any(t.lower() in artifact_lower for t in tokens):
            violations.append(Violation(
                mandate_id=mandate.id,
                severity=mandate.severity,
                message=MISSING_REFERENCE_MESSAGE,
                kind=ViolationKind.MISSING_REFERENCE,
            ))

        return violations

    def validate(self, artifact: str, mandates: Sequence[Mandate]) -> ComplianceReport:
        artifact_lower = artifact.lower()
        violations: list[Violation] = []
        for mandate in mandates:
            violations.extend(self.check_mandate(mandate, artifact, artifact_lower))

        # Stable: within a severity, mandate order is preserved
        violations.sort(key=lambda v: v.severity.rank)

        deducted = sum(self.penalties[v.severity] for v in violations)
        score = max(0, min(100, 100 - deducted))
        has_critical = any(v.severity is Severity.CRITICAL for v in violations)
        passed = score >= self.pass_threshold and not has_critical

        logger.debug(
            f"[ComplianceValidator] {len(mandates)} mandates → "
            f"{len(violations)} violations, score={score}, passed={passed}"
        )
        return ComplianceReport(score=score, violations=tuple(violations), passed=passed)


_default_validator = ComplianceValidator()


def validate(artifact: str, mandates: Sequence[Mandate]) -> ComplianceReport:
    """Score `artifact` with the default penalties and a 90 pass threshold."""
    return _default_validator.validate(artifact, mandates)
