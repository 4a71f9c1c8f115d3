"""
Data schemas shared by the rule store, the rule engines and the pipeline.

Every model is frozen and stores sequences as tuples, so a table loaded at
startup can be shared by any number of callers without copying.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from mandate_compliance.utils.hashing import sha256_hash

from .enums import Severity, ViolationKind

# Violation patterns starting with this prefix are regular expressions,
# everything else is a plain case-insensitive substring.
REGEX_PREFIX = "re:"


def _clean_terms(values: tuple[str, ...], field_name: str) -> tuple[str, ...]:
    cleaned = []
    for value in values:
        term = value.strip()
        if not term:
            raise ValueError(f"{field_name} must not contain blank entries")
        cleaned.append(term)
    return tuple(cleaned)


class _FrozenModel(BaseModel):
    # Rule files may use either snake_case or camelCase keys; unknown keys are errors.
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# ── Rule tables ──────────────────────────────────────────


class Mandate(_FrozenModel):
    """A single testable compliance rule."""
    id: str = Field(..., min_length=1)
    description: str = ""
    severity: Severity
    trigger_keywords: tuple[str, ...] = ()  # empty = always on
    violation_patterns: tuple[str, ...] = ()
    required_reference_tokens: tuple[str, ...] = ()

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("mandate id must not be blank")
        return value

    @field_validator("severity", mode="before")
    @classmethod
    def _normalise_severity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("trigger_keywords", "required_reference_tokens")
    @classmethod
    def _check_terms(cls, value: tuple[str, ...], info) -> tuple[str, ...]:
        return _clean_terms(value, info.field_name)

    @field_validator("violation_patterns")
    @classmethod
    def _check_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        patterns = _clean_terms(value, "violation_patterns")
        for pattern in patterns:
            if pattern.startswith(REGEX_PREFIX):
                expression = pattern[len(REGEX_PREFIX):]
                if not expression:
                    raise ValueError(f"empty regular expression in pattern {pattern!r}")
                try:
                    re.compile(expression, re.IGNORECASE)
                except re.error as exc:
                    raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return patterns

    @model_validator(mode="after")
    def _critical_must_be_testable(self) -> "Mandate":
        if (
            self.severity is Severity.CRITICAL
            and not self.violation_patterns
            and not self.required_reference_tokens
        ):
            raise ValueError(
                f"CRITICAL mandate '{self.id}' needs violation_patterns "
                f"or required_reference_tokens"
            )
        return self

    @property
    def always_on(self) -> bool:
        return not self.trigger_keywords


class RequestClassificationRule(_FrozenModel):
    """Ordered keyword rule. Empty keywords make the rule a catch-all."""
    category: str = Field(..., min_length=1)
    keywords: tuple[str, ...] = ()
    priority: int

    @field_validator("category")
    @classmethod
    def _strip_category(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category must not be blank")
        return value

    @field_validator("keywords")
    @classmethod
    def _lower_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(k.lower() for k in _clean_terms(value, "keywords"))

    @property
    def is_catch_all(self) -> bool:
        return not self.keywords


class RuleTables(_FrozenModel):
    """Immutable bundle of both rule tables, built once per process."""
    mandates: tuple[Mandate, ...]
    classification_rules: tuple[RequestClassificationRule, ...]

    @property
    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form of both tables."""
        canonical = json.dumps(
            self.model_dump(mode="json"), sort_keys=True, separators=(",", ":")
        )
        return sha256_hash(canonical)


# ── Validation output ────────────────────────────────────


class Violation(_FrozenModel):
    mandate_id: str
    severity: Severity
    message: str
    kind: ViolationKind


class ComplianceReport(_FrozenModel):
    """Score and violations for one artifact. Created fresh per call."""
    score: int = Field(..., ge=0, le=100)
    violations: tuple[Violation, ...] = ()
    passed: bool

    @property
    def critical_violations(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity is Severity.CRITICAL)

    def count_by_severity(self) -> dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for violation in self.violations:
            counts[violation.severity] += 1
        return counts


class PipelineResult(_FrozenModel):
    category: str
    mandates: tuple[Mandate, ...] = ()
    report: ComplianceReport
    rules_fingerprint: str = ""
