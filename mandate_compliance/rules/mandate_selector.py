"""
Mandate Selector — picks the mandates that apply to a request.

Always-on mandates are always selected; the rest are triggered by keywords
in the feature text. The request category never removes a mandate, so a
DEBUG request touching login code still gets the password mandates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mandate_compliance.models.schemas import Mandate

logger = logging.getLogger(__name__)


def is_triggered(mandate: Mandate, feature_text_lower: str) -> bool:
    if mandate.always_on:
        return True
    return any(k.lower() in feature_text_lower for k in mandate.trigger_keywords)


def sort_by_severity(mandates: Sequence[Mandate]) -> tuple[Mandate, ...]:
    """CRITICAL first, then HIGH, MEDIUM, LOW; ties keep input order."""
    return tuple(sorted(mandates, key=lambda m: m.severity.rank))


def select_mandates(
    category: str,
    feature_text: str,
    all_mandates: Sequence[Mandate],
) -> tuple[Mandate, ...]:
    """
    Return the applicable mandates, deduplicated by id and ordered by
    severity. `category` is accepted for future category-specific
    filtering but does not exclude anything today.
    """
    text_lower = feature_text.lower()
    selected: list[Mandate] = []
    seen: set[str] = set()

    for mandate in all_mandates:
        if mandate.id in seen:
            continue
        if is_triggered(mandate, text_lower):
            seen.add(mandate.id)
            selected.append(mandate)

    result = sort_by_severity(selected)
    logger.debug(
        f"[MandateSelector] category={category} selected "
        f"{len(result)}/{len(all_mandates)}: {[m.id for m in result]}"
    )
    return result
