"""
Request Classifier — maps free text to exactly one request category.

Rules are data: an ordered list of (keywords, category) pairs evaluated
linearly by priority. The catch-all rule guarantees a result for any
non-empty input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mandate_compliance.models.enums import RequestCategory
from mandate_compliance.models.schemas import RequestClassificationRule

logger = logging.getLogger(__name__)

EMPTY_INPUT = RequestCategory.EMPTY_INPUT.value


def order_rules(
    rules: Sequence[RequestClassificationRule],
) -> list[RequestClassificationRule]:
    """Ascending priority; equal priorities keep table order."""
    return sorted(rules, key=lambda r: r.priority)


def classify(raw_input: str, rules: Sequence[RequestClassificationRule]) -> str:
    """
    Return the category of the first rule (by priority) whose keywords
    hit the lowercased input. Blank input returns EMPTY_INPUT without
    looking at the rules.
    """
    text = raw_input.strip().lower()
    if not text:
        logger.warning("[Classifier] Blank request, returning EMPTY_INPUT")
        return EMPTY_INPUT

    for rule in order_rules(rules):
        if rule.is_catch_all:
            logger.debug(f"[Classifier] No keyword hit, catch-all → {rule.category}")
            return rule.category
        for keyword in rule.keywords:
            if keyword in text:
                logger.debug(f"[Classifier] '{keyword}' → {rule.category}")
                return rule.category

    # Only reachable with a table that bypassed load_classification_rules()
    raise ValueError("Classification rules have no catch-all rule")
