"""
Rule Store — loads and validates the mandate and classification tables.

Tables are built once at startup and are read-only afterwards.
Any defect in a table raises ConfigError, which should abort startup.
Falls back to the built-in tables in rules/defaults.py when no rule file
is configured.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ValidationError

from mandate_compliance.config import Settings, get_settings
from mandate_compliance.models.schemas import (
    Mandate,
    RequestClassificationRule,
    RuleTables,
)
from mandate_compliance.rules.defaults import (
    DEFAULT_CLASSIFICATION_RULES,
    DEFAULT_MANDATES,
)

logger = logging.getLogger(__name__)

RuleSource = Union[None, str, Path, Iterable[Union[Mapping[str, Any], BaseModel]]]


class ConfigError(ValueError):
    """Malformed static rule configuration. Fatal at startup."""


# ── Parsing helpers ──────────────────────────────────────

def _read_json_records(path: Path, key: str) -> list[Any]:
    """Read a rule file holding either a list or {key: [...]}."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read rule file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Rule file {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        if key not in data:
            raise ConfigError(f"Rule file {path} has no '{key}' key")
        data = data[key]
    if not isinstance(data, list):
        raise ConfigError(f"Rule file {path}: expected a list of {key} records")
    return data


def _resolve_records(source: RuleSource, key: str, defaults: list[dict[str, Any]]) -> list[Any]:
    if source is None:
        return list(defaults)
    if isinstance(source, (str, Path)):
        return _read_json_records(Path(source), key)
    if isinstance(source, Mapping):
        raise ConfigError(f"Expected a sequence of {key} records, got a single mapping")
    return list(source)


def _parse(model_cls: type[BaseModel], record: Any, index: int) -> Any:
    if isinstance(record, model_cls):
        return record
    if isinstance(record, BaseModel):
        record = record.model_dump()
    if not isinstance(record, Mapping):
        raise ConfigError(
            f"{model_cls.__name__} #{index}: expected a mapping, got {type(record).__name__}"
        )
    try:
        return model_cls.model_validate(dict(record))
    except ValidationError as e:
        raise ConfigError(f"{model_cls.__name__} #{index} is invalid: {e}") from e


# ── Public loaders ───────────────────────────────────────

def load_mandates(source: RuleSource = None) -> tuple[Mandate, ...]:
    """
    Parse mandate definitions into validated, immutable records.

    source: None (built-in table), a path to a JSON file, or an iterable
    of dicts / Mandate instances.
    Raises ConfigError on duplicate ids, untestable CRITICAL mandates
    or any malformed record.
    """
    records = _resolve_records(source, "mandates", DEFAULT_MANDATES)
    if not records:
        raise ConfigError("Mandate table is empty")

    mandates: list[Mandate] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        mandate = _parse(Mandate, record, index)
        if mandate.id in seen:
            raise ConfigError(f"Duplicate mandate id: '{mandate.id}'")
        seen.add(mandate.id)
        mandates.append(mandate)

    logger.debug(f"[RuleStore] Loaded {len(mandates)} mandates")
    return tuple(mandates)


def load_classification_rules(source: RuleSource = None) -> tuple[RequestClassificationRule, ...]:
    """
    Parse classification rules and check the catch-all invariant:
    a rule with no keywords must exist and must hold the single highest
    priority number, so it is evaluated last.
    """
    records = _resolve_records(source, "classification_rules", DEFAULT_CLASSIFICATION_RULES)
    if not records:
        raise ConfigError("Classification rule table is empty")

    rules = tuple(
        _parse(RequestClassificationRule, record, index)
        for index, record in enumerate(records)
    )

    catch_alls = [r for r in rules if r.is_catch_all]
    if not catch_alls:
        raise ConfigError("Classification rules have no catch-all rule (a rule with no keywords)")

    highest = max(r.priority for r in rules)
    at_highest = [r for r in rules if r.priority == highest]
    if len(at_highest) != 1 or not at_highest[0].is_catch_all:
        raise ConfigError(
            f"The catch-all rule must hold the single highest priority; "
            f"found {[r.category for r in at_highest]} at priority {highest}"
        )

    logger.debug(f"[RuleStore] Loaded {len(rules)} classification rules")
    return rules


def build_rule_tables(
    mandates_source: RuleSource = None,
    rules_source: RuleSource = None,
) -> RuleTables:
    """Load both tables and bundle them into one immutable value."""
    return RuleTables(
        mandates=load_mandates(mandates_source),
        classification_rules=load_classification_rules(rules_source),
    )


# ── Store class ──────────────────────────────────────────

class RuleStore:
    """
    Builds RuleTables from Settings: configured JSON files when set,
    otherwise the built-in tables.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def load(self) -> RuleTables:
        mandates_source = self.settings.mandates_path or None
        rules_source = self.settings.classification_rules_path or None

        try:
            tables = build_rule_tables(mandates_source, rules_source)
        except ConfigError as e:
            logger.error(f"[RuleStore] Rule configuration rejected: {e}")
            raise

        logger.info(
            f"[RuleStore] {len(tables.mandates)} mandates "
            f"({mandates_source or 'built-in'}), "
            f"{len(tables.classification_rules)} classification rules "
            f"({rules_source or 'built-in'}), fingerprint={tables.fingerprint[:12]}"
        )
        return tables


@lru_cache()
def get_rule_tables() -> RuleTables:
    """Return the process-wide rule tables (loaded once)."""
    return RuleStore().load()
