"""
Tests: Rule store, request classifier and mandate selector.

Run with:
    pytest mandate_compliance/tests/test_rules.py -v
"""

import json

import pytest
from pydantic import ValidationError

from mandate_compliance.config import Settings
from mandate_compliance.models.enums import RequestCategory, Severity
from mandate_compliance.models.schemas import Mandate, RequestClassificationRule
from mandate_compliance.rules.classifier import EMPTY_INPUT, classify
from mandate_compliance.rules.defaults import DEFAULT_CLASSIFICATION_RULES, DEFAULT_MANDATES
from mandate_compliance.rules.mandate_selector import select_mandates
from mandate_compliance.rules.rules_config import (
    ConfigError,
    RuleStore,
    build_rule_tables,
    load_classification_rules,
    load_mandates,
)


def _mandate(mandate_id, severity="MEDIUM", triggers=(), patterns=(), tokens=("ref",)):
    return {
        "id": mandate_id,
        "description": f"{mandate_id} description",
        "severity": severity,
        "trigger_keywords": list(triggers),
        "violation_patterns": list(patterns),
        "required_reference_tokens": list(tokens),
    }


@pytest.fixture(scope="module")
def mandates():
    return load_mandates()


@pytest.fixture(scope="module")
def rules():
    return load_classification_rules()


class TestLoadMandates:
    def test_builtin_table_loads(self, mandates):
        assert len(mandates) == len(DEFAULT_MANDATES)
        assert len({m.id for m in mandates}) == len(mandates)

    def test_duplicate_id_rejected(self):
        with pytest.raises(ConfigError, match="Duplicate mandate id"):
            load_mandates([_mandate("dup"), _mandate("dup", severity="LOW")])

    def test_untestable_critical_rejected(self):
        with pytest.raises(ConfigError, match="needs violation_patterns"):
            load_mandates([_mandate("empty_critical", severity="CRITICAL", tokens=())])

    def test_critical_with_patterns_only_accepted(self):
        loaded = load_mandates([
            _mandate("anti_only", severity="CRITICAL", patterns=("plaintext",), tokens=()),
        ])
        assert loaded[0].violation_patterns == ("plaintext",)

    def test_untestable_low_mandate_allowed(self):
        loaded = load_mandates([_mandate("advisory", severity="LOW", tokens=())])
        assert loaded[0].required_reference_tokens == ()

    def test_severity_is_case_insensitive(self):
        loaded = load_mandates([_mandate("m1", severity="high")])
        assert loaded[0].severity is Severity.HIGH

    def test_unknown_severity_rejected(self):
        with pytest.raises(ConfigError):
            load_mandates([_mandate("m1", severity="URGENT")])

    def test_invalid_regex_rejected(self):
        with pytest.raises(ConfigError, match="invalid regular expression"):
            load_mandates([_mandate("bad_regex", patterns=("re:(unclosed",))])

    def test_blank_keyword_rejected(self):
        with pytest.raises(ConfigError):
            load_mandates([_mandate("blank", triggers=("  ",))])

    def test_unknown_key_rejected(self):
        # A misspelled field must not load as a mandate that can never fire
        with pytest.raises(ConfigError, match="violationPattern"):
            load_mandates([
                {"id": "no_eval", "severity": "HIGH", "violationPattern": ["eval("]},
            ])

    def test_missing_severity_rejected(self):
        with pytest.raises(ConfigError, match="severity"):
            load_mandates([{"id": "m", "required_reference_tokens": ["x"]}])

    def test_empty_table_rejected(self):
        with pytest.raises(ConfigError, match="empty"):
            load_mandates([])

    def test_non_mapping_record_rejected(self):
        with pytest.raises(ConfigError, match="expected a mapping"):
            load_mandates(["password_hashing"])

    def test_camel_case_keys_accepted(self):
        loaded = load_mandates([{
            "id": "camel",
            "severity": "HIGH",
            "triggerKeywords": ["auth"],
            "violationPatterns": [],
            "requiredReferenceTokens": ["bcrypt"],
        }])
        assert loaded[0].trigger_keywords == ("auth",)
        assert loaded[0].required_reference_tokens == ("bcrypt",)

    def test_model_instances_pass_through(self):
        m = Mandate(id="ready", severity=Severity.LOW, required_reference_tokens=("x",))
        assert load_mandates([m]) == (m,)

    def test_records_are_immutable(self, mandates):
        assert isinstance(mandates, tuple)
        assert isinstance(mandates[0].trigger_keywords, tuple)
        with pytest.raises(ValidationError):
            mandates[0].severity = Severity.LOW


class TestLoadFromFile:
    def test_json_list(self, tmp_path):
        path = tmp_path / "mandates.json"
        path.write_text(json.dumps([_mandate("from_file")]), encoding="utf-8")
        loaded = load_mandates(path)
        assert [m.id for m in loaded] == ["from_file"]

    def test_json_object_with_key(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps({"classification_rules": DEFAULT_CLASSIFICATION_RULES}),
            encoding="utf-8",
        )
        assert len(load_classification_rules(str(path))) == len(DEFAULT_CLASSIFICATION_RULES)

    def test_object_without_key_rejected(self, tmp_path):
        path = tmp_path / "mandates.json"
        path.write_text(json.dumps({"rules": []}), encoding="utf-8")
        with pytest.raises(ConfigError, match="'mandates' key"):
            load_mandates(path)

    def test_malformed_json_rejected(self, tmp_path):
        path = tmp_path / "mandates.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_mandates(path)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_mandates(tmp_path / "missing.json")


class TestLoadClassificationRules:
    def test_builtin_table_loads(self, rules):
        assert rules[-1].is_catch_all
        assert rules[-1].category == RequestCategory.NEW_FEATURE.value

    def test_missing_catch_all_rejected(self):
        with pytest.raises(ConfigError, match="no catch-all"):
            load_classification_rules([
                {"category": "DEBUG", "keywords": ["fix"], "priority": 1},
            ])

    def test_catch_all_must_be_evaluated_last(self):
        with pytest.raises(ConfigError, match="single highest priority"):
            load_classification_rules([
                {"category": "NEW_FEATURE", "keywords": [], "priority": 5},
                {"category": "DEBUG", "keywords": ["fix"], "priority": 10},
            ])

    def test_catch_all_cannot_share_highest_priority(self):
        with pytest.raises(ConfigError, match="single highest priority"):
            load_classification_rules([
                {"category": "DEBUG", "keywords": ["fix"], "priority": 10},
                {"category": "NEW_FEATURE", "keywords": [], "priority": 10},
            ])

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigError):
            load_classification_rules([
                {"category": "DEBUG", "keyword": ["fix"], "priority": 1},
                {"category": "OTHER", "keywords": [], "priority": 2},
            ])

    def test_keywords_are_lowercased(self):
        loaded = load_classification_rules([
            {"category": "DEBUG", "keywords": ["FIX"], "priority": 1},
            {"category": "OTHER", "keywords": [], "priority": 2},
        ])
        assert loaded[0].keywords == ("fix",)


class TestRuleStore:
    def test_defaults_when_no_paths(self):
        tables = RuleStore(Settings()).load()
        assert len(tables.mandates) == len(DEFAULT_MANDATES)

    def test_configured_file_is_used(self, tmp_path):
        path = tmp_path / "mandates.json"
        path.write_text(json.dumps({"mandates": [_mandate("only_one")]}), encoding="utf-8")
        tables = RuleStore(Settings(mandates_path=str(path))).load()
        assert [m.id for m in tables.mandates] == ["only_one"]

    def test_bad_file_raises_config_error(self, tmp_path):
        settings = Settings(classification_rules_path=str(tmp_path / "nope.json"))
        with pytest.raises(ConfigError):
            RuleStore(settings).load()

    def test_fingerprint_is_stable(self):
        assert build_rule_tables().fingerprint == build_rule_tables().fingerprint

    def test_fingerprint_tracks_content(self):
        changed = [dict(m) for m in DEFAULT_MANDATES]
        changed[0] = {**changed[0], "description": "edited"}
        assert build_rule_tables(changed).fingerprint != build_rule_tables().fingerprint


class TestClassifier:
    def test_empty_input(self, rules):
        assert classify("", rules) == EMPTY_INPUT
        assert classify("   \n\t", rules) == EMPTY_INPUT

    def test_empty_input_does_not_consult_rules(self):
        assert classify("  ", []) == EMPTY_INPUT

    def test_new_feature_request(self, rules):
        assert classify("I need authentication", rules) == "NEW_FEATURE"

    def test_debug_request(self, rules):
        assert classify("fix the login bug", rules) == "DEBUG"

    def test_input_is_case_insensitive_and_trimmed(self, rules):
        assert classify("   REFACTOR the payments module  ", rules) == "REFACTOR"

    def test_lower_priority_number_wins(self, rules):
        # "fix" (DEBUG, 20) and "vulnerab" (SECURITY, 10) both match
        assert classify("fix the XSS vulnerability", rules) == "SECURITY"

    def test_fix_inside_a_word_is_not_debug(self, rules):
        assert classify("add a prefix search box", rules) == "NEW_FEATURE"

    def test_evaluation_follows_priority_not_table_order(self, rules):
        reversed_rules = tuple(reversed(rules))
        assert classify("fix the XSS vulnerability", reversed_rules) == "SECURITY"

    def test_equal_priorities_keep_table_order(self):
        table = load_classification_rules([
            {"category": "FIRST", "keywords": ["report"], "priority": 1},
            {"category": "SECOND", "keywords": ["report"], "priority": 1},
            {"category": "DEFAULT", "keywords": [], "priority": 9},
        ])
        assert classify("weekly report", table) == "FIRST"

    @pytest.mark.parametrize("text", [
        "x",
        "add a dark mode toggle",
        "¿dónde está el botón?",
        "1234567890",
        "the page is slow to load",
        "write tests for the parser",
    ])
    def test_classification_is_total(self, rules, text):
        categories = {r.category for r in rules}
        result = classify(text, rules)
        assert result is not None
        assert result in categories

    def test_table_without_catch_all_raises(self):
        rule = RequestClassificationRule(category="DEBUG", keywords=("fix",), priority=1)
        with pytest.raises(ValueError):
            classify("hello", [rule])


class TestMandateSelector:
    def test_always_on_mandates_selected(self, mandates):
        selected = select_mandates("DEBUG", "fix a typo", mandates)
        always_on = {m.id for m in mandates if m.always_on}
        assert {m.id for m in selected} == always_on

    def test_authentication_triggers_auth_mandates(self, mandates):
        ids = {m.id for m in select_mandates("NEW_FEATURE", "I need authentication", mandates)}
        assert {"password_hashing", "session_security", "rate_limiting"} <= ids
        assert "payment_data_protection" not in ids

    def test_trigger_match_is_case_insensitive(self, mandates):
        ids = {m.id for m in select_mandates("NEW_FEATURE", "Add CHECKOUT flow", mandates)}
        assert "payment_data_protection" in ids

    def test_auth_and_api_inside_words_do_not_trigger(self, mandates):
        ids = {m.id for m in select_mandates("NEW_FEATURE", "capitalize author names rapidly", mandates)}
        assert ids == {m.id for m in mandates if m.always_on}

    def test_category_never_excludes(self, mandates):
        ids = {m.id for m in select_mandates("DEBUG", "fix the login bug", mandates)}
        assert "password_hashing" in ids

    def test_ordered_critical_first_stable(self):
        table = load_mandates([
            _mandate("low_a", "LOW"),
            _mandate("crit_a", "CRITICAL"),
            _mandate("high_a", "HIGH"),
            _mandate("crit_b", "CRITICAL"),
            _mandate("medium_a", "MEDIUM"),
            _mandate("high_b", "HIGH"),
        ])
        selected = select_mandates("NEW_FEATURE", "anything", table)
        assert [m.id for m in selected] == [
            "crit_a", "crit_b", "high_a", "high_b", "medium_a", "low_a",
        ]

    def test_deduplicated_by_id(self):
        m = Mandate(id="once", severity=Severity.HIGH, required_reference_tokens=("x",))
        assert select_mandates("NEW_FEATURE", "text", [m, m]) == (m,)

    def test_untriggered_mandates_excluded(self):
        table = load_mandates([_mandate("uploads", triggers=("upload",))])
        assert select_mandates("NEW_FEATURE", "add a search box", table) == ()
