# pylint: disable=missing-docstring
import re

import pytest

from catalogprep.filter.exceptions import (
    FilterConfigurationError,
    InvalidPatternError,
    InvalidRuleDefinitionError,
    UnknownTargetError,
)
from catalogprep.filter.rule import FilterRule, Target
from catalogprep.filter.template import RewriteTemplate


@pytest.fixture(name="rule_definition")
def fixture_rule_definition():
    return {"pattern": r"^cpu\.(.+)", "target": "metric", "rewrite": "cpu_$1"}


class TestTarget:
    @pytest.mark.parametrize(
        "target, expected",
        [
            (Target.ANY, ("origin", "source", "metric")),
            (Target.ORIGIN, ("origin",)),
            (Target.SOURCE, ("source",)),
            (Target.METRIC, ("metric",)),
        ],
    )
    def test_fields(self, target, expected):
        assert target.fields == expected


class TestFilterRule:
    def test_from_dict_compiles_pattern(self, rule_definition):
        rule = FilterRule.from_dict(rule_definition)
        assert isinstance(rule.compiled_pattern, re.Pattern)
        assert rule.compiled_pattern.pattern == r"\Acpu\.(.+)"
        assert rule.pattern == r"^cpu\.(.+)"

    def test_from_dict_sets_fields(self, rule_definition):
        rule = FilterRule.from_dict(rule_definition)
        assert rule.target is Target.METRIC
        assert rule.fields == ("metric",)
        assert rule.rewrite == RewriteTemplate(template="cpu_$1")
        assert not rule.discard

    @pytest.mark.parametrize(
        "testcase, definition",
        [
            ("missing target", {"pattern": "a"}),
            ("empty target", {"pattern": "a", "target": ""}),
            ("null target", {"pattern": "a", "target": None}),
        ],
    )
    def test_target_defaults_to_any(self, testcase, definition):
        assert FilterRule.from_dict(definition).target is Target.ANY, testcase

    def test_defaults(self):
        rule = FilterRule.from_dict({"pattern": "a"})
        assert rule.discard is False
        assert rule.rewrite.template == ""

    def test_null_rewrite_is_empty_template(self):
        rule = FilterRule.from_dict({"pattern": "a", "rewrite": None})
        assert rule.rewrite.template == ""

    def test_keys_are_case_insensitive(self):
        rule = FilterRule.from_dict(
            {"Pattern": "^test$", "Target": "origin", "Discard": True, "Rewrite": "x"}
        )
        assert rule.pattern == "^test$"
        assert rule.target is Target.ORIGIN
        assert rule.discard

    def test_rule_is_immutable(self, rule_definition):
        rule = FilterRule.from_dict(rule_definition)
        with pytest.raises(AttributeError):
            rule.pattern = "other"

    def test_from_dict_does_not_modify_definition(self, rule_definition):
        FilterRule.from_dict(rule_definition)
        assert rule_definition == {
            "pattern": r"^cpu\.(.+)",
            "target": "metric",
            "rewrite": "cpu_$1",
        }

    @pytest.mark.parametrize("target", ["hostname", "ANY", "Origin", "metrics"])
    def test_unknown_target_raises(self, target):
        with pytest.raises(UnknownTargetError, match=f"unknown `{target}' filter target"):
            FilterRule.from_dict({"pattern": "a", "target": target})

    @pytest.mark.parametrize(
        "pattern",
        ["(unclosed", "[a-", "*a", "a{2,1}", r"(a)\1", "a(?=b)", "(?<!a)b", "a*+", "(?x)a"],
    )
    def test_invalid_pattern_raises(self, pattern):
        with pytest.raises(InvalidPatternError, match="unable to compile filter pattern"):
            FilterRule.from_dict({"pattern": pattern})

    def test_target_is_checked_before_pattern(self):
        with pytest.raises(UnknownTargetError):
            FilterRule.from_dict({"pattern": "(unclosed", "target": "hostname"})

    @pytest.mark.parametrize(
        "testcase, definition",
        [
            ("no mapping", ["pattern", "a"]),
            ("no pattern", {"target": "origin"}),
            ("unknown key", {"pattern": "a", "drop": True}),
            ("non string key", {"pattern": "a", 1: True}),
            ("pattern is no string", {"pattern": 1}),
            ("target is no string", {"pattern": "a", "target": 1}),
            ("discard is no bool", {"pattern": "a", "discard": "yes"}),
            ("rewrite is no string", {"pattern": "a", "rewrite": 1}),
        ],
    )
    def test_invalid_definition_raises(self, testcase, definition):
        with pytest.raises(InvalidRuleDefinitionError):
            FilterRule.from_dict(definition)

    def test_all_errors_are_configuration_errors(self):
        for error in (UnknownTargetError, InvalidPatternError, InvalidRuleDefinitionError):
            assert issubclass(error, FilterConfigurationError)

    @pytest.mark.parametrize(
        "testcase, other_definition, is_equal",
        [
            ("same definition", {"pattern": "a", "target": "source", "rewrite": "b"}, True),
            ("other pattern", {"pattern": "c", "target": "source", "rewrite": "b"}, False),
            ("other target", {"pattern": "a", "target": "metric", "rewrite": "b"}, False),
            ("other rewrite", {"pattern": "a", "target": "source", "rewrite": "c"}, False),
            (
                "discard",
                {"pattern": "a", "target": "source", "rewrite": "b", "discard": True},
                False,
            ),
        ],
    )
    def test_rules_equality(self, testcase, other_definition, is_equal):
        rule = FilterRule.from_dict({"pattern": "a", "target": "source", "rewrite": "b"})
        other_rule = FilterRule.from_dict(other_definition)
        assert (rule == other_rule) == is_equal, testcase
