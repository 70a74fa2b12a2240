# pylint: disable=missing-docstring
import pytest

from catalogprep.filter.exceptions import InvalidPatternError
from catalogprep.filter.pattern import compile_pattern, replace_all, translate


class TestTranslate:
    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("^a$", r"\Aa\Z"),
            (r"\d", "[0-9]"),
            (r"[\d_]", "[0-9_]"),
            ("[[:xdigit:]]", "[0-9A-Fa-f]"),
            ("[]a]", r"[\]a]"),
            (r"a\z", r"a\Z"),
            ("(?<name>a)", "(?P<name>a)"),
            ("(?m)^a$", r"(?m)(?:\A|(?<=\n))a(?:\Z|(?=\n))"),
            ("(?m:^a)$", r"(?m:(?:\A|(?<=\n))a)\Z"),
        ],
    )
    def test_translate(self, pattern, expected):
        assert translate(pattern) == expected

    @pytest.mark.parametrize(
        "pattern, reason",
        [
            (r"(a)\1", "backreferences are not supported"),
            ("(?P<x>a)(?P=x)", "backreferences are not supported"),
            ("a(?=b)", "lookahead assertions are not supported"),
            ("a(?!b)", "lookahead assertions are not supported"),
            ("(?<=a)b", "lookbehind assertions are not supported"),
            ("(?<!a)b", "lookbehind assertions are not supported"),
            ("(?(1)a|b)", "conditional groups are not supported"),
            ("(?>a)", "atomic groups are not supported"),
            ("a(?#comment)", "comments are not supported"),
            ("a*+", "invalid nested repetition operator"),
            ("a++", "invalid nested repetition operator"),
            ("(?x)a b", "unsupported flags"),
            ("[[:letters:]]", "invalid character class"),
        ],
    )
    def test_unsupported_constructs_are_rejected(self, pattern, reason):
        with pytest.raises(InvalidPatternError, match=reason):
            compile_pattern(pattern)

    def test_invalid_pattern_is_rejected(self):
        with pytest.raises(InvalidPatternError, match="unable to compile filter pattern `\\(a'"):
            compile_pattern("(a")


class TestMatching:
    @pytest.mark.parametrize(
        "pattern, value, matches",
        [
            (r"^cpu\d$", "cpu1", True),
            (r"^cpu\d$", "cpu١", False),
            (r"^\w+$", "hello_1", True),
            (r"^\w+$", "héllo", False),
            (r"^\W$", "é", True),
            (r"\bcpu", "écpu", True),
            (r"\Bcpu", "écpu", False),
            (r"\Bcpu", "xcpu", True),
            (r"a\sb", "a b", True),
            (r"a\sb", "a b", False),
            (r"^[\d]+$", "١٢", False),
            (r"^[^\d]+$", "١٢", True),
            (r"^[[:digit:]]+$", "123", True),
            (r"^[[:digit:]]+$", "١٢", False),
            ("^test$", "test", True),
            ("^test$", "test\n", False),
            ("^test$", "a\ntest\nb", False),
            ("(?m)^test$", "a\ntest\nb", True),
            ("(?m:^b$)", "a\nb", True),
            (r"test\z", "test\n", False),
            ("(?i)^TEST$", "test", True),
            ("a.b", "a\nb", False),
            ("(?s)a.b", "a\nb", True),
            ("[]a]", "]", True),
            ("(?<name>a)b", "ab", True),
        ],
    )
    def test_search(self, pattern, value, matches):
        assert (compile_pattern(pattern).search(value) is not None) is matches


class TestReplaceAll:
    @pytest.mark.parametrize(
        "pattern, value, replacement, expected",
        [
            ("a*", "baac", "-", "-b-c-"),
            ("b*", "abc", "-", "-a-c-"),
            ("x*", "abc", "-", "-a-b-c-"),
            ("", "ab", "-", "-a-b-"),
            (r"\d", "a1b2", "<>", "a<>b<>"),
            ("^", "abc", "-", "-abc"),
            ("$", "abc\n", "-", "abc\n-"),
            ("never", "abc", "-", "abc"),
        ],
    )
    def test_replace_all(self, pattern, value, replacement, expected):
        compiled = compile_pattern(pattern)
        assert replace_all(compiled, value, lambda match: replacement) == expected

    def test_expand_gets_each_match(self):
        compiled = compile_pattern(r"(\d)")
        assert replace_all(compiled, "a1b2", lambda match: f"<{match.group(1)}>") == "a<1>b<2>"
