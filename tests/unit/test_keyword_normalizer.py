"""Tests for keyword normalization across every supported encoding."""

import pytest

from trends_gateway.services.keyword_normalizer import normalize_keywords


class TestDefaults:
    def test_none_returns_default(self):
        assert normalize_keywords(None) == ["AI"]

    def test_empty_list_returns_default(self):
        assert normalize_keywords([]) == ["AI"]

    @pytest.mark.parametrize("value", ["", "   ", ",", " ; ", "[]", "[ , ]"])
    def test_blank_strings_return_default(self, value):
        assert normalize_keywords(value) == ["AI"]

    def test_list_of_blanks_returns_default(self):
        assert normalize_keywords(["", "  "]) == ["AI"]

    def test_custom_default(self):
        assert normalize_keywords(None, default="python") == ["python"]


class TestSequences:
    def test_list_is_kept_in_order_and_trimmed(self):
        assert normalize_keywords([" b ", "a", "c "]) == ["b", "a", "c"]

    def test_empty_elements_dropped(self):
        assert normalize_keywords(["a", "", "  ", "b"]) == ["a", "b"]

    def test_list_elements_are_not_split(self):
        assert normalize_keywords(["a,b", "c"]) == ["a,b", "c"]

    def test_tuple_accepted(self):
        assert normalize_keywords(("x", "y")) == ["x", "y"]


class TestDelimitedStrings:
    def test_plain_string(self):
        assert normalize_keywords("  artificial intelligence ") == ["artificial intelligence"]

    def test_comma(self):
        assert normalize_keywords("a, b ,c") == ["a", "b", "c"]

    def test_pipe(self):
        assert normalize_keywords("a | b|c") == ["a", "b", "c"]

    def test_semicolon(self):
        assert normalize_keywords("a; b;c") == ["a", "b", "c"]

    def test_comma_takes_priority_over_pipe(self):
        assert normalize_keywords("a|b,c") == ["a|b", "c"]

    def test_pipe_takes_priority_over_semicolon(self):
        assert normalize_keywords("a;b|c") == ["a;b", "c"]

    def test_empty_segments_dropped(self):
        assert normalize_keywords("a,,b,") == ["a", "b"]


class TestBracketedStrings:
    def test_json_list(self):
        assert normalize_keywords('["x","y"]') == ["x", "y"]

    def test_json_list_with_whitespace(self):
        assert normalize_keywords('  [" x ", "y z"]  ') == ["x", "y z"]

    def test_json_list_non_string_elements(self):
        assert normalize_keywords("[1, 2.5]") == ["1", "2.5"]

    def test_unquoted_interior_falls_back_to_comma_split(self):
        assert normalize_keywords("[x, y]") == ["x", "y"]

    def test_single_quoted_interior(self):
        assert normalize_keywords("['x', 'y']") == ["x", "y"]

    def test_json_non_list_falls_back_to_interior(self):
        # Valid JSON only as a list; anything else is read as delimited text.
        assert normalize_keywords("[x]") == ["x"]

    def test_bracketed_pipe_list_is_not_split_on_pipe(self):
        assert normalize_keywords("[a|b]") == ["a|b"]

    def test_unbalanced_bracket_uses_delimiters(self):
        assert normalize_keywords("[a,b") == ["[a", "b"]

    def test_deeply_nested_brackets_fall_back_to_interior(self):
        value = "[" * 100000 + "]" * 100000

        keywords = normalize_keywords(value)

        assert keywords == ["[" * 99999 + "]" * 99999]


class TestPurity:
    def test_same_input_same_output(self):
        value = '["x","y"]'
        assert normalize_keywords(value) == normalize_keywords(value)

    def test_input_list_not_mutated(self):
        value = [" a ", ""]
        normalize_keywords(value)
        assert value == [" a ", ""]
