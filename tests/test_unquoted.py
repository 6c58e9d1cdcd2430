"""Tests for unquoted strings (bare identifiers)."""

import pytest

from bricks.unquoted import (
    InvalidUnquotedString,
    UnquotedString,
    is_bare_identifier_char,
    is_bare_identifier_name,
    make_unquoted,
)


class TestBareIdentifiers:
    @pytest.mark.parametrize("text", ["a", "abc", "a-b", "snake_case", "-", "ünïcode"])
    def test_valid_names(self, text: str) -> None:
        assert is_bare_identifier_name(text)
        assert make_unquoted(text).text == text

    @pytest.mark.parametrize("text", ["", "a b", "a1", "a.b", "a'b", "x\n"])
    def test_invalid_names(self, text: str) -> None:
        assert not is_bare_identifier_name(text)

    @pytest.mark.parametrize("text", ["rec", "let", "in", "inherit"])
    def test_keywords_are_not_bare(self, text: str) -> None:
        assert not is_bare_identifier_name(text)

    def test_identifier_chars(self) -> None:
        assert is_bare_identifier_char("x")
        assert is_bare_identifier_char("-")
        assert is_bare_identifier_char("_")
        assert not is_bare_identifier_char("1")
        assert not is_bare_identifier_char(" ")


class TestInvalidUnquotedString:
    def test_empty(self) -> None:
        with pytest.raises(InvalidUnquotedString) as exc:
            UnquotedString("")
        assert exc.value.text == ""
        assert exc.value.reason == "empty"

    def test_illegal_character(self) -> None:
        with pytest.raises(InvalidUnquotedString) as exc:
            make_unquoted("a b")
        assert exc.value.reason == "illegal character ' '"

    def test_keyword(self) -> None:
        with pytest.raises(InvalidUnquotedString) as exc:
            make_unquoted("inherit")
        assert exc.value.reason == "reserved keyword"

    def test_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            make_unquoted("1")
