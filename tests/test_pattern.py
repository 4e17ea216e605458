"""Tests for compiling signatures into patterns."""

from __future__ import annotations

import pytest

import pattern as binmatch
from pattern import (
    IGNORE,
    PLACEHOLDER,
    BinmatchError,
    Literal,
    Pattern,
    PatternLengthError,
    PatternParseError,
    PatternValueError,
)


def test_compile_produces_elements_in_order() -> None:
    p = binmatch.compile("00 __ 00 ??")
    assert p.elements == (Literal(0x00), IGNORE, Literal(0x00), PLACEHOLDER)
    assert p.len() == 4
    assert len(p) == 4
    assert not p.is_empty()


def test_compile_is_case_insensitive() -> None:
    assert binmatch.compile("de ad BE eF") == binmatch.compile("DEADBEEF")
    assert binmatch.compile("de ad").elements == (Literal(0xDE), Literal(0xAD))


@pytest.mark.parametrize("text", ["DEADBEEF", "DE AD BE EF", "  de adbe  ef ", "0123456789abcdef"])
def test_hex_only_signatures_have_one_element_per_pair(text: str) -> None:
    p = binmatch.compile(text)
    assert p.len() * 2 == len(text.replace(" ", ""))


def test_spaces_may_split_a_token() -> None:
    assert binmatch.compile("0 0").elements == (Literal(0x00),)
    assert binmatch.compile("? ?_ _").elements == (PLACEHOLDER, IGNORE)


@pytest.mark.parametrize("text", ["0", "000", " 0 0 0 ", "??_", "ABC"])
def test_odd_length_is_rejected(text: str) -> None:
    with pytest.raises(PatternLengthError):
        binmatch.compile(text)


def test_length_is_checked_before_alphabet() -> None:
    with pytest.raises(PatternLengthError):
        binmatch.compile("ZZZ")


@pytest.mark.parametrize(
    "text, char",
    [
        ("00G1", "G"),
        ("00 11 zz", "Z"),
        ("xy", "X"),
        ("0-", "-"),
        ("?AG0", "G"),
        ("00\t1", "\t"),
    ],
)
def test_first_invalid_character_is_reported(text: str, char: str) -> None:
    with pytest.raises(PatternParseError) as excinfo:
        binmatch.compile(text)
    assert excinfo.value.char == char
    assert char in str(excinfo.value)


@pytest.mark.parametrize("text, chunk", [("00 ?A", "?A"), ("_5", "_5"), ("A? 00", "A?"), ("?_", "?_"), ("5_", "5_")])
def test_mixed_wildcard_chunks_are_rejected(text: str, chunk: str) -> None:
    with pytest.raises(PatternValueError) as excinfo:
        binmatch.compile(text)
    assert excinfo.value.chunk == chunk


def test_mixed_chunk_alignment_follows_stripped_text() -> None:
    # "0? ?0" strips to "0??0", which splits into "0?" and "?0"
    with pytest.raises(PatternValueError):
        binmatch.compile("0? ?0")


def test_errors_share_a_base_class() -> None:
    for text in ["0", "GG", "?A"]:
        with pytest.raises(BinmatchError):
            binmatch.compile(text)
        with pytest.raises(ValueError):
            binmatch.compile(text)


def test_compile_unchecked_matches_compile_on_valid_input() -> None:
    for text in ["00 __ 00 ??", "deadbeef", "", "?? ?? __"]:
        assert binmatch.compile_unchecked(text) == binmatch.compile(text)


@pytest.mark.parametrize("text", ["0", "ZZ", "?A"])
def test_compile_unchecked_fails_hard(text: str) -> None:
    with pytest.raises(AssertionError):
        binmatch.compile_unchecked(text)


def test_pattern_constructors() -> None:
    assert Pattern.new("00 ??") == binmatch.compile("00??")
    assert Pattern.new_unchecked("00 ??") == binmatch.compile("00??")
    with pytest.raises(PatternLengthError):
        Pattern.new("0")


def test_empty_signature_gives_empty_pattern() -> None:
    for text in ["", "   "]:
        p = binmatch.compile(text)
        assert p.len() == 0
        assert p.is_empty()
        assert p == Pattern()


def test_str_gives_canonical_signature() -> None:
    p = binmatch.compile("de ad __ ??")
    assert str(p) == "DE AD __ ??"
    assert repr(p) == "Pattern('DE AD __ ??')"
    assert binmatch.compile(str(p)) == p


def test_patterns_are_hashable_values() -> None:
    a = binmatch.compile("00 ??")
    b = binmatch.compile("00??")
    c = binmatch.compile("00 __")
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2
    assert a != "00 ??"


def test_patterns_sort_by_elements() -> None:
    a = binmatch.compile("01")
    b = binmatch.compile("02")
    placeholder = binmatch.compile("??")
    ignore = binmatch.compile("__")
    assert a < b
    assert b < placeholder < ignore
    assert binmatch.compile("01") < binmatch.compile("01 00")
    assert Pattern() < a
    assert a <= binmatch.compile("01")
    assert sorted([ignore, b, placeholder, a]) == [a, b, placeholder, ignore]
