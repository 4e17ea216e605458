"""
Byte signatures with masks.

A signature is written as pairs of hex digits, `??` for a byte whose value
should be captured and `__` for a byte that is skipped:

    >>> from pattern import Pattern
    >>> p = Pattern.new("00 __ 00 ??")
    >>> p.find_matches(bytes([0x12, 0x13, 0x00, 0x14, 0x00, 0x42, 0x15]))
    [66]

Spaces are stripped before parsing, so they may appear anywhere.
"""

import enum
import functools
import logging
from collections import namedtuple

logger = logging.getLogger(__name__)


HEX_DIGITS = "0123456789ABCDEF"
ALLOWED_ALPHABET = HEX_DIGITS + "?" + "_" # ? captures a byte, _ ignores one

PLACEHOLDER_TOKEN = "??"
IGNORE_TOKEN = "__"


class BinmatchError(Exception):
    pass


class PatternParseError(BinmatchError, ValueError):
    def __init__(self, char):
        super().__init__("Invalid character in pattern [%s]" % char)
        self.char = char


class PatternLengthError(BinmatchError, ValueError):
    def __init__(self, length):
        super().__init__("Patterns should always be an even number of characters long (got %d)" % length)
        self.length = length


class PatternValueError(BinmatchError, ValueError):
    def __init__(self, chunk):
        super().__init__("Could not parse %r as a byte" % chunk)
        self.chunk = chunk


class ElementKind(enum.Enum):
    LITERAL = "literal"
    PLACEHOLDER = "placeholder"
    IGNORE = "ignore"


PatternElement = namedtuple("PatternElement", ["kind", "value"])

def Literal(value):
    assert(0 <= value <= 0xFF)
    return PatternElement(ElementKind.LITERAL, value)

PLACEHOLDER = PatternElement(ElementKind.PLACEHOLDER, None)
IGNORE = PatternElement(ElementKind.IGNORE, None)


def normalize(text):
    return text.replace(" ", "").upper()


def _compile(text):
    string = normalize(text)
    if len(string) % 2 != 0:
        raise PatternLengthError(len(string))
    for char in string:
        if char not in ALLOWED_ALPHABET:
            raise PatternParseError(char)

    data = []
    for i in range(0, len(string), 2):
        chunk = string[i:i+2]
        if chunk == PLACEHOLDER_TOKEN:
            data.append(PLACEHOLDER)
        elif chunk == IGNORE_TOKEN:
            data.append(IGNORE)
        else:
            # Mixed chunks like "?A" or "_5" end up here
            if chunk[0] not in HEX_DIGITS or chunk[1] not in HEX_DIGITS:
                raise PatternValueError(chunk)
            data.append(Literal(int(chunk, 16)))

    logger.debug("Compiled %r into %d elements", text, len(data))
    return Pattern(data)


def compile(text):
    """
    Compile a signature into a `Pattern`.

    Raises `PatternLengthError` if the signature (without spaces) has an odd
    number of characters, `PatternParseError` for the first character outside
    `ALLOWED_ALPHABET` and `PatternValueError` for a chunk that mixes a
    wildcard character with a hex digit.
    """
    return _compile(text)


def compile_unchecked(text):
    """
    Like `compile`, but a malformed signature is treated as a programming
    error and fails with `AssertionError`.
    """
    try:
        return _compile(text)
    except BinmatchError as e:
        raise AssertionError("Malformed pattern %r: %s" % (text, e)) from e


# Literal < Placeholder < Ignore, literals by value
_KIND_ORDER = {
    ElementKind.LITERAL: 0,
    ElementKind.PLACEHOLDER: 1,
    ElementKind.IGNORE: 2,
}

def _sort_key(element):
    return (_KIND_ORDER[element.kind], element.value or 0)


@functools.total_ordering
class Pattern:
    def __init__(self, data=()):
        self._data = tuple(data)
        self._len = len(self._data)

    @classmethod
    def new(cls, text):
        return compile(text)

    @classmethod
    def new_unchecked(cls, text):
        return compile_unchecked(text)

    @property
    def elements(self):
        return self._data

    def len(self):
        return self._len

    def is_empty(self):
        return self._len == 0

    def __len__(self):
        return self._len

    def __iter__(self):
        return iter(self._data)

    def __eq__(self, other):
        if not isinstance(other, Pattern):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other):
        if not isinstance(other, Pattern):
            return NotImplemented
        return [_sort_key(e) for e in self._data] < [_sort_key(e) for e in other._data]

    def __hash__(self):
        return hash(self._data)

    def __str__(self):
        tokens = []
        for element in self._data:
            if element.kind is ElementKind.LITERAL:
                tokens.append("%02X" % element.value)
            elif element.kind is ElementKind.PLACEHOLDER:
                tokens.append(PLACEHOLDER_TOKEN)
            else:
                tokens.append(IGNORE_TOKEN)
        return " ".join(tokens)

    def __repr__(self):
        return "Pattern(%r)" % str(self)

    def match_chunk(self, chunk):
        import search
        return search.match_chunk(self, chunk)

    def find_matches_with_index(self, haystack):
        import search
        return search.find_matches_with_index(self, haystack)

    def find_matches(self, haystack):
        import search
        return search.find_matches(self, haystack)

    def find_match_offsets(self, haystack):
        import search
        return search.find_match_offsets(self, haystack)

    def has_match(self, haystack):
        import search
        return search.has_match(self, haystack)
