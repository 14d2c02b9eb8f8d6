"""Character classes and delimiter tables for the tokenizer.

Tag names follow the XML 1.0 (fifth edition) Name production, restricted to
the Basic Multilingual Plane.
"""

from __future__ import annotations

LT = "<"
GT = ">"
SOLIDUS = "/"
EQUALS = "="
CR = "\r"
LF = "\n"
QUOTES: frozenset[str] = frozenset({'"', "'"})

ASCII_MAX = 0x7F
LESS_THAN_ENTITY = "&lt;"

# (start, end) delimiters of unparsed blocks, in recognition order.
# Longer code-block prefixes come before "<%" so the most specific one wins.
BLOCK_DELIMITERS: tuple[tuple[str, str], ...] = (
    ("<%--", "--%>"),
    ("<%@", "%>"),
    ("<%=", "%>"),
    ("<%!", "%>"),
    ("<%#", "%>"),
    ("<%$", "%>"),
    ("<%", "%>"),
    ("<!--", "-->"),
    ("<![CDATA[", "]]>"),
    ("<!", ">"),
    ("<?", "?>"),
)

_NAME_START_RANGES: tuple[tuple[int, int], ...] = (
    (0x00C0, 0x00D6),
    (0x00D8, 0x00F6),
    (0x00F8, 0x02FF),
    (0x0370, 0x037D),
    (0x037F, 0x1FFF),
    (0x200C, 0x200D),
    (0x2070, 0x218F),
    (0x2C00, 0x2FEF),
    (0x3001, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFFD),
)

_NAME_EXTRA_RANGES: tuple[tuple[int, int], ...] = (
    (0x00B7, 0x00B7),
    (0x0300, 0x036F),
    (0x203F, 0x2040),
)


def is_name_start_char(ch: str) -> bool:
    """First character of a tag name."""
    if ch.isascii():
        return ch.isalpha() or ch == ":" or ch == "_"
    code = ord(ch)
    for low, high in _NAME_START_RANGES:
        if low <= code <= high:
            return True
    return False


def is_name_char(ch: str) -> bool:
    """Any later character of a tag name."""
    if ch.isascii():
        return ch.isalnum() or ch in ":_-."
    if is_name_start_char(ch):
        return True
    code = ord(ch)
    for low, high in _NAME_EXTRA_RANGES:
        if low <= code <= high:
            return True
    return False


def is_control(ch: str) -> bool:
    """Unicode Cc: C0 controls, DEL and C1 controls."""
    code = ord(ch)
    return code < 0x20 or 0x7F <= code <= 0x9F


def is_space_or_control(ch: str) -> bool:
    return ch.isspace() or is_control(ch)


def needs_encoding(ch: str) -> bool:
    """Non-ASCII characters and non-whitespace controls."""
    return ord(ch) > ASCII_MAX or (is_control(ch) and not ch.isspace())
