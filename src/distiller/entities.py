"""Character reference codec.

Maps between HTML character references and characters:

- ``&name;`` for the HTML 4 named entities (case-sensitive) plus ``&apos;``
- ``&#digits;`` and ``&#xhex;`` numeric references

The trailing semicolon is optional when decoding. Decoding never raises:
anything that is not a recognizable reference decodes as a literal ``&``
consuming one character.

Thread Safety:
All functions are pure; the lookup tables are immutable module constants.

"""

from __future__ import annotations

from html.entities import name2codepoint
from types import MappingProxyType

ENTITY_START = "&"
ENTITY_END = ";"

# HTML 4 entity set, plus the XML apostrophe so every encoded form decodes.
NAMED_ENTITIES: MappingProxyType[str, int] = MappingProxyType(
    {**name2codepoint, "apos": 0x27}
)

_SYMBOLIC: dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}

_MAX_CODE_POINT = 0x10FFFF


def encode_entity(ch: str) -> str:
    """Encode a single character as a character reference.

    The five XML-significant characters use their named form; everything else
    uses a hex reference with 2 digits up to U+00FF and at least 4 digits
    above it.

    Examples:
        >>> encode_entity("<")
        '&lt;'
        >>> encode_entity("\\u00e9")
        '&#xE9;'
        >>> encode_entity("\\u2026")
        '&#x2026;'
    """
    named = _SYMBOLIC.get(ch)
    if named is not None:
        return named
    code = ord(ch)
    if code > 0xFF:
        return f"&#x{code:04X};"
    return f"&#x{code:02X};"


def _is_hex(ch: str) -> bool:
    return ch in "0123456789abcdefABCDEF"


def decode_entity(source: str, index: int) -> tuple[str, int]:
    """Decode the character reference starting at source[index].

    Args:
        source: Text containing the reference
        index: Position of the leading ``&``

    Returns:
        (character, consumed_length). On failure returns ("&", 1).

    Examples:
        >>> decode_entity("a &amp; b", 2)
        ('&', 5)
        >>> decode_entity("&#x41;", 0)
        ('A', 6)
        >>> decode_entity("&bogus;", 0)
        ('&', 1)
    """
    length = len(source)
    pos = index + 1

    if pos < length and source[pos] == "#":
        pos += 1
        is_hex = pos < length and source[pos] in "xX"
        if is_hex:
            pos += 1
        base = 16 if is_hex else 10
        digits_start = pos
        code = 0
        # Stops at the first value past the Unicode range
        while pos < length and (_is_hex(source[pos]) if is_hex else source[pos].isdigit()):
            if not source[pos].isascii():
                return ENTITY_START, 1
            code = code * base + int(source[pos], 16)
            if code > _MAX_CODE_POINT:
                return ENTITY_START, 1
            pos += 1
        if pos == digits_start:
            return ENTITY_START, 1
        if pos < length and source[pos] == ENTITY_END:
            pos += 1
        return chr(code), pos - index

    name_start = pos
    while pos < length and source[pos].isascii() and source[pos].isalnum():
        pos += 1
    code_point = NAMED_ENTITIES.get(source[name_start:pos])
    if code_point is None:
        return ENTITY_START, 1
    if pos < length and source[pos] == ENTITY_END:
        pos += 1
    return chr(code_point), pos - index


def decode_entities(text: str) -> str:
    """Decode every recognizable character reference in text.

    Returns the input unchanged (same object) when it holds no references.
    """
    if ENTITY_START not in text:
        return text

    parts: list[str] = []
    last = 0
    i = text.find(ENTITY_START)
    while i != -1:
        ch, consumed = decode_entity(text, i)
        if consumed > 1:
            parts.append(text[last:i])
            parts.append(ch)
            last = i + consumed
            i = text.find(ENTITY_START, last)
        else:
            i = text.find(ENTITY_START, i + 1)

    if not parts:
        return text
    parts.append(text[last:])
    return "".join(parts)


def encode_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute.

    Escapes ``"``, ``<`` and any ``&`` that does not already begin a valid
    character reference, so previously encoded values are not double-encoded.

    Examples:
        >>> encode_attribute('say "hi" & <wave>')
        'say &quot;hi&quot; &amp; &lt;wave>'
        >>> encode_attribute("a?x=1&amp;y=2")
        'a?x=1&amp;y=2'
    """
    if not value:
        return ""

    parts: list[str] = []
    last = 0
    for i, ch in enumerate(value):
        if ch == '"':
            replacement = "&quot;"
        elif ch == "<":
            replacement = "&lt;"
        elif ch == "&":
            if decode_entity(value, i)[1] > 1:
                continue
            replacement = "&amp;"
        else:
            continue
        parts.append(value[last:i])
        parts.append(replacement)
        last = i + 1

    if not parts:
        return value
    parts.append(value[last:])
    return "".join(parts)


__all__ = [
    "ENTITY_END",
    "ENTITY_START",
    "NAMED_ENTITIES",
    "decode_entities",
    "decode_entity",
    "encode_attribute",
    "encode_entity",
]
