"""Markup scanner mixin: tags, unparsed blocks, attributes and styles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from distiller.engine.charsets import (
    BLOCK_DELIMITERS,
    EQUALS,
    GT,
    LT,
    QUOTES,
    SOLIDUS,
    is_name_char,
    is_name_start_char,
)
from distiller.errors import IncompleteInputError
from distiller.tags import STYLE_ATTRIBUTE, AttributeValue, Tag

if TYPE_CHECKING:
    from distiller.cursor import Cursor


class MarkupScannerMixin:
    """Mixin providing tag recognition.

    Every method starts with the cursor on a ``<`` (or inside a tag) and
    leaves it just past what it consumed. Nothing is consumed when
    recognition fails, so the caller can fall back to a literal ``<``.

    """

    # These will be set by the Distiller class
    _cursor: Cursor
    _incremental: bool

    # =========================================================================
    # Incremental suspension
    # =========================================================================

    def _check_sync_point(self) -> None:
        """Suspend the feed if a token ran into the end of the buffer."""
        if self._incremental and self._cursor.at_end:
            raise IncompleteInputError(self._cursor.sync_point)

    def _check_lookahead(self, needed: int) -> None:
        """Suspend if the decision needs characters not yet fed."""
        if self._incremental and self._cursor.remaining() <= needed:
            raise IncompleteInputError(self._cursor.sync_point)

    # =========================================================================
    # Tags
    # =========================================================================

    def _parse_tag(self) -> Tag | None:
        """Recognize the tag starting at the current ``<``.

        Returns:
            The parsed tag, or None if the ``<`` is literal text.
        """
        tag = self._parse_blocks()
        if tag is not None:
            return tag

        cursor = self._cursor
        i = 1
        ch = cursor.peek(i)
        if ch == SOLIDUS:
            i += 1
            ch = cursor.peek(i)

        if not is_name_start_char(ch):
            self._check_lookahead(i)
            return None

        while is_name_char(ch):
            i += 1
            ch = cursor.peek(i)

        if not (ch.isspace() or ch == SOLIDUS or ch == GT):
            self._check_lookahead(i)
            return None

        cursor.skip(1)
        tag = Tag(cursor.flush(i - 1))

        self._check_sync_point()
        self._parse_attributes(tag)

        if cursor.current == GT:
            cursor.skip(1)
        return tag

    def _parse_blocks(self) -> Tag | None:
        """Try each unparsed block form in order."""
        for start_delim, end_delim in BLOCK_DELIMITERS:
            tag = self._parse_block(start_delim, end_delim)
            if tag is not None:
                return tag
        return None

    def _parse_block(self, start_delim: str, end_delim: str) -> Tag | None:
        """Consume an unparsed block such as a comment or CDATA section.

        An unterminated block swallows the rest of the input and is rendered
        with its closing delimiter.
        """
        cursor = self._cursor
        if not cursor.starts_with(start_delim):
            if (
                self._incremental
                and cursor.remaining() < len(start_delim)
                and start_delim.startswith(cursor.source[cursor.index :])
            ):
                raise IncompleteInputError(cursor.sync_point)
            return None

        cursor.skip(1)
        block_name = cursor.flush(len(start_delim) - 1)

        end = cursor.find(end_delim)
        if end < 0:
            if self._incremental:
                raise IncompleteInputError(cursor.sync_point)
            content = cursor.flush(cursor.remaining())
        else:
            content = cursor.flush(end - cursor.index)
            cursor.skip(len(end_delim))

        tag = Tag(block_name)
        tag.content = content
        tag.end_delimiter = end_delim[:-1]
        return tag

    # =========================================================================
    # Attributes
    # =========================================================================

    def _skip_whitespace(self) -> None:
        cursor = self._cursor
        while not cursor.is_eof and cursor.current.isspace():
            cursor.skip(1)

    def _parse_attributes(self, tag: Tag) -> None:
        cursor = self._cursor
        ch = cursor.current
        while not cursor.is_eof and ch != GT and ch != LT:
            name = self._parse_attribute_name()
            if name == SOLIDUS:
                tag.set_full_tag()
                name = ""

            self._check_sync_point()

            value: AttributeValue = ""
            ch = cursor.current
            if ch != GT and ch != LT:
                value = self._parse_attribute_value()

            self._check_sync_point()

            if name:
                if isinstance(value, str) and name.lower() == STYLE_ATTRIBUTE:
                    self._parse_styles(tag, value)
                else:
                    tag.attributes[name] = value

            ch = cursor.current

    def _parse_attribute_name(self) -> str:
        cursor = self._cursor
        self._skip_whitespace()

        if cursor.current == SOLIDUS:
            cursor.skip(1)
            return SOLIDUS

        while not cursor.is_eof:
            ch = cursor.current
            if ch == EQUALS or ch == GT or ch == LT or ch.isspace():
                break
            cursor.advance()
        return cursor.flush()

    def _parse_attribute_value(self) -> AttributeValue:
        """Parse ``= value`` after an attribute name.

        Returns:
            The value text, "" when there is no ``=``, or a Tag when the value
            starts with a server code block.
        """
        cursor = self._cursor
        self._skip_whitespace()
        if cursor.current != EQUALS:
            return ""

        cursor.skip(1)
        self._skip_whitespace()

        quote = cursor.current
        quoted = quote in QUOTES
        if quoted:
            cursor.skip(1)

        block = self._parse_blocks()

        while not cursor.is_eof:
            ch = cursor.current
            if ch == GT or ch == LT:
                break
            if (ch == quote) if quoted else ch.isspace():
                break
            cursor.advance()

        value = cursor.flush()
        if quoted and cursor.current == quote:
            cursor.skip(1)

        if block is not None:
            return block
        return value

    def _parse_styles(self, tag: Tag, style: str) -> None:
        """Split a style attribute into ``property:value`` declarations.

        Property names are lowercased. Declarations without a value are
        discarded.
        """
        for declaration in style.split(";"):
            name, sep, value = declaration.partition(":")
            name = name.strip().lower()
            value = value.strip()
            if name and sep and value:
                tag.styles[name] = value
