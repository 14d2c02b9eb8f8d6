"""Text scanner mixin: whitespace normalization and character references."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from distiller.cursor import NUL
from distiller.engine.charsets import CR, LF, is_space_or_control
from distiller.entities import decode_entity, encode_entity
from distiller.errors import IncompleteInputError

if TYPE_CHECKING:
    from distiller.config import DistillConfig
    from distiller.cursor import Cursor
    from distiller.writers.protocol import ReversePeek

# Longest prefix that could still grow into a reference ("&#x10FFFF;" or a
# named entity such as "&thetasym;")
_MAX_PARTIAL_ENTITY = 10
_PARTIAL_ENTITY = re.compile(r"&#?[xX]?[0-9A-Za-z]*\Z")


class TextScannerMixin:
    """Mixin providing the literal-text branches of the main loop.

    Literal text is accumulated in the cursor's pending span and written in
    one piece; these branches flush the span whenever a character has to be
    rewritten or dropped.

    """

    # These will be set by the Distiller class
    _cursor: Cursor
    _config: DistillConfig
    _incremental: bool
    _reverse_peek: ReversePeek | None

    def _write_buffer(self) -> None:
        """Write the pending span. Implemented by Distiller."""
        raise NotImplementedError

    def _write_literal(self, text: str) -> None:
        """Write literal text. Implemented by Distiller."""
        raise NotImplementedError

    def _suspend(self) -> None:
        """Stop the current feed at the cursor, keeping everything from here."""
        self._write_buffer()
        self._cursor.mark_sync()
        raise IncompleteInputError(self._cursor.sync_point)

    # =========================================================================
    # Reverse peek
    # =========================================================================

    def _prev_char(self, n: int) -> str | None:
        """Character n positions before the cursor in the output stream.

        Looks in the pending span first, then asks the sink. Returns NUL at
        the start of output and None when the sink cannot tell.
        """
        cursor = self._cursor
        ch = cursor.prev_buffered(n)
        if ch is not None:
            return ch
        if self._reverse_peek is None:
            return None
        return self._reverse_peek.prev_char(n - cursor.pending_length)

    def _is_blank_line(self, prev: str | None) -> bool:
        if prev is None:
            return not self._incremental
        return prev == LF or prev == NUL

    def _is_after_space(self, prev: str | None) -> bool:
        if prev is None:
            return not self._incremental
        return prev == NUL or prev.isspace()

    # =========================================================================
    # Branches
    # =========================================================================

    def _scan_whitespace(self) -> None:
        """Normalize a run of whitespace and control characters.

        CR and CRLF become LF, no more than two line feeds in a row survive,
        and any other whitespace after whitespace (or at the start of the
        output) is dropped.
        """
        cursor = self._cursor
        encode = self._config.encode_non_ascii
        ch = cursor.current
        while is_space_or_control(ch) and not cursor.is_eof:
            if ch == CR:
                self._write_buffer()
                if self._incremental and cursor.remaining() == 1:
                    self._suspend()
                if cursor.peek(1) != LF:
                    if self._is_blank_line(self._prev_char(1)) and self._is_blank_line(
                        self._prev_char(2)
                    ):
                        cursor.skip(1)
                    else:
                        self._write_literal(LF)
                        cursor.skip(1)
                        cursor.count_text()
                else:
                    cursor.skip(1)

            elif ch == LF:
                self._write_buffer()
                if self._is_blank_line(self._prev_char(1)) and self._is_blank_line(
                    self._prev_char(2)
                ):
                    while True:
                        cursor.advance()
                        ch = cursor.current
                        if ch != LF and ch != CR:
                            break
                    cursor.skip()
                else:
                    cursor.advance()
                    cursor.count_text()

            elif self._is_after_space(self._prev_char(1)):
                self._write_buffer()
                cursor.skip(1)

            elif encode and not ch.isspace():
                self._write_buffer()
                self._write_literal(encode_entity(ch))
                cursor.skip(1)
                cursor.count_text()

            else:
                cursor.advance()
                cursor.count_text()

            ch = cursor.current

    def _scan_encoded_char(self, ch: str) -> None:
        """Write a non-ASCII or control character as a reference."""
        cursor = self._cursor
        self._write_buffer()
        self._write_literal(encode_entity(ch))
        cursor.skip(1)
        cursor.count_text()

    def _scan_entity(self) -> None:
        """Handle the character reference at the cursor, if any.

        A valid reference counts as one text character. It is decoded when
        encode_non_ascii is off and passed through unchanged otherwise.
        """
        cursor = self._cursor
        source = cursor.source
        index = cursor.index
        ch, consumed = decode_entity(source, index)

        if self._incremental:
            remaining = cursor.remaining()
            if consumed > 1 and consumed >= remaining and source[-1] != ";":
                # "&amp" may still be followed by ";" in the next chunk
                self._suspend()
            if (
                consumed == 1
                and remaining <= _MAX_PARTIAL_ENTITY
                and _PARTIAL_ENTITY.match(source, index)
            ):
                self._suspend()

        if consumed > 1 and self._config.encode_non_ascii:
            cursor.advance(consumed)
        elif consumed > 1:
            self._write_buffer()
            self._write_literal(ch)
            cursor.skip(consumed)
        else:
            cursor.advance()
        cursor.count_text()
