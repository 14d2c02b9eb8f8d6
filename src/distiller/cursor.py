"""Read cursor over the source buffer.

Tracks three positions in the current buffer:

- index: next unread character
- start: first character not yet flushed to the output
- sync_point: last confirmed token boundary (-1 when none)

The span source[start:index] is the pending literal. Scanners advance index
while a literal run continues, then flush or skip the span in one slice.

Thread Safety:
Cursor instances are owned by a single Distiller run.
No shared mutable state.

"""

from __future__ import annotations

NUL = "\0"


class Cursor:
    """Position tracking and text-size accounting for one source buffer.

    Usage:
            >>> cursor = Cursor("abc<b>")
            >>> cursor.advance(3)
            >>> cursor.flush()
            'abc'
            >>> cursor.current
            '<'

    """

    __slots__ = (
        "source",
        "_length",  # Cached len(source)
        "index",
        "start",
        "sync_point",
        "text_size",
        "max_length",
    )

    def __init__(self, source: str = "", max_length: int = 0) -> None:
        self.source = source
        self._length = len(source)
        self.index = 0
        self.start = 0
        self.sync_point = -1
        self.text_size = 0
        self.max_length = max_length

    # =========================================================================
    # Lookahead
    # =========================================================================

    def peek(self, n: int = 0) -> str:
        """Character n ahead of index, NUL past the physical end."""
        pos = self.index + n
        if pos >= self._length:
            return NUL
        return self.source[pos]

    @property
    def current(self) -> str:
        """Character at index, NUL once the cursor is at EOF."""
        if self.is_eof:
            return NUL
        return self.source[self.index]

    @property
    def at_end(self) -> bool:
        """True at the physical end of the buffer."""
        return self.index >= self._length

    @property
    def is_eof(self) -> bool:
        """True at the physical end or once the text budget is spent."""
        return self.index >= self._length or self.truncated

    @property
    def truncated(self) -> bool:
        return self.max_length > 0 and self.text_size >= self.max_length

    def starts_with(self, prefix: str) -> bool:
        return self.source.startswith(prefix, self.index)

    def remaining(self) -> int:
        """Characters left in the physical buffer."""
        return self._length - self.index

    def find(self, needle: str) -> int:
        """Position of needle at or after index, -1 if absent."""
        return self.source.find(needle, self.index)

    # =========================================================================
    # Movement
    # =========================================================================

    def advance(self, n: int = 1) -> None:
        self.index += n

    def skip(self, n: int = 0) -> None:
        """Advance n characters and discard everything pending."""
        self.index += n
        self.start = self.index

    def flush(self, n: int = 0) -> str:
        """Advance n characters and return the pending span."""
        self.index += n
        text = self.source[self.start : self.index]
        self.start = self.index
        return text

    def take_pending(self) -> tuple[int, int]:
        """Return the (start, end) span not yet written and mark it written."""
        span = (self.start, self.index)
        self.start = self.index
        return span

    def count_text(self, n: int = 1) -> None:
        self.text_size += n

    def prev_buffered(self, n: int) -> str | None:
        """Character n positions before index if still pending.

        Returns None once the character has been flushed or skipped; the
        caller then asks the sink.
        """
        pos = self.index - n
        if pos < self.start:
            return None
        return self.source[pos]

    @property
    def pending_length(self) -> int:
        return self.index - self.start

    # =========================================================================
    # Incremental support
    # =========================================================================

    def mark_sync(self) -> None:
        self.sync_point = self.index

    def tail(self) -> str:
        """Unconsumed source from the last sync point."""
        if self.sync_point < 0:
            return ""
        return self.source[self.sync_point :]

    def reset(self, source: str) -> None:
        """Point at a new buffer, keeping the text-size counter."""
        self.source = source
        self._length = len(source)
        self.index = 0
        self.start = 0
        self.sync_point = -1

    def clear(self) -> None:
        """Reset to an empty buffer and zero the counters."""
        self.reset("")
        self.text_size = 0

    def __repr__(self) -> str:
        return (
            f"Cursor(index={self.index}, start={self.start}, "
            f"sync_point={self.sync_point}, text_size={self.text_size})"
        )


__all__ = ["Cursor", "NUL"]
