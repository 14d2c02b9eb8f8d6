"""StringBuilder for O(n) string accumulation.

Appends to a list, joins once at the end: O(n) total vs O(n²) for
repeated string concatenation. Also answers "what was written N characters
ago" without joining, which the tokenizer needs to normalize line endings
across buffer boundaries.

Thread Safety:
StringBuilder instances are owned by a single writer.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder().append("<b>").append("Hello").append("</b>")
            >>> sb.build()
            '<b>Hello</b>'
            >>> sb.char_from_end(1)
            '>'

    """

    __slots__ = ("_parts", "_length")

    def __init__(self) -> None:
        """Initialize empty StringBuilder."""
        self._parts: list[str] = []
        self._length = 0

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder.

        Args:
            s: String to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
            self._length += len(s)
        return self

    def char_from_end(self, n: int) -> str:
        """Return the character n positions from the end (1 = last).

        Returns an empty string when fewer than n characters were appended.
        Walks parts backwards, so the cost is bounded by n, not by the total.
        """
        if n <= 0 or n > self._length:
            return ""
        for part in reversed(self._parts):
            if n <= len(part):
                return part[-n]
            n -= len(part)
        return ""

    def build(self) -> str:
        """Join all parts into final string."""
        return "".join(self._parts)

    def clear(self) -> StringBuilder:
        """Clear all accumulated parts."""
        self._parts.clear()
        self._length = 0
        return self

    @property
    def length(self) -> int:
        """Total number of characters appended."""
        return self._length

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        """Return True if any parts have been appended."""
        return bool(self._parts)
