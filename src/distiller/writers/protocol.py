"""Sink protocols for distilled output.

Any object with ``write_literal(text)`` and ``write_tag(tag)`` can receive the
Distiller's output. The built-in ``HtmlWriter`` is the reference
implementation.

A sink that can also answer ``prev_char(n)`` lets whitespace normalization
look back across flushes. Sinks without it are treated as "previous character
unknown".

Example:
    from distiller.writers.protocol import HtmlSink

    def emit(sink: HtmlSink, tags: list[Tag]) -> None:
        for tag in tags:
            sink.write_tag(tag)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from distiller.tags import Tag


@runtime_checkable
class HtmlSink(Protocol):
    """Protocol for distilled output receivers."""

    def write_literal(self, text: str) -> None:
        """Write already-encoded literal text."""
        ...

    def write_tag(self, tag: Tag) -> None:
        """Write a tag that passed the filter."""
        ...


@runtime_checkable
class ReversePeek(Protocol):
    """Protocol for sinks that can report previously written characters."""

    def prev_char(self, n: int) -> str:
        """Return the character n positions from the end (1 = last).

        Returns NUL ("\\0") when fewer than n characters were written.
        """
        ...
