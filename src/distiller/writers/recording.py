"""Event-recording sink.

Keeps the stream of literals and tags instead of serializing it, for callers
that build another shape (plain-text indexes, token streams) and for tests.
"""

from __future__ import annotations

from typing import Literal, TypeAlias

from distiller.cursor import NUL
from distiller.tags import Tag

SinkEvent: TypeAlias = tuple[Literal["literal"], str] | tuple[Literal["tag"], Tag]


class RecordingSink:
    """Records ``("literal", text)`` and ``("tag", tag)`` events in order."""

    __slots__ = ("events",)

    def __init__(self) -> None:
        self.events: list[SinkEvent] = []

    def write_literal(self, text: str) -> None:
        if text:
            self.events.append(("literal", text))

    def write_tag(self, tag: Tag) -> None:
        self.events.append(("tag", tag))

    def prev_char(self, n: int) -> str:
        """Look back over recorded literals only; tags count as no text."""
        for kind, payload in reversed(self.events):
            if kind != "literal":
                continue
            if n <= len(payload):
                return payload[-n]
            n -= len(payload)
        return NUL

    @property
    def literals(self) -> list[str]:
        return [payload for kind, payload in self.events if kind == "literal"]

    @property
    def tags(self) -> list[Tag]:
        return [payload for kind, payload in self.events if kind == "tag"]

    def text(self) -> str:
        """Concatenated literal text."""
        return "".join(self.literals)

    def clear(self) -> None:
        self.events.clear()
