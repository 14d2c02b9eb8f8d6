"""Word-break decorator.

Long unbroken words (URLs, "aaaaaaaa...") can blow out fixed-width layouts.
WordBreakFilter inserts a ``<wbr />`` tag and a soft hyphen every
``max_word_length`` non-whitespace characters so browsers may wrap there.

Character references count as a single character and are never split.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from distiller.entities import ENTITY_START, decode_entity
from distiller.filters.base import FilterDecorator
from distiller.tags import Tag

if TYPE_CHECKING:
    from distiller.filters.protocol import HtmlFilter

WORD_BREAK_TAG = "wbr"
SOFT_HYPHEN_ENTITY = "&shy;"


class WordBreakFilter(FilterDecorator):
    """Breaks words longer than max_word_length.

    Usage:
            >>> from distiller import distill
            >>> from distiller.filters import NullFilter
            >>> distill("abcdefgh", WordBreakFilter(NullFilter(), 3))
            'abc<wbr />&shy;def<wbr />&shy;gh'

    """

    __slots__ = ("max_word_length",)

    def __init__(self, inner: HtmlFilter, max_word_length: int = 0) -> None:
        super().__init__(inner)
        self.max_word_length = max_word_length

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        max_length = self.max_word_length
        if max_length <= 0:
            return self.inner.filter_literal(source, start, end)

        added_break = False
        last = start
        since_space = 0
        i = start
        while i < end:
            ch = source[i]
            if ch.isspace():
                since_space = 0
                i += 1
                continue

            if since_space >= max_length:
                sink = self.sink
                sink.write_literal(self.inner_literal(source, last, i))
                sink.write_tag(Tag(WORD_BREAK_TAG))
                sink.write_literal(SOFT_HYPHEN_ENTITY)
                added_break = True
                last = i
                since_space = 0
            since_space += 1

            if ch == ENTITY_START:
                _, consumed = decode_entity(source, i)
                if consumed > 1 and i + consumed <= end:
                    i += consumed - 1
            i += 1

        if not added_break:
            return self.inner.filter_literal(source, start, end)
        return self.inner_literal(source, last, end)
