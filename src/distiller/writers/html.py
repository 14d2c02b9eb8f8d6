"""HTML serialization sink.

Renders tags back to markup:

- BEGIN / FULL: ``<raw_name attr="value" style="k:v;">`` (FULL adds `` /``)
- END: ``</raw_name>``
- UNPARSED: ``<raw_name content end_delimiter>``

Attribute names and values are escaped with encode_attribute. Attributes with
an empty value render as a bare name. Attributes holding a nested code block
are skipped, since HTML has no way to express them.

Thread Safety:
HtmlWriter instances are owned by a single Distiller run.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from distiller.cursor import NUL
from distiller.entities import encode_attribute
from distiller.stringbuilder import StringBuilder
from distiller.tags import STYLE_ATTRIBUTE, TagType

if TYPE_CHECKING:
    from distiller.tags import Tag

# Characters kept for prev_char() when writing through to a stream
_TAIL_SIZE = 8


class HtmlWriter:
    """Default sink: serializes literals and tags as HTML.

    Buffers output in a StringBuilder, or writes through to ``stream`` when
    one is given. Either way the last few characters are kept for reverse
    peeking.

    Usage:
            >>> writer = HtmlWriter()
            >>> writer.write_literal("hi")
            >>> writer.getvalue()
            'hi'

    """

    __slots__ = ("_stream", "_builder", "_tail", "_written")

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._builder = StringBuilder()
        self._tail = ""
        self._written = 0

    def _write(self, text: str) -> None:
        if not text:
            return
        self._written += len(text)
        if self._stream is None:
            self._builder.append(text)
            return
        self._stream.write(text)
        self._tail = (self._tail + text)[-_TAIL_SIZE:]

    def write_literal(self, text: str) -> None:
        self._write(text)

    def write_tag(self, tag: Tag) -> None:
        self._write(render_tag(tag))

    def prev_char(self, n: int) -> str:
        """Character n positions from the end, NUL when not available."""
        if self._stream is None:
            return self._builder.char_from_end(n) or NUL
        if n <= 0 or n > len(self._tail):
            return NUL
        return self._tail[-n]

    @property
    def written(self) -> int:
        """Total number of characters written."""
        return self._written

    def getvalue(self) -> str:
        """Return everything written so far (empty when streaming)."""
        return self._builder.build()

    def __str__(self) -> str:
        return self.getvalue()


def render_tag(tag: Tag) -> str:
    """Serialize a single tag."""
    if tag.tag_type is TagType.UNPARSED:
        return f"<{tag.raw_name}{tag.content}{tag.end_delimiter}>"

    if tag.tag_type is TagType.END:
        return f"</{tag.raw_name}>"

    sb = StringBuilder()
    sb.append("<").append(tag.raw_name)

    for key, value in tag.attributes.items():
        if not isinstance(value, str):
            continue
        if key.lower() == STYLE_ATTRIBUTE:
            continue
        if not value:
            sb.append(" ").append(encode_attribute(key))
        elif not key:
            sb.append(" ").append(encode_attribute(value))
        else:
            sb.append(" ").append(encode_attribute(key))
            sb.append('="').append(encode_attribute(value)).append('"')

    if tag.styles:
        sb.append(' style="')
        for key, value in tag.styles.items():
            sb.append(encode_attribute(key)).append(":")
            sb.append(encode_attribute(value)).append(";")
        sb.append('"')

    if tag.tag_type is TagType.FULL:
        sb.append(" /")
    sb.append(">")
    return sb.build()
