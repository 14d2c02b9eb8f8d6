"""HtmlFilter protocol: the whitelist interface.

The Distiller consults a filter for every tag, attribute, style declaration
and literal span it is about to write. Hooks return the value to write
(possibly rewritten) or None to omit it; ``filter_literal`` returns None to
leave the span untouched.

Example:
    from distiller.filters.protocol import HtmlFilter

    def allows_links(html_filter: HtmlFilter) -> bool:
        return html_filter.filter_tag(Tag("a"))

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from distiller.tags import Tag
    from distiller.writers.protocol import HtmlSink


@runtime_checkable
class HtmlFilter(Protocol):
    """Protocol for content filters.

    Thread Safety:
        bind() stores the active sink, so a filter instance belongs to one
        Distiller at a time. bind() is optional: filters without it are
        never handed the sink.

    """

    def bind(self, sink: HtmlSink) -> None:
        """Receive the sink at the start of each run.

        Filters that write extra output (word breaks, hyperlinks) write it
        here.
        """
        ...

    def filter_tag(self, tag: Tag) -> bool:
        """Return True to render the tag."""
        ...

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        """Return the attribute value to keep, or None to drop it."""
        ...

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        """Return the style value to keep, or None to drop it."""
        ...

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        """Return replacement text for source[start:end], or None to keep it."""
        ...

    def filter_url(self, url: str) -> str | None:
        """Return the URL to use, or None when it must not be linked."""
        ...
