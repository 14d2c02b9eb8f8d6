"""Base filters and URL checks.

Provides:
- BaseFilter: accept-everything implementation of every hook
- NullFilter: registered as "null"
- FilterDecorator: wraps another filter and delegates every hook to it
- filter_url / url_scheme: scheme whitelist for link targets

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from distiller.entities import decode_entities

if TYPE_CHECKING:
    from distiller.filters.protocol import HtmlFilter
    from distiller.tags import Tag
    from distiller.writers.protocol import HtmlSink

# Schemes allowed in href/src and auto-links. Relative URLs carry no scheme.
ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto"})

_SCHEME = re.compile(r"([a-z][a-z0-9+.\-]*):", re.ASCII)


def url_scheme(url: str) -> str | None:
    """Lowercase scheme of a URL, or None for a relative URL.

    Character references are decoded and whitespace/control characters
    removed first, so obfuscations such as ``java&#x09;script:`` are still
    recognized.

    Examples:
        >>> url_scheme("HTTPS://example.com")
        'https'
        >>> url_scheme("java\\tscript:alert(1)")
        'javascript'
        >>> url_scheme("/path?q=a:b") is None
        True
    """
    cleaned = "".join(
        ch for ch in decode_entities(url) if ch.isprintable() and not ch.isspace()
    )
    match = _SCHEME.match(cleaned.lower())
    return match.group(1) if match else None


def filter_url(url: str, allowed: frozenset[str] = ALLOWED_SCHEMES) -> str | None:
    """Return url if its scheme is allowed (or it is relative), else None."""
    if not url or not url.strip():
        return None
    scheme = url_scheme(url)
    if scheme is None or scheme in allowed:
        return url
    return None


class BaseFilter:
    """Filter that accepts everything.

    Subclasses override the hooks they restrict.
    """

    __slots__ = ("_sink",)

    def __init__(self) -> None:
        self._sink: HtmlSink | None = None

    @property
    def sink(self) -> HtmlSink | None:
        return self._sink

    def bind(self, sink: HtmlSink) -> None:
        self._sink = sink

    def filter_tag(self, tag: Tag) -> bool:
        return True

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        return value

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        return value

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        return None

    def filter_url(self, url: str) -> str | None:
        return filter_url(url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NullFilter(BaseFilter):
    """Accepts all tags, attributes, styles and literals unchanged."""

    __slots__ = ()


class FilterDecorator:
    """Wraps another filter, delegating every hook to it.

    Subclasses override the hooks they extend and call ``self.inner`` for
    everything else.
    """

    __slots__ = ("inner", "_sink")

    def __init__(self, inner: HtmlFilter) -> None:
        self.inner = inner
        self._sink: HtmlSink | None = None

    @property
    def sink(self) -> HtmlSink:
        if self._sink is None:
            raise RuntimeError(f"{type(self).__name__} was used before bind()")
        return self._sink

    def bind(self, sink: HtmlSink) -> None:
        self._sink = sink
        bind = getattr(self.inner, "bind", None)
        if bind is not None:
            bind(sink)

    def filter_tag(self, tag: Tag) -> bool:
        return self.inner.filter_tag(tag)

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        return self.inner.filter_attribute(tag_name, name, value)

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        return self.inner.filter_style(tag_name, name, value)

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        return self.inner.filter_literal(source, start, end)

    def filter_url(self, url: str) -> str | None:
        return self.inner.filter_url(url)

    def inner_literal(self, source: str, start: int, end: int) -> str:
        """Inner filter's rendering of source[start:end]."""
        replacement = self.inner.filter_literal(source, start, end)
        return source[start:end] if replacement is None else replacement

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inner!r})"
