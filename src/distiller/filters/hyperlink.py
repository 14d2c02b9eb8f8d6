"""Auto-link decorator.

Finds URLs in literal text and wraps them in ``<a href="...">`` tags. Two
forms are recognized:

- ``scheme://host.tld[:port][/path]``
- bare domains ending in com, net, org, edu or gov (``example.com/about``),
  which are linked with an ``http://`` prefix

Each candidate goes through the wrapped filter's ``filter_url``; rejected
URLs stay plain text.
"""

from __future__ import annotations

import re

from distiller.filters.base import FilterDecorator
from distiller.tags import Tag

LINK_TAG = "a"
LINK_ATTRIBUTE = "href"
DEFAULT_SCHEME = "http://"

URL_PATTERN = re.compile(
    r"\b(?:"
    r"(?:[a-z]+://[a-z0-9\-]+(?:\.[a-z0-9\-]+)+)"  # scheme://host.tld
    r"|(?:[a-z0-9\-]+\.)+(?:com|net|org|edu|gov)\b"  # bare domain
    r")"
    r"(?::[0-9]{1,5})?"  # port
    r"(?:/[\.\w,;\?'\+\(\)&%\$#=~\-]+)*/?",  # path
    re.IGNORECASE | re.ASCII,
)


class HyperlinkFilter(FilterDecorator):
    """Wraps URLs found in text with hyperlinks.

    Usage:
            >>> from distiller import distill
            >>> from distiller.filters import NullFilter
            >>> distill("see example.com now", HyperlinkFilter(NullFilter()))
            'see <a href="http://example.com">example.com</a> now'

    """

    __slots__ = ()

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        match = URL_PATTERN.search(source, start, end)
        if match is None:
            return self.inner.filter_literal(source, start, end)

        sink = self.sink
        last = start
        while match is not None:
            index, stop = match.span()
            sink.write_literal(self.inner_literal(source, last, index))

            url = match.group()
            if "://" not in url:
                url = DEFAULT_SCHEME + url
            href = self.inner.filter_url(url)

            if href:
                link = Tag(LINK_TAG)
                link.attributes[LINK_ATTRIBUTE] = href
                sink.write_tag(link)
                sink.write_literal(self.inner_literal(source, index, stop))
                close_tag = link.create_close_tag()
                if close_tag is not None:
                    sink.write_tag(close_tag)
            else:
                sink.write_literal(self.inner_literal(source, index, stop))

            last = stop
            match = URL_PATTERN.search(source, last, end)

        return self.inner_literal(source, last, end)
