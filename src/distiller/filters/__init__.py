"""Filter pipeline for Distiller.

Filters decide which tags, attributes and styles survive, and may rewrite
literal text on its way to the sink:

- null: accept everything
- unsafe: accept everything, any URL scheme
- strip: remove all markup, keep text
- strict: basic formatting, lists, links, images
- safe: broad HTML 4 whitelist without script, styles that position or
  run code, or event handlers

Decorators add behavior on top of any filter:

- WordBreakFilter: break long words with ``<wbr />&shy;``
- HyperlinkFilter: wrap URLs in text with ``<a href>``

Usage:
    >>> from distiller.filters import create_filter
    >>> html_filter = create_filter("safe", max_word_length=40, auto_link=True)
    >>>
    >>> # Or compose by hand
    >>> html_filter = HyperlinkFilter(WordBreakFilter(SafeFilter(), 40))

Thread Safety:
Filters hold only the sink of the Distiller they are bound to. Create one
filter per Distiller when distilling concurrently.

"""

from __future__ import annotations

from collections.abc import Callable

from distiller.filters.base import (
    ALLOWED_SCHEMES,
    BaseFilter,
    FilterDecorator,
    NullFilter,
    filter_url,
    url_scheme,
)
from distiller.filters.protocol import HtmlFilter

__all__ = [
    "ALLOWED_SCHEMES",
    "BUILTIN_FILTERS",
    "BaseFilter",
    "FilterDecorator",
    "HtmlFilter",
    "NullFilter",
    "create_filter",
    "filter_url",
    "get_filter",
    "register_filter",
    "url_scheme",
]

# Registry of built-in filters
BUILTIN_FILTERS: dict[str, type[HtmlFilter]] = {}


def register_filter(
    name: str,
) -> Callable[[type[HtmlFilter]], type[HtmlFilter]]:
    """Decorator to register a filter.

    Args:
        name: Filter name for lookup

    Returns:
        Decorator function that registers and returns the class

    Usage:
        @register_filter("comments")
        class CommentFilter(BaseFilter):
                ...

    """

    def decorator(cls: type[HtmlFilter]) -> type[HtmlFilter]:
        BUILTIN_FILTERS[name] = cls
        return cls

    return decorator


def get_filter(name: str) -> HtmlFilter:
    """Get a filter instance by name.

    Args:
        name: Filter name (e.g., "safe", "strip")

    Returns:
        Filter instance

    Raises:
        KeyError: If filter name is not recognized

    """
    if name not in BUILTIN_FILTERS:
        available = ", ".join(sorted(BUILTIN_FILTERS.keys()))
        raise KeyError(f"Unknown filter: {name!r}. Available: {available}")
    return BUILTIN_FILTERS[name]()


def create_filter(
    name: str,
    *,
    max_word_length: int = 0,
    auto_link: bool = False,
) -> HtmlFilter:
    """Build a stock filter wrapped in the requested decorators.

    Hyperlink detection runs outermost, so link text is still word-broken.

    Args:
        name: Stock filter name
        max_word_length: Insert word breaks after this many characters
            without whitespace (0 disables)
        auto_link: Wrap URLs found in text in hyperlinks

    Raises:
        KeyError: If filter name is not recognized

    """
    html_filter = get_filter(name)
    if max_word_length > 0:
        html_filter = WordBreakFilter(html_filter, max_word_length)
    if auto_link:
        html_filter = HyperlinkFilter(html_filter)
    return html_filter


# Import built-in filters to register them
# These imports trigger the @register_filter decorators
from distiller.filters.hyperlink import HyperlinkFilter  # noqa: E402
from distiller.filters.stock import (  # noqa: E402
    SafeFilter,
    StrictFilter,
    StripFilter,
    UnsafeFilter,
    WhitelistFilter,
)
from distiller.filters.wordbreak import WordBreakFilter  # noqa: E402

__all__ += [
    "HyperlinkFilter",
    "SafeFilter",
    "StrictFilter",
    "StripFilter",
    "UnsafeFilter",
    "WhitelistFilter",
    "WordBreakFilter",
]
