"""Stock whitelist filters.

- null: accept everything (see base.NullFilter)
- unsafe: accept everything, including any URL scheme
- strip: reject every tag, leaving only text
- strict: a handful of formatting tags and safe links/images
- safe: a broad HTML 4 whitelist minus script, style, forms and embedding

Thread Safety:
The whitelist tables are immutable module constants. Filter instances only
hold the sink passed to bind().

"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from distiller.filters import register_filter
from distiller.filters.base import BaseFilter, NullFilter

if TYPE_CHECKING:
    from distiller.tags import Tag

register_filter("null")(NullFilter)


# =============================================================================
# Whitelist tables
# =============================================================================

STRICT_TAGS: frozenset[str] = frozenset(
    {"a", "b", "blockquote", "br", "em", "i", "img", "li", "ol", "strong", "u", "ul"}
)

STRICT_ATTRIBUTES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "a": frozenset({"href", "target"}),
        "img": frozenset({"alt", "title", "src"}),
    }
)

SAFE_TAGS: frozenset[str] = frozenset(
    {
        "a", "abbr", "acronym", "address", "area", "b", "bdo", "bgsound",
        "big", "blink", "blockquote", "br", "caption", "center", "cite",
        "code", "col", "colgroup", "dd", "del", "dfn", "dir", "div", "dl",
        "dt", "em", "fieldset", "font", "h1", "h2", "h3", "h4", "h5", "h6",
        "hr", "i", "iframe", "img", "ins", "isindex", "kbd", "label",
        "legend", "li", "map", "marquee", "menu", "nobr", "ol", "p", "pre",
        "q", "s", "samp", "small", "sound", "span", "strike", "strong",
        "sub", "sup", "table", "tbody", "td", "tfoot", "th", "thead", "tr",
        "tt", "u", "ul", "var", "wbr",
    }
)

SAFE_ATTRIBUTES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "a": frozenset({"href", "target"}),
        "bgsound": frozenset({"balance", "loop", "volume", "src"}),
        "sound": frozenset({"balance", "loop", "volume", "src"}),
        "div": frozenset({"align"}),
        "font": frozenset({"color", "face", "size"}),
        "hr": frozenset({"align", "color", "noshade", "size", "width"}),
        "iframe": frozenset(
            {
                "align", "allowtransparency", "frameborder", "height",
                "longdesc", "marginheight", "marginwidth", "scrolling",
                "width", "z-index", "src",
            }
        ),
        "img": frozenset(
            {"alt", "border", "height", "title", "width", "lowsrc", "dynsrc", "src"}
        ),
        "marquee": frozenset(
            {
                "align", "behavior", "bgcolor", "direction", "height", "loop",
                "scrollamount", "scrolldelay", "width",
            }
        ),
        "p": frozenset({"align"}),
        "ol": frozenset({"type"}),
        "ul": frozenset({"type"}),
        "table": frozenset(
            {
                "bgcolor", "border", "bordercolor", "cellpadding",
                "cellspacing", "height", "width",
            }
        ),
        "td": frozenset(
            {"align", "colspan", "rowspan", "bgcolor", "bordercolor", "height", "width"}
        ),
        "th": frozenset(
            {"align", "colspan", "rowspan", "bgcolor", "bordercolor", "height", "width"}
        ),
    }
)

# Attributes holding a URL; checked with filter_url
URL_ATTRIBUTES: frozenset[str] = frozenset({"href", "src", "lowsrc", "dynsrc"})

SAFE_GLOBAL_ATTRIBUTES: frozenset[str] = frozenset({"class"})
DENIED_ATTRIBUTES: frozenset[str] = frozenset({"id"})
DENIED_ATTRIBUTE_PREFIX = "on"  # event handlers

DENIED_STYLES: frozenset[str] = frozenset({"display", "position", "z-index"})
DENIED_STYLE_VALUES: tuple[str, ...] = ("expression", "javascript:")


# =============================================================================
# Filters
# =============================================================================


@register_filter("unsafe")
class UnsafeFilter(BaseFilter):
    """Accepts everything, links included. For trusted input only."""

    __slots__ = ()

    def filter_url(self, url: str) -> str | None:
        return url or None


@register_filter("strip")
class StripFilter(BaseFilter):
    """Rejects every tag, attribute and style; text passes through."""

    __slots__ = ()

    def filter_tag(self, tag: Tag) -> bool:
        return False

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        return None

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        return None


class WhitelistFilter(BaseFilter):
    """Table-driven filter: allowed tags and per-tag allowed attributes.

    URL attributes must also pass filter_url. Styles are rejected unless a
    subclass overrides filter_style.
    """

    __slots__ = ()

    tags: frozenset[str] = frozenset()
    attributes: Mapping[str, frozenset[str]] = MappingProxyType({})

    def filter_tag(self, tag: Tag) -> bool:
        return tag.name in self.tags

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        name = name.lower()
        allowed = self.attributes.get(tag_name.lower())
        if allowed is None or name not in allowed:
            return None
        if name in URL_ATTRIBUTES:
            return self.filter_url(value)
        return value

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        return None


@register_filter("strict")
class StrictFilter(WhitelistFilter):
    """Simple formatting, lists, links and images; no styles.

    Usage:
            >>> from distiller import distill
            >>> distill('<p onclick="x()">Hi <b>there</b></p>', StrictFilter())
            'Hi <b>there</b>'

    """

    __slots__ = ()

    tags = STRICT_TAGS
    attributes = STRICT_ATTRIBUTES


@register_filter("safe")
class SafeFilter(WhitelistFilter):
    """Broad HTML 4 whitelist without scripting or forms.

    ``id`` and ``on*`` attributes are denied everywhere and ``class`` is
    allowed everywhere. Styles are allowed except positioning and anything
    that can run script.
    """

    __slots__ = ()

    tags = SAFE_TAGS
    attributes = SAFE_ATTRIBUTES

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        lowered = name.lower()
        if lowered in DENIED_ATTRIBUTES or lowered.startswith(DENIED_ATTRIBUTE_PREFIX):
            return None
        if lowered in SAFE_GLOBAL_ATTRIBUTES:
            return value
        return super().filter_attribute(tag_name, name, value)

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        lowered = value.lower()
        for denied in DENIED_STYLE_VALUES:
            if denied in lowered:
                return None
        if name.lower() in DENIED_STYLES:
            return None
        return value


__all__ = [
    "DENIED_STYLES",
    "SAFE_ATTRIBUTES",
    "SAFE_TAGS",
    "STRICT_ATTRIBUTES",
    "STRICT_TAGS",
    "SafeFilter",
    "StrictFilter",
    "StripFilter",
    "URL_ATTRIBUTES",
    "UnsafeFilter",
    "WhitelistFilter",
]
