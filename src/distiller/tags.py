"""Tag model and HTML taxonomy tables.

A Tag is one recognized lexical unit: a begin/end/self-closing element tag or
an unparsed block (comment, CDATA, declaration, processing instruction, server
code block). The tokenizer builds a Tag per occurrence, fills in its
attributes and styles, and hands it to the filter pipeline and sink.

Taxonomy:
Every tag name maps to a bitset of content categories (Text, Inline, Block,
Table, Form, Script, ...). The Distiller ORs the taxonomy of every rendered
tag so callers can ask "did this content contain any table markup" without
re-walking the output.

Thread Safety:
The lookup tables are immutable module constants. Tag instances are owned by
the Distiller run that created them.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from enum import Enum, IntFlag, auto
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from distiller.filters.protocol import HtmlFilter

STYLE_ATTRIBUTE = "style"


class TagType(Enum):
    """Lexical kind of a tag."""

    UNPARSED = auto()  # <!-- -->, <![CDATA[ ]]>, <! >, <? ?>, <% %>
    BEGIN = auto()  # <div>
    END = auto()  # </div>
    FULL = auto()  # <br>, <div />


class Taxonomy(IntFlag):
    """General content categories of HTML elements.

    Based on the HTML 4.01 element index and the XHTML modularization
    abstract modules.
    """

    NONE = 0x0000
    COMMENT = 0x0001
    TEXT = 0x0002
    INLINE = 0x0004
    BLOCK = 0x0008
    LIST = 0x0010
    TABLE = 0x0020
    STYLE = 0x0040
    FORM = 0x0080
    SCRIPT = 0x0100
    EMBEDDED = 0x0200
    DOCUMENT = 0x0400
    UNKNOWN = 0x8000


# Elements that never have content (HTML 4.01 "EMPTY")
VOID_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "basefont",
        "br",
        "col",
        "frame",
        "hr",
        "img",
        "input",
        "isindex",
        "link",
        "meta",
        "param",
        "wbr",
    }
)

_TAXONOMY_GROUPS: tuple[tuple[Taxonomy, tuple[str, ...]], ...] = (
    (Taxonomy.COMMENT, ("!--",)),
    (
        Taxonomy.TEXT | Taxonomy.INLINE,
        (
            "a", "abbr", "acronym", "address", "area", "bdo", "cite", "code",
            "dfn", "em", "img", "isindex", "kbd", "label", "legend", "map",
            "q", "samp", "span", "strong", "var", "wbr",
        ),
    ),
    (
        Taxonomy.TEXT | Taxonomy.STYLE | Taxonomy.INLINE,
        (
            "b", "big", "blink", "font", "i", "marquee", "s", "small",
            "strike", "sub", "sup", "tt", "u",
        ),
    ),
    (
        Taxonomy.TEXT | Taxonomy.BLOCK,
        (
            "blockquote", "bq", "br", "center", "del", "div", "fieldset",
            "h1", "h2", "h3", "h4", "h5", "h6", "hr", "ins", "nobr", "p", "pre",
        ),
    ),
    (
        Taxonomy.LIST,
        ("dl", "dd", "dir", "dt", "lh", "li", "menu", "ol", "ul"),
    ),
    (
        Taxonomy.TABLE,
        (
            "table", "tbody", "td", "th", "thead", "tfoot", "tr", "caption",
            "col", "colgroup",
        ),
    ),
    (
        Taxonomy.FORM,
        ("button", "form", "input", "optgroup", "option", "select", "textarea"),
    ),
    (
        Taxonomy.EMBEDDED,
        ("applet", "bgsound", "embed", "noembed", "object", "param", "sound"),
    ),
    (Taxonomy.STYLE | Taxonomy.DOCUMENT, ("basefont", "style")),
    (
        Taxonomy.SCRIPT | Taxonomy.DOCUMENT,
        ("%", "%=", "%@", "%!", "%#", "%$", "%--", "noscript", "script"),
    ),
    (
        Taxonomy.DOCUMENT,
        (
            "!", "?", "![cdata[", "base", "body", "head", "html", "frameset",
            "frame", "iframe", "link", "meta", "noframes", "title",
        ),
    ),
)

TAXONOMY_TABLE: Mapping[str, Taxonomy] = MappingProxyType(
    {name: flags for flags, names in _TAXONOMY_GROUPS for name in names}
)


def taxonomy_of(name: str) -> Taxonomy:
    """Look up the taxonomy for a lowercase tag name."""
    return TAXONOMY_TABLE.get(name, Taxonomy.UNKNOWN)


class AttributeMap(MutableMapping[str, "AttributeValue"]):
    """Case-insensitive attribute mapping.

    Lookups ignore case; iteration yields each key in the spelling it was
    first stored with, in insertion order.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, AttributeValue] | None = None) -> None:
        self._items: dict[str, tuple[str, AttributeValue]] = {}
        if items:
            self.update(items)

    def __getitem__(self, key: str) -> AttributeValue:
        return self._items[key.lower()][1]

    def __setitem__(self, key: str, value: AttributeValue) -> None:
        folded = key.lower()
        existing = self._items.get(folded)
        self._items[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        del self._items[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (raw for raw, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __repr__(self) -> str:
        return f"AttributeMap({dict(self.items())!r})"


class Tag:
    """One recognized tag or unparsed block.

    The tag type is derived once from the raw name. The only change allowed
    afterwards is BEGIN -> FULL, when attribute parsing finds a bare trailing
    solidus.

    Usage:
        >>> tag = Tag("DIV")
        >>> tag.tag_type, tag.name, tag.raw_name
        (<TagType.BEGIN: 2>, 'div', 'DIV')
        >>> Tag("/p").tag_type
        <TagType.END: 3>
        >>> Tag("br").tag_type
        <TagType.FULL: 4>
        >>> Tag("!--").taxonomy
        <Taxonomy.COMMENT: 1>

    """

    __slots__ = (
        "_raw_name",
        "_name",
        "_tag_type",
        "_taxonomy",
        "attributes",
        "styles",
        "content",
        "end_delimiter",
    )

    def __init__(self, raw_name: str) -> None:
        raw_name = (raw_name or "").strip()

        if raw_name.startswith(("!", "?", "%")):
            tag_type = TagType.UNPARSED
        elif raw_name.startswith("/"):
            tag_type = TagType.END
            raw_name = raw_name[1:]
        elif raw_name.lower() in VOID_TAGS:
            tag_type = TagType.FULL
        else:
            tag_type = TagType.BEGIN

        self._raw_name = raw_name
        self._name: str | None = None
        self._tag_type = tag_type
        self._taxonomy: Taxonomy | None = None
        self.attributes = AttributeMap()
        self.styles: dict[str, str] = {}
        self.content = ""
        self.end_delimiter = ""

    @property
    def raw_name(self) -> str:
        """Tag name in its original case."""
        return self._raw_name

    @property
    def name(self) -> str:
        """Lowercase tag name."""
        if self._name is None:
            self._name = self._raw_name.lower()
        return self._name

    @property
    def tag_type(self) -> TagType:
        return self._tag_type

    @property
    def taxonomy(self) -> Taxonomy:
        """Content categories of this tag (looked up on first access)."""
        if self._taxonomy is None:
            self._taxonomy = taxonomy_of(self.name)
        return self._taxonomy

    @property
    def has_attributes(self) -> bool:
        return bool(self.attributes)

    @property
    def has_styles(self) -> bool:
        return bool(self.styles)

    def set_full_tag(self) -> None:
        """Change a BEGIN tag into a self-closing FULL tag."""
        if self._tag_type is TagType.BEGIN:
            self._tag_type = TagType.FULL

    def create_close_tag(self) -> Tag | None:
        """Return the END tag that closes this BEGIN tag, or None."""
        if self._tag_type is not TagType.BEGIN:
            return None
        return Tag("/" + self._raw_name)

    def create_open_tag(self) -> Tag | None:
        """Return a bare BEGIN (or FULL) tag matching this END tag, or None."""
        if self._tag_type is not TagType.END:
            return None
        return Tag(self._raw_name)

    def filtered(self, html_filter: HtmlFilter) -> Tag:
        """Copy of this tag keeping only attributes and styles the filter allows.

        Attribute values may come back rewritten. A code-block attribute value
        survives only if the filter accepts the nested tag.
        """
        clone = Tag.__new__(Tag)
        clone._raw_name = self._raw_name
        clone._name = self._name
        clone._tag_type = self._tag_type
        clone._taxonomy = self._taxonomy
        clone.content = self.content
        clone.end_delimiter = self.end_delimiter
        clone.attributes = AttributeMap()
        clone.styles = {}

        for key, value in self.attributes.items():
            if isinstance(value, Tag):
                if html_filter.filter_tag(value):
                    clone.attributes[key] = value
                continue
            kept = html_filter.filter_attribute(self.name, key, value)
            if kept is not None:
                clone.attributes[key] = kept

        for key, value in self.styles.items():
            kept = html_filter.filter_style(self.name, key, value)
            if key and kept:
                clone.styles[key] = kept

        return clone

    def __repr__(self) -> str:
        return f"Tag({self._tag_type.name}, {self._raw_name!r})"

    def __str__(self) -> str:
        """Render the tag as HTML without filtering."""
        from distiller.writers.html import HtmlWriter

        writer = HtmlWriter()
        writer.write_tag(self)
        return writer.getvalue()


AttributeValue: TypeAlias = "str | Tag"


__all__ = [
    "AttributeMap",
    "AttributeValue",
    "STYLE_ATTRIBUTE",
    "TAXONOMY_TABLE",
    "Tag",
    "TagType",
    "Taxonomy",
    "VOID_TAGS",
    "taxonomy_of",
]
