"""
Distiller: Filterable HTML Tokenizer and Re-serializer

Cleans untrusted or sloppy markup in a single pass: repairs tag nesting,
applies a whitelist filter, normalizes whitespace, truncates long text and
encodes character references. Zero runtime dependencies.

Quick Start:
    >>> from distiller import distill, distill_safe, plain_text
    >>> distill("<b><i>text</b></i>")
    '<b><i>text</i></b><i></i>'
    >>> distill_safe('<p onclick="evil()">Hi</p><script>x()</script>')
    '<p>Hi</p>x()'
    >>> plain_text("<p>Fish &amp; chips</p>")
    'Fish & chips'

Chunked Input:
    >>> from distiller import Distiller
    >>> distiller = Distiller()
    >>> distiller.begin_incremental()
    >>> distiller.feed("<d")
    >>> distiller.feed("iv>x</div>")
    >>> distiller.end_incremental()
    >>> distiller.sink.getvalue()
    '<div>x</div>'

"""

from __future__ import annotations

from dataclasses import replace

from distiller.balancer import TagBalancer
from distiller.config import (
    DistillConfig,
    distill_config_context,
    get_distill_config,
    reset_distill_config,
    set_distill_config,
)
from distiller.cursor import Cursor
from distiller.engine import Distiller
from distiller.entities import (
    decode_entities,
    decode_entity,
    encode_attribute,
    encode_entity,
)
from distiller.errors import (
    ConcurrentUseError,
    ConfigError,
    DistillerError,
    IncompleteInputError,
)
from distiller.filters import (
    BUILTIN_FILTERS,
    FilterDecorator,
    HtmlFilter,
    HyperlinkFilter,
    NullFilter,
    SafeFilter,
    StrictFilter,
    StripFilter,
    UnsafeFilter,
    WordBreakFilter,
    create_filter,
    get_filter,
    register_filter,
)
from distiller.tags import AttributeMap, Tag, TagType, Taxonomy
from distiller.writers import HtmlSink, HtmlWriter, RecordingSink, ReversePeek

__version__ = "0.1.0"


def distill(
    source: str,
    filter: HtmlFilter | None = None,  # noqa: A002
    *,
    max_length: int = 0,
    config: DistillConfig | None = None,
) -> str:
    """Distill markup to HTML.

    Args:
        source: Markup to distill
        filter: Whitelist filter (NullFilter when None)
        max_length: Maximum plain-text length; overrides the config value
            when non-zero
        config: Settings (the ambient DistillConfig when None)

    Returns:
        Distilled HTML string

    Example:
        >>> distill("<p>one<p>two", StrictFilter())
        'onetwo'
    """
    if config is None:
        config = get_distill_config()
    if max_length:
        config = replace(config, max_length=max_length)

    writer = HtmlWriter()
    Distiller(config, filter=filter, sink=writer).parse(source)
    return writer.getvalue()


def distill_safe(
    source: str,
    max_length: int = 0,
    max_word_length: int = 0,
    auto_link: bool = False,
) -> str:
    """Distill untrusted markup with the safe whitelist.

    Args:
        source: Markup to distill
        max_length: Maximum plain-text length (0 = unlimited)
        max_word_length: Break words longer than this (0 = never)
        auto_link: Wrap URLs found in text in hyperlinks

    Returns:
        Distilled HTML string
    """
    html_filter = create_filter(
        "safe", max_word_length=max_word_length, auto_link=auto_link
    )
    return distill(source, html_filter, max_length=max_length)


def plain_text(source: str, max_length: int = 0) -> str:
    """Strip all markup and decode character references.

    Example:
        >>> plain_text("<p>caf&eacute;</p>", max_length=3)
        'caf...'
    """
    config = replace(
        get_distill_config(),
        max_length=max_length,
        encode_non_ascii=False,
    )
    return distill(source, StripFilter(), config=config)


__all__ = [
    # Convenience API
    "distill",
    "distill_safe",
    "plain_text",
    # Engine
    "Distiller",
    "Cursor",
    "TagBalancer",
    # Tags
    "AttributeMap",
    "Tag",
    "TagType",
    "Taxonomy",
    # Entities
    "decode_entities",
    "decode_entity",
    "encode_attribute",
    "encode_entity",
    # Filters
    "BUILTIN_FILTERS",
    "FilterDecorator",
    "HtmlFilter",
    "HyperlinkFilter",
    "NullFilter",
    "SafeFilter",
    "StrictFilter",
    "StripFilter",
    "UnsafeFilter",
    "WordBreakFilter",
    "create_filter",
    "get_filter",
    "register_filter",
    # Writers
    "HtmlSink",
    "HtmlWriter",
    "RecordingSink",
    "ReversePeek",
    # Configuration
    "DistillConfig",
    "distill_config_context",
    "get_distill_config",
    "reset_distill_config",
    "set_distill_config",
    # Errors
    "ConcurrentUseError",
    "ConfigError",
    "DistillerError",
    "IncompleteInputError",
    "__version__",
]
