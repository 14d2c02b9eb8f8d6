"""Single-pass HTML distiller.

Reads markup one character at a time, recognizes tags and unparsed blocks,
and streams literals and tags through a filter into a sink. Along the way it
can repair tag nesting, normalize whitespace, encode or decode character
references and cut the text off at a maximum length.

Incremental mode:
Chunks are fed one at a time. The main loop records a sync point before every
token; when a token runs into the end of a chunk the feed stops there and the
unconsumed tail is prepended to the next chunk. ``end_incremental()`` runs a
final pass over whatever is left, closing dangling tags.

Thread Safety:
A Distiller is a single-owner state machine. Use one instance per parse, or
guard a shared instance with a lock. Re-entering a running instance raises
ConcurrentUseError.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from distiller.balancer import TagBalancer
from distiller.config import DistillConfig, get_distill_config
from distiller.cursor import Cursor
from distiller.engine.charsets import (
    LESS_THAN_ENTITY,
    LT,
    is_space_or_control,
    needs_encoding,
)
from distiller.engine.markup import MarkupScannerMixin
from distiller.engine.text import TextScannerMixin
from distiller.entities import ENTITY_START
from distiller.errors import (
    ConcurrentUseError,
    DistillerError,
    IncompleteInputError,
)
from distiller.filters.base import NullFilter
from distiller.filters.protocol import HtmlFilter
from distiller.tags import Tag, TagType, Taxonomy
from distiller.utils.logger import get_logger
from distiller.writers.html import HtmlWriter
from distiller.writers.protocol import HtmlSink, ReversePeek

logger = get_logger(__name__)


class Distiller(
    # Scanners (mode-specific scanning logic)
    MarkupScannerMixin,
    TextScannerMixin,
):
    """Filterable HTML tokenizer and re-serializer.

    Usage:
            >>> from distiller.filters import StrictFilter
            >>> distiller = Distiller(filter=StrictFilter())
            >>> distiller.parse('<p onclick="x()">Hi <b>there</b></p>')
            >>> distiller.sink.getvalue()
            'Hi <b>there</b>'

    Args:
        config: Settings for this instance. Defaults to the ambient
            DistillConfig of the current context.
        filter: Whitelist applied to tags, attributes, styles and literals.
            Defaults to NullFilter (accept everything). Its bind() is called
            at the start of each run when it defines one.
        sink: Output receiver. Defaults to a fresh HtmlWriter.

    """

    __slots__ = (
        "_config",
        "_filter",
        "_sink",
        "_reverse_peek",  # Sink as ReversePeek, or None when unsupported
        "_cursor",
        "_balancer",
        "_taxonomy",  # OR of every rendered tag's taxonomy
        "_incremental",
        "_running",
    )

    def __init__(
        self,
        config: DistillConfig | None = None,
        *,
        filter: HtmlFilter | None = None,  # noqa: A002
        sink: HtmlSink | None = None,
    ) -> None:
        self._config = config if config is not None else get_distill_config()
        self._filter: HtmlFilter = filter if filter is not None else NullFilter()
        self._sink: HtmlSink = sink if sink is not None else HtmlWriter()
        self._reverse_peek: ReversePeek | None = (
            self._sink if isinstance(self._sink, ReversePeek) else None
        )
        self._cursor = Cursor(max_length=self._config.max_length)
        self._balancer = TagBalancer()
        self._taxonomy = Taxonomy.NONE
        self._incremental = False
        self._running = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> DistillConfig:
        return self._config

    @property
    def filter(self) -> HtmlFilter:
        return self._filter

    @property
    def sink(self) -> HtmlSink:
        return self._sink

    @property
    def source(self) -> str:
        """The buffer of the current (or last) run."""
        return self._cursor.source

    @property
    def taxonomy(self) -> Taxonomy:
        """Content categories of every tag rendered so far."""
        return self._taxonomy

    @property
    def is_incremental(self) -> bool:
        return self._incremental

    # =========================================================================
    # Public API
    # =========================================================================

    def parse(self, source: str) -> None:
        """Distill a complete document into the sink."""
        with self._exclusive():
            self._incremental = False
            self._start(source or "")
            self._run()

    def begin_incremental(self) -> None:
        """Start a new document that will arrive in chunks."""
        with self._exclusive():
            self._incremental = True
            self._start("")

    def feed(self, chunk: str) -> None:
        """Distill the next chunk of an incremental document.

        Raises:
            DistillerError: If begin_incremental() was not called first.
        """
        if not self._incremental:
            raise DistillerError("feed() requires begin_incremental() first")
        with self._exclusive():
            cursor = self._cursor
            cursor.reset(cursor.tail() + (chunk or ""))
            self._run()

    def end_incremental(self) -> None:
        """Finish an incremental document.

        Distills any retained tail, closes open tags and writes the
        truncation indicator if the text was cut short.

        Raises:
            DistillerError: If begin_incremental() was not called first.
        """
        if not self._incremental:
            raise DistillerError("end_incremental() requires begin_incremental() first")
        with self._exclusive():
            cursor = self._cursor
            tail = cursor.tail()
            self._incremental = False
            cursor.reset(tail)
            self._run()

    # =========================================================================
    # Run control
    # =========================================================================

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._running:
            raise ConcurrentUseError("Distiller is already running")
        self._running = True
        try:
            yield
        finally:
            self._running = False

    def _start(self, source: str) -> None:
        """Reset per-document state."""
        bind = getattr(self._filter, "bind", None)
        if bind is not None:
            bind(self._sink)
        self._balancer.clear()
        self._taxonomy = Taxonomy.NONE
        self._cursor.clear()
        self._cursor.max_length = self._config.max_length
        self._cursor.reset(source)
        logger.debug(
            "Starting %s document (%d chars)",
            "incremental" if self._incremental else "complete",
            len(source),
        )

    def _run(self) -> None:
        """Main loop over the current buffer."""
        cursor = self._cursor
        config = self._config
        normalize = config.normalize_whitespace
        encode = config.encode_non_ascii

        try:
            while not cursor.is_eof:
                cursor.mark_sync()
                ch = cursor.source[cursor.index]

                if ch == LT:
                    self._scan_markup()
                elif normalize and is_space_or_control(ch):
                    self._scan_whitespace()
                elif encode and needs_encoding(ch):
                    self._scan_encoded_char(ch)
                elif ch == ENTITY_START:
                    self._scan_entity()
                else:
                    cursor.advance()
                    cursor.count_text()

            self._write_buffer()
            cursor.sync_point = -1

            if config.balance_tags and not self._incremental:
                for tag in self._balancer.drain():
                    self._render_tag(tag)

        except IncompleteInputError as exc:
            logger.debug(
                "Input ended mid-token; keeping %d chars from sync point %d",
                len(cursor.source) - exc.sync_point,
                exc.sync_point,
            )

        if not self._incremental:
            if cursor.truncated:
                self._write_literal(config.effective_truncation_indicator)
            logger.debug(
                "Finished document: %d text chars, taxonomy=%r",
                cursor.text_size,
                self._taxonomy,
            )

    # =========================================================================
    # Tags
    # =========================================================================

    def _scan_markup(self) -> None:
        cursor = self._cursor
        self._write_buffer()

        tag = self._parse_tag()
        if tag is None:
            if self._config.encode_non_ascii:
                self._write_literal(LESS_THAN_ENTITY)
                cursor.skip(1)
            else:
                cursor.advance()
            cursor.count_text()
            return

        balance = self._config.balance_tags
        if tag.tag_type is TagType.BEGIN:
            if balance:
                self._balancer.push(tag)
            self._render_tag(tag)
        elif tag.tag_type is TagType.END and balance:
            for rendered in self._balancer.close(tag):
                self._render_tag(rendered)
        else:
            self._render_tag(tag)

    def _render_tag(self, tag: Tag) -> None:
        """Filter a tag and write it to the sink.

        A failing filter hook does not stop the parse: an error marker is
        written in place of the tag.
        """
        html_filter = self._filter
        try:
            if html_filter.filter_tag(tag):
                self._sink.write_tag(tag.filtered(html_filter))
                self._taxonomy |= tag.taxonomy
        except ConcurrentUseError:
            raise
        except Exception as exc:
            logger.warning("Filter failed on %r: %s", tag, exc)
            self._sink.write_literal(f"[ERROR: {exc}]")

    # =========================================================================
    # Literals
    # =========================================================================

    def _write_buffer(self) -> None:
        start, end = self._cursor.take_pending()
        self._write_span(self._cursor.source, start, end)

    def _write_literal(self, text: str) -> None:
        self._write_span(text, 0, len(text))

    def _write_span(self, source: str, start: int, end: int) -> None:
        if start >= end:
            return
        replacement = self._filter.filter_literal(source, start, end)
        if replacement is None:
            self._sink.write_literal(source[start:end])
        else:
            self._sink.write_literal(replacement)

    def __repr__(self) -> str:
        return (
            f"Distiller(incremental={self._incremental}, "
            f"open_tags={len(self._balancer)}, cursor={self._cursor!r})"
        )
