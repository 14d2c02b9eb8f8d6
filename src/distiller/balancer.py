"""Open-element stack with mismatch repair.

The balancer decides what an END tag turns into:

1. Nothing is open: the END tag is dropped.
2. The innermost open element matches: the END tag closes it.
3. No open element matches: the END tag is dropped.
4. A deeper element matches: every element in between is closed, the END
   tag closes the match, and the in-between elements are re-opened outermost
   first so their content keeps its formatting.

Thread Safety:
TagBalancer instances are owned by a single Distiller run.

"""

from __future__ import annotations

from collections.abc import Iterator

from distiller.tags import Tag, TagType
from distiller.utils.logger import get_logger

logger = get_logger(__name__)


class TagBalancer:
    """Stack of open BEGIN tags, most recent on top.

    Usage:
            >>> balancer = TagBalancer()
            >>> balancer.push(Tag("b"))
            >>> balancer.push(Tag("i"))
            >>> [str(t) for t in balancer.close(Tag("/b"))]
            ['</i>', '</b>', '<i>']

    """

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[Tag] = []

    def push(self, tag: Tag) -> None:
        self._stack.append(tag)

    def close(self, end_tag: Tag) -> list[Tag]:
        """Resolve an END tag against the stack.

        Args:
            end_tag: The END tag read from the source

        Returns:
            Tags to render, in order. Empty when the END tag is dropped.
        """
        if end_tag.tag_type is not TagType.END:
            raise ValueError(f"expected an END tag, got {end_tag!r}")

        if not self._stack:
            logger.debug("Dropping unmatched end tag </%s>: nothing open", end_tag.raw_name)
            return []

        name = end_tag.name
        if self._stack[-1].name == name:
            self._stack.pop()
            return [end_tag]

        depth = self._find(name)
        if depth < 0:
            logger.debug("Dropping unmatched end tag </%s>", end_tag.raw_name)
            return []

        intervening = self._stack[depth + 1 :]
        del self._stack[depth:]
        logger.debug(
            "Repairing </%s>: closing and reopening %d element(s)",
            end_tag.raw_name,
            len(intervening),
        )

        rendered: list[Tag] = []
        for tag in reversed(intervening):
            close_tag = tag.create_close_tag()
            if close_tag is not None:
                rendered.append(close_tag)
        rendered.append(end_tag)
        for tag in intervening:
            self._stack.append(tag)
            rendered.append(tag)
        return rendered

    def drain(self) -> list[Tag]:
        """Pop every open element and return their close tags, innermost first."""
        rendered: list[Tag] = []
        while self._stack:
            close_tag = self._stack.pop().create_close_tag()
            if close_tag is not None:
                rendered.append(close_tag)
        return rendered

    def clear(self) -> None:
        self._stack.clear()

    def _find(self, name: str) -> int:
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].name == name:
                return depth
        return -1

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)

    def __iter__(self) -> Iterator[Tag]:
        """Iterate open elements innermost first."""
        return reversed(self._stack)


__all__ = ["TagBalancer"]
