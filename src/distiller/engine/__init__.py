"""Tokenizer engine for Distiller.

The Distiller class composes scanner mixins the same way for every run:

- MarkupScannerMixin: tags, unparsed blocks, attributes, styles
- TextScannerMixin: whitespace normalization, character references

Usage:
    >>> from distiller.engine import Distiller
    >>> distiller = Distiller()
    >>> distiller.parse("<b>bold")
    >>> distiller.sink.getvalue()
    '<b>bold</b>'

"""

from __future__ import annotations

from distiller.engine.core import Distiller

__all__ = ["Distiller"]
