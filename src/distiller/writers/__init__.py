"""Output sinks for Distiller.

Provides:
- HtmlSink / ReversePeek: sink protocols
- HtmlWriter: HTML serialization (default)
- RecordingSink: event recording
"""

from distiller.writers.html import HtmlWriter, render_tag
from distiller.writers.protocol import HtmlSink, ReversePeek
from distiller.writers.recording import RecordingSink, SinkEvent

__all__ = [
    "HtmlSink",
    "HtmlWriter",
    "RecordingSink",
    "ReversePeek",
    "SinkEvent",
    "render_tag",
]
