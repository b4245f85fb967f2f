"""FTML renderers.

Renderers convert a Document into an output format without modifying it.

Available Renderers:
- CanonicalWriter: Renders a Document to canonical FTML markup
- TerminalRenderer: Renders a Document to fixed-width ASCII or ANSI text

Thread Safety:
All renderers keep per-call state local to each render() call.
Safe for concurrent use from multiple threads.

"""

from ftml.renderers.canonical import CanonicalWriter, write, write_string
from ftml.renderers.protocol import DocumentRenderer
from ftml.renderers.terminal import TerminalRenderer, render_terminal

__all__ = [
    "CanonicalWriter",
    "DocumentRenderer",
    "TerminalRenderer",
    "render_terminal",
    "write",
    "write_string",
]
