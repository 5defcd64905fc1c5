"""lsp-highlight renderers.

Renderers turn stapled spans into an output format.

Available Renderers:
- HtmlRenderer: Renders spans to an HTML fragment with one <span> per token

Thread Safety:
Renderers keep no per-render state on the instance.
Safe for concurrent use from multiple threads.

"""

from lsp_highlight.renderers.html import HtmlRenderer, html_escape, render
from lsp_highlight.renderers.protocol import SpanRenderer

__all__ = ["HtmlRenderer", "SpanRenderer", "html_escape", "render"]
