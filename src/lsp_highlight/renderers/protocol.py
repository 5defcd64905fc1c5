"""SpanRenderer protocol: stable interface for span renderers.

Any renderer that implements ``render(spans) -> str`` conforms to this protocol.
The built-in ``HtmlRenderer`` is the reference implementation.

Example:
    from lsp_highlight.renderers.protocol import SpanRenderer

    def render_file(renderer: SpanRenderer, spans: list[Span]) -> str:
        return renderer.render(spans)

"""

from collections.abc import Sequence
from typing import Protocol

from lsp_highlight.tokens import Span


class SpanRenderer(Protocol):
    """Protocol for span renderers.

    Implementations must accept stapled spans and return a rendered string.
    The built-in ``HtmlRenderer`` conforms to this protocol.

    """

    def render(self, spans: Sequence[Span]) -> str:
        """Render spans to a string.

        Args:
            spans: Output of staple(), in order.

        Returns:
            Rendered string output.

        """
        ...
