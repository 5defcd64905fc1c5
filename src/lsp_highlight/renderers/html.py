"""HTML renderer for stapled spans.

Renders spans as an HTML fragment: unstyled text is escaped and emitted as
is, and each styled span is wrapped in ``<span class="...">`` carrying one
class for the token type and one per modifier::

    <span class="lsp-type-variable lsp-modifier-declaration">count</span>

Class prefixes come from HighlightConfig unless given explicitly.

Thread Safety:
All per-render state is local to render(). Multiple threads can safely share
a single HtmlRenderer instance.
"""

from __future__ import annotations

from collections.abc import Sequence

from lsp_highlight.config import get_highlight_config
from lsp_highlight.errors import RenderError
from lsp_highlight.tokens import AbsoluteToken, Span


# https://www.w3.org/International/questions/qa-escapes#use
_ESCAPES = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        "&": "&amp;",
        '"': "&quot;",
        "'": "&apos;",
    }
)


def html_escape(s: str) -> str:
    """Escape the five HTML special characters to named entities.

    Unlike html.escape(), single quotes become ``&apos;``.
    """
    return s.translate(_ESCAPES)


class HtmlRenderer:
    """Render spans to an HTML fragment.

    Usage:
        >>> renderer = HtmlRenderer()
        >>> renderer.render([Span("x", AbsoluteToken(0, 0, 1, "variable")), Span(" < y")])
        '<span class="lsp-type-variable">x</span> &lt; y'

    Thread Safety:
        Instances hold only immutable settings.
    """

    __slots__ = ("_modifier_class_prefix", "_type_class_prefix")

    def __init__(
        self,
        *,
        type_class_prefix: str | None = None,
        modifier_class_prefix: str | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            type_class_prefix: Prefix for the type class (config default if None)
            modifier_class_prefix: Prefix for modifier classes (config default if None)
        """
        self._type_class_prefix = type_class_prefix
        self._modifier_class_prefix = modifier_class_prefix

    def render(self, spans: Sequence[Span]) -> str:
        """Render spans to an HTML string.

        Args:
            spans: Output of staple(), in order

        Returns:
            HTML fragment; line-break spans appear as literal separators.

        Raises:
            RenderError: If an element of spans is not a Span.
        """
        config = get_highlight_config()
        type_prefix = (
            self._type_class_prefix
            if self._type_class_prefix is not None
            else config.type_class_prefix
        )
        modifier_prefix = (
            self._modifier_class_prefix
            if self._modifier_class_prefix is not None
            else config.modifier_class_prefix
        )

        # (type, modifiers) -> opening tag; most files reuse a handful
        open_tags: dict[tuple[str, frozenset[str]], str] = {}
        parts: list[str] = []

        for position, span in enumerate(spans):
            if not isinstance(span, Span):
                raise RenderError(
                    f"Expected Span at position {position}, got {type(span).__name__}"
                )
            token = span.token
            if token is None:
                parts.append(html_escape(span.text))
                continue

            key = (token.type, token.modifiers)
            tag = open_tags.get(key)
            if tag is None:
                tag = open_tags[key] = self._open_tag(token, type_prefix, modifier_prefix)
            parts.append(tag)
            parts.append(html_escape(span.text))
            parts.append("</span>")

        return "".join(parts)

    @staticmethod
    def _open_tag(token: AbsoluteToken, type_prefix: str, modifier_prefix: str) -> str:
        classes = [f"{type_prefix}{token.type}"]
        classes.extend(f"{modifier_prefix}{name}" for name in sorted(token.modifiers))
        return f'<span class="{html_escape(" ".join(classes))}">'


def render(spans: Sequence[Span]) -> str:
    """Render spans to HTML with the configured class prefixes."""
    return HtmlRenderer().render(spans)


__all__ = ["HtmlRenderer", "html_escape", "render"]
