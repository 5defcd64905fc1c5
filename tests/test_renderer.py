"""Tests for the HTML span renderer."""

import pytest

from lsp_highlight.config import HighlightConfig, highlight_config_context
from lsp_highlight.errors import RenderError
from lsp_highlight.renderers import HtmlRenderer, SpanRenderer, html_escape, render
from lsp_highlight.staple import LINE_BREAK
from lsp_highlight.tokens import AbsoluteToken, Span


def _styled(text: str, type_: str, *modifiers: str) -> Span:
    return Span(text, AbsoluteToken(0, 0, len(text), type_, frozenset(modifiers)))


class TestHtmlEscape:
    def test_five_characters(self) -> None:
        assert html_escape("<>&\"'") == "&lt;&gt;&amp;&quot;&apos;"

    def test_ampersand_escaped_once(self) -> None:
        assert html_escape("&lt;") == "&amp;lt;"

    def test_plain_text_unchanged(self) -> None:
        assert html_escape("let x = 1") == "let x = 1"

    def test_non_ascii_unchanged(self) -> None:
        assert html_escape("é😀") == "é😀"


class TestRender:
    def test_scenario_markup_inside_string(self) -> None:
        assert render([_styled('"a<b"', "string")]) == (
            '<span class="lsp-type-string">&quot;a&lt;b&quot;</span>'
        )

    def test_unstyled_text_escaped_without_wrapper(self) -> None:
        assert render([Span("a && b")]) == "a &amp;&amp; b"

    def test_line_break_emitted_literally(self) -> None:
        spans = [_styled("a", "variable"), Span(LINE_BREAK), Span("b")]
        assert render(spans) == '<span class="lsp-type-variable">a</span>\nb'

    def test_modifier_classes_sorted(self) -> None:
        span = _styled("x", "variable", "readonly", "declaration")
        assert render([span]) == (
            '<span class="lsp-type-variable lsp-modifier-declaration '
            'lsp-modifier-readonly">x</span>'
        )

    def test_zero_width_span(self) -> None:
        assert render([_styled("", "comment")]) == '<span class="lsp-type-comment"></span>'

    def test_empty(self) -> None:
        assert render([]) == ""

    def test_repeated_types_reuse_tag(self) -> None:
        spans = [_styled("a", "keyword"), Span(" "), _styled("b", "keyword")]
        assert render(spans) == (
            '<span class="lsp-type-keyword">a</span> <span class="lsp-type-keyword">b</span>'
        )

    def test_rejects_non_span(self) -> None:
        with pytest.raises(RenderError, match="position 1"):
            render([Span("a"), "b"])  # type: ignore[list-item]


class TestClassPrefixes:
    def test_explicit_prefixes(self) -> None:
        renderer = HtmlRenderer(type_class_prefix="t-", modifier_class_prefix="m-")
        assert renderer.render([_styled("x", "variable", "static")]) == (
            '<span class="t-variable m-static">x</span>'
        )

    def test_configured_prefixes(self) -> None:
        config = HighlightConfig(type_class_prefix="tok-", modifier_class_prefix="mod-")
        with highlight_config_context(config):
            html = render([_styled("x", "variable", "static")])
        assert html == '<span class="tok-variable mod-static">x</span>'

    def test_explicit_prefix_wins_over_config(self) -> None:
        renderer = HtmlRenderer(type_class_prefix="t-")
        with highlight_config_context(HighlightConfig(type_class_prefix="tok-")):
            html = renderer.render([_styled("x", "variable")])
        assert html == '<span class="t-variable">x</span>'

    def test_class_names_are_escaped(self) -> None:
        assert render([_styled("x", 'a"b')]) == '<span class="lsp-type-a&quot;b">x</span>'


class TestProtocol:
    def test_html_renderer_conforms(self) -> None:
        renderer: SpanRenderer = HtmlRenderer()
        assert renderer.render([Span("x")]) == "x"
