"""Tests for the high-level lsp-highlight API."""

import pytest

from lsp_highlight import (
    AbsoluteToken,
    CompilerToken,
    CompilerTokenKind,
    EncodingBoundaryError,
    Highlighter,
    HtmlRenderer,
    MalformedStreamError,
    OrderingViolationError,
    Span,
    TextPositionEncoding,
    TokenLegend,
    highlight,
)
from lsp_highlight.legend import DEFAULT_LEGEND

LEGEND = TokenLegend(("keyword", "string", "variable"), ("declaration",))


class TestHighlightFunction:
    """Tests for the highlight() function."""

    def test_semantic_only(self) -> None:
        html = highlight('let "hi ok"', [0, 0, 3, 0, 0, 0, 4, 7, 1, 1], legend=LEGEND)
        assert html == (
            '<span class="lsp-type-keyword">let</span> '
            '<span class="lsp-type-string lsp-modifier-declaration">'
            "&quot;hi ok&quot;</span>"
        )

    def test_no_tokens_escapes_source(self) -> None:
        assert highlight("a < b\nc", [], legend=LEGEND) == "a &lt; b\nc"

    def test_empty_source(self) -> None:
        assert highlight("", [], legend=LEGEND) == ""

    def test_multi_line(self) -> None:
        html = highlight("x\n  y\n", [0, 0, 1, 2, 0, 1, 2, 1, 2, 0], legend=LEGEND)
        assert html == (
            '<span class="lsp-type-variable">x</span>\n'
            '  <span class="lsp-type-variable">y</span>\n'
        )

    def test_missing_legend_uses_default(self) -> None:
        keyword = DEFAULT_LEGEND.type_index("keyword")
        assert keyword is not None
        html = highlight("func", [0, 0, 4, keyword, 0])
        assert html == '<span class="lsp-type-keyword">func</span>'

    @pytest.mark.parametrize(
        ("encoding", "start"),
        [
            ("utf-8", 7),
            ("utf-16", 4),
            ("utf-32", 3),
            (TextPositionEncoding.UTF16, 4),
            (None, 4),
        ],
    )
    def test_position_encodings(
        self, encoding: TextPositionEncoding | str | None, start: int
    ) -> None:
        # Same token ("x") addressed in each encoding's units
        html = highlight("é😀 x", [0, start, 1, 2, 0], legend=LEGEND, position_encoding=encoding)
        assert html == 'é😀 <span class="lsp-type-variable">x</span>'

    def test_unknown_encoding_rejected(self) -> None:
        with pytest.raises(ValueError):
            highlight("x", [], legend=LEGEND, position_encoding="latin-1")


class TestCompilerTokens:
    def test_lexical_tokens_fill_gaps(self) -> None:
        compiler = [
            CompilerToken(CompilerTokenKind.KEYWORD, 1, 1, 1, 4),
            CompilerToken(CompilerTokenKind.LITERAL_NUMERIC, 1, 7, 1, 8),
        ]
        html = highlight("int x=1;", [0, 4, 1, 2, 1], legend=LEGEND, compiler_tokens=compiler)
        assert html == (
            '<span class="lsp-type-keyword">int</span> '
            '<span class="lsp-type-variable lsp-modifier-declaration">x</span>='
            '<span class="lsp-type-number">1</span>;'
        )

    def test_semantic_tokens_win_collisions(self) -> None:
        compiler = [CompilerToken(CompilerTokenKind.KEYWORD, 1, 1, 1, 4)]
        tokens = Highlighter().tokens(
            "foo", [0, 0, 3, 2, 0], legend=LEGEND, compiler_tokens=compiler
        )
        assert tokens == [AbsoluteToken(0, 0, 3, "variable")]

    def test_compiler_columns_are_bytes(self) -> None:
        compiler = [CompilerToken(CompilerTokenKind.COMMENT, 1, 1, 1, 5)]
        tokens = Highlighter().tokens(
            "//é x", [0, 4, 1, 2, 0], legend=LEGEND, compiler_tokens=compiler
        )
        assert tokens == [AbsoluteToken(0, 0, 3, "comment"), AbsoluteToken(0, 4, 1, "variable")]


class TestHighlighterClass:
    def test_call(self) -> None:
        assert Highlighter()("if", [0, 0, 2, 0, 0], legend=LEGEND) == (
            '<span class="lsp-type-keyword">if</span>'
        )

    def test_spans(self) -> None:
        spans = Highlighter().spans("a\nbc", [1, 1, 1, 2, 0], legend=LEGEND)
        assert spans == [
            Span("a"),
            Span("\n"),
            Span("b"),
            Span("c", AbsoluteToken(1, 1, 1, "variable")),
        ]

    def test_render_spans(self) -> None:
        hl = Highlighter(renderer=HtmlRenderer(type_class_prefix="k-"))
        spans = hl.spans("if", [0, 0, 2, 0, 0], legend=LEGEND)
        assert hl.render(spans) == '<span class="k-keyword">if</span>'

    def test_custom_renderer(self) -> None:
        class TextRenderer:
            def render(self, spans):
                return "|".join(span.text for span in spans)

        hl = Highlighter(renderer=TextRenderer())
        assert hl("ab", [0, 0, 1, 0, 0], legend=LEGEND) == "a|b"


class TestFailureAbortsFile:
    """Any stage failure raises; no partial output is produced."""

    def test_malformed_stream(self) -> None:
        with pytest.raises(MalformedStreamError):
            highlight("abc", [0, 0, 1], legend=LEGEND)

    def test_token_past_line_end(self) -> None:
        with pytest.raises(EncodingBoundaryError):
            highlight("ab", [0, 1, 5, 0, 0], legend=LEGEND)

    def test_overlapping_semantic_tokens(self) -> None:
        with pytest.raises(OrderingViolationError, match="primary"):
            highlight("abcdef", [0, 0, 4, 0, 0, 0, 2, 1, 0, 0], legend=LEGEND)

    def test_split_surrogate_pair(self) -> None:
        with pytest.raises(EncodingBoundaryError, match="boundary"):
            highlight("😀", [0, 1, 1, 0, 0], legend=LEGEND)
