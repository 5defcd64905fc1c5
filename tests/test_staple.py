"""Tests for cutting source lines into spans."""

import pytest

from lsp_highlight.encoding import TextPositionEncoding
from lsp_highlight.errors import EncodingBoundaryError, OrderingViolationError
from lsp_highlight.staple import LINE_BREAK, split_lines, staple
from lsp_highlight.tokens import AbsoluteToken, Span

BYTE = TextPositionEncoding.BYTE
UTF16 = TextPositionEncoding.UTF16
SCALAR = TextPositionEncoding.SCALAR


def _t(line: int, start: int, length: int, type_: str = "keyword") -> AbsoluteToken:
    return AbsoluteToken(line, start, length, type_)


def _joined(spans: list[Span]) -> str:
    return "".join(span.text for span in spans)


class TestSplitLines:
    def test_keeps_empty_lines(self) -> None:
        assert split_lines("a\n\nb\n") == ["a", "", "b", ""]

    def test_empty_text(self) -> None:
        assert split_lines("") == [""]

    def test_carriage_returns_stay_in_line(self) -> None:
        assert split_lines("a\r\nb") == ["a\r", "b"]


class TestStaple:
    def test_scenario_token_reaching_line_end(self) -> None:
        token = _t(1, 2, 2)
        spans = staple([token], ["ab", "cdef"], UTF16)
        assert spans == [
            Span("ab"),
            Span(LINE_BREAK),
            Span("cd"),
            Span("ef", token),
        ]

    def test_no_tokens(self) -> None:
        assert staple([], ["ab", "", "c"], UTF16) == [
            Span("ab"),
            Span(LINE_BREAK),
            Span(LINE_BREAK),
            Span("c"),
        ]

    def test_trailing_text_after_last_token(self) -> None:
        token = _t(0, 0, 3)
        spans = staple([token], ["let x", "y"], UTF16)
        assert spans == [
            Span("let", token),
            Span(" x"),
            Span(LINE_BREAK),
            Span("y"),
        ]

    def test_trailing_empty_line(self) -> None:
        spans = staple([], ["a", ""], UTF16)
        assert spans == [Span("a"), Span(LINE_BREAK)]

    def test_adjacent_tokens_have_no_gap(self) -> None:
        a, b = _t(0, 0, 1, "variable"), _t(0, 1, 1, "operator")
        assert staple([a, b], ["x+"], UTF16) == [Span("x", a), Span("+", b)]

    def test_zero_width_token_yields_empty_styled_span(self) -> None:
        token = _t(0, 1, 0)
        assert staple([token], ["ab"], UTF16) == [Span("a"), Span("", token), Span("b")]

    def test_line_breaks_are_unstyled(self) -> None:
        spans = staple([_t(2, 0, 1)], ["a", "b", "c"], UTF16)
        assert [s.styled for s in spans if s.text == LINE_BREAK] == [False, False]

    def test_empty_text(self) -> None:
        assert staple([], [""], UTF16) == []

    def test_no_lines(self) -> None:
        assert staple([], [], UTF16) == []


class TestEncodingAwareSlicing:
    def test_utf16_surrogate_pair(self) -> None:
        # 😀 occupies two UTF-16 units
        token = _t(0, 5, 1, "variable")
        spans = staple([token], ['"😀" x'], UTF16)
        assert spans == [Span('"😀" '), Span("x", token)]

    def test_byte_offsets(self) -> None:
        # é = bytes 0-1, space = 2, € = bytes 3-5
        token = _t(0, 3, 3, "string")
        spans = staple([token], ["é €!"], BYTE)
        assert spans == [Span("é "), Span("€", token), Span("!")]
        assert _joined(spans) == "é €!"

    def test_scalar_offsets(self) -> None:
        token = _t(0, 1, 1, "string")
        assert staple([token], ["😀é"], SCALAR) == [Span("😀"), Span("é", token)]


class TestStapleErrors:
    def test_token_beyond_line(self) -> None:
        with pytest.raises(EncodingBoundaryError, match="beyond end"):
            staple([_t(0, 1, 5)], ["abc"], UTF16)

    def test_token_line_beyond_text(self) -> None:
        with pytest.raises(EncodingBoundaryError, match="outside text"):
            staple([_t(4, 0, 1)], ["a", "b"], UTF16)

    def test_token_on_empty_text_list(self) -> None:
        with pytest.raises(EncodingBoundaryError):
            staple([_t(0, 0, 1)], [], UTF16)

    def test_token_splitting_surrogate_pair(self) -> None:
        with pytest.raises(EncodingBoundaryError, match="boundary"):
            staple([_t(0, 1, 1)], ["😀"], UTF16)

    def test_backwards_token(self) -> None:
        with pytest.raises(OrderingViolationError, match="before cursor") as info:
            staple([_t(1, 0, 1), _t(0, 0, 1)], ["a", "b"], UTF16)
        assert info.value.position == 1

    def test_overlapping_tokens(self) -> None:
        with pytest.raises(OrderingViolationError):
            staple([_t(0, 0, 3), _t(0, 2, 1)], ["abcd"], UTF16)
