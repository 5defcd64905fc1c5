"""Partition source text into styled and unstyled spans.

Given the merged token stream, staple() walks the text once and cuts it into
a gapless sequence of Spans: the plain text between tokens, each token's
text, and one span per line separator. Joining the span texts reproduces the
source exactly.

Token offsets are interpreted in the stream's position encoding. Every cut
goes through a LineView, so multi-byte and surrogate-pair characters are
never split.

Example:
    >>> staple([AbsoluteToken(1, 2, 2, "keyword")], ["ab", "cdef"], TextPositionEncoding.UTF16)
    [Span(text='ab', token=None), Span(text='\\n', token=None), Span(text='cd', token=None), Span(text='ef', token=AbsoluteToken(1:2+2, keyword))]

"""

from __future__ import annotations

from collections.abc import Sequence

from lsp_highlight.encoding import LineView, TextPositionEncoding
from lsp_highlight.errors import EncodingBoundaryError, OrderingViolationError
from lsp_highlight.tokens import AbsoluteToken, Span
from lsp_highlight.utils.logger import get_logger

logger = get_logger(__name__)

LINE_BREAK = "\n"

_LINE_BREAK_SPAN = Span(LINE_BREAK)


def split_lines(text: str) -> list[str]:
    """Split text on line feeds, keeping empty lines.

    Carriage returns stay in the line content, so
    ``LINE_BREAK.join(split_lines(text)) == text`` always holds.
    """
    return text.split(LINE_BREAK)


def staple(
    tokens: Sequence[AbsoluteToken],
    lines: Sequence[str],
    encoding: TextPositionEncoding,
) -> list[Span]:
    """Cut lines into spans aligned to tokens.

    Args:
        tokens: Ordered, non-overlapping tokens (the merger's output)
        lines: Source lines without separators
        encoding: Unit of the tokens' offsets

    Returns:
        Spans whose texts concatenate to ``LINE_BREAK.join(lines)``.

    Raises:
        OrderingViolationError: If a token starts before the previous one ended.
        EncodingBoundaryError: If a token lies outside the text or splits a
            code point.
    """
    if not lines:
        if tokens:
            raise EncodingBoundaryError(
                "token lies outside empty text",
                index=tokens[0].start_char,
                line=tokens[0].line,
                encoding=encoding.value,
            )
        return []

    result: list[Span] = []
    line = 0
    char = 0
    view = LineView(lines[0], 0)

    def drain(until: int) -> None:
        # Emit the rest of each line before `until`, with its separator
        nonlocal line, char, view
        while line < until:
            rest = view.slice(char, None, encoding)
            if rest:
                result.append(Span(rest))
            result.append(_LINE_BREAK_SPAN)
            line += 1
            char = 0
            view = LineView(lines[line], line)

    for position, token in enumerate(tokens):
        if token.line < line or (token.line == line and token.start_char < char):
            raise OrderingViolationError(
                f"token starts before cursor {line}:{char}",
                stream="staple",
                position=position,
                line=token.line,
                start_char=token.start_char,
            )
        if token.line >= len(lines):
            raise EncodingBoundaryError(
                f"token {position} lies outside text of {len(lines)} lines",
                index=token.start_char,
                line=token.line,
                encoding=encoding.value,
            )

        drain(token.line)

        start = view.to_index(token.start_char, encoding)
        end = view.to_index(token.end_char, encoding)
        gap = view.text[view.to_index(char, encoding) : start]
        if gap:
            result.append(Span(gap))
        result.append(Span(view.text[start:end], token))
        char = token.end_char

    drain(len(lines) - 1)
    rest = view.slice(char, None, encoding)
    if rest:
        result.append(Span(rest))

    logger.debug("Stapled %d tokens into %d spans", len(tokens), len(result))
    return result


__all__ = ["LINE_BREAK", "split_lines", "staple"]
