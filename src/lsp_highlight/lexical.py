"""Compiler-frontend tokens re-expressed as AbsoluteTokens.

A compiler front end (libclang for the C family) classifies every lexical
token, including punctuation, comments and preprocessor text that language
servers often leave unannotated. Its positions differ from LSP positions:

- lines and columns are 1-based
- columns count bytes
- a token may span several lines, with an exclusive end

adapt() converts such tokens into the per-line, 0-based AbsoluteToken shape
in the same encoding as the semantic stream, so the two can be merged.

Example:
    >>> tok = CompilerToken(CompilerTokenKind.KEYWORD, 1, 1, 1, 4)
    >>> adapt([tok], ["int x;"], TextPositionEncoding.UTF16)
    [AbsoluteToken(0:0+3, keyword)]

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum

from lsp_highlight import legend
from lsp_highlight.config import get_highlight_config
from lsp_highlight.encoding import LineView, TextPositionEncoding
from lsp_highlight.errors import EncodingBoundaryError, OrderingViolationError
from lsp_highlight.tokens import AbsoluteToken
from lsp_highlight.utils.logger import get_logger

logger = get_logger(__name__)


class CompilerTokenKind(IntEnum):
    """Token classification reported by the compiler front end."""

    UNKNOWN = 0
    COMMENT = 1
    KEYWORD = 2
    OPERATOR = 3
    LITERAL_STRING = 4
    LITERAL_CHARACTER = 5
    LITERAL_NUMERIC = 6
    PREPROCESSING_DIRECTIVE = 7
    INCLUSION_DIRECTIVE = 8
    MACRO_DEFINITION = 9


# Kinds absent from the map (UNKNOWN included) are dropped
DEFAULT_LEXICAL_TYPES: Mapping[int, str] = {
    CompilerTokenKind.COMMENT: legend.COMMENT,
    CompilerTokenKind.KEYWORD: legend.KEYWORD,
    CompilerTokenKind.OPERATOR: legend.OPERATOR,
    CompilerTokenKind.LITERAL_STRING: legend.STRING,
    CompilerTokenKind.LITERAL_CHARACTER: legend.NUMBER,
    CompilerTokenKind.LITERAL_NUMERIC: legend.NUMBER,
    CompilerTokenKind.PREPROCESSING_DIRECTIVE: legend.MACRO,
    CompilerTokenKind.INCLUSION_DIRECTIVE: legend.MACRO,
    CompilerTokenKind.MACRO_DEFINITION: legend.MACRO,
}


@dataclass(frozen=True, slots=True)
class CompilerToken:
    """A token as reported by the compiler front end.

    Attributes:
        kind: Lexical classification (CompilerTokenKind or raw integer)
        start_line: First line (1-indexed)
        start_column: First byte of the token (1-indexed)
        end_line: Last line (1-indexed)
        end_column: Byte just past the token on end_line (1-indexed)

    """

    kind: int
    start_line: int
    start_column: int
    end_line: int
    end_column: int


def adapt(
    tokens: Sequence[CompilerToken],
    lines: Sequence[str],
    target_encoding: TextPositionEncoding,
    *,
    type_map: Mapping[int, str] | None = None,
) -> list[AbsoluteToken]:
    """Translate compiler tokens into per-line AbsoluteTokens.

    Multi-line tokens produce one token per covered line: the first runs from
    its start column to end of line, interior lines are covered entirely, and
    the last runs from column 0 to the end column.

    Args:
        tokens: Compiler tokens for one file, in source order
        lines: The file's lines, without separators
        target_encoding: Encoding of the semantic stream these will merge with
        type_map: Kind to token-type mapping. Defaults to the configured
            lexical_type_map, then DEFAULT_LEXICAL_TYPES.

    Returns:
        AbsoluteTokens in target_encoding units, without modifiers.

    Raises:
        EncodingBoundaryError: If a position lies outside the text or splits
            a UTF-8 sequence.
        OrderingViolationError: If a token ends before it starts.
    """
    if type_map is None:
        type_map = get_highlight_config().lexical_type_map
    if type_map is None:
        type_map = DEFAULT_LEXICAL_TYPES

    views: dict[int, LineView] = {}

    def view_for(lineno: int) -> LineView:
        view = views.get(lineno)
        if view is None:
            if not 0 <= lineno < len(lines):
                raise EncodingBoundaryError(
                    f"line outside text of {len(lines)} lines", line=lineno
                )
            view = views[lineno] = LineView(lines[lineno], lineno)
        return view

    result: list[AbsoluteToken] = []
    dropped = 0

    for position, token in enumerate(tokens):
        type_name = type_map.get(token.kind)
        if type_name is None:
            dropped += 1
            continue

        if token.start_line < 1 or token.start_column < 1:
            raise EncodingBoundaryError(
                f"compiler token {position} has non-positive start "
                f"{token.start_line}:{token.start_column}",
                line=token.start_line - 1,
            )
        if (token.end_line, token.end_column) < (token.start_line, token.start_column):
            raise OrderingViolationError(
                "compiler token ends before it starts",
                stream="lexical",
                position=position,
                line=token.start_line - 1,
                start_char=token.start_column - 1,
            )

        for lineno in range(token.start_line - 1, token.end_line):
            view = view_for(lineno)
            if lineno == token.start_line - 1:
                start = view.convert(
                    token.start_column - 1, TextPositionEncoding.BYTE, target_encoding
                )
            else:
                start = 0
            if lineno == token.end_line - 1:
                end = view.convert(
                    token.end_column - 1, TextPositionEncoding.BYTE, target_encoding
                )
            else:
                end = view.length(target_encoding)
            result.append(AbsoluteToken(lineno, start, end - start, type_name))

    if dropped:
        logger.debug("Dropped %d compiler tokens with unmapped kinds", dropped)
    logger.debug("Adapted %d lexical tokens from %d compiler tokens", len(result), len(tokens))
    return result


__all__ = [
    "DEFAULT_LEXICAL_TYPES",
    "CompilerToken",
    "CompilerTokenKind",
    "adapt",
]
