"""Merge a primary and a secondary token stream.

The primary stream (semantic tokens from the language server) is
authoritative. The secondary stream (lexical tokens from the compiler front
end) fills the gaps the server left unannotated, such as punctuation and
preprocessor text, and yields wherever the two collide.

Arbitration, comparing the head of each stream:

- heads on different lines: emit the one on the earlier line
- same line, different start: emit the earlier head unless it reaches into
  the other's start; on overlap the secondary head is occluded and dropped
- same start: a zero-length head is emitted first without consuming the
  other (secondary first when both are zero-length); otherwise the secondary
  head is dropped

Both inputs must already be ordered by (line, start_char) and internally
non-overlapping; this is checked up front.

Thread Safety:
All functions are pure. Inputs are read through index cursors and never
mutated.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from lsp_highlight.errors import OrderingViolationError
from lsp_highlight.tokens import AbsoluteToken
from lsp_highlight.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Merged tokens plus arbitration counts.

    Attributes:
        tokens: The merged, ordered, non-overlapping stream
        occluded: Number of secondary tokens dropped on collision

    """

    tokens: list[AbsoluteToken]
    occluded: int


def validate_order(tokens: Sequence[AbsoluteToken], stream: str) -> None:
    """Check that a stream is ordered and non-overlapping.

    Each token must start on a later line than its predecessor, or on the
    same line at or after the predecessor's end. A zero-width token may share
    its position with a following non-empty token, never with another
    zero-width token.

    Args:
        tokens: Stream to check
        stream: Name used in the error message

    Raises:
        OrderingViolationError: At the first token that breaks the order.
    """
    previous: AbsoluteToken | None = None
    for position, token in enumerate(tokens):
        if previous is not None:
            if token.line < previous.line:
                raise OrderingViolationError(
                    f"line goes backwards from {previous.line}",
                    stream=stream,
                    position=position,
                    line=token.line,
                    start_char=token.start_char,
                )
            if token.line == previous.line and token.start_char < previous.end_char:
                raise OrderingViolationError(
                    f"overlaps preceding token ending at {previous.end_char}",
                    stream=stream,
                    position=position,
                    line=token.line,
                    start_char=token.start_char,
                )
            if (
                token.line == previous.line
                and token.start_char == previous.start_char
                and token.length == 0
                and previous.length == 0
            ):
                raise OrderingViolationError(
                    "duplicates preceding zero-width token",
                    stream=stream,
                    position=position,
                    line=token.line,
                    start_char=token.start_char,
                )
        previous = token


def merge_with_stats(
    primary: Sequence[AbsoluteToken],
    secondary: Sequence[AbsoluteToken],
) -> MergeResult:
    """Merge two token streams, reporting how many secondary tokens were dropped.

    Args:
        primary: Authoritative stream (semantic tokens)
        secondary: Gap-filling stream (lexical tokens)

    Returns:
        MergeResult with the merged stream and occlusion count.

    Raises:
        OrderingViolationError: If either input is out of order.
    """
    validate_order(primary, "primary")
    validate_order(secondary, "secondary")

    result: list[AbsoluteToken] = []
    occluded = 0
    i = 0
    j = 0

    while i < len(primary) and j < len(secondary):
        a = primary[i]
        b = secondary[j]

        if a.line != b.line:
            if b.line < a.line:
                result.append(b)
                j += 1
            else:
                result.append(a)
                i += 1
            continue

        if b.start_char < a.start_char:
            if b.end_char > a.start_char:
                occluded += 1
            else:
                result.append(b)
            j += 1
            continue

        if a.start_char < b.start_char:
            if a.end_char > b.start_char:
                occluded += 1
                j += 1
            else:
                result.append(a)
                i += 1
            continue

        # Same start: zero-width tokens never occlude
        if b.length == 0:
            result.append(b)
            j += 1
        elif a.length == 0:
            result.append(a)
            i += 1
        else:
            occluded += 1
            j += 1

    result.extend(primary[i:])
    result.extend(secondary[j:])

    logger.debug(
        "Merged %d primary and %d secondary tokens into %d (%d occluded)",
        len(primary),
        len(secondary),
        len(result),
        occluded,
    )
    return MergeResult(tokens=result, occluded=occluded)


def merge(
    primary: Sequence[AbsoluteToken],
    secondary: Sequence[AbsoluteToken],
) -> list[AbsoluteToken]:
    """Merge two ordered token streams, preferring primary on conflict.

    Example:
        >>> a = [AbsoluteToken(0, 0, 3, "A")]
        >>> b = [AbsoluteToken(0, 2, 4, "B")]
        >>> merge(a, b)
        [AbsoluteToken(0:0+3, A)]
    """
    return merge_with_stats(primary, secondary).tokens


__all__ = ["MergeResult", "merge", "merge_with_stats", "validate_order"]
