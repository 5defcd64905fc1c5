"""Delta-encoded semantic token stream codec.

``textDocument/semanticTokens/full`` returns a flat list of unsigned 32-bit
integers, five per token::

    deltaLine, deltaStartChar, length, tokenType, tokenModifiers

``deltaStartChar`` is relative to the previous token's start when both are on
the same line, and absolute otherwise. decode() resolves this into
AbsoluteToken records; encode() is its inverse.

The decoder preserves stream order and does not check monotonicity. An
out-of-order stream is reported by the merger or stapler.

Example:
    >>> legend = TokenLegend(("keyword", "string"), ("declaration",))
    >>> decode([0, 0, 3, 0, 0, 0, 4, 5, 1, 1], legend)
    [AbsoluteToken(0:0+3, keyword), AbsoluteToken(0:4+5, string, {declaration})]

"""

from __future__ import annotations

from collections.abc import Sequence

from lsp_highlight.errors import MalformedStreamError, OrderingViolationError
from lsp_highlight.legend import TokenLegend
from lsp_highlight.tokens import AbsoluteToken
from lsp_highlight.utils.logger import get_logger

logger = get_logger(__name__)

GROUP_SIZE = 5
_UINT32_MAX = 0xFFFFFFFF


def _modifier_names(
    bits: int, legend: TokenLegend, position: int, cache: dict[int, frozenset[str]]
) -> frozenset[str]:
    """Resolve a modifier bitmask, memoized per distinct mask."""
    names = cache.get(bits)
    if names is not None:
        return names

    resolved = []
    remaining = bits
    bit = 0
    while remaining:
        if remaining & 1:
            if bit >= len(legend.modifiers):
                raise MalformedStreamError(
                    f"modifier bit {bit} set but legend defines "
                    f"{len(legend.modifiers)} modifiers",
                    position=position,
                )
            resolved.append(legend.modifiers[bit])
        remaining >>= 1
        bit += 1

    names = frozenset(resolved)
    cache[bits] = names
    return names


def decode(stream: Sequence[int], legend: TokenLegend) -> list[AbsoluteToken]:
    """Decode a relative token stream into absolute tokens.

    Args:
        stream: Flat sequence of unsigned 32-bit integers, five per token
        legend: Legend resolving type indices and modifier bits

    Returns:
        Tokens in stream order.

    Raises:
        MalformedStreamError: If the length is not a multiple of five, a value
            is not an unsigned 32-bit integer, or an index is outside the legend.
    """
    if len(stream) % GROUP_SIZE:
        raise MalformedStreamError(
            f"stream length {len(stream)} is not a multiple of {GROUP_SIZE}"
        )

    types = legend.types
    modifier_cache: dict[int, frozenset[str]] = {0: frozenset()}
    result: list[AbsoluteToken] = []
    line = 0
    char = 0

    for head in range(0, len(stream), GROUP_SIZE):
        group = stream[head : head + GROUP_SIZE]
        for offset, value in enumerate(group):
            if not isinstance(value, int) or isinstance(value, bool):
                raise MalformedStreamError(
                    f"expected integer, got {type(value).__name__}",
                    position=head + offset,
                )
            if not 0 <= value <= _UINT32_MAX:
                raise MalformedStreamError(
                    f"value {value} is not an unsigned 32-bit integer",
                    position=head + offset,
                )

        delta_line, delta_start, length, type_index, modifier_bits = group

        if type_index >= len(types):
            raise MalformedStreamError(
                f"type index {type_index} outside legend of {len(types)} types",
                position=head + 3,
            )

        line += delta_line
        char = char + delta_start if delta_line == 0 else delta_start

        result.append(
            AbsoluteToken(
                line=line,
                start_char=char,
                length=length,
                type=types[type_index],
                modifiers=_modifier_names(modifier_bits, legend, head + 4, modifier_cache),
            )
        )

    logger.debug("Decoded %d semantic tokens", len(result))
    return result


def encode(tokens: Sequence[AbsoluteToken], legend: TokenLegend) -> list[int]:
    """Encode absolute tokens into the relative wire format.

    Args:
        tokens: Tokens ordered by (line, start_char)
        legend: Legend providing type indices and modifier bits

    Returns:
        Flat integer stream that decode() turns back into tokens.

    Raises:
        MalformedStreamError: If a type or modifier is missing from the legend.
        OrderingViolationError: If a token would need a negative delta.
    """
    result: list[int] = []
    previous_line = 0
    previous_char = 0

    for position, token in enumerate(tokens):
        type_index = legend.type_index(token.type)
        if type_index is None:
            raise MalformedStreamError(
                f"type {token.type!r} is not in the legend", position=position * GROUP_SIZE
            )

        bits = 0
        for name in token.modifiers:
            bit = legend.modifier_bit(name)
            if bit is None:
                raise MalformedStreamError(
                    f"modifier {name!r} is not in the legend",
                    position=position * GROUP_SIZE,
                )
            bits |= 1 << bit

        delta_line = token.line - previous_line
        delta_start = token.start_char - previous_char if delta_line == 0 else token.start_char
        if delta_line < 0 or delta_start < 0:
            raise OrderingViolationError(
                "token precedes the previous token",
                stream="encode",
                position=position,
                line=token.line,
                start_char=token.start_char,
            )

        result.extend((delta_line, delta_start, token.length, type_index, bits))
        previous_line = token.line
        previous_char = token.start_char

    return result


__all__ = ["GROUP_SIZE", "decode", "encode"]
