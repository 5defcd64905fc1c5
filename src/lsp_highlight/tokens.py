"""AbsoluteToken and Span definitions.

AbsoluteToken is the shape every token stream is normalized into: decoded
semantic tokens, adapted compiler tokens, and the merged result. Span is what
the stapler cuts the source text into.

Thread Safety:
Both records are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AbsoluteToken:
    """A token positioned by absolute line and character offset.

    Offsets are in the units of whichever TextPositionEncoding the owning
    stream uses. Within a stream, tokens are ordered by (line, start_char)
    and do not overlap. A length of 0 marks a zero-width position.

    Attributes:
        line: Zero-based line number
        start_char: Zero-based start offset within the line
        length: Extent in the same units as start_char
        type: Token type name (e.g. "keyword"); any legend name is valid
        modifiers: Modifier names (e.g. {"declaration"})

    Examples:
        >>> tok = AbsoluteToken(0, 4, 5, "string", frozenset({"declaration"}))
        >>> tok.end_char
        9

    """

    line: int
    start_char: int
    length: int
    type: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @property
    def end_char(self) -> int:
        """Offset just past the token."""
        return self.start_char + self.length

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        mods = f", {{{', '.join(sorted(self.modifiers))}}}" if self.modifiers else ""
        return f"AbsoluteToken({self.line}:{self.start_char}+{self.length}, {self.type}{mods})"


@dataclass(frozen=True, slots=True)
class Span:
    """A slice of source text, optionally attributed to a token.

    Attributes:
        text: The exact source substring (or a line separator)
        token: The token styling this text, or None for plain text

    """

    text: str
    token: AbsoluteToken | None = None

    @property
    def styled(self) -> bool:
        """True when the span carries a token."""
        return self.token is not None
