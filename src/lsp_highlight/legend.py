"""Semantic token legend and well-known type/modifier names.

The legend is negotiated with the language server: ``types[i]`` names wire
type index ``i`` and bit ``j`` of the modifier mask names ``modifiers[j]``.
Servers may define names beyond the LSP standard set (clangd and SourceKit
both do), so names are plain strings everywhere in this package.

When a server declines to advertise a legend, DEFAULT_LEGEND is used. It
matches the order SourceKit-LSP emits tokens in.

Thread Safety:
TokenLegend is frozen and safe to share across threads.

"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass

# LSP 3.17 standard token types
NAMESPACE = "namespace"
TYPE = "type"
CLASS = "class"
ENUM = "enum"
INTERFACE = "interface"
STRUCT = "struct"
TYPE_PARAMETER = "typeParameter"
PARAMETER = "parameter"
VARIABLE = "variable"
PROPERTY = "property"
ENUM_MEMBER = "enumMember"
EVENT = "event"
FUNCTION = "function"
METHOD = "method"
MACRO = "macro"
KEYWORD = "keyword"
MODIFIER = "modifier"
COMMENT = "comment"
STRING = "string"
NUMBER = "number"
REGEXP = "regexp"
OPERATOR = "operator"
# LSP 3.17 addition
DECORATOR = "decorator"
# clangd extensions
UNKNOWN = "unknown"
CONCEPT = "concept"
# SourceKit extension
IDENTIFIER = "identifier"

STANDARD_TOKEN_TYPES: tuple[str, ...] = (
    NAMESPACE,
    TYPE,
    CLASS,
    ENUM,
    INTERFACE,
    STRUCT,
    TYPE_PARAMETER,
    PARAMETER,
    VARIABLE,
    PROPERTY,
    ENUM_MEMBER,
    EVENT,
    FUNCTION,
    METHOD,
    MACRO,
    KEYWORD,
    MODIFIER,
    COMMENT,
    STRING,
    NUMBER,
    REGEXP,
    OPERATOR,
    DECORATOR,
)

KNOWN_TOKEN_TYPES: tuple[str, ...] = (*STANDARD_TOKEN_TYPES, UNKNOWN, CONCEPT, IDENTIFIER)

# LSP 3.17 standard token modifiers
STANDARD_TOKEN_MODIFIERS: tuple[str, ...] = (
    "declaration",
    "definition",
    "readonly",
    "static",
    "deprecated",
    "abstract",
    "async",
    "modification",
    "documentation",
    "defaultLibrary",
)

# clangd extensions
CLANGD_TOKEN_MODIFIERS: tuple[str, ...] = (
    "deduced",
    "virtual",
    "dependentName",
    "usedAsMutableReference",
    "usedAsMutablePointer",
    "constructorOrDestructor",
    "userDefined",
    "functionScope",
    "classScope",
    "fileScope",
    "globalScope",
)

KNOWN_TOKEN_MODIFIERS: tuple[str, ...] = (*STANDARD_TOKEN_MODIFIERS, *CLANGD_TOKEN_MODIFIERS)


@dataclass(frozen=True, slots=True)
class TokenLegend:
    """Names for the integer type indices and modifier bits of a stream.

    Names are interned on construction; decoding resolves an index with a
    single tuple lookup and shares one string object per name.

    Attributes:
        types: Type names, indexed by wire type index
        modifiers: Modifier names, indexed by bit position

    Examples:
        >>> legend = TokenLegend(("keyword", "string"), ("declaration",))
        >>> legend.type_index("string")
        1

    """

    types: tuple[str, ...]
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize via object.__setattr__
        object.__setattr__(self, "types", tuple(sys.intern(str(t)) for t in self.types))
        object.__setattr__(
            self, "modifiers", tuple(sys.intern(str(m)) for m in self.modifiers)
        )

    @classmethod
    def of(cls, types: Iterable[str], modifiers: Iterable[str] = ()) -> TokenLegend:
        """Build a legend from any iterables of names."""
        return cls(tuple(types), tuple(modifiers))

    def type_index(self, name: str) -> int | None:
        """Wire index of a type name, or None if the legend lacks it."""
        try:
            return self.types.index(name)
        except ValueError:
            return None

    def modifier_bit(self, name: str) -> int | None:
        """Bit position of a modifier name, or None if the legend lacks it."""
        try:
            return self.modifiers.index(name)
        except ValueError:
            return None


# SourceKit-LSP reports no legend but emits tokens in this order. "class" is
# listed twice because SourceKit reserves slot 2 for actors.
DEFAULT_LEGEND = TokenLegend(
    types=(
        NAMESPACE,
        TYPE,
        CLASS,
        CLASS,
        ENUM,
        INTERFACE,
        STRUCT,
        TYPE_PARAMETER,
        PARAMETER,
        VARIABLE,
        PROPERTY,
        ENUM_MEMBER,
        EVENT,
        FUNCTION,
        METHOD,
        MACRO,
        KEYWORD,
        MODIFIER,
        COMMENT,
        STRING,
        NUMBER,
        REGEXP,
        OPERATOR,
        DECORATOR,
        IDENTIFIER,
    ),
    modifiers=STANDARD_TOKEN_MODIFIERS,
)


def client_capabilities_legend() -> TokenLegend:
    """Every type and modifier name this package knows about.

    Suitable for advertising in the client's semanticTokens capabilities.
    """
    return TokenLegend(KNOWN_TOKEN_TYPES, KNOWN_TOKEN_MODIFIERS)


__all__ = [
    "CLANGD_TOKEN_MODIFIERS",
    "DEFAULT_LEGEND",
    "KNOWN_TOKEN_MODIFIERS",
    "KNOWN_TOKEN_TYPES",
    "STANDARD_TOKEN_MODIFIERS",
    "STANDARD_TOKEN_TYPES",
    "TokenLegend",
    "client_capabilities_legend",
]
