"""JSON payloads: LSP legends and responses, compiler tokens, token dumps.

Reads the JSON shapes the external collaborators hand over:

- the ``legend`` object of a server's ``semanticTokensProvider`` capability
- a ``textDocument/semanticTokens/full`` response
- compiler-frontend tokens dumped as
  ``{"kind": ..., "start": {"line", "column"}, "end": {"line", "column"}}``

and converts AbsoluteTokens to/from JSON-compatible dicts for caching and
debugging. Output is deterministic (sorted keys, sorted modifiers).

Example:
    legend = legend_from_dict(init_result["capabilities"]["semanticTokensProvider"]["legend"])
    data = stream_from_response(tokens_result)
    tokens = decode(data, legend)
    dump = to_json(tokens)

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
import re
from collections.abc import Sequence
from typing import Any

from lsp_highlight.errors import MalformedStreamError
from lsp_highlight.legend import TokenLegend
from lsp_highlight.lexical import CompilerToken, CompilerTokenKind
from lsp_highlight.tokens import AbsoluteToken

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def legend_from_dict(data: dict[str, Any]) -> TokenLegend:
    """Build a TokenLegend from an LSP ``SemanticTokensLegend`` object.

    Raises:
        MalformedStreamError: If ``tokenTypes`` is missing or not a list.
    """
    types = data.get("tokenTypes")
    if not isinstance(types, list):
        raise MalformedStreamError("legend has no tokenTypes list")
    modifiers = data.get("tokenModifiers") or []
    if not isinstance(modifiers, list):
        raise MalformedStreamError("legend tokenModifiers is not a list")
    return TokenLegend.of(types, modifiers)


def legend_to_dict(legend: TokenLegend) -> dict[str, Any]:
    """Convert a TokenLegend to an LSP ``SemanticTokensLegend`` object."""
    return {"tokenTypes": list(legend.types), "tokenModifiers": list(legend.modifiers)}


def stream_from_response(response: dict[str, Any] | Sequence[int] | None) -> list[int]:
    """Extract the integer stream from a semantic tokens response.

    Accepts the response object (``{"resultId": ..., "data": [...]}``) or the
    bare data list.

    Raises:
        MalformedStreamError: If there is no response or it carries no data.
    """
    if response is None:
        raise MalformedStreamError("no semantic tokens response")
    if isinstance(response, dict):
        data = response.get("data")
        if not isinstance(data, list):
            raise MalformedStreamError("semantic tokens response has no data list")
        return data
    return list(response)


def _coerce_kind(kind: Any) -> int:
    """Resolve a kind given as enum name (any case style) or integer."""
    if isinstance(kind, str):
        name = kind if kind.isupper() or "_" in kind else _CAMEL_BOUNDARY.sub("_", kind)
        name = name.upper()
        return CompilerTokenKind.__members__.get(name, CompilerTokenKind.UNKNOWN)
    if isinstance(kind, int) and not isinstance(kind, bool):
        try:
            return CompilerTokenKind(kind)
        except ValueError:
            return kind
    raise MalformedStreamError(f"compiler token kind must be str or int, got {kind!r}")


def compiler_token_from_dict(data: dict[str, Any]) -> CompilerToken:
    """Build a CompilerToken from its JSON dict form."""
    try:
        start = data["start"]
        end = data["end"]
        return CompilerToken(
            kind=_coerce_kind(data["kind"]),
            start_line=int(start["line"]),
            start_column=int(start["column"]),
            end_line=int(end["line"]),
            end_column=int(end["column"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedStreamError(f"invalid compiler token {data!r}: {e}") from e


def compiler_token_to_dict(token: CompilerToken) -> dict[str, Any]:
    """Convert a CompilerToken to its JSON dict form."""
    kind = token.kind.name if isinstance(token.kind, CompilerTokenKind) else token.kind
    return {
        "kind": kind,
        "start": {"line": token.start_line, "column": token.start_column},
        "end": {"line": token.end_line, "column": token.end_column},
    }


def compiler_tokens_from_json(json_str: str) -> list[CompilerToken]:
    """Parse a JSON array of compiler tokens."""
    items = json.loads(json_str)
    if not isinstance(items, list):
        raise MalformedStreamError("compiler token payload is not a JSON array")
    return [compiler_token_from_dict(item) for item in items]


def to_dict(token: AbsoluteToken) -> dict[str, Any]:
    """Convert an AbsoluteToken to a JSON-compatible dict."""
    return {
        "line": token.line,
        "startChar": token.start_char,
        "length": token.length,
        "type": token.type,
        "modifiers": sorted(token.modifiers),
    }


def from_dict(data: dict[str, Any]) -> AbsoluteToken:
    """Reconstruct an AbsoluteToken from a dict produced by to_dict()."""
    return AbsoluteToken(
        line=data["line"],
        start_char=data["startChar"],
        length=data["length"],
        type=data["type"],
        modifiers=frozenset(data.get("modifiers", ())),
    )


def to_json(tokens: Sequence[AbsoluteToken], *, indent: int | None = None) -> str:
    """Serialize tokens to a JSON array string (sorted keys)."""
    return json.dumps([to_dict(t) for t in tokens], sort_keys=True, indent=indent)


def from_json(json_str: str) -> list[AbsoluteToken]:
    """Deserialize a JSON array string into tokens."""
    return [from_dict(item) for item in json.loads(json_str)]


__all__ = [
    "compiler_token_from_dict",
    "compiler_token_to_dict",
    "compiler_tokens_from_json",
    "from_dict",
    "from_json",
    "legend_from_dict",
    "legend_to_dict",
    "stream_from_response",
    "to_dict",
    "to_json",
]
