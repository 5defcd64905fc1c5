"""Text-position encodings and per-line offset translation.

Language servers count columns in one of three units, negotiated at
initialization time (LSP ``positionEncodingKind``):

- ``utf-8``: UTF-8 code units (bytes)
- ``utf-16``: UTF-16 code units (the protocol default)
- ``utf-32``: Unicode scalar values

Python strings index by code point, so every offset coming from a server or a
compiler front end has to be translated before it can slice a line. LineView
does that translation for one line, caching a boundary table per encoding.

Example:
    >>> view = LineView("naïve 😀")
    >>> view.length(TextPositionEncoding.BYTE)
    11
    >>> view.convert(7, TextPositionEncoding.BYTE, TextPositionEncoding.UTF16)
    6

Thread Safety:
    LineView instances are local to one staple/adapt call. The boundary cache
    is filled idempotently, so sharing a view across threads is also safe.

"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from lsp_highlight.errors import EncodingBoundaryError


class TextPositionEncoding(Enum):
    """Unit in which token character offsets are expressed."""

    BYTE = "utf-8"
    UTF16 = "utf-16"
    SCALAR = "utf-32"

    @classmethod
    def from_lsp(cls, value: TextPositionEncoding | str | None) -> TextPositionEncoding:
        """Resolve a negotiated encoding identifier.

        Args:
            value: An LSP ``positionEncodingKind`` string, an enum member, or
                None when the server did not announce one.

        Returns:
            The matching encoding; UTF-16 when value is None.

        Raises:
            ValueError: For an identifier outside the three LSP kinds.
        """
        if value is None:
            return cls.UTF16
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower()
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown position encoding: {value!r}")


def _utf8_width(cp: int) -> int:
    if cp < 0x80:
        return 1
    if cp < 0x800:
        return 2
    if cp < 0x10000:
        return 3
    return 4


def _utf16_width(cp: int) -> int:
    return 2 if cp > 0xFFFF else 1


def _scalar_width(cp: int) -> int:
    return 1


# Code units occupied by one code point, per encoding
_UNIT_WIDTH: dict[TextPositionEncoding, Callable[[int], int]] = {
    TextPositionEncoding.BYTE: _utf8_width,
    TextPositionEncoding.UTF16: _utf16_width,
    TextPositionEncoding.SCALAR: _scalar_width,
}


def _is_surrogate(cp: int) -> bool:
    return 0xD800 <= cp <= 0xDFFF


class LineView:
    """Encoding-aware view of a single line of text.

    Offsets passed in are in encoding units; indices returned are positions
    in the Python string. An offset that lands inside a multi-unit code
    point, or past the end of the line, raises EncodingBoundaryError.

    Attributes:
        text: The line, without its separator
        lineno: Zero-based line number, used in error messages only

    """

    __slots__ = ("_ascii", "_tables", "lineno", "text")

    def __init__(self, text: str, lineno: int | None = None) -> None:
        self.text = text
        self.lineno = lineno
        self._ascii = text.isascii()
        # encoding -> (unit offset per code point boundary, offset -> index)
        self._tables: dict[TextPositionEncoding, tuple[list[int], dict[int, int]]] = {}

    def _is_identity(self, encoding: TextPositionEncoding) -> bool:
        return self._ascii or encoding is TextPositionEncoding.SCALAR

    def _table(self, encoding: TextPositionEncoding) -> tuple[list[int], dict[int, int]]:
        table = self._tables.get(encoding)
        if table is not None:
            return table

        width = _UNIT_WIDTH[encoding]
        check_surrogates = encoding is TextPositionEncoding.BYTE
        offsets = [0]
        total = 0
        for index, ch in enumerate(self.text):
            cp = ord(ch)
            if check_surrogates and _is_surrogate(cp):
                raise EncodingBoundaryError(
                    f"lone surrogate U+{cp:04X} at index {index} has no UTF-8 form",
                    line=self.lineno,
                    encoding=encoding.value,
                )
            total += width(cp)
            offsets.append(total)

        table = (offsets, {offset: index for index, offset in enumerate(offsets)})
        self._tables[encoding] = table
        return table

    def length(self, encoding: TextPositionEncoding) -> int:
        """Length of the line in encoding units."""
        if self._is_identity(encoding):
            return len(self.text)
        return self._table(encoding)[0][-1]

    def to_index(self, offset: int, encoding: TextPositionEncoding) -> int:
        """Translate an offset in encoding units to a string index.

        Raises:
            EncodingBoundaryError: If offset is negative, beyond the end of
                the line, or splits a code point.
        """
        if offset < 0:
            raise EncodingBoundaryError(
                "negative offset", index=offset, line=self.lineno, encoding=encoding.value
            )

        if self._is_identity(encoding):
            if offset > len(self.text):
                raise EncodingBoundaryError(
                    f"offset beyond end of line (length {len(self.text)})",
                    index=offset,
                    line=self.lineno,
                    encoding=encoding.value,
                )
            return offset

        offsets, index_of = self._table(encoding)
        index = index_of.get(offset)
        if index is None:
            if offset > offsets[-1]:
                message = f"offset beyond end of line (length {offsets[-1]})"
            else:
                message = "offset does not fall on a code point boundary"
            raise EncodingBoundaryError(
                message, index=offset, line=self.lineno, encoding=encoding.value
            )
        return index

    def from_index(self, index: int, encoding: TextPositionEncoding) -> int:
        """Translate a string index to an offset in encoding units."""
        if not 0 <= index <= len(self.text):
            raise EncodingBoundaryError(
                f"string index outside line (length {len(self.text)})",
                index=index,
                line=self.lineno,
                encoding="index",
            )
        if self._is_identity(encoding):
            return index
        return self._table(encoding)[0][index]

    def convert(
        self,
        offset: int,
        from_encoding: TextPositionEncoding,
        to_encoding: TextPositionEncoding,
    ) -> int:
        """Re-express an offset from one encoding in another."""
        return self.from_index(self.to_index(offset, from_encoding), to_encoding)

    def slice(
        self,
        start: int,
        end: int | None,
        encoding: TextPositionEncoding,
    ) -> str:
        """Substring between two offsets in encoding units.

        Args:
            start: Start offset (inclusive)
            end: End offset (exclusive), or None for end of line
            encoding: Unit of start and end

        Returns:
            The substring; empty when start == end.
        """
        begin = self.to_index(start, encoding)
        if end is None:
            return self.text[begin:]
        return self.text[begin : self.to_index(end, encoding)]


def convert(
    line: str,
    index: int,
    from_encoding: TextPositionEncoding,
    to_encoding: TextPositionEncoding,
) -> int:
    """Convert a boundary offset on one line between encodings.

    Args:
        line: The line of text (without separator)
        index: Offset in from_encoding units, 0 to the line length inclusive
        from_encoding: Encoding of index
        to_encoding: Encoding of the result

    Returns:
        The same boundary, counted in to_encoding units.

    Raises:
        EncodingBoundaryError: If index is not a valid boundary in from_encoding.

    Example:
        >>> convert("é!", 2, TextPositionEncoding.BYTE, TextPositionEncoding.UTF16)
        1
    """
    return LineView(line).convert(index, from_encoding, to_encoding)


def line_length(line: str, encoding: TextPositionEncoding) -> int:
    """Length of line in encoding units."""
    return LineView(line).length(encoding)


__all__ = [
    "LineView",
    "TextPositionEncoding",
    "convert",
    "line_length",
]
