"""Exception classes for lsp-highlight.

Every pipeline stage fails fast: the first violation is raised to the caller
with enough context (stream position, line, offset) to diagnose it. A bad
position invalidates everything after it in the same stream, so no stage
attempts partial recovery.
"""

from __future__ import annotations


class HighlightError(Exception):
    """Base exception for all lsp-highlight errors.

    Subclass this for specific error categories.
    """

    pass


class MalformedStreamError(HighlightError):
    """A delta-encoded token stream could not be decoded.

    Raised when the wire length is not a multiple of five, a value is not an
    unsigned 32-bit integer, or a type/modifier index falls outside the legend.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        """Initialize stream error with optional position.

        Args:
            message: Error description
            position: Index into the integer stream where the problem starts
        """
        self.message = message
        self.position = position

        location = f"stream[{position}]: " if position is not None else ""
        super().__init__(f"{location}{message}")


class EncodingBoundaryError(HighlightError):
    """An index does not fall on a code-point boundary of its line.

    Also raised for indices past the end of a line and for lines that
    cannot be represented in the requested encoding.
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        line: int | None = None,
        encoding: str | None = None,
    ) -> None:
        """Initialize boundary error.

        Args:
            message: Error description
            index: Offending offset, in encoding units
            line: Zero-based line number (optional)
            encoding: Name of the encoding the offset was expressed in
        """
        self.message = message
        self.index = index
        self.line = line
        self.encoding = encoding

        parts = []
        if line is not None:
            parts.append(f"line {line}")
        if index is not None:
            parts.append(f"offset {index}")
        if encoding is not None:
            parts.append(encoding)
        location = f"[{', '.join(parts)}] " if parts else ""

        super().__init__(f"{location}{message}")


class OrderingViolationError(HighlightError):
    """A token stream is not ordered by (line, start) or overlaps itself."""

    def __init__(
        self,
        message: str,
        stream: str | None = None,
        position: int | None = None,
        line: int | None = None,
        start_char: int | None = None,
    ) -> None:
        """Initialize ordering error.

        Args:
            message: Error description
            stream: Name of the offending stream (e.g. "primary")
            position: Index of the offending token within its stream
            line: Zero-based line of the offending token
            start_char: Start offset of the offending token
        """
        self.message = message
        self.stream = stream
        self.position = position
        self.line = line
        self.start_char = start_char

        location = ""
        if stream is not None:
            location = stream
            if position is not None:
                location += f"[{position}]"
            location += " "
        if line is not None:
            location += f"at {line}:{start_char if start_char is not None else 0} "

        super().__init__(f"{location}{message}".strip())


class RenderError(HighlightError):
    """Error during HTML rendering.

    Raised when the renderer is handed something that is not a Span.
    """

    pass
