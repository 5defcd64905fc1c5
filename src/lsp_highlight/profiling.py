"""HighlightAccumulator: opt-in profiling for the highlight pipeline.

Accumulates per-stage counts while highlighting:
- Source length
- Semantic, lexical and merged token counts
- Secondary tokens occluded during the merge
- Spans produced by the stapler

Zero overhead when disabled (get_highlight_accumulator() returns None).

Example:
    from lsp_highlight import highlight
    from lsp_highlight.profiling import profiled_highlight

    with profiled_highlight() as metrics:
        html = highlight(source, data)

    print(metrics.summary())
    # {"total_ms": 0.4, "highlight_calls": 1, "semantic_tokens": 12, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class HighlightAccumulator:
    """Accumulated metrics across highlight calls.

    Attributes:
        start_time: Profiling start timestamp.
        highlight_calls: Number of highlight runs recorded.
        source_length: Total characters of source highlighted.
        semantic_tokens: Tokens decoded from language-server streams.
        lexical_tokens: Tokens adapted from compiler-frontend output.
        merged_tokens: Tokens surviving the merge.
        occluded_tokens: Lexical tokens dropped on collision.
        spans: Spans produced by stapling.

    """

    start_time: float = field(default_factory=perf_counter)
    highlight_calls: int = 0
    source_length: int = 0
    semantic_tokens: int = 0
    lexical_tokens: int = 0
    merged_tokens: int = 0
    occluded_tokens: int = 0
    spans: int = 0

    def record_tokens(
        self,
        *,
        semantic: int,
        lexical: int,
        merged: int,
        occluded: int,
    ) -> None:
        """Record the token counts of one decode/adapt/merge pass."""
        self.semantic_tokens += semantic
        self.lexical_tokens += lexical
        self.merged_tokens += merged
        self.occluded_tokens += occluded

    def record_highlight(self, source_length: int, spans: int) -> None:
        """Record a completed highlight run.

        Args:
            source_length: Length of the source string highlighted.
            spans: Number of spans stapled from it.

        """
        self.highlight_calls += 1
        self.source_length += source_length
        self.spans += spans

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of highlight metrics.

        Returns:
            Dict with total_ms and every counter.

        """
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "highlight_calls": self.highlight_calls,
            "source_length": self.source_length,
            "semantic_tokens": self.semantic_tokens,
            "lexical_tokens": self.lexical_tokens,
            "merged_tokens": self.merged_tokens,
            "occluded_tokens": self.occluded_tokens,
            "spans": self.spans,
        }


_accumulator: ContextVar[HighlightAccumulator | None] = ContextVar(
    "highlight_accumulator",
    default=None,
)


def get_highlight_accumulator() -> HighlightAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_highlight() -> Iterator[HighlightAccumulator]:
    """Context manager for profiled highlighting.

    Creates a HighlightAccumulator and makes it available via
    get_highlight_accumulator() for the duration of the with block.

    Yields:
        HighlightAccumulator populated by highlight calls in the block.

    """
    acc = HighlightAccumulator()
    token: Token[HighlightAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = ["HighlightAccumulator", "get_highlight_accumulator", "profiled_highlight"]
