"""
PrefixBuffer: the depth-scoped left margin of a rendered tree.

A single buffer is threaded through one whole render call. Each level of
recursion pushes one connector segment before descending and truncates back
to its mark on the way out, so siblings reuse the same storage one after
another.

Capacity doubles as the recursion limit: a renderer that cannot push the next
segment stops descending and writes a truncation marker instead.
"""

from contextlib import contextmanager
from typing import Iterator

from errtree.tree_types import CONNECTOR_WIDTH


class PrefixOverflowError(ValueError):
    """Raised when a segment is pushed past the buffer capacity."""


class PrefixBuffer:
    """
    Capacity-bounded append/truncate text accumulator.

    Attributes:
        capacity: Maximum fill length in characters

    Usage:
        prefix = PrefixBuffer.for_depth(10)

        if prefix.can_push(CONTINUING):
            mark = prefix.push(CONTINUING)
            ...  # render child lines with prefix.text
            prefix.truncate(mark)
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._text = ""

    @classmethod
    def for_depth(cls, max_depth: int) -> "PrefixBuffer":
        """Create a buffer that allows exactly max_depth nested levels."""
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        return cls(CONNECTOR_WIDTH * max_depth)

    @property
    def text(self) -> str:
        return self._text

    @property
    def fill(self) -> int:
        return len(self._text)

    @property
    def depth(self) -> int:
        return len(self._text) // CONNECTOR_WIDTH

    def can_push(self, segment: str) -> bool:
        return len(self._text) + len(segment) <= self.capacity

    def push(self, segment: str) -> int:
        """
        Append a connector segment.

        Args:
            segment: Connector text to append

        Returns:
            Mark to pass to truncate() when leaving this depth

        Raises:
            PrefixOverflowError: If the segment does not fit. Callers are
                expected to check can_push() first.
        """
        if not self.can_push(segment):
            raise PrefixOverflowError(
                f"segment of width {len(segment)} does not fit "
                f"(fill {len(self._text)}/{self.capacity})"
            )
        mark = len(self._text)
        self._text += segment
        return mark

    def truncate(self, mark: int) -> None:
        """Drop everything pushed after mark."""
        if mark < 0 or mark > len(self._text):
            raise ValueError(f"mark {mark} outside fill 0..{len(self._text)}")
        self._text = self._text[:mark]

    @contextmanager
    def pushed(self, segment: str) -> Iterator[str]:
        """Push segment for the duration of the block, yielding the new text."""
        mark = self.push(segment)
        try:
            yield self._text
        finally:
            self.truncate(mark)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"PrefixBuffer(fill={len(self._text)}/{self.capacity})"
