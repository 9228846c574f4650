"""
FrameDeduplicator: collapses repeated context frames into back-references.

Errors raised deep inside the same operation tend to carry the same outer
frames. Rendering those frames in full under every node buries the useful
ones, so each render keeps a table of identities it has already printed and
refers back to them by number.

The table is scoped to one top-level render. Sharing it across renders would
make the numbers in "duplicate tracing frame(s): [...]" meaningless.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, List, Union

from errtree.tree_types import DEFAULT_MAX_FRAMES

logger = logging.getLogger("errtree.dedup")


@dataclass(frozen=True)
class Fresh:
    """First sighting of a frame; number is its display number in this render."""

    number: int


@dataclass(frozen=True)
class Duplicate:
    """Repeat sighting; index is the display number of the earlier frame."""

    index: int


Observation = Union[Fresh, Duplicate]


class FrameDeduplicator:
    """
    Capacity-bounded table of frame identities seen during one render.

    Entries are filled front to back and never removed. When the table is
    full, new identities are still reported as Fresh but are not stored, so
    later repeats of them render in full again. A full table is a
    degradation, never an error.

    Attributes:
        capacity: Maximum number of identities remembered
    """

    def __init__(self, capacity: int = DEFAULT_MAX_FRAMES):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._seen: List[Hashable] = []
        self._fresh_count = 0
        self._dropped = 0

    def observe(self, identity: Hashable) -> Observation:
        """
        Classify a frame identity and remember it when there is room.

        Args:
            identity: Equality-comparable frame identity

        Returns:
            Duplicate(index) if the identity was stored earlier, else
            Fresh(number) with the next display number
        """
        for index, seen in enumerate(self._seen):
            if seen == identity:
                return Duplicate(index)

        number = self._fresh_count
        self._fresh_count += 1

        if len(self._seen) < self.capacity:
            self._seen.append(identity)
        else:
            self._dropped += 1
            if self._dropped == 1:
                logger.debug(
                    f"Frame table full ({self.capacity} entries), "
                    "further frames will not be deduplicated"
                )

        return Fresh(number)

    def __len__(self) -> int:
        return len(self._seen)

    @property
    def is_full(self) -> bool:
        return len(self._seen) >= self.capacity

    def __repr__(self) -> str:
        return (
            f"FrameDeduplicator("
            f"stored={len(self._seen)}/{self.capacity}, "
            f"fresh={self._fresh_count}, "
            f"dropped={self._dropped}"
            f")"
        )
