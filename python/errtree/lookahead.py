"""One-item lookahead over an iterator, used to spot the last child."""

from typing import Generic, Iterable, Iterator, Tuple, TypeVar

T = TypeVar("T")

_EMPTY = object()


class LookaheadIterator(Generic[T]):
    """
    Wraps an iterable and keeps the next item buffered.

    Iterating yields (item, is_last) pairs. is_empty() peeks without
    consuming, which lets a caller decide between branch and terminal
    glyphs before it starts writing children.

    Example:
        >>> items = LookaheadIterator(["a", "b"])
        >>> items.is_empty()
        False
        >>> list(items)
        [('a', False), ('b', True)]
    """

    def __init__(self, iterable: Iterable[T]):
        self._iter = iter(iterable)
        self._buffer = _EMPTY

    def _fill(self) -> bool:
        if self._buffer is _EMPTY:
            self._buffer = next(self._iter, _EMPTY)
        return self._buffer is not _EMPTY

    def is_empty(self) -> bool:
        return not self._fill()

    def __iter__(self) -> Iterator[Tuple[T, bool]]:
        while self._fill():
            item = self._buffer
            self._buffer = _EMPTY
            yield item, not self._fill()
