"""
Scanner: a TreeNode that reads straight from an encoded blob.

No document is parsed up front. Each property locates its key with
find_key(), which skips whole nested children in one pass, and children are
produced lazily as offsets into the same string. Rendering a reconstructed
tree therefore touches each character a small, bounded number of times and
never builds an intermediate structure.

Decoding is lenient by contract: the scanner only ever reads blobs written by
errtree's own encoder. Malformed or truncated input degrades to empty fields
and no children. Do not use it to validate untrusted input.
"""

from typing import Iterator, List, Optional, Tuple

from errtree.codec.escape import unescape
from errtree.nesting import ESCAPE, QUOTE, find_key, matching_close, split_top_level
from errtree.tree_types import ContextFrame


def _skip_whitespace(text: str, offset: int, end: int) -> int:
    while offset < end and text[offset].isspace():
        offset += 1
    return offset


def read_string(text: str, offset: int) -> Optional[Tuple[str, int]]:
    """
    Read a quoted string starting at text[offset].

    Returns:
        (unescaped value, offset past the closing quote), or None if there is
        no string at offset or it is unterminated
    """
    if offset >= len(text) or text[offset] != QUOTE:
        return None
    cursor = offset + 1
    while cursor < len(text):
        char = text[cursor]
        if char == ESCAPE:
            cursor += 2
            continue
        if char == QUOTE:
            return unescape(text[offset + 1 : cursor]), cursor + 1
        cursor += 1
    return None


def _string_at(text: str, offset: Optional[int]) -> Optional[str]:
    if offset is None:
        return None
    found = read_string(text, _skip_whitespace(text, offset, len(text)))
    return found[0] if found else None


def _array_at(text: str, offset: Optional[int]) -> Optional[int]:
    """Offset of the "[" opening the value at offset, if the value is an array."""
    if offset is None:
        return None
    offset = _skip_whitespace(text, offset, len(text))
    if offset < len(text) and text[offset] == "[":
        return offset
    return None


def _parse_location_pair(text: str, start: int) -> Optional[Tuple[str, int]]:
    elements = list(split_top_level(text, start))
    if len(elements) != 2:
        return None
    file = read_string(text, elements[0][0])
    if file is None:
        return None
    try:
        line = int(text[elements[1][0] : elements[1][1]])
    except ValueError:
        return None
    return file[0], line


def _parse_frame(text: str, start: int) -> Optional[ContextFrame]:
    if text[start] != "{":
        return None
    location = None
    pair_start = _array_at(text, find_key(text, "location", start))
    if pair_start is not None:
        location = _parse_location_pair(text, pair_start)
    return ContextFrame(
        target=_string_at(text, find_key(text, "target", start)) or "",
        name=_string_at(text, find_key(text, "name", start)) or "",
        fields=_string_at(text, find_key(text, "fields", start)) or "",
        location=location,
        callsite=_string_at(text, find_key(text, "callsite", start)),
    )


class ScannedNode:
    """
    TreeNode view over one encoded object inside a blob.

    Attributes:
        text: The whole blob (shared by every node of the tree)
        start: Offset of this node's opening brace
    """

    __slots__ = ("text", "start")

    def __init__(self, text: str, start: int = 0):
        self.text = text
        self.start = start

    @property
    def _valid(self) -> bool:
        return self.start < len(self.text) and self.text[self.start] == "{"

    def _key(self, key: str) -> Optional[int]:
        if not self._valid:
            return None
        return find_key(self.text, key, self.start)

    @property
    def message(self) -> str:
        return _string_at(self.text, self._key("msg")) or ""

    @property
    def location(self) -> Optional[str]:
        return _string_at(self.text, self._key("location"))

    def frames(self) -> List[ContextFrame]:
        start = _array_at(self.text, self._key("trace"))
        if start is None:
            return []
        frames = []
        for begin, _end in split_top_level(self.text, start):
            frame = _parse_frame(self.text, begin)
            if frame is not None:
                frames.append(frame)
        return frames

    def children(self) -> Iterator["ScannedNode"]:
        start = _array_at(self.text, self._key("sources"))
        if start is None:
            return
        for begin, _end in split_top_level(self.text, start):
            yield ScannedNode(self.text, begin)

    @property
    def end(self) -> int:
        """Offset of this node's closing brace (len(text) if truncated)."""
        if not self._valid:
            return self.start
        return matching_close(self.text, self.start)

    def raw(self) -> str:
        """Encoded text of this node alone."""
        return self.text[self.start : self.end + 1]

    def __repr__(self) -> str:
        return f"ScannedNode(start={self.start}, message={self.message!r})"


def decode(blob: str) -> ScannedNode:
    """
    View an encoded blob as a TreeNode.

    Leading whitespace (e.g. from a log line) is skipped. Anything that is
    not an encoded object decodes to an empty node.
    """
    return ScannedNode(blob, _skip_whitespace(blob, 0, len(blob)))
