"""
Bracket, quote and escape tracking shared by the scanner and the renderer.

Everything that walks structured text in errtree goes through NestingTracker:

1. find_key: locating a key of the current object, skipping nested children
2. matching_close: jumping over a whole nested value in one pass
3. split_top_level: splitting an array into sibling elements
4. reflow_fields: pretty-printing a frame's "key=value ..." text

Keeping one tracker means a comma inside a grandchild's frame list, a bracket
inside a quoted message, or an escaped quote are all handled the same way
everywhere.
"""

from typing import Iterator, List, Optional, Tuple

OPENERS = "{[("
CLOSERS = "}])"
QUOTE = '"'
ESCAPE = "\\"

_CLOSER_FOR = dict(zip(OPENERS, CLOSERS))


class NestingTracker:
    """
    Character-at-a-time nesting state machine.

    Feed characters left to right. feed() reports whether the character was
    structural, i.e. outside any quoted string and not a quote delimiter.
    depth counts open brackets of any kind; it is updated as openers and
    closers are fed, so after feeding an opener depth is the inner level.

    Example:
        >>> tracker = NestingTracker()
        >>> [tracker.feed(c) for c in '{"a,"}']
        [True, False, False, False, False, True]
        >>> tracker.depth
        0
    """

    __slots__ = ("depth", "in_quote", "_escaped")

    def __init__(self) -> None:
        self.depth = 0
        self.in_quote = False
        self._escaped = False

    def feed(self, char: str) -> bool:
        if self.in_quote:
            if self._escaped:
                self._escaped = False
            elif char == ESCAPE:
                self._escaped = True
            elif char == QUOTE:
                self.in_quote = False
            return False

        if char == QUOTE:
            self.in_quote = True
            return False
        if char in OPENERS:
            self.depth += 1
        elif char in CLOSERS:
            self.depth -= 1
        return True


def matching_close(text: str, start: int) -> int:
    """
    Find the bracket that closes the one at text[start].

    Args:
        text: Text to scan
        start: Offset of an opening bracket

    Returns:
        Offset of the matching closing bracket, or len(text) if the input
        ends first (truncated input is not an error)
    """
    tracker = NestingTracker()
    for offset in range(start, len(text)):
        tracker.feed(text[offset])
        if tracker.depth == 0:
            return offset
    return len(text)


def find_key(text: str, key: str, start: int = 0) -> Optional[int]:
    """
    Locate a key of the object opening at text[start].

    Only keys at the object's own level match; keys inside nested values
    (a child's own "msg", a frame's "location") are skipped over.

    Args:
        text: Encoded text
        key: Key name without quotes
        start: Offset of the object's opening brace

    Returns:
        Offset just past the key's colon, or None if the key is absent
    """
    needle = f'"{key}":'
    tracker = NestingTracker()
    for offset in range(start, len(text)):
        char = text[offset]
        opens_string = char == QUOTE and not tracker.in_quote
        tracker.feed(char)
        if opens_string and tracker.depth == 1 and text.startswith(needle, offset):
            return offset + len(needle)
        if tracker.depth <= 0 and offset > start:
            return None
    return None


def split_top_level(text: str, start: int) -> Iterator[Tuple[int, int]]:
    """
    Split the array opening at text[start] into its elements.

    Args:
        text: Encoded text
        start: Offset of the array's opening bracket

    Yields:
        (begin, end) offsets of each element with surrounding whitespace
        trimmed; end is exclusive
    """
    tracker = NestingTracker()
    tracker.feed(text[start])
    begin = start + 1
    offset = begin
    while offset < len(text):
        char = text[offset]
        structural = tracker.feed(char)
        if tracker.depth == 0 or (structural and char == "," and tracker.depth == 1):
            span = _trim(text, begin, offset)
            if span is not None:
                yield span
            if tracker.depth == 0:
                return
            begin = offset + 1
        offset += 1

    # Truncated array: keep whatever was started
    span = _trim(text, begin, len(text))
    if span is not None:
        yield span


def _trim(text: str, begin: int, end: int) -> Optional[Tuple[int, int]]:
    while begin < end and text[begin].isspace():
        begin += 1
    while end > begin and text[end - 1].isspace():
        end -= 1
    if begin == end:
        return None
    return begin, end


def _skip_whitespace(text: str, offset: int) -> int:
    while offset < len(text) and text[offset].isspace():
        offset += 1
    return offset


def reflow_fields(fields: str, indent: str = "  ") -> List[str]:
    """
    Pretty-print frame fields text into indented lines.

    Line breaks go after an opening bracket, after a comma, before a closing
    bracket, and at whitespace between top-level fields. Empty brackets stay
    on one line and quoted substrings are never split.

    Args:
        fields: Raw fields text (e.g. 'user=User { id: 7, tags: ["a", "b"] } retry=2')
        indent: Indentation added per nesting level

    Returns:
        Lines without trailing newlines, indented by nesting depth

    Example:
        >>> reflow_fields('user=User { id: 7 } retry=2')
        ['user=User {', '  id: 7', '}', 'retry=2']
    """
    lines: List[str] = []
    line: List[str] = []
    line_depth = 0
    tracker = NestingTracker()

    def break_line(next_depth: int) -> None:
        nonlocal line_depth
        content = "".join(line).strip()
        if content:
            lines.append(indent * line_depth + content)
        line.clear()
        line_depth = max(next_depth, 0)

    offset = 0
    while offset < len(fields):
        char = fields[offset]
        if not tracker.feed(char):
            line.append(char)
            offset += 1
            continue

        if char in OPENERS:
            after = _skip_whitespace(fields, offset + 1)
            if after < len(fields) and fields[after] == _CLOSER_FOR[char]:
                tracker.feed(fields[after])
                line.append(char + fields[after])
                offset = after + 1
                continue
            line.append(char)
            break_line(tracker.depth)
            offset = after
        elif char in CLOSERS:
            break_line(tracker.depth)
            line.append(char)
            offset += 1
        elif char == ",":
            line.append(char)
            break_line(tracker.depth)
            offset = _skip_whitespace(fields, offset + 1)
        elif char.isspace() and tracker.depth <= 0:
            after = _skip_whitespace(fields, offset)
            if after < len(fields) and fields[after] in OPENERS:
                line.append(" ")
            else:
                break_line(0)
            offset = after
        else:
            line.append(char)
            offset += 1

    break_line(0)
    return lines
