"""
String escaping for the encoded tree format.

Only seven characters are escaped: quote, backslash, backspace, form-feed,
newline, carriage return and tab. Everything else, non-ASCII included, is
written through untouched, which keeps blobs readable and compact.
"""

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_UNESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_ESCAPE_TABLE = str.maketrans(_ESCAPES)


def escape(text: str) -> str:
    """Escape free text for embedding between quotes."""
    return text.translate(_ESCAPE_TABLE)


def unescape(raw: str) -> str:
    """
    Reverse escape().

    Also accepts \\/ and \\uXXXX so blobs written by JSON tools still read
    back. Unknown or cut-off escapes are kept literally rather than rejected.
    """
    if "\\" not in raw:
        return raw

    out = []
    offset = 0
    length = len(raw)
    while offset < length:
        char = raw[offset]
        if char != "\\" or offset + 1 >= length:
            out.append(char)
            offset += 1
            continue

        code = raw[offset + 1]
        if code in _UNESCAPES:
            out.append(_UNESCAPES[code])
            offset += 2
        elif code == "u" and _is_hex(raw[offset + 2 : offset + 6]):
            out.append(chr(int(raw[offset + 2 : offset + 6], 16)))
            offset += 6
        else:
            out.append(char)
            offset += 1

    return "".join(out)


def _is_hex(digits: str) -> bool:
    return len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits)
