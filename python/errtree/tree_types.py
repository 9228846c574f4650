"""
Type definitions for error tree rendering and encoding.

Defines the contract every error view must satisfy before the renderer or the
encoder will accept it. Two families of implementations exist:

- Live views wrapping application errors (errtree.live)
- Reconstructed views scanning an encoded blob (errtree.codec.scanner)

The renderer and encoder are written once against TreeNode and never know
which family they are looking at.
"""

from dataclasses import dataclass
from typing import Hashable, Iterable, Optional, Protocol, Tuple, runtime_checkable


# Connector glyphs (all CONNECTOR_WIDTH characters wide)
CONTINUING = "│   "  # Prefix segment under a non-last child
BLANK = "    "  # Prefix segment under the last child
ARROW = "├─▶ "  # Branch to a non-last child
LAST_ARROW = "╰─▶ "  # Branch to the last child
ANNOTATION = "├─ "  # Location / frame line with more lines following
ANNOTATION_LAST = "╰─ "  # Location / frame line that ends the node
RAIL = "│"  # Bare separator line between siblings
CONTINUATION = "│ "  # Re-indentation after an embedded newline

CONNECTOR_WIDTH = 4
TRUNCATION_MARKER = "." * CONNECTOR_WIDTH

# Constants for configuration
DEFAULT_MAX_DEPTH = 10  # Render depth before branches are cut
DEFAULT_MAX_FRAMES = 64  # Frame identities remembered per render
MAX_ALLOWED_DEPTH = 128  # Keeps recursion well below the interpreter limit


@dataclass(frozen=True)
class ContextFrame:
    """
    One recorded contextual operation attached to an error.

    Akin to a call-stack frame with structured fields: the subsystem (target),
    the operation (name), free-form "key=value" text and an optional source
    position.

    Attributes:
        target: Logical subsystem name (e.g., "billing::invoice")
        name: Logical operation name (e.g., "charge_card")
        fields: Free-form field text, possibly empty
        location: Optional (file, line) pair
        callsite: Optional token identifying the recording site. It is text so
                  the encoder can carry it and a decoded frame deduplicates
                  exactly like the live one.

    Identity for deduplication is the callsite when given, otherwise
    (target, name, location). The fields text never takes part, so two
    recordings of the same callsite with different field values collapse
    into one back-reference.
    """

    target: str
    name: str
    fields: str = ""
    location: Optional[Tuple[str, int]] = None
    callsite: Optional[str] = None

    @property
    def identity(self) -> Hashable:
        if self.callsite is not None:
            return self.callsite
        return (self.target, self.name, self.location)


@runtime_checkable
class TreeNode(Protocol):
    """
    Protocol for one error and its causal children.

    Implementations are transient views: build one for a render or encode
    call and drop it afterwards. They must not change while being walked.

    Children are yielded in display order. Callers that need to know which
    child is the last one wrap children() in a LookaheadIterator, so lazily
    produced children never need to be materialized up front.
    """

    @property
    def message(self) -> str:
        """Display message of this error."""
        ...

    @property
    def location(self) -> Optional[str]:
        """Source location text (e.g., "app/db.py:42"), or None."""
        ...

    def frames(self) -> Iterable[ContextFrame]:
        """Context frames attached to this error, possibly empty."""
        ...

    def children(self) -> Iterable["TreeNode"]:
        """Causal child errors in display order, possibly empty."""
        ...
