"""
Live TreeNode views over application errors.

Three ways to get a tree out of running code:

1. ErrTreeNode: build the tree explicitly (tests, synthetic reports)
2. ExceptionNode: wrap any Python exception; children come from exception
   groups, __cause__ or __context__
3. TreeError: an exception base class that carries several sources and the
   context frames active when it was created

as_tree_node() picks the right view for an arbitrary object.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

from errtree.spans import current_frames
from errtree.tree_types import ContextFrame, TreeNode


@dataclass
class ErrTreeNode:
    """
    Explicitly constructed tree node.

    Attributes:
        message: Display message
        location: Optional location text (e.g. "app/db.py:42")
        frame_list: Context frames attached to this node
        sources: Child nodes in display order (any object as_tree_node accepts)

    Example:
        >>> tree = ErrTreeNode(
        ...     "missed class",
        ...     sources=[ErrTreeNode("stayed in bed too long")],
        ... )
    """

    message: str
    location: Optional[str] = None
    frame_list: Sequence[ContextFrame] = field(default_factory=tuple)
    sources: Sequence[Any] = field(default_factory=tuple)

    def frames(self) -> Sequence[ContextFrame]:
        return self.frame_list

    def children(self) -> Iterator[TreeNode]:
        for source in self.sources:
            if isinstance(source, str):
                yield ErrTreeNode(source)
            else:
                yield as_tree_node(source)


def _traceback_location(exc: BaseException) -> Optional[str]:
    """Location of the raise site (innermost traceback entry)."""
    tb = exc.__traceback__
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return f"{tb.tb_frame.f_code.co_filename}:{tb.tb_lineno}"


class ExceptionNode:
    """
    TreeNode view of a Python exception.

    Children, in order of preference:
    - an explicit __err_tree_sources__ sequence
    - the members of an exception group
    - __cause__ (raise ... from ...)
    - __context__, unless suppressed with "from None"

    Attributes:
        exc: Wrapped exception
        with_type: Prefix the message with the exception type name
    """

    __slots__ = ("exc", "with_type")

    def __init__(self, exc: BaseException, with_type: bool = False):
        self.exc = exc
        self.with_type = with_type

    @property
    def message(self) -> str:
        text = str(self.exc)
        type_name = type(self.exc).__name__
        if not text:
            return type_name
        if self.with_type:
            return f"{type_name}: {text}"
        return text

    @property
    def location(self) -> Optional[str]:
        explicit = getattr(self.exc, "__err_tree_location__", None)
        if explicit is not None:
            return explicit
        return _traceback_location(self.exc)

    def frames(self) -> Sequence[ContextFrame]:
        return getattr(self.exc, "__err_tree_frames__", None) or ()

    def _sources(self) -> Iterable[Any]:
        explicit = getattr(self.exc, "__err_tree_sources__", None)
        if explicit:
            return explicit
        if isinstance(self.exc, BaseExceptionGroup):
            return self.exc.exceptions
        if self.exc.__cause__ is not None:
            return (self.exc.__cause__,)
        if self.exc.__context__ is not None and not self.exc.__suppress_context__:
            return (self.exc.__context__,)
        return ()

    def children(self) -> Iterator[TreeNode]:
        for source in self._sources():
            if isinstance(source, BaseException):
                yield ExceptionNode(source, with_type=self.with_type)
            else:
                yield as_tree_node(source)

    def __repr__(self) -> str:
        return f"ExceptionNode({self.exc!r})"


class TreeError(Exception):
    """
    Exception base class for errors with several causes.

    Captures the context frames active at construction (see errtree.spans)
    and keeps every source, not just the single __cause__ Python tracks.

    Example:
        class Overslept(TreeError):
            pass

        raise Overslept("stayed in bed too long", ComfortableBed(), LateNight())
    """

    def __init__(self, message: str, *sources: BaseException, location: Optional[str] = None):
        super().__init__(message)
        self.__err_tree_sources__: Tuple[BaseException, ...] = sources
        self.__err_tree_frames__: Tuple[ContextFrame, ...] = current_frames()
        if location is not None:
            self.__err_tree_location__ = location
        if len(sources) == 1:
            self.__cause__ = sources[0]

    @property
    def sources(self) -> Tuple[BaseException, ...]:
        return self.__err_tree_sources__


def as_tree_node(obj: Any, with_type: bool = False) -> TreeNode:
    """
    Get a TreeNode view for obj.

    Args:
        obj: A TreeNode already, a BaseException, or an encoded blob string
        with_type: For exceptions, prefix messages with the type name

    Returns:
        TreeNode view of obj

    Raises:
        TypeError: If obj cannot be viewed as a tree
    """
    if isinstance(obj, BaseException):
        return ExceptionNode(obj, with_type=with_type)
    if isinstance(obj, str):
        from errtree.codec.scanner import decode

        return decode(obj)
    if isinstance(obj, TreeNode):
        return obj
    raise TypeError(f"cannot build an error tree from {type(obj).__name__}")

