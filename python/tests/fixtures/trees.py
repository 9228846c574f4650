"""
Error tree fixtures used across renderer, codec and CLI tests.
"""

import pytest

from errtree.live import ErrTreeNode
from errtree.tree_types import ContextFrame

TRACE_FILE = "trace_example.rs"

BED_TIME_FIELDS = (
    'bed_time=BedTime { hour: 2, reasons: [FinishingProject(ClassProject '
    '{ desc: "proving 1 == 2" }), ExamStressed, PlayingGames] } _garbage=5'
)


@pytest.fixture
def school_tree():
    """
    Three-level tree without locations or frames.

    Structure:
        missed class
          stayed in bed too long
            bed is comfortable
            went to sleep at 2 A.M.
    """
    return ErrTreeNode(
        "missed class",
        sources=[
            ErrTreeNode(
                "stayed in bed too long",
                sources=["bed is comfortable", "went to sleep at 2 A.M."],
            )
        ],
    )


@pytest.fixture
def multiline_tree():
    """Messages with embedded newlines at two depths."""
    return ErrTreeNode(
        "This error spans\nmultiple\nlines",
        sources=[ErrTreeNode("And is\nnested")],
    )


@pytest.fixture
def outer_frame():
    return ContextFrame(
        target="tracing::example",
        name="gen_print_inner",
        location=(TRACE_FILE, 38),
    )


@pytest.fixture
def traced_tree(outer_frame):
    """
    Tree with locations, structured fields and a frame repeated at three depths.

    The outer frame is attached to the root, to the first child and to a
    grandchild, so only its first sighting renders in full.
    """
    new_frame = ContextFrame(
        target="tracing::example",
        name="new",
        fields=BED_TIME_FIELDS,
        location=(TRACE_FILE, 124),
    )
    went_to_sleep = ErrTreeNode(
        "went to sleep at 2 A.M.",
        location=f"{TRACE_FILE}:41:9",
        frame_list=[outer_frame],
        sources=[
            ErrTreeNode("finishing a project", sources=["proving 1 == 2"]),
            "stressed about exams",
            "playing video games",
        ],
    )
    overslept = ErrTreeNode(
        "stayed in bed too long",
        location=f"{TRACE_FILE}:40:57",
        frame_list=[new_frame, outer_frame],
        sources=["bed is comfortable", went_to_sleep],
    )
    return ErrTreeNode(
        "missed class",
        location=f"{TRACE_FILE}:51:6",
        frame_list=[outer_frame],
        sources=[overslept],
    )


TRACED_TREE_OUTPUT = """missed class
├─ at trace_example.rs:51:6
│
├─ tracing frame 0 => tracing::example::gen_print_inner
│        at trace_example.rs:38
│
╰─▶ stayed in bed too long
    ├─ at trace_example.rs:40:57
    │
    ├─ tracing frame 1 => tracing::example::new with
    │    bed_time=BedTime {
    │      hour: 2,
    │      reasons: [
    │        FinishingProject(
    │          ClassProject {
    │            desc: "proving 1 == 2"
    │          }
    │        ),
    │        ExamStressed,
    │        PlayingGames
    │      ]
    │    }
    │    _garbage=5
    │        at trace_example.rs:124
    ├─ 1 duplicate tracing frame(s): [0]
    │
    ├─▶ bed is comfortable
    │
    ╰─▶ went to sleep at 2 A.M.
        ├─ at trace_example.rs:41:9
        │
        ├─ 1 duplicate tracing frame(s): [0]
        │
        ├─▶ finishing a project
        │   │
        │   ╰─▶ proving 1 == 2
        │
        ├─▶ stressed about exams
        │
        ╰─▶ playing video games"""


@pytest.fixture
def traced_tree_output():
    return TRACED_TREE_OUTPUT


@pytest.fixture
def make_chain():
    """
    Factory for a single-child chain of the given depth.

    make_chain(3) builds "level 0" -> "level 1" -> "level 2" -> "level 3".
    """

    def _make(depth: int) -> ErrTreeNode:
        node = ErrTreeNode(f"level {depth}")
        for level in range(depth - 1, -1, -1):
            node = ErrTreeNode(f"level {level}", sources=[node])
        return node

    return _make
