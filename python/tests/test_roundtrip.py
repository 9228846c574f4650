"""
Round trip: a decoded blob renders exactly like the tree it was encoded from.
"""

from errtree.codec import decode, encode, reconstruct_output
from errtree.live import ErrTreeNode, ExceptionNode, TreeError
from errtree.renderer import render_tree
from errtree.spans import span
from errtree.tree_types import ContextFrame


class TestRoundTrip:
    """render(decode(encode(node))) == render(node) within the depth cap."""

    def test_school_tree(self, school_tree):
        assert reconstruct_output(encode(school_tree)) == render_tree(school_tree)

    def test_multiline_tree(self, multiline_tree):
        assert reconstruct_output(encode(multiline_tree)) == render_tree(multiline_tree)

    def test_traced_tree(self, traced_tree, traced_tree_output):
        """Frame deduplication survives because identities survive."""
        assert reconstruct_output(encode(traced_tree)) == traced_tree_output

    def test_special_characters(self):
        node = ErrTreeNode(
            'quote " backslash \\ tab \t cr \r ff \f bs \b',
            location="C:\\app\\main.py:1",
            frame_list=[ContextFrame("t", "n", 'path="C:\\\\x" list=[1, 2]', ("C:\\app\\main.py", 2))],
            sources=["foo\n \\ \\n \t/\nbar"],
        )
        assert reconstruct_output(encode(node)) == render_tree(node)

    def test_live_exception_tree(self):
        with span("billing", "charge", _location=("billing.py", 10), customer=7):
            try:
                raise TreeError("charge failed", ValueError("card declined"), KeyError("retry"))
            except TreeError as e:
                error = e

        node = ExceptionNode(error, with_type=True)
        assert reconstruct_output(encode(node)) == render_tree(node)

    def test_callsites_keep_frames_apart(self):
        """Frames sharing target, name and location stay distinct by callsite."""
        node = ErrTreeNode(
            "query failed",
            frame_list=[ContextFrame("db", "query", "id=1", ("db.py", 4), callsite="site-a")],
            sources=[ErrTreeNode("retry failed", frame_list=[ContextFrame("db", "query", "id=2", ("db.py", 4), callsite="site-b")])],
        )
        rendered = render_tree(node)

        assert "duplicate" not in rendered
        assert reconstruct_output(encode(node)) == rendered

    def test_shared_callsite_collapses_after_decoding(self):
        node = ErrTreeNode(
            "query failed",
            frame_list=[ContextFrame("db", "query", "id=1", callsite="site-a")],
            sources=[ErrTreeNode("retry failed", frame_list=[ContextFrame("db", "retry", "id=2", callsite="site-a")])],
        )
        rendered = render_tree(node)

        assert rendered.endswith("╰─ 1 duplicate tracing frame(s): [0]")
        assert reconstruct_output(encode(node)) == rendered

    def test_render_options_apply_to_decoded_tree(self, traced_tree):
        blob = encode(traced_tree)
        assert reconstruct_output(blob, max_frames=0, color=True) == render_tree(
            traced_tree, max_frames=0, color=True
        )


class TestRoundTripPastCap:
    """Trees deeper than the cap keep their truncation markers."""

    def test_default_encode_depth_preserves_marker(self, make_chain):
        tree = make_chain(20)
        assert reconstruct_output(encode(tree)) == render_tree(tree)
        assert render_tree(tree).count("....") == 1

    def test_explicit_cap_plus_one(self, make_chain):
        tree = make_chain(6)
        blob = encode(tree, max_depth=3)
        assert reconstruct_output(blob, max_depth=2) == render_tree(tree, max_depth=2)

    def test_encoding_at_cap_loses_marker(self, make_chain):
        """Encoding only to the cap drops the children that signal a cut."""
        tree = make_chain(6)
        blob = encode(tree, max_depth=2)
        assert "...." not in reconstruct_output(blob, max_depth=2)
        assert decode(blob).message == "level 0"
