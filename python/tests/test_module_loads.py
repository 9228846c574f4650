"""
Test that the errtree package imports and exposes its public API.
"""

def test_errtree_package_imports():
    """Test that the errtree Python package imports."""
    import errtree
    assert errtree.__version__ == "0.1.0"


def test_public_api():
    import errtree

    for name in errtree.__all__:
        assert hasattr(errtree, name), name


def test_top_level_round_trip():
    from errtree import ErrTreeNode, decode, encode, render_tree

    tree = ErrTreeNode("missed class", sources=["overslept"])
    assert render_tree(decode(encode(tree))) == "missed class\n│\n╰─▶ overslept"


def test_cli_module_imports():
    from errtree import cli
    assert callable(cli.main)


def test_toon_format_available():
    """toon_format backs the TOON export."""
    import toon_format
    assert callable(toon_format.encode)
