"""
Command line entry point.

Usage:
    errtree render [FILE|-]    Rebuild and print trees from encoded blobs
    errtree toon [FILE|-]      Export the same trees as one TOON table

Input holds one encoded blob per line (the encoder never writes a raw
newline), so blobs can be grepped straight out of a log file:

    grep -o '{"msg":.*' app.log | errtree render

Or via environment variables:
    ERRTREE_MAX_DEPTH=4 ERRTREE_COLOR=1 errtree render blobs.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from errtree import __version__
from errtree.codec import decode
from errtree.config import load_render_config
from errtree.logging_config import setup_logging
from errtree.renderer import write_tree
from errtree.stdio import ensure_utf8_encoding, handle_broken_pipe
from errtree.toon_export import encode_tree_toon

logger = logging.getLogger("errtree.cli")


def _read_blobs(source: str) -> List[str]:
    """Non-empty lines of FILE, or of stdin for "-"."""
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")
    return [line for line in text.splitlines() if line.strip()]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="errtree",
        description="Render encoded error trees as box-drawn text or TOON tables",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for daily log files (default: ERRTREE_LOG_DIR env var, else no file)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Print each blob as an error tree")
    render.add_argument("source", nargs="?", default="-", help="Input file (default: stdin)")
    render.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Nested levels before a branch is cut (default: 10, or ERRTREE_MAX_DEPTH)",
    )
    render.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Frame identities remembered for deduplication (default: 64, or ERRTREE_MAX_FRAMES)",
    )
    render.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Italicize locations (default: off, or ERRTREE_COLOR)",
    )

    toon = subparsers.add_parser("toon", help="Export all blobs as one flat TOON table")
    toon.add_argument("source", nargs="?", default="-", help="Input file (default: stdin)")

    return parser


def _run_render(args: argparse.Namespace, blobs: List[str]) -> int:
    try:
        config = load_render_config(
            max_depth=args.max_depth,
            max_frames=args.max_frames,
            color=args.color,
        )
    except ValueError as e:
        print(f"errtree: {e}", file=sys.stderr)
        return 2

    logger.info(f"Rendering {len(blobs)} tree(s) from {args.source}")
    for index, blob in enumerate(blobs):
        if index:
            sys.stdout.write("\n")
        write_tree(
            decode(blob),
            sys.stdout,
            max_depth=config["max_depth"],
            max_frames=config["max_frames"],
            color=config["color"],
        )
        sys.stdout.write("\n")
    sys.stdout.flush()
    return 0


def _run_toon(args: argparse.Namespace, blobs: List[str]) -> int:
    logger.info(f"Exporting {len(blobs)} tree(s) from {args.source} as TOON")
    result = encode_tree_toon([decode(blob) for blob in blobs])
    if isinstance(result, str):
        sys.stdout.write(result.rstrip("\n") + "\n")
    else:
        for row in result:
            sys.stdout.write(f"{row}\n")
    sys.stdout.flush()
    return 0


@handle_broken_pipe
def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the errtree CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    ensure_utf8_encoding()

    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        log_dir=args.log_dir,
        level=logging.DEBUG if args.verbose else logging.INFO,
        console=args.verbose,
    )

    try:
        blobs = _read_blobs(args.source)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {args.source}: {e}")
        print(f"errtree: cannot read {args.source}: {e}", file=sys.stderr)
        return 1

    if args.command == "render":
        return _run_render(args, blobs)
    return _run_toon(args, blobs)


if __name__ == "__main__":
    sys.exit(main())
