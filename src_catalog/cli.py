import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core import DEFAULT_OUTPUT, write_catalog

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="src-catalog",
        description="Concatenate all .ts/.tsx files under the current directory into a single Markdown file.",
    )
    parser.add_argument("output", nargs="?", default=DEFAULT_OUTPUT,
                        help=f"Destination Markdown file (default: {DEFAULT_OUTPUT})")
    return parser

def main(argv: Optional[List[str]] = None, root: Optional[Path] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)
    args = build_parser().parse_args(argv)
    try:
        root = Path(root) if root is not None else Path.cwd()
    except FileNotFoundError:
        # The working directory was removed.
        logger.warning("No source directory found: working directory no longer exists")
        return 1

    if not root.exists():
        logger.warning("No source directory found at: %s", root)
        return 1

    try:
        count = write_catalog(root, args.output)
    except Exception:
        logger.exception("Failed to write source catalog")
        return 1

    print(f"Wrote {args.output} with {count} files.")
    return 0
