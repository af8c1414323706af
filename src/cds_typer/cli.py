"""Command-line interface for writing the base definitions and predefined libraries of generated modules.

Notes:
    - Every written module consists of an `index.ts` with type definitions and an `index.js` runtime stub.
"""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Sequence

from cds_typer.run import run

logger = logging.getLogger(__name__)


def _add_recursive_argument(parser: argparse.ArgumentParser):
    """Add a recursive argument to a parser.

    Args:
        parser (argparse.ArgumentParser): The parser to add the argument to.
    """
    parser.add_argument(
        "-r",
        "--recursive",
        dest="recursive",
        default=False,
        action="store_true",
        help="recursively search for *.ts library files with a given glob expression or directory.",
    )


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Write base definitions and predefined type libraries.")

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default="@cds-models",
        help="directory to write all generated modules to.",
    )

    parser.add_argument(
        "-l",
        "--libraries",
        type=str,
        nargs="+",
        default=[],
        help="paths, directories or glob expressions that match predefined library files (e.g. cap.hana.ts).",
    )

    parser.add_argument(
        "-e",
        "--excludes",
        type=str,
        nargs="+",
        default=[],
        help="path or glob expressions to exclude from library matches.",
    )

    parser.add_argument(
        "--no-base-definitions",
        dest="skip_base_definitions",
        default=False,
        action="store_true",
        help="skip writing the base definitions module.",
    )

    _add_recursive_argument(parser)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Write the base definitions module and all matched libraries below the output directory.

    Relative library patterns and the output directory are resolved against the current working directory.
    A module that can not be written is logged and does not change the exit code.

    Args:
        argv (Sequence[str] | None, optional): Command line arguments, `sys.argv[1:]` if None. Defaults to None.

    Returns:
        int: The exit code, 0.
    """
    logging.basicConfig(level=logging.INFO)

    root_directory = os.getcwd()
    logging.info("Working from root directory: %s", root_directory)

    parser = setup_parser()
    args = parser.parse_args(argv)

    run(args, root_directory)

    return 0
