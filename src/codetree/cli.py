"""Command-line interface for codetree."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from codetree.analyzer import DependencyAnalyzer, ScanRootNotFoundError
from codetree.config import load_config
from codetree.pipeline import run
from codetree.renderer import RENDERERS
from codetree.scan import normalize_path, relative_posix

logger = logging.getLogger("codetree")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codetree",
        description="Cross-language source dependency trees: file imports and function calls.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Root directory of the project to analyse",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="File to start from (default: every file nothing else imports)",
    )
    parser.add_argument(
        "--function",
        default=None,
        help="Build the call tree of this function in TARGET instead of the import tree",
    )
    parser.add_argument(
        "--format",
        choices=sorted(RENDERERS),
        default="text",
        dest="fmt",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the rendering to this file instead of stdout",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Traversal depth bound for file and function trees (default: 10)",
    )
    parser.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Do not read the project's .gitignore",
    )
    parser.add_argument(
        "--no-semantic",
        action="store_true",
        help="Use the lexical front-ends for every language",
    )
    parser.add_argument(
        "--list-ignore-rules",
        action="store_true",
        help="Print the active ignore patterns and exit",
    )
    parser.add_argument(
        "--check-ignored",
        metavar="PATH",
        default=None,
        help="Report whether PATH is excluded by the ignore rules and exit",
    )
    parser.add_argument(
        "--cycles",
        action="store_true",
        help="List import cycles between files and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("codetree").setLevel(logging.DEBUG)

    if args.function and args.target is None:
        parser.error("--function requires TARGET")

    config = load_config(args.project_dir)
    if args.max_depth is not None:
        config.max_depth = args.max_depth
        config.function_max_depth = args.max_depth
    if args.no_gitignore:
        config.use_gitignore = False
    if args.no_semantic:
        config.semantic = False

    try:
        if args.list_ignore_rules or args.check_ignored or args.cycles:
            _report(args, DependencyAnalyzer(args.project_dir, config=config))
            return
        rendered = run(
            args.project_dir,
            args.target,
            function=args.function,
            fmt=args.fmt,
            output=args.output,
            config=config,
        )
    except ScanRootNotFoundError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.output is None:
        sys.stdout.write(rendered)


def _report(args: argparse.Namespace, analyzer: DependencyAnalyzer) -> None:
    if args.list_ignore_rules:
        for pattern in analyzer.get_ignore_rules():
            print(pattern)
    if args.check_ignored:
        state = "ignored" if analyzer.is_file_ignored(args.check_ignored) else "not ignored"
        print(f"{args.check_ignored}: {state}")
    if args.cycles:
        cycles = analyzer.find_import_cycles()
        root = normalize_path(analyzer.base_path)
        if not cycles:
            print("No import cycles found.")
        for cycle in cycles:
            print(" -> ".join(relative_posix(path, root) for path in cycle))
