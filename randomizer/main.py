#!/usr/bin/env python3
"""
String Randomizer - Entry Point.
Supports both GUI mode (default) and CLI mode (--cli).

Usage:
    GUI Mode:   python -m randomizer.main
    CLI Mode:   python -m randomizer.main --cli file1.xml file2.xml
                python -m randomizer.main --cli --shuffle "Hello World!"
    CLI Help:   python -m randomizer.main --help
"""

import sys
import os
import argparse
import logging

# Ensure the parent directory is on the path for relative imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from randomizer.config import APP_TITLE
from randomizer.utils.logging_config import setup_logging


def run_gui():
    """Launch the graphical user interface."""
    import tkinter as tk
    from randomizer.ui.app import RandomizerApp

    # Try TkinterDnD for native drag & drop support
    try:
        from tkinterdnd2 import TkinterDnD
        root = TkinterDnD.Tk()
    except (ImportError, RuntimeError, tk.TclError):
        root = tk.Tk()

    RandomizerApp(root)
    root.mainloop()


def run_cli(args) -> int:
    """Run shuffle/format in CLI mode. Returns the process exit code."""
    from randomizer.formatter import pretty_print
    from randomizer.models import ParseError
    from randomizer.utils import shuffle, find_xml_files, format_xml_file, read_file_bytes

    logger = logging.getLogger("randomizer")

    if args.shuffle is not None:
        print(shuffle(args.shuffle))
        if not args.files:
            return 0

    # Collect files
    all_files = []
    for path in args.files:
        if os.path.isdir(path):
            all_files.extend(find_xml_files(path))
        elif os.path.isfile(path):
            all_files.append(path)
        else:
            logger.warning("Path not found: %s", path)

    if not all_files:
        logger.error("No XML files found.")
        return 1

    indent = " " * args.indent
    failed = 0
    for filepath in all_files:
        if args.in_place:
            ok, err = format_xml_file(filepath, create_backup=not args.no_backup, indent=indent)
            if not ok:
                logger.error("%s: %s", filepath, err)
                failed += 1
            continue

        data, err = read_file_bytes(filepath)
        if data is None:
            logger.error("Cannot read %s: %s", filepath, err)
            failed += 1
            continue
        try:
            formatted = pretty_print(data, indent=indent)
        except ParseError as e:
            logger.error("%s (%s): %s", filepath, e.location, e)
            failed += 1
            continue

        if len(all_files) > 1:
            print(f"<!-- {filepath} -->")
        print(formatted)

    logger.info("Formatted %d/%d file(s)", len(all_files) - failed, len(all_files))
    return 0 if failed == 0 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="string-randomizer",
        description=f"{APP_TITLE} - shuffle strings and pretty-print XML",
    )
    parser.add_argument("--version", action="version", version=f"{APP_TITLE}")
    parser.add_argument("--cli", action="store_true", help="Run in CLI mode (no GUI)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--shuffle", "-s", type=str, metavar="TEXT",
                        help="Print a random permutation of TEXT")
    parser.add_argument("--indent", type=int, default=2, help="Spaces per nesting level (default: 2)")
    parser.add_argument("--in-place", "-i", action="store_true",
                        help="Rewrite files instead of printing them")
    parser.add_argument("--no-backup", action="store_true",
                        help="Do not keep a .bak copy when rewriting files")
    parser.add_argument("files", nargs="*", help="XML files or directories to format")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.indent < 0:
        parser.error("--indent must not be negative")

    # Setup logging
    setup_logging(debug=args.debug)

    if args.cli or args.files or args.shuffle is not None:
        if not args.files and args.shuffle is None:
            parser.error("CLI mode requires --shuffle or at least one file or directory")
        sys.exit(run_cli(args))
    else:
        run_gui()


if __name__ == "__main__":
    main()
