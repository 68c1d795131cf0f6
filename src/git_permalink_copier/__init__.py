#!/usr/bin/env python3
"""
Git Permalink Copier
====================

Copies a permalink to a file, or to some of its lines, that will keep working.

Branch links drift as the branch moves, and links to local-only commits don't
exist on the server at all. Instead, this walks back from HEAD to the nearest
commit that a remote branch points at, and links to the file as of that commit.
If the file has changed since then, the line numbers you give (counted in the
working-tree version) are mapped back to the matching lines of the old version
through a zero-context diff.


Usage
-----

git-permalink-copier [OPTIONS] line FILE START [END]
git-permalink-copier [OPTIONS] file FILE

Help: to see all flags, run with `-h`


Supported
---------

Remotes of the forms:

- `git@host:owner/repo.git`
- `https://host/owner/repo.git`

Links are generated as
`https://host/owner/repo/blob/commit_hash/url_path#Lline_start-Lline_end`.

Requires
--------
Python v3.9+
"""

import argparse
import logging
import sys
from pathlib import Path

from .constants import DEFAULT_MAX_DEPTH
from .global_prefs import GlobalPreferences
from .app import PermalinkApp


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"line numbers start at 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-permalink-copier",
        description="Copies a permalink to a file or line range, pinned to the nearest commit published on a remote.",
        formatter_class=argparse.RawTextHelpFormatter,  # Allows for better formatting of help
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output for more detailed logging.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="How many commits back from HEAD to search for one that a remote branch points at\n"
             "(default: %(default)s).",
    )
    parser.add_argument(
        "--no-copy",
        action="store_false",
        dest="copy_to_clipboard",  # By default, the link is copied to the clipboard
        help="Only print the link; don't copy it to the clipboard.",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        dest="open_in_browser",
        help="Open the link in a web browser.",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Check over HTTP that the link resolves on the remote.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    line_parser = subparsers.add_parser("line", help="Link a line or a range of lines.")
    line_parser.add_argument("file", type=Path, help="File in the working tree.")
    line_parser.add_argument("start", type=_positive_int, help="First line, as numbered in the working tree.")
    line_parser.add_argument(
        "end",
        type=_positive_int,
        nargs="?",
        default=None,
        help="Last line, as numbered in the working tree (default: same as START).",
    )

    file_parser = subparsers.add_parser("file", help="Link the whole file.")
    file_parser.add_argument("file", type=Path, help="File in the working tree.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        global_prefs = GlobalPreferences.from_args(args)

        app = PermalinkApp(global_prefs)
        if args.command == "line":
            app.run(args.file, args.start, args.end)
        else:
            app.run(args.file)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except (RuntimeError, ValueError) as e:  # Catch specific custom errors
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:  # Catch other unexpected errors
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc(file=sys.stderr)
        sys.exit(1)

    return 0


if __name__ == "__main__":
    main()
