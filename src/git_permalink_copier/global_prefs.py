import argparse
from dataclasses import dataclass

from .constants import DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class GlobalPreferences:
    """Preferences fixed for the whole run."""
    verbose: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    copy_to_clipboard: bool = True
    open_in_browser: bool = False
    verify: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'GlobalPreferences':
        if args.max_depth < 0:
            raise ValueError(f"--max-depth must be non-negative, got {args.max_depth}")
        return cls(
            verbose=args.verbose,
            max_depth=args.max_depth,
            copy_to_clipboard=args.copy_to_clipboard,
            open_in_browser=args.open_in_browser,
            verify=args.verify,
        )
