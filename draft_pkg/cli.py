#!/usr/bin/env python3
"""
Command-line interface for Draft - static site generator.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .core import Draft
from .errors import ConfigError
from .settings import DraftSettings

HELP_ARGUMENTS = ('help',)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='draft',
        description='Draft - build a blog from a directory of front-matter documents',
        add_help=False,
    )
    parser.add_argument('config', nargs='?',
                        help='Path to the site configuration file (.yml, .yaml or .json)')
    parser.add_argument('-h', '--help', action='store_true',
                        help='Show this help message and exit')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help or not args.config or args.config in HELP_ARGUMENTS:
        parser.print_help(sys.stderr)
        sys.exit(1)

    try:
        settings = DraftSettings(args.config).load_settings()
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        generator = Draft(settings)
        generator.build()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
