"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
dupescan command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import DEFAULT_OUTPUT_FILE
from ..utils.formatters import parse_grid


def _grid_type(value: str) -> tuple[int, int]:
    try:
        return parse_grid(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='dupescan',
        description='Find duplicate images in a directory tree',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s /path/to/photos
      Scan and print duplicate groups

  %(prog)s /path/to/photos -o {DEFAULT_OUTPUT_FILE}
      Also write the report to a file

  %(prog)s /path/to/photos -o dupes.csv --format csv -w 8
      CSV report, 8 fingerprinting workers
        """
    )

    parser.add_argument(
        'directory',
        type=Path,
        help='Directory to scan for duplicate images'
    )

    parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Write the duplicate report to this file'
    )

    parser.add_argument(
        '--format',
        dest='export_format',
        choices=['txt', 'csv'],
        default='txt',
        help='Report file format. Default: txt'
    )

    # Performance options (None = user config file, then built-in default)
    parser.add_argument(
        '-w', '--workers',
        type=_positive_int,
        default=None,
        help='Number of fingerprinting workers'
    )

    parser.add_argument(
        '--max-open-dirs',
        type=_positive_int,
        default=None,
        help='Directories listed at the same time'
    )

    parser.add_argument(
        '--grid',
        type=_grid_type,
        default=None,
        metavar='WxH',
        help='Fingerprint grid, e.g. 9x8 (64-bit hash)'
    )

    parser.add_argument(
        '--follow-symlinks',
        action='store_true',
        default=None,
        help='Descend into symlinked directories'
    )

    parser.add_argument(
        '--config-dir',
        type=Path,
        default=None,
        help='Directory holding config.json (default: ~/.dupescan)'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bar (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
