"""Command-line argument parsing for icounter.

This module defines the command-line interface for icounter,
handling argument parsing and validation.
"""

import argparse
from pathlib import Path

from icounter import __version__


def non_negative_int(value: str) -> int:
    """Argument type for counts that may be zero.

    Raises:
        argparse.ArgumentTypeError: If the value is not an integer or is negative.
    """
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def positive_int(value: str) -> int:
    """Argument type for counts that must be at least one.

    Raises:
        argparse.ArgumentTypeError: If the value is not an integer or is below one.
    """
    number = non_negative_int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with icounter's options.
    """
    description = """
    icounter: count inodes in a directory structure.

    Walks the given directory, counts every file, symbolic link and directory below it
    and prints the counts per directory as a tree. Useful for finding the directories
    that use up an inode quota.

    Counting always covers the whole subtree; --depth only limits how many levels are
    printed. Symbolic links are counted but never followed. Directories that cannot be
    read count as a single inode.
    """

    epilog = """
    Examples:
      # Total inode count of a directory
      icounter /path/to/dir

      # Show counts for two levels of subdirectories
      icounter -d 2 /path/to/dir

      # Include hidden files and directories and show percentages
      icounter -s -p -d 1 /path/to/dir

      # Plain output without colors, e.g. for a log file
      icounter -i -d 3 /path/to/dir > inodes.txt

      # Limit the number of directories listed in parallel
      icounter -j 4 /path/to/dir

      # Do not report unreadable directories
      icounter -P ignore /path/to/dir

      # Display version information and exit
      icounter -V
    """

    parser = argparse.ArgumentParser(
        prog="icounter",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Version information
    parser.add_argument(
        "-V", "--version", action="version", version=f"icounter {__version__}", help="Show the version and exit"
    )

    parser.add_argument(
        "root",
        type=Path,
        help="Root directory to count inodes from.",
    )
    parser.add_argument(
        "-s",
        "--show-hidden",
        action="store_true",
        help="Count hidden files and directories (names starting with a dot).",
    )
    parser.add_argument(
        "-p",
        "--show-percent",
        action="store_true",
        help="Show the percentage of the total inode count for each directory.",
    )
    parser.add_argument(
        "-i",
        "--ignore-colors",
        action="store_true",
        help="Print plain output without colors.",
    )
    parser.add_argument(
        "-d",
        "--depth",
        type=non_negative_int,
        default=0,
        metavar="N",
        help="Maximum depth to display counts per directory (default: 0, the root only).",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=positive_int,
        default=None,
        metavar="N",
        help="Number of directories listed in parallel (default: chosen from the CPU count).",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn"],
        default="warn",
        help="Whether to report directories that could not be read on stderr (default: warn).",
    )

    return parser
