"""Classification of directory entries during inode counting."""

import os
from typing import Any

from icounter.types import EntryKind

HIDDEN_PREFIX = "."


def is_hidden_name(name: str) -> bool:
    """Check whether a file name follows the hidden-name convention.

    Args:
        name: Base name of a directory entry.

    Returns:
        True if the name starts with a dot, excluding the ``.`` and ``..`` entries.

    Example:
        >>> is_hidden_name(".git")
        True
        >>> is_hidden_name("src")
        False
        >>> is_hidden_name(".")
        False
    """
    return name.startswith(HIDDEN_PREFIX) and name not in (".", "..")


def classify_entry(entry: "os.DirEntry[Any]", show_hidden: bool = False) -> EntryKind:
    """Decide how a directory entry takes part in the inode count.

    Symbolic links are never followed: a link to a directory counts as a single inode
    in its parent, exactly like a regular file. This keeps link loops from being walked
    and keeps link targets from being counted twice.

    Args:
        entry: An entry produced by os.scandir (or any object exposing ``name`` and
            ``is_dir(follow_symlinks=...)``).
        show_hidden: Whether hidden entries are included in the count.

    Returns:
        The EntryKind of the entry.
    """
    if not show_hidden and is_hidden_name(entry.name):
        return EntryKind.HIDDEN

    try:
        is_dir = entry.is_dir(follow_symlinks=False)
    except OSError:
        return EntryKind.INACCESSIBLE

    return EntryKind.COUNTABLE_DIRECTORY if is_dir else EntryKind.COUNTABLE_FILE
