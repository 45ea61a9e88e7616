"""Inode counting utilities.

This package walks a directory subtree, counts the inodes under every directory
and renders the aggregated counts as a depth-limited tree, to help find
inode-hungry directories on quota-limited storage.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("icounter")
except PackageNotFoundError:
    __version__ = "unknown"
