"""Inode tree construction.

This package classifies directory entries, walks a directory subtree in parallel
and builds the aggregated tree of per-directory inode counts.
"""
