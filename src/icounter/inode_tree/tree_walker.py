"""Parallel directory walking with bottom-up inode aggregation.

This module provides the TreeWalker class, which walks a directory subtree and builds
an InodeNode tree whose counts cover the entire subtree. Directory listings run as work
units on a bounded thread pool; each listing result is owned by one pending directory,
and a node is only built once all of its children are complete, so no counter is
shared between threads. The walk keeps its own work list instead of recursing, so the
depth of a tree is limited by the filesystem only.
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from queue import Queue
from typing import Dict, List, Optional, Tuple, cast

from icounter.exceptions import RootUnresolvableError
from icounter.inode_tree.entry_classifier import classify_entry
from icounter.inode_tree.inode_node import InodeNode
from icounter.types import EntryKind, PathType

# Number of countable files and the sorted (name, path) pairs of the subdirectories
Listing = Tuple[int, List[Tuple[str, str]]]


def resolve_root(root: PathType) -> Path:
    """Check that a walk can start at the given root.

    Args:
        root: Path of the directory to count.

    Returns:
        The root as a Path, unchanged.

    Raises:
        RootUnresolvableError: If the root does not exist or is not a directory.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise RootUnresolvableError(str(root), "does not exist")
    if not root_path.is_dir():
        raise RootUnresolvableError(str(root), "is not a directory")
    return root_path


def root_display_name(root_path: Path) -> str:
    """Return the name shown for the root node.

    Args:
        root_path: The root path as given by the caller.

    Returns:
        The final path component, or the whole path when it has none (``.``, ``/``).

    Example:
        >>> root_display_name(Path("/srv/data/projects"))
        'projects'
        >>> root_display_name(Path("."))
        '.'
    """
    return root_path.name or str(root_path)


class TreeWalker:
    """Walks a directory subtree and builds its aggregated inode tree.

    Every directory is listed exactly once. Its direct files (including symlinks and
    special files) add to its own count, its subdirectories are walked as separate work
    units, and the node's total is formed from the returned children at a single join
    point. The full subtree is always walked, so the resulting counts do not depend on
    how much of the tree is later displayed.

    Failures below the root never abort the walk: a directory that cannot be listed
    becomes a node counting only itself, marked unreadable, and entries whose type
    cannot be read are left out.

    Concurrency:
        Directory listings run on a ThreadPoolExecutor with ``max_workers`` threads.
        Workers never wait on each other, so any pool size finishes. A directory's node
        is built in the calling thread as soon as its last child is done. With
        ``max_workers`` of 0 or 1 the walk is sequential. Node contents, counts and
        child order are the same however the work is scheduled.

    Attributes:
        show_hidden (bool): Whether entries with hidden names are counted and walked.
        max_workers (Optional[int]): Size of the thread pool, or None for the
            ThreadPoolExecutor default.

    Example:
        >>> walker = TreeWalker(show_hidden=True)  # doctest: +SKIP
        >>> root = walker.walk("/srv/shared")  # doctest: +SKIP
        >>> root.total_count  # doctest: +SKIP
        120384
    """

    def __init__(self, show_hidden: bool = False, max_workers: Optional[int] = None) -> None:
        """Initialize a TreeWalker.

        Args:
            show_hidden: Whether hidden entries are included. Defaults to False.
            max_workers: Number of worker threads. None selects the ThreadPoolExecutor
                default; 0 or 1 walks sequentially in the calling thread.

        Raises:
            ValueError: If max_workers is negative.
        """
        if max_workers is not None and max_workers < 0:
            raise ValueError(f"max_workers must not be negative, got {max_workers}")
        self.show_hidden = show_hidden
        self.max_workers = max_workers

    def walk(self, root: PathType) -> InodeNode:
        """Walk the subtree under root and return its fully aggregated tree.

        Args:
            root: Directory to start counting from.

        Returns:
            The root InodeNode; its total_count is the inode count of the whole subtree.

        Raises:
            RootUnresolvableError: If the root does not exist or is not a directory.
        """
        root_path = resolve_root(root)
        top = _PendingDirectory(root_display_name(root_path), str(root_path))

        if self.max_workers is not None and self.max_workers <= 1:
            self._walk_sequential(top)
        else:
            self._walk_parallel(top)

        assert top.node is not None
        return top.node

    def _walk_sequential(self, top: "_PendingDirectory") -> None:
        """List every directory in the calling thread, depth first."""
        stack = [top]
        while stack:
            directory = stack.pop()
            try:
                listing = self._list_directory(directory.dir_path)
            except OSError as e:
                directory.fail(e)
                continue
            stack.extend(reversed(directory.expand(*listing)))

    def _walk_parallel(self, top: "_PendingDirectory") -> None:
        """List directories on the thread pool, assembling nodes in the calling thread.

        Workers only list directories. Their results come back through a queue, so the
        calling thread is the only one that creates nodes and no worker ever waits on
        another.
        """
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="icounter-walk")
        completed: "Queue[Future[Listing]]" = Queue()
        in_flight: Dict["Future[Listing]", _PendingDirectory] = {}

        def submit(directory: _PendingDirectory) -> None:
            future = executor.submit(self._list_directory, directory.dir_path)
            in_flight[future] = directory
            future.add_done_callback(completed.put)

        try:
            submit(top)
            while in_flight:
                future = completed.get()
                directory = in_flight.pop(future)
                try:
                    listing = future.result()
                except OSError as e:
                    directory.fail(e)
                    continue
                for subdirectory in directory.expand(*listing):
                    submit(subdirectory)
        finally:
            # Queued listings are dropped if the walk is interrupted
            executor.shutdown(wait=True, cancel_futures=True)

    def _list_directory(self, dir_path: str) -> Listing:
        """List one directory.

        Returns:
            The number of countable file entries and the (name, path) pairs of the
            subdirectories to walk, sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        file_count = 0
        subdirectories: List[Tuple[str, str]] = []

        with os.scandir(dir_path) as entries:
            for entry in entries:
                kind = classify_entry(entry, self.show_hidden)
                if kind is EntryKind.COUNTABLE_FILE:
                    file_count += 1
                elif kind is EntryKind.COUNTABLE_DIRECTORY:
                    subdirectories.append((entry.name, entry.path))

        subdirectories.sort()
        return file_count, subdirectories


class _PendingDirectory:
    """A directory whose node cannot be built yet.

    It holds the directory's own count and a slot for every subdirectory. When the last
    slot is filled the node is built and handed to the parent, which may complete in
    turn. Completion climbs the tree in a loop, so deep trees cost no stack depth.
    """

    __slots__ = ("name", "dir_path", "parent", "index", "own_count", "children", "waiting", "node")

    def __init__(self, name: str, dir_path: str, parent: Optional["_PendingDirectory"] = None, index: int = 0) -> None:
        self.name = name
        self.dir_path = dir_path
        self.parent = parent
        self.index = index
        self.own_count = 1
        self.children: List[Optional[InodeNode]] = []
        self.waiting = 0
        self.node: Optional[InodeNode] = None

    def expand(self, file_count: int, subdirectories: List[Tuple[str, str]]) -> List["_PendingDirectory"]:
        """Record a successful listing and return the subdirectories still to walk."""
        self.own_count += file_count
        self.children = [None] * len(subdirectories)
        self.waiting = len(subdirectories)
        if not subdirectories:
            self._complete(InodeNode(self.name, self.dir_path, own_count=self.own_count))
            return []
        return [_PendingDirectory(name, path, self, i) for i, (name, path) in enumerate(subdirectories)]

    def fail(self, error: OSError) -> None:
        """Record a failed listing; the directory then counts only itself."""
        message = error.strerror or str(error)
        self._complete(InodeNode(self.name, self.dir_path, own_count=1, readable=False, error=message))

    def _complete(self, node: InodeNode) -> None:
        directory = self
        while True:
            directory.node = node
            parent = directory.parent
            if parent is None:
                return
            parent.children[directory.index] = node
            parent.waiting -= 1
            if parent.waiting:
                return
            children = cast(List[InodeNode], parent.children)
            node = InodeNode(parent.name, parent.dir_path, own_count=parent.own_count, children=children)
            directory = parent


def walk_tree(root: PathType, show_hidden: bool = False, max_workers: Optional[int] = None) -> InodeNode:
    """Walk a directory subtree and return its aggregated inode tree.

    Convenience wrapper around TreeWalker.

    Args:
        root: Directory to start counting from.
        show_hidden: Whether hidden entries are included. Defaults to False.
        max_workers: Number of worker threads, see TreeWalker.

    Returns:
        The root InodeNode of the walked subtree.

    Raises:
        RootUnresolvableError: If the root does not exist or is not a directory.
    """
    return TreeWalker(show_hidden=show_hidden, max_workers=max_workers).walk(root)
