"""Node representation for directories in the inode tree."""

from typing import Iterable, List, Optional

from anytree import Node


class InodeNode(Node):  # type: ignore
    """Node class representing one directory and the inodes counted under it.

    Extends anytree.Node with the inode accounting of a directory. Plain files never get
    a node of their own; they only add to their parent's ``own_count``. Inherits tree
    traversal capabilities (``depth``, ``children``, ``ancestors``, iterators)
    from anytree.Node.

    The node's ``total_count`` is aggregated once, when the node is created from its
    already complete children. The tree is not meant to be modified afterwards.

    Attributes:
        name (str): The directory's base name.
        dir_path (str): The filesystem path that was listed for this directory.
        own_count (int): The directory itself plus its direct countable file entries.
        total_count (int): ``own_count`` plus the ``total_count`` of every child.
        readable (bool): False if the directory could not be listed.
        error (Optional[str]): Why the listing failed, for unreadable directories.
        children (tuple[InodeNode]): Subdirectory nodes, sorted by name (inherited from
            anytree.Node).

    Example:
        >>> leaf = InodeNode("b", "root/a/b", own_count=2)
        >>> branch = InodeNode("a", "root/a", own_count=3, children=[leaf])
        >>> branch.total_count
        5
        >>> leaf.depth
        1
    """

    def __init__(
        self,
        name: str,
        dir_path: str,
        own_count: int = 1,
        readable: bool = True,
        error: Optional[str] = None,
        children: Optional[Iterable["InodeNode"]] = None,
    ) -> None:
        """Initialize an InodeNode and aggregate its total count.

        Args:
            name: The directory's base name.
            dir_path: Path of the directory on disk.
            own_count: The directory itself plus its direct countable files. Defaults to 1.
            readable: Whether the directory could be listed. Defaults to True.
            error: Description of the listing failure, if any.
            children: Fully built child nodes, in display order.

        Raises:
            ValueError: If own_count is smaller than 1.
        """
        if own_count < 1:
            raise ValueError(f"own_count must be at least 1, got {own_count}")
        super().__init__(name, children=list(children) if children is not None else None)
        self.dir_path = dir_path
        self.own_count = own_count
        self.readable = readable
        self.error = error
        self.total_count: int = own_count + sum(child.total_count for child in self.children)

    def unreadable_nodes(self) -> List["InodeNode"]:
        """Return every node in this subtree whose directory could not be listed.

        Nodes are returned in pre-order, i.e. in the order they appear in the rendered tree.

        Returns:
            The unreadable nodes, possibly including this node itself.
        """
        found: List["InodeNode"] = []
        pending = [self]
        while pending:
            node = pending.pop()
            if not node.readable:
                found.append(node)
            pending.extend(reversed(node.children))
        return found
