"""Text rendering of aggregated inode trees.

This module turns an InodeNode tree into tree-style text output similar to the Unix
``tree`` command, with the inode count (and optionally the share of the root's count)
next to every directory. Rendering is a single depth-bounded pass over a tree whose
counts are already complete; the display depth never affects the counts shown.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from rich.color import ColorSystem
from rich.style import Style

from icounter.inode_tree.inode_node import InodeNode

BRANCH = "├── "
LAST_BRANCH = "└── "
CONTINUATION = "│   "
BLANK = "    "

NAME_STYLE = Style(color="blue", bold=True)
COUNT_STYLE = Style(color="red", bold=True)
PERCENT_STYLE = Style(color="yellow")
CONNECTOR_STYLE = Style(color="blue")


@dataclass(frozen=True)
class RenderOptions:
    """Display options for the tree renderer.

    Attributes:
        max_depth: Number of levels printed below the root. 0 prints only the root line.
        show_percent: Append each node's share of the root's total count.
        color: Emphasize names, counts and connectors with ANSI colors.

    Raises:
        ValueError: If max_depth is negative.
    """

    max_depth: int = 0
    show_percent: bool = False
    color: bool = True

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")


def percent_of(count: int, total: int) -> int:
    """Return count as a percentage of total, rounded to the nearest integer.

    Every value is rounded on its own: a child never shows more than its parent, but
    the percentages of several siblings can add up to slightly more than the parent's.

    Example:
        >>> percent_of(7, 14)
        50
        >>> percent_of(3, 14)
        21
    """
    return round(count / total * 100)


class _Painter:
    """Applies the output styles, or nothing when color is off."""

    def __init__(self, color: bool) -> None:
        self.color = color

    def paint(self, text: str, style: Style) -> str:
        if not self.color or not text:
            return text
        return style.render(text, color_system=ColorSystem.STANDARD)


def stream_render(root: InodeNode, options: Optional[RenderOptions] = None) -> Iterator[str]:
    """Generate the tree representation one line at a time.

    The root line is ``<name> <count>``; each printed descendant is prefixed with tree
    connectors, ``├── `` for intermediate children and ``└── `` for the last child of a
    directory, and with ``│   `` for every ancestor that still has children to come.
    Children are printed in the order stored in the tree.

    Args:
        root: Root of a fully built inode tree.
        options: Display options. Defaults to RenderOptions().

    Yields:
        Lines of the tree representation, without trailing newlines.

    Example:
        >>> b = InodeNode("b", "r/a/b", own_count=2)
        >>> a = InodeNode("a", "r/a", own_count=2, children=[b])
        >>> r = InodeNode("r", "r", own_count=2, children=[a])
        >>> for line in stream_render(r, RenderOptions(max_depth=2, color=False)):
        ...     print(line)
        r 6
        └── a 4
            └── b 2
    """
    display = options if options is not None else RenderOptions()
    painter = _Painter(display.color)
    root_total = root.total_count

    def label(node: InodeNode) -> str:
        text = f"{painter.paint(node.name, NAME_STYLE)} {painter.paint(str(node.total_count), COUNT_STYLE)}"
        if display.show_percent:
            percent = painter.paint(f"{percent_of(node.total_count, root_total)}%", PERCENT_STYLE)
            text += f" ({percent})"
        return text

    def branches(node: InodeNode, prefix: str, level: int) -> List[Tuple[InodeNode, str, bool, int]]:
        # Reversed, so that popping from the end visits children in stored order
        last = len(node.children) - 1
        return [(child, prefix, i == last, level) for i, child in reversed(list(enumerate(node.children)))]

    yield label(root)
    if display.max_depth == 0:
        return

    pending = branches(root, "", 1)
    while pending:
        node, prefix, is_last, level = pending.pop()
        connector = LAST_BRANCH if is_last else BRANCH
        yield f"{painter.paint(prefix + connector, CONNECTOR_STYLE)}{label(node)}"
        if level < display.max_depth:
            pending.extend(branches(node, prefix + (BLANK if is_last else CONTINUATION), level + 1))


def render(root: InodeNode, options: Optional[RenderOptions] = None) -> str:
    """Get the complete tree representation as a string.

    Args:
        root: Root of a fully built inode tree.
        options: Display options. Defaults to RenderOptions().

    Returns:
        The rendered lines joined by newlines, without a trailing newline.
    """
    return "\n".join(stream_render(root, options))
