"""Command-line interface for icounter.

This module provides the command-line entry point. It parses the arguments, walks
the requested directory, reports directories that could not be read, and writes the
rendered tree to stdout while handling interruptions gracefully.

Signal Handling Notes:
    - SIGPIPE: Handled when the output pipe is closed (e.g., when piping to `head`) on
      Unix-like systems
    - SIGINT: Handled for clean exit on Ctrl+C
    The whole tree is counted before anything is written. The handlers are installed
    only once counting is done: Ctrl+C during the walk stops it at once and exits 130
    without output, and an interruption while writing only cuts the report short.

Exit Codes:
    0: Successful completion
    1: The root could not be resolved, or another runtime error occurred
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Counts for the first two levels below /srv/shared, with percentages
    $ icounter -d 2 -p /srv/shared

    # Display version information
    $ icounter --version
"""

import sys

from icounter.cli.argparser import create_parser
from icounter.cli.safe_writer import SafeWriter
from icounter.cli.signal_handler import EXIT_SIGINT, setup_signal_handling, signal_handler
from icounter.inode_tree.inode_node import InodeNode
from icounter.inode_tree.tree_walker import TreeWalker
from icounter.tree_renderer import RenderOptions, stream_render


def report_unreadable(root: InodeNode) -> None:
    """Print a warning on stderr for every directory that could not be read.

    Args:
        root: Root of the walked tree.
    """
    for node in root.unreadable_nodes():
        print(f"Warning: Could not read directory {node.dir_path}: {node.error}", file=sys.stderr)


def main() -> None:
    """Main entry point for the icounter command-line interface.

    Exit codes:
        0: Successful completion
        1: The root could not be resolved, or another runtime error occurred
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    try:
        parser = create_parser()
        # argparse calls sys.exit(2) for argument errors or sys.exit(0) for --help/--version
        args = parser.parse_args()

        walker = TreeWalker(show_hidden=args.show_hidden, max_workers=args.jobs)
        root = walker.walk(args.root)

        # Until here Ctrl+C raises KeyboardInterrupt and abandons the walk
        setup_signal_handling()

        if args.permission_action == "warn":
            report_unreadable(root)

        options = RenderOptions(
            max_depth=args.depth,
            show_percent=args.show_percent,
            color=not args.ignore_colors,
        )

        with SafeWriter(sys.stdout.fileno()) as safe_writer:
            try:
                safe_writer.write_lines(stream_render(root, options))
            except BrokenPipeError:
                pass  # Pending output is dropped when the writer closes

    except KeyboardInterrupt:
        sys.exit(EXIT_SIGINT)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    # Handle exit codes based on received signals
    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
