class RootUnresolvableError(Exception):
    """
    Exception raised when the root of a walk does not exist or is not a directory.

    This is the only failure that aborts a walk. Problems below the root (unreadable
    subdirectories, entries whose metadata cannot be read) are absorbed into the tree.

    Attributes:
        root_path (str): The root path as it was given.
        reason (str): Short description of why the root could not be used.

    Example:
        >>> error = RootUnresolvableError("/no/such/dir", "does not exist")
        >>> str(error)
        'Root path does not exist: /no/such/dir'
        >>> error.root_path
        '/no/such/dir'
    """

    def __init__(self, root_path: str, reason: str) -> None:
        """
        Initialize the exception with the offending root path.

        Args:
            root_path (str): The root path as it was given.
            reason (str): Why the path cannot be walked, e.g. "does not exist" or
                "is not a directory".
        """
        self.root_path = root_path
        self.reason = reason
        super().__init__(f"Root path {reason}: {root_path}")
