from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class EntryKind(Enum):
    """Enumeration of the ways a directory entry can be treated during traversal.

    Attributes:
        COUNTABLE_FILE: Counted once in its parent, never recursed into. Regular files,
            symbolic links (whatever they point to) and special files fall in here.
        COUNTABLE_DIRECTORY: A real directory; it gets its own node and is walked.
        HIDDEN: Name follows the hidden-name convention and hidden entries are not shown.
        INACCESSIBLE: The entry's type could not be determined; it is not counted.
    """

    COUNTABLE_FILE = "file"
    COUNTABLE_DIRECTORY = "directory"
    HIDDEN = "hidden"
    INACCESSIBLE = "inaccessible"
