"""
=============================================================================
RESOURCE RESOLUTION
=============================================================================

Turns the requested path into "this file, already open" or "not found",
ONCE per request.

=============================================================================
WHY RESOLVE ONCE?
=============================================================================

Both the header and the body depend on whether the file exists. Checking
twice opens a window where the answers disagree:

    Header stage                Body stage
    ────────────                ──────────
    exists("a.html") → True
                                (file deleted by someone else)
    "HTTP/1.1 200 OK"
                                exists("a.html") → False
                                "<h3>Error: 404 not Found</h3>"

Resolving once and holding an open handle means both stages see the same
answer, and the bytes streamed are from the file that was found even if
the path is replaced in the meantime.

=============================================================================
PATH MAPPING
=============================================================================

    Request path          Filesystem path (root_dir=".")
    ────────────          ──────────────────────────────
    /index.html     →     ./index.html
    /img/cat.png    →     ./img/cat.png
    //etc/hosts     →     ./ + "/etc/hosts"  → /etc/hosts
    " "             →     ./" "              → never a file

Exactly one leading "/" is stripped. No further normalization is done.

=============================================================================
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Union


logger = logging.getLogger(__name__)


@dataclass
class Resource:
    """
    Result of resolving a request path.

    Use as a context manager so the handle is always released:

        with resolve_resource("/index.html") as resource:
            if resource.found:
                data = resource.handle.read()

    Attributes:
        target_path: The path as requested.
        path: Filesystem path that was checked.
        handle: Open binary file if found, otherwise None.
    """
    target_path: str
    path: Path
    handle: Optional[BinaryIO] = field(default=None, repr=False)

    @property
    def found(self) -> bool:
        """True if the request resolved to a readable regular file."""
        return self.handle is not None

    def close(self):
        """Release the file handle, if any."""
        if self.handle is not None:
            self.handle.close()
            self.handle = None

    def __enter__(self) -> "Resource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def strip_leading_separator(target_path: str) -> str:
    """Remove exactly one leading "/" from a request path."""
    if target_path.startswith("/"):
        return target_path[1:]
    return target_path


def resolve_resource(target_path: str, root_dir: Union[str, Path] = ".") -> Resource:
    """
    Resolve a request path to an open file.

    Args:
        target_path: Path from the request line.
        root_dir: Directory request paths are relative to.

    Returns:
        A Resource. `found` is False for missing paths, directories, and
        files that cannot be opened.
    """
    relative = strip_leading_separator(target_path)
    path = Path(root_dir) / relative

    # An empty path would resolve to root_dir itself
    if not relative or not path.is_file():
        return Resource(target_path=target_path, path=path)

    try:
        handle = open(path, "rb")
    except OSError as e:
        logger.warning(f"Cannot open {str(path)!r}: {e}")
        return Resource(target_path=target_path, path=path)

    # What we opened is what gets served, so check the handle, not the path
    if not stat.S_ISREG(os.fstat(handle.fileno()).st_mode):
        handle.close()
        return Resource(target_path=target_path, path=path)

    return Resource(target_path=target_path, path=path, handle=handle)
