"""
Document storage utility.
Flat filesystem storage: one file per document, named exactly as the document.
"""

import os
from pathlib import Path
from typing import BinaryIO, List, Tuple

FORBIDDEN_NAME_CHARS = ("/", "\\", "\0")


def is_safe_name(name: str) -> bool:
    """Return True if the name maps to a single entry directly under the root."""
    if not name or name in (".", ".."):
        return False
    return not any(char in name for char in FORBIDDEN_NAME_CHARS)


class DocumentStorage:
    """
    Filesystem storage for documents under a single root directory.

    All methods are blocking; callers on the event loop run them in a
    threadpool. Files are created owner read/write only.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Create the root directory if it does not exist yet."""
        self.root.mkdir(mode=0o700, parents=True, exist_ok=True)

    def path(self, name: str) -> Path:
        if not is_safe_name(name):
            raise ValueError(f"Invalid document name: {name!r}")
        return self.root / name

    def scan(self) -> List[Tuple[str, int]]:
        """List (name, size) of every regular file in the root."""
        entries = []
        with os.scandir(self.root) as it:
            for entry in it:
                if entry.is_file(follow_symlinks=False):
                    entries.append((entry.name, entry.stat(follow_symlinks=False).st_size))
        return entries

    def reserve(self, name: str) -> BinaryIO:
        """
        Create an empty file for the name and return it open for writing.

        Raises:
            FileExistsError: if a file with that name already exists
        """
        fd = os.open(self.path(name), os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        return os.fdopen(fd, "wb")

    def open(self, name: str) -> BinaryIO:
        """Open a stored document for reading."""
        return open(self.path(name), "rb")

    def delete(self, name: str) -> bool:
        """Delete a document. Returns False if it was already gone."""
        try:
            os.remove(self.path(name))
        except FileNotFoundError:
            return False
        return True
