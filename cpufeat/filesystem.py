"""Filesystem access that can be swapped for an in-memory one."""

from __future__ import annotations

import io
from typing import BinaryIO


class OsFilesystem:
    """Reads files from the real filesystem."""

    def open(self, filename: str) -> BinaryIO:
        """Open ``filename`` for binary reading; raises OSError on failure."""
        return open(filename, "rb")


class MemoryFilesystem:
    """A filesystem whose files live in memory."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def create_file(self, filename: str, content: str | bytes) -> None:
        """Create or replace ``filename`` with ``content``."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[filename] = bytes(content)

    def open(self, filename: str) -> BinaryIO:
        """Open ``filename`` for binary reading; raises FileNotFoundError."""
        try:
            content = self._files[filename]
        except KeyError:
            raise FileNotFoundError(filename) from None
        return io.BytesIO(content)

    def reset(self) -> None:
        """Remove every file."""
        self._files.clear()