"""
Base Storage Driver Interface for the GCS filesystem package.

Defines the capability set every storage driver implements, so that an
application's file API behaves the same on a local disk and on a bucket.

Path Format:
- Object keys: "src/main.py", "docs/README.md"
- Directory paths: "src", "src/" (trailing slash optional)
- A single leading slash is accepted and stripped
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..constants import PATH_SEPARATOR


def normalize_path(path: str) -> str:
    """
    Map a user path onto an object key.

    Only a single leading separator is removed; repeated separators and
    "." / ".." segments are left untouched.

    Example:
        "/a/b.txt" -> "a/b.txt"
        "//a"      -> "/a"
    """
    if path.startswith(PATH_SEPARATOR):
        return path[len(PATH_SEPARATOR):]
    return path


def directory_prefix(path: str) -> str:
    """Normalize a directory path and make sure it ends with the separator."""
    prefix = normalize_path(path)
    if prefix and not prefix.endswith(PATH_SEPARATOR):
        prefix += PATH_SEPARATOR
    return prefix


def content_bytes(content) -> bytes:
    """
    Bytes to store for ``put``; str is UTF-8 encoded.

    Raises:
        TypeError: If ``content`` is neither str nor bytes
    """
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    raise TypeError(f"content must be str or bytes, got {type(content).__name__}")


class Driver(ABC):
    """
    Abstract base class for storage drivers.

    All storage implementations (GCS, local disk) implement this interface
    so callers can swap disks through configuration alone.

    Design Principles:
    - Blocking I/O; cancellation and deadlines travel with the request context
    - Directories are synthesized from key prefixes where the backend is flat
    - Backend errors propagate to the caller
    """

    @abstractmethod
    def with_context(self, ctx) -> "Driver":
        """
        Return a driver sharing this one's configuration that uses ``ctx``
        for every later operation.
        """
        pass

    @abstractmethod
    def all_directories(self, path: str) -> List[str]:
        """List every directory below ``path``, recursively."""
        pass

    @abstractmethod
    def all_files(self, path: str) -> List[str]:
        """List every file below ``path``, recursively."""
        pass

    @abstractmethod
    def directories(self, path: str) -> List[str]:
        """List the directories directly under ``path``."""
        pass

    @abstractmethod
    def files(self, path: str) -> List[str]:
        """List the files directly under ``path``."""
        pass

    @abstractmethod
    def copy(self, old_file: str, new_file: str) -> None:
        pass

    @abstractmethod
    def delete(self, *files: str) -> None:
        """
        Delete one or more files.

        Missing files are not an error.
        """
        pass

    @abstractmethod
    def delete_directory(self, directory: str) -> None:
        pass

    @abstractmethod
    def exists(self, file: str) -> bool:
        pass

    def missing(self, file: str) -> bool:
        return not self.exists(file)

    @abstractmethod
    def get(self, file: str) -> str:
        """
        Read a file as UTF-8 text.

        Raises:
            UnicodeDecodeError: If the contents are not UTF-8; use
                ``get_bytes`` for binary data
        """
        pass

    @abstractmethod
    def get_bytes(self, file: str) -> bytes:
        pass

    @abstractmethod
    def last_modified(self, file: str) -> datetime:
        pass

    @abstractmethod
    def mime_type(self, file: str) -> Optional[str]:
        pass

    @abstractmethod
    def size(self, file: str) -> int:
        pass

    @abstractmethod
    def make_directory(self, directory: str) -> None:
        pass

    def move(self, old_file: str, new_file: str) -> None:
        """
        Move a file by copying it and deleting the source.

        Not atomic: if the delete fails both copies remain.
        """
        self.copy(old_file, new_file)
        self.delete(old_file)

    def path(self, file: str) -> str:
        return normalize_path(file)

    @abstractmethod
    def put(self, file: str, content) -> None:
        """
        Write ``content`` (str or bytes) to ``file``, replacing it.

        Raises:
            TypeError: If ``content`` is neither str nor bytes
        """
        pass

    @abstractmethod
    def put_file(self, path: str, source) -> str:
        """
        Store an uploaded file under ``path`` with a generated name.

        Args:
            path: Destination directory
            source: Object implementing the ``File`` protocol

        Returns:
            The object key the file was stored under
        """
        pass

    @abstractmethod
    def put_file_as(self, path: str, source, name: str) -> str:
        """
        Store an uploaded file under ``path`` as ``name``.

        The source's extension is appended when ``name`` has no dot.

        Returns:
            The object key the file was stored under
        """
        pass

    @abstractmethod
    def url(self, file: str) -> str:
        """Public URL of ``file``."""
        pass

    @abstractmethod
    def temporary_url(self, file: str, expiry: datetime) -> str:
        """
        Time-limited URL granting read access to ``file``.

        Raises:
            StorageError: If the driver cannot produce one
        """
        pass
