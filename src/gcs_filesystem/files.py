"""
Uploaded-file handle consumed by ``put_file`` / ``put_file_as``.

Host frameworks usually bring their own upload object; anything with the
methods of ``File`` works. ``LocalFile`` covers plain paths on disk.
"""

import mimetypes
import os
import secrets
from typing import Optional, Protocol

HASH_NAME_BYTES = 20  # 40 hex characters


class File(Protocol):
    def file(self) -> str:
        """Local path of the file contents."""
        ...

    def hash_name(self, path: Optional[str] = None) -> str:
        ...

    def extension(self) -> str:
        ...

    def mime_type(self) -> str:
        ...


class LocalFile:
    """
    A file on the local disk.

    Args:
        path: Location of the contents
        client_name: Original file name, used for extension/MIME detection
            when the stored path carries none (e.g. temp upload files)
    """

    def __init__(self, path: str, client_name: Optional[str] = None):
        self.path = path
        self.client_name = client_name or os.path.basename(path)

    def file(self) -> str:
        return self.path

    def hash_name(self, path: Optional[str] = None) -> str:
        """Random 40 character name keeping the file's extension."""
        name = secrets.token_hex(HASH_NAME_BYTES)
        try:
            name = f"{name}.{self.extension()}"
        except ValueError:
            pass
        if path:
            return f"{path.rstrip('/')}/{name}"
        return name

    def extension(self) -> str:
        """
        File extension without the dot.

        Raises:
            ValueError: If neither the name nor the MIME type gives one
        """
        _, ext = os.path.splitext(self.client_name)
        if ext:
            return ext[1:]
        mime, _ = mimetypes.guess_type(self.path)
        guessed = mimetypes.guess_extension(mime) if mime else None
        if not guessed:
            raise ValueError(f"unknown extension for {self.client_name}")
        return guessed[1:]

    def mime_type(self) -> str:
        """
        Raises:
            ValueError: If the MIME type cannot be determined
        """
        mime, _ = mimetypes.guess_type(self.client_name)
        if not mime:
            raise ValueError(f"unknown MIME type for {self.client_name}")
        return mime

    def __repr__(self) -> str:
        return f"<LocalFile path={self.path!r}>"
