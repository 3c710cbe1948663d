"""
Local filesystem driver.

Implements Driver against a root directory so a disk can point at local
storage (development, tests, mounted volumes) with the same API as GCS.
"""

import logging
import mimetypes
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..config import DiskConfig
from ..constants import PATH_SEPARATOR
from ..context import RequestContext
from ..errors import SignedUrlError, StorageError
from .base_adapter import Driver, content_bytes, normalize_path

logger = logging.getLogger(__name__)


class LocalDriver(Driver):
    """
    Driver storing files under ``config.root``.

    Config schema (filesystems.disks.<disk>):
    {
        "driver": "local",
        "root": "/var/app/storage",   # Required
        "url": "https://cdn.example.com/storage"  # Optional, needed for url()
    }
    """

    def __init__(self, config: DiskConfig, context: Optional[RequestContext] = None):
        if not config.root:
            raise ValueError(f"Local disk '{config.disk}' requires 'root' in config")

        self.config = config
        self.context = context or RequestContext.background()
        self.root = Path(config.root).resolve()

    def with_context(self, ctx: RequestContext) -> "LocalDriver":
        return LocalDriver(self.config, context=ctx)

    def _resolve(self, path: str) -> Path:
        """Resolve a key to an absolute path within the root."""
        self.context.check()
        resolved = (self.root / normalize_path(path)).resolve()

        # Security check: ensure resolved path is within root
        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise StorageError(f"Access denied: path '{path}' is outside the disk root")

        return resolved

    def _key(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    # Listing

    def all_files(self, path: str) -> List[str]:
        base = self._resolve(path)
        if not base.is_dir():
            return []
        return sorted(self._key(p) for p in base.rglob("*") if p.is_file())

    def all_directories(self, path: str) -> List[str]:
        base = self._resolve(path)
        if not base.is_dir():
            return []
        return sorted(self._key(p) for p in base.rglob("*") if p.is_dir())

    def files(self, path: str) -> List[str]:
        base = self._resolve(path)
        if not base.is_dir():
            return []
        return sorted(self._key(p) for p in base.iterdir() if p.is_file())

    def directories(self, path: str) -> List[str]:
        base = self._resolve(path)
        if not base.is_dir():
            return []
        return sorted(self._key(p) for p in base.iterdir() if p.is_dir())

    # Mutation

    def copy(self, old_file: str, new_file: str) -> None:
        target = self._resolve(new_file)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(self._resolve(old_file), target)

    def delete(self, *files: str) -> None:
        for file in files:
            try:
                self._resolve(file).unlink()
            except FileNotFoundError:
                logger.debug(f"File not found for deletion: {file}")

    def delete_directory(self, directory: str) -> None:
        target = self._resolve(directory)
        if target == self.root:
            raise StorageError("Refusing to delete the disk root")
        if target.exists():
            shutil.rmtree(target)

    def make_directory(self, directory: str) -> None:
        self._resolve(directory).mkdir(parents=True, exist_ok=True)

    def put(self, file: str, content) -> None:
        data = content_bytes(content)
        target = self._resolve(file)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def put_file(self, path: str, source) -> str:
        key = self._join(path, source.hash_name())
        self._copy_in(key, source)
        return key

    def put_file_as(self, path: str, source, name: str) -> str:
        extension = source.extension()
        if "." not in name:
            name = f"{name}.{extension}"
        key = self._join(path, name)
        self._copy_in(key, source)
        return key

    def _join(self, path: str, name: str) -> str:
        directory = normalize_path(path).rstrip(PATH_SEPARATOR)
        return f"{directory}{PATH_SEPARATOR}{name}" if directory else name

    def _copy_in(self, key: str, source) -> None:
        target = self._resolve(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source.file(), target)

    # Reading

    def exists(self, file: str) -> bool:
        try:
            return self._resolve(file).exists()
        except StorageError as e:
            logger.warning(f"Failed to check existence of {file}: {e}")
            return False

    def get(self, file: str) -> str:
        return self.get_bytes(file).decode("utf-8")

    def get_bytes(self, file: str) -> bytes:
        return self._resolve(file).read_bytes()

    def last_modified(self, file: str) -> datetime:
        return datetime.fromtimestamp(os.stat(self._resolve(file)).st_mtime, tz=timezone.utc)

    def mime_type(self, file: str) -> Optional[str]:
        target = self._resolve(file)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {file}")
        mime, _ = mimetypes.guess_type(target.name)
        return mime

    def size(self, file: str) -> int:
        return self._resolve(file).stat().st_size

    # URLs

    def url(self, file: str) -> str:
        if not self.config.url:
            raise StorageError(f"Local disk '{self.config.disk}' has no 'url' configured")
        return f"{self.config.url.rstrip(PATH_SEPARATOR)}/{normalize_path(file)}"

    def temporary_url(self, file: str, expiry: datetime) -> str:
        raise SignedUrlError("Local disks cannot generate temporary URLs")

    def __repr__(self) -> str:
        return f"<LocalDriver disk={self.config.disk} root={self.root}>"
