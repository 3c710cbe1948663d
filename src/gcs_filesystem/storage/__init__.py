"""
Storage drivers for the GCS filesystem package.

Architecture:
- Driver: Abstract capability set (list/read/write/copy/delete/URLs)
- GCSDriver: Google Cloud Storage implementation
- LocalDriver: Local directory implementation

Usage:
    from gcs_filesystem.config import DiskConfig

    driver = GCSDriver(DiskConfig.from_env())

    # Operations (same interface for all drivers)
    driver.put("src/main.py", content)
    content = driver.get("src/main.py")
    files = driver.files("src")
"""

from ..errors import StorageError
from .base_adapter import Driver, directory_prefix, normalize_path
from .gcs_adapter import GCSDriver
from .local_adapter import LocalDriver

__all__ = [
    "Driver",
    "StorageError",
    "GCSDriver",
    "LocalDriver",
    "normalize_path",
    "directory_prefix",
]
