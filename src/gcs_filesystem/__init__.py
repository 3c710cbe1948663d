"""
GCS filesystem driver.

Filesystem-style access (list, read, write, copy, move, delete, URLs) to a
Google Cloud Storage bucket, pluggable into a host application through a
named disk configuration and a service provider.
"""

from .config import DiskConfig, MappingConfig
from .context import RequestContext
from .credentials import ServiceAccountKey, load_service_account_key
from .errors import (
    CredentialsError,
    DeadlineExceeded,
    OperationCancelled,
    SignedUrlError,
    StorageError,
    StorageInitializationError,
)
from .files import File, LocalFile
from .registry import get_driver, register_driver
from .service_provider import GCSServiceProvider, gcs
from .storage import Driver, GCSDriver, LocalDriver, normalize_path

__version__ = "0.1.0"

__all__ = [
    "DiskConfig",
    "MappingConfig",
    "RequestContext",
    "ServiceAccountKey",
    "load_service_account_key",
    "CredentialsError",
    "DeadlineExceeded",
    "OperationCancelled",
    "SignedUrlError",
    "StorageError",
    "StorageInitializationError",
    "File",
    "LocalFile",
    "get_driver",
    "register_driver",
    "GCSServiceProvider",
    "gcs",
    "Driver",
    "GCSDriver",
    "LocalDriver",
    "normalize_path",
]
