"""
Disk configuration for storage drivers.

A disk is a named bundle of settings under ``filesystems.disks.<disk>``.
Drivers receive a resolved ``DiskConfig`` in their constructor; nothing in
this package reads configuration from process-wide state.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

from .constants import (
    DEFAULT_DRIVER,
    DEFAULT_URL_TEMPLATE,
    DISK_CONFIG_PREFIX,
    ENV_BUCKET,
    ENV_CREDENTIALS_PATH,
    ENV_PROJECT_ID,
    ENV_URL,
)


class ConfigRepository(Protocol):
    """The slice of a host configuration store the drivers need."""

    def get(self, key: str, default: Any = None) -> Any:
        ...


class MappingConfig:
    """
    Dotted-key view over a nested mapping.

    Lets callers without a framework hand drivers a plain dict:

        config = MappingConfig({"filesystems": {"disks": {"gcs": {...}}}})
        config.get("filesystems.disks.gcs.bucket")
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value


def disk_key(disk: str, key: str) -> str:
    """Config key of ``key`` for ``disk``, e.g. filesystems.disks.gcs.bucket."""
    return f"{DISK_CONFIG_PREFIX}.{disk}.{key}"


def default_url(bucket: str) -> str:
    return DEFAULT_URL_TEMPLATE.format(bucket=bucket)


@dataclass(frozen=True)
class DiskConfig:
    """
    Settings for one disk.

    Attributes:
        disk: Disk name the settings were resolved for
        bucket: Bucket name
        project_id: GCP project ID (optional; ADC decides when empty)
        credentials: Path to a service account JSON key (optional)
        url: Public base URL; defaults to https://storage.googleapis.com/{bucket}
        driver: Registered driver name
        root: Base directory for the local driver
        options: Any other keys found for the disk
    """

    disk: str = "gcs"
    bucket: str = ""
    project_id: str = ""
    credentials: str = ""
    url: str = ""
    driver: str = DEFAULT_DRIVER
    root: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.url and self.bucket:
            object.__setattr__(self, "url", default_url(self.bucket))

    @classmethod
    def from_mapping(cls, disk: str, values: Optional[Mapping[str, Any]]) -> "DiskConfig":
        values = dict(values or {})
        known = {
            name: str(values.pop(name) or "")
            for name in ("bucket", "project_id", "credentials", "url", "root")
            if name in values
        }
        driver = str(values.pop("driver", "") or DEFAULT_DRIVER)
        return cls(disk=disk, driver=driver, options=values, **known)

    @classmethod
    def from_repository(cls, config: ConfigRepository, disk: str) -> "DiskConfig":
        """Resolve ``disk`` from a host configuration repository."""
        values = config.get(f"{DISK_CONFIG_PREFIX}.{disk}")
        if isinstance(values, Mapping):
            return cls.from_mapping(disk, values)
        # Repositories that only answer leaf keys
        values = {}
        for name in ("driver", "bucket", "project_id", "credentials", "url", "root"):
            value = config.get(disk_key(disk, name))
            if value is not None:
                values[name] = value
        return cls.from_mapping(disk, values)

    @classmethod
    def from_env(cls, disk: str = "gcs") -> "DiskConfig":
        """Build a GCS disk from GCS_PROJECT_ID, GCS_BUCKET, GCS_CREDENTIALS_PATH and GCS_URL."""
        return cls(
            disk=disk,
            project_id=os.getenv(ENV_PROJECT_ID, ""),
            bucket=os.getenv(ENV_BUCKET, ""),
            credentials=os.getenv(ENV_CREDENTIALS_PATH, ""),
            url=os.getenv(ENV_URL, ""),
        )
