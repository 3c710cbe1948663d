"""
Unit tests for the driver registry.

Run with:
    pytest tests/test_registry.py -v
"""

import pytest

from gcs_filesystem.config import DiskConfig, MappingConfig
from gcs_filesystem.context import RequestContext
from gcs_filesystem.registry import (
    DRIVER_REGISTRY,
    driver_for_config,
    get_driver,
    list_drivers,
    register_driver,
)
from gcs_filesystem.storage import GCSDriver, LocalDriver


@pytest.fixture
def clean_registry():
    saved = dict(DRIVER_REGISTRY)
    yield DRIVER_REGISTRY
    DRIVER_REGISTRY.clear()
    DRIVER_REGISTRY.update(saved)


class TestRegistry:
    def test_builtin_drivers(self):
        assert set(list_drivers()) >= {"gcs", "local"}

    def test_register_custom_driver(self, clean_registry):
        class MirrorDriver(LocalDriver):
            pass

        register_driver(" Mirror ", MirrorDriver)

        assert clean_registry["mirror"] is MirrorDriver

    def test_register_rejects_non_driver(self, clean_registry):
        with pytest.raises(ValueError, match="must inherit from Driver"):
            register_driver("bad", dict)


class TestDriverResolution:
    def test_gcs_disk(self, mock_gcs_client):
        config = MappingConfig({"filesystems": {"disks": {"gcs": {"bucket": "b"}}}})

        driver = get_driver("gcs", config)

        assert isinstance(driver, GCSDriver)
        assert driver.bucket_name == "b"

    def test_local_disk(self, tmp_path):
        config = MappingConfig(
            {"filesystems": {"disks": {"tmp": {"driver": "local", "root": str(tmp_path)}}}}
        )

        driver = get_driver("tmp", config)

        assert isinstance(driver, LocalDriver)

    def test_context_is_passed(self, mock_gcs_client):
        ctx = RequestContext()

        driver = driver_for_config(DiskConfig(bucket="b"), context=ctx)

        assert driver.context is ctx

    def test_unknown_driver(self):
        with pytest.raises(ValueError, match="Unknown storage driver"):
            driver_for_config(DiskConfig(driver="ftp"))

    def test_driver_rejecting_config(self):
        with pytest.raises(ValueError, match="Failed to initialize local driver"):
            driver_for_config(DiskConfig(disk="tmp", driver="local"))

    def test_disk_name_required(self):
        with pytest.raises(ValueError, match="Disk name is required"):
            get_driver("", MappingConfig())
