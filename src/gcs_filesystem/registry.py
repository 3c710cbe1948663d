"""
Driver registry.

Factory functions that instantiate the driver a disk is configured for
(``filesystems.disks.<disk>.driver``, default "gcs").
"""

import logging
from typing import Dict, List, Optional

from .config import ConfigRepository, DiskConfig
from .context import RequestContext
from .storage import Driver, GCSDriver, LocalDriver

logger = logging.getLogger(__name__)


# Registry of available drivers
DRIVER_REGISTRY: Dict[str, type] = {
    "gcs": GCSDriver,
    "local": LocalDriver,
}


def register_driver(name: str, driver_class: type) -> None:
    """
    Register a storage driver under ``name``.

    Raises:
        ValueError: If driver_class doesn't implement Driver
    """
    if not isinstance(driver_class, type) or not issubclass(driver_class, Driver):
        raise ValueError(
            f"Driver class must inherit from Driver, got {driver_class}"
        )

    DRIVER_REGISTRY[name.lower().strip()] = driver_class
    logger.info(f"Registered storage driver: {name}")


def list_drivers() -> List[str]:
    return list(DRIVER_REGISTRY.keys())


def driver_for_config(
    config: DiskConfig, context: Optional[RequestContext] = None
) -> Driver:
    """
    Instantiate the registered driver for a resolved disk configuration.

    Raises:
        ValueError: If the driver is unknown or refuses the configuration
    """
    driver_name = config.driver.lower().strip()
    driver_class = DRIVER_REGISTRY.get(driver_name)

    if not driver_class:
        raise ValueError(
            f"Unknown storage driver: '{driver_name}'. "
            f"Available drivers: {list_drivers()}"
        )

    try:
        return driver_class(config, context=context)
    except ValueError as exc:
        raise ValueError(
            f"Failed to initialize {driver_name} driver for disk {config.disk}: {exc}"
        ) from exc


def get_driver(
    disk: str, config: ConfigRepository, context: Optional[RequestContext] = None
) -> Driver:
    """
    Get the driver for a named disk.

    Args:
        disk: Disk name under filesystems.disks
        config: Host configuration repository
        context: Optional request context for the driver

    Example:
        driver = get_driver("gcs", MappingConfig(settings))
        driver.put("reports/today.csv", data)
    """
    if not disk:
        raise ValueError("Disk name is required")

    disk_config = DiskConfig.from_repository(config, disk)
    driver = driver_for_config(disk_config, context=context)
    logger.debug(f"Resolved disk {disk} to {driver!r}")
    return driver

