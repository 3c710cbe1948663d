"""
Host container integration.

``GCSServiceProvider`` binds a factory that builds a ``GCSDriver`` for a
named disk and publishes the default configuration template. The host
application is passed in explicitly; the provider keeps no reference to it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Protocol

from .config import DiskConfig
from .constants import BINDING, CONFIG_BINDING, PACKAGE_NAME, STORAGE_BINDING
from .storage import Driver, GCSDriver

logger = logging.getLogger(__name__)

CONFIG_STUB = Path(__file__).parent / "stubs" / "gcs.py"


class Application(Protocol):
    """The parts of the host container the provider uses."""

    def bind_with(self, key: str, factory: Callable[[Any, Mapping[str, Any]], Any]) -> None:
        ...

    def make(self, key: str) -> Any:
        ...

    def make_with(self, key: str, parameters: Mapping[str, Any]) -> Any:
        ...

    def publishes(self, package: str, paths: Mapping[str, str]) -> None:
        ...

    def config_path(self, path: str = "") -> str:
        ...


@dataclass(frozen=True)
class Relationship:
    """Bindings a provider registers, needs, and provides for."""

    bindings: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    provide_for: List[str] = field(default_factory=list)


def make_gcs_driver(app: Application, parameters: Mapping[str, Any]) -> GCSDriver:
    """
    Container factory for the GCS binding.

    Args:
        app: Host application; its "config" binding supplies the disk settings
        parameters: Must contain "disk", the disk name

    Raises:
        ValueError: If "disk" is missing or not a string
    """
    disk = (parameters or {}).get("disk")
    if not isinstance(disk, str) or not disk:
        raise ValueError(f"{BINDING} requires a 'disk' string parameter, got {disk!r}")

    config = DiskConfig.from_repository(app.make(CONFIG_BINDING), disk)
    return GCSDriver(config)


class GCSServiceProvider:
    """
    Registers the GCS driver with a host application.

    Usage:
        provider = GCSServiceProvider()
        provider.register(app)
        provider.boot(app)

        driver = gcs(app, "gcs")
    """

    def relationship(self) -> Relationship:
        return Relationship(
            bindings=[BINDING],
            dependencies=[CONFIG_BINDING],
            provide_for=[STORAGE_BINDING],
        )

    def register(self, app: Application) -> None:
        app.bind_with(BINDING, make_gcs_driver)
        logger.info(f"Registered {BINDING}")

    def boot(self, app: Application) -> None:
        app.publishes(PACKAGE_NAME, publishable_paths(app))


def gcs(app: Application, disk: str) -> Driver:
    """Resolve the GCS driver for ``disk`` from the container."""
    return app.make_with(BINDING, {"disk": disk})


def publishable_paths(app: Application) -> Dict[str, str]:
    """Source/destination pairs ``boot`` hands to ``app.publishes``."""
    return {str(CONFIG_STUB): app.config_path("")}
