"""
Package manager lifecycle hooks.

A package manager calls these after it installs or updates a package. Hooks
never raise: a failed or skipped synchronization must not break the package
manager's own run.

When the hooks are called as a library rather than through the CLI, call
``assetsync.environment.configure_logging`` first; otherwise loguru's default
stderr handler echoes every asset log entry.
"""

from enum import Enum
from typing import Iterable, List

from loguru import logger
from pydantic import BaseModel

from assetsync.errors import AssetSyncError
from assetsync.sync.engine import GroupSummary, PackageResult, SyncEngine


class PackageOperation(str, Enum):
    install = "install"
    update = "update"


class PackageEvent(BaseModel):
    """A package was installed or updated."""

    operation: PackageOperation
    package_id: str


def handle_package_event(event: PackageEvent, engine: SyncEngine | None = None) -> List[GroupSummary]:
    """
    Synchronize the assets of the package named by a lifecycle event.

    Packages missing from the catalog are skipped, since package managers
    fire events for every package they touch.

    Args:
        event: The lifecycle event
        engine: Engine to use (a default engine if None)

    Returns:
        List[GroupSummary]: Group tallies, empty if the package was skipped or failed
    """
    engine = engine or SyncEngine()
    if not engine.catalog.is_supported(event.package_id):
        logger.debug(f"Ignoring {event.operation.value} of {event.package_id}: no assets to publish")
        return []

    try:
        return engine.process_package(event.package_id)
    except AssetSyncError as error:
        engine.reporter.report_error(event.package_id, error)
        return []


def on_package_install(package_id: str, engine: SyncEngine | None = None) -> List[GroupSummary]:
    return handle_package_event(PackageEvent(operation=PackageOperation.install, package_id=package_id), engine)


def on_package_update(package_id: str, engine: SyncEngine | None = None) -> List[GroupSummary]:
    return handle_package_event(PackageEvent(operation=PackageOperation.update, package_id=package_id), engine)


def setup_assets(package_ids: Iterable[str] = (), engine: SyncEngine | None = None) -> List[PackageResult]:
    """Synchronize the given packages, or every supported package if none are given."""
    engine = engine or SyncEngine()
    return engine.process_packages(package_ids)
