"""
Sync Engine
===========

Resolves package identifiers against the asset catalog and publishes each
asset group with delete-then-copy.
"""

import os
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel

from assetsync.catalog import ICON_FONT_PACKAGE, CatalogProvider, default_catalog
from assetsync.errors import ConfigurationError, UnsupportedPackageError
from assetsync.sync.file_ops import DEFAULT_PERMISSIONS, copy_multiple, delete_multiple
from assetsync.sync.post_process import fix_icon_font_paths
from assetsync.utils.logging import asset_log
from assetsync.utils.paths import join_paths
from assetsync.utils.rich_console import ConsoleReporter, Reporter

# Post-processors receive the resolved webroot and return whether they changed anything.
PostProcessor = Callable[[str], bool]

DEFAULT_POST_PROCESSORS: Dict[str, PostProcessor] = {
    ICON_FONT_PACKAGE: fix_icon_font_paths,
}


class GroupSummary(BaseModel):
    """Copy tally for one asset group."""

    package_id: str
    group: str
    copied: int
    total: int

    @property
    def complete(self) -> bool:
        return self.copied == self.total

    def __str__(self) -> str:
        return f"{self.package_id} ({self.group}) - {self.copied}/{self.total} files copied"


class PackageResult(BaseModel):
    """Outcome of one package in a batch."""

    package_id: str
    groups: List[GroupSummary] = []
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def complete(self) -> bool:
        return self.ok and all(summary.complete for summary in self.groups)


class SyncEngine:
    """Publishes catalog assets from the dependency store into the webroot."""

    def __init__(
        self,
        catalog: CatalogProvider | None = None,
        *,
        project_root: str | os.PathLike = "",
        permissions: int = DEFAULT_PERMISSIONS,
        reporter: Reporter | None = None,
        post_processors: Dict[str, PostProcessor] | None = None,
    ):
        """Initialize the engine.

        Args:
            catalog: Catalog to resolve packages against (default catalog if None)
            project_root: Base for relative catalog paths; empty means the working directory
            permissions: Permission bits applied to every copied file
            reporter: Sink for group tallies and errors (rich console if None)
            post_processors: Package identifier to post-processor mapping
        """
        self.catalog = catalog if catalog is not None else default_catalog()
        self.project_root = os.fspath(project_root)
        self.permissions = permissions
        self.reporter = reporter if reporter is not None else ConsoleReporter()
        self.post_processors = (
            dict(post_processors) if post_processors is not None else dict(DEFAULT_POST_PROCESSORS)
        )

    def resolve(self, path: str) -> str:
        """Resolve a catalog path against the project root."""
        # An empty path is the project root itself, never the filesystem root
        if not path:
            return self.project_root or os.curdir
        if not self.project_root or os.path.isabs(path):
            return path
        return join_paths(self.project_root, path)

    def webroot(self) -> str:
        return self.resolve(self.catalog.get_webroot_path())

    def process_package(self, package_id: str) -> List[GroupSummary]:
        """
        Synchronize every asset group of a package.

        Args:
            package_id: Package identifier, e.g. ``twbs/bootstrap``

        Returns:
            List[GroupSummary]: One tally per processed group, in declaration order

        Raises:
            UnsupportedPackageError: If the catalog does not know the package
        """
        groups = self.catalog.get_groups(package_id)
        if groups is None:
            raise UnsupportedPackageError(package_id, self.catalog.list_supported())

        webroot = self.webroot()
        summaries: List[GroupSummary] = []

        for group_name, group in groups.items():
            if not group.files:
                logger.debug(f"{package_id} ({group_name}) has no files, skipping")
                continue

            source = self.resolve(group.source_dir)
            destination = join_paths(webroot, group.destination_dir)
            logger.debug(f"{package_id} ({group_name}): {source} -> {destination}")

            delete_multiple(destination, group.files)
            results = copy_multiple(source, destination, group.files, self.permissions)

            summary = GroupSummary(
                package_id=package_id,
                group=group_name,
                copied=sum(1 for copied in results.values() if copied),
                total=len(results),
            )
            if summary.complete:
                asset_log.info(str(summary))
            else:
                asset_log.warning(str(summary))
            self.reporter.report_group(summary)
            summaries.append(summary)

        post_processor = self.post_processors.get(package_id)
        if post_processor is not None and post_processor(webroot):
            self.reporter.report_info(f"✓ {package_id} stylesheet font paths corrected")

        return summaries

    def process_packages(self, package_ids: Iterable[str] = ()) -> List[PackageResult]:
        """
        Synchronize several packages, each independently of the others.

        Args:
            package_ids: Package identifiers; empty means every supported package

        Returns:
            List[PackageResult]: One result per requested package
        """
        package_ids = list(package_ids) or self.catalog.list_supported()

        results: List[PackageResult] = []
        for package_id in package_ids:
            try:
                summaries = self.process_package(package_id)
            except ConfigurationError as error:
                self.reporter.report_error(package_id, error)
                results.append(PackageResult(package_id=package_id, error=error.message))
                continue
            results.append(PackageResult(package_id=package_id, groups=summaries))
        return results
