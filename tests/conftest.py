"""
Test Configuration and Fixtures
=============================

This module provides pytest fixtures and utilities for testing assetsync.
"""

from pathlib import Path

import pytest

from assetsync.catalog import AssetCatalog, AssetGroup, PackageAssetSpec
from assetsync.sync.engine import SyncEngine
from assetsync.utils.logging import DEFAULT_LOG_FILE, asset_log


class RecordingReporter:
    """Reporter that keeps everything it is told, for assertions."""

    def __init__(self):
        self.groups = []
        self.errors = []
        self.infos = []

    def report_group(self, summary) -> None:
        self.groups.append(summary)

    def report_error(self, package_id: str, error: Exception) -> None:
        self.errors.append((package_id, error))

    def report_info(self, message: str) -> None:
        self.infos.append(message)


@pytest.fixture(autouse=True)
def log_file(tmp_path: Path):
    """
    Point the process-wide asset log into the test's temporary directory.

    Yields:
        Path: The log file path
    """
    path = tmp_path / "logs" / "assetsync.log"
    asset_log.set_log_file(path)
    yield path
    asset_log.close()
    asset_log.set_log_file(DEFAULT_LOG_FILE)


@pytest.fixture
def read_log(log_file: Path):
    """Return a function reading the log file's lines (empty if never written)."""

    def _read() -> list[str]:
        if not log_file.exists():
            return []
        return log_file.read_text(encoding="utf-8").splitlines()

    return _read


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Dependency store holding the files of a small test catalog."""
    css_dir = tmp_path / "src" / "css"
    js_dir = tmp_path / "src" / "js"
    css_dir.mkdir(parents=True)
    js_dir.mkdir(parents=True)
    (css_dir / "a.css").write_text("body{}")
    (js_dir / "a.js").write_text("console.log(1);")
    (js_dir / "b.js").write_text("console.log(2);")
    return tmp_path / "src"


@pytest.fixture
def catalog(tmp_path: Path, source_root: Path) -> AssetCatalog:
    """
    Catalog with two packages: ``pkg/a`` (css) and ``pkg/b`` (js).

    Sources are absolute; the webroot is ``<tmp_path>/web``.
    """
    return AssetCatalog.from_specs(
        [
            PackageAssetSpec(
                package_id="pkg/a",
                groups={
                    "css": AssetGroup(
                        source_dir=str(source_root / "css"),
                        destination_dir="css",
                        files=("a.css",),
                    ),
                },
            ),
            PackageAssetSpec(
                package_id="pkg/b",
                groups={
                    "js": AssetGroup(
                        source_dir=str(source_root / "js"),
                        destination_dir="js",
                        files=("a.js", "b.js"),
                    ),
                    "empty": AssetGroup(
                        source_dir=str(source_root / "js"),
                        destination_dir="js",
                        files=(),
                    ),
                },
            ),
        ],
        webroot=str(tmp_path / "web"),
    )


@pytest.fixture
def engine(catalog: AssetCatalog, reporter: RecordingReporter) -> SyncEngine:
    return SyncEngine(catalog, permissions=0o644, reporter=reporter)
