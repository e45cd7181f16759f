"""
assetsync - Front-end asset synchronization
"""

__version__ = "0.1.0"

from assetsync.catalog import AssetCatalog, AssetGroup, CatalogProvider, PackageAssetSpec, default_catalog
from assetsync.errors import (
    AssetSyncError,
    ConfigurationError,
    FileSystemError,
    UnsupportedPackageError,
)
from assetsync.sync import SyncEngine

__all__ = [
    "AssetCatalog",
    "AssetGroup",
    "CatalogProvider",
    "PackageAssetSpec",
    "default_catalog",
    "AssetSyncError",
    "ConfigurationError",
    "FileSystemError",
    "UnsupportedPackageError",
    "SyncEngine",
]
