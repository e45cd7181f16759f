"""
Exception hierarchy for asset synchronization.
"""

from typing import Iterable


class AssetSyncError(Exception):
    """Base exception for asset synchronization errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(AssetSyncError):
    """Raised when the catalog or settings cannot be used as given."""

    pass


class UnsupportedPackageError(ConfigurationError):
    """Raised when a package identifier is not present in the catalog."""

    def __init__(self, package_id: str, supported: Iterable[str]):
        self.package_id = package_id
        self.supported = list(supported)
        super().__init__(
            f"Package '{package_id}' is not supported. "
            f"Supported packages: {', '.join(self.supported)}"
        )


class FileSystemError(AssetSyncError):
    """Base exception for failed file operations."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class SourceNotFoundError(FileSystemError):
    """Raised when the file to copy does not exist."""

    pass


class DirectoryCreateError(FileSystemError):
    """Raised when a destination directory cannot be created."""

    pass


class CopyError(FileSystemError):
    """Raised when copying file contents fails."""

    pass


class PermissionSetError(FileSystemError):
    """Raised when the permission mask cannot be applied to a copied file."""

    pass


class DeleteError(FileSystemError):
    """Raised when an existing file cannot be removed."""

    pass


__all__ = [
    "AssetSyncError",
    "ConfigurationError",
    "UnsupportedPackageError",
    "FileSystemError",
    "SourceNotFoundError",
    "DirectoryCreateError",
    "CopyError",
    "PermissionSetError",
    "DeleteError",
]
