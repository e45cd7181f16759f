"""
File Operations
===============

Copy and delete primitives for individual files and named file sets.

Single-file operations raise a :class:`~assetsync.errors.FileSystemError`
subclass on failure. Bulk operations isolate each file: a failure is logged
and recorded as ``False`` in the returned mapping, and the remaining files are
still processed.
"""

import os
import shutil
from typing import Dict, Iterable

from loguru import logger

from assetsync.errors import (
    CopyError,
    DeleteError,
    DirectoryCreateError,
    FileSystemError,
    PermissionSetError,
    SourceNotFoundError,
)
from assetsync.utils.logging import asset_log
from assetsync.utils.paths import normalize_path

DEFAULT_PERMISSIONS = 0o750
DIRECTORY_PERMISSIONS = 0o755


def copy_file(
    source: str | os.PathLike,
    destination: str | os.PathLike,
    permissions: int = DEFAULT_PERMISSIONS,
) -> bool:
    """
    Copy a single file, creating the destination directory if needed.

    Args:
        source: Source file path
        destination: Destination file path
        permissions: Permission bits applied to the copied file

    Returns:
        bool: True once the file is copied

    Raises:
        SourceNotFoundError: If the source is not an existing regular file
        DirectoryCreateError: If the destination directory cannot be created
        CopyError: If copying the file contents fails
        PermissionSetError: If the permissions cannot be applied
    """
    source = os.fspath(source)
    destination = os.fspath(destination)

    if not os.path.isfile(source):
        _fail(SourceNotFoundError(f"Source file not found: {source}", source))

    destination_dir = os.path.dirname(destination)
    if destination_dir and not os.path.isdir(destination_dir):
        try:
            os.makedirs(destination_dir, mode=DIRECTORY_PERMISSIONS, exist_ok=True)
        except OSError as error:
            _fail(
                DirectoryCreateError(
                    f"Failed to create destination directory {destination_dir} "
                    f"for {source}: {error}",
                    destination_dir,
                )
            )

    try:
        shutil.copyfile(source, destination)
    except OSError as error:
        _fail(CopyError(f"Failed to copy file from {source} to {destination}: {error}", source))

    try:
        os.chmod(destination, permissions)
    except OSError as error:
        _fail(
            PermissionSetError(
                f"Failed to set permissions {permissions:04o} on {destination} "
                f"copied from {source}: {error}",
                destination,
            )
        )

    logger.debug(f"Copied {source} -> {destination} ({permissions:04o})")
    return True


def copy_multiple(
    source_dir: str | os.PathLike,
    destination_dir: str | os.PathLike,
    files: Iterable[str],
    permissions: int = DEFAULT_PERMISSIONS,
) -> Dict[str, bool]:
    """
    Copy named files from one directory to another.

    Args:
        source_dir: Directory containing the files
        destination_dir: Directory receiving the copies
        files: File names to copy
        permissions: Permission bits applied to every copied file

    Returns:
        Dict[str, bool]: Mapping of file name to whether it was copied
    """
    files = _file_names(files)
    if not files:
        return {}

    source_dir = normalize_path(source_dir)
    destination_dir = normalize_path(destination_dir)

    results: Dict[str, bool] = {}
    for file_name in files:
        source_path = source_dir + file_name
        try:
            results[file_name] = copy_file(source_path, destination_dir + file_name, permissions)
        except FileSystemError as error:
            asset_log.warning(f"Skipped {file_name} (source: {source_path}): {error.message}")
            results[file_name] = False
    return results


def delete_file(path: str | os.PathLike) -> bool:
    """
    Delete a file.

    Args:
        path: File path

    Returns:
        bool: True if the file was deleted, False if nothing existed at the path

    Raises:
        DeleteError: If the file exists but cannot be removed
    """
    path = os.fspath(path)
    if not os.path.lexists(path):
        return False

    try:
        os.remove(path)
    except OSError as error:
        _fail(DeleteError(f"Failed to delete file {path}: {error}", path))

    logger.debug(f"Deleted {path}")
    return True


def delete_multiple(directory: str | os.PathLike, files: Iterable[str]) -> Dict[str, bool]:
    """
    Delete named files from a directory.

    Args:
        directory: Directory containing the files
        files: File names to delete

    Returns:
        Dict[str, bool]: Mapping of file name to whether it was deleted
    """
    files = _file_names(files)
    if not files:
        return {}

    directory = normalize_path(directory)

    results: Dict[str, bool] = {}
    for file_name in files:
        file_path = directory + file_name
        try:
            results[file_name] = delete_file(file_path)
        except FileSystemError as error:
            asset_log.warning(f"Kept {file_name} (path: {file_path}): {error.message}")
            results[file_name] = False
    return results


def _file_names(files: Iterable[str]) -> list[str]:
    if isinstance(files, (str, bytes)):
        raise TypeError("files must be a collection of file names, not a single string")
    return list(dict.fromkeys(files))


def _fail(error: FileSystemError) -> None:
    asset_log.error(error.message)
    raise error
