"""
Path Utility Functions
======================

Separator-agnostic normalization and joining for catalog paths.
"""

import os

SEPARATORS = ("/", "\\")


def normalize_path(path: str | os.PathLike, trailing_slash: bool = True) -> str:
    """
    Normalize directory separators and the trailing separator of a path.

    Args:
        path: Path to normalize
        trailing_slash: Whether the result ends with exactly one separator

    Returns:
        str: The normalized path
    """
    normalized = os.fspath(path)
    for separator in SEPARATORS:
        normalized = normalized.replace(separator, os.sep)
    normalized = normalized.rstrip(os.sep)

    if trailing_slash:
        normalized += os.sep
    return normalized


def join_paths(*segments: str | os.PathLike) -> str:
    """
    Join path segments with the platform separator, skipping empty ones.

    Args:
        *segments: Path segments

    Returns:
        str: Joined path, or an empty string if every segment is empty
    """
    parts = [os.fspath(segment) for segment in segments if segment]
    return os.sep.join(parts)
