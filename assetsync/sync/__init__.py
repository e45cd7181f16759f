"""
Asset synchronization package: file operations, post-processing and the sync engine.
"""

from .engine import GroupSummary, PackageResult, SyncEngine

__all__ = ['GroupSummary', 'PackageResult', 'SyncEngine']
