"""Utility modules for imogen."""

from imogen.utils.run_manager import Run, RunManager, RunMetadata

__all__ = [
    "Run",
    "RunManager",
    "RunMetadata",
]
