"""Concrete blueprint source implementations."""

from .git import GitBlueprintSource, is_remote_reference
from .local import LocalBlueprintSource

__all__ = [
    "GitBlueprintSource",
    "LocalBlueprintSource",
    "is_remote_reference",
]
