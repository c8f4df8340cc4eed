"""Blueprint sources: where scaffold templates come from."""

from __future__ import annotations

from pathlib import Path

from ..config import ScaffoldOptions
from .adapters import GitBlueprintSource, LocalBlueprintSource, is_remote_reference
from .interfaces import BlueprintSource, ResolvedBlueprint

__all__ = [
    "BlueprintSource",
    "GitBlueprintSource",
    "LocalBlueprintSource",
    "ResolvedBlueprint",
    "default_source",
    "is_remote_reference",
]


def default_source(options: ScaffoldOptions, cwd: Path | str | None = None) -> BlueprintSource:
    """Return the source used by the CLI: git URLs first, local paths otherwise."""

    return GitBlueprintSource(
        options.cache_dir,
        policy=options.cache_policy,
        fallback=LocalBlueprintSource(cwd),
    )
