"""Detect attempts to scaffold inside an existing sprout project."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import TargetDirectory
from .errors import CollisionError

__all__ = ["PROJECT_MARKER", "Allowed", "CollisionGuard", "Rejected"]


LOGGER = logging.getLogger(__name__)

PROJECT_MARKER = ".sprout"


@dataclass(frozen=True, slots=True)
class Allowed:
    """The target may be scaffolded."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """The target lies inside a project identified by ``marker_path``."""

    reason: str
    marker_path: Path


@dataclass(frozen=True, slots=True)
class CollisionGuard:
    """Look for a project marker file at or above a target directory."""

    marker: str = PROJECT_MARKER

    def find_marker(self, path: str | Path) -> Path | None:
        """Return the closest marker file at or above ``path``, if any.

        Missing trailing components of ``path`` are skipped so a target that
        does not exist yet is checked against its existing ancestors.
        """

        current = Path(path).absolute()
        for directory in (current, *current.parents):
            candidate = directory / self.marker
            if candidate.is_file():
                return candidate
        return None

    def check(self, target: TargetDirectory) -> Allowed | Rejected:
        marker_path = self.find_marker(target.path)
        if marker_path is None:
            return Allowed()

        reason = (
            f"cannot create a project in {target.path}: "
            f"it is already inside the project at {marker_path.parent}"
        )
        return Rejected(reason=reason, marker_path=marker_path)

    def enforce(self, target: TargetDirectory) -> None:
        """Raise :class:`CollisionError` when :meth:`check` rejects ``target``."""

        result = self.check(target)
        if isinstance(result, Rejected):
            LOGGER.debug("Found project marker %s", result.marker_path)
            raise CollisionError(result.reason, path=result.marker_path)
