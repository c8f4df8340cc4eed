"""Abstract interface for locating blueprints."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..manifest import walk

__all__ = ["BLUEPRINT_FILES_DIR", "BlueprintSource", "ResolvedBlueprint"]


BLUEPRINT_FILES_DIR = "files"


@dataclass(frozen=True, slots=True)
class ResolvedBlueprint:
    """A blueprint available on the local filesystem.

    ``root`` holds the blueprint's metadata; the payload copied into new
    projects lives in :attr:`files_dir`.
    """

    reference: str
    root: Path
    remote: bool = False

    @property
    def files_dir(self) -> Path:
        return self.root / BLUEPRINT_FILES_DIR

    def manifest(self) -> list[str]:
        """Walk :attr:`files_dir` and return its current listing."""

        return list(walk(self.files_dir))


class BlueprintSource(ABC):
    """Turns a blueprint reference into a :class:`ResolvedBlueprint`."""

    @abstractmethod
    def resolve(self, reference: str | None) -> ResolvedBlueprint:
        """Resolve ``reference``; ``None`` selects the default blueprint."""
