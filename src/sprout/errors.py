"""Exception types raised while scaffolding a project."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "BlueprintNotFound",
    "CollisionError",
    "DependencyInstallError",
    "FetchError",
    "ScaffoldError",
    "WriteError",
]


class ScaffoldError(RuntimeError):
    """Base class for every failure reported by sprout."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class CollisionError(ScaffoldError):
    """Raised when the target already hosts a project or a file would be clobbered."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class BlueprintNotFound(ScaffoldError):
    """Raised when a blueprint reference does not resolve to a usable directory."""

    def __init__(self, reference: str, reason: str = "no such blueprint") -> None:
        super().__init__(f"blueprint '{reference}' could not be resolved: {reason}")
        self.reference = reference


class FetchError(ScaffoldError):
    """Raised when a remote blueprint cannot be fetched."""

    def __init__(self, reference: str, detail: str = "") -> None:
        message = f"failed to fetch blueprint '{reference}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.reference = reference


class WriteError(ScaffoldError):
    """Raised when an output path cannot be written. Earlier writes are kept."""

    def __init__(self, path: Path, detail: str = "") -> None:
        message = f"could not write {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path


class DependencyInstallError(ScaffoldError):
    """Raised by an installer. Never fatal to a scaffold run."""

    def __init__(self, tool: str, detail: str = "") -> None:
        message = f"{tool} install failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
