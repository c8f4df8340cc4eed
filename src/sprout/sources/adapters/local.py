"""Blueprints stored on the local filesystem or bundled with sprout."""

from __future__ import annotations

import logging
from pathlib import Path

from ...errors import BlueprintNotFound
from ..interfaces import BLUEPRINT_FILES_DIR, BlueprintSource, ResolvedBlueprint

__all__ = ["BUNDLED_BLUEPRINTS_DIR", "DEFAULT_BLUEPRINT", "LocalBlueprintSource"]


LOGGER = logging.getLogger(__name__)

BUNDLED_BLUEPRINTS_DIR = Path(__file__).resolve().parents[2] / "blueprints"
DEFAULT_BLUEPRINT = "app"


def _ensure_blueprint(reference: str, root: Path) -> ResolvedBlueprint:
    if not (root / BLUEPRINT_FILES_DIR).is_dir():
        raise BlueprintNotFound(reference, f"{root} has no '{BLUEPRINT_FILES_DIR}' directory")
    return ResolvedBlueprint(reference=reference, root=root)


class LocalBlueprintSource(BlueprintSource):
    """Resolve directory paths and the names of bundled blueprints."""

    def __init__(self, cwd: Path | str | None = None, *, bundled_dir: Path | str | None = None):
        self._cwd = Path(cwd) if cwd is not None else None
        self._bundled_dir = Path(bundled_dir) if bundled_dir is not None else BUNDLED_BLUEPRINTS_DIR

    @property
    def bundled_dir(self) -> Path:
        """Directory containing the blueprints shipped with sprout."""

        return self._bundled_dir

    def bundled_names(self) -> list[str]:
        if not self._bundled_dir.is_dir():
            return []
        return sorted(path.name for path in self._bundled_dir.iterdir() if path.is_dir())

    def resolve(self, reference: str | None) -> ResolvedBlueprint:
        if reference is None or not reference.strip():
            reference = DEFAULT_BLUEPRINT

        candidate = Path(reference).expanduser()
        if not candidate.is_absolute():
            candidate = (self._cwd or Path.cwd()) / candidate
        if candidate.is_dir():
            LOGGER.debug("Using blueprint directory %s", candidate)
            return _ensure_blueprint(reference, candidate.resolve())

        if reference in self.bundled_names():
            LOGGER.debug("Using bundled blueprint '%s'", reference)
            return _ensure_blueprint(reference, self._bundled_dir / reference)

        raise BlueprintNotFound(reference)
