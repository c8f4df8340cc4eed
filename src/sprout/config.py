"""Options and target locations shared by the scaffold engine and CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .naming import ProjectName

__all__ = ["CachePolicy", "ScaffoldOptions", "TargetDirectory"]


class CachePolicy(str, Enum):
    """What to do with an existing cache entry for a remote blueprint."""

    REUSE = "reuse"
    REFRESH = "refresh"


class ScaffoldOptions(BaseModel):
    """Switches controlling a single scaffold run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    skip_npm: bool = Field(default=False, description="Do not run npm install in the new project.")
    skip_bower: bool = Field(default=False, description="Do not run bower install in the new project.")
    skip_git: bool = Field(default=False, description="Do not initialise a git repository.")
    dry_run: bool = Field(default=False, description="Report what would be written without touching the filesystem.")
    force: bool = Field(default=False, description="Skip the collision check and overwrite differing files.")
    blueprint: str | None = Field(None, description="Local path, bundled blueprint name or git URL. None selects the bundled app blueprint.")
    cache_policy: CachePolicy = Field(default=CachePolicy.REUSE, description="Reuse or re-fetch cached remote blueprints.")
    cache_dir: Path | None = Field(None, description="Directory holding cloned remote blueprints.")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldOptions":
        """Build options from ``SPROUT_*`` environment variables.

        Recognised variables (all optional): ``SPROUT_BLUEPRINT``,
        ``SPROUT_CACHE_DIR`` and ``SPROUT_CACHE_POLICY``. Keyword arguments
        that are not ``None`` take precedence over the environment.
        """

        values: dict[str, Any] = {}
        if os.environ.get("SPROUT_BLUEPRINT"):
            values["blueprint"] = os.environ["SPROUT_BLUEPRINT"]
        if os.environ.get("SPROUT_CACHE_DIR"):
            values["cache_dir"] = Path(os.environ["SPROUT_CACHE_DIR"])
        if os.environ.get("SPROUT_CACHE_POLICY"):
            values["cache_policy"] = os.environ["SPROUT_CACHE_POLICY"].strip().lower()

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass(frozen=True, slots=True)
class TargetDirectory:
    """Directory a project is written into.

    ``in_place`` is true when no project name was given and the working
    directory itself receives the blueprint.
    """

    path: Path
    in_place: bool = False

    @classmethod
    def for_name(cls, name: ProjectName, cwd: str | Path | None = None) -> "TargetDirectory":
        base = Path(cwd) if cwd is not None else Path.cwd()
        if name.in_place:
            return cls(path=base, in_place=True)
        return cls(path=base / name.directory_name, in_place=False)
