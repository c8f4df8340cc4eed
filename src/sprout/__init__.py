"""Create new projects from blueprints.

A blueprint is a directory whose ``files`` subfolder is copied into the new
project. Text files are rendered with ``{{ placeholder }}`` substitution, a
small rename table restores dotfiles such as ``.gitignore``, and the result can
be committed to a fresh git repository. The same engine backs the ``sprout``
command line interface.
"""

from __future__ import annotations

from .config import CachePolicy, ScaffoldOptions, TargetDirectory
from .errors import (
    BlueprintNotFound,
    CollisionError,
    DependencyInstallError,
    FetchError,
    ScaffoldError,
    WriteError,
)
from .guard import CollisionGuard
from .manifest import RENAMED_FILES, normalized_manifest, walk
from .naming import ProjectName, dasherize, resolve_project_name
from .scaffold import ManifestEntry, ManifestResult, ScaffoldEngine
from .template import TemplateRenderer, TemplateRenderingError

__all__ = [
    "BlueprintNotFound",
    "CachePolicy",
    "CollisionError",
    "CollisionGuard",
    "DependencyInstallError",
    "FetchError",
    "ManifestEntry",
    "ManifestResult",
    "ProjectName",
    "RENAMED_FILES",
    "ScaffoldEngine",
    "ScaffoldError",
    "ScaffoldOptions",
    "TargetDirectory",
    "TemplateRenderer",
    "TemplateRenderingError",
    "WriteError",
    "dasherize",
    "normalized_manifest",
    "resolve_project_name",
    "walk",
]

__version__ = "0.1.0"
