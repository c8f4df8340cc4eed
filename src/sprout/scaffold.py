"""Materialise a blueprint into a new project directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from .config import ScaffoldOptions, TargetDirectory
from .errors import BlueprintNotFound, CollisionError, DependencyInstallError, WriteError
from .guard import CollisionGuard
from .manifest import apply_renames, walk
from .naming import ProjectName, resolve_project_name
from .sources import BlueprintSource, ResolvedBlueprint, default_source
from .tasks import BOWER_INSTALLER, NPM_INSTALLER, DependencyInstaller, GitInitializer
from .template import TemplateRenderer, TemplateRenderingError

__all__ = [
    "EntryAction",
    "EntryKind",
    "ManifestEntry",
    "ManifestResult",
    "ScaffoldEngine",
]


LOGGER = logging.getLogger(__name__)


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class EntryAction(str, Enum):
    """What happens to an output path when the blueprint is written."""

    CREATE = "create"
    IDENTICAL = "identical"
    OVERWRITE = "overwrite"


class ManifestEntry(BaseModel):
    """One blueprint path and its destination in the new project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str = Field(..., description="Path relative to the blueprint's files directory.")
    path: str = Field(..., description="Path relative to the target after renames.")
    kind: EntryKind = Field(..., description="Whether the entry is a file or a directory.")
    action: EntryAction = Field(default=EntryAction.CREATE, description="Effect of writing the entry.")


class ManifestResult(BaseModel):
    """Outcome of a scaffold run, or the plan of a dry run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: Path = Field(..., description="Directory the project was (or would be) written to.")
    package_name: str = Field(..., description="Dasherized package name substituted into templates.")
    blueprint: str = Field(..., description="Reference of the blueprint that was used.")
    dry_run: bool = Field(default=False, description="True when nothing was written.")
    entries: List[ManifestEntry] = Field(default_factory=list, description="Entries in manifest order.")
    git_initialized: bool = Field(default=False, description="Whether a git repository was created.")
    install_errors: List[str] = Field(default_factory=list, description="Non-fatal dependency install failures.")

    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    def source_paths(self) -> list[str]:
        return [entry.source for entry in self.entries]


@dataclass(frozen=True, slots=True)
class _PlannedEntry:
    entry: ManifestEntry
    source_path: Path
    content: bytes | None = None


def _action_for(destination: Path, kind: EntryKind, content: bytes | None) -> EntryAction:
    if not destination.exists():
        return EntryAction.CREATE
    if kind is EntryKind.DIRECTORY:
        return EntryAction.IDENTICAL if destination.is_dir() else EntryAction.OVERWRITE
    if destination.is_file() and destination.read_bytes() == content:
        return EntryAction.IDENTICAL
    return EntryAction.OVERWRITE


class ScaffoldEngine:
    """Copy and render a blueprint's files into a target directory.

    Collaborators (blueprint source, collision guard, git and installers) are
    injectable so callers and tests can replace the external tools.
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        *,
        source: BlueprintSource | None = None,
        guard: CollisionGuard | None = None,
        git: GitInitializer | None = None,
        npm: DependencyInstaller = NPM_INSTALLER,
        bower: DependencyInstaller = BOWER_INSTALLER,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.source = source
        self.guard = guard or CollisionGuard()
        self.git = git or GitInitializer()
        self.npm = npm
        self.bower = bower

    def new_project(
        self,
        raw_name: str | None,
        options: ScaffoldOptions | None = None,
        *,
        cwd: str | Path | None = None,
        in_place: bool = False,
    ) -> ManifestResult:
        """Resolve ``raw_name`` and the configured blueprint, then scaffold.

        The project goes into ``cwd / raw_name``, or into ``cwd`` itself when
        no name is given or ``in_place`` is set. The collision check and the
        blueprint lookup both happen before the target is touched. The process
        working directory is never changed.
        """

        options = options or ScaffoldOptions()
        base = Path(cwd) if cwd is not None else Path.cwd()
        name = resolve_project_name(raw_name, cwd=base)
        if in_place:
            target = TargetDirectory(path=base, in_place=True)
        else:
            target = TargetDirectory.for_name(name, base)

        if not (options.dry_run or options.force):
            self.guard.enforce(target)

        source = self.source or default_source(options, base)
        resolved = source.resolve(options.blueprint)
        return self.scaffold(resolved, target, name, options)

    def context(
        self,
        resolved: ResolvedBlueprint,
        target: TargetDirectory,
        name: ProjectName,
        options: ScaffoldOptions,
    ) -> dict[str, Any]:
        """Return the values exposed to blueprint templates."""

        return {
            "name": name.package_name,
            "package_name": name.package_name,
            "class_name": name.class_name,
            "directory_name": name.directory_name or target.path.name,
            "blueprint": resolved.reference,
            "options": options,
        }

    def _plan(
        self,
        resolved: ResolvedBlueprint,
        target: TargetDirectory,
        name: ProjectName,
        options: ScaffoldOptions,
    ) -> list[_PlannedEntry]:
        files_dir = resolved.files_dir
        try:
            listing = list(walk(files_dir))
        except FileNotFoundError as exc:
            raise BlueprintNotFound(resolved.reference, f"{files_dir} does not exist") from exc
        except OSError as exc:
            raise BlueprintNotFound(resolved.reference, f"cannot list {files_dir}: {exc}") from exc

        context = self.context(resolved, target, name, options)
        planned: list[_PlannedEntry] = []
        for relative in listing:
            is_directory = relative.endswith("/")
            source_rel = relative.rstrip("/")
            output_rel = apply_renames(source_rel)
            source_path = files_dir / source_rel
            destination = target.path / output_rel

            if is_directory:
                kind = EntryKind.DIRECTORY
                content = None
            else:
                kind = EntryKind.FILE
                content = self._render(resolved, source_rel, source_path, context)

            try:
                action = _action_for(destination, kind, content)
            except OSError as exc:
                raise WriteError(destination, exc.strerror or str(exc)) from exc

            entry = ManifestEntry(
                source=relative,
                path=f"{output_rel}/" if is_directory else output_rel,
                kind=kind,
                action=action,
            )
            planned.append(_PlannedEntry(entry=entry, source_path=source_path, content=content))
        return planned

    def _render(
        self,
        resolved: ResolvedBlueprint,
        source_rel: str,
        source_path: Path,
        context: dict[str, Any],
    ) -> bytes:
        try:
            data = source_path.read_bytes()
        except OSError as exc:
            raise BlueprintNotFound(
                resolved.reference, f"cannot read {source_rel}: {exc.strerror or exc}"
            ) from exc
        try:
            return self.renderer.render_bytes(data, context)
        except TemplateRenderingError as exc:
            raise TemplateRenderingError(
                f"cannot render {source_rel} from blueprint '{resolved.reference}': {exc}"
            ) from exc

    def scaffold(
        self,
        resolved: ResolvedBlueprint,
        target: TargetDirectory,
        name: ProjectName,
        options: ScaffoldOptions,
    ) -> ManifestResult:
        """Write ``resolved`` into ``target`` and run the follow-up tasks.

        With ``options.dry_run`` the plan is logged and returned without any
        write, git initialisation or install. Files that would be overwritten
        raise :class:`CollisionError` before the first write unless
        ``options.force`` is set. A failure while writing raises
        :class:`WriteError` and leaves the partial output in place.
        """

        planned = self._plan(resolved, target, name, options)
        entries = [item.entry for item in planned]

        if options.dry_run:
            LOGGER.info("Dry run: nothing will be written to %s", target.path)
            for entry in entries:
                LOGGER.info("  %s %s", entry.action.value, entry.path)
            return ManifestResult(
                target=target.path,
                package_name=name.package_name,
                blueprint=resolved.reference,
                dry_run=True,
                entries=entries,
            )

        conflicts = [entry.path for entry in entries if entry.action is EntryAction.OVERWRITE]
        if conflicts and not options.force:
            raise CollisionError(
                f"{len(conflicts)} path(s) in {target.path} would be overwritten "
                f"(use --force to overwrite): {', '.join(conflicts)}",
                path=target.path,
            )

        self._materialize(target.path, planned)

        git_initialized = False
        if not options.skip_git:
            git_initialized = self.git.run(target.path)

        return ManifestResult(
            target=target.path,
            package_name=name.package_name,
            blueprint=resolved.reference,
            entries=entries,
            git_initialized=git_initialized,
            install_errors=self._install(target.path, options),
        )

    def _materialize(self, target_path: Path, planned: list[_PlannedEntry]) -> None:
        try:
            target_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(target_path, exc.strerror or str(exc)) from exc

        for item in planned:
            entry = item.entry
            destination = target_path / entry.path
            if entry.action is EntryAction.IDENTICAL:
                LOGGER.debug("  identical %s", entry.path)
                continue
            try:
                if entry.kind is EntryKind.DIRECTORY:
                    destination.mkdir(parents=True, exist_ok=True)
                else:
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    destination.write_bytes(item.content or b"")
                    shutil.copymode(item.source_path, destination)
            except OSError as exc:
                raise WriteError(destination, exc.strerror or str(exc)) from exc
            LOGGER.info("  %s %s", entry.action.value, entry.path)

    def _install(self, target_path: Path, options: ScaffoldOptions) -> list[str]:
        installers: list[DependencyInstaller] = []
        if not options.skip_npm:
            installers.append(self.npm)
        if not options.skip_bower:
            installers.append(self.bower)

        errors: list[str] = []
        for installer in installers:
            if not installer.applies_to(target_path):
                continue
            try:
                installer.run(target_path)
            except DependencyInstallError as exc:
                LOGGER.warning("%s", exc)
                errors.append(str(exc))
        return errors
