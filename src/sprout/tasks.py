"""External tools run after the blueprint has been written."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import DependencyInstallError

__all__ = [
    "BOWER_INSTALLER",
    "NPM_INSTALLER",
    "DependencyInstaller",
    "GitInitializer",
]


LOGGER = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from sprout"

_COMMIT_IDENTITY = {
    "GIT_AUTHOR_NAME": "sprout",
    "GIT_AUTHOR_EMAIL": "sprout@localhost",
    "GIT_COMMITTER_NAME": "sprout",
    "GIT_COMMITTER_EMAIL": "sprout@localhost",
}


@dataclass(frozen=True, slots=True)
class GitInitializer:
    """Create a git repository holding the freshly written project."""

    git: str = "git"
    commit: bool = True

    def _run(self, target: Path, *args: str) -> None:
        env = dict(os.environ)
        env.update(_COMMIT_IDENTITY)
        subprocess.run(
            [self.git, *args],
            cwd=target,
            env=env,
            capture_output=True,
            check=True,
        )

    def run(self, target: str | Path) -> bool:
        """Initialise ``target`` and return whether a repository was created.

        An existing ``.git`` entry is left alone. A missing git executable or a
        failing git command is logged and does not raise.
        """

        target = Path(target)
        if (target / ".git").exists():
            LOGGER.debug("%s is already a git repository", target)
            return False

        try:
            self._run(target, "init", "--quiet")
            if self.commit:
                self._run(target, "add", "--all")
                self._run(target, "commit", "--quiet", "--no-gpg-sign", "-m", INITIAL_COMMIT_MESSAGE)
        except FileNotFoundError:
            LOGGER.warning("git not found, skipping repository initialisation")
            return False
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr.decode("utf-8", "replace").strip() if exc.stderr else ""
            LOGGER.warning("git %s failed: %s", exc.cmd[1], stderr or exc)
            return (target / ".git").is_dir()

        LOGGER.info("Initialized git repository in %s", target)
        return True


@dataclass(frozen=True, slots=True)
class DependencyInstaller:
    """Run a package manager when the project carries its manifest file."""

    tool: str
    manifest: str
    command: tuple[str, ...]

    def applies_to(self, target: str | Path) -> bool:
        return (Path(target) / self.manifest).is_file()

    def run(self, target: str | Path) -> None:
        executable = shutil.which(self.command[0])
        if executable is None:
            raise DependencyInstallError(self.tool, f"'{self.command[0]}' executable not found")

        LOGGER.info("Installing %s dependencies", self.tool)
        try:
            completed = subprocess.run(
                [executable, *self.command[1:]],
                cwd=Path(target),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise DependencyInstallError(self.tool, str(exc)) from exc

        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"exited with status {completed.returncode}"
            raise DependencyInstallError(self.tool, detail)


NPM_INSTALLER = DependencyInstaller(tool="npm", manifest="package.json", command=("npm", "install"))
BOWER_INSTALLER = DependencyInstaller(tool="bower", manifest="bower.json", command=("bower", "install"))
