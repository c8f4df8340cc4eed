"""Remote blueprints cloned from git repositories into a local cache."""

from __future__ import annotations

import hashlib
import logging
import os
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from urllib.parse import urlparse

from ...config import CachePolicy
from ...errors import BlueprintNotFound, FetchError
from ..interfaces import BLUEPRINT_FILES_DIR, BlueprintSource, ResolvedBlueprint

__all__ = ["DEFAULT_CACHE_DIR", "GitBlueprintSource", "is_remote_reference"]


LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "sprout-blueprints"

REMOTE_SCHEMES = frozenset({"http", "https", "ssh", "git", "file"})
_SCP_LIKE = re.compile(r"^[\w.-]+@[\w.-]+:")


def is_remote_reference(reference: str) -> bool:
    """Return ``True`` when ``reference`` names a git repository rather than a path."""

    if _SCP_LIKE.match(reference):
        return True
    return urlparse(reference).scheme in REMOTE_SCHEMES


class GitBlueprintSource(BlueprintSource):
    """Clone remote blueprints, delegating other references to ``fallback``.

    Clones are cached under ``cache_dir`` keyed by the repository URL. With
    :attr:`CachePolicy.REUSE` an existing entry is used as is; with
    :attr:`CachePolicy.REFRESH` it is cloned again and replaced once the new
    clone succeeds, so a failed refresh keeps the previous copy.
    """

    def __init__(
        self,
        cache_dir: Path | str | None = None,
        *,
        policy: CachePolicy | str = CachePolicy.REUSE,
        fallback: BlueprintSource | None = None,
        git: str = "git",
    ):
        self.cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
        self.policy = CachePolicy(policy)
        self._fallback = fallback
        self._git = git

    def cache_path(self, reference: str) -> Path:
        digest = hashlib.sha256(reference.encode("utf-8")).hexdigest()[:16]
        return self.cache_dir / digest

    def resolve(self, reference: str | None) -> ResolvedBlueprint:
        if reference is None or not is_remote_reference(reference):
            if self._fallback is None:
                raise BlueprintNotFound(str(reference), "not a git repository URL")
            return self._fallback.resolve(reference)

        entry = self.cache_path(reference)
        if entry.is_dir() and self.policy is CachePolicy.REUSE:
            LOGGER.debug("Reusing cached blueprint %s from %s", reference, entry)
        else:
            self._clone(reference, entry)

        if not (entry / BLUEPRINT_FILES_DIR).is_dir():
            raise BlueprintNotFound(reference, f"repository has no '{BLUEPRINT_FILES_DIR}' directory")
        return ResolvedBlueprint(reference=reference, root=entry, remote=True)

    def _clone(self, reference: str, entry: Path) -> None:
        LOGGER.info("Fetching blueprint %s", reference)
        entry.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f"{entry.name}-", dir=entry.parent))
        checkout = staging / "checkout"
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        try:
            try:
                completed = subprocess.run(
                    [self._git, "clone", "--depth", "1", "--quiet", reference, str(checkout)],
                    capture_output=True,
                    text=True,
                    env=env,
                    check=False,
                )
            except OSError as exc:
                raise FetchError(reference, f"could not run {self._git}: {exc}") from exc

            if completed.returncode != 0:
                detail = completed.stderr.strip() or f"git exited with status {completed.returncode}"
                raise FetchError(reference, detail)

            try:
                if entry.is_dir():
                    LOGGER.debug("Replacing cached blueprint %s", entry)
                    shutil.rmtree(entry)
                elif entry.exists():
                    entry.unlink()
                checkout.rename(entry)
            except OSError as exc:
                raise FetchError(reference, f"could not update cache entry {entry}: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)
