"""Deterministic directory listings and the blueprint rename table."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

__all__ = [
    "INVERSE_RENAMED_FILES",
    "RENAMED_FILES",
    "apply_renames",
    "invert_renames",
    "normalized_manifest",
    "walk",
]


# Blueprint relative path -> output relative path.
RENAMED_FILES: Mapping[str, str] = MappingProxyType({"gitignore": ".gitignore"})

INVERSE_RENAMED_FILES: Mapping[str, str] = MappingProxyType(
    {target: source for source, target in RENAMED_FILES.items()}
)


def apply_renames(relative_path: str) -> str:
    """Return the on-disk path for the blueprint path ``relative_path``."""

    return RENAMED_FILES.get(relative_path, relative_path)


def invert_renames(relative_path: str) -> str:
    """Map an on-disk path back to the blueprint path it was written from."""

    return INVERSE_RENAMED_FILES.get(relative_path, relative_path)


def _is_ignored(name: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch(name, pattern) for pattern in patterns)


def _walk(
    directory: Path,
    prefix: str,
    patterns: tuple[str, ...],
    ancestors: frozenset[Path],
) -> Iterator[str]:
    children: list[tuple[str, Path]] = []
    for child in directory.iterdir():
        if _is_ignored(child.name, patterns):
            continue
        key = f"{prefix}{child.name}/" if child.is_dir() else f"{prefix}{child.name}"
        children.append((key, child))

    # Depth first over siblings sorted by key equals a global sort of all paths.
    for key, child in sorted(children):
        yield key
        if not key.endswith("/"):
            continue
        real = child.resolve()
        if real in ancestors:
            # Symlink back to an enclosing directory.
            continue
        yield from _walk(child, key, patterns, ancestors | {real})


def walk(root: str | Path, *, ignore: Iterable[str] | None = None) -> Iterator[str]:
    """Yield every path below ``root`` relative to it, in lexicographic order.

    Paths use forward slashes and directories end with ``/``. Hidden entries are
    included. Any file or directory whose name matches one of the ``ignore``
    glob patterns is skipped together with its subtree. Symlinked directories
    are followed, except one pointing back at an enclosing directory, which is
    listed but not entered. Nothing is cached, so each call reflects the
    directory contents at iteration time.
    """

    root_path = Path(root)
    if not root_path.is_dir():
        raise FileNotFoundError(root_path)

    return _walk(root_path, "", tuple(ignore or ()), frozenset({root_path.resolve()}))


def normalized_manifest(root: str | Path, *, ignore: Iterable[str] | None = None) -> set[str]:
    """Return the paths under ``root`` with renamed files mapped back to their source names."""

    return {invert_renames(path) for path in walk(root, ignore=ignore)}
