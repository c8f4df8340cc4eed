"""Name normalisation for new projects.

A raw project name comes straight from the command line and may be missing,
empty, or arbitrary text. :func:`resolve_project_name` turns any such input
into a :class:`ProjectName` without ever raising.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "ProjectName",
    "dasherize",
    "normalize_class_name",
    "resolve_project_name",
    "slugify",
]


DEFAULT_PACKAGE_NAME = "app"

_SEPARATORS = re.compile(r"[\s\-]+")
_NON_ALPHANUMERIC = re.compile(r"[^0-9A-Za-z]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def _to_ascii(value: str) -> str:
    text = unicodedata.normalize("NFKD", value)
    return text.encode("ascii", "ignore").decode("ascii")


def slugify(value: str, *, separator: str = "-") -> str:
    """Create a filesystem and URL friendly slug from ``value``.

    Parameters
    ----------
    value:
        The text to normalise. Unicode characters are folded to ASCII.
    separator:
        The character used to join individual words.
    """

    text = _to_ascii(str(value))
    text = re.sub(r"[\s]+", " ", text)
    text = re.sub(r"[^\w\- ]", "", text)
    text = text.strip().lower()

    if not text:
        return ""

    collapsed = _SEPARATORS.sub(separator, text)
    collapsed = re.sub(rf"{re.escape(separator)}+", separator, collapsed)
    return collapsed.strip(separator)


def dasherize(value: str) -> str:
    """Return the lowercase, hyphen separated package name for ``value``.

    CamelCase boundaries and any run of non alphanumeric characters split
    words, so ``"FooApp"`` and ``"foo_app"`` both become ``"foo-app"``. The
    result never starts with a digit and is never empty.
    """

    text = _to_ascii(value)
    text = _CAMEL_BOUNDARY.sub(" ", text)
    text = _NON_ALPHANUMERIC.sub(" ", text)
    candidate = slugify(text).lstrip("0123456789-")
    return candidate or DEFAULT_PACKAGE_NAME


def normalize_class_name(name: str) -> str:
    """Return a canonical class name generated from ``name``."""

    collapsed = _SEPARATORS.sub(" ", name).strip()
    if not collapsed:
        return "App"

    words = re.split(r"[\s_\-]+", collapsed)
    return "".join(word.capitalize() for word in words if word)


@dataclass(frozen=True, slots=True)
class ProjectName:
    """Identifiers derived from the name given on the command line.

    Attributes
    ----------
    raw:
        The value exactly as supplied, ``None`` when no name was given.
    directory_name:
        Directory to create relative to the working directory. An empty string
        means the project is scaffolded in place.
    package_name:
        Dasherized identifier written into package manifests.
    """

    raw: str | None
    directory_name: str
    package_name: str

    @property
    def in_place(self) -> bool:
        return self.directory_name == ""

    @property
    def class_name(self) -> str:
        return normalize_class_name(self.package_name)


def resolve_project_name(raw_name: str | None, *, cwd: str | Path | None = None) -> ProjectName:
    """Build a :class:`ProjectName` from an optional user supplied name.

    A missing, empty or whitespace-only name scaffolds into ``cwd`` and derives
    the package name from the directory's base name.
    """

    stripped = None if raw_name is None else raw_name.strip()
    if stripped is None or stripped == "":
        base = Path(cwd) if cwd is not None else Path.cwd()
        return ProjectName(
            raw=raw_name,
            directory_name="",
            package_name=dasherize(base.resolve().name),
        )

    return ProjectName(raw=raw_name, directory_name=stripped, package_name=dasherize(stripped))
