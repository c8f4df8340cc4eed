from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sprout.errors import DependencyInstallError  # noqa: E402


@pytest.fixture(autouse=True)
def clean_sprout_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``SPROUT_*`` variables from the outer environment out of the tests."""

    for variable in ("SPROUT_BLUEPRINT", "SPROUT_CACHE_DIR", "SPROUT_CACHE_POLICY"):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Empty directory standing in for the user's working directory."""

    directory = tmp_path / "work"
    directory.mkdir()
    return directory


@pytest.fixture()
def make_blueprint(tmp_path: Path) -> Callable[..., Path]:
    """Create a blueprint directory whose ``files`` folder holds ``files``."""

    def _make(name: str = "my_blueprint", files: Mapping[str, str | bytes] | None = None) -> Path:
        root = tmp_path / "blueprints" / name
        files_dir = root / "files"
        files_dir.mkdir(parents=True, exist_ok=True)
        for relative, content in (files or {}).items():
            path = files_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


@dataclass
class RecordingInstaller:
    """Stand-in for a package manager that records where it was run."""

    tool: str
    manifest: str
    fail: bool = False
    calls: list[Path] = field(default_factory=list)

    def applies_to(self, target: Path) -> bool:
        return (Path(target) / self.manifest).is_file()

    def run(self, target: Path) -> None:
        self.calls.append(Path(target))
        if self.fail:
            raise DependencyInstallError(self.tool, "registry unreachable")


@pytest.fixture()
def npm() -> RecordingInstaller:
    return RecordingInstaller(tool="npm", manifest="package.json")


@pytest.fixture()
def bower() -> RecordingInstaller:
    return RecordingInstaller(tool="bower", manifest="bower.json")
