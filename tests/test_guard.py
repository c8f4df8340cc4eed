from __future__ import annotations

from pathlib import Path

import pytest

from sprout.config import TargetDirectory
from sprout.errors import CollisionError
from sprout.guard import PROJECT_MARKER, Allowed, CollisionGuard, Rejected


@pytest.fixture()
def guard() -> CollisionGuard:
    return CollisionGuard()


def test_missing_target_is_allowed(tmp_path: Path, guard: CollisionGuard):
    target = TargetDirectory(path=tmp_path / "foo")
    assert guard.check(target) == Allowed()
    guard.enforce(target)


def test_existing_directory_without_marker_is_allowed(tmp_path: Path, guard: CollisionGuard):
    (tmp_path / "foo").mkdir()
    (tmp_path / "foo" / "notes.txt").write_text("hello", encoding="utf-8")
    assert isinstance(guard.check(TargetDirectory(path=tmp_path / "foo")), Allowed)


def test_marker_in_target_is_rejected(tmp_path: Path, guard: CollisionGuard):
    project = tmp_path / "foo"
    project.mkdir()
    (project / PROJECT_MARKER).write_text("{}", encoding="utf-8")

    result = guard.check(TargetDirectory(path=project))

    assert isinstance(result, Rejected)
    assert result.marker_path == project / PROJECT_MARKER
    assert str(project) in result.reason


def test_marker_above_target_is_rejected(tmp_path: Path, guard: CollisionGuard):
    (tmp_path / PROJECT_MARKER).write_text("{}", encoding="utf-8")

    result = guard.check(TargetDirectory(path=tmp_path / "nested" / "foo"))

    assert isinstance(result, Rejected)
    assert result.marker_path == tmp_path / PROJECT_MARKER


def test_marker_directory_is_not_a_project(tmp_path: Path, guard: CollisionGuard):
    (tmp_path / PROJECT_MARKER).mkdir()
    assert guard.find_marker(tmp_path) is None


def test_enforce_raises_collision_error(tmp_path: Path, guard: CollisionGuard):
    (tmp_path / PROJECT_MARKER).write_text("{}", encoding="utf-8")

    with pytest.raises(CollisionError) as excinfo:
        guard.enforce(TargetDirectory(path=tmp_path, in_place=True))

    assert excinfo.value.path == tmp_path / PROJECT_MARKER


def test_custom_marker(tmp_path: Path):
    (tmp_path / ".ember-cli").write_text("{}", encoding="utf-8")
    assert CollisionGuard(marker=".ember-cli").find_marker(tmp_path / "app") == tmp_path / ".ember-cli"
    assert CollisionGuard().find_marker(tmp_path / "app") is None
