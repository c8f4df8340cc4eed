from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from sprout.config import CachePolicy, ScaffoldOptions
from sprout.errors import BlueprintNotFound, FetchError
from sprout.scaffold import ScaffoldEngine
from sprout.sources import GitBlueprintSource, LocalBlueprintSource, default_source, is_remote_reference

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

_IDENTITY = ["-c", "user.name=sprout-tests", "-c", "user.email=tests@example.com", "-c", "commit.gpgsign=false"]


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *_IDENTITY, *args], cwd=cwd, capture_output=True, check=True)


def _commit_all(repo: Path, message: str) -> None:
    _git(repo, "add", "--all")
    _git(repo, "commit", "--quiet", "-m", message)


@pytest.fixture()
def origin(tmp_path: Path) -> Path:
    """A git repository laid out as a blueprint with a single marker file."""

    repo = tmp_path / "origin"
    (repo / "files").mkdir(parents=True)
    (repo / "files" / ".sprout").write_text('{"blueprint": {{ blueprint|json }} }\n', encoding="utf-8")
    _git(repo, "init", "--quiet")
    _commit_all(repo, "blueprint")
    return repo


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("https://github.com/example/app-blueprint.git", True),
        ("http://example.com/blueprint", True),
        ("ssh://git@example.com/blueprint.git", True),
        ("git://example.com/blueprint.git", True),
        ("file:///srv/blueprints/app", True),
        ("git@github.com:example/blueprint.git", True),
        ("my_blueprint", False),
        ("./blueprints/app", False),
        ("/srv/blueprints/app", False),
        ("C:\\blueprints\\app", False),
    ],
)
def test_is_remote_reference(reference, expected):
    assert is_remote_reference(reference) is expected


def test_local_references_use_fallback(tmp_path: Path, make_blueprint):
    blueprint = make_blueprint(files={"gitignore": ""})
    source = GitBlueprintSource(tmp_path / "cache", fallback=LocalBlueprintSource())

    resolved = source.resolve(str(blueprint))

    assert not resolved.remote
    assert resolved.manifest() == ["gitignore"]
    assert not (tmp_path / "cache").exists()


def test_local_reference_without_fallback_is_rejected(tmp_path: Path):
    with pytest.raises(BlueprintNotFound):
        GitBlueprintSource(tmp_path / "cache").resolve("my_blueprint")


def test_missing_git_executable_is_a_fetch_error(tmp_path: Path):
    cache = tmp_path / "cache"
    source = GitBlueprintSource(cache, git="sprout-test-no-such-git")

    with pytest.raises(FetchError):
        source.resolve("https://example.invalid/blueprint.git")

    assert list(cache.iterdir()) == []


@requires_git
def test_clone_into_cache(tmp_path: Path, origin: Path):
    cache = tmp_path / "cache"
    source = GitBlueprintSource(cache)

    resolved = source.resolve(origin.as_uri())

    assert resolved.remote
    assert resolved.root == source.cache_path(origin.as_uri())
    assert resolved.root.parent == cache
    assert resolved.manifest() == [".sprout"]


@requires_git
def test_reuse_policy_keeps_cached_copy(tmp_path: Path, origin: Path):
    cache = tmp_path / "cache"
    url = origin.as_uri()
    GitBlueprintSource(cache).resolve(url)

    (origin / "files" / "README.md").write_text("new", encoding="utf-8")
    _commit_all(origin, "readme")

    assert GitBlueprintSource(cache, policy=CachePolicy.REUSE).resolve(url).manifest() == [".sprout"]
    refreshed = GitBlueprintSource(cache, policy="refresh").resolve(url)
    assert refreshed.manifest() == [".sprout", "README.md"]


@requires_git
def test_failed_clone_leaves_no_cache_entry(tmp_path: Path):
    cache = tmp_path / "cache"
    url = (tmp_path / "does-not-exist").as_uri()

    with pytest.raises(FetchError):
        GitBlueprintSource(cache).resolve(url)

    assert list(cache.iterdir()) == []


@requires_git
def test_failed_refresh_keeps_cached_copy(tmp_path: Path, origin: Path):
    cache = tmp_path / "cache"
    url = origin.as_uri()
    GitBlueprintSource(cache).resolve(url)
    shutil.rmtree(origin)

    source = GitBlueprintSource(cache, policy=CachePolicy.REFRESH)
    with pytest.raises(FetchError):
        source.resolve(url)

    entry = source.cache_path(url)
    assert (entry / "files" / ".sprout").is_file()
    assert [path.name for path in cache.iterdir()] == [entry.name]
    assert GitBlueprintSource(cache).resolve(url).manifest() == [".sprout"]


@requires_git
def test_repository_without_files_folder(tmp_path: Path):
    repo = tmp_path / "plain"
    repo.mkdir()
    (repo / "README.md").write_text("not a blueprint", encoding="utf-8")
    _git(repo, "init", "--quiet")
    _commit_all(repo, "readme")

    with pytest.raises(BlueprintNotFound):
        GitBlueprintSource(tmp_path / "cache").resolve(repo.as_uri())


@requires_git
def test_new_project_from_remote_blueprint(tmp_path: Path, workspace: Path, origin: Path):
    options = ScaffoldOptions(
        skip_npm=True,
        skip_bower=True,
        skip_git=True,
        blueprint=origin.as_uri(),
        cache_dir=tmp_path / "cache",
    )

    result = ScaffoldEngine().new_project("foo", options, cwd=workspace)

    marker = workspace / "foo" / ".sprout"
    assert marker.is_file()
    assert json.loads(marker.read_text(encoding="utf-8")) == {"blueprint": origin.as_uri()}
    assert result.blueprint == origin.as_uri()


def test_default_source_honours_options(tmp_path: Path):
    options = ScaffoldOptions(cache_dir=tmp_path / "cache", cache_policy=CachePolicy.REFRESH)

    source = default_source(options, tmp_path)

    assert isinstance(source, GitBlueprintSource)
    assert source.cache_dir == tmp_path / "cache"
    assert source.policy is CachePolicy.REFRESH
    assert source.resolve(None).reference == "app"
