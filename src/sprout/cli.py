"""Command line interface for sprout."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from .config import CachePolicy, ScaffoldOptions
from .errors import ScaffoldError
from .manifest import normalized_manifest
from .scaffold import ManifestResult, ScaffoldEngine
from .sources import default_source

LOGGER = logging.getLogger(__name__)


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every step, including unchanged files")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return common


def _add_blueprint_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--blueprint",
        help="Blueprint directory, bundled blueprint name or git repository URL",
    )
    parser.add_argument(
        "--refresh-blueprint",
        action="store_true",
        help="Clone a remote blueprint again instead of reusing the cached copy",
    )
    parser.add_argument("--cache-dir", type=Path, help="Directory used to cache remote blueprints")


def _add_scaffold_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--skip-npm", action="store_true", help="Do not run npm install")
    parser.add_argument("--skip-bower", action="store_true", help="Do not run bower install")
    parser.add_argument("--skip-git", action="store_true", help="Do not initialise a git repository")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without touching the filesystem",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Skip the existing-project check and overwrite differing files",
    )
    _add_blueprint_arguments(parser)


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="sprout",
        description="Create new projects from blueprints",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser(
        "new", parents=[common], help="create a new project in a new directory"
    )
    new_parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Project directory name. When empty the current directory is used",
    )
    _add_scaffold_arguments(new_parser)

    init_parser = subparsers.add_parser(
        "init", parents=[common], help="create a new project in the current directory"
    )
    init_parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Project name. Defaults to the current directory's name",
    )
    _add_scaffold_arguments(init_parser)

    manifest_parser = subparsers.add_parser(
        "manifest",
        parents=[common],
        help="list the paths of a blueprint, or of a project with renamed files mapped back",
    )
    manifest_parser.add_argument("--target", type=Path, help="List this directory instead of a blueprint")
    manifest_parser.add_argument(
        "--ignore",
        metavar="PATTERN",
        action="append",
        default=[],
        help="Glob pattern of names to leave out (repeatable)",
    )
    _add_blueprint_arguments(manifest_parser)

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(format="%(message)s")
    logging.getLogger("sprout").setLevel(level)


def _options_from_args(args: argparse.Namespace) -> ScaffoldOptions:
    return ScaffoldOptions.from_env(
        skip_npm=getattr(args, "skip_npm", False),
        skip_bower=getattr(args, "skip_bower", False),
        skip_git=getattr(args, "skip_git", False),
        dry_run=getattr(args, "dry_run", False),
        force=getattr(args, "force", False),
        blueprint=args.blueprint,
        cache_policy=CachePolicy.REFRESH if args.refresh_blueprint else None,
        cache_dir=args.cache_dir,
    )


def _report(result: ManifestResult) -> None:
    if result.dry_run:
        print(f"Dry run: {len(result.entries)} paths would be written to {result.target}")
        return
    print(f"Project created at {result.target}")
    for error in result.install_errors:
        print(f"warning: {error}", file=sys.stderr)


def _handle_new(args: argparse.Namespace) -> int:
    engine = ScaffoldEngine()
    result = engine.new_project(args.name, _options_from_args(args))
    _report(result)
    return 0


def _handle_init(args: argparse.Namespace) -> int:
    engine = ScaffoldEngine()
    result = engine.new_project(args.name, _options_from_args(args), in_place=True)
    _report(result)
    return 0


def _handle_manifest(args: argparse.Namespace) -> int:
    if args.target is not None:
        if not args.target.is_dir():
            print(f"error: {args.target} is not a directory", file=sys.stderr)
            return 1
        paths = sorted(normalized_manifest(args.target, ignore=args.ignore))
    else:
        options = _options_from_args(args)
        resolved = default_source(options).resolve(options.blueprint)
        paths = resolved.manifest()

    for path in paths:
        print(path)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    handlers = {
        "new": _handle_new,
        "init": _handle_init,
        "manifest": _handle_manifest,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.error("no command provided")
        return 2

    try:
        return handler(args)
    except ScaffoldError as exc:
        LOGGER.debug("Scaffold failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
