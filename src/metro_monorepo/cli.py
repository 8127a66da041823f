"""Command line entry point for inspecting monorepos and resolutions.

Usage:
  metro-monorepo locate [--root DIR] [--format json|markdown]
  metro-monorepo resolve MODULE --origin FILE [--platform ios] [--source-ext js ...]
  metro-monorepo watch-folders [--root DIR]
  metro-monorepo validate-settings PATH
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import ConfigError, Settings, load_settings
from .logging_setup import TRACE, configure_logging
from .models.resolution import ResolverContext
from .report import build_report
from .resolver import LayeredResolver
from .summary import render_summary

DEFAULT_SOURCE_EXTS = ["js", "json", "ts", "tsx"]
DEFAULT_ASSET_EXTS = ["png", "jpg", "gif", "ttf"]


def _verbosity_level(verbose: int, settings: Settings) -> str | int | None:
    if verbose >= 2:
        return TRACE
    if verbose == 1:
        return logging.DEBUG
    return settings.log_level


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="metro-monorepo", description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings file")

    sub = parser.add_subparsers(dest="command", required=True)

    locate = sub.add_parser("locate", help="Print the monorepo containing a project")
    locate.add_argument("--root", type=Path, default=Path("."))
    locate.add_argument("--format", choices=("json", "markdown"), default="json")

    resolve = sub.add_parser("resolve", help="Resolve a module specifier")
    resolve.add_argument("module")
    resolve.add_argument("--origin", type=Path, required=True, help="File issuing the import")
    resolve.add_argument("--root", type=Path, default=Path("."))
    resolve.add_argument("--platform", default="ios")
    resolve.add_argument("--source-ext", dest="source_exts", action="append", default=None)
    resolve.add_argument("--asset-ext", dest="asset_exts", action="append", default=None)

    watch = sub.add_parser("watch-folders", help="Print the folders the bundler should watch")
    watch.add_argument("--root", type=Path, default=Path("."))

    validate = sub.add_parser("validate-settings", help="Validate a settings file")
    validate.add_argument("path", type=Path)

    return parser.parse_args(argv)


def _cmd_locate(args: argparse.Namespace, settings: Settings) -> int:
    helper = settings.build_helper(args.root)
    report = build_report(helper.monorepo(), helper.generate()["watchFolders"])
    if args.format == "markdown":
        print(render_summary(report), end="")
    else:
        print(json.dumps(report, indent=2))
    return 0


def _cmd_watch_folders(args: argparse.Namespace, settings: Settings) -> int:
    helper = settings.build_helper(args.root)
    for folder in helper.generate()["watchFolders"]:
        print(folder)
    return 0


def _cmd_resolve(args: argparse.Namespace, settings: Settings) -> int:
    origin = args.origin.resolve()
    helper = settings.build_helper(args.root)

    source_exts = list(args.source_exts or DEFAULT_SOURCE_EXTS)
    typescript = helper.typescript()
    if typescript is not None and not args.source_exts:
        source_exts.extend(e for e in typescript.file_extensions if e not in source_exts)

    context = ResolverContext.create(
        origin_module_path=str(origin),
        module_name=args.module,
        platform=args.platform,
        source_exts=source_exts,
        asset_exts=args.asset_exts or DEFAULT_ASSET_EXTS,
    )
    resolver = helper.custom_resolver()
    if not isinstance(resolver, LayeredResolver):
        raise ConfigError("Custom resolver does not support direct resolution")

    resolution = resolver.resolve(context)
    if resolution is None:
        print(f"No match for '{args.module}'", file=sys.stderr)
        return 1
    print(json.dumps(resolution.to_dict(), indent=2))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    load_settings(args.path)
    print(f"Settings {args.path} are valid")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        if args.command == "validate-settings":
            return _cmd_validate(args)

        project_root = getattr(args, "root", None) or Path(".")
        settings = load_settings(args.config, project_root=project_root)
        try:
            configure_logging(_verbosity_level(args.verbose, settings))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        if args.command == "locate":
            return _cmd_locate(args, settings)
        if args.command == "watch-folders":
            return _cmd_watch_folders(args, settings)
        return _cmd_resolve(args, settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read JSON manifest: {exc}", file=sys.stderr)
        return 1
    except yaml.YAMLError as exc:
        print(f"ERROR: Failed to read YAML manifest: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
