#!/usr/bin/env python3
"""Entry point for the twigsdc CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from textwrap import dedent
from typing import Any

import yaml

from twigsdc import __version__
from twigsdc.app.plugin import TwigBundlePlugin
from twigsdc.app.resolver import TemplateResolutionError
from twigsdc.runtime import build_renderer
from twigsdc.settings import DEFAULT_CONFIG_FILENAME, SettingsError
from twigsdc.utils.log import configure_logging

HELP_OVERVIEW = dedent(
    """
    Resolve Twig components across namespaces and inspect their dependency graph.

    Examples:
      - twigsdc resolve widgets:button
      - twigsdc deps @widgets/card/card.twig
      - twigsdc refs components/widgets/icon/icon.twig
      - twigsdc bundle @widgets/card/card.twig --output card_module.py
    """
)


def _emit(payload: Any, *, as_json: bool, lines: list[str]) -> None:
    if as_json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    for line in lines:
        print(line)


def _build_plugin(args: argparse.Namespace) -> TwigBundlePlugin:
    return TwigBundlePlugin.from_config(Path(args.config))


def _list_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    keys = sorted(plugin.cache.keys())
    _emit({"templates": keys}, as_json=args.json, lines=keys)
    return 0


def _resolve_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    resolved = plugin.resolver.require(args.specifier)
    payload = {
        "specifier": args.specifier,
        "key": resolved.key,
        "path": str(resolved.source_path) if resolved.source_path else None,
    }
    _emit(payload, as_json=args.json, lines=[f"{resolved.key}\t{payload['path'] or '-'}"])
    return 0


def _deps_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    assets = [str(asset) for asset in plugin.walker.walk(args.specifiers)]
    _emit({"assets": assets}, as_json=args.json, lines=assets)
    return 0


def _refs_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    targets = [str(Path(target).resolve()) if Path(target).exists() else target for target in args.targets]
    referrers = [str(path) for path in plugin.reverse_index.referrers_of(targets)]
    _emit({"referrers": referrers}, as_json=args.json, lines=referrers)
    return 0


def _bundle_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    module = plugin.load(args.specifier)
    if module is None:
        print(f"Not a template module id: {args.specifier}", file=sys.stderr)
        return 1
    if args.output:
        target = Path(args.output)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(module, encoding="utf-8")
        print(f"Wrote {target}")
    else:
        sys.stdout.write(module)
    return 0


def _load_context(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    data = yaml.safe_load(Path(raw).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise SettingsError(f"Render context must be a mapping: {raw}")
    return data


def _render_cmd(args: argparse.Namespace) -> int:
    plugin = _build_plugin(args)
    resolved = plugin.resolver.require(args.specifier)
    renderer = build_renderer(
        resolved.key,
        plugin.cache.snapshot(),
        plugin.settings.namespaces.to_dict(),
        extension=plugin.settings.template_extension,
    )
    sys.stdout.write(renderer(_load_context(args.context)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twigsdc",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"twigsdc {__version__}")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILENAME, help=f"Configuration file (default: {DEFAULT_CONFIG_FILENAME})")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable output")
    parser.add_argument("--log-level", default=None, help="Log level (default: $TWIGSDC_LOG_LEVEL or INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List every cached template key")
    list_cmd.set_defaults(func=_list_cmd)

    resolve_cmd = sub.add_parser("resolve", help="Resolve a specifier to its canonical key")
    resolve_cmd.add_argument("specifier")
    resolve_cmd.set_defaults(func=_resolve_cmd)

    deps_cmd = sub.add_parser("deps", help="List sidecar scripts reachable from templates")
    deps_cmd.add_argument("specifiers", nargs="+")
    deps_cmd.set_defaults(func=_deps_cmd)

    refs_cmd = sub.add_parser("refs", help="List templates that reference the targets")
    refs_cmd.add_argument("targets", nargs="+")
    refs_cmd.set_defaults(func=_refs_cmd)

    bundle_cmd = sub.add_parser("bundle", help="Generate the precompiled module for a template")
    bundle_cmd.add_argument("specifier")
    bundle_cmd.add_argument("--output", "-o", help="Write the module to this file instead of stdout")
    bundle_cmd.set_defaults(func=_bundle_cmd)

    render_cmd = sub.add_parser("render", help="Render a template with an optional YAML/JSON context")
    render_cmd.add_argument("specifier")
    render_cmd.add_argument("--context", help="Path to a YAML or JSON context file")
    render_cmd.set_defaults(func=_render_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except SettingsError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except TemplateResolutionError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
