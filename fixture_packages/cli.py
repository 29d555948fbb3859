"""CLI entrypoints for fixture-packages commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from .host import ProjectHost
from .logging import configure_logging
from .manifest import ManifestError
from .plugin import PRE_AUTOLOAD_DUMP, Event, Plugin
from .state import DATA_DIR_NAME, STATE_FILENAME, StateDumpError
from .templates.available_fixture_packages import AvailableFixturePackages


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "count",
        "help": "Increase log verbosity, -v for adopted entries and -vv for debug traces.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = 0
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format for structured data.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fixture-packages",
        description="Adopt autoload namespaces of local fixture packages into the root project.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    adopt_parser = subparsers.add_parser(
        "adopt",
        help="Discover fixture packages and write the adopted package state.",
    )
    _add_common_options(adopt_parser)
    adopt_parser.add_argument(
        "--no-dev",
        action="store_true",
        help="Run as a non-development install, which adopts nothing.",
    )
    adopt_parser.add_argument(
        "--show-autoload",
        action="store_true",
        help="Print the merged autoload-dev section of the root package.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List fixture packages adopted by the last run.",
    )
    _add_common_options(list_parser)
    list_parser.add_argument(
        "--type",
        dest="types",
        action="append",
        default=None,
        help="Only list packages of this type (repeatable).",
    )
    output = list_parser.add_mutually_exclusive_group()
    output.add_argument("--names", action="store_true", help="Print package names only.")
    output.add_argument("--paths", action="store_true", help="Print package name to path mapping.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for fixture-packages commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbosity=args.verbose, log_file=args.log_file)

    try:
        host = ProjectHost.from_directory(args.path)
    except (FileNotFoundError, NotADirectoryError, ManifestError) as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "adopt":
        plugin = Plugin()
        plugin.activate(host)
        try:
            plugin.listen(Event(PRE_AUTOLOAD_DUMP, host, dev_mode=not args.no_dev))
        except (OSError, StateDumpError) as exc:
            parser.exit(1, f"fixture-packages adopt failed: {exc}\nRun with --verbose for more details.\n")
        exported = plugin.service.last_export
        print(f"Adopted {len(exported)} fixture packages")
        for name, record in exported.items():
            print(f"  {name} ({record.type}) -> {record.path}")
        if args.show_autoload:
            print(_render(host.root_package.dev_autoload, args.format))
    elif args.command == "list":
        data_file = Path(host.vendor_dir) / DATA_DIR_NAME / STATE_FILENAME
        available = AvailableFixturePackages(str(data_file))
        if args.names:
            data: Any = available.package_names(args.types)
        elif args.paths:
            data = available.package_names_and_paths(args.types)
        else:
            data = available.packages(args.types)
        print(_render(data, args.format))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _render(data: Any, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip("\n")
    return json.dumps(data, indent=4)


if __name__ == "__main__":
    main(sys.argv[1:])
