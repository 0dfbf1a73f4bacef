"""Command-line front door for scriptdeck.

Parses CLI options, loads config and extensions, and hands the controller to
the interactive driver. ``scriptdeck <extension> <script> --flag=value`` runs
one command directly; it is the same form "Copy as Shell Command" produces.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import APP_NAME, load_config
from .extensions.loader import ExtensionRegistry, discover_extensions
from .history import History, parse_flag_args
from .preferences import PreferenceStore


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Turn scripts into interactive terminal lists, details, and forms.",
        epilog="Parameters for a direct run are passed as --name=value or bare --flag.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--height",
        type=_non_negative_int,
        default=None,
        help="Rows to draw below the prompt instead of the full screen (0 = full screen).",
    )
    parser.add_argument(
        "--extension-dir",
        action="append",
        default=[],
        type=Path,
        metavar="DIR",
        help="Extra directory to search for extensions (repeatable).",
    )
    parser.add_argument("extension", nargs="?", default=None, help="Extension to run directly.")
    parser.add_argument("script", nargs="?", default=None, help="Command of that extension.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the interactive launcher."""
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    if args.extension is not None and args.script is None:
        parser.error("expected both an extension and a script")
    if extra and args.script is None:
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    try:
        with_ = parse_flag_args(extra)
    except ValueError as exc:
        parser.error(str(exc))

    from .runtime.app import configure_logging, draw, open_relay
    from .runtime.model import Model, unmet_requirement_page
    from .runtime.runner import ScriptRunner

    configure_logging()
    config = load_config()
    if args.height is not None:
        config.height = args.height
    registry = ExtensionRegistry(discover_extensions([*args.extension_dir, *config.extension_dirs]))
    store = PreferenceStore()
    history = History()

    root = None
    if args.extension is not None:
        extension = registry.get(args.extension)
        if extension is None:
            raise SystemExit(f"Extension not found: {args.extension}")
        command = extension.commands.get(args.script)
        if command is None:
            raise SystemExit(f"Command not found: {args.extension}/{args.script}")
        root = unmet_requirement_page(extension) or ScriptRunner(extension, command, with_, store=store)

    if not sys.stdin.isatty():
        raise SystemExit(f"{APP_NAME} needs an interactive terminal on stdin.")

    relay = open_relay()
    model = Model(config, registry, store=store, history=history, root=root, relay=relay)
    try:
        status = draw(model, relay=relay)
    finally:
        if relay is not None:
            relay.close()
    if status:
        raise SystemExit(status)
