"""Unified entrypoint for CLI and UI usage."""

from __future__ import annotations

import argparse

from sprite_atlas.main import main as cli_main
from sprite_atlas.ui.app import create_app


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sprite atlas launcher")
    subparsers = parser.add_subparsers(dest="command")

    ui_parser = subparsers.add_parser("ui", help="Launch the web UI")
    ui_parser.add_argument("--host", default="127.0.0.1", help="UI host")
    ui_parser.add_argument("--port", type=int, default=5000, help="UI port")
    ui_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    cli_parser = subparsers.add_parser("cli", help="Build an atlas from the command line")
    cli_parser.add_argument("cli_args", nargs=argparse.REMAINDER, help="Arguments passed to the CLI")

    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    if args.command in (None, "ui"):
        app = create_app()
        app.run(host=getattr(args, "host", "127.0.0.1"), port=getattr(args, "port", 5000), debug=bool(getattr(args, "debug", False)))
        return

    if args.command == "cli":
        cli_main(args.cli_args)
        return

    raise SystemExit(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
