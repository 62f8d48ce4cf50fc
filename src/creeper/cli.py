"""CLI entry point."""

from __future__ import annotations

import argparse
import json
import os

from .commands import CommandDispatcher
from .config import ConfigStore
from .settings import AppSettings, DEFAULT_SETTINGS_PATH, load_settings, save_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="creeper")
    sub = parser.add_subparsers(dest="command")

    gui_cmd = sub.add_parser("gui")
    gui_cmd.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help="Settings file.")

    invoke_cmd = sub.add_parser("invoke")
    invoke_cmd.add_argument("name", help="Command name, e.g. get_config.")
    invoke_cmd.add_argument("--args", default="{}", help="JSON object of arguments.")

    validate_cmd = sub.add_parser("validate")
    validate_cmd.add_argument("path", help="Path to chunk metadata JSON.")

    config_cmd = sub.add_parser("config")
    config_cmd.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help="Settings file.")
    config_cmd.add_argument(
        "--write",
        action="store_true",
        help="Write the effective settings back to the file.",
    )

    args = parser.parse_args(argv)

    if args.command == "invoke":
        try:
            payload = json.loads(args.args)
        except json.JSONDecodeError as exc:
            print(f"Invalid --args JSON: {exc}")
            return 1
        if not isinstance(payload, dict):
            print("--args must be a JSON object")
            return 1
        with CommandDispatcher(ConfigStore()) as dispatcher:
            response = dispatcher.invoke(args.name, payload)
            known = dispatcher.commands
        print(json.dumps(response.to_dict()))
        if args.name not in known:
            print(f"Available commands: {', '.join(known)}")
        return 0 if response.ok else 1

    if args.command == "validate":
        with open(args.path, "r", encoding="utf-8") as handle:
            chunk = json.load(handle)
        with CommandDispatcher(ConfigStore()) as dispatcher:
            response = dispatcher.invoke("validate_audio_chunk", {"chunk": chunk})
        print("OK" if response.ok else response.error)
        return 0 if response.ok else 1

    if args.command == "config":
        if os.path.exists(args.settings):
            settings = load_settings(args.settings)
        else:
            settings = AppSettings()
        print(f"Log dir: {settings.log_dir}")
        print(f"Debug logging: {settings.debug_logging}")
        print(f"Worker threads: {settings.worker_threads}")
        print(f"Tray title: {settings.tray_title}")
        print(f"Window title: {settings.window.title}")
        print(f"Start hidden: {settings.window.start_hidden}")
        if args.write:
            save_settings(args.settings, settings)
            print(f"Wrote {args.settings}")
        return 0

    if args.command == "gui":
        from .gui import launch_gui

        launch_gui(args.settings)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
