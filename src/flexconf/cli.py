#!/usr/bin/env python3
"""flexconf command line.

Usage:
    flexconf label --backend MME capture.yaml [--json]
    flexconf diff current.yaml saved.yaml
    flexconf color "#0078d4" 70 [--contrast 10]
    flexconf backends
    flexconf check-update 1.2.0

A capture file stands in for a live enumeration:

    input:
      - Microphone (Realtek(R) Audio)
    output:
      - Speakers (Realtek(R) Audio)

It may also hold one such section per backend name.
"""
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import yaml

from .config.compare import configs_equal, diff_configs
from .config.schema import FlexConfig, normalize_config
from .config.settings import AppSettings, SettingsError, load_settings
from .devices.enumeration import RawDevices, load_devices_sync
from .devices.labeler import DeviceEntry
from .updates import check_latest_version
from .utils.color import ColorFormatError, adjust_brightness
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CHANGED = 1
EXIT_ERROR = 2


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def capture_enumerator(path: Path):
    """Enumerator that replays device names recorded in a YAML/JSON file."""
    def enumerate_devices(backend: str) -> RawDevices:
        data = _read_yaml(path) or {}
        section = data.get(backend, data)
        return list(section.get("input") or []), list(section.get("output") or [])
    return enumerate_devices


def _entry_rows(direction: str, entries: list[DeviceEntry]) -> list[str]:
    lines = [f"{direction}:"]
    for entry in entries:
        device = f"  ({entry.device})" if entry.device else ""
        lines.append(f"  [{entry.value:>2}] {entry.label}{device}")
    return lines


def cmd_label(args, settings: AppSettings) -> int:
    backend = args.backend or settings.default_backend
    lists = load_devices_sync(capture_enumerator(args.capture), backend, settings.enumeration)

    if args.json:
        print(json.dumps({
            "backend": lists.backend,
            "input": [asdict(e) for e in lists.inputs],
            "output": [asdict(e) for e in lists.outputs],
        }, indent=2))
    else:
        print("\n".join(_entry_rows("Input", lists.inputs) + _entry_rows("Output", lists.outputs)))
    return EXIT_OK


def _load_config(path: Path) -> Optional[FlexConfig]:
    data = _read_yaml(path)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a configuration mapping")
    return FlexConfig.from_dict(data)


def cmd_diff(args, settings: AppSettings) -> int:
    current = _load_config(args.current)
    original = _load_config(args.original)

    if args.normalize:
        current = normalize_config(current) if current else None
        original = normalize_config(original) if original else None

    if configs_equal(current, original):
        print("No changes detected")
        return EXIT_OK

    print(diff_configs(current, original).to_text())
    return EXIT_CHANGED


def cmd_color(args, settings: AppSettings) -> int:
    print(adjust_brightness(args.color, args.brightness, args.contrast))
    return EXIT_OK


def cmd_backends(args, settings: AppSettings) -> int:
    for backend in settings.backends:
        marker = "*" if backend.value == settings.default_backend else " "
        print(f"{marker} {backend.display_name:<12} {backend.value}")
    return EXIT_OK


def cmd_check_update(args, settings: AppSettings) -> int:
    info = asyncio.run(check_latest_version(args.current_version, settings.update_check))
    if info.latest_version is None:
        print("Could not determine the latest version")
        return EXIT_ERROR
    if info.update_available:
        print(f"Update available: {info.current_version} -> {info.latest_version}")
        return EXIT_CHANGED
    print(f"Up to date ({info.current_version})")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flexconf",
        description="Audio driver configuration helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
    0   success / no changes
    1   configs differ / update available
    2   error
""",
    )
    parser.add_argument("--settings", type=Path, help="Settings file (default: search)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", action="store_true", help="Also log to the rotating log file")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("label", help="Label and sort recorded device names")
    p.add_argument("capture", type=Path, help="YAML/JSON file with input/output name lists")
    p.add_argument("--backend", help="Backend the names came from (default: settings)")
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p.set_defaults(func=cmd_label)

    p = sub.add_parser("diff", help="Compare an edited config with the saved one")
    p.add_argument("current", type=Path)
    p.add_argument("original", type=Path)
    p.add_argument("--normalize", action="store_true", help="Round latencies as on save first")
    p.set_defaults(func=cmd_diff)

    p = sub.add_parser("color", help="Adjust brightness/contrast of a color")
    p.add_argument("color", help="#rrggbb or rgb(r, g, b)")
    p.add_argument("brightness", type=float, help="Brightness change in percent")
    p.add_argument("--contrast", type=float, default=None, help="Contrast change in percent")
    p.set_defaults(func=cmd_color)

    p = sub.add_parser("backends", help="List known backends")
    p.set_defaults(func=cmd_backends)

    p = sub.add_parser("check-update", help="Check for a newer release")
    p.add_argument("current_version")
    p.set_defaults(func=cmd_check_update)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the flexconf CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_to_file=args.log_file,
    )

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        logger.error(str(e))
        return EXIT_ERROR

    try:
        return args.func(args, settings)
    except ColorFormatError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
