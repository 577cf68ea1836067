import argparse
import json
import logging
import os.path as path
import pathlib
import sys
from typing import Optional

from .build import build, build_report, describe_profile
from .config import DEFAULT_PROFILE, available_profiles, load_overrides, resolve_config
from .engines import ShapelyEngine
from .errors import FlatboardError


class LogLevelAction(argparse.Action):
    """
    Store the numeric logging level for a level name, case-insensitively
    """

    log_levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    def __init__(self, option_strings, dest: str, **kwargs):
        kwargs.setdefault("default", logging.INFO)
        kwargs.setdefault("type", str.upper)
        kwargs.setdefault("choices", list(self.log_levels))
        kwargs.setdefault("help", "Logging level (default: INFO).")
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, self.log_levels[values])


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flatboard", description="Parameterized keyboard generator.")
    parser.add_argument("--log-level", action=LogLevelAction)
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("list", help="List all available profiles.")

    build_parser = commands.add_parser("build", help="Build a keyboard from a profile.")
    build_parser.add_argument("profile", nargs="?", default=DEFAULT_PROFILE, help=f"Profile name (default: {DEFAULT_PROFILE}).")
    build_parser.add_argument("--config", type=pathlib.Path, help="A JSON file of overrides applied on top of the profile.")
    build_parser.add_argument("--output", type=pathlib.Path, default=pathlib.Path("things"), help="Output directory.")
    build_parser.add_argument("--poles", action="store_true", help="Include the extreme outline poles in the report.")
    build_parser.add_argument("--step", action="store_true", help="Also export the wall box as STEP (requires cadquery).")
    return parser


def list_profiles():
    print("Available keyboard profiles:")
    for name in available_profiles():
        print(f"  * {describe_profile(name)}")


def export_wall_box(keyboard, outline_engine, save_path: pathlib.Path, config_name: str):
    from .case import create_wall_box
    from .engines.cadquery_engine import CadQueryEngine

    geometry_engine = CadQueryEngine()
    shape = create_wall_box(keyboard.outlines, keyboard.config, outline_engine, geometry_engine)
    for exporter in geometry_engine.exporters():
        exporter.export_geometry(shape, save_path / (config_name + "_walls" + exporter.file_type()))


def run_build(args: argparse.Namespace):
    overrides = load_overrides(args.config) if args.config else None
    config = resolve_config(args.profile, overrides)
    outline_engine = ShapelyEngine(config.resolution)
    keyboard = build(config, outline_engine)

    save_path = args.output
    if not path.isdir(save_path):
        save_path.mkdir(parents=True)

    report_path = save_path / f"{args.profile}.json"
    with open(report_path, mode="wt", encoding="utf-8") as fid:
        json.dump(build_report(keyboard, outline_engine, include_poles=args.poles), fid, indent=2)
    logging.info("Wrote %s", report_path)

    if args.step:
        export_wall_box(keyboard, outline_engine, save_path, args.profile)

    print(f"Generated keyboard for profile: {args.profile}")
    print(f"  * Keyboard size: {len(keyboard.key_placements)} keys")
    print(f"  * Plate dimensions: {keyboard.dimensions.plate_width:.1f}x{keyboard.dimensions.plate_height:.1f}mm")


def main(argv=None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level)

    try:
        if args.command == "list":
            list_profiles()
        elif args.command == "build":
            run_build(args)
        else:
            parser.print_help()
    except FlatboardError as e:
        logging.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
