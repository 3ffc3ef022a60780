"""
Meadow - single entry point for all modes.

Usage:
    uv run mjpython main.py view [--seed N] [--assets DIR]   # MuJoCo viewer
    uv run python main.py render [--frames N] [--gif]        # Offscreen frames
    uv run python main.py describe [--seed N]                # Text summary
    uv run python main.py describe --smoketest               # Small scene, no assets

Requires mjpython (not plain python) for the MuJoCo viewer on macOS.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

from meadow.config import Config

log = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure root logger level and install an excepthook.

    Unhandled exceptions are logged before the default hook prints them.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _is_mjpython() -> bool:
    """Check if we're running under mjpython."""
    return "MJPYTHON_BIN" in os.environ


def _check_mjpython():
    """Warn if not launched via mjpython (needed for MuJoCo viewer on macOS)."""
    if shutil.which("mjpython") is None:
        return  # mjpython not installed, nothing to check
    if not _is_mjpython():
        print(
            "Warning: the viewer should be launched with mjpython.\n"
            "  Use: uv run mjpython main.py view\n"
        )


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Meadow - procedural outdoor scene",
    )
    sub = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, default=None, help="Scene seed (default: random)")
    common.add_argument("--smoketest", action="store_true", help="Small scene, no external assets")
    common.add_argument("--assets", type=str, default=None, help="Directory holding textures/ and sky3.jpg")

    # view
    sub.add_parser("view", parents=[common], help="Launch MuJoCo viewer")

    # render
    p_render = sub.add_parser("render", parents=[common], help="Render frames offscreen")
    p_render.add_argument("--frames", type=int, default=120, help="Frames to simulate")
    p_render.add_argument("--every", type=int, default=1, help="Save every Nth frame")
    p_render.add_argument("--out", type=str, default="renders", help="Output directory")
    p_render.add_argument("--gif", action="store_true", help="Also write an animated GIF")

    # describe
    sub.add_parser("describe", parents=[common], help="Print a summary of the populated scene")

    return parser


def _config_from_args(args) -> Config:
    config = Config.for_smoketest() if args.smoketest else Config()
    if args.seed is not None:
        config.seed = args.seed
    if args.assets is not None:
        config.assets.root = args.assets
    return config


def main():
    _setup_logging()

    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = _config_from_args(args)

    if args.command == "view":
        _check_mjpython()
        from meadow.view import run_view
        run_view(config)

    elif args.command == "render":
        from meadow.render_frames import render_frames
        paths = render_frames(
            config, args.frames, Path(args.out), every=args.every, gif=args.gif
        )
        print(f"Saved {len(paths)} files to {args.out}/")

    elif args.command == "describe":
        from meadow.composer import describe_world
        from meadow.populate import populate
        world = populate(config, seed=config.seed)
        print(describe_world(world, seed=config.seed))


if __name__ == "__main__":
    main()
