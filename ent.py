"""
ent — Seeded Noise Image Generator
Renders a pseudo-random still image with FFmpeg and shows it in an image
viewer. With a delay argument it keeps generating, like a slideshow.

Usage:
    python ent.py            # one image
    python ent.py 5          # a new image every 5 seconds
"""

import argparse
import logging
import math
import os
import sqlite3
import sys
from logging.handlers import RotatingFileHandler

from noisegen import __version__
from noisegen import database as db
from noisegen.config import load_settings, save_settings
from noisegen.dependency_checker import ensure_dependencies, DependencyError
from noisegen.generator import NoiseGenerator, GenerationContext
from noisegen.housekeeping import prune_outputs
from noisegen.slideshow import run_once, run_loop
from noisegen.viewer import ViewerController

logger = logging.getLogger("ent")


# ═════════════════════════════════════════════════════════════════════════════════
# LOGGING
# ═════════════════════════════════════════════════════════════════════════════════

def setup_logging(verbose=False, log_to_file=True):
    """Diagnostics go to stderr (and a rotating log file); stdout is left for paths."""
    root = logging.getLogger()
    if root.hasHandlers():
        root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S')

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)

    if log_to_file:
        try:
            os.makedirs(db.get_state_dir(), exist_ok=True)
            log_file = os.path.join(db.get_state_dir(), "ent.log")
            file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=2)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            logger.debug("File logging disabled: %s", e)


# ═════════════════════════════════════════════════════════════════════════════════
# CLI
# ═════════════════════════════════════════════════════════════════════════════════

def _delay(value):
    try:
        delay = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"delay must be a number of seconds, got {value!r}")
    if not math.isfinite(delay):
        raise argparse.ArgumentTypeError(f"delay must be a finite number of seconds, got {value!r}")
    if delay < 0:
        raise argparse.ArgumentTypeError("delay must be >= 0")
    return delay


def _positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return number


def build_parser():
    p = argparse.ArgumentParser(
        prog="ent",
        description="Generate a seeded noise image with FFmpeg and display it",
    )
    p.add_argument("delay", nargs="?", type=_delay,
                   help="Seconds between images; omit to generate a single image")
    p.add_argument("--iterations", type=_positive_int, default=None, help=argparse.SUPPRESS)
    p.add_argument("--output-dir", help="Directory for generated images")
    p.add_argument("--resolution", help="Output size, WIDTHxHEIGHT (default 800x600)")
    p.add_argument("--engine", help="FFmpeg executable")
    p.add_argument("--viewer", help="Image viewer executable (default ristretto)")
    p.add_argument("--keep", type=int, help="Images kept by the startup cleanup (default 20)")
    p.add_argument("--seed", type=int, help="Fixed seed instead of the timestamp checksum")
    p.add_argument("--no-viewer", action="store_true", help="Only write images, do not display them")
    p.add_argument("--save-settings", action="store_true",
                   help="Remember the given options for later runs")
    p.add_argument("--history", type=int, nargs="?", const=10, metavar="N",
                   help="Print the last N generations and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def print_history(limit, out=None):
    out = out if out is not None else sys.stdout
    for row in db.get_recent_images(limit):
        print(f"{row['created_at']}  {row['status']:<6}  seed={row['seed']:<6}  "
              f"{row['pattern']:<16}  {row['path']}", file=out)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.history is not None:
        print_history(args.history)
        return 0

    overrides = {
        "output_dir": args.output_dir,
        "resolution": args.resolution,
        "engine": args.engine,
        "viewer": args.viewer,
        "keep": args.keep,
    }
    try:
        settings = load_settings(overrides)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except sqlite3.Error as e:
        logger.warning("State database unavailable (%s), using defaults", e)
        settings = load_settings(overrides, use_db=False)

    if args.save_settings:
        save_settings(settings)

    show = not args.no_viewer
    try:
        status = ensure_dependencies(settings, strict=True, need_viewer=show)
    except DependencyError as e:
        logger.error("%s", e)
        return 1
    show = show and status["viewer"]

    os.makedirs(settings.output_dir, exist_ok=True)
    prune_outputs(settings.output_dir, settings.keep)

    context = GenerationContext()
    generator = NoiseGenerator(settings, context, fixed_seed=args.seed)
    viewer = ViewerController(settings, context, generator) if show else None

    if args.delay is None:
        path = run_once(generator, viewer)
        return 0 if path is not None else 1

    try:
        run_loop(generator, viewer, args.delay, iterations=args.iterations)
    except KeyboardInterrupt:
        logger.info("Stopped after %d image(s)", generator.attempts)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
