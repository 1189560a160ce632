import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import MediaSequencerApp
from .exceptions import MediaSequencerError
from . import config


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up console logging (stderr) and an optional log file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Media Sequencer: prefix photos and videos with their chronological order")

    p.add_argument("target", type=Path, nargs="?", default=config.DEFAULT_TARGET_DIR,
                   help="Directory holding the media files (default: current directory)")

    p.add_argument("--prefix", default=config.DEFAULT_PREFIX, help="Text inserted between the counter and the original name")
    p.add_argument("--start", type=int, default=config.DEFAULT_START, help="First sequence number")
    p.add_argument("--width", type=int, default=config.DEFAULT_PAD_WIDTH, help="Zero-padding width of the counter")
    p.add_argument("--dry-run", action="store_true", help="Show the renames without modifying disk")
    p.add_argument("--manifest", type=Path, default=None, help="Write a CSV of old/new names to this path")
    p.add_argument("--no-progress", action="store_true", help="Hide progress bars")
    p.add_argument("--log-file", type=Path, default=None, help="Also write log messages to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if args.width < 1:
        p.error("--width must be at least 1")
    return args


def main(argv=None):
    args = parse_args(argv)

    target = args.target.resolve()
    setup_logging(args.verbose, args.log_file)

    logging.info("=== Media Sequencer Started ===")
    logging.info(f"Target: {target}")

    app = MediaSequencerApp(show_progress=not args.no_progress)

    try:
        app.run(
            target_dir=target,
            prefix=args.prefix,
            start=args.start,
            width=args.width,
            dry_run=args.dry_run,
            manifest=args.manifest
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except MediaSequencerError as e:
        logging.error(str(e))
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during sequencing.")
        sys.exit(1)


if __name__ == "__main__":
    main()
