import argparse
import logging
import sys
from pathlib import Path

from . import config
from .core import OrganizerApp
from .exceptions import WatchError
from .models import OrganizerOptions


def setup_logging(dest_root: Path, verbose: bool):
    """Sets up logging to both console and a file in the destination."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create dest root if it doesn't exist so we can log there
    dest_root.mkdir(parents=True, exist_ok=True)
    log_file = dest_root / config.LOG_FILENAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def _add_shared_args(p: argparse.ArgumentParser):
    p.add_argument("-s", "--source", type=Path, required=True,
                   help="Source directory containing media files")
    p.add_argument("-d", "--destination", type=Path, required=True,
                   help="Destination directory for organized files")
    p.add_argument("-u", "--use-modified", action="store_true",
                   help="On EXIF failure, use file's last modified time (default: use creation time). "
                        "Linux usually has no creation time; the inode change time is used "
                        "instead, which renames and chmod also update, so prefer -u there")
    p.add_argument("--no-camera-model", action="store_true",
                   help="Disable camera model folders (default: group by camera model)")
    p.add_argument("--camera-model-prefix", action="store_true",
                   help="Put the camera folder first (Camera/YYYY/MM/DD). Default is YYYY/MM/DD/Camera")
    p.add_argument("--manual-camera-model", default=None,
                   help="Manually specify camera model")
    p.add_argument("--copy", action="store_true",
                   help="Copy files instead of moving (default is move)")
    p.add_argument("--keep-names", action="store_true",
                   help="Keep original filenames instead of renaming to ISO timestamp")
    p.add_argument("--dry-run", action="store_true",
                   help="Simulate actions without modifying disk")
    p.add_argument("--report-csv", type=Path, default=None,
                   help="Write a CSV of every placement after the one-shot pass")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="media-organizer",
        description="Sort photos and videos into date (and camera) folders",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = p.add_subparsers(dest="command", required=True)
    once = sub.add_parser("once", help="Process files once without monitoring")
    _add_shared_args(once)
    monitor = sub.add_parser("monitor", help="Monitor source directory and automatically process new files")
    _add_shared_args(monitor)

    return p.parse_args(argv)


def build_options(args) -> OrganizerOptions:
    return OrganizerOptions(
        destination_root=args.destination.resolve(),
        prefer_modified_time=args.use_modified,
        enable_camera_grouping=not args.no_camera_model,
        camera_grouping_is_prefix=args.camera_model_prefix,
        manual_camera_override=args.manual_camera_model,
        copy_instead_of_move=args.copy,
        keep_original_filenames=args.keep_names,
        dry_run=args.dry_run,
        report_csv=args.report_csv,
    )


def main(argv=None):
    args = parse_args(argv)
    options = build_options(args)
    src_root = args.source.resolve()

    # Checked before logging starts so no log file lands in the source tree
    if src_root == options.destination_root:
        logging.error("Destination must differ from the source directory.")
        sys.exit(1)

    setup_logging(options.destination_root, args.verbose)

    if not src_root.is_dir():
        logging.error(f"Source directory {src_root} does not exist.")
        sys.exit(1)

    logging.info("=== Media Organizer Started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Dest:   {options.destination_root}")

    app = OrganizerApp(src_root, options)

    try:
        if args.command == "monitor":
            app.monitor()
        else:
            app.run_once()
    except KeyboardInterrupt:
        app.stop()
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except WatchError as e:
        logging.error(f"Watch error: {e}")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during organization.")
        sys.exit(1)


if __name__ == "__main__":
    main()
