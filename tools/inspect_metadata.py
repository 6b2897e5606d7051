#!/usr/bin/env python3
"""
Show every source the organizer would consult for one file, and where
the file would land.

Usage:
  python tools/inspect_metadata.py <media_file> [<destination_root>]

Example:
  python tools/inspect_metadata.py "path/to/IMG_0001.JPG" /mnt/archive
"""

import sys
from pathlib import Path

from media_organizer import config
from media_organizer.core import Dispatcher
from media_organizer.metadata.extract import MetadataExtractor
from media_organizer.models import CandidateFile, OrganizerOptions


def inspect_file(media_path, dest_root="."):
    path = Path(media_path)
    if not path.exists():
        print(f"Error: File not found: {media_path}")
        sys.exit(1)

    candidate = CandidateFile.from_path(path)
    print(f"Inspecting: {path.name} ({candidate.kind.value}, {candidate.mime_type or 'no MIME type'})\n")

    extractor = MetadataExtractor()

    print("=" * 70)
    print("EXIF")
    print("=" * 70)
    tags = extractor.read_exif_tags(path) or {}
    for tag in config.DATE_TAGS + config.CAMERA_TAGS:
        print(f"  {tag}: {tags[tag] if tag in tags else '(absent)'}")
    print(f"  -> date: {extractor.get_exif_date(path)}")

    if candidate.is_video_container:
        print("\n" + "=" * 70)
        print("VIDEO CONTAINER")
        print("=" * 70)
        print(f"  -> {config.VIDEO_DATE_FIELD}: {extractor.get_video_date(path)}")

    print("\n" + "=" * 70)
    print("FILESYSTEM")
    print("=" * 70)
    print(f"  modified: {extractor.get_filesystem_time(path, prefer_modified=True)}")
    print(f"  created:  {extractor.get_filesystem_time(path, prefer_modified=False)}")

    print("\n" + "=" * 70)
    print("PLACEMENT (move mode, default naming)")
    print("=" * 70)
    dispatcher = Dispatcher(OrganizerOptions(destination_root=Path(dest_root)))
    placement = dispatcher.plan(path)
    print(f"  {placement.destination if placement else '(skipped)'}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python inspect_metadata.py <media_file> [<destination_root>]")
        sys.exit(1)
    inspect_file(*sys.argv[1:3])
