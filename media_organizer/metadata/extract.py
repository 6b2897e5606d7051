import logging
import os
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Tuple, Dict, Any

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class MetadataExtractor:
    """
    Raw access to the three places a capture time can live.

    Strategies:
      - Images: 'exifread' over the file's byte container.
      - Video: 'pymediainfo' creation date of the container.
      - Anything: filesystem modified/created timestamps.

    EXIF and video readers never raise; a missing or broken source is
    reported as None so the caller can fall through to the next one.
    """

    def read_exif_tags(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            with path.open('rb') as f:
                # details=False skips MakerNote parsing
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        return tags or None

    def get_exif_date(self, path: Path) -> Optional[Tuple[datetime, str]]:
        """
        Returns (capture_datetime, tag_name) for the first date tag present.

        Only the first tag found in config.DATE_TAGS is consulted. If its
        value is malformed the lower-priority tags are NOT tried.
        """
        tags = self.read_exif_tags(path)
        if not tags:
            return None

        for tag in config.DATE_TAGS:
            if tag not in tags:
                continue
            dt = parse_exif_datetime(str(tags[tag]))
            if dt is None:
                logging.debug(f"Malformed {tag} value {str(tags[tag])!r} in {path}")
                return None
            return dt, tag

        logging.debug(f"No date found in EXIF data for {path}")
        return None

    def get_exif_camera(self, path: Path) -> Optional[str]:
        """Returns the raw Model (or Make) value, un-normalized."""
        tags = self.read_exif_tags(path)
        if not tags:
            return None

        for tag in config.CAMERA_TAGS:
            if tag in tags:
                value = str(tags[tag]).strip()
                if value:
                    return value
        return None

    def get_video_date(self, path: Path) -> Optional[datetime]:
        """Container creation date from MediaInfo's General track."""
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            # Missing libmediainfo and corrupt containers both land here
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            value = getattr(track, config.VIDEO_DATE_FIELD, None)
            if value:
                return parse_video_date(str(value))
        return None

    def get_filesystem_time(self, path: Path, prefer_modified: bool) -> datetime:
        """
        Modified or created time of the file as UTC.

        Platforms that do not record a birth time (most Linux filesystems
        as seen through os.stat) report the inode change time instead.

        Raises:
            MetadataExtractionError: the file cannot be stat'ed.
        """
        try:
            st = os.stat(path)
        except OSError as e:
            raise MetadataExtractionError(f"Failed to read metadata for {path}: {e}") from e

        if prefer_modified:
            ts = st.st_mtime
        else:
            ts = getattr(st, 'st_birthtime', None)
            if ts is None:
                ts = st.st_ctime

        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise MetadataExtractionError(f"Invalid filesystem timestamp for {path}: {e}") from e


def parse_exif_datetime(value: str) -> Optional[datetime]:
    """
    Parses the fixed-width EXIF form "YYYY:MM:DD HH:MM:SS" as UTC.

    Only the first 19 characters matter; trailing sub-second or offset
    text is ignored. Returns None for short values, non-numeric fields,
    or impossible calendar values.
    """
    if not value or len(value) < config.EXIF_DATE_LENGTH:
        return None

    fields = (value[0:4], value[5:7], value[8:10], value[11:13], value[14:16], value[17:19])
    if not all(f.isascii() and f.isdigit() for f in fields):
        return None

    year, month, day, hour, minute, second = (int(f) for f in fields)
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_video_date(value: str) -> Optional[datetime]:
    """
    Handles MediaInfo date spellings:
      "UTC 2023-07-04 10:15:30", "2023-07-04 10:15:30 UTC",
      "2023-07-04 10:15:30.120 UTC", and " / " separated duplicates.
    """
    if not value:
        return None

    clean = value.split(" / ")[0].replace("UTC", "").strip()
    if "." in clean:
        clean = clean.split(".")[0]

    try:
        dt = datetime.fromisoformat(clean)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    if dt.year <= config.VIDEO_EMPTY_DATE_YEAR:
        return None
    return dt
