import logging
from pathlib import Path
from typing import Callable, List, Optional

from .. import config
from ..models import CaptureMetadata, DateSource
from .extract import MetadataExtractor


class MetadataResolver:
    """
    Resolves one capture timestamp per file.

    Sources are tried in order and the first hit wins:
      1. EXIF (DateTimeOriginal > DateTime > DateTimeDigitized)
      2. Video container creation date (mp4/mov/m4v/qt only)
      3. Filesystem modified or created time

    Steps 1 and 2 are best effort. Step 3 always answers unless the file
    cannot be stat'ed, in which case MetadataExtractionError propagates.
    """

    def __init__(self, extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor or MetadataExtractor()
        self._strategies: List[Callable[[Path], Optional[CaptureMetadata]]] = [
            self._from_exif,
            self._from_video,
        ]

    def resolve(self, path: Path, prefer_modified_over_created: bool = False) -> CaptureMetadata:
        path = Path(path)
        for strategy in self._strategies:
            meta = strategy(path)
            if meta is not None:
                logging.debug(f"Resolved date for {path} from {meta.source.value}: {meta.timestamp}")
                return meta

        logging.debug(f"Falling back to file metadata for {path}")
        return self._from_filesystem(path, prefer_modified_over_created)

    def _from_exif(self, path: Path) -> Optional[CaptureMetadata]:
        found = self.extractor.get_exif_date(path)
        if found is None:
            return None

        dt, tag = found
        source = DateSource.EXIF_PRIMARY if tag == config.DATE_TAGS[0] else DateSource.EXIF_FALLBACK
        return CaptureMetadata(dt, source)

    def _from_video(self, path: Path) -> Optional[CaptureMetadata]:
        if path.suffix.lower() not in config.VIDEO_CONTAINER_EXTS:
            return None

        dt = self.extractor.get_video_date(path)
        if dt is None:
            return None
        return CaptureMetadata(dt, DateSource.VIDEO_CONTAINER)

    def _from_filesystem(self, path: Path, prefer_modified: bool) -> CaptureMetadata:
        dt = self.extractor.get_filesystem_time(path, prefer_modified)
        source = DateSource.FILESYSTEM_MODIFIED if prefer_modified else DateSource.FILESYSTEM_CREATED
        return CaptureMetadata(dt, source)
