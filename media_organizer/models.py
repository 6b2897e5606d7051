import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from . import config


class MediaKind(Enum):
    IMAGE = 'image'
    VIDEO = 'video'
    OTHER = 'other'


class DateSource(Enum):
    """Where a capture timestamp came from, in fallback order."""
    EXIF_PRIMARY = 'exif_primary'          # DateTimeOriginal
    EXIF_FALLBACK = 'exif_fallback'        # DateTime / DateTimeDigitized
    VIDEO_CONTAINER = 'video_container'
    FILESYSTEM_MODIFIED = 'fs_modified'
    FILESYSTEM_CREATED = 'fs_created'


@dataclass(frozen=True)
class CandidateFile:
    """
    One path handed to the dispatcher, classified by extension only.
    """
    path: Path
    kind: MediaKind
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> 'CandidateFile':
        path = Path(path)
        if not path.suffix:
            return cls(path, MediaKind.OTHER)

        mime_type, _ = mimetypes.guess_type(path.name, strict=False)
        if not mime_type:
            return cls(path, MediaKind.OTHER)

        top_level = mime_type.split('/', 1)[0]
        if top_level == 'image':
            return cls(path, MediaKind.IMAGE, mime_type)
        if top_level == 'video':
            return cls(path, MediaKind.VIDEO, mime_type)
        return cls(path, MediaKind.OTHER, mime_type)

    @property
    def is_media(self) -> bool:
        return self.kind is not MediaKind.OTHER

    @property
    def is_video_container(self) -> bool:
        return self.path.suffix.lower() in config.VIDEO_CONTAINER_EXTS


@dataclass(frozen=True)
class CaptureMetadata:
    """
    A resolved capture time. Always timezone-aware UTC.
    """
    timestamp: datetime
    source: DateSource

    def __post_init__(self):
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() != timezone.utc.utcoffset(None):
            raise ValueError(f"Capture timestamp must be UTC, got {self.timestamp!r}")


@dataclass(frozen=True)
class DestinationPlan:
    root: Path
    directory: Tuple[str, ...]
    filename: str

    @property
    def path(self) -> Path:
        return self.root.joinpath(*self.directory, self.filename)


@dataclass(frozen=True)
class Placement:
    """The (source, destination, copy-or-move) decision for one file."""
    source: Path
    destination: Path
    is_copy: bool


@dataclass
class OrganizerOptions:
    """
    Per-session configuration, usually built from the command line.
    """
    destination_root: Path
    prefer_modified_time: bool = False
    enable_camera_grouping: bool = True
    camera_grouping_is_prefix: bool = False
    manual_camera_override: Optional[str] = None
    copy_instead_of_move: bool = False
    keep_original_filenames: bool = False
    dry_run: bool = False
    report_csv: Optional[Path] = field(default=None)
