"""
Configuration constants for the media organizer.
"""
import mimetypes

# --- File Type Definitions ---
# Containers the video metadata reader is allowed to look at
VIDEO_CONTAINER_EXTS = {'.mp4', '.mov', '.m4v', '.qt'}

# Extra MIME registrations. The platform table does not always know about
# camera RAW formats or HEIF, and those must still count as media.
EXTRA_MIME_TYPES = {
    '.cr2': 'image/x-canon-cr2',
    '.cr3': 'image/x-canon-cr3',
    '.nef': 'image/x-nikon-nef',
    '.arw': 'image/x-sony-arw',
    '.orf': 'image/x-olympus-orf',
    '.rw2': 'image/x-panasonic-rw2',
    '.dng': 'image/x-adobe-dng',
    '.raf': 'image/x-fuji-raf',
    '.heic': 'image/heic',
    '.heif': 'image/heif',
    '.m4v': 'video/x-m4v',
    '.mts': 'video/mp2t',
    '.m2ts': 'video/mp2t',
    '.3gp': 'video/3gpp',
}
for _ext, _type in EXTRA_MIME_TYPES.items():
    mimetypes.add_type(_type, _ext)

# --- Metadata Parsing ---
# exifread keys, highest priority first. The first tag *present* is the
# only one consulted.
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'Image DateTime',
    'EXIF DateTimeDigitized',
]

CAMERA_TAGS = [
    'Image Model',
    'Image Make',
]

EXIF_DATE_LENGTH = 19  # "YYYY:MM:DD HH:MM:SS"

# MediaInfo General-track field holding the container creation time
VIDEO_DATE_FIELD = 'encoded_date'

# QuickTime epoch; containers written without a clock report this
VIDEO_EMPTY_DATE_YEAR = 1904

UNKNOWN_CAMERA = 'Unknown'

# --- Stability Polling (watch mode) ---
STABILITY_INTERVAL_SEC = 5.0
STABILITY_REQUIRED_MATCHES = 3
STABILITY_MAX_ATTEMPTS = 360  # 30 minutes at 5 second intervals

# --- Organization ---
UNKNOWN_DIR = 'unknown'
FILENAME_TIMESTAMP_FORMAT = '%Y-%m-%dT%H-%M-%S'
COLLISION_SUFFIX = '{stem}_{counter}{ext}'

LOG_FILENAME = 'organizer.log'
