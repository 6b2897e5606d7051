import logging
import re
from pathlib import Path
from typing import Optional

from .. import config
from .extract import MetadataExtractor

_WHITESPACE = re.compile(r'\s')


def normalize_camera(value: str) -> str:
    """'Canon EOS R5 ' -> 'Canon_EOS_R5'"""
    return _WHITESPACE.sub('_', value.strip())


class CameraResolver:
    """
    EXIF Model, then Make, then the "Unknown" sentinel. Never raises:
    a missing camera must not block placing a file that has a date.
    """

    def __init__(self, extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor or MetadataExtractor()

    def resolve(self, path: Path) -> str:
        raw = self.extractor.get_exif_camera(Path(path))
        if raw is None:
            logging.debug(f"No camera model found in EXIF data for {path}")
            return config.UNKNOWN_CAMERA
        return normalize_camera(raw)
