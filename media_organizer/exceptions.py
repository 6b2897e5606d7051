"""
Custom exception hierarchy for the media organizer.

Recoverable metadata problems (missing EXIF, unreadable video container)
never surface as exceptions; they fall through to the next source. The
types below are the failures that end processing of a file or a session.
"""


class OrganizerError(Exception):
    """Base exception for all media organizer errors."""
    pass


class MetadataExtractionError(OrganizerError):
    """Raised when not even filesystem timestamps can be read for a file."""
    pass


class PlanningError(OrganizerError):
    """Raised when a destination path cannot be built for a file."""
    pass


class FileOperationError(OrganizerError):
    """Raised when file copy/move operations fail."""
    pass


class WatchError(OrganizerError):
    """Raised when the filesystem notification source fails."""
    pass
