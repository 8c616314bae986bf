"""
Custom exception hierarchy for the duplicate handler.

Only configuration problems are fatal. The other kinds are raised at the
boundary of an external tool or filesystem call and handled one file at a
time by the component that made the call.
"""


class MediaDedupeError(Exception):
    """Base exception for all duplicate handler errors."""
    pass


class ConfigurationError(MediaDedupeError):
    """Raised when the source/quarantine setup is unusable."""
    pass


class FileHashError(MediaDedupeError):
    """Raised when file hashing fails."""
    pass


class MetadataExtractionError(MediaDedupeError):
    """Raised when metadata cannot be extracted from a file."""
    pass


class FileOperationError(MediaDedupeError):
    """Raised when a relocation cannot be carried out."""
    pass
