"""
Track Solo - Error types

Every failure the pipeline can report derives from ``TrackSoloError`` so
callers can catch the whole family in one place.  The value-shaped errors
also subclass ``ValueError``.
"""


class TrackSoloError(Exception):
    """Base class for all pipeline errors."""


class MissingExtensionError(TrackSoloError, ValueError):
    """The input file name has no ``.`` separator."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"No file extension in file name: {file_name!r}")


class FormatError(TrackSoloError, ValueError):
    """Bytes are not a valid SMF stream, or a document could not be written."""


class TextDecodeError(TrackSoloError, ValueError):
    """A meta text payload is not valid UTF-8.

    Only raised internally by the track namer, which falls back to a
    positional name instead of propagating it.
    """


class ArchiveError(TrackSoloError):
    """Writing the ZIP archive failed or an entry name was used twice."""


class InvalidAmountError(TrackSoloError, ValueError):
    """A velocity reduction amount outside 0-127 or not a number."""
