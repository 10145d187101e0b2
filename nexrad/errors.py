"""Exceptions raised while handling NEXRAD data."""


class NexradError(Exception):
    """Base class for errors specific to NEXRAD data handling."""

    default_message = "NEXRAD data error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class DecompressUnsupportedFileError(NexradError):
    """Raised when asked to decompress data that is not compressed."""

    default_message = "cannot decompress uncompressed data"


class UnhandledProductError(NexradError, ValueError):
    """Raised when a data block or product name is not recognised."""

    default_message = "unhandled product type encountered"