"""Metadata for NEXRAD Level II data files."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

_COMPRESSION_MARKER = b"BZ"
_COMPRESSION_MARKER_OFFSET = 28


@dataclass(frozen=True)
class FileMetadata:
    """Describes a NEXRAD WSR-88D radar data file.

    ``site`` is the radar site, e.g. ``KDMX``; ``date`` the day the data was
    collected; ``identifier`` the file's unique name for that site and date.
    """

    site: str
    date: datetime.date
    identifier: str


def is_compressed(data: bytes) -> bool:
    """Return True if the data file holds BZIP2-compressed records."""
    end = _COMPRESSION_MARKER_OFFSET + len(_COMPRESSION_MARKER)
    return len(data) >= end and bytes(data[_COMPRESSION_MARKER_OFFSET:end]) == _COMPRESSION_MARKER