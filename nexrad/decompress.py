"""Decompression of BZIP2-compressed NEXRAD Level II data files."""

from __future__ import annotations

import bz2

from nexrad.errors import DecompressUnsupportedFileError, NexradError
from nexrad.file_metadata import is_compressed
from nexrad.model import VolumeHeaderRecord

_CONTROL_WORD_SIZE = 4


def decompress_file(data: bytes) -> bytes:
    """Decompress a compressed data file and return the decompressed copy.

    The volume header is copied through unchanged. Each compressed block
    after it is preceded by a four-byte size word, which is skipped.
    Raises DecompressUnsupportedFileError if the data is not compressed.
    """
    if not is_compressed(data):
        raise DecompressUnsupportedFileError()

    data = bytes(data)
    header_size = VolumeHeaderRecord.SIZE
    output = bytearray(data[:header_size])
    remaining = data[header_size:]

    while True:
        if len(remaining) < _CONTROL_WORD_SIZE:
            raise NexradError("truncated compressed block size")
        remaining = remaining[_CONTROL_WORD_SIZE:]

        decompressor = bz2.BZ2Decompressor()
        try:
            output += decompressor.decompress(remaining)
        except OSError as error:
            raise NexradError(f"invalid compressed block: {error}") from error
        if not decompressor.eof:
            raise NexradError("truncated compressed block")

        remaining = decompressor.unused_data
        if not remaining:
            break

    return bytes(output)