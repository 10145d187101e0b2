import bz2
import struct

import pytest

from nexrad.decompress import decompress_file
from nexrad.errors import DecompressUnsupportedFileError, NexradError
from nexrad.file_metadata import is_compressed

HEADER = struct.pack(">12sII4s", b"AR2V0006.733", 17404, 86253000, b"KXYZ")


def _block(payload: bytes) -> bytes:
    compressed = bz2.compress(payload)
    return struct.pack(">i", len(compressed)) + compressed


def test_uncompressed_input_is_rejected():
    with pytest.raises(DecompressUnsupportedFileError):
        decompress_file(HEADER + b"\x00" * 100)


def test_short_input_is_rejected():
    with pytest.raises(DecompressUnsupportedFileError):
        decompress_file(b"BZ")


def test_compressed_fixture_is_detected():
    assert is_compressed(HEADER + _block(b"payload"))


def test_single_block_round_trip():
    payload = b"radar records " * 50
    assert decompress_file(HEADER + _block(payload)) == HEADER + payload


def test_multiple_blocks_are_concatenated():
    first = b"first block " * 20
    second = b"second block " * 30
    third = bytes(range(256))
    data = HEADER + _block(first) + _block(second) + _block(third)
    assert decompress_file(data) == HEADER + first + second + third


def test_header_is_copied_unchanged():
    result = decompress_file(HEADER + _block(b"x"))
    assert result[: len(HEADER)] == HEADER


def test_truncated_block_raises():
    data = HEADER + _block(b"some data " * 100)
    with pytest.raises(NexradError):
        decompress_file(data[:-10])


def test_trailing_bytes_shorter_than_size_word_raise():
    with pytest.raises(NexradError):
        decompress_file(HEADER + _block(b"abc") + b"\x00\x01")