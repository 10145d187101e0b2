"""Decoding of NEXRAD WSR-88D Level II data files."""

from __future__ import annotations

import io
import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from nexrad.decompress import decompress_file
from nexrad.file_metadata import is_compressed
from nexrad.model import (
    DataBlockHeader,
    DataBlockProduct,
    DataMoment,
    ElevationData,
    GenericData,
    Message31,
    Message31Header,
    MessageHeader,
    RadialData,
    VolumeData,
    VolumeHeaderRecord,
)

_MESSAGE_31 = 31
_FIXED_MESSAGE_SIZE = 2432
_POINTER = struct.Struct(">I")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    raw = stream.read(size)
    if len(raw) < size:
        raise EOFError(f"expected {size} bytes, got {len(raw)}")
    return raw


def _decode_message_31(stream: BinaryIO) -> Message31:
    start = stream.tell()
    message = Message31(Message31Header.read(stream))

    count = message.header.data_block_count
    raw_pointers = _read_exact(stream, count * _POINTER.size)
    pointers = [value for (value,) in _POINTER.iter_unpack(raw_pointers)]

    for pointer in pointers:
        stream.seek(start + pointer)
        product = DataBlockHeader.read(stream).data_block_product()
        stream.seek(-DataBlockHeader.SIZE, io.SEEK_CUR)

        if product is DataBlockProduct.VOLUME_DATA:
            message.volume_data = VolumeData.read(stream)
        elif product is DataBlockProduct.ELEVATION_DATA:
            message.elevation_data = ElevationData.read(stream)
        elif product is DataBlockProduct.RADIAL_DATA:
            message.radial_data = RadialData.read(stream)
        else:
            generic = GenericData.read(stream)
            gates = _read_exact(stream, generic.moment_size())
            message.set_data_moment(DataMoment(product, generic, gates))

    return message


@dataclass
class DataFile:
    """A decoded data file: its volume header and radials grouped by elevation number."""

    volume_header: VolumeHeaderRecord
    elevation_scans: dict[int, list[Message31]] = field(default_factory=dict)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> DataFile:
        """Load and decode a data file from disk, decompressing it if needed."""
        with open(path, "rb") as handle:
            return cls.from_bytes(handle.read())

    @classmethod
    def from_bytes(cls, data: bytes) -> DataFile:
        """Decode a data file held in memory, decompressing it if needed.

        Raises UnhandledProductError for unknown data blocks and EOFError
        for truncated data.
        """
        if is_compressed(data):
            data = decompress_file(data)
        data = bytes(data)

        stream = io.BytesIO(data)
        volume_header = VolumeHeaderRecord.read(stream)
        scans: dict[int, list[Message31]] = {}

        while stream.tell() < len(data):
            header = MessageHeader.read(stream)
            if header.msg_type == _MESSAGE_31:
                message = _decode_message_31(stream)
                scans.setdefault(message.header.elev_num, []).append(message)
            else:
                stream.seek(_FIXED_MESSAGE_SIZE - MessageHeader.SIZE, io.SEEK_CUR)

        return cls(volume_header, dict(sorted(scans.items())))

    def sorted_elevation_scans(self) -> dict[int, list[Message31]]:
        """Scans by elevation number, each scan's radials ordered by azimuth."""
        return {
            elevation: sorted(radials, key=lambda radial: radial.header.azm)
            for elevation, radials in sorted(self.elevation_scans.items())
        }

    def first_volume_data(self) -> VolumeData | None:
        """The volume data block of the first radial of the lowest elevation number."""
        if not self.elevation_scans:
            return None
        radials = self.elevation_scans[min(self.elevation_scans)]
        if not radials:
            return None
        return radials[0].volume_data