"""Decoded NEXRAD Level II data structures."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

from nexrad.errors import UnhandledProductError


def _unpack(fmt: struct.Struct, stream: BinaryIO) -> tuple:
    raw = stream.read(fmt.size)
    if len(raw) < fmt.size:
        raise EOFError(f"expected {fmt.size} bytes, got {len(raw)}")
    return fmt.unpack(raw)


_VOLUME_HEADER = struct.Struct(">12sII4s")
_MESSAGE_HEADER = struct.Struct(">12sHBBHHIHH")
_MESSAGE_31_HEADER = struct.Struct(">4sIHHfBBHBBBBfBBH")
_DATA_BLOCK_HEADER = struct.Struct(">1s3s")
_VOLUME_DATA = struct.Struct(">1s3sHBBffHHfffffHH")
_ELEVATION_DATA = struct.Struct(">1s3sH2sf")
_RADIAL_DATA = struct.Struct(">1s3sHHffHHff")
_GENERIC_DATA = struct.Struct(">1s3sIHHHHHBBff")


@dataclass(frozen=True)
class VolumeHeaderRecord:
    """The volume/file header at the start of every data file."""

    filename: bytes
    file_date: int
    file_time: int
    radar_id: bytes

    SIZE: ClassVar[int] = _VOLUME_HEADER.size

    @classmethod
    def read(cls, stream: BinaryIO) -> VolumeHeaderRecord:
        """Read the header from a binary stream."""
        return cls(*_unpack(_VOLUME_HEADER, stream))


@dataclass(frozen=True)
class MessageHeader:
    """Header introducing a message, giving its type and size."""

    rpg: bytes
    msg_size: int
    channel: int
    msg_type: int
    id_seq: int
    msg_date: int
    msg_time: int
    num_segs: int
    seg_num: int

    SIZE: ClassVar[int] = _MESSAGE_HEADER.size

    @classmethod
    def read(cls, stream: BinaryIO) -> MessageHeader:
        """Read the header from a binary stream."""
        return cls(*_unpack(_MESSAGE_HEADER, stream))


@dataclass(frozen=True)
class Message31Header:
    """Header for a message of type 31 (a digital radar data radial)."""

    radar_id: bytes
    ray_time: int
    ray_date: int
    azm_num: int
    azm: float
    compression_code: int
    spare: int
    radial_len: int
    azm_res: int
    radial_status: int
    elev_num: int
    sector_cut_num: int
    elev: float
    radial_spot_blanking: int
    azm_indexing_mode: int
    data_block_count: int

    SIZE: ClassVar[int] = _MESSAGE_31_HEADER.size

    @classmethod
    def read(cls, stream: BinaryIO) -> Message31Header:
        """Read the header from a binary stream."""
        return cls(*_unpack(_MESSAGE_31_HEADER, stream))


class DataBlockProduct(enum.Enum):
    """Kinds of data block found in a type 31 message, keyed by their wire name."""

    REFLECTIVITY = "REF"
    VELOCITY = "VEL"
    SPECTRUM_WIDTH = "SW "
    DIFFERENTIAL_REFLECTIVITY = "ZDR"
    DIFFERENTIAL_PHASE = "PHI"
    CORRELATION_COEFFICIENT = "RHO"
    CLUTTER_FILTER_PROBABILITY = "CFP"
    VOLUME_DATA = "VOL"
    ELEVATION_DATA = "ELV"
    RADIAL_DATA = "RAD"

    @classmethod
    def from_name(cls, name: str | bytes) -> DataBlockProduct:
        """Look up a product by its three-character data name."""
        if isinstance(name, (bytes, bytearray)):
            name = bytes(name).decode("utf-8", errors="replace")
        try:
            return cls(name)
        except ValueError:
            raise UnhandledProductError() from None

    @property
    def is_moment(self) -> bool:
        """True for products that carry per-gate moment data."""
        return self not in (
            DataBlockProduct.VOLUME_DATA,
            DataBlockProduct.ELEVATION_DATA,
            DataBlockProduct.RADIAL_DATA,
        )


class Product(enum.Enum):
    """Radar moment products a user may ask for."""

    REFLECTIVITY = "reflectivity"
    VELOCITY = "velocity"
    SPECTRUM_WIDTH = "spectrumwidth"
    DIFFERENTIAL_REFLECTIVITY = "differentialreflectivity"
    DIFFERENTIAL_PHASE = "differentialphase"
    CORRELATION_COEFFICIENT = "correlationcoefficient"
    CLUTTER_FILTER_PROBABILITY = "clutterfilterprobability"

    @classmethod
    def parse(cls, text: str) -> Product:
        """Parse a product from a short or long name, ignoring case."""
        try:
            return _PRODUCT_ALIASES[text.lower()]
        except KeyError:
            raise UnhandledProductError() from None

    def to_data_block_product(self) -> DataBlockProduct:
        """The data block product that carries this product's data."""
        return DataBlockProduct[self.name]

    def __str__(self) -> str:
        return _PRODUCT_LABELS[self]


_PRODUCT_ALIASES = {
    "ref": Product.REFLECTIVITY,
    "reflectivity": Product.REFLECTIVITY,
    "vel": Product.VELOCITY,
    "velocity": Product.VELOCITY,
    "sw ": Product.SPECTRUM_WIDTH,
    "zdr": Product.DIFFERENTIAL_REFLECTIVITY,
    "phi": Product.DIFFERENTIAL_PHASE,
    "rho": Product.CORRELATION_COEFFICIENT,
    "cfp": Product.CLUTTER_FILTER_PROBABILITY,
}

_PRODUCT_LABELS = {
    Product.REFLECTIVITY: "Reflectivity",
    Product.VELOCITY: "Velocity",
    Product.SPECTRUM_WIDTH: "Spectrum Width",
    Product.DIFFERENTIAL_REFLECTIVITY: "Differential Reflectivity",
    Product.DIFFERENTIAL_PHASE: "Differential Phase",
    Product.CORRELATION_COEFFICIENT: "Correlation Coefficient",
    Product.CLUTTER_FILTER_PROBABILITY: "Clutter Filter Probability",
}


@dataclass(frozen=True)
class DataBlockHeader:
    """Introduces a data block such as VOL, REF or VEL."""

    data_block_type: bytes
    data_name: bytes

    SIZE: ClassVar[int] = _DATA_BLOCK_HEADER.size

    @classmethod
    def read(cls, stream: BinaryIO) -> DataBlockHeader:
        """Read the block header from a binary stream."""
        return cls(*_unpack(_DATA_BLOCK_HEADER, stream))

    def data_block_product(self) -> DataBlockProduct:
        """The product named by this block; raises for unknown names."""
        return DataBlockProduct.from_name(self.data_name)


@dataclass(frozen=True)
class VolumeData:
    """Volume data block describing the radar site and its calibration."""

    data_block_header: DataBlockHeader
    lrtup: int
    version_major: int
    version_minor: int
    lat: float
    long: float
    site_height: int
    feedhorn_height: int
    calibration_constant: float
    shvtx_power_hor: float
    shvtx_power_ver: float
    system_differential_reflectivity: float
    initial_system_differential_phase: float
    volume_coverage_pattern_number: int
    processing_status: int

    SIZE: ClassVar[int] = _VOLUME_DATA.size

    @classmethod
    def read(cls, stream: BinaryIO) -> VolumeData:
        """Read the block, header included, from a binary stream."""
        block_type, name, *rest = _unpack(_VOLUME_DATA, stream)
        return cls(DataBlockHeader(block_type, name), *rest)


@dataclass(frozen=True)
class ElevationData:
    """Elevation data block."""

    data_block_header: DataBlockHeader
    lrtup: int
    atmos: bytes
    calib_const: float

    SIZE: ClassVar[int] = _ELEVATION_DATA.size

    @classmethod
    def read(cls, stream: BinaryIO) -> ElevationData:
        """Read the block, header included, from a binary stream."""
        block_type, name, *rest = _unpack(_ELEVATION_DATA, stream)
        return cls(DataBlockHeader(block_type, name), *rest)


@dataclass(frozen=True)
class RadialData:
    """Radial data block."""

    data_block_header: DataBlockHeader
    lrtup: int
    unambiguous_range: int
    noise_level_horz: float
    noise_level_vert: float
    nyquist_velocity: int
    radial_flags: int
    calib_const_horz_chan: float
    calib_const_vert_chan: float

    SIZE: ClassVar[int] = _RADIAL_DATA.size

    @classmethod
    def read(cls, stream: BinaryIO) -> RadialData:
        """Read the block, header included, from a binary stream."""
        block_type, name, *rest = _unpack(_RADIAL_DATA, stream)
        return cls(DataBlockHeader(block_type, name), *rest)


@dataclass(frozen=True)
class GenericData:
    """Header of a generic moment data block (REF, VEL, ...)."""

    data_block_type: bytes
    data_name: bytes
    reserved: int
    number_data_moment_gates: int
    data_moment_range: int
    data_moment_range_sample_interval: int
    tover: int
    snr_threshold: int
    control_flags: int
    data_word_size: int
    scale: float
    offset: float

    SIZE: ClassVar[int] = _GENERIC_DATA.size

    @classmethod
    def read(cls, stream: BinaryIO) -> GenericData:
        """Read the block header from a binary stream."""
        return cls(*_unpack(_GENERIC_DATA, stream))

    def moment_size(self) -> int:
        """Number of bytes of gate data following this header."""
        return self.number_data_moment_gates * self.data_word_size // 8


@dataclass(frozen=True)
class DataMoment:
    """A moment data block together with its raw gate values."""

    product: DataBlockProduct
    data: GenericData
    moment_data: bytes


_MOMENT_FIELDS = {
    DataBlockProduct.REFLECTIVITY: "reflectivity_data",
    DataBlockProduct.VELOCITY: "velocity_data",
    DataBlockProduct.SPECTRUM_WIDTH: "sw_data",
    DataBlockProduct.DIFFERENTIAL_REFLECTIVITY: "zdr_data",
    DataBlockProduct.DIFFERENTIAL_PHASE: "phi_data",
    DataBlockProduct.CORRELATION_COEFFICIENT: "rho_data",
    DataBlockProduct.CLUTTER_FILTER_PROBABILITY: "cfp_data",
}


@dataclass
class Message31:
    """A decoded type 31 message: one radial with its data blocks."""

    header: Message31Header
    volume_data: VolumeData | None = None
    elevation_data: ElevationData | None = None
    radial_data: RadialData | None = None
    reflectivity_data: DataMoment | None = None
    velocity_data: DataMoment | None = None
    sw_data: DataMoment | None = None
    zdr_data: DataMoment | None = None
    phi_data: DataMoment | None = None
    rho_data: DataMoment | None = None
    cfp_data: DataMoment | None = None

    def get_data_moment(self, product: DataBlockProduct | Product) -> DataMoment | None:
        """The moment block for a product, or None if absent or not a moment."""
        if isinstance(product, Product):
            product = product.to_data_block_product()
        field = _MOMENT_FIELDS.get(product)
        return getattr(self, field) if field else None

    def set_data_moment(self, data_moment: DataMoment) -> None:
        """Store a moment block in the slot for its product."""
        field = _MOMENT_FIELDS.get(data_moment.product)
        if field:
            setattr(self, field, data_moment)