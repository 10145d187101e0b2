"""Rendering of one elevation scan of a decoded data file as a PPM image."""

from __future__ import annotations

import argparse
import bisect
import math
import os
import sys
from collections.abc import Iterable, Sequence

from nexrad.decode import DataFile
from nexrad.errors import NexradError, UnhandledProductError
from nexrad.model import DataBlockProduct, DataMoment, Message31

IMAGE_SIZE = 1024
BELOW_THRESHOLD = 999.0
MOMENT_FOLDED = 998.0
_RANGE_KM = 460

Color = tuple[int, int, int]

_PRODUCTS = {
    "ref": DataBlockProduct.REFLECTIVITY,
    "vel": DataBlockProduct.VELOCITY,
    "sw": DataBlockProduct.SPECTRUM_WIDTH,
    "phi": DataBlockProduct.DIFFERENTIAL_PHASE,
    "rho": DataBlockProduct.CORRELATION_COEFFICIENT,
    "zdr": DataBlockProduct.DIFFERENTIAL_REFLECTIVITY,
    "cfp": DataBlockProduct.CLUTTER_FILTER_PROBABILITY,
}

_THRESHOLDS = [5.0, 10.0, 15.0, 20.0, 25.0, 30.0, 35.0, 40.0, 45.0, 50.0, 55.0, 60.0, 65.0, 70.0]
_COLORS: list[Color] = [
    (0x00, 0x00, 0x00),
    (0x40, 0xE8, 0xE3),
    (0x26, 0xA4, 0xFA),
    (0x00, 0x30, 0xED),
    (0x49, 0xFB, 0x3E),
    (0x36, 0xC2, 0x2E),
    (0x27, 0x8C, 0x1E),
    (0xFE, 0xF5, 0x43),
    (0xEB, 0xB4, 0x33),
    (0xF6, 0x95, 0x2E),
    (0xF8, 0x0A, 0x26),
    (0xCB, 0x05, 0x16),
    (0xA9, 0x08, 0x13),
    (0xEE, 0x34, 0xFA),
    (0xFF, 0xFF, 0xFF),
]


def reflectivity_color(value: float) -> Color:
    """The colour for a scaled gate value on the reflectivity scale, in 5 dBZ bands."""
    return _COLORS[bisect.bisect_right(_THRESHOLDS, value)]


def scale_gates(data_moment: DataMoment) -> list[float]:
    """Convert raw 8-bit gate values to floating point using the block's scale and offset.

    Raw 0 becomes BELOW_THRESHOLD and raw 1 MOMENT_FOLDED.
    """
    generic = data_moment.data
    if generic.data_word_size != 8:
        raise ValueError(f"unsupported data word size: {generic.data_word_size}")

    raw_gates = data_moment.moment_data[: generic.number_data_moment_gates]
    scaled = []
    for raw in raw_gates:
        if raw == 0:
            scaled.append(BELOW_THRESHOLD)
        elif raw == 1:
            scaled.append(MOMENT_FOLDED)
        elif generic.scale == 0.0:
            scaled.append(float(raw))
        else:
            scaled.append((raw - generic.offset) / generic.scale)
    return scaled


def _moment(radial: Message31, product: DataBlockProduct) -> DataMoment:
    moment = radial.get_data_moment(product)
    if moment is None:
        raise ValueError(f"radial {radial.header.azm_num} has no {product.value.strip()} data")
    return moment


def _pixel(value: float) -> int:
    return max(0, math.floor(value + 0.5))


def render_image(data_file: DataFile, elevation_index: int, product: str = "ref") -> list[Color]:
    """Render one elevation scan as IMAGE_SIZE x IMAGE_SIZE pixels in row-major order."""
    try:
        block_product = _PRODUCTS[product]
    except KeyError:
        raise UnhandledProductError(f"unexpected product: {product}") from None

    scans = sorted(data_file.elevation_scans.items())
    if not 0 <= elevation_index < len(scans):
        raise IndexError(f"no elevation scan at index {elevation_index}")
    _, radials = scans[elevation_index]
    if not radials:
        raise ValueError("elevation scan has no radials")

    pixels: list[Color] = [(0, 0, 0)] * (IMAGE_SIZE * IMAGE_SIZE)
    center = IMAGE_SIZE // 2
    px_per_km = IMAGE_SIZE // 2 // _RANGE_KM

    reference = _moment(radials[0], DataBlockProduct.REFLECTIVITY).data
    first_gate_px = reference.data_moment_range / 1000.0 * px_per_km
    gate_width_px = reference.data_moment_range_sample_interval / 1000.0 * px_per_km

    for radial in radials:
        azimuth_angle = radial.header.azm - 90.0
        if azimuth_angle < 0.0:
            azimuth_angle += 360.0

        spacing = float(radial.header.azm_res)
        azimuth = float(math.floor(azimuth_angle))
        if math.floor(azimuth_angle + spacing) > azimuth:
            azimuth += spacing

        angle = math.radians(azimuth)
        angle_cos, angle_sin = math.cos(angle), math.sin(angle)

        distance = first_gate_px
        for value in scale_gates(_moment(radial, block_product)):
            if value != BELOW_THRESHOLD:
                x = _pixel(center + angle_cos * distance)
                y = _pixel(center + angle_sin * distance)
                if x < IMAGE_SIZE and y < IMAGE_SIZE:
                    pixels[y * IMAGE_SIZE + x] = reflectivity_color(value)
            distance += gate_width_px

    return pixels


def write_ppm(path: str | os.PathLike[str], width: int, pixels: Iterable[Color]) -> None:
    """Write square image pixels to a plain-text (P3) PPM file."""
    with open(path, "w", encoding="ascii") as handle:
        handle.write(f"P3\n{width} {width}\n255\n")
        handle.writelines(f"{r} {g} {b}\n" for r, g, b in pixels)


def main(argv: Sequence[str] | None = None) -> int:
    """Decode a data file and render one product at one elevation to a PPM file."""
    parser = argparse.ArgumentParser(
        prog="nexrad-render", description="Render a NEXRAD Level II elevation scan."
    )
    parser.add_argument("file", help="path of the data file to render")
    parser.add_argument("product", nargs="?", default="ref", choices=sorted(_PRODUCTS))
    parser.add_argument("elevation_index", nargs="?", type=int, default=0)
    args = parser.parse_args(argv)

    try:
        data_file = DataFile.from_path(args.file)
        print(f"Decoded file with {len(data_file.elevation_scans)} elevations.")
        print(f"Rendering {args.product} product at elevation index {args.elevation_index}.")
        pixels = render_image(data_file, args.elevation_index, args.product)
    except (OSError, EOFError, NexradError, ValueError, IndexError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    file_name = f"render_{args.product}_{args.elevation_index}.ppm"
    print(f"Writing rendered image to {file_name}")
    write_ppm(file_name, IMAGE_SIZE, pixels)
    return 0


if __name__ == "__main__":
    sys.exit(main())