import struct

import pytest

from nexrad.decode import DataFile
from nexrad.errors import UnhandledProductError
from nexrad.model import (
    DataBlockProduct,
    DataMoment,
    GenericData,
    Message31,
    Message31Header,
    VolumeHeaderRecord,
)
from nexrad.render import (
    BELOW_THRESHOLD,
    IMAGE_SIZE,
    MOMENT_FOLDED,
    main,
    reflectivity_color,
    render_image,
    scale_gates,
    write_ppm,
)

BLACK = (0, 0, 0)
WHITE = (0xFF, 0xFF, 0xFF)
CENTER = IMAGE_SIZE // 2


def _moment(gates, moment_range=0, scale=0.0, offset=0.0, word_size=8, name=b"REF"):
    generic = GenericData(b"D", name, 0, len(gates), moment_range, 1000, 0, 0, 0, word_size, scale, offset)
    return DataMoment(DataBlockProduct.from_name(name), generic, bytes(gates))


def _radial(gates, elev_num=1, azm=90.0, moment_range=0):
    header = Message31Header(b"KTST", 0, 0, 1, azm, 0, 0, 0, 1, 0, elev_num, 1, 0.5, 0, 0, 1)
    radial = Message31(header)
    radial.set_data_moment(_moment(gates, moment_range=moment_range))
    return radial


def _data_file(scans):
    return DataFile(VolumeHeaderRecord(b"AR2V0006.000", 0, 0, b"KTST"), scans)


@pytest.mark.parametrize(
    "value, color",
    [
        (4.9, BLACK),
        (5.0, (0x40, 0xE8, 0xE3)),
        (69.9, (0xEE, 0x34, 0xFA)),
        (70.0, WHITE),
        (MOMENT_FOLDED, WHITE),
    ],
)
def test_reflectivity_color_bands(value, color):
    assert reflectivity_color(value) == color


def test_reflectivity_color_never_darker_band_for_higher_value():
    values = [v / 2 for v in range(-20, 160)]
    indices = [reflectivity_color(v) for v in values]
    assert indices[0] == BLACK
    assert indices[-1] == WHITE


def test_scale_gates_special_values():
    scaled = scale_gates(_moment([0, 1], scale=2.0, offset=66.0))
    assert scaled == [BELOW_THRESHOLD, MOMENT_FOLDED]


def test_scale_gates_round_trip():
    raw = [2, 66, 130, 255]
    scale, offset = 2.0, 66.0
    scaled = scale_gates(_moment(raw, scale=scale, offset=offset))
    assert [value * scale + offset for value in scaled] == [float(r) for r in raw]


def test_scale_gates_zero_scale_keeps_raw():
    assert scale_gates(_moment([7, 200], scale=0.0)) == [7.0, 200.0]


def test_scale_gates_rejects_wide_words():
    with pytest.raises(ValueError):
        scale_gates(_moment([0, 5], word_size=16))


def test_render_single_gate_at_center():
    pixels = render_image(_data_file({1: [_radial([200])]}), 0, "ref")

    assert len(pixels) == IMAGE_SIZE * IMAGE_SIZE
    assert pixels[CENTER * IMAGE_SIZE + CENTER] == WHITE
    assert sum(1 for p in pixels if p != BLACK) == 1


def test_render_below_threshold_draws_nothing():
    pixels = render_image(_data_file({1: [_radial([0, 0, 0])]}), 0)
    assert set(pixels) == {BLACK}


def test_render_gates_beyond_image_are_skipped():
    pixels = render_image(_data_file({1: [_radial([200], moment_range=600000)]}), 0)
    assert set(pixels) == {BLACK}


def test_render_orders_elevations_by_number():
    scans = {2: [_radial([0], elev_num=2)], 1: [_radial([200], elev_num=1)]}
    first = render_image(_data_file(scans), 0)
    second = render_image(_data_file(scans), 1)

    assert first[CENTER * IMAGE_SIZE + CENTER] == WHITE
    assert set(second) == {BLACK}


def test_render_unknown_product():
    with pytest.raises(UnhandledProductError):
        render_image(_data_file({1: [_radial([200])]}), 0, "xyz")


def test_render_missing_product():
    with pytest.raises(ValueError):
        render_image(_data_file({1: [_radial([200])]}), 0, "vel")


def test_render_bad_elevation_index():
    with pytest.raises(IndexError):
        render_image(_data_file({1: [_radial([200])]}), 3)


def test_write_ppm_round_trip(tmp_path):
    path = tmp_path / "image.ppm"
    pixels = [(1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12)]

    write_ppm(path, 2, pixels)

    lines = path.read_text().splitlines()
    assert lines[:3] == ["P3", "2 2", "255"]
    assert [tuple(int(v) for v in line.split()) for line in lines[3:]] == pixels


def _encoded_file() -> bytes:
    volume_header = struct.pack(">12sII4s", b"AR2V0006.000", 0, 0, b"KTST")
    message_header = struct.pack(">12sHBBHHIHH", b"\x00" * 12, 0, 0, 31, 0, 0, 0, 1, 1)
    header_31 = struct.pack(
        ">4sIHHfBBHBBBBfBBH", b"KTST", 0, 0, 1, 90.0, 0, 0, 0, 1, 0, 1, 1, 0.5, 0, 0, 1
    )
    pointer = struct.pack(">I", len(header_31) + 4)
    generic = struct.pack(">1s3sIHHHHHBBff", b"D", b"REF", 0, 1, 0, 1000, 0, 0, 0, 8, 0.0, 0.0)
    return volume_header + message_header + header_31 + pointer + generic + bytes([200])


def test_main_writes_rendered_image(tmp_path, monkeypatch, capsys):
    source = tmp_path / "volume.bin"
    source.write_bytes(_encoded_file())
    monkeypatch.chdir(tmp_path)

    assert main([str(source)]) == 0

    lines = (tmp_path / "render_ref_0.ppm").read_text().splitlines()
    assert lines[:3] == ["P3", f"{IMAGE_SIZE} {IMAGE_SIZE}", "255"]
    assert len(lines) == 3 + IMAGE_SIZE * IMAGE_SIZE
    assert lines[3 + CENTER * IMAGE_SIZE + CENTER] == "255 255 255"
    assert lines.count("255 255 255") == 1
    assert "Decoded file with 1 elevations." in capsys.readouterr().out


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "absent.bin")]) == 1