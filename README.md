# nexrad

Download and decode NEXRAD WSR-88D Level II radar data.

The package reads Archive II volume files, either BZIP2-compressed or
already decompressed, decodes the message 31 radials they contain and
groups them by elevation number. It can also list and fetch files from the
public NOAA Level II archive bucket and draw a simple plan-position image
of one sweep as a PPM file.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Decoding a file

```python
from nexrad.decode import DataFile

data_file = DataFile.from_path("KCRP20170825_235733_V06")

volume = data_file.first_volume_data()
scans = data_file.sorted_elevation_scans()
print(f"Decoded file with {len(scans)} elevations.")
```

`DataFile.from_bytes` does the same for data already in memory. A
`DataFile` has two attributes: `volume_header`, the
`nexrad.model.VolumeHeaderRecord` at the start of the file, and
`elevation_scans`, a dict from elevation number to the list of radials in
file order. `sorted_elevation_scans` returns the same scans with each
list ordered by azimuth. `first_volume_data` gives the volume data block of
the first radial of the lowest elevation number, or `None`.

Compressed input is recognised with `nexrad.file_metadata.is_compressed`
(the bytes `BZ` at offset 28) and decompressed with
`nexrad.decompress.decompress_file` before decoding.

Each radial is a `nexrad.model.Message31`. Besides its `header`
(`Message31Header`) it may carry `volume_data`, `elevation_data`,
`radial_data` and the moment blocks `reflectivity_data`, `velocity_data`,
`sw_data`, `zdr_data`, `phi_data`, `rho_data` and `cfp_data`, each a
`DataMoment` holding its `GenericData` header and raw gate bytes.
`Message31.get_data_moment` looks a moment block up from either a
`DataBlockProduct` or a `Product`.

`Product.parse` turns a name into a `Product`, ignoring case: `ref` or
`reflectivity`, `vel` or `velocity`, `zdr`, `phi`, `rho`, `cfp`, and
`"sw "` (with its trailing space) for spectrum width.
`Product.to_data_block_product` gives the matching block type, and
`str(product)` a readable label such as `Spectrum Width`.

### Errors

All package errors derive from `nexrad.errors.NexradError`:

- `UnhandledProductError` (also a `ValueError`) for an unknown product or
  data block name, including while decoding;
- `DecompressUnsupportedFileError` when `decompress_file` is given data
  that is not compressed.

Truncated data raises `EOFError`.

## Downloading files

```python
import datetime

from nexrad.download import download_file, list_files
from nexrad.download_cli import nearest_file

metas = list_files("KDMX", datetime.date(2022, 3, 5))
meta = nearest_file(metas, datetime.time(23, 30))
contents = download_file(meta)
```

`list_files` returns `nexrad.file_metadata.FileMetadata` entries (`site`,
`date` and `identifier`) for every archived file of a site on a day;
`download_file` returns the raw, usually compressed, contents. Both make
plain unsigned HTTPS requests and raise `requests.HTTPError` on failure.
`nearest_file` picks the file whose identifier time (`SITEYYYYMMDD_HHMMSS_...`)
is closest to the requested time, the earlier one on a tie.

## Commands

Decode a file and report how many elevations it holds:

```
nexrad-decode KCRP20170825_235733_V06
```

Download the file nearest to a given time and save it in the current
directory under its identifier. Site, date (`YYYY-MM-DD`) and time
(`HH:MM`) are optional and default to `KDMX`, `2022-03-05` and `23:30`:

```
nexrad-download KDMX 2022-03-05 23:30
```

Render one elevation scan to a 1024×1024 plain-text PPM image named
`render_<product>_<index>.ppm` in the current directory. The product
defaults to `ref` and may be one of `ref`, `vel`, `sw`, `phi`, `rho`,
`zdr` or `cfp`; the elevation index (position among the elevation numbers
in ascending order) defaults to `0`:

```
nexrad-render KCRP20170825_235733_V06 ref 0
```

Each command prints an error and exits with status 1 when the work fails.

The same drawing is available from Python through
`nexrad.render.render_image` and `nexrad.render.write_ppm`;
`nexrad.render.scale_gates` converts a moment block's raw gates to
floating point values, and `nexrad.render.reflectivity_color` maps a value
to its colour in 5 dBZ bands.

## Limitations

- Only message type 31 is decoded; every other message is skipped as a
  fixed 2432-byte record.
- Rendering handles 8-bit gate data only, colours every product on the
  reflectivity scale, and takes the gate geometry from the reflectivity
  block of the scan's first radial, so that block must be present.
- There is no interactive viewer: images are only written as PPM files.