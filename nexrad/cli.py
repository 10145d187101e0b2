"""Command that decodes a data file and reports how many elevations it holds."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from nexrad.decode import DataFile
from nexrad.errors import NexradError


def main(argv: Sequence[str] | None = None) -> int:
    """Decode the file named on the command line and print its elevation count."""
    parser = argparse.ArgumentParser(
        prog="nexrad-decode", description="Decode a NEXRAD Level II data file."
    )
    parser.add_argument("file", help="path of the data file to decode")
    args = parser.parse_args(argv)

    try:
        data_file = DataFile.from_path(args.file)
    except (OSError, EOFError, NexradError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    print(f"Decoded file with {len(data_file.elevation_scans)} elevations.")
    return 0


if __name__ == "__main__":
    sys.exit(main())