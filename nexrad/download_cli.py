"""Command that downloads the data file nearest a requested time for a site and date."""

from __future__ import annotations

import argparse
import datetime
import sys
from collections.abc import Sequence

import requests

from nexrad.download import download_file, list_files
from nexrad.file_metadata import FileMetadata, is_compressed

DEFAULT_SITE = "KDMX"
DEFAULT_DATE = datetime.date(2022, 3, 5)
DEFAULT_TIME = datetime.time(23, 30)


def _seconds_of_day(value: datetime.time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def _identifier_time(meta: FileMetadata) -> datetime.time:
    parts = meta.identifier.split("_")
    if len(parts) < 2:
        raise ValueError(f"identifier has no time: {meta.identifier!r}")
    return datetime.datetime.strptime(parts[1], "%H%M%S").time()


def nearest_file(metas: Sequence[FileMetadata], requested_time: datetime.time) -> FileMetadata:
    """The file whose identifier time is closest to the requested time; earliest wins ties."""
    if not metas:
        raise ValueError("no files to choose from")
    target = _seconds_of_day(requested_time)
    return min(metas, key=lambda meta: abs(_seconds_of_day(_identifier_time(meta)) - target))


def _parse_date(text: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r}") from None


def _parse_time(text: str) -> datetime.time:
    try:
        return datetime.datetime.strptime(text, "%H:%M").time()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid time: {text!r}") from None


def main(argv: Sequence[str] | None = None) -> int:
    """Download the file nearest the requested time and write it to the working directory."""
    parser = argparse.ArgumentParser(
        prog="nexrad-download",
        description="Download a NEXRAD Level II data file for a site and date.",
    )
    parser.add_argument("site", nargs="?", default=DEFAULT_SITE)
    parser.add_argument("date", nargs="?", type=_parse_date, default=DEFAULT_DATE)
    parser.add_argument("time", nargs="?", type=_parse_time, default=DEFAULT_TIME)
    args = parser.parse_args(argv)

    try:
        print(f"Listing files for {args.site} on {args.date.isoformat()}...")
        metas = list_files(args.site, args.date)
        if not metas:
            print("No files found for the specified date/site to download.")
            return 0
        print(f"Found {len(metas)} files.")

        meta = nearest_file(metas, args.time)
        print(f'Nearest file to {args.time:%H:%M:%S} is "{meta.identifier}".')

        print(f'Downloading file "{meta.identifier}"...')
        data = download_file(meta)
    except (requests.RequestException, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    print(f"Data file size (bytes): {len(data)}")
    print(f"File data is compressed: {str(is_compressed(data)).lower()}")

    print(f"Writing file to disk as: {meta.identifier}")
    with open(meta.identifier, "wb") as handle:
        handle.write(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())