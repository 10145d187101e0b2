"""Listing and downloading NEXRAD Level II files from the public archive bucket."""

from __future__ import annotations

import datetime
from xml.etree import ElementTree

import requests

from nexrad.file_metadata import FileMetadata

REGION = "us-east-1"
BUCKET = "noaa-nexrad-level2"
BASE_URL = f"https://{BUCKET}.s3.{REGION}.amazonaws.com"
TIMEOUT = 60.0


def _parse_key(key: str) -> FileMetadata | None:
    """Turn an object key such as ``2023/04/06/KDMX/KDMX20230406_000215_V06`` into metadata."""
    parts = key.split("/")
    if len(parts) < 4:
        return None
    try:
        date = datetime.datetime.strptime("/".join(parts[:3]), "%Y/%m/%d").date()
    except ValueError:
        return None
    return FileMetadata(site=parts[3], date=date, identifier="".join(parts[4:]))


def list_files(site: str, date: datetime.date) -> list[FileMetadata]:
    """List the data files archived for a radar site on a date.

    Raises requests.HTTPError if the listing cannot be retrieved.
    """
    prefix = f"{date:%Y/%m/%d}/{site}"
    response = requests.get(
        f"{BASE_URL}/",
        params={"list-type": "2", "prefix": prefix},
        timeout=TIMEOUT,
    )
    response.raise_for_status()

    root = ElementTree.fromstring(response.content)
    return [
        meta
        for element in root.iterfind("{*}Contents/{*}Key")
        if (meta := _parse_key(element.text or "")) is not None
    ]


def download_file(meta: FileMetadata) -> bytes:
    """Download a data file's raw, possibly compressed, contents.

    Raises requests.HTTPError if the file cannot be retrieved.
    """
    key = f"{meta.date:%Y/%m/%d}/{meta.site}/{meta.identifier}"
    response = requests.get(f"{BASE_URL}/{key}", timeout=TIMEOUT)
    response.raise_for_status()
    return response.content