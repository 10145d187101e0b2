"""Download, decompress, decode and render NEXRAD Level II radar data."""

__version__ = "0.0.3"

__all__ = [
    "cli",
    "decode",
    "decompress",
    "download",
    "download_cli",
    "errors",
    "file_metadata",
    "model",
    "render",
]