"""
Reading and writing compressed archive files (``.uberz``).

The archive layout is compressed as a whole, as a single zstd frame. The rest
of the library only ever deals with the decompressed bytes.
"""

import logging

import zstandard

from ..errors import FormatError


logger = logging.getLogger("uberz")

DEFAULT_FILENAME = "materials.uberz"


def compress_archive(data, level=19):
    """Compress a serialized archive into a zstd frame."""
    return zstandard.ZstdCompressor(level=level).compress(bytes(data))


def decompress_archive(data):
    """Decompress the contents of an ``.uberz`` file into the serialized archive."""
    try:
        return zstandard.ZstdDecompressor().decompress(data)
    except zstandard.ZstdError as err:
        raise FormatError(f"Archive data could not be decompressed: {err}") from err


def save_archive(path, data):
    """Compress a serialized archive and write it to the given path."""
    compressed = compress_archive(data)
    with open(path, "wb") as f:
        f.write(compressed)
    logger.info(f"Wrote {len(compressed)} bytes to {path}")
    return len(compressed)


def load_archive(path):
    """Read an ``.uberz`` file and return the decompressed archive bytes."""
    with open(path, "rb") as f:
        data = f.read()
    return decompress_archive(data)
