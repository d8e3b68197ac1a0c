"""
The binary layout of an uberz archive.

An archive is one contiguous little-endian buffer made of five regions, in
this order:

* the header;
* the spec table, one fixed-size record per ubershader;
* one flag table per spec, each flag being a fixed-size record;
* the names of all flags, each null-terminated;
* the packages (compiled shader blobs) of all specs.

Every offset is a 64 bit byte offset relative to the start of the buffer.
The records are described with numpy structured dtypes, so that a table can
be viewed in place with ``np.frombuffer``. Reading never trusts an offset:
the accessors below check that the requested range lies inside the buffer
and raise a ``FormatError`` otherwise.
"""

import numpy as np

from ..errors import FormatError


MAGIC = int.from_bytes(b"UBER", "little")
VERSION = 0


header_dtype = np.dtype(
    [
        ("magic", "<u4"),
        ("version", "<u4"),
        ("specs_count", "<u8"),
        ("specs_offset", "<u8"),
    ]
)

spec_dtype = np.dtype(
    [
        ("shading_model", "<u4"),
        ("blend_mode", "<u4"),
        ("flags_count", "<u8"),
        ("flags_offset", "<u8"),
        ("package_byte_count", "<u8"),
        ("package_offset", "<u8"),
    ]
)

flag_dtype = np.dtype(
    [
        ("name_offset", "<u8"),
        ("value", "<u8"),
    ]
)

# If this fails the records are no longer packed like the renderer expects
assert header_dtype.itemsize == 24
assert spec_dtype.itemsize == 40
assert flag_dtype.itemsize == 16


def check_range(buffer, offset, nbytes, what="data"):
    """Raise a FormatError if ``[offset, offset + nbytes)`` is not inside the buffer."""
    offset, nbytes = int(offset), int(nbytes)
    if offset < 0 or nbytes < 0 or offset + nbytes > len(buffer):
        raise FormatError(
            f"Archive {what} at offset {offset} ({nbytes} bytes) "
            f"exceeds the archive size of {len(buffer)} bytes."
        )


def read_records(buffer, offset, dtype, count, what="records"):
    """Get a read-only view of ``count`` records of the given dtype at ``offset``."""
    dtype = np.dtype(dtype)
    check_range(buffer, offset, int(count) * dtype.itemsize, what)
    if not count:
        return np.zeros((0,), dtype=dtype)
    return np.frombuffer(buffer, dtype=dtype, count=int(count), offset=int(offset))


def read_header(buffer):
    """Get the header record of an archive buffer."""
    return read_records(buffer, 0, header_dtype, 1, "header")[0]


def read_bytes(buffer, offset, nbytes, what="package"):
    """Get a zero-copy memoryview of a byte range of the buffer."""
    check_range(buffer, offset, nbytes, what)
    offset = int(offset)
    return memoryview(buffer)[offset : offset + int(nbytes)]


def read_cstring(buffer, offset):
    """Read a null-terminated utf-8 string starting at ``offset``."""
    check_range(buffer, offset, 1, "flag name")
    offset = int(offset)
    end = buffer.find(b"\x00", offset)
    if end < 0:
        raise FormatError(f"Flag name at offset {offset} is not null-terminated.")
    try:
        return buffer[offset:end].decode("utf-8")
    except UnicodeDecodeError as err:
        raise FormatError(f"Flag name at offset {offset} is not valid utf-8.") from err


def pack_header(specs_count):
    """Create the header record for an archive with the given number of specs."""
    header = np.zeros((), dtype=header_dtype)
    header["magic"] = MAGIC
    header["version"] = VERSION
    header["specs_count"] = specs_count
    header["specs_offset"] = header_dtype.itemsize
    return header
