import logging

from ..errors import FormatError
from ..utils import ReadOnlyDict
from ..utils.enums import ShadingModel, BlendMode, FeatureState
from ._layout import (
    MAGIC,
    VERSION,
    header_dtype,
    spec_dtype,
    flag_dtype,
    read_header,
    read_records,
    read_bytes,
    read_cstring,
)
from ._spec import ArchiveSpec


logger = logging.getLogger("uberz")


class ReadableArchive:
    """A read-only view of a serialized archive.

    The given data is copied, so the caller is free to discard it. The
    header is checked first, after which all records are validated and
    resolved in a single pass: flag name offsets become strings, and package
    offsets become memoryviews into the copied buffer (no copy).

    Raises a ``FormatError`` if the data is not a valid archive.
    """

    def __init__(self, data):
        self._buffer = bytes(data)
        self._specs = tuple(self._resolve_specs())

    @property
    def nbytes(self):
        """The size of the archive buffer in bytes."""
        return len(self._buffer)

    @property
    def specs(self):
        """A tuple of ``ArchiveSpec`` objects, in archive order."""
        return self._specs

    def __len__(self):
        return len(self._specs)

    def __getitem__(self, index):
        return self._specs[index]

    def __iter__(self):
        return iter(self._specs)

    def _resolve_specs(self):
        buffer = self._buffer

        if len(buffer) < header_dtype.itemsize:
            raise FormatError(
                f"Archive of {len(buffer)} bytes is too small to hold a header."
            )
        header = read_header(buffer)
        if int(header["magic"]) != MAGIC:
            raise FormatError("Archive does not start with the 'UBER' magic identifier.")
        if int(header["version"]) != VERSION:
            raise FormatError(
                f"Archive has format version {int(header['version'])}, expected {VERSION}."
            )

        specs_count = int(header["specs_count"])
        records = read_records(
            buffer, header["specs_offset"], spec_dtype, specs_count, "spec table"
        )

        for i, record in enumerate(records):
            shading_model = int(record["shading_model"])
            blend_mode = int(record["blend_mode"])
            if shading_model not in ShadingModel:
                raise FormatError(f"Spec {i} has invalid shading model {shading_model}.")
            if blend_mode not in BlendMode:
                raise FormatError(f"Spec {i} has invalid blend mode {blend_mode}.")

            flags = {}
            flag_records = read_records(
                buffer, record["flags_offset"], flag_dtype, record["flags_count"], "flag table"
            )
            for flag in flag_records:
                value = int(flag["value"])
                if value not in FeatureState:
                    raise FormatError(f"Spec {i} has invalid feature state {value}.")
                flags[read_cstring(buffer, flag["name_offset"])] = value

            package = read_bytes(
                buffer, record["package_offset"], record["package_byte_count"]
            )
            yield ArchiveSpec(shading_model, blend_mode, ReadOnlyDict(flags), package)
