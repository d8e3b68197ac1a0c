import logging

import numpy as np

from ._layout import header_dtype, spec_dtype, flag_dtype, pack_header
from ._parser import parse_spec_line, split_spec_lines
from ._spec import ArchiveSpec


logger = logging.getLogger("uberz")


class WritableArchive:
    """Collects ubershaders and their specs, and serializes them into an archive.

    Usage::

        archive = WritableArchive()
        archive.add_material("lit_opaque", package_bytes)
        archive.add_spec_line("ShadingModel = lit")
        archive.add_spec_line("BlendingMode = opaque")
        data = archive.serialize()

    Materials are stored in the order in which they are added. When selecting
    a material, the first one that fits a mesh wins, so add the most specific
    materials first.
    """

    def __init__(self):
        self._names = []
        self._specs = []
        self._line_number = 1

    def __len__(self):
        return len(self._specs)

    @property
    def materials(self):
        """The names of the materials added so far, in archive order."""
        return tuple(self._names)

    @property
    def specs(self):
        """The specs of the materials added so far, in archive order."""
        return tuple(self._specs)

    def add_material(self, name, package):
        """Add a material with the given name and compiled package (bytes).

        Subsequent calls to ``add_spec_line()`` apply to this material.
        """
        self._names.append(str(name))
        self._specs.append(ArchiveSpec(package=bytes(package)))
        self._line_number = 1
        logger.debug(f"Added material '{name}' ({len(package)} bytes)")

    def add_spec_line(self, line):
        """Parse one line of the spec of the most recently added material."""
        if not self._specs:
            raise RuntimeError("Call add_material() before add_spec_line().")
        parse_spec_line(
            self._specs[-1],
            line,
            name=self._names[-1],
            line_number=self._line_number,
        )
        self._line_number += 1

    def add_spec_text(self, text):
        """Parse the full spec text of the most recently added material."""
        if not self._specs:
            raise RuntimeError("Call add_material() before add_spec_text().")
        for line in split_spec_lines(text):
            self.add_spec_line(line)

    def serialize(self):
        """Serialize all materials into a single archive buffer (bytes)."""

        if not self._specs:
            raise ValueError("Cannot serialize an archive without materials.")
        for name, spec in zip(self._names, self._specs):
            if spec.shading_model is None:
                raise ValueError(f"Material '{name}' does not specify a ShadingModel.")
            if spec.blend_mode is None:
                raise ValueError(f"Material '{name}' does not specify a BlendingMode.")

        # Encode the flag names up front, so we know the size of the names region.
        encoded_names = [
            [flag_name.encode("utf-8") + b"\x00" for flag_name in spec.flags]
            for spec in self._specs
        ]
        flags_count = sum(len(spec.flags) for spec in self._specs)

        # Compute the start of each region
        specs_offset = header_dtype.itemsize
        flags_offset = specs_offset + len(self._specs) * spec_dtype.itemsize
        names_offset = flags_offset + flags_count * flag_dtype.itemsize
        packages_offset = names_offset + sum(
            len(name) for names in encoded_names for name in names
        )
        total_size = packages_offset + sum(len(spec.package) for spec in self._specs)

        spec_table = np.zeros((len(self._specs),), dtype=spec_dtype)
        flag_table = np.zeros((flags_count,), dtype=flag_dtype)

        # Fill in the tables, spec-major
        flag_index = 0
        name_offset = names_offset
        package_offset = packages_offset
        for i, spec in enumerate(self._specs):
            spec_table[i] = (
                spec.shading_model,
                spec.blend_mode,
                len(spec.flags),
                flags_offset + flag_index * flag_dtype.itemsize,
                len(spec.package),
                package_offset,
            )
            package_offset += len(spec.package)
            for value, name in zip(spec.flags.values(), encoded_names[i]):
                flag_table[flag_index] = (name_offset, value)
                name_offset += len(name)
                flag_index += 1

        # Concatenate the regions
        buffer = bytearray()
        buffer += pack_header(len(self._specs)).tobytes()
        buffer += spec_table.tobytes()
        buffer += flag_table.tobytes()
        for names in encoded_names:
            for name in names:
                buffer += name
        for spec in self._specs:
            buffer += spec.package

        assert len(buffer) == total_size
        logger.info(f"Serialized {len(self._specs)} materials into {total_size} bytes")
        return bytes(buffer)
