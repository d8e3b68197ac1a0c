"""
Building, reading and selecting from ubershader archives.

.. currentmodule:: uberz.archive

.. autosummary::
    :toctree: archive/

    ArchiveSpec
    ArchiveRequirements
    WritableArchive
    ReadableArchive
    ArchiveCache
    parse_spec_line
    parse_spec_text
    save_archive
    load_archive

"""

# ruff: noqa: F401

from ._layout import MAGIC, VERSION
from ._spec import ArchiveSpec, ArchiveRequirements
from ._parser import parse_spec_line, parse_spec_text
from ._writer import WritableArchive
from ._reader import ReadableArchive
from ._cache import ArchiveCache
from ._io import (
    DEFAULT_FILENAME,
    compress_archive,
    decompress_archive,
    save_archive,
    load_archive,
)
