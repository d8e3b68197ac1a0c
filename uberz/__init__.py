"""Packaging and selection of pre-compiled ubershaders."""

# ruff: noqa: F401, F403

from ._version import __version__, version_info
from . import utils

from .errors import *
from .engines import Engine, WgpuEngine
from .archive import (
    ArchiveSpec,
    ArchiveRequirements,
    WritableArchive,
    ReadableArchive,
    ArchiveCache,
    parse_spec_line,
    parse_spec_text,
    save_archive,
    load_archive,
)

from .utils import logger
from .utils.enums import *
