"""
Utility functions for uberz.

.. currentmodule:: uberz.utils

.. autosummary::
    :toctree: utils/

    enums
    ReadOnlyDict

"""

import os
import logging

from . import enums  # noqa: F401

logger = logging.getLogger("uberz")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("UBERZ_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid uberz log level: {level}")


_set_log_level()


def is_identifier_char(c):
    """Whether the given character may appear in a feature or keyword identifier."""
    return ("0" <= c <= "9") or ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


class ReadOnlyDict(dict):
    """A read-only dict, for storing structured data that can be hashed."""

    __slots__ = ["_hash"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Calculate hash in a way that requires any value to also be hashable
        parts = []
        for k in sorted(self.keys()):
            v = self[k]
            parts.append(str(hash(k)))
            parts.append(str(hash(v)))
        self._hash = hash(" ".join(parts))

    def __setitem__(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def __delitem__(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def clear(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def pop(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def popitem(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def setdefault(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def update(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def __hash__(self):
        return self._hash
