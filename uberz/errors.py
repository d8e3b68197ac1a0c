"""
The exceptions raised by uberz.

.. currentmodule:: uberz.errors

.. autosummary::
    :toctree: errors/

    UberzError
    GrammarError
    FormatError
    MissingInputError
    BuildFailure

"""

__all__ = [
    "UberzError",
    "GrammarError",
    "FormatError",
    "MissingInputError",
    "BuildFailure",
]


class UberzError(Exception):
    """Base class for all uberz errors."""


class GrammarError(UberzError):
    """A line in a spec file could not be parsed.

    Parameters
    ----------
    name : str
        The name of the material that the spec file belongs to.
    line : int
        The 1-based line number in the spec file.
    column : int
        The 1-based column of the first character that could not be consumed.
    message : str
        What the parser expected to find.
    """

    def __init__(self, name, line, column, message):
        super().__init__(f"{name}.spec({line},{column}): {message}")
        self.name = name
        self.line = line
        self.column = column
        self.message = message


class FormatError(UberzError, ValueError):
    """An archive is unreadable: wrong magic or version, or corrupt contents."""


class MissingInputError(UberzError, FileNotFoundError):
    """An input file for the archive builder does not exist."""

    def __init__(self, path):
        super().__init__(f"Unable to open {path}")
        self.path = path


class BuildFailure(UberzError):
    """The engine could not create a material from an archived package."""

    def __init__(self, index, cause):
        super().__init__(f"Failed to build material for spec {index}: {cause}")
        self.index = index
        self.cause = cause
