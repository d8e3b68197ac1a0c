"""
Parser for spec files, which declare the capabilities of an ubershader.

A spec file is parsed one line at a time. Each line is one of:

* empty, or a comment starting with ``#``;
* ``BlendingMode = <mode>`` or ``ShadingModel = <model>``;
* ``<feature> = unsupported | optional | required``.

For example::

    # A lit, opaque material with optional normal mapping
    ShadingModel = lit
    BlendingMode = opaque
    normalMap = optional
    clearcoat = unsupported

"""

from ..errors import GrammarError
from ..utils import is_identifier_char
from ..utils.enums import ShadingModel, BlendMode, FeatureState


LINE_TERMINATORS = "\r\n"

# Maps the key of a fundamental assignment to (enum, error message).
FUNDAMENTALS = {
    "BlendingMode": (BlendMode, "expected lowercase blending mode enum"),
    "ShadingModel": (ShadingModel, "expected lowercase shading enum"),
}

FEATURE_ERROR = "expected unsupported / optional / required"


class _LineCursor:
    """Tracks the position within a single line, for consuming tokens and reporting errors."""

    def __init__(self, line, name, line_number):
        self.line = line.rstrip(LINE_TERMINATORS)
        self.name = name
        self.line_number = line_number
        self.pos = 0

    def error(self, msg):
        return GrammarError(self.name, self.line_number, self.pos + 1, msg)

    def peek(self):
        return self.line[self.pos : self.pos + 1]

    def consume_identifier(self):
        start = self.pos
        while self.pos < len(self.line) and is_identifier_char(self.line[self.pos]):
            self.pos += 1
        return self.line[start : self.pos]

    def consume_whitespace(self):
        while self.peek() in (" ", "\t"):
            self.pos += 1

    def expect_equal_sign(self):
        self.consume_whitespace()
        if self.peek() != "=":
            raise self.error("expected equal sign")
        self.pos += 1
        self.consume_whitespace()

    def expect_keyword(self, enum_cls, msg):
        # The whole identifier must match, so "unlitx" is not taken for "unlit".
        start = self.pos
        word = self.consume_identifier()
        if word not in enum_cls.__fields__:
            self.pos = start
            raise self.error(msg)
        return enum_cls[word]

    def expect_end(self):
        if self.pos < len(self.line):
            raise self.error("unexpected trailing character(s)")


def parse_spec_line(spec, line, *, name="material", line_number=1):
    """Parse one line of a spec file into the given ``ArchiveSpec``.

    Raises a ``GrammarError`` with the material name, line number and column
    if the line is malformed. Fundamental aspects and feature flags may only
    be assigned once per spec.
    """
    cursor = _LineCursor(line, name, line_number)

    if not cursor.line.strip() or cursor.line.startswith("#"):
        return

    key = cursor.consume_identifier()
    if not key:
        raise cursor.error("expected identifier")

    if key in FUNDAMENTALS:
        enum_cls, msg = FUNDAMENTALS[key]
        cursor.expect_equal_sign()
        value = cursor.expect_keyword(enum_cls, msg)
        cursor.expect_end()
        attr = "shading_model" if enum_cls is ShadingModel else "blend_mode"
        if getattr(spec, attr) is not None:
            cursor.pos = 0
            raise cursor.error(f"duplicate {key} assignment")
        setattr(spec, attr, value)
    else:
        cursor.expect_equal_sign()
        value = cursor.expect_keyword(FeatureState, FEATURE_ERROR)
        cursor.expect_end()
        if key in spec.flags:
            cursor.pos = 0
            raise cursor.error(f"duplicate feature flag '{key}'")
        spec.flags[key] = value


def split_spec_lines(text):
    """Split spec text into lines the way a text file is iterated.

    Only newlines end a line, and a final newline does not start another one.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_spec_text(spec, text, *, name="material"):
    """Parse the full text of a spec file into the given ``ArchiveSpec``."""
    for i, line in enumerate(split_spec_lines(text), 1):
        parse_spec_line(spec, line, name=name, line_number=i)
    return spec
