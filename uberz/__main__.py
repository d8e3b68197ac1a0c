"""The uberz CLI, which aggregates and compresses materials into a single archive.

Invoke using e.g. ``python -m uberz lit_opaque unlit_fade -o materials.uberz``.

For each name, the CLI looks for ``name.filamat`` (the compiled package) and
``name.spec`` (its capabilities). Each pair becomes one material in the
archive, in the order given on the command line.
"""

import os
import sys
import argparse

from ._version import __version__
from .errors import UberzError, MissingInputError
from .archive import WritableArchive, save_archive, DEFAULT_FILENAME


PACKAGE_EXT = ".filamat"
SPEC_EXT = ".spec"


class BuildConfig:
    """The settings for a single run of the archive builder.

    Parameters
    ----------
    names : list of str
        The base names of the materials, in archive order.
    output : str
        The path of the archive to write.
    quiet : bool
        Whether to suppress console output on success.
    search_dir : str
        The directory in which the material files are looked up.
    """

    def __init__(self, names, output=DEFAULT_FILENAME, quiet=False, search_dir="."):
        self.names = list(names)
        self.output = output
        self.quiet = bool(quiet)
        self.search_dir = search_dir


def build_archive(config):
    """Read all materials named in the config and write the compressed archive.

    Returns the serialized (uncompressed) archive. Raises ``MissingInputError``
    if an input file does not exist, ``GrammarError`` for a malformed spec,
    and ``ValueError`` if the archive cannot be serialized.
    """
    archive = WritableArchive()

    for name in config.names:
        base = os.path.join(config.search_dir, name)
        package_path = base + PACKAGE_EXT
        spec_path = base + SPEC_EXT
        for path in (package_path, spec_path):
            if not os.path.isfile(path):
                raise MissingInputError(path)

        with open(package_path, "rb") as f:
            package = f.read()
        archive.add_material(name, package)

        with open(spec_path, "r", encoding="utf-8") as f:
            for line in f:
                archive.add_spec_line(line)

    data = archive.serialize()
    nbytes = save_archive(config.output, data)

    if not config.quiet:
        print(f"Wrote {len(archive)} materials to {config.output} ({nbytes} bytes)")
    return data


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="uberz",
        description="Aggregate and compress a set of materials into a single archive. "
        "For each name, 'name.filamat' and 'name.spec' must exist.",
    )
    parser.add_argument("names", nargs="*", help="The base names of the materials")
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_FILENAME,
        help=f"The archive to write (default '{DEFAULT_FILENAME}')",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress console output"
    )
    parser.add_argument("--version", action="store_true", help="Print the version")

    args = parser.parse_args(argv)

    if args.version:
        print("uberz v" + __version__)
        return 0
    if not args.names:
        parser.print_usage(sys.stderr)
        print("uberz: error: at least one material name is required", file=sys.stderr)
        return 2

    config = BuildConfig(args.names, output=args.output, quiet=args.quiet)
    try:
        build_archive(config)
    except (UberzError, OSError, ValueError) as err:
        print(f"uberz: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
