import logging

from ..errors import BuildFailure
from ..engines import Engine
from ._reader import ReadableArchive


logger = logging.getLogger("uberz")


class ArchiveCache:
    """Selects ubershaders from an archive and caches the materials built from them.

    Parameters
    ----------
    engine : Engine
        The engine that turns a compiled package into a material, and
        destroys it again.

    Materials are built lazily, the first time that a spec is selected, and
    are reused for every subsequent selection of that spec. The cache does
    not destroy its materials implicitly: call ``destroy_materials()``
    before closing the cache.

    A cache is not thread-safe; it is meant to be used from the thread that
    owns the rendering context.
    """

    def __init__(self, engine):
        if not isinstance(engine, Engine):
            raise TypeError("ArchiveCache needs an Engine instance.")
        self._engine = engine
        self._archive = None
        self._materials = []

    def __del__(self):
        if any(m is not None for m in getattr(self, "_materials", ())):
            logger.error(
                "ArchiveCache was garbage collected with live materials. "
                "Call destroy_materials() explicitly to ensure correct destruction order."
            )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @property
    def engine(self):
        """The engine used to build and destroy materials."""
        return self._engine

    @property
    def specs(self):
        """The specs of the loaded archive (an empty tuple if nothing is loaded)."""
        return () if self._archive is None else self._archive.specs

    @property
    def materials(self):
        """A tuple of the materials that have been built so far, in archive order."""
        return tuple(m for m in self._materials if m is not None)

    @property
    def materials_count(self):
        """The number of materials (i.e. specs) in the loaded archive."""
        return len(self._materials)

    def load(self, data):
        """Load an archive from a (decompressed) bytes-like object.

        The data is copied. Raises a ``FormatError`` if the data is not a
        valid archive.
        """
        if self._archive is not None:
            raise RuntimeError("An archive has already been loaded into this cache.")
        archive = ReadableArchive(data)
        self._archive = archive
        self._materials = [None] * len(archive)
        logger.info(f"Loaded archive with {len(archive)} specs ({archive.nbytes} bytes)")

    def get_material(self, requirements):
        """Get the material for the first spec that satisfies the given ``ArchiveRequirements``.

        Returns None if no spec matches, which is a normal outcome that
        the caller must handle, e.g. by falling back to a default material.
        """
        if self._archive is None:
            raise RuntimeError("No archive has been loaded into this cache.")
        for i, spec in enumerate(self._archive.specs):
            if spec.matches(requirements):
                return self._get_or_build(i)
        return None

    def get_default_material(self):
        """Get the material for the first spec in the archive.

        Raises an ``IndexError`` if the archive contains no specs.
        """
        if self._archive is None:
            raise RuntimeError("No archive has been loaded into this cache.")
        if not self._materials:
            raise IndexError("The loaded archive contains no materials.")
        return self._get_or_build(0)

    def _get_or_build(self, index):
        material = self._materials[index]
        if material is None:
            spec = self._archive.specs[index]
            try:
                material = self._engine.create_material(spec.package, len(spec.package))
            except BuildFailure:
                raise
            except Exception as err:
                raise BuildFailure(index, err) from err
            if material is None:
                raise BuildFailure(index, "the engine returned None")
            logger.debug(f"Built material for spec {index}: {spec!r}")
            self._materials[index] = material
        return material

    def destroy_materials(self):
        """Destroy all materials built by this cache, through the engine."""
        for i, material in enumerate(self._materials):
            if material is not None:
                # Forget the material first, so it is never destroyed twice.
                self._materials[i] = None
                self._engine.destroy_material(material)

    def close(self):
        """Release the archive. All materials must have been destroyed."""
        if any(m is not None for m in self._materials):
            raise RuntimeError(
                "Please call destroy_materials() explicitly to ensure correct destruction order."
            )
        self._materials = []
        self._archive = None
