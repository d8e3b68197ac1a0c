class Engine:
    """Base (abstract) engine class that all engines inherit from."""

    def create_material(self, package, nbytes):
        """Create a material from a compiled package.

        Parameters
        ----------
        package : memoryview
            The compiled shader, as stored in the archive. The view is only
            valid while the archive is loaded; copy it if it must live longer.
        nbytes : int
            The size of the package in bytes.

        Returns the material object. Raise an exception if the package is
        rejected; the cache reports that as a ``BuildFailure``.
        """
        raise NotImplementedError()

    def destroy_material(self, material):
        """Destroy a material that was created with ``create_material()``."""
        raise NotImplementedError()
