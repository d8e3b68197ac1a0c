"""Global configuration for pytest"""

import pytest

from uberz import Engine


class FakeMaterial:
    """Stands in for a material that a real engine would create."""

    def __init__(self, package):
        self.package = package
        self.destroyed = False


class FakeEngine(Engine):
    """An engine that records what it is asked to do."""

    def __init__(self, fail_on=None, fail_destroy=None):
        self.fail_on = fail_on
        self.fail_destroy = fail_destroy
        self.created = []
        self.destroyed = []

    def create_material(self, package, nbytes):
        package = bytes(package)
        assert len(package) == nbytes
        if self.fail_on is not None and package == self.fail_on:
            raise ValueError("invalid package")
        material = FakeMaterial(package)
        self.created.append(material)
        return material

    def destroy_material(self, material):
        if self.fail_destroy is not None and material.package == self.fail_destroy:
            self.fail_destroy = None
            raise RuntimeError("device lost")
        material.destroyed = True
        self.destroyed.append(material)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def lit_opaque_spec():
    return "\n".join(
        [
            "# A lit opaque material",
            "ShadingModel = lit",
            "BlendingMode = opaque",
            "normalMap = optional",
            "clearcoat = unsupported",
            "",
        ]
    )


@pytest.fixture
def make_engine():
    """Factory for engines, e.g. ``make_engine(fail_on=b"bad")``.

    ``fail_destroy`` makes destroying the material with that package fail once.
    """
    return FakeEngine
