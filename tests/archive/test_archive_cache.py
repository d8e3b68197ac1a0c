import gc
import struct
import logging

import pytest

from uberz import (
    ArchiveCache,
    ArchiveRequirements,
    WritableArchive,
    BuildFailure,
    FormatError,
)


def build(*variants):
    archive = WritableArchive()
    for package, text in variants:
        archive.add_material(package.decode(), package)
        archive.add_spec_text(text)
    return archive.serialize()


LIT = "ShadingModel = lit\nBlendingMode = opaque\n"
FEATURES = {"normalMap": True, "clearcoat": False}


@pytest.fixture
def cache(engine):
    data = build(
        (b"unlit", "ShadingModel = unlit\nBlendingMode = opaque\n"),
        (b"plain", LIT),
        (b"normals", LIT + "normalMap = optional\nclearcoat = unsupported\n"),
        (b"clearcoat", LIT + "normalMap = optional\nclearcoat = required\n"),
        (b"normals2", LIT + "normalMap = required\n"),
        (b"fade", "ShadingModel = lit\nBlendingMode = fade\nnormalMap = optional\n"),
    )
    cache = ArchiveCache(engine)
    cache.load(data)
    yield cache
    cache.destroy_materials()
    cache.close()


def select(cache, shading="lit", blending="opaque", **features):
    material = cache.get_material(ArchiveRequirements(shading, blending, features))
    return None if material is None else material.package


def test_exact_fundamentals(cache):
    assert select(cache) == b"plain"
    assert select(cache, "unlit") == b"unlit"
    assert select(cache, "lit", "fade") == b"fade"
    assert select(cache, "lit", "add") is None
    assert select(cache, "cloth", "opaque") is None
    # Flags cannot make up for a wrong blend mode
    assert select(cache, "unlit", "fade", normalMap=True) is None


def test_optional_vs_unsupported(cache):
    # "plain" has no normalMap flag, so the next candidate is used
    assert select(cache, normalMap=True) == b"normals"
    assert select(cache, "lit", "fade", normalMap=True) == b"fade"
    # "normals" declares clearcoat unsupported, so the one that requires it is used
    assert select(cache, clearcoat=True) == b"clearcoat"
    assert select(cache, sheen=True) is None


def test_disabled_features_impose_nothing(cache):
    assert select(cache, normalMap=False, sheen=False) == b"plain"
    assert select(cache, "unlit", clearcoat=False) == b"unlit"


def test_required_enforcement(cache):
    assert select(cache, normalMap=True, clearcoat=True) == b"clearcoat"

    # "normals2" requires normalMap, so it never matches a mesh without it
    data = build((b"normals2", LIT + "normalMap = required\n"))
    other = ArchiveCache(cache.engine)
    other.load(data)
    assert select(other) is None
    assert select(other, normalMap=False) is None
    assert select(other, normalMap=True) == b"normals2"
    other.destroy_materials()
    other.close()


def test_first_match_wins(cache):
    # Both "normals" and "normals2" fit, the first in the archive wins
    for _ in range(3):
        assert select(cache, normalMap=True) == b"normals"


def test_materials_are_built_once(cache, engine):
    req = ArchiveRequirements("lit", "opaque", FEATURES)
    m1 = cache.get_material(req)
    m2 = cache.get_material(ArchiveRequirements("lit", "opaque", FEATURES))
    assert m1 is m2
    assert len(engine.created) == 1
    assert cache.materials == (m1,)
    assert cache.materials_count == 6

    m3 = cache.get_material(ArchiveRequirements("unlit", "opaque"))
    assert m3 is not m1
    assert len(engine.created) == 2
    assert cache.materials == (m3, m1)


def test_default_material(cache, engine):
    m = cache.get_default_material()
    assert m.package == b"unlit"
    assert cache.get_material(ArchiveRequirements("unlit", "opaque")) is m
    assert len(engine.created) == 1


def test_requirements_accept_enum_values():
    req = ArchiveRequirements(1, 0, {"a": True})
    assert req.shading_model == 1
    assert req.blend_mode == 0
    with pytest.raises(ValueError):
        ArchiveRequirements("shiny", "opaque")
    with pytest.raises(ValueError):
        ArchiveRequirements("lit", 42)


def test_destroy_materials(cache, engine):
    m1 = cache.get_default_material()
    m2 = cache.get_material(ArchiveRequirements("lit", "fade"))
    cache.destroy_materials()
    assert engine.destroyed == [m1, m2]
    assert m1.destroyed and m2.destroyed
    assert cache.materials == ()
    assert cache.materials_count == 6

    # Materials can be built again after destroying them
    m3 = cache.get_default_material()
    assert m3 is not m1
    assert len(engine.created) == 3


def test_close_with_live_materials(engine):
    cache = ArchiveCache(engine)
    cache.load(build((b"plain", LIT)))
    cache.get_default_material()
    with pytest.raises(RuntimeError):
        cache.close()
    cache.destroy_materials()
    cache.close()
    assert cache.specs == ()


def test_context_manager(engine):
    with pytest.raises(RuntimeError):
        with ArchiveCache(engine) as cache:
            cache.load(build((b"plain", LIT)))
            cache.get_default_material()

    with ArchiveCache(engine) as cache:
        cache.load(build((b"plain", LIT)))
        cache.get_default_material()
        cache.destroy_materials()


def test_gc_with_live_materials_logs_error(engine, caplog):
    cache = ArchiveCache(engine)
    cache.load(build((b"plain", LIT)))
    cache.get_default_material()
    with caplog.at_level(logging.ERROR, logger="uberz"):
        del cache
        gc.collect()
    assert "destroy_materials" in caplog.text


def test_build_failure_is_not_cached(make_engine):
    engine = make_engine(fail_on=b"broken")
    cache = ArchiveCache(engine)
    cache.load(build((b"broken", LIT), (b"plain", LIT)))

    for _ in range(2):
        with pytest.raises(BuildFailure) as err:
            cache.get_material(ArchiveRequirements("lit", "opaque"))
        assert err.value.index == 0
        assert isinstance(err.value.__cause__, ValueError)
    assert cache.materials == ()

    engine.fail_on = None
    assert cache.get_default_material().package == b"broken"
    cache.destroy_materials()
    cache.close()


def test_load_errors(engine):
    cache = ArchiveCache(engine)
    with pytest.raises(RuntimeError):
        cache.get_material(ArchiveRequirements("lit", "opaque"))
    with pytest.raises(RuntimeError):
        cache.get_default_material()
    with pytest.raises(FormatError):
        cache.load(b"UBER")

    cache.load(build((b"plain", LIT)))
    with pytest.raises(RuntimeError):
        cache.load(build((b"plain", LIT)))


def test_cache_needs_engine():
    with pytest.raises(TypeError):
        ArchiveCache(object())


def test_destroy_error_does_not_destroy_twice(make_engine):
    engine = make_engine(fail_destroy=b"b")
    cache = ArchiveCache(engine)
    cache.load(build((b"a", LIT), (b"b", "ShadingModel = lit\nBlendingMode = fade\n")))
    cache.get_default_material()
    cache.get_material(ArchiveRequirements("lit", "fade"))

    with pytest.raises(RuntimeError):
        cache.destroy_materials()
    cache.destroy_materials()
    assert [m.package for m in engine.destroyed] == [b"a"]
    assert cache.materials == ()
    cache.close()


def test_default_material_of_empty_archive(engine):
    data = build((b"plain", LIT))
    data = data[:8] + struct.pack("<Q", 0) + data[16:]
    cache = ArchiveCache(engine)
    cache.load(data)
    assert cache.materials_count == 0
    assert select(cache) is None
    with pytest.raises(IndexError):
        cache.get_default_material()
    cache.close()
