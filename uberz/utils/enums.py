"""
The enums used in uberz. The enums are all available from the root ``uberz`` namespace.

The integer values are the codes that are stored in an archive, so they must
never be reordered.

.. currentmodule:: uberz.utils.enums

.. autosummary::
    :toctree: utils/enums

    BlendMode
    FeatureState
    ShadingModel

"""

from wgpu.utils import BaseEnum


__all__ = [
    "BlendMode",
    "FeatureState",
    "ShadingModel",
]


class Enum(BaseEnum):
    """Enum base class for uberz."""


class ShadingModel(Enum):
    """The lighting model that an ubershader implements."""

    unlit = 0  #: No lighting, the base color is the output color.
    lit = 1  #: Standard physically based lighting.
    subsurface = 2  #: Lit, with light scattering below the surface.
    cloth = 3  #: Lit, with a sheen lobe suitable for fabrics.
    specularGlossiness = 4  #: Lit, using the specular-glossiness workflow.


class BlendMode(Enum):
    """How the output of an ubershader is combined with the render target."""

    opaque = 0  #: Alpha is ignored.
    transparent = 1  #: Premultiplied alpha blending.
    add = 2  #: The fragment color is added to the target.
    masked = 3  #: Opaque, with fragments discarded below an alpha threshold.
    fade = 4  #: Alpha blending that also fades the specular contribution.
    multiply = 5  #: The target is multiplied by the fragment color.
    screen = 6  #: The inverse of multiply.


class FeatureState(Enum):
    """The level of support an ubershader declares for a feature flag."""

    unsupported = 0  #: The ubershader cannot honor the feature (the default for unlisted flags).
    optional = 1  #: The ubershader honors the feature when the mesh enables it.
    required = 2  #: The ubershader can only be used by meshes that enable the feature.


def enum_name(enum_cls, value):
    """Get the field name for the given value of an integer enum, or None."""
    for name in enum_cls.__fields__:
        if enum_cls[name] == value:
            return name
    return None
