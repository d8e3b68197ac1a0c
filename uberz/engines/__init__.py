"""
The purpose of an engine is to turn the compiled package of an ubershader
into a material that a renderer can use, and to destroy that material again.

Classes
-------

.. autoclass:: uberz.engines.Engine
    :members:

.. autoclass:: uberz.engines.WgpuEngine
    :members:

The ``ArchiveCache`` never looks inside a package or a material. It hands
the engine a package and its size, and stores whatever comes back::

                    ______________                   ________
                   |              | -- package -->  |        |
    [archive] ---> | ArchiveCache |                 | Engine |
                   |______________| <-- material -- |________|

Any object can serve as a material, except None. Custom engines subclass
``Engine`` and implement both methods.

"""

# flake8: noqa

from ._base import Engine
from ._wgpu import WgpuEngine
