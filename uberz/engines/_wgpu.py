import os
import logging

import wgpu
from wgpu.utils import get_default_device

from ._base import Engine


logger = logging.getLogger("uberz")

SPIRV_MAGIC = 0x07230203

PRINT_WGSL_ON_ERROR = os.environ.get("UBERZ_PRINT_WGSL_ON_ERROR", "0") == "1"


class WgpuEngine(Engine):
    """An engine that turns packages into wgpu shader modules.

    Packages that start with the SPIR-V magic number are passed to wgpu as
    binary SPIR-V. Any other package is taken to be utf-8 encoded WGSL.

    Parameters
    ----------
    device : wgpu.GPUDevice | None
        The device to create shader modules on. If not given, the default
        device of wgpu is used, which is requested on first use.
    """

    def __init__(self, device=None):
        self._device = device
        self._live = set()

    @property
    def device(self):
        """The wgpu device used to create the shader modules."""
        if self._device is None:
            self._device = get_default_device()
        return self._device

    @property
    def live_count(self):
        """The number of shader modules created and not yet destroyed."""
        return len(self._live)

    def create_material(self, package, nbytes):
        package = bytes(package[:nbytes])
        if is_spirv(package):
            code = package
        else:
            code = package.decode("utf-8")
        try:
            module = self.device.create_shader_module(code=code)
        except wgpu.GPUValidationError:
            if PRINT_WGSL_ON_ERROR and isinstance(code, str):
                logger.error(
                    "\n".join(
                        f"{i + 1:5d}: {line}" for i, line in enumerate(code.splitlines())
                    )
                )
            raise
        self._live.add(module)
        return module

    def destroy_material(self, material):
        # wgpu releases the native object when the last reference is dropped
        self._live.discard(material)


def is_spirv(package):
    """Whether the given bytes look like a SPIR-V binary."""
    return len(package) >= 4 and int.from_bytes(package[:4], "little") == SPIRV_MAGIC
