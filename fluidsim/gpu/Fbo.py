import threading

import torch

from fluidsim.gpu.Texture import Texture, TextureFormat

# One bound render target per thread, like a GL context's draw framebuffer
_binding = threading.local()


def bound_target() -> 'Fbo | None':
    return getattr(_binding, 'fbo', None)


def release_target() -> None:
    """Unbind whatever target is bound on this thread."""
    _binding.fbo = None


class Fbo(Texture):
    def __init__(self) -> None :
        super(Fbo, self).__init__()

    def begin(self)  -> None:
        current: Fbo | None = bound_target()
        if current is not None:
            raise RuntimeError("Fbo: another render target is already bound")
        if not self.allocated:
            raise RuntimeError("Fbo: cannot bind an unallocated render target")
        _binding.fbo = self

    def end(self)  -> None:
        if bound_target() is self:
            _binding.fbo = None

    @property
    def bound(self) -> bool:
        return bound_target() is self

    @property
    def texture(self) -> Texture:
        return self


class SwapFbo():
    """Read/write pair of render targets.

    texture is the authoritative read buffer, back_texture the scratch buffer that
    begin() binds. Swap only after the pass writing back_texture has ended.
    """

    def __init__(self) -> None :
        self.width: int = 0
        self.height: int = 0
        self.internal_format: TextureFormat | None = None
        self.fbos: list[Fbo] = [Fbo(), Fbo()]
        self.swap_state: bool = False
        self.allocated: bool = False

    @property
    def device(self) -> torch.device | None:
        return self.fbos[0].device

    @property
    def channels(self) -> int:
        return self.fbos[0].channels

    @property
    def texture(self) -> Fbo:
        return self.fbos[self.swap_state]

    @property
    def back_texture(self) -> Fbo:
        return self.fbos[not self.swap_state]

    @property
    def bound(self) -> bool:
        return self.fbos[0].bound or self.fbos[1].bound

    def allocate(self, width: int, height: int, internal_format: TextureFormat,
                 device: torch.device | str | None = None) -> None :
        self.fbos[0].allocate(width, height, internal_format, device)
        try:
            self.fbos[1].allocate(width, height, internal_format, device)
        except RuntimeError:
            self.fbos[0].deallocate()
            raise
        self.width = width
        self.height = height
        self.internal_format = internal_format
        self.swap_state = False
        self.allocated = True

    def deallocate(self) -> None :
        self.fbos[0].end()
        self.fbos[1].end()
        self.fbos[0].deallocate()
        self.fbos[1].deallocate()
        self.width = 0
        self.height = 0
        self.internal_format = None
        self.allocated = False

    def swap(self) -> None :
        if self.bound:
            raise RuntimeError("SwapFbo: cannot swap while the write buffer is bound")
        self.swap_state = not self.swap_state

    def begin(self) -> None :
        self.back_texture.begin()

    def end(self) -> None :
        self.back_texture.end()

    def clear_all(self, value: float = 0.0) -> None :
        self.fbos[0].clear(value)
        self.fbos[1].clear(value)

    def read(self):
        return self.texture.read()
