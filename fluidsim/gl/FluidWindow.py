import colorsys
import time

from fluidsim.flow.fluid import FluidEngine
from fluidsim.gl.Image import Image
from fluidsim.gl.RenderWindowGLFW import Button, RenderWindow
from fluidsim.gl.Utils import fit

RANDOM_SPLAT_COUNT: int = 5


class FluidWindow(RenderWindow):
    """Interactive viewer for a FluidEngine.

    Dragging with the left button adds splats along the pointer path. Keys:
    R reset, S random splats, space pause, F fullscreen, Esc quit.
    """

    def __init__(self, engine: FluidEngine, width: int, height: int, fps: int | None = None,
                 splat_force: float = 3000.0, impact_strength: float = 0.1) -> None:
        super().__init__(width, height, f'fluidsim {engine.variant.name}', fps=fps)
        self.engine: FluidEngine = engine
        self.splat_force: float = splat_force
        self.impact_strength: float = impact_strength
        self.paused: bool = False

        self._image: Image = Image()
        self._last_time: float | None = None
        self._dragging: bool = False
        self._pointer: tuple[float, float] | None = None

        self.addMouseCallback(self._on_mouse)
        self.addKeyboardCallback(self._on_key)

    def allocate(self) -> None:
        self._image.allocate(self.engine.width, self.engine.height)

    def deallocate(self) -> None:
        self._image.deallocate()

    def draw(self) -> None:
        now: float = time.perf_counter()
        dt: float = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now

        if not self.paused:
            self.engine.update(dt)
        self._image.set_image(self.engine.get_image())
        self._image.update()

        x, y, w, h = self._display_rect()
        self._image.draw(x, y, w, h)

    def _display_rect(self) -> list[float]:
        return fit(self.engine.width, self.engine.height, self.window_width, self.window_height)

    def _to_texture(self, mouse_x: float, mouse_y: float) -> tuple[float, float]:
        """Normalised window coordinates (top left origin) to texture coordinates."""
        x, y, w, h = self._display_rect()
        u: float = (mouse_x * self.window_width - x) / w
        v: float = 1.0 - (mouse_y * self.window_height - y) / h
        return u, v

    def _on_mouse(self, mouse_x: float, mouse_y: float, button: Button) -> None:
        u, v = self._to_texture(mouse_x, mouse_y)
        if button == Button.LEFT_DOWN:
            self._dragging = True
            self._pointer = (u, v)
            if self.engine.variant.name == 'ocean':
                self.engine.add_splat(u, v, self.impact_strength)
            return
        if button == Button.LEFT_UP:
            self._dragging = False
            self._pointer = None
            return
        if not self._dragging or self._pointer is None:
            return

        du: float = u - self._pointer[0]
        dv: float = v - self._pointer[1]
        self._pointer = (u, v)
        if du == 0.0 and dv == 0.0:
            return

        if self.engine.variant.name == 'ocean':
            self.engine.add_splat(u, v, self.impact_strength * 0.5)
            return
        color = colorsys.hls_to_rgb((time.time() * 0.1) % 1.0, 0.5, 1.0)
        self.engine.add_splat(u, v, (du * self.splat_force, dv * self.splat_force), color, temperature=1.0)

    def _on_key(self, key: bytes, mouse_x: float, mouse_y: float) -> None:
        if key == b'R':
            self.engine.reset()
            self.engine.add_default_sources()
        elif key == b'S':
            self.engine.add_random_splats(RANDOM_SPLAT_COUNT)
        elif key == b' ':
            self.paused = not self.paused
