import logging
import time
from enum import Enum
from threading import Thread, Lock, current_thread
from typing import Callable, Optional

import OpenGL.GL as gl
import glfw

from fluidsim.gl.Utils import FpsCounter

MouseCallback = Callable[[float, float, 'Button'], None]
KeyCallback = Callable[[bytes, float, float], None]

NS_PER_SECOND: int = 1_000_000_000


class Button(Enum):
    NONE =          0
    LEFT_UP =       1
    LEFT_DOWN =     2
    RIGHT_UP =      3
    RIGHT_DOWN =    4


_BUTTONS: dict[tuple[int, int], Button] = {
    (glfw.MOUSE_BUTTON_LEFT, glfw.PRESS):       Button.LEFT_DOWN,
    (glfw.MOUSE_BUTTON_LEFT, glfw.RELEASE):     Button.LEFT_UP,
    (glfw.MOUSE_BUTTON_RIGHT, glfw.PRESS):      Button.RIGHT_DOWN,
    (glfw.MOUSE_BUTTON_RIGHT, glfw.RELEASE):    Button.RIGHT_UP,
}


class RenderWindow():
    """Single GLFW window driven by its own render thread.

    The GL context lives on the render thread, so subclasses create and release GL
    objects in allocate() and deallocate() and render in draw(). Pointer positions
    are passed to callbacks in normalised window coordinates, (0, 0) top left.
    Esc closes the window, F toggles fullscreen.
    """

    def __init__(self, width: int, height: int, name: str, fullscreen: bool = False,
                 v_sync: bool = True, fps: int | None = None) -> None:
        if not glfw.init():
            raise RuntimeError("Failed to initialize GLFW")

        self.name: str = name
        self.window_width: int = width
        self.window_height: int = height
        self.fullscreen: bool = fullscreen
        self._windowed_rect: tuple[int, int, int, int] = (0, 0, width, height)

        # a frame rate cap replaces v-sync
        self.frame_interval: int | None = NS_PER_SECOND // fps if fps and fps > 0 else None
        self.v_sync: bool = v_sync and self.frame_interval is None

        self.fps: FpsCounter = FpsCounter()
        self.mouse_x: float = 0.0
        self.mouse_y: float = 0.0

        self._window: Optional[glfw._GLFWwindow] = None
        self._thread: Thread | None = None
        self._callback_lock: Lock = Lock()
        self._exit_callbacks: list[Callable[[], None]] = []
        self._mouse_callbacks: list[MouseCallback] = []
        self._key_callbacks: list[KeyCallback] = []

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running: return
        self._thread = Thread(target=self.run, name=f'{self.name} render', daemon=False)
        self._thread.start()

    def stop(self) -> None:
        """Close the window and wait for the render thread, unless called from it."""
        if not self.is_running:
            return
        if self._window:
            glfw.set_window_should_close(self._window, True)
            glfw.post_empty_event()
        if current_thread() is self._thread:
            return
        self._thread.join(timeout=2.0) # type: ignore[union-attr]
        if self.is_running:
            logging.warning(f"{self.name}: render thread did not stop within 2 s")

    def run(self) -> None:
        try:
            self._create_window()
            self.allocate()
            self._loop()
        except Exception:
            logging.exception(f"{self.name}: render thread failed")
        finally:
            self.deallocate()
            self._destroy_window()
            self._notify_exit()

    # SETUP
    def _create_window(self) -> None:
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 4)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 6)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_COMPAT_PROFILE)
        glfw.window_hint(glfw.RESIZABLE, glfw.TRUE)

        self._window = glfw.create_window(self.window_width, self.window_height, self.name, None, None)
        if not self._window:
            glfw.terminate()
            raise RuntimeError("Failed to create GLFW window")

        glfw.make_context_current(self._window)
        glfw.swap_interval(1 if self.v_sync else 0)

        glfw.set_framebuffer_size_callback(self._window, self._on_resize)
        glfw.set_key_callback(self._window, self._on_key)
        glfw.set_cursor_pos_callback(self._window, self._on_cursor)
        glfw.set_mouse_button_callback(self._window, self._on_button)

        if self.fullscreen:
            self.fullscreen = False
            self.set_fullscreen(True)

        gl.glEnable(gl.GL_TEXTURE_2D)
        self._set_view(self.window_width, self.window_height)
        logging.info(f"{self.name}: OpenGL {gl.glGetString(gl.GL_VERSION).decode('utf-8')}") # type: ignore

    def _destroy_window(self) -> None:
        if self._window:
            glfw.destroy_window(self._window)
            self._window = None
        glfw.terminate()

    def _set_view(self, width: int, height: int) -> None:
        gl.glViewport(0, 0, width, height)
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glLoadIdentity()
        gl.glOrtho(0, width, height, 0, -1, 1)
        gl.glMatrixMode(gl.GL_MODELVIEW)

    def set_fullscreen(self, value: bool) -> None:
        if not self._window or self.fullscreen is value: return
        self.fullscreen = value

        if value:
            x, y = glfw.get_window_pos(self._window)
            w, h = glfw.get_window_size(self._window)
            self._windowed_rect = (x, y, w, h)
            monitor = glfw.get_primary_monitor()
            mode = glfw.get_video_mode(monitor)
            glfw.set_window_monitor(self._window, monitor, 0, 0, mode.size.width, mode.size.height, mode.refresh_rate)
        else:
            x, y, w, h = self._windowed_rect
            glfw.set_window_monitor(self._window, None, x, y, w, h, 0)

    # LOOP
    def _loop(self) -> None:
        next_frame: int = time.time_ns()
        while not glfw.window_should_close(self._window):
            self._render_frame()
            glfw.poll_events()

            if self.frame_interval is None:
                continue
            next_frame += self.frame_interval
            remaining: int = next_frame - time.time_ns()
            if remaining > 0:
                time.sleep(remaining / NS_PER_SECOND)
            elif -remaining > self.frame_interval:
                # more than a frame behind, drop the backlog
                next_frame = time.time_ns()

    def _render_frame(self) -> None:
        glfw.set_window_title(self._window, f'{self.name} - FPS: {self.fps.get_fps()} (Min: {self.fps.get_min_fps()})')
        gl.glClearColor(0.0, 0.0, 0.0, 1.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        gl.glLoadIdentity()
        try:
            self.draw()
        except Exception:
            logging.exception(f"{self.name}: draw failed")
        glfw.swap_buffers(self._window)
        self.fps.tick()

    def allocate(self) -> None:
        """Create GL resources, called on the render thread."""

    def deallocate(self) -> None:
        """Release GL resources, called on the render thread."""

    def draw(self) -> None:
        pass

    # GLFW EVENTS
    def _on_resize(self, window, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self.window_width = width
        self.window_height = height
        self._set_view(width, height)

    def _on_key(self, window, key: int, scancode: int, action: int, mods: int) -> None:
        if action not in (glfw.PRESS, glfw.REPEAT):
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(self._window, True)
            return
        if key == glfw.KEY_F:
            self.set_fullscreen(not self.fullscreen)
            return
        if not 32 <= key <= 126:
            return
        with self._callback_lock:
            callbacks = list(self._key_callbacks)
        for callback in callbacks:
            callback(bytes([key]), self.mouse_x, self.mouse_y)

    def _on_cursor(self, window, x: float, y: float) -> None:
        self.mouse_x = x / max(self.window_width, 1)
        self.mouse_y = y / max(self.window_height, 1)
        self._notify_mouse(Button.NONE)

    def _on_button(self, window, button: int, action: int, mods: int) -> None:
        self._notify_mouse(_BUTTONS.get((button, action), Button.NONE))

    def _notify_mouse(self, button: Button) -> None:
        with self._callback_lock:
            callbacks = list(self._mouse_callbacks)
        for callback in callbacks:
            callback(self.mouse_x, self.mouse_y, button)

    def _notify_exit(self) -> None:
        with self._callback_lock:
            callbacks = list(self._exit_callbacks)
        for callback in callbacks:
            callback()

    # CALLBACK REGISTRATION
    def addMouseCallback(self, callback: MouseCallback) -> None:
        with self._callback_lock:
            self._mouse_callbacks.append(callback)

    def addKeyboardCallback(self, callback: KeyCallback) -> None:
        with self._callback_lock:
            self._key_callbacks.append(callback)

    def addExitCallback(self, callback: Callable[[], None]) -> None:
        with self._callback_lock:
            self._exit_callbacks.append(callback)
