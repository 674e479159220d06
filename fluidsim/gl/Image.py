import logging
from threading import Lock

import numpy as np
from OpenGL.GL import * # type: ignore


class Image():
    """GL texture fed from 8-bit RGB images.

    set_image() may be called from any thread, update() uploads on the GL thread.
    """

    def __init__(self) -> None:
        self.allocated: bool = False
        self.width: int = 0
        self.height: int = 0
        self.tex_id: int = 0
        self._image: np.ndarray | None = None
        self._needs_update: bool = False
        self._mutex: Lock = Lock()

    def set_image(self, image: np.ndarray) -> None:
        with self._mutex:
            self._image = image
            self._needs_update = True

    def update(self) -> None:
        image: None | np.ndarray = None
        needs_update: bool = False
        with self._mutex:
            image = self._image
            needs_update = self._needs_update
            self._needs_update = False

        if needs_update and image is not None:
            self.set_from_image(image)

    def allocate(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.tex_id = glGenTextures(1)

        glBindTexture(GL_TEXTURE_2D, self.tex_id)
        glTexParameterf(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameterf(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        glTexParameterf(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameterf(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glPixelStorei(GL_UNPACK_ALIGNMENT, 1)
        glTexImage2D(GL_TEXTURE_2D, 0, GL_RGB8, self.width, self.height, 0, GL_RGB, GL_UNSIGNED_BYTE, None)
        glBindTexture(GL_TEXTURE_2D, 0)

        self.allocated = True

    def deallocate(self) -> None:
        if not self.allocated: return
        self.allocated = False
        glDeleteTextures(1, [self.tex_id])
        self.tex_id = 0
        self.width = 0
        self.height = 0

    def set_from_image(self, image: np.ndarray) -> None:
        """Upload an (H, W, 3) uint8 image, top row first."""
        if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
            logging.warning(f"Image: unsupported image {image.dtype} {image.shape}")
            return
        height: int = image.shape[0]
        width: int = image.shape[1]

        if width != self.width or height != self.height or not self.allocated:
            self.deallocate()
            self.allocate(width, height)

        glBindTexture(GL_TEXTURE_2D, self.tex_id)
        glTexSubImage2D(GL_TEXTURE_2D, 0, 0, 0, width, height, GL_RGB, GL_UNSIGNED_BYTE, np.ascontiguousarray(image))
        glBindTexture(GL_TEXTURE_2D, 0)

    def draw(self, x: float, y: float, w: float, h: float) -> None:
        if not self.allocated: return
        glBindTexture(GL_TEXTURE_2D, self.tex_id)
        glBegin(GL_QUADS)
        glTexCoord2f(0.0, 0.0)
        glVertex2f(x, y)
        glTexCoord2f(1.0, 0.0)
        glVertex2f(x + w, y)
        glTexCoord2f(1.0, 1.0)
        glVertex2f(x + w, y + h)
        glTexCoord2f(0.0, 1.0)
        glVertex2f(x, y + h)
        glEnd()
        glBindTexture(GL_TEXTURE_2D, 0)
