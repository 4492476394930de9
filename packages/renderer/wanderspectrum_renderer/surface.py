"""Render target contract and the Pillow-backed offscreen surface."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw

from .models import BLACK, RGB


class Canvas(Protocol):
    width: int
    height: int

    def fill(self, color: RGB) -> None: ...

    def fill_rect(self, x: int, y: int, w: int, h: int, color: RGB) -> None: ...


class RenderTarget(Protocol):
    def lock_surface(self) -> Canvas | None: ...

    def present_and_unlock(self, canvas: Canvas) -> None: ...


class ImageCanvas:
    """Drawable over a Pillow image for a single lock/present cycle."""

    def __init__(self, image: Image.Image) -> None:
        self.image = image
        self.width, self.height = image.size
        self._draw = ImageDraw.Draw(image)

    def fill(self, color: RGB) -> None:
        self._draw.rectangle((0, 0, self.width - 1, self.height - 1), fill=color)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: RGB) -> None:
        # Pillow rectangles include their far edge
        self._draw.rectangle((x, y, x + w - 1, y + h - 1), fill=color)


class ImageSurface:
    """Offscreen render target that keeps the last presented frame."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.available = True
        self.frames_presented = 0
        self._locked: ImageCanvas | None = None
        self._frame = Image.new("RGB", (width, height), BLACK)

    def lock_surface(self) -> ImageCanvas | None:
        if not self.available or self._locked is not None:
            return None
        self._locked = ImageCanvas(Image.new("RGB", (self.width, self.height), BLACK))
        return self._locked

    def present_and_unlock(self, canvas: ImageCanvas) -> None:
        if canvas is not self._locked:
            raise RuntimeError("canvas was not locked from this surface")
        self._frame = canvas.image
        self._locked = None
        self.frames_presented += 1

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    @property
    def frame(self) -> Image.Image:
        return self._frame

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._frame.save(path, format="PNG")
        return path

    def preview_data_url(self) -> str:
        buf = BytesIO()
        self._frame.save(buf, format="PNG")
        b64 = base64.b64encode(buf.getvalue()).decode("ascii")
        return f"data:image/png;base64,{b64}"
