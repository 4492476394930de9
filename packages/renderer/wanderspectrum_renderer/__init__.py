"""Renderer package for the WanderSpectrum color field."""

from .models import BLACK, RGB, ColorBuffer, GridGeometry
from .spectrum import blue_part, build_buffer, compute_color, die_off, green_part, period, red_part
from .surface import Canvas, ImageCanvas, ImageSurface, RenderTarget

__all__ = [
    "BLACK",
    "RGB",
    "Canvas",
    "ColorBuffer",
    "GridGeometry",
    "ImageCanvas",
    "ImageSurface",
    "RenderTarget",
    "blue_part",
    "build_buffer",
    "compute_color",
    "die_off",
    "green_part",
    "period",
    "red_part",
]
