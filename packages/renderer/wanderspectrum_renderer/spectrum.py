"""Approximate visible-spectrum color field.

Hue cycles along the vertical axis through three phase-shifted cosine bumps
(red, green, blue). Brightness along the horizontal axis follows a flat
envelope that peaks at the center column and drops to black at the edges.
"""

from __future__ import annotations

import math

from .models import RGB, ColorBuffer, GridGeometry

DIE_OFF_EXPONENT = 0.09375
BAND_WEIGHT = 0.8
BAND_FLOOR = 0.2


def die_off(x: float, max_x: float) -> float:
    """Intensity envelope in [0, 255], 255 at ``max_x / 2`` and 0 at both ends."""
    return round(255 * (1 - abs(1 - x / (max_x / 2)) ** DIE_OFF_EXPONENT))


def period(x: float, peak: float, period: float) -> float:
    """Half-wave rectified cosine of the given period, centered on ``peak``."""
    return max(math.cos(2 * (x - peak) * math.pi / period), 0.0)


def red_part(x: float, x_max: float, y: float, y_max: float) -> float:
    bands = period(y, 0.0, 2 * y_max) + period(y, 3 * y_max / 2, 2 * y_max)
    return die_off(x, x_max) * (BAND_WEIGHT * bands + BAND_FLOOR)


def green_part(x: float, x_max: float, y: float, y_max: float) -> float:
    return die_off(x, x_max) * (BAND_WEIGHT * period(y, y_max / 2, 2 * y_max) + BAND_FLOOR)


def blue_part(x: float, x_max: float, y: float, y_max: float) -> float:
    return die_off(x, x_max) * (BAND_WEIGHT * period(y, y_max, 2 * y_max) + BAND_FLOOR)


def _channel(value: float) -> int:
    return max(0, min(255, int(value)))


def compute_color(x: int, x_max: float, y: int, y_max: float) -> RGB:
    """Color of grid cell ``(x, y)``.

    The field is laid out for ``0 <= x <= x_max`` and ``0 <= y < 1.5 * y_max``,
    the rows a buffer holds. Past that the two red bands overlap and cells
    beyond ``x_max`` fall outside the envelope, so channels are clamped to a byte.
    """
    return (
        _channel(red_part(x, x_max, y, y_max)),
        _channel(green_part(x, x_max, y, y_max)),
        _channel(blue_part(x, x_max, y, y_max)),
    )


def build_buffer(width: int, height: int, pixel_size: int) -> ColorBuffer:
    """Materialize the color field for a ``width`` x ``height`` surface.

    The buffer is 1.5 times the visible height so the scrolling window can
    wrap without a seam in view.
    """
    geometry = GridGeometry(width=width, height=height, pixel_size=pixel_size)
    x_max = width / pixel_size
    y_max = height / pixel_size
    columns = tuple(
        tuple(compute_color(x, x_max, y, y_max) for y in range(geometry.buffer_height))
        for x in range(geometry.grid_width)
    )
    return ColorBuffer(geometry=geometry, columns=columns)
