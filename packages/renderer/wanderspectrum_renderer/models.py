"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)


@dataclass(frozen=True)
class GridGeometry:
    width: int
    height: int
    pixel_size: int

    def __post_init__(self) -> None:
        if self.pixel_size <= 0:
            raise ValueError(f"pixel_size must be positive, got {self.pixel_size}")

    @property
    def grid_width(self) -> int:
        return self.width // self.pixel_size

    @property
    def visible_rows(self) -> int:
        return self.height // self.pixel_size

    @property
    def buffer_height(self) -> int:
        # floor(1.5 * height / pixel_size) without float rounding
        return (3 * self.height) // (2 * self.pixel_size)


@dataclass(frozen=True)
class ColorBuffer:
    """Precomputed color columns, indexed ``[x][y]``."""

    geometry: GridGeometry
    columns: tuple[tuple[RGB, ...], ...]

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def height(self) -> int:
        return self.geometry.buffer_height

    def __getitem__(self, x: int) -> tuple[RGB, ...]:
        return self.columns[x]

    def wrapped(self, x: int, y: int) -> RGB:
        # % keeps negative rows inside [0, height)
        return self.columns[x][y % self.height]
