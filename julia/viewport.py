"""Mapping between window pixels and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    """The slice of the complex plane shown in a window of pixels."""

    center_x: float
    center_y: float
    plane_width: float
    plane_height: float
    window_width: int
    window_height: int

    def validate(self) -> "Viewport":
        if self.window_width <= 0 or self.window_height <= 0:
            raise ValueError("window dimensions must be greater than 0.")
        if self.plane_width <= 0.0 or self.plane_height <= 0.0:
            raise ValueError("plane dimensions must be greater than 0.")
        return self


def x_transform(x: int, center_x: float, plane_width: float, window_width: int) -> float:
    """Convert a window column (0 is the left edge) to a real coordinate."""

    return plane_width * (float(x) / float(window_width) - 0.5) + center_x


def y_transform(y: int, center_y: float, plane_height: float, window_height: int) -> float:
    """Convert a window row (0 is the top edge) to an imaginary coordinate."""

    return plane_height * (0.5 - float(y) / float(window_height)) + center_y


def pixel_to_complex(viewport: Viewport, x: int, y: int) -> complex:
    real = x_transform(x, viewport.center_x, viewport.plane_width, viewport.window_width)
    imag = y_transform(y, viewport.center_y, viewport.plane_height, viewport.window_height)
    return complex(real, imag)
