"""Public API for Julia set rendering utilities."""

from .coloring import (
    DEFAULT_SCHEME,
    Color,
    ColorScheme,
    color_in_set,
    color_out_of_set,
    parse_hex_color,
)
from .evaluator import ESCAPE_RADIUS, EscapeResult, is_in_julia_set
from .renderer import (
    DEFAULT_ITERATIONS,
    RenderParameters,
    RenderResult,
    WorkAssignment,
    WorkerStartError,
    build_assignments,
    fill_julia_set,
    new_color_map,
    partial_fill,
)
from .viewport import Viewport, pixel_to_complex, x_transform, y_transform

__all__ = [
    "Color",
    "ColorScheme",
    "DEFAULT_ITERATIONS",
    "DEFAULT_SCHEME",
    "ESCAPE_RADIUS",
    "EscapeResult",
    "RenderParameters",
    "RenderResult",
    "Viewport",
    "WorkAssignment",
    "WorkerStartError",
    "build_assignments",
    "color_in_set",
    "color_out_of_set",
    "fill_julia_set",
    "is_in_julia_set",
    "new_color_map",
    "parse_hex_color",
    "partial_fill",
    "pixel_to_complex",
    "x_transform",
    "y_transform",
]
