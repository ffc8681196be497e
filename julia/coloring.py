"""Color policy for evaluated points."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple


class Color(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int


@dataclass(frozen=True)
class ColorScheme:
    """Channel constants used to paint points inside and outside the set.

    Points outside the set start from the ``out_*`` base and move by the
    matching ``*_delta`` for every iteration they survived.
    """

    in_red: int = 0
    in_green: int = 0
    in_blue: int = 0
    in_alpha: int = 255

    out_red: int = 10
    out_green: int = 10
    out_blue: int = 30
    out_alpha: int = 255

    red_delta: float = 1.6
    green_delta: float = 0.8
    blue_delta: float = 1.4
    alpha_delta: float = 0.0

    def with_inside(self, color: Color) -> "ColorScheme":
        return replace(
            self,
            in_red=color.red,
            in_green=color.green,
            in_blue=color.blue,
            in_alpha=color.alpha,
        )


DEFAULT_SCHEME = ColorScheme()


def _channel(base: int, delta: float, stage: int) -> int:
    return max(0, min(int(base + delta * stage), 255))


def color_in_set(scheme: ColorScheme = DEFAULT_SCHEME) -> Color:
    return Color(scheme.in_red, scheme.in_green, scheme.in_blue, scheme.in_alpha)


def color_out_of_set(stage: int, scheme: ColorScheme = DEFAULT_SCHEME) -> Color:
    """Color for a point eliminated at iteration ``stage``, clamped to a byte."""

    return Color(
        _channel(scheme.out_red, scheme.red_delta, stage),
        _channel(scheme.out_green, scheme.green_delta, stage),
        _channel(scheme.out_blue, scheme.blue_delta, stage),
        _channel(scheme.out_alpha, scheme.alpha_delta, stage),
    )


def parse_hex_color(hex_color: str) -> Color:
    """Parse ``#RRGGBB`` into an opaque color."""

    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('color must be in the form #RRGGBB.')
    try:
        red, green, blue = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('color must contain only hexadecimal digits.') from exc
    return Color(red, green, blue, 255)
