"""Escape-time membership test for the Julia set of z**2 + c."""

from __future__ import annotations

from typing import NamedTuple, Optional

# Once |z| exceeds 2 the orbit of z**2 + c diverges.
ESCAPE_RADIUS = 2.0


class EscapeResult(NamedTuple):
    """Outcome of iterating a single point."""

    in_set: bool
    stage: Optional[int] = None


def is_in_julia_set(z: complex, c: complex, max_iterations: int) -> EscapeResult:
    """Iterate ``z`` under z**2 + c for at most ``max_iterations`` steps.

    The point is rejected at the first (0-based) iteration whose result lies
    farther than ``ESCAPE_RADIUS`` from the origin; that iteration index is
    reported as ``stage``. An orbit that lands exactly on its previous value
    is a fixed point and is accepted immediately. Points that survive every
    iteration are accepted as well.
    """

    previous = z
    current = z
    for i in range(max_iterations):
        current = current * current + c
        if abs(current) > ESCAPE_RADIUS:
            return EscapeResult(False, i)
        if current == previous:
            return EscapeResult(True)
        previous = current
    return EscapeResult(True)
