"""Parallel fill of a Julia set color map."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .coloring import DEFAULT_SCHEME, ColorScheme, color_in_set, color_out_of_set
from .evaluator import EscapeResult, is_in_julia_set
from .viewport import Viewport, pixel_to_complex

DEFAULT_ITERATIONS = 100
CHANNELS = 4

Evaluator = Callable[[complex, complex, int], EscapeResult]


class WorkerStartError(RuntimeError):
    """Raised when a fill worker cannot be started."""


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of a Julia set."""

    viewport: Viewport
    c: complex
    workers: int = 1
    max_iterations: int = DEFAULT_ITERATIONS
    scheme: ColorScheme = DEFAULT_SCHEME

    def validate(self) -> "RenderParameters":
        self.viewport.validate()
        if self.workers <= 0:
            raise ValueError("number of workers must be greater than 0.")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be greater than 0.")
        return self


@dataclass(frozen=True)
class WorkAssignment:
    """The columns one worker owns: every ``worker_count``-th column from ``worker_index``."""

    worker_index: int
    worker_count: int
    max_iterations: int
    viewport: Viewport
    c: complex
    grid: np.ndarray

    def columns(self) -> range:
        return range(self.worker_index, self.viewport.window_width, self.worker_count)


@dataclass(frozen=True)
class RenderResult:
    """Container for a completely filled color map."""

    grid: np.ndarray
    elapsed_ms: float
    params: RenderParameters


def new_color_map(viewport: Viewport) -> np.ndarray:
    """Allocate a zeroed ``(window_width, window_height, 4)`` RGBA grid indexed ``[x, y]``."""

    return np.zeros((viewport.window_width, viewport.window_height, CHANNELS), dtype=np.uint8)


def build_assignments(params: RenderParameters, grid: np.ndarray) -> list[WorkAssignment]:
    return [
        WorkAssignment(
            worker_index=worker_index,
            worker_count=params.workers,
            max_iterations=params.max_iterations,
            viewport=params.viewport,
            c=params.c,
            grid=grid,
        )
        for worker_index in range(params.workers)
    ]


def partial_fill(
    assignment: WorkAssignment,
    *,
    evaluate: Evaluator = is_in_julia_set,
    scheme: ColorScheme = DEFAULT_SCHEME,
) -> int:
    """Evaluate and color every cell in the columns owned by ``assignment``.

    Returns the number of cells written.
    """

    viewport = assignment.viewport
    grid = assignment.grid
    inside = color_in_set(scheme)
    written = 0

    for x in assignment.columns():
        for y in range(viewport.window_height):
            z = pixel_to_complex(viewport, x, y)
            result = evaluate(z, assignment.c, assignment.max_iterations)
            if result.in_set:
                grid[x, y] = inside
            else:
                grid[x, y] = color_out_of_set(result.stage, scheme)
            written += 1
    return written


def fill_julia_set(
    params: RenderParameters,
    *,
    evaluate: Evaluator = is_in_julia_set,
    grid: Optional[np.ndarray] = None,
) -> RenderResult:
    """Fill a color map for ``params`` using ``params.workers`` threads.

    Each worker owns a disjoint set of columns, so the grid is written without
    locks. All workers are joined before this returns; a worker that cannot be
    started raises :class:`WorkerStartError` and an exception inside a worker
    is re-raised here, in both cases without returning the grid.
    """

    if grid is None:
        grid = new_color_map(params.viewport)
    assignments = build_assignments(params, grid)

    futures = []
    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=params.workers, thread_name_prefix="julia-fill") as executor:
        for assignment in assignments:
            try:
                future = executor.submit(partial_fill, assignment, evaluate=evaluate, scheme=params.scheme)
            except RuntimeError as exc:
                raise WorkerStartError(
                    f"could not start worker {assignment.worker_index} of {assignment.worker_count}"
                ) from exc
            futures.append(future)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    for future in futures:
        future.result()

    return RenderResult(grid=grid, elapsed_ms=elapsed_ms, params=params)
