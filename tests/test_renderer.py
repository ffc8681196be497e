import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from julia import (
    RenderParameters,
    Viewport,
    WorkerStartError,
    build_assignments,
    color_in_set,
    fill_julia_set,
    is_in_julia_set,
    new_color_map,
    partial_fill,
    pixel_to_complex,
)

SMALL_VIEWPORT = Viewport(center_x=0.0, center_y=0.0, plane_width=4.0, plane_height=3.0, window_width=64, window_height=48)
C = complex(0.285, 0.01)


def _params(workers, viewport=SMALL_VIEWPORT, max_iterations=100):
    return RenderParameters(viewport=viewport, c=C, workers=workers, max_iterations=max_iterations)


class CountingEvaluator:
    """Counts evaluations per plane coordinate across worker threads."""

    def __init__(self):
        self.calls = Counter()
        self._lock = threading.Lock()

    def __call__(self, z, c, max_iterations):
        with self._lock:
            self.calls[z] += 1
        return is_in_julia_set(z, c, max_iterations)


def test_new_color_map_is_indexed_by_column_then_row():
    grid = new_color_map(SMALL_VIEWPORT)
    assert grid.shape == (64, 48, 4)
    assert grid.dtype == np.uint8
    assert not grid.any()


def test_assignments_partition_columns():
    grid = new_color_map(SMALL_VIEWPORT)
    assignments = build_assignments(_params(5), grid)

    assert [a.worker_index for a in assignments] == [0, 1, 2, 3, 4]
    owned = Counter(x for a in assignments for x in a.columns())
    assert sorted(owned) == list(range(SMALL_VIEWPORT.window_width))
    assert set(owned.values()) == {1}
    assert all(a.grid is grid for a in assignments)


def test_partial_fill_only_touches_its_columns():
    grid = new_color_map(SMALL_VIEWPORT)
    assignment = build_assignments(_params(3), grid)[1]

    written = partial_fill(assignment)

    filled_columns = [x for x in range(SMALL_VIEWPORT.window_width) if grid[x].any()]
    assert filled_columns == list(range(1, SMALL_VIEWPORT.window_width, 3))
    assert written == len(filled_columns) * SMALL_VIEWPORT.window_height


@pytest.mark.parametrize("workers", [2, 3, 7, 64, 100])
def test_result_is_independent_of_worker_count(workers):
    reference = fill_julia_set(_params(1)).grid
    result = fill_julia_set(_params(workers)).grid
    np.testing.assert_array_equal(result, reference)


@pytest.mark.parametrize("workers", [1, 4, 200])
def test_every_cell_is_evaluated_exactly_once(workers):
    evaluator = CountingEvaluator()
    result = fill_julia_set(_params(workers), evaluate=evaluator)

    assert sum(evaluator.calls.values()) == SMALL_VIEWPORT.window_width * SMALL_VIEWPORT.window_height
    assert set(evaluator.calls.values()) == {1}
    # The zeroed sentinel has alpha 0, which no default color uses.
    assert (result.grid[..., 3] == 255).all()


def test_more_workers_than_columns_fills_everything():
    viewport = Viewport(0.0, 0.0, 4.0, 3.0, 3, 2)
    result = fill_julia_set(_params(8, viewport=viewport))
    assert (result.grid[..., 3] == 255).all()


def test_fill_uses_supplied_grid_and_reports_timing():
    grid = new_color_map(SMALL_VIEWPORT)
    params = _params(2)
    result = fill_julia_set(params, grid=grid)
    assert result.grid is grid
    assert result.params is params
    assert result.elapsed_ms >= 0.0


def test_worker_start_failure_is_fatal(monkeypatch):
    class FailingExecutor(ThreadPoolExecutor):
        submitted = 0

        def submit(self, fn, /, *args, **kwargs):
            if FailingExecutor.submitted >= 1:
                raise RuntimeError("can't start new thread")
            FailingExecutor.submitted += 1
            return super().submit(fn, *args, **kwargs)

    monkeypatch.setattr("julia.renderer.ThreadPoolExecutor", FailingExecutor)

    with pytest.raises(WorkerStartError, match="worker 1 of 3"):
        fill_julia_set(_params(3))


def test_worker_exception_is_reraised_after_join():
    def broken(z, c, max_iterations):
        raise ArithmeticError("boom")

    with pytest.raises(ArithmeticError, match="boom"):
        fill_julia_set(_params(2), evaluate=broken)


def test_end_to_end_example_is_not_degenerate():
    viewport = Viewport(center_x=0.0, center_y=0.0, plane_width=4.0, plane_height=3.0, window_width=800, window_height=600)
    params = RenderParameters(viewport=viewport, c=complex(0.285, 0.01), workers=1, max_iterations=100)

    grid = fill_julia_set(params).grid

    assert grid.shape == (800, 600, 4)
    inside = np.all(grid == np.array(color_in_set(), dtype=np.uint8), axis=-1)
    assert inside.any()
    assert (~inside).any()
    # The corners are far outside the set.
    assert not inside[0, 0]
    assert not inside[799, 599]


def test_render_parameters_validate_accepts_valid_parameters():
    params = _params(3)
    assert params.validate() is params


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"workers": 0}, "workers"),
        ({"max_iterations": 0}, "max_iterations"),
        ({"viewport": Viewport(0.0, 0.0, 4.0, 3.0, 0, 48)}, "window"),
        ({"viewport": Viewport(0.0, 0.0, 0.0, 3.0, 64, 48)}, "plane"),
    ],
)
def test_render_parameters_validate_rejects_invalid_values(kwargs, message):
    values = {"viewport": SMALL_VIEWPORT, "c": C, "workers": 1, "max_iterations": 100}
    values.update(kwargs)
    with pytest.raises(ValueError, match=message):
        RenderParameters(**values).validate()


def test_partial_fill_evaluates_mapped_plane_coordinates():
    evaluator = CountingEvaluator()
    grid = new_color_map(SMALL_VIEWPORT)
    partial_fill(build_assignments(_params(1), grid)[0], evaluate=evaluator)

    expected = {
        pixel_to_complex(SMALL_VIEWPORT, x, y)
        for x in range(SMALL_VIEWPORT.window_width)
        for y in range(SMALL_VIEWPORT.window_height)
    }
    assert set(evaluator.calls) == expected
