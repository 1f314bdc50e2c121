import math

import numpy as np
import pytest

from floor_plane_mapping.classifier import (
    ERROR_THRESH, CellUpdate, apply_updates, classify, distance_weight, flatness, is_obstacle)
from floor_plane_mapping.grid import GridInfo, ProbabilisticGrid


def test_flatness_of_horizontal_and_tilted_planes():
    assert flatness((0.0, 0.0, 3.0)) == 1.0
    assert flatness((1.0, 1.0, 0.0)) == pytest.approx(1.0 / 3.0)
    assert flatness((0.5, 0.0, 0.0)) == pytest.approx(0.8)


def test_threshold_boundary():
    assert not is_obstacle((0.0, 0.0, 0.0))
    assert is_obstacle((1.0, 1.0, 0.0))
    # Just steeper than the boundary at a = 0.5
    assert is_obstacle((0.51, 0.0, 0.0))
    assert not is_obstacle((0.49, 0.0, 0.0))
    assert ERROR_THRESH == 0.8


def test_distance_weight_decays_exponentially():
    assert distance_weight(0.0) == 1.0
    assert distance_weight(2.0) == pytest.approx(math.exp(-2.0))
    assert distance_weight(1.0) > distance_weight(3.0)


def test_classify_uses_base_frame_distance():
    fits = {
        7: np.array([1.0, 1.0, 0.0]),
        2: np.array([0.0, 0.0, 0.0]),
    }
    # Corners in ascending cell order: cell 2 then cell 7
    base_corners = np.array([[3.0, 4.0, 0.0], [0.0, 1.0, 0.0]])
    updates = classify(fits, base_corners)
    assert updates == [
        CellUpdate(cell_index=2, occupied=False, weight=pytest.approx(math.exp(-5.0))),
        CellUpdate(cell_index=7, occupied=True, weight=pytest.approx(math.exp(-1.0))),
    ]


def test_classify_checks_corner_count():
    with pytest.raises(ValueError):
        classify({1: np.zeros(3)}, np.empty((0, 3)))
    assert classify({}, np.empty((0, 3))) == []


def test_apply_updates_dispatches_to_cells():
    info = GridInfo(width=3, height=1, resolution=1.0, origin_x=0.0, origin_y=0.0, frame_id='map')
    grid = ProbabilisticGrid(info)
    apply_updates(grid, [
        CellUpdate(cell_index=0, occupied=True, weight=1.0),
        CellUpdate(cell_index=2, occupied=False, weight=0.5),
    ])
    assert grid[0].is_occupied()
    assert grid[1].is_unknown()
    assert grid[2].is_free()
    assert grid[2].logodds == pytest.approx(-0.25)
