import numpy as np
import pytest

from floor_plane_mapping.binning import PointBuckets
from floor_plane_mapping.plane import MIN_NUM_POINTS, fit_cells, fit_plane


def plane_points(a, b, c, xy):
    xy = np.asarray(xy, dtype=np.float64)
    return np.column_stack((xy, a * xy[:, 0] + b * xy[:, 1] + c))


SQUARE = [(0.1, 0.1), (0.2, 0.1), (0.1, 0.2), (0.2, 0.2)]


@pytest.mark.parametrize('a, b, c', [
    (0.0, 0.0, 0.0),
    (0.0, 0.0, -0.3),
    (1.0, 1.0, 0.0),
    (-2.0, 0.5, 1.25),
])
def test_exact_plane_recovered(a, b, c):
    coefficients = fit_plane(plane_points(a, b, c, SQUARE))
    np.testing.assert_allclose(coefficients, [a, b, c], atol=1e-9)


def test_noisy_plane_is_least_squares_solution():
    rng = np.random.default_rng(11)
    xy = rng.uniform(0.0, 0.1, size=(50, 2))
    points = plane_points(0.2, -0.1, 0.05, xy)
    points[:, 2] += rng.normal(0.0, 1e-4, size=50)
    np.testing.assert_allclose(fit_plane(points), [0.2, -0.1, 0.05], atol=0.05)


def test_collinear_points_do_not_raise():
    points = [[0.1, 0.1, 0.0], [0.2, 0.2, 0.0], [0.3, 0.3, 0.0]]
    coefficients = fit_plane(points)
    assert coefficients.shape == (3,)
    assert np.all(np.isfinite(coefficients))


def test_only_buckets_above_minimum_are_fitted():
    world = np.vstack((
        plane_points(0.0, 0.0, 0.0, SQUARE[:MIN_NUM_POINTS]),
        plane_points(0.0, 0.0, 0.0, SQUARE[:MIN_NUM_POINTS + 1]),
    ))
    buckets = PointBuckets(4, {
        1: np.arange(0, MIN_NUM_POINTS),
        3: np.arange(MIN_NUM_POINTS, len(world)),
    })
    fits = fit_cells(buckets, world)
    assert list(fits) == [3]
    np.testing.assert_allclose(fits[3], [0.0, 0.0, 0.0], atol=1e-9)
