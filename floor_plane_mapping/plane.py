import numpy as np

# A cell needs strictly more points than this to be fitted
MIN_NUM_POINTS = 2


def fit_plane(points):
    """
    Least-squares fit of z = a*x + b*y + c to an (N, 3) array of points.

    Returns the coefficients (a, b, c). Degenerate inputs (collinear or
    repeated points) yield the minimum-norm solution instead of failing.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    # AX = b
    A = np.column_stack((points[:, 0], points[:, 1], np.ones(len(points))))
    z = points[:, 2]
    coefficients, _, _, _ = np.linalg.lstsq(A, z, rcond=None)
    return coefficients


def fit_cells(buckets, world_points, min_points=MIN_NUM_POINTS):
    """Fit a plane for every bucket holding more than min_points points."""
    world_points = np.asarray(world_points, dtype=np.float64).reshape(-1, 3)
    fits = {}
    for cell_index, point_indices in buckets.items():
        if len(point_indices) > min_points:
            fits[cell_index] = fit_plane(world_points[point_indices])
    return fits
