import math
from dataclasses import dataclass

import numpy as np

# Planes flatter than this are floor, steeper ones are obstacles
ERROR_THRESH = 0.8


@dataclass(frozen=True)
class CellUpdate:
    cell_index: int
    occupied: bool
    weight: float


def flatness(coefficients):
    """
    Score how horizontal the plane z = a*x + b*y + c is.

    1.0 for a perfectly horizontal plane, decreasing towards 0 as it tilts.
    This is the squared cosine of the normal's angle to the vertical axis,
    not a fitting residual.
    """
    a, b = coefficients[0], coefficients[1]
    return 1.0 / (a * a + b * b + 1.0)


def distance_weight(distance):
    """Confidence of an update made at the given distance from the robot."""
    return math.exp(-distance)


def is_obstacle(coefficients, threshold=ERROR_THRESH):
    return flatness(coefficients) < threshold


def classify(fits, base_corners, threshold=ERROR_THRESH):
    """
    Turn plane fits into weighted cell updates.

    fits maps cell index -> (a, b, c); base_corners holds each fitted cell's
    corner in the robot base frame, in ascending cell index order.
    """
    cell_indices = sorted(fits)
    base_corners = np.asarray(base_corners, dtype=np.float64)
    if len(base_corners) != len(cell_indices):
        raise ValueError(f"Expected {len(cell_indices)} cell corners, got {len(base_corners)}")
    updates = []
    for cell_index, corner in zip(cell_indices, base_corners):
        # Distance of grid cell from robot
        d = math.hypot(corner[0], corner[1])
        updates.append(CellUpdate(
            cell_index=cell_index,
            occupied=bool(is_obstacle(fits[cell_index], threshold)),
            weight=distance_weight(d),
        ))
    return updates


def apply_updates(grid, updates):
    for update in updates:
        cell = grid[update.cell_index]
        if update.occupied:
            # Normal is not vertical -> cell occupied
            cell.reinforce_occupied(update.weight)
        else:
            # Normal is vertical -> cell empty
            cell.reinforce_free(update.weight)
