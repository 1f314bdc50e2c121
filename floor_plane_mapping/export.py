from dataclasses import dataclass

import numpy as np

from floor_plane_mapping.grid import GridInfo

UNKNOWN = -1
GRID_MAX = 100
# Gray level of unknown cells in the rendered image
GRID_IMAGE_DEFAULT = 50


@dataclass
class GridSnapshot:
    """Row-major per-cell confidence in {-1} U [0, 100], row 0 at minimum y."""
    info: GridInfo
    data: np.ndarray

    def as_2d(self):
        return self.data.reshape(self.info.height, self.info.width)


def cell_confidence(cell):
    if cell.is_occupied() or cell.is_free():
        # Round half to even; exact .5 percentages are not special-cased
        return int(round(GRID_MAX * cell.occupancy_probability()))
    return UNKNOWN


def snapshot(grid):
    data = np.fromiter((cell_confidence(cell) for cell in grid), dtype=np.int8, count=len(grid))
    return GridSnapshot(info=grid.info, data=data)


def to_image(snap):
    """
    Render a snapshot as a mono8 image, darker meaning more likely occupied.

    Image row 0 is the maximum-y edge of the grid.
    """
    confidence = snap.as_2d().astype(np.int32)
    image = np.full(confidence.shape, GRID_IMAGE_DEFAULT, dtype=np.uint8)
    known = confidence >= 0
    image[known] = ((GRID_MAX - confidence[known]) * 255 // 100).astype(np.uint8)
    return np.flipud(image).copy()
