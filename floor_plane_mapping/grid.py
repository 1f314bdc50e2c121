import math
from dataclasses import dataclass

import numpy as np

from floor_plane_mapping.cells import LogOddsCell

# Fraction of a cell absorbed at the lower boundary so that cell corners
# rebuilt from origin + n * resolution map back to cell n
BOUNDARY_TOLERANCE = 1e-9


@dataclass(frozen=True)
class GridInfo:
    """Fixed grid metadata. Origin is the world position of the lower-left corner."""
    width: int
    height: int
    resolution: float
    origin_x: float
    origin_y: float
    frame_id: str

    @property
    def size(self):
        return self.width * self.height


class ProbabilisticGrid:
    """
    Fixed-size 2D array of probabilistic cells covering the floor plane.

    Cells are stored row-major: index = row * width + column, where row 0
    is the minimum-y edge of the grid.
    """

    def __init__(self, info: GridInfo, cell_type=LogOddsCell):
        if info.width <= 0 or info.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {info.width}x{info.height}")
        if not info.resolution > 0.0:
            raise ValueError(f"Grid resolution must be positive, got {info.resolution}")
        self.info = info
        self.cell_type = cell_type
        self.cells = [cell_type() for _ in range(info.size)]

    def __len__(self):
        return len(self.cells)

    def __getitem__(self, index):
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    @property
    def frame_id(self):
        return self.info.frame_id

    def index_of(self, x, y):
        """Get index of the grid cell containing world point (x, y), or None if outside."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        col = math.floor((x - self.info.origin_x) / self.info.resolution + BOUNDARY_TOLERANCE)
        row = math.floor((y - self.info.origin_y) / self.info.resolution + BOUNDARY_TOLERANCE)
        if not (0 <= col < self.info.width) or not (0 <= row < self.info.height):
            return None
        return row * self.info.width + col

    def indices_of(self, xy):
        """Vectorised index_of over an (N, 2+) array; outside points map to -1."""
        xy = np.asarray(xy, dtype=np.float64)
        cols = np.floor((xy[:, 0] - self.info.origin_x) / self.info.resolution + BOUNDARY_TOLERANCE)
        rows = np.floor((xy[:, 1] - self.info.origin_y) / self.info.resolution + BOUNDARY_TOLERANCE)
        inside = (cols >= 0) & (cols < self.info.width) & (rows >= 0) & (rows < self.info.height)
        indices = np.full(len(xy), -1, dtype=np.int64)
        indices[inside] = rows[inside].astype(np.int64) * self.info.width + cols[inside].astype(np.int64)
        return indices

    def center_of(self, index):
        """Get the world (x, y) of the lower-left corner of the cell at index."""
        if not (0 <= index < self.info.size):
            raise IndexError(f"Cell index {index} outside grid of {self.info.size} cells")
        col = index % self.info.width
        row = index // self.info.width
        return (self.info.origin_x + col * self.info.resolution,
                self.info.origin_y + row * self.info.resolution)

    def centers_of(self, indices):
        """Vectorised center_of, returns an (N, 2) array."""
        indices = np.asarray(indices, dtype=np.int64)
        cols = indices % self.info.width
        rows = indices // self.info.width
        return np.column_stack((self.info.origin_x + cols * self.info.resolution,
                                self.info.origin_y + rows * self.info.resolution))

    def reset(self):
        for cell in self.cells:
            cell.reset()
