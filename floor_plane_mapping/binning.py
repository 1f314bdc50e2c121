import numpy as np

# Points closer than this to the sensor (in its own frame) are self-returns
MIN_SENSOR_DISTANCE = 1e-2


class PointBuckets:
    """
    Point indices grouped per grid cell for a single batch.

    Every cell has a bucket; cells that received no point have an empty one.
    """

    def __init__(self, cell_count, buckets):
        self.cell_count = cell_count
        self._buckets = buckets

    def __len__(self):
        return self.cell_count

    def __getitem__(self, cell_index):
        if not (0 <= cell_index < self.cell_count):
            raise IndexError(f"Cell index {cell_index} outside grid of {self.cell_count} cells")
        return self._buckets.get(cell_index, np.empty(0, dtype=np.int64))

    def items(self):
        """Iterate (cell_index, point_indices) over non-empty buckets in cell order."""
        for cell_index in sorted(self._buckets):
            yield cell_index, self._buckets[cell_index]

    @property
    def point_count(self):
        return sum(len(b) for b in self._buckets.values())


def planar_distance(points):
    points = np.asarray(points, dtype=np.float64)
    return np.hypot(points[:, 0], points[:, 1])


def bin_points(grid, sensor_points, base_points, world_points, max_range,
               min_sensor_distance=MIN_SENSOR_DISTANCE):
    """
    Drop unusable points and store the index of each remaining point in the
    bucket of the grid cell its world projection falls into.

    The three arrays hold the same points in the sensor, base and world frames.
    """
    sensor_points = np.asarray(sensor_points, dtype=np.float64).reshape(-1, 3)
    base_points = np.asarray(base_points, dtype=np.float64).reshape(-1, 3)
    world_points = np.asarray(world_points, dtype=np.float64).reshape(-1, 3)
    if not (len(sensor_points) == len(base_points) == len(world_points)):
        raise ValueError(
            f"Point projections differ in length: sensor={len(sensor_points)}, "
            f"base={len(base_points)}, world={len(world_points)}"
        )

    keep = (np.isfinite(sensor_points).all(axis=1)
            & np.isfinite(base_points).all(axis=1)
            & np.isfinite(world_points).all(axis=1))
    # Inside the camera in the sensor frame, bogus
    keep &= ~(planar_distance(sensor_points) < min_sensor_distance)
    # Too far from the robot
    keep &= ~(planar_distance(base_points) > max_range)

    candidates = np.flatnonzero(keep)
    cells = grid.indices_of(world_points[candidates]) if len(candidates) else np.empty(0, dtype=np.int64)
    inside = cells >= 0
    candidates = candidates[inside]
    cells = cells[inside]

    buckets = {}
    if len(candidates):
        # Stable sort keeps point order inside each bucket
        order = np.argsort(cells, kind='stable')
        cells = cells[order]
        candidates = candidates[order]
        unique_cells, starts = np.unique(cells, return_index=True)
        for cell_index, chunk in zip(unique_cells, np.split(candidates, starts[1:])):
            buckets[int(cell_index)] = chunk
    return PointBuckets(len(grid), buckets)
