import logging
from dataclasses import dataclass

import numpy as np

from floor_plane_mapping.binning import bin_points
from floor_plane_mapping.cells import cell_policy
from floor_plane_mapping.classifier import ERROR_THRESH, apply_updates, classify
from floor_plane_mapping.export import snapshot, to_image
from floor_plane_mapping.grid import ProbabilisticGrid
from floor_plane_mapping.plane import MIN_NUM_POINTS, fit_cells
from floor_plane_mapping.transforms import TransformUnavailable


@dataclass
class BatchReport:
    """Summary of one integrated batch."""
    points_total: int
    points_binned: int
    cells_fitted: int
    cells_occupied: int
    cells_free: int


class FloorPlaneMapper:
    """
    Accumulates point-cloud batches into a probabilistic floor occupancy grid.

    Batches are processed one at a time. A batch whose transforms cannot be
    obtained is dropped as a whole and leaves the grid untouched.
    """

    def __init__(self, config, transforms, logger=None):
        self.config = config.validate()
        self.transforms = transforms
        # rclpy and stdlib loggers both provide debug/info/warning/error
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.grid = ProbabilisticGrid(config.grid_info(), cell_policy(config.cell_policy))
        self.batches_integrated = 0
        self.batches_dropped = 0

    def integrate(self, points, source_frame, stamp=None):
        """
        Integrate sensor-frame points observed at stamp.

        Returns a BatchReport, or None when the batch was dropped.
        """
        sensor_points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        try:
            base_points = self.transforms.transform_points(
                sensor_points, self.config.base_frame, source_frame, stamp)
            world_points = self.transforms.transform_points(
                sensor_points, self.config.map_frame, source_frame, stamp)
        except TransformUnavailable as e:
            self._drop(e)
            return None
        return self.integrate_frames(sensor_points, base_points, world_points, stamp)

    def integrate_frames(self, sensor_points, base_points, world_points, stamp=None):
        """Integrate points already projected into the sensor, base and map frames."""
        buckets = bin_points(self.grid, sensor_points, base_points, world_points,
                             self.config.max_range)
        fits = fit_cells(buckets, world_points, MIN_NUM_POINTS)

        # Get coordinates of fitted grid cells in robot frame
        base_corners = np.empty((0, 3))
        if fits:
            corners = self.grid.centers_of(sorted(fits))
            corners = np.column_stack((corners, np.zeros(len(corners))))
            try:
                base_corners = self.transforms.transform_points(
                    corners, self.config.base_frame, self.config.map_frame, stamp)
            except TransformUnavailable as e:
                self._drop(e)
                return None

        updates = classify(fits, base_corners, ERROR_THRESH)
        apply_updates(self.grid, updates)
        self.batches_integrated += 1

        occupied = sum(1 for u in updates if u.occupied)
        report = BatchReport(
            points_total=len(np.asarray(sensor_points).reshape(-1, 3)),
            points_binned=buckets.point_count,
            cells_fitted=len(fits),
            cells_occupied=occupied,
            cells_free=len(updates) - occupied,
        )
        self.logger.debug(
            f"Batch {self.batches_integrated}: {report.points_binned}/{report.points_total} points binned, "
            f"{report.cells_fitted} cells fitted ({report.cells_occupied} occupied, {report.cells_free} free)"
        )
        return report

    def _drop(self, error):
        self.batches_dropped += 1
        self.logger.warning(f"Dropping point cloud batch: {error}")

    def snapshot(self):
        return snapshot(self.grid)

    def image(self):
        return to_image(self.snapshot())

    def reset(self):
        self.grid.reset()
