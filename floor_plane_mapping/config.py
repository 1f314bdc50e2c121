from dataclasses import dataclass
from typing import Optional

from floor_plane_mapping.cells import CELL_POLICIES
from floor_plane_mapping.grid import GridInfo


class ConfigurationError(ValueError):
    """Invalid mapper configuration; the mapper refuses to start."""


@dataclass
class MapperConfig:
    map_frame: str = 'map'
    base_frame: str = 'base_link'
    # Maximum planar distance from the robot at which points are used (m)
    max_range: float = 4.5
    # Width, height in cells
    width: int = 102
    height: int = 102
    # Resolution in m/cell
    resolution: float = 0.1
    # Lower-left corner of the grid; centred on the map frame when unset
    origin_x: Optional[float] = None
    origin_y: Optional[float] = None
    cell_policy: str = 'log_odds'
    # Bounded wait for the transforms of a batch (s)
    transform_timeout: float = 1.0

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Grid size must be positive, got {self.width}x{self.height}")
        if not self.resolution > 0.0:
            raise ConfigurationError(f"Resolution must be positive, got {self.resolution}")
        if not self.max_range > 0.0:
            raise ConfigurationError(f"max_range must be positive, got {self.max_range}")
        if not self.transform_timeout > 0.0:
            raise ConfigurationError(
                f"transform_timeout must be positive, got {self.transform_timeout}")
        if self.cell_policy not in CELL_POLICIES:
            raise ConfigurationError(
                f"Unknown cell_policy '{self.cell_policy}', expected one of {sorted(CELL_POLICIES)}")
        if not self.map_frame or not self.base_frame:
            raise ConfigurationError("map_frame and base_frame must be non-empty")
        return self

    def grid_info(self):
        origin_x = self.origin_x if self.origin_x is not None else -(self.resolution * self.width) / 2
        origin_y = self.origin_y if self.origin_y is not None else -(self.resolution * self.height) / 2
        return GridInfo(
            width=int(self.width),
            height=int(self.height),
            resolution=float(self.resolution),
            origin_x=float(origin_x),
            origin_y=float(origin_y),
            frame_id=self.map_frame,
        )
