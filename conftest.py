import numpy as np
import pytest

from floor_plane_mapping.config import MapperConfig
from floor_plane_mapping.transforms import StaticTransformProvider


@pytest.fixture
def small_config():
    """10x10 grid of 1 m cells with its lower-left corner at (-5, -5)."""
    return MapperConfig(width=10, height=10, resolution=1.0, origin_x=-5.0, origin_y=-5.0)


@pytest.fixture
def transforms():
    """Robot and camera both sit at (-2, 0) in the map, facing +x."""
    provider = StaticTransformProvider(root_frame='map')
    provider.set_pose('base_link', translation=(-2.0, 0.0, 0.0))
    provider.set_pose('camera', translation=(-2.0, 0.0, 0.0))
    return provider


@pytest.fixture
def to_camera():
    """Express map points in the camera frame of the transforms fixture."""
    def convert(world_points):
        return np.asarray(world_points, dtype=np.float64) - np.array([-2.0, 0.0, 0.0])
    return convert
