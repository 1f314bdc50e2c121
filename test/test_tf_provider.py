import pytest

rclpy = pytest.importorskip('rclpy')
pytest.importorskip('tf2_ros')

from floor_plane_mapping.tf_provider import TfTransformProvider  # noqa: E402
from floor_plane_mapping.transforms import TransformUnavailable  # noqa: E402


@pytest.fixture
def node():
    rclpy.init()
    node = rclpy.create_node('tf_provider_test')
    yield node
    node.destroy_node()
    rclpy.shutdown()


def test_listener_spins_on_its_own_thread(node):
    provider = TfTransformProvider(node, timeout=0.1)
    # The node's executor is busy in the point cloud callback while lookups wait
    assert provider.tf_listener.dedicated_listener_thread.is_alive()
    provider.tf_listener.unregister()


def test_missing_transform_times_out(node):
    provider = TfTransformProvider(node, timeout=0.1)
    with pytest.raises(TransformUnavailable, match='timed out'):
        provider.lookup('base_link', 'camera')
    provider.tf_listener.unregister()
