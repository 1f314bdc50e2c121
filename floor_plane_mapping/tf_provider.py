from rclpy.duration import Duration
from rclpy.time import Time
from tf2_ros import TransformException
from tf2_ros.buffer import Buffer
from tf2_ros.transform_listener import TransformListener

from floor_plane_mapping.transforms import TransformProvider, TransformUnavailable, make_transform


class TfTransformProvider(TransformProvider):
    """Transform provider backed by a tf2 buffer, waiting up to timeout seconds per lookup."""

    def __init__(self, node, timeout=1.0):
        self.tf_buffer = Buffer()
        # Own spin thread so /tf keeps arriving while a callback waits in can_transform
        self.tf_listener = TransformListener(self.tf_buffer, node, spin_thread=True)
        self.timeout = Duration(seconds=timeout)

    def lookup(self, target_frame, source_frame, stamp=None):
        if stamp is None:
            # Latest available
            stamp = Time()
        # Wait for transforms to become available
        if not self.tf_buffer.can_transform(target_frame, source_frame, stamp, timeout=self.timeout):
            raise TransformUnavailable(target_frame, source_frame, "timed out waiting for transform")
        try:
            transform_stamped = self.tf_buffer.lookup_transform(target_frame, source_frame, stamp)
        except TransformException as e:
            raise TransformUnavailable(target_frame, source_frame, str(e)) from e
        translation = [
            transform_stamped.transform.translation.x,
            transform_stamped.transform.translation.y,
            transform_stamped.transform.translation.z
        ]
        quaternion = [
            transform_stamped.transform.rotation.w,
            transform_stamped.transform.rotation.x,
            transform_stamped.transform.rotation.y,
            transform_stamped.transform.rotation.z
        ]
        return make_transform(translation, quaternion)
