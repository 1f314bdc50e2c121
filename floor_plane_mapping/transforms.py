from abc import ABC, abstractmethod

import numpy as np
from transforms3d.quaternions import quat2mat


class TransformUnavailable(RuntimeError):
    """The transform between two frames could not be obtained in time."""

    def __init__(self, target_frame, source_frame, reason=''):
        self.target_frame = target_frame
        self.source_frame = source_frame
        message = f"No transform from '{source_frame}' to '{target_frame}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


def make_transform(translation, quaternion):
    """Build a 4x4 homogeneous matrix from a translation and a (w, x, y, z) quaternion."""
    matrix = np.eye(4)
    matrix[:3, :3] = quat2mat(quaternion)
    matrix[:3, 3] = translation
    return matrix


def apply_transform(matrix, points):
    """Apply a 4x4 homogeneous transform to an (N, 3) array of points."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return (points @ matrix[:3, :3].T) + matrix[:3, 3]


class TransformProvider(ABC):
    """Source of rigid transforms between named frames at a given time."""

    @abstractmethod
    def lookup(self, target_frame, source_frame, stamp=None):
        """
        Return the 4x4 matrix mapping points from source_frame to target_frame.

        Raises TransformUnavailable when it cannot be obtained.
        """

    def transform_points(self, points, target_frame, source_frame, stamp=None):
        if target_frame == source_frame:
            return np.asarray(points, dtype=np.float64).reshape(-1, 3).copy()
        return apply_transform(self.lookup(target_frame, source_frame, stamp), points)


class StaticTransformProvider(TransformProvider):
    """
    Transforms from fixed frame poses expressed in one common root frame.

    Used for offline replay and tests; the stamp is ignored.
    """

    def __init__(self, root_frame='map'):
        self.root_frame = root_frame
        self.poses = {root_frame: np.eye(4)}

    def set_pose(self, frame, translation=(0.0, 0.0, 0.0), quaternion=(1.0, 0.0, 0.0, 0.0)):
        self.poses[frame] = make_transform(translation, quaternion)

    def remove(self, frame):
        self.poses.pop(frame, None)

    def lookup(self, target_frame, source_frame, stamp=None):
        for frame in (target_frame, source_frame):
            if frame not in self.poses:
                raise TransformUnavailable(target_frame, source_frame, f"unknown frame '{frame}'")
        return np.linalg.inv(self.poses[target_frame]) @ self.poses[source_frame]
