#!/usr/bin/env python3
import time

import numpy as np
import rclpy
from rclpy.node import Node
from rclpy.time import Time
from sensor_msgs.msg import Image, PointCloud2
import sensor_msgs_py.point_cloud2 as pc2
from nav_msgs.msg import OccupancyGrid
from std_msgs.msg import Header

from floor_plane_mapping.config import ConfigurationError, MapperConfig
from floor_plane_mapping.mapper import FloorPlaneMapper
from floor_plane_mapping.tf_provider import TfTransformProvider


class FloorPlaneMappingNode(Node):
    def __init__(self):
        super().__init__('floor_plane_mapping')

        # Frames the point cloud is projected into. The map frame is the
        # frame of the published grid.
        self.declare_parameter("map_frame", "map")
        self.declare_parameter("base_frame", "base_link")
        # Points further than this from the robot are ignored (m).
        self.declare_parameter("max_range", 4.5)
        # Width, height in cells and resolution in m/cell.
        self.declare_parameter("width", 102)
        self.declare_parameter("height", 102)
        self.declare_parameter("resolution", 0.1)
        self.declare_parameter("cell_policy", "log_odds")
        self.declare_parameter("transform_timeout", 1.0)
        self.declare_parameter("cloud_topic", "/vrep/depthSensor")
        self.declare_parameter("grid_topic", "grid")
        self.declare_parameter("image_topic", "gridimage")

        width = self.get_parameter("width").value
        height = self.get_parameter("height").value
        resolution = self.get_parameter("resolution").value
        # Origin is the bottom left corner, grid centred on the map frame by default.
        self.declare_parameter("origin_x", -(resolution * width) / 2)
        self.declare_parameter("origin_y", -(resolution * height) / 2)

        self.config = MapperConfig(
            map_frame=self.get_parameter("map_frame").value,
            base_frame=self.get_parameter("base_frame").value,
            max_range=self.get_parameter("max_range").value,
            width=width,
            height=height,
            resolution=resolution,
            origin_x=self.get_parameter("origin_x").value,
            origin_y=self.get_parameter("origin_y").value,
            cell_policy=self.get_parameter("cell_policy").value,
            transform_timeout=self.get_parameter("transform_timeout").value,
        )
        try:
            self.config.validate()
        except ConfigurationError as e:
            self.get_logger().fatal(f"Invalid configuration: {e}")
            raise

        self.transforms = TfTransformProvider(self, timeout=self.config.transform_timeout)
        self.mapper = FloorPlaneMapper(self.config, self.transforms, logger=self.get_logger())

        # Publishers for the grid and its image.
        self.grid_pub = self.create_publisher(OccupancyGrid, self.get_parameter("grid_topic").value, 1)
        self.image_pub = self.create_publisher(Image, self.get_parameter("image_topic").value, 1)

        self.create_subscription(
            PointCloud2,
            self.get_parameter("cloud_topic").value,
            self.pointcloud_callback,
            1
        )

        # Logging rate limiter.
        self.last_log_time = time.time()
        self.log_interval = 3.0  # seconds

        info = self.config.grid_info()
        self.get_logger().info(
            f"Floor plane mapping started: {info.width}x{info.height} cells at {info.resolution} m/cell "
            f"in '{info.frame_id}', {self.config.cell_policy} cells."
        )

    def should_log(self):
        current_time = time.time()
        if current_time - self.last_log_time >= self.log_interval:
            self.last_log_time = current_time
            return True
        return False

    def pointcloud_callback(self, msg):
        points = self.read_pointcloud(msg)
        stamp = Time.from_msg(msg.header.stamp)

        report = self.mapper.integrate(points, msg.header.frame_id, stamp)
        if report is None:
            # Batch dropped, nothing new to publish
            return
        if self.should_log():
            self.get_logger().info(
                f"Binned {report.points_binned}/{report.points_total} points, "
                f"{report.cells_occupied} occupied and {report.cells_free} free cell updates. "
                f"Dropped batches so far: {self.mapper.batches_dropped}"
            )

        snapshot = self.mapper.snapshot()
        self.grid_pub.publish(self.to_grid_msg(snapshot, msg.header.stamp))
        self.image_pub.publish(self.to_image_msg(self.mapper.image(), msg.header.stamp))

    def read_pointcloud(self, msg):
        points = pc2.read_points(msg, field_names=("x", "y", "z"), skip_nans=True)
        return np.array([(p[0], p[1], p[2]) for p in points], dtype=np.float64).reshape(-1, 3)

    def to_grid_msg(self, snapshot, stamp):
        info = snapshot.info
        grid_msg = OccupancyGrid()
        grid_msg.header = Header()
        grid_msg.header.stamp = stamp
        grid_msg.header.frame_id = info.frame_id

        grid_msg.info.resolution = info.resolution
        grid_msg.info.width = info.width
        grid_msg.info.height = info.height
        grid_msg.info.origin.position.x = info.origin_x
        grid_msg.info.origin.position.y = info.origin_y
        grid_msg.info.origin.position.z = 0.0
        grid_msg.info.origin.orientation.w = 1.0

        grid_msg.data = snapshot.data.tolist()
        return grid_msg

    def to_image_msg(self, image, stamp):
        image_msg = Image()
        image_msg.header.stamp = stamp
        image_msg.height, image_msg.width = image.shape
        image_msg.encoding = "mono8"
        image_msg.is_bigendian = 0
        image_msg.step = image.shape[1]
        image_msg.data = image.tobytes()
        return image_msg


def main(args=None):
    rclpy.init(args=args)
    node = None
    try:
        node = FloorPlaneMappingNode()
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        if node is not None:
            node.destroy_node()
        rclpy.shutdown()


if __name__ == '__main__':
    main()
