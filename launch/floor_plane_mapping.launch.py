#!/usr/bin/env python3
import os

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch_ros.actions import Node


def generate_launch_description():
    params = os.path.join(
        get_package_share_directory('floor_plane_mapping'), 'config', 'floor_plane_mapping.yaml')

    floor_plane_mapping = Node(
        package='floor_plane_mapping',
        executable='floor_plane_mapping',
        name='floor_plane_mapping',
        output='screen',
        parameters=[params]
    )

    return LaunchDescription([
        floor_plane_mapping,
    ])
