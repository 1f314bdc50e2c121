from setuptools import find_packages, setup
from glob import glob

package_name = 'floor_plane_mapping'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        # ament index registration
        ('share/ament_index/resource_index/packages', [f'resource/{package_name}']),

        # package manifest
        (f'share/{package_name}', ['package.xml']),

        # launch scripts and param files
        (f'share/{package_name}/launch', glob('launch/*.py')),
        (f'share/{package_name}/config', glob('config/*.yaml')),
    ],
    # ROS dependencies (rclpy, tf2_ros, sensor_msgs_py, ...) come from package.xml
    install_requires=[
        'setuptools',
        'numpy',
        'transforms3d',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='mewert',
    maintainer_email='mewert@todo.todo',
    description='Floor plane occupancy grid mapping from point clouds',
    license='MIT',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'floor_plane_mapping = floor_plane_mapping.floor_plane_mapping_node:main',
        ],
    },
)
