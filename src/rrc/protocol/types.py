""" Message type enumerations shared by both ends of a connection. Command
    ids and telemetry ids are drawn from two disjoint spaces; the numeric
    values are part of the wire protocol and must not be reordered.
"""

import enum


class ControlMessageType(enum.IntEnum):
    """ Message types sent by a controller over the command channel. The
        robot answers every one of these with exactly one reply frame.
    """

    NO_CONTROL_DATA = 0
    TARGET_POSE_COMMAND = 1
    TWIST_COMMAND = 2
    GOTO_COMMAND = 3
    SIMPLE_ACTIONS_COMMAND = 4
    COMPLEX_ACTION_COMMAND = 5
    JOINTS_COMMAND = 6
    HEARTBEAT = 7
    TELEMETRY_REQUEST = 8
    MAP_REQUEST = 9
    LOG_LEVEL_SELECT = 10
    PERMISSION = 11
    ROBOT_TRAJECTORY_COMMAND = 12
    FILE_REQUEST = 13


class TelemetryMessageType(enum.IntEnum):
    """ Message types pushed by the robot over the telemetry channel.
    """

    NO_TELEMETRY_DATA = 0
    CURRENT_POSE = 1
    JOINT_STATE = 2
    CONTROLLABLE_JOINTS = 3
    SIMPLE_ACTIONS = 4
    COMPLEX_ACTIONS = 5
    ROBOT_NAME = 6
    ROBOT_STATE = 7
    LOG_MESSAGE = 8
    VIDEO_STREAMS = 9
    SIMPLE_SENSOR_DEFINITION = 10
    SIMPLE_SENSOR_VALUE = 11
    WRENCH_STATE = 12
    MAPS_DEFINITION = 13
    MAP = 14
    POSES = 15
    TRANSFORMS = 16
    PERMISSION_REQUEST = 17
    POINTCLOUD = 18
    IMU_VALUES = 19
    CONTACT_POINTS = 20
    CURRENT_TWIST = 21
    CURRENT_ACCELERATION = 22
    CAMERA_INFORMATION = 23
    IMAGE = 24
    IMAGE_LAYERS = 25
    ODOMETRY = 26
    CONTROLLABLE_FRAMES = 27
    FILE_DEFINITION = 28


class LogLevel(enum.IntEnum):
    """ Severity of a log message sent as telemetry. Anything at CUSTOM or
        above is always sent regardless of the level selected by the
        controller.
    """

    NONE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    CUSTOM = 20


class MapMessageType(enum.IntEnum):
    """ Well-known map ids used with :func:`ControlledRobot.set_map`.
    """

    NO_MAP_DATA = 0
    POINTCLOUD_MAP = 1
    GRID_MAP = 2


# Convenience aliases, so callers can write types.JOINTS_COMMAND.

globals().update(ControlMessageType.__members__)
globals().update(TelemetryMessageType.__members__)
globals().update(LogLevel.__members__)
globals().update(MapMessageType.__members__)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
