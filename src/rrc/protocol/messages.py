""" Payload schemas for every command and telemetry message kind. Each
    schema is a :class:`msgspec.Struct` encoded as JSON; every field has a
    default, so an empty payload parses to a default-valued instance, the
    same way an empty protobuf message would.

    :func:`serialize` and :func:`parse` are the only two entry points the
    protocol layer uses; it never inspects payload internals otherwise.
"""

import typing

import msgspec

from .. import json
from ..errors import ParseFailed


def _list():
    return msgspec.field(default_factory=list)


def _of(cls):
    return msgspec.field(default_factory=cls)


class TimeStamp(msgspec.Struct):
    secs: int = 0
    nsecs: int = 0


class Header(msgspec.Struct):
    timestamp: TimeStamp = _of(TimeStamp)
    frame: str = ''


class Vector3(msgspec.Struct):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Quaternion(msgspec.Struct):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


class Pose(msgspec.Struct):
    header: Header = _of(Header)
    position: Vector3 = _of(Vector3)
    orientation: Quaternion = _of(Quaternion)


class Poses(msgspec.Struct):
    header: Header = _of(Header)
    poses: typing.List[Pose] = _list()


class Twist(msgspec.Struct):
    header: Header = _of(Header)
    linear: Vector3 = _of(Vector3)
    angular: Vector3 = _of(Vector3)


class Acceleration(msgspec.Struct):
    header: Header = _of(Header)
    linear: Vector3 = _of(Vector3)
    angular: Vector3 = _of(Vector3)


class GoTo(msgspec.Struct):
    waypoint: Pose = _of(Pose)
    max_forward_speed: float = 0.0
    waypoint_max_forward_speed: float = 0.0


class JointState(msgspec.Struct):
    header: Header = _of(Header)
    names: typing.List[str] = _list()
    positions: typing.List[float] = _list()
    velocities: typing.List[float] = _list()
    efforts: typing.List[float] = _list()


class JointCommand(msgspec.Struct):
    header: Header = _of(Header)
    names: typing.List[str] = _list()
    positions: typing.List[float] = _list()
    velocities: typing.List[float] = _list()
    efforts: typing.List[float] = _list()


class SimpleAction(msgspec.Struct):
    name: str = ''
    state: float = 0.0


class SimpleActions(msgspec.Struct):
    actions: typing.List[SimpleAction] = _list()


class ComplexAction(msgspec.Struct):
    name: str = ''
    type: int = 0
    poses: typing.List[Pose] = _list()


class ComplexActions(msgspec.Struct):
    actions: typing.List[ComplexAction] = _list()


class HeartBeat(msgspec.Struct):
    heartbeatduration: float = 0.0
    heartbeatlatency: float = 0.0


class Permission(msgspec.Struct):
    requestuid: str = ''
    granted: bool = False


class PermissionRequest(msgspec.Struct):
    requestuid: str = ''
    description: str = ''
    permission: str = ''


class RobotName(msgspec.Struct):
    value: str = ''


class RobotState(msgspec.Struct):
    state: typing.List[str] = _list()


class LogMessage(msgspec.Struct):
    level: int = 0
    message: str = ''


class VideoStream(msgspec.Struct):
    url: str = ''
    camera_pose: Pose = _of(Pose)


class VideoStreams(msgspec.Struct):
    streams: typing.List[VideoStream] = _list()


class SimpleSensor(msgspec.Struct):
    id: int = 0
    name: str = ''
    value: typing.List[float] = _list()


class SimpleSensors(msgspec.Struct):
    sensors: typing.List[SimpleSensor] = _list()


class Wrench(msgspec.Struct):
    header: Header = _of(Header)
    force: Vector3 = _of(Vector3)
    torque: Vector3 = _of(Vector3)


class WrenchState(msgspec.Struct):
    wrenches: typing.List[Wrench] = _list()


class MapsDefinition(msgspec.Struct):
    map_types: typing.List[int] = _list()
    names: typing.List[str] = _list()


class Map(msgspec.Struct):
    type: str = ''
    data: bytes = b''


class Transform(msgspec.Struct):
    from_frame: str = ''
    to_frame: str = ''
    transform: Pose = _of(Pose)


class Transforms(msgspec.Struct):
    transforms: typing.List[Transform] = _list()


class PointCloud(msgspec.Struct):
    header: Header = _of(Header)
    points: typing.List[Vector3] = _list()


class GridMap(msgspec.Struct):
    header: Header = _of(Header)
    resolution: float = 0.0
    width: int = 0
    height: int = 0
    layers: typing.List[str] = _list()
    data: bytes = b''


class IMU(msgspec.Struct):
    header: Header = _of(Header)
    acceleration: Vector3 = _of(Vector3)
    gyro: Vector3 = _of(Vector3)
    orientation: Quaternion = _of(Quaternion)


class ContactPoint(msgspec.Struct):
    position: Vector3 = _of(Vector3)
    contact: float = 0.0


class ContactPoints(msgspec.Struct):
    header: Header = _of(Header)
    points: typing.List[ContactPoint] = _list()


class Odometry(msgspec.Struct):
    header: Header = _of(Header)
    pose: Pose = _of(Pose)
    twist: Twist = _of(Twist)


class CameraInformation(msgspec.Struct):
    header: Header = _of(Header)
    name: str = ''
    width: int = 0
    height: int = 0


class Image(msgspec.Struct):
    header: Header = _of(Header)
    width: int = 0
    height: int = 0
    encoding: str = ''
    data: bytes = b''


class ImageLayers(msgspec.Struct):
    layers: typing.List[Image] = _list()


class ControllableFrames(msgspec.Struct):
    names: typing.List[str] = _list()


class File(msgspec.Struct):
    identifier: str = ''
    path: str = ''
    data: bytes = b''


class Folder(msgspec.Struct):
    identifier: str = ''
    compressed: bool = False
    files: typing.List[File] = _list()


class FileDefinition(msgspec.Struct):
    files: typing.List[File] = _list()
    isfolder: typing.List[bool] = _list()


class FileRequest(msgspec.Struct):
    identifier: str = ''
    compressed: bool = False



def serialize(value):
    """ Return the wire representation of *value*. Raw bytes are passed
        through untouched, which is how binary maps are stored.
    """

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    return json.dumps(value)



def parse(data, cls):
    """ Decode *data* as an instance of *cls*, raising :class:`ParseFailed`
        if that is not possible. An empty byte string yields ``cls()``.
    """

    if cls is bytes:
        return bytes(data)

    if len(data) == 0:
        return cls()

    try:
        return json.decode(data, cls)
    except json.DecodeError as e:
        raise ParseFailed("cannot parse %d bytes as %s: %s" % (len(data), cls.__name__, e)) from e



def type_name(cls):
    """ Human-readable name of a payload schema, used for statistics.
    """

    return 'rrc.' + cls.__name__


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
