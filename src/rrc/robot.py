""" The robot side of a remote control connection. A :class:`ControlledRobot`
    answers requests arriving on the command channel, buffers the commands
    for the robot's own control loop to pick up, and pushes telemetry on
    the telemetry channel.

    The application calls the ``get_*`` command getters and the ``set_*``
    and ``init_*`` telemetry setters from its own threads; a background
    thread (see :func:`ControlledRobot.start_update_thread`) repeatedly
    calls :func:`ControlledRobot.update` to drain the command channel. The
    two sides only meet in the buffers, each of which has its own lock.
"""

import logging
import time

from . import config
from . import poll
from .buffers import CommandRingBuffer, LatestValueBuffer, RingBufferMap
from .dispatch import CommandDispatchTable, DispatchOutcome
from .errors import (
    AlreadyResolved,
    IndexOutOfRange,
    MalformedFrame,
    ParseFailed,
    UnknownId,
)
from .files import FileProvider
from .heartbeat import HeartbeatMonitor
from .permission import PermissionBroker
from .protocol import messages
from .protocol import wire
from .protocol.types import ControlMessageType, LogLevel, MapMessageType, TelemetryMessageType
from .statistics import Statistics
from .telemetry import TelemetryRegistry


logger = logging.getLogger(__name__)

C = ControlMessageType
T = TelemetryMessageType


# Telemetry types this endpoint can send, with their payload schemas.

telemetry_types = (
    (T.CURRENT_POSE, messages.Pose),
    (T.JOINT_STATE, messages.JointState),
    (T.CONTROLLABLE_JOINTS, messages.JointState),
    (T.SIMPLE_ACTIONS, messages.SimpleActions),
    (T.COMPLEX_ACTIONS, messages.ComplexActions),
    (T.ROBOT_NAME, messages.RobotName),
    (T.ROBOT_STATE, messages.RobotState),
    (T.LOG_MESSAGE, messages.LogMessage),
    (T.VIDEO_STREAMS, messages.VideoStreams),
    (T.SIMPLE_SENSOR_DEFINITION, messages.SimpleSensors),
    (T.SIMPLE_SENSOR_VALUE, messages.SimpleSensor),
    (T.WRENCH_STATE, messages.WrenchState),
    (T.MAPS_DEFINITION, messages.MapsDefinition),
    (T.MAP, messages.Map),
    (T.POSES, messages.Poses),
    (T.TRANSFORMS, messages.Transforms),
    (T.PERMISSION_REQUEST, messages.PermissionRequest),
    (T.POINTCLOUD, messages.PointCloud),
    (T.IMU_VALUES, messages.IMU),
    (T.CONTACT_POINTS, messages.ContactPoints),
    (T.CURRENT_TWIST, messages.Twist),
    (T.CURRENT_ACCELERATION, messages.Acceleration),
    (T.CAMERA_INFORMATION, messages.CameraInformation),
    (T.IMAGE, messages.Image),
    (T.IMAGE_LAYERS, messages.ImageLayers),
    (T.ODOMETRY, messages.Odometry),
    (T.CONTROLLABLE_FRAMES, messages.ControllableFrames),
    (T.FILE_DEFINITION, messages.FileDefinition),
)


def _as_type(type_id):
    try:
        return ControlMessageType(type_id)
    except ValueError:
        return type_id



class ControlledRobot:
    """ Dispatcher for one robot endpoint. *command_transport* and
        *telemetry_transport* are :class:`rrc.transport.Transport`
        instances; the command transport must support non-blocking
        receives. *settings* is a :class:`rrc.config.Settings` instance,
        a default one is created if it is not provided. *buffer_size*
        overrides the number of queued action commands retained. *clock*
        replaces :func:`time.monotonic` for the heartbeat and permission
        timers.

        Every buffer and table lives on the instance; several robots can
        coexist in one process.
    """

    def __init__(self, command_transport, telemetry_transport, buffer_size=None, settings=None, clock=None):

        if settings is None:
            settings = config.Settings()

        if buffer_size is None:
            buffer_size = settings['buffer_size']

        self.settings = settings
        self.command_transport = command_transport
        self.telemetry_transport = telemetry_transport
        self.log_level = settings['log_level']

        self.statistics = Statistics(enabled=settings['statistics'])
        self.telemetry = TelemetryRegistry()
        self.commands = CommandDispatchTable()
        self.heartbeat = HeartbeatMonitor(settings['heartbeat_latency'], clock=clock)
        self.permissions = PermissionBroker(self._send_permission_request, settings['permission_ttl'], clock)
        self.maps = RingBufferMap(settings['map_buffer_size'])
        self.files = FileProvider()

        self.pose_command = LatestValueBuffer(messages.Pose)
        self.twist_command = LatestValueBuffer(messages.Twist)
        self.goto_command = LatestValueBuffer(messages.GoTo)
        self.joints_command = LatestValueBuffer(messages.JointCommand)
        self.simple_action_command = CommandRingBuffer(messages.SimpleAction, buffer_size)
        self.complex_action_command = CommandRingBuffer(messages.ComplexAction, buffer_size)
        self.robot_trajectory_command = LatestValueBuffer(messages.Poses)
        self.heartbeat_command = LatestValueBuffer(messages.HeartBeat)

        self.commands.register(C.TARGET_POSE_COMMAND, self.pose_command)
        self.commands.register(C.TWIST_COMMAND, self.twist_command)
        self.commands.register(C.GOTO_COMMAND, self.goto_command)
        self.commands.register(C.JOINTS_COMMAND, self.joints_command)
        self.commands.register(C.SIMPLE_ACTIONS_COMMAND, self.simple_action_command)
        self.commands.register(C.COMPLEX_ACTION_COMMAND, self.complex_action_command)
        self.commands.register(C.ROBOT_TRAJECTORY_COMMAND, self.robot_trajectory_command)
        self.commands.register(C.HEARTBEAT, self.heartbeat_command)

        for type_id, cls in telemetry_types:
            self.register_telemetry_type(type_id, cls)

        # Requests that are answered directly rather than buffered.

        self.handlers = dict()
        self.handlers[C.TELEMETRY_REQUEST] = self._telemetry_request
        self.handlers[C.MAP_REQUEST] = self._map_request
        self.handlers[C.LOG_LEVEL_SELECT] = self._log_level_select
        self.handlers[C.PERMISSION] = self._permission
        self.handlers[C.FILE_REQUEST] = self._file_request


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()
        return False


    def register_telemetry_type(self, type_id, cls):
        self.telemetry.register(type_id, cls)
        self.statistics.names[type_id] = messages.type_name(cls)


    def register_command_type(self, type_id, buffer):
        """ Route incoming commands of *type_id* to *buffer*, which is
            typically a :class:`rrc.buffers.LatestValueBuffer`.
        """

        self.commands.register(type_id, buffer)


    ## Update cycle.

    def update(self):
        """ Drain the command channel, answering every request received,
            then check the heartbeat. Intended to be called repeatedly by a
            scheduler; it never blocks on the channel.
        """

        while True:
            result = self.receive_request()

            if result is None:
                break

            if result != C.NO_CONTROL_DATA:
                self.heartbeat.mark_alive()

        values, fresh = self.heartbeat_command.read()
        if fresh:
            self.heartbeat.heartbeat(values)

        self.heartbeat.tick()
        self.permissions.expire()


    def receive_request(self):
        """ Handle at most one request. Returns None if nothing was waiting,
            otherwise the result of :func:`evaluate_request`.
        """

        frame = self.command_transport.receive(block=False)

        if frame is None:
            return None

        return self.evaluate_request(frame)


    def evaluate_request(self, frame):
        """ Decode and handle one request frame, and send exactly one reply.
            Returns the request type if it was handled, or NO_CONTROL_DATA
            if it could not be.
        """

        try:
            type_id, payload = wire.decode(frame)
        except MalformedFrame as e:
            logger.warning("%s", e)
            self.command_transport.send(wire.encode_type(C.NO_CONTROL_DATA))
            return C.NO_CONTROL_DATA

        handler = self.handlers.get(type_id, self._command)

        try:
            reply, result = handler(type_id, payload)
        except Exception:
            logger.exception("unable to handle request of type %d", type_id)
            reply = wire.encode_type(C.NO_CONTROL_DATA)
            result = C.NO_CONTROL_DATA

        self.command_transport.send(reply)
        return result


    def _telemetry_request(self, type_id, payload):

        try:
            requested = wire.decode_uint16(payload)
        except MalformedFrame as e:
            logger.warning("telemetry request: %s", e)
            return b'', C.TELEMETRY_REQUEST

        return self.telemetry.peek_serialized(requested), C.TELEMETRY_REQUEST


    def _map_request(self, type_id, payload):

        try:
            map_id = wire.decode_uint16(payload)
            reply = self.maps.latest(map_id)
        except (MalformedFrame, UnknownId, IndexOutOfRange) as e:
            logger.debug("map request: %s", e)
            reply = b''

        return reply, C.MAP_REQUEST


    def _log_level_select(self, type_id, payload):

        try:
            level = wire.decode_uint16(payload)
        except MalformedFrame as e:
            logger.warning("log level select: %s", e)
            return wire.encode_type(C.NO_CONTROL_DATA), C.NO_CONTROL_DATA

        self.log_level = level
        return wire.encode_type(C.LOG_LEVEL_SELECT), C.LOG_LEVEL_SELECT


    def _permission(self, type_id, payload):

        try:
            permission = messages.parse(payload, messages.Permission)
        except ParseFailed as e:
            logger.warning("%s", e)
            return wire.encode_type(C.NO_CONTROL_DATA), C.NO_CONTROL_DATA

        try:
            self.permissions.resolve(permission.requestuid, permission.granted)
        except AlreadyResolved as e:
            logger.warning("%s", e)

        return wire.encode_type(C.PERMISSION), C.PERMISSION


    def _file_request(self, type_id, payload):

        try:
            request = messages.parse(payload, messages.FileRequest)
        except ParseFailed as e:
            logger.warning("%s", e)
            folder = messages.Folder(identifier='unparseable file request')
        else:
            folder = self.files.bundle(request.identifier, request.compressed)

        return messages.serialize(folder), C.FILE_REQUEST


    def _command(self, type_id, payload):

        outcome = self.commands.dispatch(type_id, payload)

        if outcome == DispatchOutcome.ACCEPTED:
            return wire.encode_type(type_id), _as_type(type_id)

        if outcome == DispatchOutcome.UNKNOWN_TYPE:
            logger.debug("no buffer for command type %d", type_id)

        return wire.encode_type(C.NO_CONTROL_DATA), C.NO_CONTROL_DATA


    ## Background thread.

    def start_update_thread(self, period=None):
        """ Call :func:`update` every *period* seconds in a background
            thread; the default period comes from the settings.
        """

        if period is None:
            period = self.settings['update_period']

        poll.start(self.update, period)


    def stop_update_thread(self, wait=True):
        poll.stop(self.update, wait)


    def close(self):
        self.stop_update_thread()

        for transport in (self.command_transport, self.telemetry_transport):
            if transport is not None:
                transport.close()


    ## Callbacks and state.

    def add_command_received_callback(self, callback, type_id=None):
        """ With no *type_id*, *callback* is invoked with the type id of
            every command accepted. With a *type_id*, a zero-argument
            *callback* is invoked for that command type only.
        """

        if type_id is None:
            self.commands.add_callback(callback)
        else:
            self.commands.add_type_callback(type_id, callback)


    def setup_heartbeat_callback(self, allowed_latency, callback):
        """ *callback* is invoked with the seconds elapsed since the
            heartbeat deadline each time the connection is lost.
        """

        self.heartbeat.setup(allowed_latency, callback)


    def is_connected(self):
        return self.heartbeat.connected


    def get_statistics(self):
        return self.statistics


    def get_time(self):
        nanoseconds = time.time_ns()
        secs, nsecs = divmod(nanoseconds, 1000000000)
        return messages.TimeStamp(secs=secs, nsecs=nsecs)


    ## Command getters. Each returns a (command, was_fresh) tuple.

    def get_target_pose_command(self):
        return self.pose_command.read()


    def get_twist_command(self):
        return self.twist_command.read()


    def get_goto_command(self):
        return self.goto_command.read()


    def get_joints_command(self):
        return self.joints_command.read()


    def get_simple_action_command(self):
        """ Actions are queued rather than coalesced; call repeatedly until
            was_fresh is False to consume all of them.
        """

        return self.simple_action_command.read()


    def get_complex_action_command(self):
        return self.complex_action_command.read()


    def get_robot_trajectory_command(self):
        return self.robot_trajectory_command.read()


    ## Telemetry.

    def send_telemetry(self, value, type_id, definition_only=False):
        """ Serialize *value*, remember it so a later TELEMETRY_REQUEST for
            *type_id* can be answered, and push it on the telemetry channel.
            Values marked *definition_only* are recorded but not pushed,
            they are pulled by the controller when needed.

            Returns the number of payload bytes sent (or recorded, for a
            definition). Sending is best effort; a short count is not
            retried.
        """

        payload = messages.serialize(value)
        self.telemetry.record_sent(type_id, payload)

        if definition_only:
            return len(payload)

        if self.telemetry_transport is None:
            logger.error('telemetry transport invalid')
            return 0

        sent = self.telemetry_transport.send(wire.encode(type_id, payload))
        self.statistics.add_bytes_sent(type_id, sent)

        return max(sent - wire.TYPE_SIZE, 0)


    def request_permission(self, request):
        """ Ask the controller for permission. Returns a
            :class:`rrc.permission.PendingPermission`; call its ``wait()``
            with a timeout of your choosing to block for the answer.
        """

        return self.permissions.request(request)


    def _send_permission_request(self, request):
        return self.send_telemetry(request, T.PERMISSION_REQUEST)


    def init_controllable_joints(self, telemetry):
        return self.send_telemetry(telemetry, T.CONTROLLABLE_JOINTS)


    def init_simple_actions(self, telemetry):
        return self.send_telemetry(telemetry, T.SIMPLE_ACTIONS)


    def init_complex_actions(self, telemetry):
        return self.send_telemetry(telemetry, T.COMPLEX_ACTIONS)


    def init_simple_sensors(self, telemetry):
        """ Sensor names are only mandatory here, later values may be sent
            with just their id.
        """

        return self.send_telemetry(telemetry, T.SIMPLE_SENSOR_DEFINITION)


    def init_maps_definition(self, telemetry):
        """ Map definitions are not pushed; the controller requests them.
        """

        return self.send_telemetry(telemetry, T.MAPS_DEFINITION, definition_only=True)


    def init_robot_name(self, telemetry):
        if isinstance(telemetry, str):
            telemetry = messages.RobotName(value=telemetry)

        return self.send_telemetry(telemetry, T.ROBOT_NAME)


    def init_video_streams(self, telemetry):
        return self.send_telemetry(telemetry, T.VIDEO_STREAMS)


    def init_files(self, telemetry):
        """ Announce the files and folders available through FILE_REQUEST.
        """

        self.files.define(telemetry)
        return self.send_telemetry(telemetry, T.FILE_DEFINITION)


    def set_log_message(self, level, message=''):
        """ Send a log message, either as a :class:`LogMessage` or as a
            *level* and *message* text. The message is only sent if its
            level is at or below the level selected by the controller, or
            at least CUSTOM; otherwise -1 is returned.
        """

        if isinstance(level, messages.LogMessage):
            log_message = level
        else:
            if message is None:
                message = ''
            log_message = messages.LogMessage(level=int(level), message=message)

        if log_message.level <= self.log_level or log_message.level >= LogLevel.CUSTOM:
            return self.send_telemetry(log_message, T.LOG_MESSAGE)

        return -1


    def set_robot_state(self, state):
        """ *state* may be a single string, a sequence of strings, or a
            :class:`RobotState`.
        """

        if isinstance(state, str):
            state = messages.RobotState(state=[state])
        elif not isinstance(state, messages.RobotState):
            state = messages.RobotState(state=list(state))

        return self.send_telemetry(state, T.ROBOT_STATE)


    def set_current_pose(self, telemetry):
        return self.send_telemetry(telemetry, T.CURRENT_POSE)


    def set_current_twist(self, telemetry):
        return self.send_telemetry(telemetry, T.CURRENT_TWIST)


    def set_current_acceleration(self, telemetry):
        return self.send_telemetry(telemetry, T.CURRENT_ACCELERATION)


    def set_current_imu_values(self, telemetry):
        return self.send_telemetry(telemetry, T.IMU_VALUES)


    def set_current_contact_points(self, telemetry):
        return self.send_telemetry(telemetry, T.CONTACT_POINTS)


    def set_poses(self, telemetry):
        return self.send_telemetry(telemetry, T.POSES)


    def set_joint_state(self, telemetry):
        return self.send_telemetry(telemetry, T.JOINT_STATE)


    def set_wrench_state(self, telemetry):
        return self.send_telemetry(telemetry, T.WRENCH_STATE)


    def set_simple_sensor(self, telemetry):
        return self.send_telemetry(telemetry, T.SIMPLE_SENSOR_VALUE)


    def set_current_transforms(self, telemetry):
        return self.send_telemetry(telemetry, T.TRANSFORMS)


    def set_point_cloud(self, telemetry):
        return self.send_telemetry(telemetry, T.POINTCLOUD)


    def set_odometry(self, telemetry):
        return self.send_telemetry(telemetry, T.ODOMETRY)


    def set_image(self, telemetry):
        return self.send_telemetry(telemetry, T.IMAGE)


    def set_image_layers(self, telemetry):
        return self.send_telemetry(telemetry, T.IMAGE_LAYERS)


    def set_camera_information(self, telemetry):
        return self.send_telemetry(telemetry, T.CAMERA_INFORMATION)


    def set_controllable_frames(self, telemetry):
        return self.send_telemetry(telemetry, T.CONTROLLABLE_FRAMES)


    ## Maps. These are never pushed, a controller fetches them with a
    ## MAP_REQUEST naming the map id.

    def set_map(self, map, map_id):
        """ Store *map*, either raw bytes or a :class:`Map`, as the latest
            map for *map_id*. Returns the number of bytes stored.
        """

        data = messages.serialize(map)
        self.maps.push(int(map_id), data)
        return len(data)


    def set_point_cloud_map(self, pointcloud):
        packed = messages.Map(type=messages.type_name(messages.PointCloud), data=messages.serialize(pointcloud))
        return self.set_map(packed, MapMessageType.POINTCLOUD_MAP)


    def set_grid_map(self, gridmap):
        packed = messages.Map(type=messages.type_name(messages.GridMap), data=messages.serialize(gridmap))
        return self.set_map(packed, MapMessageType.GRID_MAP)


# end of class ControlledRobot


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
