import pytest

import rrc
from rrc.protocol import messages
from rrc.protocol import wire

C = rrc.ControlMessageType
T = rrc.TelemetryMessageType

NO_DATA = wire.encode_type(C.NO_CONTROL_DATA)


def request(robot, command, type_id, payload=b''):
    """ Push one request through the robot and return the single reply.
    """

    before = len(command.sent)
    command.inject(wire.encode(type_id, payload))
    robot.update()

    assert len(command.sent) == before + 1
    return command.sent[-1]


def test_joints_command(robot, command):

    payload = messages.serialize(messages.JointCommand(positions=[1.0, 2.0]))
    reply = request(robot, command, C.JOINTS_COMMAND, payload)
    assert reply == wire.encode(C.JOINTS_COMMAND, b'')

    value, fresh = robot.get_joints_command()
    assert fresh == True
    assert value.positions == [1.0, 2.0]

    value, fresh = robot.get_joints_command()
    assert fresh == False


def test_command_types(robot, command):

    cases = (
        (C.TARGET_POSE_COMMAND, messages.Pose(position=messages.Vector3(x=1.0)), robot.get_target_pose_command),
        (C.TWIST_COMMAND, messages.Twist(angular=messages.Vector3(z=0.5)), robot.get_twist_command),
        (C.GOTO_COMMAND, messages.GoTo(max_forward_speed=2.0), robot.get_goto_command),
        (C.SIMPLE_ACTIONS_COMMAND, messages.SimpleAction(name='light', state=1.0), robot.get_simple_action_command),
        (C.COMPLEX_ACTION_COMMAND, messages.ComplexAction(name='grab'), robot.get_complex_action_command),
        (C.ROBOT_TRAJECTORY_COMMAND, messages.Poses(poses=[messages.Pose()]), robot.get_robot_trajectory_command),
    )

    for type_id, value, getter in cases:
        reply = request(robot, command, type_id, messages.serialize(value))
        assert reply == wire.encode_type(type_id)

        received, fresh = getter()
        assert fresh == True
        assert received == value

        received, fresh = getter()
        assert fresh == False


def test_custom_command_type(robot, command):

    calls = list()
    buffer = rrc.LatestValueBuffer(messages.RobotName)
    buffer.add_callback(lambda: calls.append('name'))
    robot.register_command_type(100, buffer)

    reply = request(robot, command, 100, messages.serialize(messages.RobotName(value='custom')))
    assert reply == wire.encode_type(100)
    assert calls == ['name']

    value, fresh = buffer.read()
    assert fresh == True
    assert value.value == 'custom'

    reply = request(robot, command, 101)
    assert reply == NO_DATA


def test_parse_failure(robot, command):

    request(robot, command, C.TWIST_COMMAND, messages.serialize(messages.Twist(linear=messages.Vector3(x=3.0))))
    robot.get_twist_command()

    reply = request(robot, command, C.TWIST_COMMAND, b'garbage')
    assert reply == NO_DATA

    value, fresh = robot.get_twist_command()
    assert fresh == False
    assert value.linear.x == 3.0


def test_unregistered(robot, command):

    calls = list()
    robot.add_command_received_callback(calls.append)

    reply = request(robot, command, 999, b'anything')
    assert reply == NO_DATA
    assert calls == []
    assert robot.is_connected() == False


def test_malformed(robot, command):

    command.inject(b'\x01')
    command.inject(wire.encode(C.JOINTS_COMMAND, b''))
    robot.update()

    assert command.sent == [NO_DATA, wire.encode_type(C.JOINTS_COMMAND)]


def test_drain_fifo(robot, command):

    for position in (1.0, 2.0, 3.0):
        payload = messages.serialize(messages.JointCommand(positions=[position]))
        command.inject(wire.encode(C.JOINTS_COMMAND, payload))

    command.inject(wire.encode(C.JOINTS_COMMAND, b'garbage'))
    command.inject(wire.encode(C.TWIST_COMMAND, b''))

    robot.update()

    assert len(command.sent) == 5
    assert command.sent[3] == NO_DATA
    assert command.sent[4] == wire.encode_type(C.TWIST_COMMAND)

    value, fresh = robot.get_joints_command()
    assert value.positions == [3.0]


def test_callbacks(robot, command):

    calls = list()
    robot.add_command_received_callback(lambda type_id: calls.append(type_id))
    robot.add_command_received_callback(lambda: calls.append('twist'), C.TWIST_COMMAND)

    request(robot, command, C.TWIST_COMMAND)
    request(robot, command, C.GOTO_COMMAND)

    assert calls == ['twist', C.TWIST_COMMAND, C.GOTO_COMMAND]


def test_callback_error(robot, command):

    def broken(type_id):
        raise RuntimeError('broken callback')

    robot.add_command_received_callback(broken)

    reply = request(robot, command, C.TWIST_COMMAND)
    assert reply == NO_DATA

    # The loop survives.

    robot.commands.callbacks.clear()
    reply = request(robot, command, C.TWIST_COMMAND)
    assert reply == wire.encode_type(C.TWIST_COMMAND)


def test_telemetry_replay(robot, command, telemetry):

    pose = messages.Pose(position=messages.Vector3(x=4.0))
    sent = robot.set_current_pose(pose)

    payload = messages.serialize(pose)
    assert sent == len(payload)
    assert telemetry.sent == [wire.encode(T.CURRENT_POSE, payload)]

    reply = request(robot, command, C.TELEMETRY_REQUEST, wire.encode_uint16(T.CURRENT_POSE))
    assert reply == payload

    reply = request(robot, command, C.TELEMETRY_REQUEST, wire.encode_uint16(T.ROBOT_NAME))
    assert reply == b''

    reply = request(robot, command, C.TELEMETRY_REQUEST, b'')
    assert reply == b''


def test_definition_only(robot, command, telemetry):

    definition = messages.MapsDefinition(map_types=[1], names=['pointcloud'])
    robot.init_maps_definition(definition)
    assert telemetry.sent == []

    reply = request(robot, command, C.TELEMETRY_REQUEST, wire.encode_uint16(T.MAPS_DEFINITION))
    assert messages.parse(reply, messages.MapsDefinition) == definition


def test_maps(robot, command):

    robot.set_map(b'first', 5)
    robot.set_map(b'second', 5)

    reply = request(robot, command, C.MAP_REQUEST, wire.encode_uint16(5))
    assert reply == b'second'

    reply = request(robot, command, C.MAP_REQUEST, wire.encode_uint16(6))
    assert reply == b''

    reply = request(robot, command, C.MAP_REQUEST, b'')
    assert reply == b''

    cloud = messages.PointCloud(points=[messages.Vector3(x=1.0)])
    robot.set_point_cloud_map(cloud)

    reply = request(robot, command, C.MAP_REQUEST, wire.encode_uint16(rrc.MapMessageType.POINTCLOUD_MAP))
    packed = messages.parse(reply, messages.Map)
    assert packed.type == 'rrc.PointCloud'
    assert messages.parse(packed.data, messages.PointCloud) == cloud


def test_log_level(robot, command, telemetry):

    assert robot.set_log_message(rrc.LogLevel.DEBUG, 'debug') > 0

    reply = request(robot, command, C.LOG_LEVEL_SELECT, wire.encode_uint16(rrc.LogLevel.WARN))
    assert reply == wire.encode_type(C.LOG_LEVEL_SELECT)
    assert robot.log_level == rrc.LogLevel.WARN

    assert robot.set_log_message(rrc.LogLevel.DEBUG, 'debug') == -1
    assert robot.set_log_message(rrc.LogLevel.ERROR, 'error') > 0
    assert robot.set_log_message(messages.LogMessage(level=25, message='custom')) > 0

    reply = request(robot, command, C.LOG_LEVEL_SELECT, b'\x01')
    assert reply == NO_DATA
    assert robot.log_level == rrc.LogLevel.WARN


def test_log_level_only(robot, command, telemetry):

    assert robot.set_log_message(rrc.LogLevel.ERROR) > 0
    assert robot.set_log_message(rrc.LogLevel.ERROR, None) > 0

    for frame in telemetry.sent:
        type_id, payload = wire.decode(frame)
        assert type_id == T.LOG_MESSAGE

        log_message = messages.parse(payload, messages.LogMessage)
        assert log_message.level == rrc.LogLevel.ERROR
        assert log_message.message == ''

    # The replayed value parses as well.

    reply = request(robot, command, C.TELEMETRY_REQUEST, wire.encode_uint16(T.LOG_MESSAGE))
    assert messages.parse(reply, messages.LogMessage).message == ''


def test_permission(robot, command, telemetry):

    pending = robot.request_permission(messages.PermissionRequest(requestuid='U', description='drive'))

    type_id, payload = wire.decode(telemetry.sent[-1])
    assert type_id == T.PERMISSION_REQUEST
    assert messages.parse(payload, messages.PermissionRequest).requestuid == 'U'
    assert pending.done() == False

    reply = request(robot, command, C.PERMISSION, messages.serialize(messages.Permission(requestuid='U', granted=True)))
    assert reply == wire.encode_type(C.PERMISSION)
    assert pending.wait(1) == True

    # A second answer is acknowledged and ignored.

    reply = request(robot, command, C.PERMISSION, messages.serialize(messages.Permission(requestuid='U', granted=False)))
    assert reply == wire.encode_type(C.PERMISSION)
    assert pending.result() == True

    reply = request(robot, command, C.PERMISSION, b'garbage')
    assert reply == NO_DATA


def test_permission_eviction(robot, command, clock):

    robot.permissions.ttl = 1.0
    robot.request_permission(messages.PermissionRequest(requestuid='U'))
    request(robot, command, C.PERMISSION, messages.serialize(messages.Permission(requestuid='U', granted=True)))
    assert 'U' in robot.permissions

    clock.advance(2)
    robot.update()
    assert 'U' not in robot.permissions


def test_heartbeat(robot, command, clock):

    expired = list()
    robot.setup_heartbeat_callback(0.5, expired.append)
    assert robot.is_connected() == False

    reply = request(robot, command, C.HEARTBEAT, messages.serialize(messages.HeartBeat(heartbeatduration=1.0)))
    assert reply == wire.encode_type(C.HEARTBEAT)
    assert robot.is_connected() == True

    clock.advance(1.4)
    robot.update()
    assert robot.is_connected() == True
    assert expired == []

    clock.advance(0.2)
    robot.update()
    assert robot.is_connected() == False
    assert len(expired) == 1
    assert expired[0] >= 0

    clock.advance(1)
    robot.update()
    assert len(expired) == 1

    request(robot, command, C.HEARTBEAT, messages.serialize(messages.HeartBeat(heartbeatduration=1.0)))
    assert robot.is_connected() == True


def test_command_after_expiry(robot, command, clock):

    expired = list()
    robot.setup_heartbeat_callback(0.5, expired.append)

    request(robot, command, C.HEARTBEAT, messages.serialize(messages.HeartBeat(heartbeatduration=1.0)))
    clock.advance(2)
    robot.update()
    assert robot.is_connected() == False
    assert len(expired) == 1

    # A lone request after the loss reconnects, but only for one more
    # heartbeat interval.

    request(robot, command, C.TELEMETRY_REQUEST, wire.encode_uint16(T.ROBOT_NAME))
    assert robot.is_connected() == True

    for count in range(10):
        clock.advance(360)
        robot.update()

    assert robot.is_connected() == False
    assert len(expired) == 2


def test_any_command_connects(robot, command):

    request(robot, command, C.TWIST_COMMAND)
    assert robot.is_connected() == True


def test_file_request(robot, command, tmp_path):

    single = tmp_path / 'single.txt'
    single.write_bytes(b'contents')

    folder = tmp_path / 'folder'
    folder.mkdir()
    (folder / 'a.txt').write_bytes(b'a')

    definition = messages.FileDefinition(
        files=[
            messages.File(identifier='single', path=str(single)),
            messages.File(identifier='folder', path=str(folder)),
        ],
        isfolder=[False, True])

    robot.init_files(definition)

    reply = request(robot, command, C.FILE_REQUEST, messages.serialize(messages.FileRequest(identifier='single')))
    bundle = messages.parse(reply, messages.Folder)
    assert bundle.files[0].data == b'contents'

    reply = request(robot, command, C.FILE_REQUEST, messages.serialize(messages.FileRequest(identifier='folder')))
    bundle = messages.parse(reply, messages.Folder)
    assert [file.data for file in bundle.files] == [b'a']

    reply = request(robot, command, C.FILE_REQUEST, messages.serialize(messages.FileRequest(identifier='missing')))
    bundle = messages.parse(reply, messages.Folder)
    assert bundle.files == []
    assert 'missing' in bundle.identifier


def test_robot_state(robot, telemetry):

    robot.set_robot_state('idle')
    robot.set_robot_state(['one', 'two'])

    states = [messages.parse(wire.decode(frame)[1], messages.RobotState) for frame in telemetry.sent]
    assert states[0].state == ['idle']
    assert states[1].state == ['one', 'two']


def test_statistics(command, telemetry, clock):

    settings = rrc.config.Settings(environ=dict(), statistics=True)
    robot = rrc.ControlledRobot(command, telemetry, settings=settings, clock=clock)

    robot.init_robot_name('unit')
    robot.set_current_pose(messages.Pose())

    statistics = robot.get_statistics()
    assert statistics.total.messages_sent == 2
    assert statistics.total.bytes_sent == sum(len(frame) for frame in telemetry.sent)
    assert statistics[T.ROBOT_NAME].name == 'rrc.RobotName'
    assert 'rrc.Pose' in statistics.summary()


def test_no_telemetry_transport(command, settings, clock):

    robot = rrc.ControlledRobot(command, None, settings=settings, clock=clock)
    assert robot.set_current_pose(messages.Pose()) == 0
    assert robot.telemetry.peek(T.CURRENT_POSE) == messages.Pose()


def test_get_time(robot):

    timestamp = robot.get_time()
    assert timestamp.secs > 0
    assert 0 <= timestamp.nsecs < 1000000000


def test_close(robot, command, telemetry):

    robot.close()
    assert command.closed == True
    assert telemetry.closed == True


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
