import pytest

import rrc
from rrc.protocol import messages


def test_dispatch():

    table = rrc.CommandDispatchTable()
    buffer = rrc.LatestValueBuffer(messages.Twist)
    table.register(2, buffer)

    twist = messages.Twist(linear=messages.Vector3(x=1.0))
    outcome = table.dispatch(2, messages.serialize(twist))
    assert outcome == rrc.DispatchOutcome.ACCEPTED

    value, fresh = buffer.read()
    assert fresh == True
    assert value.linear.x == 1.0


def test_parse_failed():

    table = rrc.CommandDispatchTable()
    buffer = rrc.LatestValueBuffer(messages.Twist)
    table.register(2, buffer)

    calls = list()
    table.add_callback(calls.append)

    outcome = table.dispatch(2, b'garbage')
    assert outcome == rrc.DispatchOutcome.PARSE_FAILED
    assert calls == []

    value, fresh = buffer.read()
    assert fresh == False


def test_unknown():

    table = rrc.CommandDispatchTable()
    assert table.dispatch(42, b'') == rrc.DispatchOutcome.UNKNOWN_TYPE

    with pytest.raises(rrc.errors.UnknownType):
        table.buffer(42)

    with pytest.raises(KeyError):
        table.add_type_callback(42, lambda: None)


def test_callback_order():

    table = rrc.CommandDispatchTable()
    table.register(2, rrc.LatestValueBuffer(messages.Twist))
    table.register(3, rrc.LatestValueBuffer(messages.GoTo))

    calls = list()
    table.add_callback(lambda type_id: calls.append(('global', type_id)))
    table.add_type_callback(2, lambda: calls.append('twist'))

    table.dispatch(2, b'')
    table.dispatch(3, b'')

    assert calls == ['twist', ('global', 2), ('global', 3)]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
