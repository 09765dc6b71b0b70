""" Exceptions raised by the protocol layer. None of these are fatal to the
    dispatch loop; :class:`rrc.robot.ControlledRobot` catches each of them
    where a request is handled and answers the peer accordingly.
"""


class RRCError(Exception):
    """Base class for all rrc errors."""


class MalformedFrame(RRCError, ValueError):
    """A frame is too short to carry a message type id."""


class ParseFailed(RRCError, ValueError):
    """Payload bytes do not decode into the type expected for the message."""


class UnknownType(RRCError, KeyError):
    """No command buffer is registered for a command type id."""


class UnknownTelemetryType(RRCError, KeyError):
    """Telemetry of this type was never registered."""


class IndexOutOfRange(RRCError, IndexError):
    """A ring buffer index beyond the number of stored values."""


class UnknownId(RRCError, KeyError):
    """A ring buffer id that was never populated."""


class AlreadyResolved(RRCError, RuntimeError):
    """A permission request was answered more than once."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
