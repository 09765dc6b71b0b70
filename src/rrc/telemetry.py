""" Record of the most recent telemetry sent, per telemetry type. Telemetry
    is normally push-only; keeping the last serialized value around is what
    allows a controller to request it again later (for example, the robot
    name or the sensor definitions, which are only sent once).
"""

import threading

from .buffers import LatestValueBuffer
from .errors import UnknownTelemetryType
from .protocol import messages


class TelemetryRegistry:
    """ Maps a telemetry type id to a :class:`LatestValueBuffer` holding
        the serialized bytes of the last value sent for that type.
    """

    def __init__(self):

        self._buffers = dict()
        self._classes = dict()
        self._lock = threading.Lock()


    def __contains__(self, type_id):
        return type_id in self._buffers


    def register(self, type_id, cls=None):
        """ Declare that telemetry of *type_id* may be sent and later
            requested. The optional *cls* is the payload schema, used for
            :func:`peek` and for naming the type in statistics. Registering
            the same type twice is a no-op.
        """

        with self._lock:
            if type_id in self._buffers:
                return

            self._buffers[type_id] = LatestValueBuffer(bytes)
            self._classes[type_id] = cls


    def record_sent(self, type_id, payload):
        """ Remember *payload* as the last value sent for *type_id*.
        """

        try:
            buffer = self._buffers[type_id]
        except KeyError:
            raise UnknownTelemetryType("telemetry type %r is not registered" % (type_id,))

        buffer.write(payload)


    def peek_serialized(self, type_id):
        """ Return the last bytes recorded for *type_id*. An empty byte
            string means nothing was sent yet, or the type is unknown; a
            request for it can still be answered.
        """

        try:
            buffer = self._buffers[type_id]
        except KeyError:
            return b''

        return buffer.peek()


    def peek(self, type_id):
        """ Return the last value sent for *type_id*, parsed back into its
            payload schema, or None if nothing was sent.
        """

        payload = self.peek_serialized(type_id)
        if payload == b'':
            return None

        cls = self._classes.get(type_id)
        if cls is None:
            return payload

        return messages.parse(payload, cls)


    def name(self, type_id):

        cls = self._classes.get(type_id)
        if cls is None:
            return str(type_id)

        return messages.type_name(cls)


    def types(self):
        return tuple(self._buffers.keys())


# end of class TelemetryRegistry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
