""" Routing of incoming command frames to the buffers that hold them.
"""

import enum
import logging

from .errors import UnknownType


logger = logging.getLogger(__name__)


class DispatchOutcome(enum.Enum):
    ACCEPTED = 'accepted'
    PARSE_FAILED = 'parse failed'
    UNKNOWN_TYPE = 'unknown type'


class CommandDispatchTable:
    """ Associates each command type id with the buffer that receives it.
        A buffer is anything offering ``write_serialized(bytes) -> bool``
        and ``add_callback(callable)``; in practice a
        :class:`rrc.buffers.LatestValueBuffer` or
        :class:`rrc.buffers.CommandRingBuffer`.

        Global callbacks are invoked with the type id of every accepted
        command, after the buffer has been written and its own callbacks
        have run.
    """

    def __init__(self):

        self.buffers = dict()
        self.callbacks = list()


    def __contains__(self, type_id):
        return type_id in self.buffers


    def register(self, type_id, buffer):
        self.buffers[type_id] = buffer


    def buffer(self, type_id):

        try:
            return self.buffers[type_id]
        except KeyError:
            raise UnknownType("no buffer registered for command type %r" % (type_id,))


    def add_callback(self, callback):
        self.callbacks.append(callback)


    def add_type_callback(self, type_id, callback):
        self.buffer(type_id).add_callback(callback)


    def dispatch(self, type_id, payload):
        """ Hand *payload* to the buffer registered for *type_id* and return
            a :class:`DispatchOutcome`. Nothing is written and no callback
            is invoked unless the outcome is ACCEPTED.
        """

        try:
            buffer = self.buffers[type_id]
        except KeyError:
            return DispatchOutcome.UNKNOWN_TYPE

        if not buffer.write_serialized(payload):
            logger.warning("unable to parse command of type %d (%d bytes)", type_id, len(payload))
            return DispatchOutcome.PARSE_FAILED

        for callback in self.callbacks:
            callback(type_id)

        return DispatchOutcome.ACCEPTED


# end of class CommandDispatchTable


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
