""" Thread-safe buffers shared between the background update thread and
    the application. Every operation takes the buffer's lock for exactly one
    read or write; no lock is ever held while a callback runs or while a
    frame is being sent.
"""

import collections
import copy
import logging
import threading

from .errors import IndexOutOfRange, ParseFailed, UnknownId
from .protocol import messages


logger = logging.getLogger(__name__)


class LatestValueBuffer:
    """ A single-slot mailbox: the most recent write wins, and a read reports
        whether the value was written since the previous read. Values are
        instances of *cls*, which must be a payload schema from
        :mod:`rrc.protocol.messages` or :class:`bytes`; the initial value is
        ``cls()`` unless *initial* is given.

        Writes between two reads are coalesced. Values are copied on the way
        in and on the way out, so neither side can mutate what the other
        side holds.
    """

    def __init__(self, cls, initial=None):

        if initial is None:
            initial = cls()

        self.cls = cls
        self.callbacks = list()
        self.lock = threading.Lock()

        self._value = initial
        self._fresh = False


    def add_callback(self, callback):
        """ Register a zero-argument *callback* to be invoked after every
            successful write, on the thread that performed the write.
        """

        self.callbacks.append(callback)


    def notify(self):

        for callback in self.callbacks:
            callback()


    def _store(self, value):
        self.lock.acquire()
        self._value = value
        self._fresh = True
        self.lock.release()


    def _take(self):
        self.lock.acquire()
        value = self._value
        fresh = self._fresh
        self._fresh = False
        self.lock.release()

        return value, fresh


    def write(self, value):
        self._store(copy.deepcopy(value))
        self.notify()


    def write_serialized(self, data):
        """ Parse *data* and store the result. Returns False, leaving the
            buffer untouched and not marked fresh, if parsing fails.
        """

        try:
            value = messages.parse(data, self.cls)
        except ParseFailed as e:
            logger.warning("%s", e)
            return False

        self._store(value)
        self.notify()
        return True


    def read(self):
        """ Return a ``(value, was_fresh)`` tuple and clear the fresh flag.
        """

        value, fresh = self._take()
        return copy.deepcopy(value), fresh


    def read_serialized(self):
        value, fresh = self._take()
        return messages.serialize(value), fresh


    def peek(self):
        """ Return the current value without touching the fresh flag.
        """

        self.lock.acquire()
        value = self._value
        self.lock.release()

        return copy.deepcopy(value)


# end of class LatestValueBuffer



class RingBuffer:
    """ Fixed-capacity circular buffer. Index 0 is the oldest value still
        retained; once *capacity* values are stored each push discards the
        oldest one.
    """

    def __init__(self, capacity):

        capacity = int(capacity)
        if capacity < 1:
            raise ValueError('ring buffer capacity must be at least 1')

        self.capacity = capacity
        self.lock = threading.Lock()
        self._slots = collections.deque(maxlen=capacity)


    def __len__(self):
        return len(self._slots)


    def push(self, value):
        with self.lock:
            self._slots.append(value)


    def peek(self, index):
        """ Return the value at position *index*, raising
            :class:`IndexOutOfRange` if nothing is stored there.
        """

        with self.lock:
            size = len(self._slots)
            if index < 0 or index >= size:
                raise IndexOutOfRange("index %d out of range for %d entries" % (index, size))
            return self._slots[index]


    def latest(self):
        """ Return the most recently pushed value.
        """

        with self.lock:
            if len(self._slots) == 0:
                raise IndexOutOfRange('ring buffer is empty')
            return self._slots[-1]


    def pop(self):
        """ Remove and return the oldest value.
        """

        with self.lock:
            if len(self._slots) == 0:
                raise IndexOutOfRange('ring buffer is empty')
            return self._slots.popleft()


# end of class RingBuffer



class RingBufferMap:
    """ A collection of :class:`RingBuffer` instances addressed by an integer
        id; rings are created on first use. This is how map data is kept,
        one ring per map id.
    """

    def __init__(self, capacity):

        self.capacity = capacity
        self.lock = threading.Lock()
        self._rings = dict()


    def __contains__(self, id):
        return id in self._rings


    def ensure(self, id):
        """ Return the ring for *id*, creating it if it does not exist yet.
        """

        with self.lock:
            try:
                ring = self._rings[id]
            except KeyError:
                ring = RingBuffer(self.capacity)
                self._rings[id] = ring

        return ring


    def push(self, id, value):
        self.ensure(id).push(value)


    def _ring(self, id):

        with self.lock:
            try:
                return self._rings[id]
            except KeyError:
                raise UnknownId("no ring buffer for id %r" % (id,))


    def peek(self, id, index):
        """ Raises :class:`UnknownId` for an unseen *id*, and
            :class:`IndexOutOfRange` for an invalid *index*, in that order.
        """

        return self._ring(id).peek(index)


    def latest(self, id):
        return self._ring(id).latest()


# end of class RingBufferMap



class CommandRingBuffer(LatestValueBuffer):
    """ A command buffer that queues up to *capacity* commands instead of
        keeping only the latest one. Each read consumes the oldest queued
        command; once the queue is drained, reads return the last command
        consumed with ``was_fresh`` set to False. Used for actions, where
        every command received must be seen by the application.
    """

    def __init__(self, cls, capacity):

        LatestValueBuffer.__init__(self, cls)
        self.ring = RingBuffer(capacity)


    def _store(self, value):
        self.ring.push(value)


    def _take(self):

        self.lock.acquire()

        try:
            value = self.ring.pop()
        except IndexOutOfRange:
            value = self._value
            fresh = False
        else:
            self._value = value
            fresh = True

        self.lock.release()
        return value, fresh


    def peek(self):
        try:
            value = self.ring.latest()
        except IndexOutOfRange:
            value = self._value

        return copy.deepcopy(value)


    def pending(self):
        """ Return the number of queued commands not yet read.
        """

        return len(self.ring)


# end of class CommandRingBuffer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
