""" Heartbeat-based liveness detection. The controller periodically sends
    a HEARTBEAT command carrying the interval until its next heartbeat; if
    that interval plus an allowed latency elapses without another heartbeat
    the connection is considered lost.

    There is a single timer per robot. If several controllers with different
    heartbeat frequencies talk to the same robot, a heartbeat from the slow
    controller can extend the timer after the fast one has already gone
    away; the expiry is then only noticed once the longer interval elapses.
"""

import logging
import time

from .protocol.messages import HeartBeat


logger = logging.getLogger(__name__)


class Timer:
    """ A restartable countdown. *clock* is any callable returning seconds
        as a float; it defaults to :func:`time.monotonic`.
    """

    def __init__(self, clock=None):

        if clock is None:
            clock = time.monotonic

        self.clock = clock
        self.duration = None
        self.started = None


    def start(self, duration):
        self.duration = float(duration)
        self.started = self.clock()


    def stop(self):
        self.duration = None
        self.started = None


    def running(self):
        return self.started is not None


    def elapsed(self):
        """ Seconds since the last :func:`start`, or 0.0 if stopped.
        """

        if self.started is None:
            return 0.0

        return self.clock() - self.started


    def overdue(self):
        """ Seconds past the deadline; negative if the deadline is still
            ahead, None if the timer is stopped.
        """

        if self.started is None:
            return None

        return self.elapsed() - self.duration


    def expired(self):
        overdue = self.overdue()
        return overdue is not None and overdue >= 0


# end of class Timer



class HeartbeatMonitor:
    """ Tracks whether the controller is reachable. The state starts out
        disconnected; :func:`mark_alive` and :func:`heartbeat` are called by
        the dispatcher as commands arrive, :func:`tick` once per update
        cycle. The expiry *callback* receives the seconds elapsed since the
        deadline passed, and fires once per expiry: the timer is not armed
        again until the next heartbeat or command. A command re-arms it
        with the duration of the last heartbeat; before any heartbeat has
        been received there is nothing to arm.
    """

    def __init__(self, allowed_latency=0.1, callback=None, clock=None):

        self.allowed_latency = float(allowed_latency)
        self.callback = callback
        self.timer = Timer(clock)
        self.armed = None
        self.connected = False


    def setup(self, allowed_latency, callback=None):
        self.allowed_latency = float(allowed_latency)
        self.callback = callback


    def mark_alive(self):
        self.connected = True

        if self.armed is not None and not self.timer.running():
            self.timer.start(self.armed)


    def restart(self, duration):
        """ Re-arm the countdown for *duration* seconds plus the allowed
            latency, and mark the connection alive.
        """

        self.connected = True
        self.armed = float(duration) + self.allowed_latency
        self.timer.start(self.armed)


    def heartbeat(self, values):
        """ Consume the contents of a :class:`HeartBeat` command.
        """

        if isinstance(values, HeartBeat):
            duration = values.heartbeatduration
        else:
            duration = values

        self.restart(duration)


    def tick(self):
        """ Check for expiry. Returns True if the connection was declared
            lost during this call.
        """

        if not self.timer.expired():
            return False

        overdue = self.timer.overdue()
        self.timer.stop()
        self.connected = False

        logger.info("heartbeat expired %.3f sec ago", overdue)

        if self.callback is not None:
            self.callback(overdue)

        return True


# end of class HeartbeatMonitor


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
