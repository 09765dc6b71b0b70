""" Background threads that call a method on a fixed cadence. This is what
    drives :func:`rrc.robot.ControlledRobot.update`; one thread per method.
"""

import logging
import threading
import time
import weakref

logger = logging.getLogger(__name__)

active = dict()
active_lock = threading.Lock()


def _reference(method):
    """ Weak reference to a function or a bound method. A plain weakref to a
        bound method dies immediately, hence :class:`weakref.WeakMethod`.
    """

    try:
        method.__func__
        method.__self__
    except AttributeError:
        return weakref.ref(method)
    else:
        return weakref.WeakMethod(method)


def _key(method):

    try:
        return (id(method.__self__), id(method.__func__))
    except AttributeError:
        return (id(method), None)



def period(method):
    """ Return the polling period currently used for *method*, or None if
        it is not being polled.
    """

    try:
        poller = active[_key(method)]
    except KeyError:
        return None

    return poller.interval



def start(method, period):
    """ Call *method* every *period* seconds on a dedicated background
        thread. Calling :func:`start` again for the same method changes the
        period of the existing thread instead of starting a second one; a
        period of None or zero stops polling.

        The thread only holds a weak reference to *method*; if the object
        owning it goes away, the thread exits.
    """

    if period is None or period == 0:
        stop(method)
        return

    key = _key(method)

    with active_lock:
        poller = active.get(key)

        if poller is None or poller.shutdown:
            poller = _Poller(method, key)
            active[key] = poller

    poller.period(period)



def stop(method, wait=False):
    """ Discontinue calling *method*. If *wait* is True, block until the
        background thread has exited.
    """

    try:
        poller = active[_key(method)]
    except KeyError:
        return

    poller.stop()

    if wait and poller.thread is not threading.current_thread():
        poller.thread.join()



class _Poller:

    def __init__(self, method, key):

        self.key = key
        self.interval = None
        self.reference = _reference(method)
        self.shutdown = False

        self.alarm = threading.Event()
        self.thread = threading.Thread(target=self.run, name='rrc.poll')
        self.thread.daemon = True
        self.thread.start()


    def period(self, period):
        self.interval = float(period)
        self.alarm.set()


    def run(self):

        interval = None
        next = time.monotonic()

        while self.interval is None and self.shutdown == False:
            self.alarm.wait(1)

        while self.shutdown == False:
            begin = time.monotonic()

            if self.alarm.is_set():
                self.alarm.clear()

                # A new interval restarts the cadence from now.

                interval = self.interval
                next = begin + interval
            else:
                # Hold the cadence constant regardless of how long the
                # previous call took.

                next += interval

            method = self.reference()
            if method is None:
                break

            try:
                method()
            except Exception:
                logger.exception("polled method %r raised", method)

            del method

            delay = next - time.monotonic()
            if delay > 0:
                self.alarm.wait(delay)
            elif delay < -interval:
                # Hopelessly behind; skip the missed calls rather than
                # firing them back to back.
                next = time.monotonic()

        with active_lock:
            if active.get(self.key) is self:
                del active[self.key]


    def stop(self):
        self.shutdown = True
        self.alarm.set()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
