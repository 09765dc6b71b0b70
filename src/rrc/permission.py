""" Correlation of outgoing permission requests with the answers that
    arrive later on the command channel. A request is sent as telemetry;
    the controller answers with a PERMISSION command carrying the same
    request uid. The two are tied together by a table of
    :class:`PendingPermission` handles keyed by that uid.
"""

import logging
import threading
import time
import uuid

import msgspec.structs

from .errors import AlreadyResolved


logger = logging.getLogger(__name__)


class PendingPermission:
    """ Single-resolution handle for one permission request. Any thread may
        block in :func:`wait`; there is no built-in deadline, the caller
        picks the timeout.

        :ivar uid: The request uid this handle is keyed by.
        :ivar granted: None while pending, then True or False.
    """

    def __init__(self, uid, broker=None):

        self.uid = uid
        self.broker = broker
        self.granted = None
        self.resolved = None

        self._event = threading.Event()
        self._lock = threading.Lock()


    def __repr__(self):
        return "PendingPermission(%r, granted=%r)" % (self.uid, self.granted)


    def _resolve(self, granted, when):
        """ Store the answer and wake any waiters. Raises
            :class:`AlreadyResolved` if an answer was already stored.
        """

        with self._lock:
            if self._event.is_set():
                raise AlreadyResolved("permission request %r already resolved" % (self.uid,))

            self.granted = bool(granted)
            self.resolved = when
            self._event.set()


    def done(self):
        return self._event.is_set()


    def wait(self, timeout=None):
        """ Block until the request is answered, or *timeout* seconds pass.
            Returns the answer, or None if there is none yet.
        """

        self._event.wait(timeout)
        return self.granted


    def result(self):
        return self.granted


    def cancel(self):
        """ Stop tracking this request. An answer arriving afterwards is
            still acknowledged, but lands in a fresh entry.
        """

        if self.broker is not None:
            self.broker.discard(self.uid)


# end of class PendingPermission



class PermissionBroker:
    """ Owns the table of pending permission requests. *send* is a callable
        that transmits a :class:`rrc.protocol.messages.PermissionRequest`
        to the controller.

        Entries are not removed when they are resolved. If *ttl* is set,
        :func:`expire` drops entries resolved more than *ttl* seconds ago;
        unresolved entries stay until answered or cancelled.
    """

    def __init__(self, send, ttl=None, clock=None):

        if clock is None:
            clock = time.monotonic

        self.send = send
        self.ttl = ttl
        self.clock = clock

        self._pending = dict()
        self._lock = threading.Lock()


    def __contains__(self, uid):
        return uid in self._pending


    def __len__(self):
        return len(self._pending)


    def _entry(self, uid):
        """ Return the handle for *uid*, creating it if necessary.
        """

        with self._lock:
            try:
                pending = self._pending[uid]
            except KeyError:
                pending = PendingPermission(uid, self)
                self._pending[uid] = pending

        return pending


    def get(self, uid):
        return self._pending.get(uid)


    def request(self, request):
        """ Send the permission *request* and return a
            :class:`PendingPermission` for its answer. If the request has no
            ``requestuid`` one is generated; the caller's object is not
            modified.
        """

        uid = request.requestuid

        if uid == '':
            uid = uuid.uuid4().hex
            request = msgspec.structs.replace(request, requestuid=uid)

        # The handle has to exist before the request goes out, the answer
        # may arrive on the update thread before send() returns.

        pending = self._entry(uid)
        self.send(request)

        return pending


    def resolve(self, uid, granted):
        """ Resolve the request identified by *uid*. If no such request is
            known an entry is created, so that an answer racing ahead of
            :func:`request` is not lost. Raises :class:`AlreadyResolved` on
            a second answer for the same uid.
        """

        pending = self._entry(uid)
        pending._resolve(granted, self.clock())
        return pending


    def discard(self, uid):
        with self._lock:
            self._pending.pop(uid, None)


    def expire(self):
        """ Drop resolved entries older than the ttl. Returns the number of
            entries removed.
        """

        if self.ttl is None:
            return 0

        cutoff = self.clock() - self.ttl
        removed = 0

        with self._lock:
            for uid, pending in list(self._pending.items()):
                if pending.resolved is not None and pending.resolved <= cutoff:
                    del self._pending[uid]
                    removed += 1

        if removed:
            logger.debug("expired %d resolved permission requests", removed)

        return removed


# end of class PermissionBroker


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
