""" Optional byte counters for telemetry sent. Disabled statistics cost one
    attribute check per send.
"""

import threading


class Counter:
    """ Bytes and messages sent for one telemetry type, or for all of them.
    """

    def __init__(self, name=''):

        self.name = name
        self.bytes_sent = 0
        self.messages_sent = 0


    def __repr__(self):
        return "%s: %d bytes in %d messages" % (self.name, self.bytes_sent, self.messages_sent)


    def add_bytes_sent(self, count):
        self.bytes_sent += count
        self.messages_sent += 1


# end of class Counter



class Statistics:

    def __init__(self, enabled=True):

        self.enabled = enabled
        self.total = Counter('global')
        self.per_type = dict()
        self.names = dict()
        self._lock = threading.Lock()


    def add_bytes_sent(self, type_id, count):

        if not self.enabled:
            return

        with self._lock:
            try:
                counter = self.per_type[type_id]
            except KeyError:
                counter = Counter(self.names.get(type_id, str(type_id)))
                self.per_type[type_id] = counter

            counter.add_bytes_sent(count)
            self.total.add_bytes_sent(count)


    def __getitem__(self, type_id):
        return self.per_type[type_id]


    def summary(self):
        """ Return a dictionary of bytes sent, keyed by type name, plus a
            'global' entry.
        """

        summary = dict()
        summary['global'] = self.total.bytes_sent

        with self._lock:
            for counter in self.per_type.values():
                summary[counter.name] = counter.bytes_sent

        return summary


# end of class Statistics


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
