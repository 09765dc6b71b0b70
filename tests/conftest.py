import collections
import pytest

import rrc


class LocalTransport(rrc.transport.Transport):
    """ In-memory stand-in for one channel. Messages queued with
        :func:`inject` come back out of :func:`receive`; everything sent is
        kept in the ``sent`` list.
    """

    def __init__(self):
        self.incoming = collections.deque()
        self.sent = list()
        self.closed = False

    def inject(self, data):
        self.incoming.append(data)

    def send(self, data):
        self.sent.append(bytes(data))
        return len(data)

    def receive(self, block=False):
        try:
            return self.incoming.popleft()
        except IndexError:
            return None

    def close(self):
        self.closed = True


class FakeClock:

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return rrc.config.Settings(environ=dict())


@pytest.fixture
def command():
    return LocalTransport()


@pytest.fixture
def telemetry():
    return LocalTransport()


@pytest.fixture
def robot(command, telemetry, settings, clock):
    instance = rrc.ControlledRobot(command, telemetry, settings=settings, clock=clock)
    yield instance
    instance.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
