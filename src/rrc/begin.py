""" Implementation of the top-level :func:`start` method, the usual entry
    point for a robot process: it opens the ZeroMQ channels named in the
    settings and starts the background update thread.
"""

from . import config
from .robot import ControlledRobot
from .transport import zmq


def start(settings=None, run=True, **overrides):
    """ Return a :class:`ControlledRobot` listening on the command and
        telemetry addresses from *settings* (a :class:`rrc.config.Settings`,
        created with any keyword *overrides* if not provided). Unless
        *run* is False the update thread is already running.
    """

    if settings is None:
        settings = config.Settings(**overrides)
    else:
        for key, value in overrides.items():
            settings[key] = value

    command = zmq.command_server(settings['command_address'])

    try:
        telemetry = zmq.telemetry_publisher(settings['telemetry_address'])
    except Exception:
        command.close()
        raise

    instance = ControlledRobot(command, telemetry, settings=settings)

    if run:
        instance.start_update_thread()

    return instance


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
