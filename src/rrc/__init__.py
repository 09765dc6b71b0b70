""" Python implementation of the robot side of a remote control link:
    command buffering, telemetry publishing, heartbeat liveness and
    permission round trips, over a pair of byte-stream channels.
"""

# Utility components.

from . import json
from . import errors
from . import poll

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport
home = config.directory

from .buffers import LatestValueBuffer, CommandRingBuffer, RingBuffer, RingBufferMap
from .dispatch import CommandDispatchTable, DispatchOutcome
from .heartbeat import HeartbeatMonitor, Timer
from .permission import PendingPermission, PermissionBroker
from .statistics import Statistics
from .telemetry import TelemetryRegistry
from .files import FileProvider

# Primary public-facing interfaces.

from .protocol.types import ControlMessageType, TelemetryMessageType, LogLevel, MapMessageType
from .robot import ControlledRobot

from . import begin
start = begin.start

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
