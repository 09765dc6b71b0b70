"""
rrc Protocol Layer
==================

Message type enumerations (types.py), the frame codec (wire.py) and the
payload schemas (messages.py). Nothing in this package depends on a
transport implementation.

Every frame on either channel is a 2-byte type id followed by an opaque
payload. Requests on the command channel are always answered with exactly
one frame; telemetry frames are one-way pushes.
"""

from . import types
from . import wire
from . import messages

from .types import ControlMessageType, TelemetryMessageType, LogLevel, MapMessageType


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
