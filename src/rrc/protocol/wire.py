"""Frame encoding for both channels.

Every frame is a fixed-width message type id followed by the payload:

    [ 2 bytes: type id, unsigned, little-endian ][ N bytes: payload ]

There is no length field; the payload is the rest of the transport message.
The same layout is used for the 2-byte payloads of telemetry requests, map
requests and log level selection.
"""

from __future__ import annotations

import struct
from typing import Tuple

from ..errors import MalformedFrame


_TYPE = struct.Struct("<H")

TYPE_SIZE = _TYPE.size


def encode(type_id: int, payload: bytes = b"") -> bytes:
    """Prepend the 2-byte *type_id* to *payload*."""

    return _TYPE.pack(int(type_id)) + bytes(payload)


def encode_type(type_id: int) -> bytes:
    """A bare frame with no payload, used as the acknowledgement reply."""

    return _TYPE.pack(int(type_id))


def decode(frame: bytes) -> Tuple[int, bytes]:
    """Split a frame into (type_id, payload).

    Raises :class:`MalformedFrame` if fewer than two bytes are present. The
    payload is not validated here; parsing it is up to the consumer.
    """

    if frame is None or len(frame) < TYPE_SIZE:
        raise MalformedFrame(f"frame too short: {frame!r}")

    (type_id,) = _TYPE.unpack_from(frame, 0)
    return type_id, bytes(frame[TYPE_SIZE:])


def encode_uint16(value: int) -> bytes:
    return _TYPE.pack(int(value))


def decode_uint16(payload: bytes) -> int:
    """Read the leading 2-byte integer of a request payload.

    Raises :class:`MalformedFrame` if the payload is too short to hold one.
    Trailing bytes are ignored.
    """

    if len(payload) < TYPE_SIZE:
        raise MalformedFrame(f"payload too short for a 16-bit value: {payload!r}")

    (value,) = _TYPE.unpack_from(payload, 0)
    return value
