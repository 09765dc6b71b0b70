"""Transport interface.

The dispatcher only ever sees this small contract: whole messages go out
with :meth:`Transport.send` and come back from :meth:`Transport.receive`.
Connection management, reconnection and retransmission are the business of
the implementation, not of the protocol layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A blocking receive did not complete in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Transport(ABC):
    """Minimal contract for a message-oriented byte transport."""

    @abstractmethod
    def send(self, data: bytes) -> int:
        """Send one message; return the number of bytes written."""

    @abstractmethod
    def receive(self, block: bool = False) -> Optional[bytes]:
        """Return the next message.

        With ``block=False`` this must return promptly, yielding None when
        no message is waiting.
        """

    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
