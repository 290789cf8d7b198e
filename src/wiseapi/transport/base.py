"""Transport interface.

This is the (small) contract that broker implementations should follow,
along with the exceptions raised by every transport in this package.
It lives outside :mod:`wiseapi.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..pending import Pending


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class ConcurrentRequestError(TransportError):
    """A session was asked to start an exchange while one is in flight."""


MessageCallback = Callable[[str, bytes], None]


class Broker(ABC):
    """Minimal contract for a publish/subscribe broker connection.

    The *on_message* callback passed to :func:`connect` is invoked from the
    broker's network thread with the topic and the raw payload of every
    message received on a subscription.
    """

    def __init__(self, options) -> None:
        self.options = options

    @abstractmethod
    def connect(self, on_message: MessageCallback) -> None:
        """Connect to the broker, blocking until the connection is usable.
        Raises :class:`TransportConnectionError` on failure."""

    @abstractmethod
    def subscribe(self, topic_filter: str, qos: int) -> None:
        """Subscribe to an MQTT style topic filter."""

    @abstractmethod
    def publish(self, topic: str, payload: bytes, qos: int) -> Pending:
        """Publish a message; the returned :class:`Pending` settles once
        the broker has acknowledged it."""

    @abstractmethod
    def disconnect(self) -> None:
        """Tear down the connection. Calling this more than once is safe."""

    @property
    def connected(self) -> bool:
        """Whether the broker connection is currently usable."""
        return False


Factory = Callable[[object], Broker]


def describe(options) -> str:
    """Return a short host:port description for log messages."""
    host = getattr(options, 'host', None)
    port = getattr(options, 'port', None)
    return '%s:%s' % (host, port)
