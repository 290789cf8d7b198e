"""Transport layer implementations."""

import os

from .base import (
    Broker,
    TransportError,
    TransportConnectionError,
    ConcurrentRequestError,
)
from .session import Session, State

_BACKEND = os.environ.get("WISE_BROKER", "mqtt")

if _BACKEND == "mqtt":
    from . import mqtt as broker
elif _BACKEND == "amqp":
    from . import amqp as broker
else:
    raise ImportError(f"unknown WISE_BROKER backend: {_BACKEND!r}")


def default_factory(options) -> Broker:
    """Return a new connection to the broker described by *options*, using
    the backend selected by the ``WISE_BROKER`` environment variable."""
    return broker.Broker(options)
