"""Builder control socket session.

A :class:`Session` carries out one request/response exchange at a time
with the Builder. Each exchange opens a fresh TCP connection to the
address currently held by :mod:`wiseapi.endpoint`, writes the request,
accumulates the response according to the request's completion policy,
writes the shutdown token and closes the connection.
"""

from __future__ import annotations

import enum
import logging
import socket
import threading
from typing import Callable, Optional

from .. import endpoint
from ..pending import Pending
from ..protocol import fields
from ..protocol.request import Accumulator, Request, Response
from .base import ConcurrentRequestError, TransportConnectionError

logger = logging.getLogger(__name__)


class State(enum.Enum):
    READY = 'ready'
    IN_FLIGHT = 'in flight'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


class Session:
    """Single-flight, reusable control socket session.

    A session may be reused once an exchange has settled, successfully or
    not, but only one exchange may be in flight per instance. Distinct
    instances are independent of one another.
    """

    chunk_size = 4096

    def __init__(self) -> None:
        self._state = State.READY
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return '<Session ' + self._state.value + '>'

    @property
    def state(self) -> State:
        with self._lock:
            return self._state

    def _set_state(self, state: State) -> None:
        with self._lock:
            self._state = state

    def execute(
        self,
        request: Request,
        transform: Optional[Callable] = None,
        callback: Optional[Callable] = None,
        error: Optional[Callable] = None,
    ) -> Pending:
        """Begin an exchange in the background and return a :class:`Pending`
        that settles with the :class:`Response` (or the result of applying
        *transform* to it). The optional *callback* and *error* callables are
        registered on the :class:`Pending` before the exchange begins.

        :class:`ConcurrentRequestError` is raised immediately, with no I/O,
        if an exchange is already in flight on this session.
        """

        with self._lock:
            if self._state == State.IN_FLIGHT:
                raise ConcurrentRequestError(
                    'an exchange is already in flight for ' + request.key
                )
            self._state = State.IN_FLIGHT

        pending = Pending(transform)

        if callback is not None or error is not None:
            pending.add_callback(callback, error)

        thread = threading.Thread(
            target=self._run,
            args=(request, pending),
            name='wiseapi session ' + request.key,
            daemon=True,
        )
        thread.start()

        return pending

    def request(
        self,
        request: Request,
        timeout: Optional[float] = None,
        transform: Optional[Callable] = None,
    ):
        """Blocking variant of :func:`execute`. The exchange result is
        returned, or the exchange exception raised. None is returned if the
        exchange is still in flight after *timeout* seconds.
        """

        pending = self.execute(request, transform)
        return pending.wait(timeout)

    def _run(self, request: Request, pending: Pending) -> None:
        address, port = endpoint.get()

        try:
            response = self._exchange(address, port, request)
        except OSError as e:
            logger.debug("%s to %s:%d failed: %s", request.key, address, port, e)
            self._set_state(State.FAILED)
            error = TransportConnectionError(
                '%s:%d: %s' % (address, port, e)
            )
            error.__cause__ = e
            pending._fail(error)
        except TransportConnectionError as e:
            logger.debug("%s to %s:%d failed: %s", request.key, address, port, e)
            self._set_state(State.FAILED)
            pending._fail(e)
        else:
            self._set_state(State.SUCCEEDED)
            pending._complete(response)

    def _exchange(self, address: str, port: int, request: Request) -> Response:
        logger.debug("connecting to %s:%d for %s", address, port, request.key)

        sock = socket.create_connection((address, port))

        try:
            sock.sendall(request.encode())

            accumulator = Accumulator(request.policy)

            while accumulator.complete == False:
                chunk = sock.recv(self.chunk_size)
                if chunk == b'':
                    raise TransportConnectionError(
                        '%s:%d closed the connection before %s completed'
                        % (address, port, request.key)
                    )
                accumulator.feed(chunk)

            response = accumulator.response()

            if request.handshake:
                shutdown = fields.SHUTDOWN + fields.NEWLINE
                try:
                    sock.sendall(shutdown.encode(fields.ENCODING))
                except OSError as e:
                    logger.debug("unable to send %s to %s:%d: %s",
                                 fields.SHUTDOWN, address, port, e)
        finally:
            sock.close()

        return response


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
