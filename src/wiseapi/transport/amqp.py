"""AMQP broker backend.

The Builder publishes its job status over MQTT. When the broker is a
RabbitMQ instance with the MQTT plugin enabled, those messages are routed
through the ``amq.topic`` exchange, with the MQTT topic separators
translated to dots; this backend consumes them there using pika.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import List, Optional

import pika
import pika.exceptions

from ..pending import Pending
from .base import Broker as BaseBroker
from .base import MessageCallback, TransportConnectionError, describe

logger = logging.getLogger(__name__)

default_port = 5672
connect_timeout = 10

_EXCHANGE = "amq.topic"


def routing_key(topic: str) -> str:
    """Translate an MQTT topic or topic filter to an AMQP routing key."""
    return topic.replace("/", ".").replace("+", "*")


def topic(routing_key: str) -> str:
    """Translate an AMQP routing key back to an MQTT topic."""
    return routing_key.replace(".", "/")


def _broker_params(options) -> pika.ConnectionParameters:
    credentials = pika.ConnectionParameters.DEFAULT_CREDENTIALS
    if options.username:
        credentials = pika.PlainCredentials(options.username, options.password or "")

    return pika.ConnectionParameters(
        host=options.host,
        port=int(options.port),
        credentials=credentials,
        heartbeat=600,
        blocked_connection_timeout=300,
    )


class Broker(BaseBroker):
    """Broker connection backed by a pika ``BlockingConnection``. The
    connection is owned by a single background thread; every other thread
    hands work to it with ``add_callback_threadsafe``.
    """

    def __init__(self, options) -> None:
        BaseBroker.__init__(self, options)

        self._on_message: Optional[MessageCallback] = None
        self._outbox: queue.SimpleQueue = queue.SimpleQueue()
        self._bindings: List[str] = []
        self._ready = threading.Event()
        self._failure: Optional[Exception] = None
        self._connection = None
        self._channel = None
        self._queue_name = None
        self._thread: Optional[threading.Thread] = None

    @property
    def connected(self) -> bool:
        connection = self._connection
        return self._ready.is_set() and connection is not None and connection.is_open

    def connect(self, on_message: MessageCallback) -> None:
        self._on_message = on_message
        self._ready.clear()
        self._failure = None

        logger.debug("connecting to AMQP broker %s", describe(self.options))

        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        if self._ready.wait(connect_timeout) == False:
            raise TransportConnectionError(
                "no response from AMQP broker " + describe(self.options)
            )

        if self._failure is not None:
            raise TransportConnectionError(
                "AMQP broker " + describe(self.options) + ": " + str(self._failure)
            ) from self._failure

    def subscribe(self, topic_filter: str, qos: int) -> None:
        connection = self._require()
        key = routing_key(topic_filter)
        self._bindings.append(key)
        connection.add_callback_threadsafe(lambda rk=key: self._bind(rk))
        logger.debug("subscribed to %s as %s", topic_filter, key)

    def publish(self, topic: str, payload: bytes, qos: int) -> Pending:
        connection = self._require()
        pending = Pending()
        self._outbox.put((routing_key(topic), payload, pending))
        connection.add_callback_threadsafe(self._flush)
        return pending

    def disconnect(self) -> None:
        connection = self._connection
        thread = self._thread

        if connection is None:
            return

        logger.debug("disconnecting from AMQP broker %s", describe(self.options))

        self._ready.clear()

        try:
            connection.add_callback_threadsafe(self._stop)
        except pika.exceptions.AMQPError:
            pass

        if thread is not None and thread is not threading.current_thread():
            thread.join(connect_timeout)

        self._connection = None
        self._thread = None

    def _require(self):
        connection = self._connection
        if connection is None or self._ready.is_set() == False:
            raise TransportConnectionError(
                "not connected to AMQP broker " + describe(self.options)
            )
        return connection

    def _run(self) -> None:
        connection = None

        try:
            connection = pika.BlockingConnection(_broker_params(self.options))
            channel = connection.channel()
            channel.confirm_delivery()

            self._connection = connection
            self._channel = channel

            result = channel.queue_declare(queue="", exclusive=True)
            self._queue_name = result.method.queue

            # Apply any bindings requested before the channel was ready.
            for key in self._bindings:
                self._bind(key)

            channel.basic_consume(
                queue=self._queue_name,
                on_message_callback=self._handle_message,
                auto_ack=False,
            )
        except (pika.exceptions.AMQPError, OSError) as e:
            self._failure = e
            self._connection = None
            self._ready.set()
            return

        self._ready.set()

        try:
            channel.start_consuming()
        except pika.exceptions.AMQPError as e:
            logger.debug("AMQP broker %s connection lost: %s", describe(self.options), e)

        self._ready.clear()
        self._fail_outbox()

        try:
            if connection.is_open:
                connection.close()
        except pika.exceptions.AMQPError as e:
            logger.debug("error closing AMQP connection: %s", e)

    def _stop(self) -> None:
        self._channel.stop_consuming()

    def _bind(self, key: str) -> None:
        self._channel.queue_bind(
            exchange=_EXCHANGE,
            queue=self._queue_name,
            routing_key=key,
        )

    def _flush(self) -> None:
        """Drain all queued outgoing messages (called on the connection
        thread via add_callback_threadsafe)."""
        while True:
            try:
                key, payload, pending = self._outbox.get_nowait()
            except queue.Empty:
                break

            try:
                self._channel.basic_publish(
                    exchange=_EXCHANGE,
                    routing_key=key,
                    body=payload,
                    properties=pika.BasicProperties(delivery_mode=2),
                )
            except pika.exceptions.AMQPError as e:
                pending._fail(TransportConnectionError(
                    "publish to " + key + " was not acknowledged: " + str(e)
                ))
            else:
                pending._complete(None)

    def _fail_outbox(self) -> None:
        while True:
            try:
                key, _payload, pending = self._outbox.get_nowait()
            except queue.Empty:
                break
            pending._fail(TransportConnectionError(
                "connection closed before " + key + " was published"
            ))

    def _handle_message(self, channel, method, properties, body: bytes) -> None:
        callback = self._on_message

        try:
            if callback is not None:
                callback(topic(method.routing_key), body)
        except Exception:
            logger.exception("exception raised handling a message on " + method.routing_key)
        finally:
            channel.basic_ack(delivery_tag=method.delivery_tag)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
