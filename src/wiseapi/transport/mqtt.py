"""MQTT broker backend."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

import paho.mqtt.client as mqtt

from ..pending import Pending
from .base import Broker as BaseBroker
from .base import MessageCallback, TransportConnectionError, describe

logger = logging.getLogger(__name__)

default_port = 1883
keepalive = 60
connect_timeout = 10


class Broker(BaseBroker):
    """Broker connection backed by a paho-mqtt client. The paho network
    loop runs on its own thread, started by :func:`connect`; inbound
    messages are handed to the *on_message* callback from that thread.
    """

    def __init__(self, options) -> None:
        BaseBroker.__init__(self, options)

        self._client: Optional[mqtt.Client] = None
        self._on_message: Optional[MessageCallback] = None
        self._connected = threading.Event()
        self._connack = threading.Event()
        self._refusal = None
        self._subscriptions: List[Tuple[str, int]] = []

    @property
    def connected(self) -> bool:
        return self._connected.is_set()

    def connect(self, on_message: MessageCallback) -> None:
        options = self.options
        self._on_message = on_message

        client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=options.client_id,
            clean_session=True,
        )

        if options.username:
            client.username_pw_set(options.username, options.password)

        client.on_connect = self._handle_connect
        client.on_disconnect = self._handle_disconnect
        client.on_message = self._handle_message

        self._client = client
        self._connack.clear()
        self._refusal = None

        logger.debug("connecting to MQTT broker %s", describe(options))

        try:
            client.connect(options.host, int(options.port), keepalive)
        except OSError as e:
            self._client = None
            raise TransportConnectionError(
                'MQTT broker ' + describe(options) + ': ' + str(e)
            ) from e

        client.loop_start()

        if self._connack.wait(connect_timeout) == False:
            self.disconnect()
            raise TransportConnectionError(
                'no response from MQTT broker ' + describe(options)
            )

        if self._refusal is not None:
            refusal = self._refusal
            self.disconnect()
            raise TransportConnectionError(
                'MQTT broker ' + describe(options) + ' refused the connection: ' + str(refusal)
            )

    def subscribe(self, topic_filter: str, qos: int) -> None:
        client = self._require()

        result, _mid = client.subscribe(topic_filter, qos)

        if result != mqtt.MQTT_ERR_SUCCESS:
            raise TransportConnectionError(
                'unable to subscribe to ' + topic_filter + ': ' + mqtt.error_string(result)
            )

        self._subscriptions.append((topic_filter, qos))
        logger.debug("subscribed to %s at QoS %d", topic_filter, qos)

    def publish(self, topic: str, payload: bytes, qos: int) -> Pending:
        client = self._require()
        pending = Pending()

        info = client.publish(topic, payload, qos)

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            pending._fail(TransportConnectionError(
                'unable to publish to ' + topic + ': ' + mqtt.error_string(info.rc)
            ))
            return pending

        thread = threading.Thread(
            target=self._await_publish,
            args=(topic, info, pending),
            daemon=True,
        )
        thread.start()

        return pending

    def disconnect(self) -> None:
        client = self._client
        self._client = None

        if client is None:
            return

        logger.debug("disconnecting from MQTT broker %s", describe(self.options))

        client.disconnect()
        client.loop_stop()
        self._connected.clear()

    def _require(self) -> mqtt.Client:
        client = self._client
        if client is None or self._connected.is_set() == False:
            raise TransportConnectionError(
                'not connected to MQTT broker ' + describe(self.options)
            )
        return client

    def _await_publish(self, topic: str, info, pending: Pending) -> None:
        try:
            info.wait_for_publish()
        except (RuntimeError, ValueError) as e:
            pending._fail(TransportConnectionError(
                'publish to ' + topic + ' was not acknowledged: ' + str(e)
            ))
        else:
            pending._complete(None)

    def _handle_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self._refusal = reason_code
        else:
            # The session is clean, so a reconnect made by the paho loop
            # starts with no subscriptions.
            for topic_filter, qos in self._subscriptions:
                client.subscribe(topic_filter, qos)

            self._connected.set()
            logger.debug("connected to MQTT broker %s", describe(self.options))

        self._connack.set()

    def _handle_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        self._connected.clear()
        logger.debug("disconnected from MQTT broker %s: %s", describe(self.options), reason_code)

    def _handle_message(self, client, userdata, message) -> None:
        callback = self._on_message
        if callback is None:
            return

        try:
            callback(message.topic, message.payload)
        except Exception:
            logger.exception('exception raised handling a message on ' + message.topic)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
