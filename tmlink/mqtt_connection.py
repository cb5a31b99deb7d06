"""Thin wrapper around an MQTT client used by the node."""

from __future__ import annotations

import logging
import time

import paho.mqtt.client as mqtt

log = logging.getLogger(__name__)

DEFAULT_HOST = "192.168.5.1"
DEFAULT_PORT = 1883
DEFAULT_CLIENT_ID = "robot"


class MqttConnection:
    """Connection to the MQTT broker, driven by repeated :meth:`loop` calls.

    ``client`` may be any object with the paho client interface; a paho
    client is created when it is not given.
    """

    RECONNECT_INTERVAL = 1.0

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        client_id: str = DEFAULT_CLIENT_ID,
        client: object | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.client_id = client_id
        if client is None:
            client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        self._client = client
        self._connected = False
        self._started = False
        self._last_attempt: float | None = None

    def _on_connect(self, client, userdata, flags, reason_code, properties=None) -> None:
        failed = getattr(reason_code, "is_failure", bool(reason_code))
        self._connected = not failed
        if self._connected:
            log.debug("Connected to MQTT broker")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None) -> None:
        self._connected = False
        log.debug("Disconnected from MQTT broker")

    def start(self) -> None:
        """Install the callbacks and prepare the connection to the broker."""
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.connect_async(self.host, self.port)
        self._started = True
        self._last_attempt = None

    def publish(self, topic: str, payload: str) -> bool:
        """Publish ``payload`` on ``topic``; True when the client accepted it."""
        info = self._client.publish(topic, payload)
        return info.rc == mqtt.MQTT_ERR_SUCCESS

    def subscribe(self, topic: str) -> bool:
        """Subscribe to ``topic``; True when the request was sent."""
        rc, _mid = self._client.subscribe(topic)
        return rc == mqtt.MQTT_ERR_SUCCESS

    def loop(self) -> None:
        """Do one round of network work, reconnecting when needed."""
        if not self._started:
            raise RuntimeError("connection not started")
        if not self._connected:
            now = time.monotonic()
            if self._last_attempt is None or now - self._last_attempt >= self.RECONNECT_INTERVAL:
                self._last_attempt = now
                try:
                    self._client.reconnect()
                except OSError as exc:
                    log.debug("MQTT connection attempt failed: %s", exc)
                    return
        self._client.loop(timeout=0.0)

    def stop(self) -> None:
        """Disconnect from the broker."""
        if self._started:
            self._client.disconnect()
        self._started = False
        self._connected = False

    def connected(self) -> bool:
        """Whether the broker has accepted the connection."""
        return self._connected