"""Node program: relays telemetry read from a serial port to an MQTT broker."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable

import serial

from tmlink.data_handle import DataHandle
from tmlink.mqtt_connection import (
    DEFAULT_CLIENT_ID,
    DEFAULT_HOST,
    DEFAULT_PORT,
    MqttConnection,
)

DEFAULT_BAUDRATE = 115200
_IDLE_SLEEP = 0.001


def build_parser() -> argparse.ArgumentParser:
    """Command-line options of the node."""
    parser = argparse.ArgumentParser(
        prog="tmlink-node",
        description="Relay telemetry from a serial port to an MQTT broker.",
    )
    parser.add_argument("--port", required=True, help="serial port to read from")
    parser.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE)
    parser.add_argument("--host", default=DEFAULT_HOST, help="MQTT broker address")
    parser.add_argument("--mqtt-port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--client-id", default=DEFAULT_CLIENT_ID)
    return parser


def pump(stream, handle: Callable[[bytes], object]) -> int:
    """Pass every byte waiting on ``stream`` to ``handle`` in one call.

    Returns the number of bytes read.
    """
    waiting = stream.in_waiting
    if not waiting:
        return 0
    data = stream.read(waiting)
    if data:
        handle(data)
    return len(data)


def run(
    port: str,
    baudrate: int = DEFAULT_BAUDRATE,
    host: str = DEFAULT_HOST,
    mqtt_port: int = DEFAULT_PORT,
    client_id: str = DEFAULT_CLIENT_ID,
) -> None:
    """Relay commands from ``port`` to the broker until interrupted."""
    with serial.Serial(port, baudrate, timeout=0) as stream:
        connection = MqttConnection(host, mqtt_port, client_id)
        connection.start()
        data_handle = DataHandle(connection.publish)
        try:
            while True:
                connection.loop()
                if not pump(stream, data_handle.handle):
                    time.sleep(_IDLE_SLEEP)
        finally:
            connection.stop()


def main(argv: list[str] | None = None) -> int:
    """Entry point of the node command."""
    args = build_parser().parse_args(argv)
    try:
        run(args.port, args.baudrate, args.host, args.mqtt_port, args.client_id)
    except serial.SerialException as exc:
        print(f"serial error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0