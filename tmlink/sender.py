"""Telemetry sender: queues commands in a ring buffer and hands them to a transport."""

from __future__ import annotations

from collections.abc import Callable

from tmlink.protocol import (
    BUFFER_SIZE,
    encode_data_field,
    encode_id_assign,
    encode_node_name,
    encode_publish,
)


class BufferFullError(Exception):
    """Raised when the transmit buffer has no room for more bytes."""


class TelemetrySender:
    """Queue telemetry commands and transmit them in contiguous chunks.

    ``transport`` is called with each chunk to send. Once that chunk has
    gone out, :meth:`transmit_complete` must be called before the next
    :meth:`process` sends anything. The ring buffer holds at most
    ``size - 1`` bytes.
    """

    def __init__(self, transport: Callable[[bytes], object], size: int = BUFFER_SIZE) -> None:
        if size < 2:
            raise ValueError("buffer size must be at least 2")
        self._transport = transport
        self._size = size
        self._tx = bytearray(size)
        self._head = 0
        self._tail = 0
        self._busy = False
        self._current_length = 0
        self._rx = bytearray(size)
        self._rx_index = 0

    def enqueue(self, data: bytes) -> None:
        """Append ``data`` to the transmit buffer.

        Bytes are stored one at a time; if the buffer fills part way, the
        bytes already stored stay queued and BufferFullError is raised.
        """
        for byte in bytes(data):
            next_head = (self._head + 1) % self._size
            if next_head == self._tail:
                raise BufferFullError("transmit buffer is full")
            self._tx[self._head] = byte
            self._head = next_head

    def set_node_name(self, name: str | bytes) -> None:
        """Queue a set-node-name command."""
        self.enqueue(encode_node_name(name))

    def set_id_assign(self, id_: int, name: str | bytes) -> None:
        """Queue a command naming the value with id ``id_``."""
        self.enqueue(encode_id_assign(id_, name))

    def set_data_field(self, id_: int, value: float) -> None:
        """Queue a command setting the value for ``id_``."""
        self.enqueue(encode_data_field(id_, value))

    def publish_data(self) -> None:
        """Queue a publish-data command."""
        self.enqueue(encode_publish())

    def pending(self) -> int:
        """Number of queued bytes whose transmission has not completed."""
        return (self._head - self._tail) % self._size

    def process(self) -> int:
        """Send the next contiguous chunk if no transmission is in flight.

        Returns the number of bytes handed to the transport.
        """
        if self._busy:
            return 0
        if self._head >= self._tail:
            length = self._head - self._tail
        else:
            length = self._size - self._tail
        if length == 0:
            return 0
        self._busy = True
        self._current_length = length
        self._transport(bytes(self._tx[self._tail : self._tail + length]))
        return length

    def transmit_complete(self) -> None:
        """Release the chunk sent by the last :meth:`process` call."""
        self._tail = (self._tail + self._current_length) % self._size
        self._current_length = 0
        self._busy = False

    def receive(self, byte: int) -> None:
        """Store one received byte, wrapping to the start when the buffer is full."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte value: {byte}")
        self._rx[self._rx_index] = byte
        self._rx_index = (self._rx_index + 1) % self._size

    def received(self) -> bytes:
        """Bytes received since the receive position last wrapped."""
        return bytes(self._rx[: self._rx_index])