"""Wire format shared by the telemetry sender and the node.

Every command starts with a header byte followed by a command byte::

    0xFF 0x51 <name>            set node name
    0xFF 0x52 <id> <name>       assign a value name to an id
    0xFF 0x53 <id> <8 bytes>    set the value for an id (little-endian double)
    0xFF 0x54                   ask the node to publish its data
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

HEADER_BYTE = 0xFF
MAX_NUM_COMMANDS = 30
BUFFER_SIZE = 1024

_DOUBLE = struct.Struct("<d")


class Command(IntEnum):
    """Command byte that follows the header byte."""

    SET_NODE_NAME = 0x51
    SET_ID_ASSIGN = 0x52
    SET_DATA_FIELD = 0x53
    PUBLISH_DATA = 0x54


_VALID_COMMANDS = frozenset(int(c) for c in Command)


@dataclass(frozen=True)
class Frame:
    """One command found in a received byte stream.

    ``payload`` holds the bytes after the command byte up to the next
    command (or the end of the stream); ``start`` is the offset of the
    header byte in the stream the frame was taken from.
    """

    command: Command
    payload: bytes
    start: int = 0


def _text(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def _id_byte(id_: int) -> int:
    if not 0 <= id_ <= 0xFF:
        raise ValueError(f"id must fit in one byte, got {id_}")
    return id_


def encode_node_name(name: str | bytes) -> bytes:
    """Encode a set-node-name command."""
    return bytes((HEADER_BYTE, Command.SET_NODE_NAME)) + _text(name)


def encode_id_assign(id_: int, name: str | bytes) -> bytes:
    """Encode a command mapping ``id_`` to the value name ``name``."""
    return bytes((HEADER_BYTE, Command.SET_ID_ASSIGN, _id_byte(id_))) + _text(name)


def encode_data_field(id_: int, value: float) -> bytes:
    """Encode a command setting the value for ``id_``."""
    head = bytes((HEADER_BYTE, Command.SET_DATA_FIELD, _id_byte(id_)))
    return head + _DOUBLE.pack(float(value))


def encode_publish() -> bytes:
    """Encode a publish-data command."""
    return bytes((HEADER_BYTE, Command.PUBLISH_DATA))


def split_frames(data: bytes, max_commands: int = MAX_NUM_COMMANDS) -> list[Frame]:
    """Split a received byte stream into frames.

    A frame starts wherever a header byte is directly followed by a known
    command byte; at most ``max_commands`` frames are taken. Each frame's
    payload runs up to the start of the next frame.
    """
    data = bytes(data)
    starts: list[int] = []
    for index, (byte, following) in enumerate(zip(data, data[1:])):
        if len(starts) >= max_commands:
            break
        if byte == HEADER_BYTE and following in _VALID_COMMANDS:
            starts.append(index)

    ends = starts[1:] + [len(data)]
    return [
        Frame(Command(data[start + 1]), data[start + 2 : end], start)
        for start, end in zip(starts, ends)
    ]