"""Node-side command handling: turns received frames into MQTT publications."""

from __future__ import annotations

import json
import logging
import struct
from collections.abc import Callable

from tmlink.protocol import MAX_NUM_COMMANDS, Command, Frame, split_frames

log = logging.getLogger(__name__)

DEFAULT_NODE_NAME = "default_name"

_DOUBLE = struct.Struct("<d")


def _dumps(value: object) -> str:
    return json.dumps(value, separators=(",", ":"))


def _text(value: str | bytes) -> str:
    return value.decode("latin-1") if isinstance(value, (bytes, bytearray)) else value


class DataHandle:
    """Keeps the node name, id assignments and data values of one node.

    ``publish`` is called as ``publish(topic, payload)`` whenever the
    received commands ask for something to be published.
    """

    def __init__(self, publish: Callable[[str, str], object]) -> None:
        self._publish = publish
        self._node_name = DEFAULT_NODE_NAME
        self._assignments: dict[int, str] = {}
        self._data: dict[str, float] = {}

    @property
    def node_name(self) -> str:
        """Name used as the first part of every published topic."""
        return self._node_name

    def set_node_name(self, name: str | bytes) -> None:
        """Change the node name."""
        self._node_name = _text(name)

    def set_id_assign(self, id_: int, value: str | bytes) -> None:
        """Map ``id_`` to the value name ``value`` and reset that field to 0."""
        name = _text(value)
        self._assignments[id_] = name
        self._data[name] = 0

    def get_name_assign(self, id_: int) -> str:
        """Value name assigned to ``id_``, or an empty string if there is none."""
        return self._assignments.get(id_, "")

    def set_data_field(self, id_: int, value: float) -> bool:
        """Store ``value`` under the name assigned to ``id_``.

        Returns False when no name is assigned to ``id_``.
        """
        name = self.get_name_assign(id_)
        if name == "":
            return False
        verb = "Updated" if name in self._data else "Created"
        self._data[name] = value
        log.debug("%s %s with value %s", verb, name, value)
        return True

    def data_json(self) -> str:
        """The data fields as compact JSON."""
        return _dumps(self._data)

    def id_assign_json(self) -> str:
        """The id assignments as a compact JSON array."""
        return _dumps([{"id": id_, "value": name} for id_, name in self._assignments.items()])

    def _topic(self, leaf: str) -> str:
        return f"{self._node_name}/{leaf}"

    def handle(self, data: bytes) -> list[Frame]:
        """Process every command found in ``data`` and return the frames found."""
        data = bytes(data)
        frames = split_frames(data, MAX_NUM_COMMANDS)
        for frame in frames:
            self._dispatch(frame, data)
        return frames

    def _dispatch(self, frame: Frame, data: bytes) -> None:
        if frame.command is Command.SET_NODE_NAME:
            self.set_node_name(frame.payload)
            log.debug("Set Node Name: %s", self._node_name)
            self._publish(self._topic("data"), self.data_json())

        elif frame.command is Command.SET_ID_ASSIGN:
            if not frame.payload:
                return
            id_ = frame.payload[0]
            self.set_id_assign(id_, frame.payload[1:])
            payload = self.id_assign_json()
            self._publish(self._topic("id_assign"), payload)
            log.debug("Publish ID Assign: %s", payload)

        elif frame.command is Command.SET_DATA_FIELD:
            if not frame.payload:
                return
            id_ = frame.payload[0]
            raw = data[frame.start + 3 : frame.start + 3 + _DOUBLE.size]
            if len(raw) < _DOUBLE.size:
                log.debug("Truncated data field for ID: %d", id_)
                return
            (value,) = _DOUBLE.unpack(raw)
            if self.set_data_field(id_, value):
                log.debug("Set Data Field: %s with ID: %d", value, id_)
            else:
                log.debug("Failed to set data field for ID: %d", id_)

        elif frame.command is Command.PUBLISH_DATA:
            payload = self.data_json()
            self._publish(self._topic("data"), payload)
            log.debug("Publish Data: %s", payload)