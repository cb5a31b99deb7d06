import json
import struct

import pytest

from tmlink.data_handle import DEFAULT_NODE_NAME, DataHandle
from tmlink.protocol import (
    Command,
    encode_data_field,
    encode_id_assign,
    encode_node_name,
    encode_publish,
)


@pytest.fixture
def published():
    return []


@pytest.fixture
def handle(published):
    return DataHandle(lambda topic, payload: published.append((topic, payload)))


def test_default_node_name(handle):
    assert handle.node_name == DEFAULT_NODE_NAME == "default_name"


def test_set_node_name(handle):
    handle.set_node_name("Swerve_Robot")
    assert handle.node_name == "Swerve_Robot"


def test_id_assign_initialises_field(handle):
    handle.set_id_assign(0, "imu")
    assert handle.get_name_assign(0) == "imu"
    assert json.loads(handle.data_json()) == {"imu": 0}


def test_missing_assignment_is_empty(handle):
    assert handle.get_name_assign(7) == ""


def test_reassign_keeps_order(handle):
    handle.set_id_assign(0, "imu")
    handle.set_id_assign(1, "encoder_x")
    handle.set_id_assign(0, "yaw")
    assert json.loads(handle.id_assign_json()) == [
        {"id": 0, "value": "yaw"},
        {"id": 1, "value": "encoder_x"},
    ]


def test_set_data_field_requires_assignment(handle):
    assert handle.set_data_field(3, 1.0) is False
    assert json.loads(handle.data_json()) == {}


def test_set_data_field_updates(handle):
    handle.set_id_assign(2, "encoder_y")
    assert handle.set_data_field(2, -4.25) is True
    assert json.loads(handle.data_json()) == {"encoder_y": -4.25}


def test_json_is_compact(handle):
    handle.set_id_assign(0, "imu")
    assert handle.id_assign_json() == '[{"id":0,"value":"imu"}]'
    assert handle.data_json() == '{"imu":0}'


def test_handle_full_session(handle, published):
    stream = (
        encode_node_name("Swerve_Robot")
        + encode_id_assign(0, "imu")
        + encode_data_field(0, 1.5)
        + encode_publish()
    )
    frames = handle.handle(stream)
    assert [f.command for f in frames] == [
        Command.SET_NODE_NAME,
        Command.SET_ID_ASSIGN,
        Command.SET_DATA_FIELD,
        Command.PUBLISH_DATA,
    ]
    assert [topic for topic, _ in published] == [
        "Swerve_Robot/data",
        "Swerve_Robot/id_assign",
        "Swerve_Robot/data",
    ]
    assert json.loads(published[0][1]) == {}
    assert json.loads(published[1][1]) == [{"id": 0, "value": "imu"}]
    assert json.loads(published[2][1]) == {"imu": 1.5}


def test_handle_unassigned_data_field_changes_nothing(handle, published):
    frames = handle.handle(encode_data_field(5, 2.0) + encode_publish())
    assert [f.command for f in frames] == [
        Command.SET_DATA_FIELD,
        Command.PUBLISH_DATA,
    ]
    assert handle.data_json() == "{}"
    assert published == [("default_name/data", "{}")]


def test_handle_truncated_data_field_is_ignored(handle, published):
    handle.set_id_assign(0, "imu")
    handle.handle(bytes((0xFF, Command.SET_DATA_FIELD, 0)) + struct.pack("<d", 3.0)[:4])
    assert json.loads(handle.data_json()) == {"imu": 0}
    assert published == []


def test_handle_id_assign_without_id_is_ignored(handle, published):
    handle.handle(bytes((0xFF, Command.SET_ID_ASSIGN)))
    assert published == []
    assert handle.get_name_assign(0) == ""


def test_handle_ignores_noise(handle, published):
    frames = handle.handle(b"\x01\x02\xff\x10" + encode_publish())
    assert len(frames) == 1
    assert len(published) == 1