# tmlink

A small telemetry link. A sender frames named values into a byte stream,
and a node reads that stream from a serial port and republishes it as JSON
over MQTT.

## Wire format

Every frame starts with the header byte `0xFF`, followed by a command byte
(`tmlink.protocol.Command`):

| Command          | Byte   | Payload                                   |
|------------------|--------|-------------------------------------------|
| `SET_NODE_NAME`  | `0x51` | the node name as raw bytes                |
| `SET_ID_ASSIGN`  | `0x52` | one id byte, then the value name          |
| `SET_DATA_FIELD` | `0x53` | one id byte, then a little-endian double  |
| `PUBLISH_DATA`   | `0x54` | none                                      |

`tmlink.protocol` has one encoder per command (`encode_node_name`,
`encode_id_assign`, `encode_data_field`, `encode_publish`). Ids must fit
in one byte, or `ValueError` is raised. `split_frames(data, max_commands)`
cuts a received byte string into `Frame` objects (`command`, `payload`,
`start`). A frame starts wherever `0xFF` is directly followed by a known
command byte, and its payload runs up to the next frame. At most
`max_commands` frames are taken, 30 by default.

## Installing

```
pip install .
```

## Sending telemetry

`tmlink.sender.TelemetrySender` queues frames in a fixed-size ring buffer,
1024 bytes by default, which holds at most `size - 1` bytes. It hands
contiguous chunks to a transport callable:

```python
from tmlink.sender import TelemetrySender

sender = TelemetrySender(transport=serial_port.write)
sender.set_node_name("Swerve_Robot")
sender.set_id_assign(0, "imu")
sender.set_data_field(0, 1.5)
sender.publish_data()
sender.process()            # sends one chunk, returns its length
sender.transmit_complete()  # releases it; the next process() may send again
```

- `enqueue(data)` stores raw bytes. When the buffer fills part way, the
  bytes already stored stay queued and `BufferFullError` is raised.
- `pending()` is the number of queued bytes not yet released.
- `receive(byte)` records one incoming byte, wrapping to the start when the
  receive buffer is full. `received()` returns the bytes recorded since the
  last wrap.

## Running the node

```
tmlink-node --port /dev/ttyUSB0
```

Options:

| Option        | Default       |
|---------------|---------------|
| `--port`      | (required)    |
| `--baudrate`  | `115200`      |
| `--host`      | `192.168.5.1` |
| `--mqtt-port` | `1883`        |
| `--client-id` | `robot`       |

The node runs until interrupted. It exits with status 1 on a serial port
error.

Each batch of bytes waiting on the port goes to `tmlink.data_handle.DataHandle.handle`.
`DataHandle` keeps the node name (`default_name` until one is set), the id
assignments and the current values:

- Setting the node name publishes the data fields on `<node name>/data`.
- Assigning an id resets that field to 0 and publishes all assignments on
  `<node name>/id_assign`, as a JSON array of `{"id": ..., "value": ...}`.
- A data field for an unassigned id is ignored.
- A publish command sends the data fields as a JSON object on
  `<node name>/data`.

`tmlink.mqtt_connection.MqttConnection` wraps a paho-mqtt client. It
reconnects from `loop()` at most once a second while disconnected.

## Limits

- Each batch read from the serial port is parsed on its own. A frame split
  across two reads is not joined back together.
- The node only publishes. Nothing received from the broker is acted on.