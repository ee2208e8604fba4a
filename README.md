# mniam

A player for the mniAM game. It connects to a game server over TCP and
exchanges AMCOM packets with it. The player sends its name and a greeting
when a new game starts. It tracks the objects on the map. On each move
request it heads for the nearest piece of food (a transistor) and turns
aside when a spark is close and in its path.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Running the player

```
mniam-player
```

By default the player connects to `localhost` on port `2001` and plays until
the server closes the connection. `--host` and `--port` choose a different
server:

```
mniam-player --host 192.0.2.10 --port 2001
```

If the connection cannot be made or fails, the command prints the error and
exits with status 1.

## Using the library

### The AMCOM protocol (`mniam.protocol`)

Every packet has a 5-byte header followed by a payload of at most 200 bytes:

| Field   | Size   | Meaning                                               |
|---------|--------|-------------------------------------------------------|
| SOP     | 1 B    | start of packet, always `0xA1`                        |
| TYPE    | 1 B    | packet type, 0..255                                   |
| LENGTH  | 1 B    | payload length, 0..200                                |
| CRC     | 2 B    | checksum over TYPE, LENGTH and payload, little-endian |
| PAYLOAD | 0..200 | packet data                                           |

- `serialize(packet_type, payload=b"")` returns the bytes of one packet. It
  raises `ValueError` when the type is not in 0..255 or the payload is longer
  than 200 bytes.
- `compute_crc(packet_type, payload=b"")` returns a packet's checksum.
  `update_crc(byte, crc)` adds one byte to a running checksum. The checksum
  starts at `0xFFFF`.
- `Receiver(handler=None)` finds packets in a byte stream. `feed(data)`
  accepts chunks of any size. It calls the handler with each complete
  `Packet` whose CRC is correct and returns a list of those packets. Packets
  with a bad CRC are dropped without notice. `reset()` discards a packet
  that has only partly arrived. `state` holds the current `PacketState`.
- `Packet` has a `header` (`PacketHeader` with `sop`, `type`, `length`,
  `crc`), a `payload` (`bytes`) and a `type` shortcut.

```python
from mniam.protocol import Receiver, serialize

receiver = Receiver()
packets = receiver.feed(serialize(7, b"\x00\x00\x80\x3f"))
print(packets[0].type, packets[0].payload)
```

### Payloads (`mniam.packets`)

`PacketType` lists the packet types. `ObjectType` lists the kinds of object:
`PLAYER`, `FOOD`, `SPARK` and `GLUE`. Each payload is a frozen dataclass
with a `pack()` method and an `unpack(data)` classmethod:

- `IdentifyRequest(game_ver_hi, game_ver_lo, game_revision)`
- `IdentifyResponse(player_name)`: 24 bytes, NUL-padded
- `NewGameRequest(player_number, number_of_players, map_width, map_height)`
- `NewGameResponse(hello_message)`: 127 bytes, NUL-padded
- `ObjectState(object_type, object_no, hp, x, y)`: 12 bytes
- `MoveRequest(game_time)`
- `MoveResponse(angle)`: the angle is in radians
- `GameOverResponse(end_message)`: 127 bytes, NUL-padded

`pack()` raises `ValueError` when a value does not fit. For a text payload
that means the text, with its terminating NUL, is too long or contains a NUL.

`pack_object_states(states)` packs up to 16 `ObjectState` records into one
payload. `unpack_object_states(data)` reads every whole record in a payload
and ignores any trailing partial record. Use it for object-update and
game-over payloads.

### Strategy (`mniam.strategy`)

`GameState` holds what the player knows about the game:

- `start_game(player_number, map_width, map_height)` and `end_game()` start
  and end a game.
- `update_objects(states)` merges an object update into the state. It keeps
  at most 16 objects, refreshes the stored sparks and removes dead objects.
- `remove_dead_objects()` drops objects whose hp is zero or below.
- `store_nearest_sparks()` records the positions of up to five sparks.
- `threat_score(target_x, target_y)` rates how dangerous a point is, based on
  living opponents within 100 units. Movement does not use it.
- `avoid_spark_trajectory(target_x, target_y, my_x, my_y)` returns the
  heading to the target. If a stored spark is within 100 units and less than
  60° off that heading, the heading is turned 90° away from the spark.
- `calculate_movement()` returns the heading for the next move in radians.
  It returns `0.0` when no game is active, when no objects are known, or
  when no food is known.

### Client (`mniam.client`)

- `Player(state=None)` wraps a `GameState`. `handle_packet(packet)` returns
  the serialized reply, or `b""` when no reply is due. Object updates and
  unknown packet types get no reply.
- `run(host, port, player)` connects and plays until the server closes the
  connection.
- `main(argv=None)` is the function behind `mniam-player`.

## What it does not do

The package includes no game server. To play you need a server that speaks
the AMCOM protocol. The player makes one connection. It does not reconnect
when the connection drops.