"""Payload layouts of the game's packet types."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar, Iterable, List

MAX_PLAYER_NAME_LEN = 24
MAX_PLAYER_MESSAGE_LEN = 127
MAX_PLAYER_UPDATES = 8
MAX_OBJECT_UPDATES = 16


class PacketType(enum.IntEnum):
    NO_PACKET = 0
    IDENTIFY_REQUEST = 1
    IDENTIFY_RESPONSE = 2
    NEW_GAME_REQUEST = 3
    NEW_GAME_RESPONSE = 4
    OBJECT_UPDATE_REQUEST = 5
    MOVE_REQUEST = 6
    MOVE_RESPONSE = 7
    GAME_OVER_REQUEST = 8
    GAME_OVER_RESPONSE = 9


class ObjectType(enum.IntEnum):
    PLAYER = 0
    FOOD = 1
    SPARK = 2
    GLUE = 3


def _pack(fmt: str, *values) -> bytes:
    try:
        return struct.pack(fmt, *values)
    except struct.error as exc:
        raise ValueError(str(exc)) from exc


def _unpack(fmt: str, data: bytes) -> tuple:
    try:
        return struct.unpack_from(fmt, bytes(data))
    except struct.error as exc:
        raise ValueError(str(exc)) from exc


def _encode_text(text: str, size: int) -> bytes:
    raw = text.encode("utf-8")
    if b"\0" in raw:
        raise ValueError("text must not contain NUL characters")
    if len(raw) >= size:
        raise ValueError(f"text of {len(raw)} bytes does not fit in {size} bytes with its terminator")
    return raw.ljust(size, b"\0")


def _decode_text(data: bytes, size: int) -> str:
    data = bytes(data)
    if len(data) < size:
        raise ValueError(f"need {size} bytes, got {len(data)}")
    return data[:size].split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class IdentifyRequest:
    game_ver_hi: int
    game_ver_lo: int
    game_revision: int

    FORMAT: ClassVar[str] = "<BBH"
    SIZE: ClassVar[int] = struct.calcsize(FORMAT)

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.game_ver_hi, self.game_ver_lo, self.game_revision)

    @classmethod
    def unpack(cls, data: bytes) -> "IdentifyRequest":
        return cls(*_unpack(cls.FORMAT, data))


@dataclass(frozen=True)
class IdentifyResponse:
    player_name: str

    SIZE: ClassVar[int] = MAX_PLAYER_NAME_LEN

    def pack(self) -> bytes:
        return _encode_text(self.player_name, self.SIZE)

    @classmethod
    def unpack(cls, data: bytes) -> "IdentifyResponse":
        return cls(_decode_text(data, cls.SIZE))


@dataclass(frozen=True)
class NewGameRequest:
    player_number: int
    number_of_players: int
    map_width: float
    map_height: float

    FORMAT: ClassVar[str] = "<BBff"
    SIZE: ClassVar[int] = struct.calcsize(FORMAT)

    def pack(self) -> bytes:
        return _pack(
            self.FORMAT,
            self.player_number,
            self.number_of_players,
            self.map_width,
            self.map_height,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "NewGameRequest":
        return cls(*_unpack(cls.FORMAT, data))


@dataclass(frozen=True)
class NewGameResponse:
    hello_message: str

    SIZE: ClassVar[int] = MAX_PLAYER_MESSAGE_LEN

    def pack(self) -> bytes:
        return _encode_text(self.hello_message, self.SIZE)

    @classmethod
    def unpack(cls, data: bytes) -> "NewGameResponse":
        return cls(_decode_text(data, cls.SIZE))


@dataclass(frozen=True)
class ObjectState:
    """State of one game object; objects of each type are numbered separately."""

    object_type: int
    object_no: int
    hp: int
    x: float
    y: float

    FORMAT: ClassVar[str] = "<BHbff"
    SIZE: ClassVar[int] = struct.calcsize(FORMAT)

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.object_type, self.object_no, self.hp, self.x, self.y)

    @classmethod
    def unpack(cls, data: bytes) -> "ObjectState":
        return cls(*_unpack(cls.FORMAT, data))


@dataclass(frozen=True)
class MoveRequest:
    game_time: int

    FORMAT: ClassVar[str] = "<I"
    SIZE: ClassVar[int] = struct.calcsize(FORMAT)

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.game_time)

    @classmethod
    def unpack(cls, data: bytes) -> "MoveRequest":
        return cls(*_unpack(cls.FORMAT, data))


@dataclass(frozen=True)
class MoveResponse:
    """Direction of movement in radians."""

    angle: float

    FORMAT: ClassVar[str] = "<f"
    SIZE: ClassVar[int] = struct.calcsize(FORMAT)

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.angle)

    @classmethod
    def unpack(cls, data: bytes) -> "MoveResponse":
        return cls(*_unpack(cls.FORMAT, data))


@dataclass(frozen=True)
class GameOverResponse:
    end_message: str

    SIZE: ClassVar[int] = MAX_PLAYER_MESSAGE_LEN

    def pack(self) -> bytes:
        return _encode_text(self.end_message, self.SIZE)

    @classmethod
    def unpack(cls, data: bytes) -> "GameOverResponse":
        return cls(_decode_text(data, cls.SIZE))


def pack_object_states(states: Iterable[ObjectState]) -> bytes:
    """Pack object states into an OBJECT_UPDATE or GAME_OVER payload."""
    states = list(states)
    if len(states) > MAX_OBJECT_UPDATES:
        raise ValueError(f"at most {MAX_OBJECT_UPDATES} object states fit in one packet")
    return b"".join(state.pack() for state in states)


def unpack_object_states(data: bytes) -> List[ObjectState]:
    """Read as many whole object states as the payload holds; a partial tail is ignored."""
    data = bytes(data)
    whole = len(data) - len(data) % ObjectState.SIZE
    return [ObjectState(*fields) for fields in struct.iter_unpack(ObjectState.FORMAT, data[:whole])]