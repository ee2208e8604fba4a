"""Packet framing, checksums and stream reassembly for the game-server link.

Every packet on the wire has this layout::

    SOP (1B, always 0xA1) | TYPE (1B) | LENGTH (1B, 0..200) | CRC (2B, LSB first) | PAYLOAD

The CRC covers TYPE, LENGTH and the payload bytes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

SOP = 0xA1
INITIAL_CRC = 0xFFFF
HEADER_SIZE = 5
MAX_PAYLOAD_SIZE = 200
MAX_PACKET_SIZE = HEADER_SIZE + MAX_PAYLOAD_SIZE


def update_crc(byte: int, crc: int) -> int:
    """Fold one byte into a running 16-bit CRC and return the new value."""
    byte = (byte ^ crc) & 0xFF
    byte ^= (byte << 4) & 0xFF
    return (((byte << 8) | (crc >> 8)) ^ (byte >> 4) ^ (byte << 3)) & 0xFFFF


def _check_fields(packet_type: int, payload: bytes) -> None:
    if not 0 <= packet_type <= 0xFF:
        raise ValueError(f"packet type {packet_type} is outside 0..255")
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(
            f"payload of {len(payload)} bytes exceeds the maximum of {MAX_PAYLOAD_SIZE}"
        )


def compute_crc(packet_type: int, payload: bytes = b"") -> int:
    """Return the CRC of a packet with the given type and payload."""
    payload = bytes(payload)
    _check_fields(packet_type, payload)
    crc = INITIAL_CRC
    for byte in (packet_type, len(payload), *payload):
        crc = update_crc(byte, crc)
    return crc


def serialize(packet_type: int, payload: bytes = b"") -> bytes:
    """Build the wire form of a packet.

    Raises ValueError if the type is not a byte or the payload is too long.
    """
    payload = bytes(payload)
    crc = compute_crc(packet_type, payload)
    header = bytes((SOP, packet_type, len(payload))) + crc.to_bytes(2, "little")
    return header + payload


class PacketState(enum.IntEnum):
    """States of packet reception."""

    EMPTY = 0
    GOT_SOP = 1
    GOT_TYPE = 2
    GOT_LENGTH = 3
    GOT_CRC_LO = 4
    GETTING_PAYLOAD = 6
    GOT_WHOLE_PACKET = 7


@dataclass(frozen=True)
class PacketHeader:
    """Header fields of a received packet."""

    sop: int
    type: int
    length: int
    crc: int


@dataclass(frozen=True)
class Packet:
    """A complete packet whose checksum has been verified."""

    header: PacketHeader
    payload: bytes

    @property
    def type(self) -> int:
        return self.header.type


PacketHandler = Callable[[Packet], None]


class Receiver:
    """Finds valid packets in a byte stream fed to it in arbitrary chunks."""

    def __init__(self, handler: Optional[PacketHandler] = None) -> None:
        self.handler = handler
        self.reset()

    def reset(self) -> None:
        """Drop any partially received packet."""
        self.state = PacketState.EMPTY
        self._type = 0
        self._length = 0
        self._crc = 0
        self._payload = bytearray()

    def feed(self, data: Iterable[int]) -> List[Packet]:
        """Consume bytes; hand each valid packet to the handler and return them."""
        received = []
        for byte in bytes(data):
            packet = self._step(byte)
            if packet is not None:
                received.append(packet)
                if self.handler is not None:
                    self.handler(packet)
        return received

    def _step(self, byte: int) -> Optional[Packet]:
        state = self.state
        if state is PacketState.EMPTY:
            if byte == SOP:
                self.state = PacketState.GOT_SOP
        elif state is PacketState.GOT_SOP:
            self._type = byte
            self.state = PacketState.GOT_TYPE
        elif state is PacketState.GOT_TYPE:
            if byte <= MAX_PAYLOAD_SIZE:
                self._length = byte
                self._payload = bytearray()
                self.state = PacketState.GOT_LENGTH
            else:
                self.state = PacketState.EMPTY
        elif state is PacketState.GOT_LENGTH:
            self._crc = (self._crc & 0xFF00) | byte
            self.state = PacketState.GOT_CRC_LO
        elif state is PacketState.GOT_CRC_LO:
            self._crc = (self._crc & 0x00FF) | (byte << 8)
            if self._length == 0:
                return self._complete()
            self.state = PacketState.GETTING_PAYLOAD
        elif state is PacketState.GETTING_PAYLOAD:
            self._payload.append(byte)
            if len(self._payload) == self._length:
                return self._complete()
        else:
            self.state = PacketState.GOT_SOP if byte == SOP else PacketState.EMPTY
        return None

    def _complete(self) -> Optional[Packet]:
        payload = bytes(self._payload)
        valid = compute_crc(self._type, payload) == self._crc
        self.state = PacketState.EMPTY
        self._payload = bytearray()
        if not valid:
            return None
        header = PacketHeader(sop=SOP, type=self._type, length=self._length, crc=self._crc)
        return Packet(header=header, payload=payload)