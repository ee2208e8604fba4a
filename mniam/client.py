"""Network player: answers the game server's requests over TCP."""

from __future__ import annotations

import argparse
import logging
import socket
from typing import Callable, Dict, Optional

from .packets import (
    GameOverResponse,
    IdentifyResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    NewGameResponse,
    PacketType,
    unpack_object_states,
)
from .protocol import Packet, Receiver, serialize
from .strategy import GameState

log = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 2001
RECV_SIZE = 512

PLAYER_NAME = "Tata Gimpera"
HELLO_MESSAGE = "Czesc!"
END_MESSAGE = "Do zobaczenia!"


def _fixed_payload(packet: Packet, size: int) -> bytes:
    return packet.payload.ljust(size, b"\0")


class Player:
    """Turns each request from the server into the bytes of the reply."""

    def __init__(self, state: Optional[GameState] = None) -> None:
        self.state = state if state is not None else GameState()
        self._handlers: Dict[int, Callable[[Packet], bytes]] = {
            PacketType.IDENTIFY_REQUEST: self._on_identify,
            PacketType.NEW_GAME_REQUEST: self._on_new_game,
            PacketType.OBJECT_UPDATE_REQUEST: self._on_object_update,
            PacketType.MOVE_REQUEST: self._on_move,
            PacketType.GAME_OVER_REQUEST: self._on_game_over,
        }

    def handle_packet(self, packet: Packet) -> bytes:
        """Process one packet; return the serialized reply, or b"" when none is due."""
        handler = self._handlers.get(packet.type)
        if handler is None:
            log.warning("Unknown packet type: %d", packet.type)
            return b""
        return handler(packet)

    def _on_identify(self, packet: Packet) -> bytes:
        log.info("Got IDENTIFY.request")
        return serialize(PacketType.IDENTIFY_RESPONSE, IdentifyResponse(PLAYER_NAME).pack())

    def _on_new_game(self, packet: Packet) -> bytes:
        log.info("Got NEW_GAME.request")
        request = NewGameRequest.unpack(_fixed_payload(packet, NewGameRequest.SIZE))
        self.state.start_game(request.player_number, request.map_width, request.map_height)
        return serialize(PacketType.NEW_GAME_RESPONSE, NewGameResponse(HELLO_MESSAGE).pack())

    def _on_object_update(self, packet: Packet) -> bytes:
        log.debug("Got OBJECT_UPDATE.request")
        self.state.update_objects(unpack_object_states(packet.payload))
        return b""

    def _on_move(self, packet: Packet) -> bytes:
        log.debug("Got MOVE.request")
        request = MoveRequest.unpack(_fixed_payload(packet, MoveRequest.SIZE))
        self.state.current_game_time = request.game_time
        angle = self.state.calculate_movement()
        return serialize(PacketType.MOVE_RESPONSE, MoveResponse(angle).pack())

    def _on_game_over(self, packet: Packet) -> bytes:
        log.info("Got GAME_OVER.request")
        self.state.end_game()
        return serialize(PacketType.GAME_OVER_RESPONSE, GameOverResponse(END_MESSAGE).pack())


def run(host: str, port: int, player: Player) -> None:
    """Connect to the server and play until it closes the connection."""
    with socket.create_connection((host, port)) as conn:
        log.info("Connected to game server")

        def reply(packet: Packet) -> None:
            response = player.handle_packet(packet)
            if response:
                conn.sendall(response)

        receiver = Receiver(reply)
        while True:
            chunk = conn.recv(RECV_SIZE)
            if not chunk:
                log.info("Connection closed")
                break
            receiver.feed(chunk)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Automatic player for the mniAM game.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="game server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="game server port")
    args = parser.parse_args(argv)

    print("This is mniAM player. Let's eat some transistors!")
    print("Connecting to game server...")
    try:
        run(args.host, args.port, Player())
    except OSError as exc:
        print(f"Unable to talk to the game server: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())