import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from buzzer.errors import InvalidConfig
from buzzer.models import Player, Room
from .registry import RoomRegistry
from .teams import assign_team

logger = logging.getLogger(__name__)


class PlayerDirectory:
    """Connection -> player bindings.

    Identity lives on the Player inside its room and is keyed by name;
    presence is the connection binding kept here. Disconnecting drops the
    binding but leaves the Player so the same name can rejoin later.
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        # connection_id -> (player_id, room_code)
        self._bindings: Dict[str, Tuple[str, str]] = {}
        self._lock = threading.RLock()
        registry.add_delete_listener(self._forget_room)

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    @staticmethod
    def clean_name(player_name) -> str:
        if not isinstance(player_name, str) or not player_name.strip():
            raise InvalidConfig('Player name is required')
        return player_name.strip()

    def join_room(
        self,
        code,
        player_name,
        connection_id: str,
        requested_host: bool = False,
        on_unbind: Optional[Callable[[str, str], None]] = None,
    ) -> Player:
        """Bind connection_id to the named player, creating the player if new.

        on_unbind(connection_id, room_code) is called for every connection
        that stops being associated with a room as a result of this join.
        """
        player_name = self.clean_name(player_name)

        with self.registry.locked(code) as room:
            player = room.find_player(name=player_name)
            self._release_binding(room, connection_id, keep=player, on_unbind=on_unbind)

            if player is not None:
                previous = player.connection_id
                player.connection_id = connection_id
                player.connected = True
                with self._lock:
                    dropped = None
                    if previous and previous != connection_id:
                        dropped = self._bindings.pop(previous, None)
                    self._bindings[connection_id] = (player.id, room.code)
                if dropped is not None and on_unbind is not None:
                    on_unbind(previous, room.code)
                logger.info(f"[player-reconnected] room={room.code} name={player.name} sid={connection_id}")
                return player

            # The creator's claim always counts; other claims only while nobody holds host
            is_host = not room.players or (
                bool(requested_host) and (player_name == room.host_name or not room.has_host)
            )
            player = Player(
                name=player_name,
                team=assign_team(room),
                is_host=is_host,
                connection_id=connection_id,
            )
            room.players.append(player)
            with self._lock:
                self._bindings[connection_id] = (player.id, room.code)
            logger.info(
                f"[player-joined] room={room.code} name={player.name} team={player.team} host={player.is_host}"
            )
            return player

    def _release_binding(self, room: Room, connection_id: str, keep: Optional[Player], on_unbind) -> None:
        """Drop an existing binding of connection_id unless it already points at keep."""
        with self._lock:
            bound = self._bindings.get(connection_id)
            if bound is None or (keep is not None and bound == (keep.id, room.code)):
                return
            del self._bindings[connection_id]
        player_id, bound_code = bound
        if bound_code == room.code:
            # Same connection, different name in the same room
            old = room.find_player(player_id=player_id)
            if old is not None and old.connection_id == connection_id:
                old.connection_id = None
                old.connected = False
        elif on_unbind is not None:
            on_unbind(connection_id, bound_code)

    def resolve_player(self, connection_id: str) -> Optional[Tuple[Player, str]]:
        with self._lock:
            binding = self._bindings.get(connection_id)
        if binding is None:
            return None
        player_id, code = binding
        room = self.registry.get_room(code)
        if room is None:
            return None
        player = room.find_player(player_id=player_id)
        if player is None:
            return None
        return player, code

    def disconnect(self, connection_id: str) -> Optional[Tuple[Player, str]]:
        resolved = self.resolve_player(connection_id)
        with self._lock:
            self._bindings.pop(connection_id, None)
        if resolved is None:
            return None
        player, code = resolved
        room = self.registry.get_room(code)
        if room is not None:
            with room.lock:
                if player.connection_id == connection_id:
                    player.connected = False
        logger.info(f"[player-disconnected] room={code} name={player.name} sid={connection_id}")
        return resolved

    def _forget_room(self, code: str, room: Room) -> None:
        with self._lock:
            stale = [sid for sid, (_, room_code) in self._bindings.items() if room_code == code]
            for sid in stale:
                del self._bindings[sid]
        if stale:
            logger.debug(f"[bindings-dropped] room={code} count={len(stale)}")
