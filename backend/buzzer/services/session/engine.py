from dataclasses import dataclass
from typing import Optional

from buzzer.errors import Unauthorized
from buzzer.models import BuzzerEvent, Player, Room
from .arbiter import BuzzerArbiter
from .broadcaster import SessionBroadcaster
from .directory import PlayerDirectory
from .reaper import RoomReaper
from .registry import RoomRegistry


@dataclass
class Session:
    """The engine services of one app, plus the command entry points.

    Each command runs under the target room's lock and either applies
    fully or raises a SessionError before mutating anything.
    """
    registry: RoomRegistry
    directory: PlayerDirectory
    arbiter: BuzzerArbiter
    broadcaster: SessionBroadcaster
    reaper: RoomReaper

    def create_room(self, team_count, host_name) -> Room:
        return self.registry.create_room(team_count, host_name)

    def join_room(self, code, player_name, connection_id: str, requested_host: bool = False) -> Player:
        player_name = self.directory.clean_name(player_name)
        target = self.registry.require_room(code)
        # Moving to another room: leave the old one first so no two room locks are held
        resolved = self.directory.resolve_player(connection_id)
        if resolved is not None and resolved[1] != target.code:
            self.disconnect(connection_id)

        with self.registry.locked(target.code) as room:
            player = self.directory.join_room(
                room.code,
                player_name,
                connection_id,
                requested_host,
                on_unbind=self.broadcaster.unsubscribe,
            )
            self.broadcaster.subscribe(connection_id, room.code)
            self.broadcaster.send_player(connection_id, player)
            self.broadcaster.broadcast_state(room)
            return player

    def press_buzzer(self, code, player_id) -> BuzzerEvent:
        return self.arbiter.press_buzzer(code, player_id)

    def reset_buzzer(self, code, connection_id: str) -> Room:
        return self.arbiter.reset_buzzer(code, self._requester(connection_id))

    def get_room(self, code) -> dict:
        with self.registry.locked(code) as room:
            return room.to_dict()

    def delete_room(self, code, connection_id: str) -> bool:
        room = self.registry.get_room(code)
        if room is None:
            return False
        with room.lock:
            requester = self._requester(connection_id)
            if requester is None or not requester.is_host or room.find_player(player_id=requester.id) is not requester:
                raise Unauthorized('Only the host can delete the room')
            # Members hear about it before the registry lets go of the room
            self.broadcaster.notify_deleted(room.code)
            return self.registry.delete_room(room.code)

    def disconnect(self, connection_id: str) -> Optional[Player]:
        resolved = self.directory.resolve_player(connection_id)
        if resolved is None:
            self.directory.disconnect(connection_id)
            return None
        _, code = resolved
        room = self.registry.get_room(code)
        if room is None:
            self.directory.disconnect(connection_id)
            return None
        with room.lock:
            resolved = self.directory.disconnect(connection_id)
            if resolved is None:
                return None
            self.broadcaster.unsubscribe(connection_id, room.code)
            self.broadcaster.broadcast_state(room)
            return resolved[0]

    def _requester(self, connection_id: str) -> Optional[Player]:
        resolved = self.directory.resolve_player(connection_id)
        return resolved[0] if resolved else None


def build_session(socketio, config) -> Session:
    registry = RoomRegistry(
        code_length=int(config.get('ROOM_CODE_LENGTH', 6)),
        max_team_count=int(config.get('MAX_TEAM_COUNT', 0)),
    )
    directory = PlayerDirectory(registry)
    broadcaster = SessionBroadcaster(socketio, namespace=config.get('SOCKETIO_NAMESPACE', '/'))
    arbiter = BuzzerArbiter(registry, broadcaster)
    reaper = RoomReaper(
        registry,
        socketio,
        ttl_sec=int(config.get('ROOM_TTL_SEC', 7200)),
        interval_sec=int(config.get('REAPER_INTERVAL_SEC', 3600)),
    )
    return Session(
        registry=registry,
        directory=directory,
        arbiter=arbiter,
        broadcaster=broadcaster,
        reaper=reaper,
    )
