import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from buzzer.errors import InvalidConfig, RoomNotFound
from buzzer.models import Room, generate_room_code, normalize_code

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Process-wide map of live rooms keyed by upper-case code."""

    def __init__(self, code_length: int = 6, max_team_count: int = 0):
        self.code_length = code_length
        self.max_team_count = max_team_count
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.RLock()
        self._delete_listeners: List[Callable[[str, Room], None]] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def add_delete_listener(self, listener: Callable[[str, Room], None]) -> None:
        self._delete_listeners.append(listener)

    def create_room(self, team_count, host_name) -> Room:
        if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 1:
            raise InvalidConfig('Team count must be a positive integer')
        if self.max_team_count and team_count > self.max_team_count:
            raise InvalidConfig(f'Team count must be at most {self.max_team_count}')
        if not isinstance(host_name, str) or not host_name.strip():
            raise InvalidConfig('Host name is required')
        host_name = host_name.strip()

        with self._lock:
            code = generate_room_code(self.code_length)
            while code in self._rooms:
                logger.debug(f"[code-collision] code={code} retrying")
                code = generate_room_code(self.code_length)
            room = Room(code=code, team_count=team_count, host_name=host_name)
            self._rooms[code] = room
        logger.info(f"[room-created] code={code} teams={team_count} host={host_name}")
        return room

    def get_room(self, code) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    def require_room(self, code) -> Room:
        room = self.get_room(code)
        if room is None:
            raise RoomNotFound()
        return room

    @contextmanager
    def locked(self, code) -> Iterator[Room]:
        """Hold the room's lock; raises RoomNotFound if it is gone by then."""
        room = self.require_room(code)
        with room.lock:
            if self.get_room(room.code) is not room:
                raise RoomNotFound()
            yield room

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def delete_room(self, code) -> bool:
        """Remove a room and notify listeners. Returns False if it was already gone."""
        room = self.get_room(code)
        if room is None:
            return False
        with room.lock:
            with self._lock:
                if self._rooms.get(room.code) is not room:
                    return False
                del self._rooms[room.code]
            for listener in self._delete_listeners:
                listener(room.code, room)
        logger.info(f"[room-deleted] code={room.code}")
        return True
