import random
import string
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

ROOM_CODE_ALPHABET = string.digits + string.ascii_uppercase


def generate_room_code(length=6):
    """Generate a candidate room code; uniqueness is checked by the registry."""
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


def normalize_code(code) -> str:
    return (code or '').strip().upper()


def parse_team_count(value):
    """Accept numeric strings from loosely typed clients; the registry validates the rest."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Player:
    name: str
    team: int
    is_host: bool = False
    connection_id: Optional[str] = None
    connected: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'team': self.team,
            'isHost': self.is_host,
            'connectionId': self.connection_id,
            'connected': self.connected,
        }


@dataclass(frozen=True)
class BuzzerEvent:
    player_id: str
    player_name: str
    team: int
    timestamp: int

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'playerName': self.player_name,
            'team': self.team,
            'timestamp': self.timestamp,
        }


@dataclass
class Room:
    code: str
    team_count: int
    host_name: str
    players: List[Player] = field(default_factory=list)
    buzzer_locked: bool = False
    first_buzz: Optional[BuzzerEvent] = None
    buzz_ledger: List[BuzzerEvent] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    # Serializes every mutation and broadcast for this room
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def find_player(self, player_id=None, name=None) -> Optional[Player]:
        for p in self.players:
            if player_id is not None and p.id == player_id:
                return p
            if name is not None and p.name == name:
                return p
        return None

    @property
    def has_host(self) -> bool:
        return any(p.is_host for p in self.players)

    def age_seconds(self, now=None) -> float:
        return (now if now is not None else time.time()) - self.created_at

    def to_dict(self):
        return {
            'code': self.code,
            'teamCount': self.team_count,
            'hostName': self.host_name,
            'players': [p.to_dict() for p in self.players],
            'buzzerLocked': self.buzzer_locked,
            'firstBuzz': self.first_buzz.to_dict() if self.first_buzz else None,
            'buzzLedger': [e.to_dict() for e in self.buzz_ledger],
            'createdAt': datetime.fromtimestamp(self.created_at, tz=timezone.utc).isoformat(),
        }
