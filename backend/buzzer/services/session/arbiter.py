import logging
from typing import Callable, Optional

from buzzer.errors import StaleOrDuplicatePress, Unauthorized
from buzzer.models import BuzzerEvent, Player, Room, now_ms
from .registry import RoomRegistry

logger = logging.getLogger(__name__)


class BuzzerArbiter:
    """Per-room buzz race: OPEN until the first accepted press, then LOCKED.

    A press is accepted only while the room is OPEN. The room lock is held
    from the state check through the broadcast, so the first press to take
    the lock is the winner and every member sees updates in mutation order.
    The ledger is append-only within a round and only cleared by a reset.
    """

    def __init__(self, registry: RoomRegistry, broadcaster, clock: Callable[[], int] = now_ms):
        self.registry = registry
        self.broadcaster = broadcaster
        self.clock = clock

    def press_buzzer(self, code, player_id) -> BuzzerEvent:
        with self.registry.locked(code) as room:
            if room.buzzer_locked:
                raise StaleOrDuplicatePress()
            player = room.find_player(player_id=player_id)
            if player is None:
                raise StaleOrDuplicatePress('Unknown player')

            event = BuzzerEvent(
                player_id=player.id,
                player_name=player.name,
                team=player.team,
                timestamp=self.clock(),
            )
            room.buzzer_locked = True
            room.first_buzz = event
            room.buzz_ledger.append(event)
            logger.info(f"[buzz] room={room.code} name={player.name} team={player.team}")

            self.broadcaster.broadcast_event(room, event)
            self.broadcaster.broadcast_state(room)
            return event

    def reset_buzzer(self, code, requesting_player: Optional[Player]) -> Room:
        with self.registry.locked(code) as room:
            if not _is_host_of(room, requesting_player):
                raise Unauthorized('Only the host can reset the buzzer')
            room.buzzer_locked = False
            room.first_buzz = None
            room.buzz_ledger = []
            logger.info(f"[buzzer-reset] room={room.code} by={requesting_player.name}")

            self.broadcaster.broadcast_state(room)
            return room


def _is_host_of(room: Room, player: Optional[Player]) -> bool:
    if player is None or not player.is_host:
        return False
    return room.find_player(player_id=player.id) is player
