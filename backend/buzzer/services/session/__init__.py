"""Room session engine: registries, team balancing and buzzer arbitration.

All state is in memory for the life of the process. Socket handlers and
HTTP routes call into Session; transport details stay out of this package
apart from the broadcaster.
"""

from .arbiter import BuzzerArbiter
from .broadcaster import SessionBroadcaster
from .directory import PlayerDirectory
from .engine import Session, build_session
from .reaper import RoomReaper
from .registry import RoomRegistry
from .teams import assign_team

__all__ = [
    'BuzzerArbiter',
    'PlayerDirectory',
    'RoomReaper',
    'RoomRegistry',
    'Session',
    'SessionBroadcaster',
    'assign_team',
    'build_session',
]
