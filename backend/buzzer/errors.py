"""Error taxonomy for room commands.

Every command either applies fully or raises one of these before touching
state, so callers can report the error without any rollback.
"""


class SessionError(Exception):
    kind = 'session_error'
    default_message = 'Session error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidConfig(SessionError):
    kind = 'invalid_config'
    default_message = 'Invalid room configuration'


class RoomNotFound(SessionError):
    kind = 'room_not_found'
    default_message = 'Room not found'


class Unauthorized(SessionError):
    kind = 'unauthorized'
    default_message = 'Only the host can do that'


class StaleOrDuplicatePress(SessionError):
    """A press that lost the race or came from an unknown player.

    Expected during normal play; handlers drop it without replying.
    """
    kind = 'stale_press'
    default_message = 'Buzzer already locked'
