from flask import current_app, request
from flask_socketio import emit
from typing import Any, Dict

from buzzer import socketio
from buzzer.errors import RoomNotFound, StaleOrDuplicatePress
from buzzer.models import parse_team_count
from buzzer.results import Err, run_command
from buzzer.services.session import Session


def _session() -> Session:
    return current_app.extensions['buzzer_session']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    # Clients may send anything; a non-object payload counts as empty
    return data if isinstance(data, dict) else {}


def _room_code(data) -> str:
    return str(_payload(data).get('roomCode') or '').strip().upper()


def _reject(err: Err, command: str) -> None:
    current_app.logger.warning(f"[rejected] command={command} kind={err.kind} sid={_get_sid()}")
    emit('error', err.message)


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(*args):
    player = _session().disconnect(_get_sid())
    if player is not None:
        current_app.logger.info(f"[disconnect] sid={_get_sid()} name={player.name}")


def handle_create_room(data):
    data = _payload(data)
    result = run_command(_session().create_room, parse_team_count(data.get('teamCount')), data.get('hostName'))
    if isinstance(result, Err):
        current_app.logger.warning(f"[create-room-failed] kind={result.kind} error={result.message}")
        return result.to_ack()
    return {'success': True, 'roomCode': result.value.code}


def handle_join_room(data):
    data = _payload(data)
    code = _room_code(data)
    if not code:
        _reject(Err.from_error(RoomNotFound()), 'join-room')
        return
    result = run_command(
        _session().join_room,
        code,
        data.get('playerName'),
        _get_sid(),
        bool(data.get('isHost')),
    )
    if isinstance(result, Err):
        _reject(result, 'join-room')


def handle_press_buzzer(data):
    data = _payload(data)
    result = run_command(_session().press_buzzer, _room_code(data), data.get('playerId'))
    if isinstance(result, Err):
        # Losing the race is not a fault; nothing goes back to the client
        if result.kind == StaleOrDuplicatePress.kind:
            current_app.logger.debug(f"[press-ignored] room={_room_code(data)} reason={result.message}")
        else:
            current_app.logger.warning(f"[press-dropped] room={_room_code(data)} kind={result.kind}")


def handle_reset_buzzer(data):
    result = run_command(_session().reset_buzzer, _room_code(data), _get_sid())
    if isinstance(result, Err):
        _reject(result, 'reset-buzzer')


def handle_get_room(data):
    code = _room_code(data)
    if not code:
        return Err.from_error(RoomNotFound()).to_ack()
    result = run_command(_session().get_room, code)
    if isinstance(result, Err):
        return result.to_ack()
    return result.to_ack('room')


def handle_delete_room(data):
    result = run_command(_session().delete_room, _room_code(data), _get_sid())
    if isinstance(result, Err):
        _reject(result, 'delete-room')


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the room command handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-room', handle_create_room, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('press-buzzer', handle_press_buzzer, namespace=namespace)
    socketio.on_event('reset-buzzer', handle_reset_buzzer, namespace=namespace)
    socketio.on_event('get-room', handle_get_room, namespace=namespace)
    socketio.on_event('delete-room', handle_delete_room, namespace=namespace)
