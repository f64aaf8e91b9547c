from flask import Blueprint, current_app, jsonify, request

from buzzer.models import parse_team_count
from buzzer.results import Err, run_command

rooms = Blueprint('rooms', __name__)


def _session():
    return current_app.extensions['buzzer_session']


@rooms.route('', methods=['POST'])
def create_room():
    """Create a room over HTTP; same rules as the create-room socket command."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    result = run_command(_session().create_room, parse_team_count(data.get('teamCount')), data.get('hostName'))
    if isinstance(result, Err):
        current_app.logger.warning(f"[create-room-failed] kind={result.kind} error={result.message}")
        return jsonify(result.to_ack()), 400
    return jsonify({'success': True, 'roomCode': result.value.code}), 201


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    result = run_command(_session().get_room, room_code)
    if isinstance(result, Err):
        return jsonify(result.to_ack()), 404
    return jsonify(result.to_ack('room')), 200
