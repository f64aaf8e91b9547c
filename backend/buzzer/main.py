from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the buzzer server!'})


@main.route('/health')
def health():
    session = current_app.extensions['buzzer_session']
    return jsonify({
        'status': 'ok',
        'rooms': len(session.registry),
        'reaper_running': session.reaper.running,
    })
