import atexit

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if origins == ['*']:
        origins = '*'
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # One engine per app; handlers read it from app.extensions
    from buzzer.services.session import build_session
    session = build_session(socketio, flask_app.config)
    flask_app.extensions['buzzer_session'] = session

    from buzzer.main import main
    flask_app.register_blueprint(main)

    from buzzer.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from buzzer.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    if not flask_app.config.get('TESTING'):
        session.reaper.start()
        atexit.register(session.reaper.stop)

    flask_app.logger.info(
        f"[init] buzzer app ready ttl={session.reaper.ttl_sec}s interval={session.reaper.interval_sec}s"
    )
    return flask_app
