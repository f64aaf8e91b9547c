import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list; '*' accepts any origin
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # 0 disables the upper bound on teams per room
    MAX_TEAM_COUNT = int(os.environ.get('MAX_TEAM_COUNT', '0'))
    # Empty rooms older than this are reaped (seconds)
    ROOM_TTL_SEC = int(os.environ.get('ROOM_TTL_SEC', '7200'))
    # Interval between reaper sweeps (seconds)
    REAPER_INTERVAL_SEC = int(os.environ.get('REAPER_INTERVAL_SEC', '3600'))
    PORT = int(os.environ.get('PORT', '3001'))
