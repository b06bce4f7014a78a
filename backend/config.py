import os


def _float_list(raw):
    return tuple(float(v) for v in raw.split(',') if v.strip())


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '8080'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    # Static frontend (index.html and assets); defaults to backend/public
    STATIC_FOLDER = os.environ.get('STATIC_FOLDER') or os.path.join(os.path.dirname(os.path.abspath(__file__)), 'public')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Round timer options offered to clients (seconds); the server rejects anything else
    ALLOWED_TIMERS = _float_list(os.environ.get('ALLOWED_TIMERS', '0.1,1,10,60'))
    DEFAULT_ROUND_TIMER_SEC = float(os.environ.get('DEFAULT_ROUND_TIMER_SEC', '10'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Countdown cadence and how often a tick is pushed to clients (ms)
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '100'))
    TICK_EMIT_INTERVAL_MS = int(os.environ.get('TICK_EMIT_INTERVAL_MS', '100'))
    BET_MIN = float(os.environ.get('BET_MIN', '1'))
    BET_MAX = float(os.environ.get('BET_MAX', '10'))
    BET_DEFAULT = float(os.environ.get('BET_DEFAULT', '5'))
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', '40'))
    # Per-room round summaries kept in memory for the state endpoint
    ROUND_HISTORY_LIMIT = int(os.environ.get('ROUND_HISTORY_LIMIT', '50'))
    # Optional: heartbeat interval for countdown driver logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
