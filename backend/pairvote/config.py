import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma-separated list, "*" allows any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_PATH = os.environ.get('SOCKETIO_PATH', 'socket.io')
    PAIR_NAMESPACE = os.environ.get('PAIR_NAMESPACE', '/')
    # 3 random bytes -> 6 hex characters
    PAIR_ID_BYTES = int(os.environ.get('PAIR_ID_BYTES', '3'))
    PAIR_ID_MAX_ATTEMPTS = int(os.environ.get('PAIR_ID_MAX_ATTEMPTS', '8'))
    VALUE_MIN = 0
    VALUE_MAX = 100
    # Idle session sweep (seconds). 0 disables.
    PAIR_IDLE_TTL_SEC = int(os.environ.get('PAIR_IDLE_TTL_SEC', '0'))
    PAIR_SWEEP_INTERVAL_SEC = int(os.environ.get('PAIR_SWEEP_INTERVAL_SEC', '60'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


def parse_origins(raw):
    """Turn the CORS_ALLOWED_ORIGINS setting into what flask-cors/SocketIO expect."""
    if isinstance(raw, (list, tuple)):
        return list(raw)
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    if not origins or origins == ['*']:
        return '*'
    return origins
