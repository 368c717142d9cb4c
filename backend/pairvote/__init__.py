from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from pairvote.config import Config, parse_origins

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = parse_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    CORS(flask_app, origins=origins, send_wildcard=(origins == '*'), methods=['GET', 'POST', 'OPTIONS'], allow_headers=['Content-Type'])

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=origins,
        path=flask_app.config.get('SOCKETIO_PATH', 'socket.io'),
    )

    from pairvote.main import main
    flask_app.register_blueprint(main)

    # The registry is owned by this app; socket handlers reach it through
    # current_app.extensions
    from pairvote.services.pairs import PairRegistry, PairService
    registry = PairRegistry(
        id_bytes=int(flask_app.config.get('PAIR_ID_BYTES', 3)),
        max_attempts=int(flask_app.config.get('PAIR_ID_MAX_ATTEMPTS', 8)),
    )
    flask_app.extensions['pairvote'] = PairService(
        registry,
        value_min=flask_app.config.get('VALUE_MIN', 0),
        value_max=flask_app.config.get('VALUE_MAX', 100),
        logger=flask_app.logger,
    )

    namespace = flask_app.config.get('PAIR_NAMESPACE', '/')
    from pairvote.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    from pairvote.services.pairs.sweeper import start_idle_sweeper
    start_idle_sweeper(flask_app, registry, socketio, namespace=namespace)

    return flask_app
