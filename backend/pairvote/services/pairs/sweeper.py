from pairvote.models import PairSession
from .registry import PairRegistry


def expire_idle_pairs(app, registry: PairRegistry, socketio, namespace='/'):
    """Drop pairs idle for longer than PAIR_IDLE_TTL_SEC and tell their members."""
    ttl = int(app.config.get('PAIR_IDLE_TTL_SEC', 0))
    if ttl <= 0:
        return []
    expired = registry.sweep_idle(ttl)
    for pair in expired:
        _notify_expired(app, pair, socketio, namespace)
    return expired


def _notify_expired(app, pair: PairSession, socketio, namespace):
    socketio.emit('pair:expired', {'pairId': pair.pair_id}, to=pair.pair_id, namespace=namespace)
    socketio.close_room(pair.pair_id, namespace=namespace)
    app.logger.info(f"[pair-expired] pair={pair.pair_id} members={len(pair.members)}")


def start_idle_sweeper(app, registry: PairRegistry, socketio, namespace='/') -> bool:
    """Run expire_idle_pairs on a background task.

    - No-ops in TESTING mode or when PAIR_IDLE_TTL_SEC is 0
    - Sweeps every PAIR_SWEEP_INTERVAL_SEC seconds
    """
    if app.config.get('TESTING') or int(app.config.get('PAIR_IDLE_TTL_SEC', 0)) <= 0:
        return False
    interval = max(1, int(app.config.get('PAIR_SWEEP_INTERVAL_SEC', 60)))

    def _worker():
        while True:
            socketio.sleep(interval)
            try:
                expire_idle_pairs(app, registry, socketio, namespace)
            except Exception:
                app.logger.exception('[sweep-error] idle pair sweep failed')

    socketio.start_background_task(_worker)
    app.logger.info(f"[sweep-start] ttl={app.config['PAIR_IDLE_TTL_SEC']}s interval={interval}s")
    return True
