from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from pairvote import socketio
from pairvote.models import utc_timestamp
from pairvote.schemas import PairRequest, VoteUpdateRequest
from pairvote.services.pairs import Outcome, PairError, PairService


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _service() -> PairService:
    return current_app.extensions['pairvote']

def _relay(outcome: Outcome) -> dict:
    """Apply room changes, deliver broadcasts, and hand back the ack payload."""
    for room in outcome.exit_rooms:
        leave_room(room)
    if outcome.enter_room:
        join_room(outcome.enter_room)
    for b in outcome.broadcasts:
        emit(b.event, b.payload, to=b.pair_id)
    return outcome.reply

def _run(action: str, failure_code: str, op) -> dict:
    try:
        return _relay(op())
    except PairError as exc:
        current_app.logger.info(f"[{action}-rejected] sid={_get_sid()} error={exc.code}")
        return exc.to_reply()
    except Exception:
        current_app.logger.exception(f"[{action}-error] sid={_get_sid()}")
        return {'ok': False, 'error': failure_code}


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    try:
        _relay(_service().disconnect(sid))
    except Exception:
        current_app.logger.exception(f"[disconnect-error] sid={sid}")


def handle_ping(data=None):
    payload = dict(data) if isinstance(data, dict) else {}
    payload['serverAt'] = utc_timestamp()
    emit('pong', payload)


def handle_pair_create(data=None):
    return _run('pair-create', 'CREATE_ERROR', lambda: _service().create(_get_sid()))


def handle_pair_join(data=None):
    req = PairRequest.from_payload(data)
    return _run('pair-join', 'JOIN_ERROR', lambda: _service().join(req.pair_id, _get_sid()))


def handle_pair_status(data=None):
    req = PairRequest.from_payload(data)
    return _run('pair-status', 'STATUS_ERROR', lambda: _service().status(req.pair_id))


def handle_pair_leave(data=None):
    req = PairRequest.from_payload(data)
    return _run('pair-leave', 'LEAVE_ERROR', lambda: _service().leave(req.pair_id, _get_sid()))


def handle_vote_update(data=None):
    req = VoteUpdateRequest.from_payload(data)
    return _run('vote-update', 'UPDATE_ERROR', lambda: _service().update_value(req.pair_id, _get_sid(), req.value))


def handle_vote_confirm(data=None):
    req = PairRequest.from_payload(data)
    return _run('vote-confirm', 'CONFIRM_ERROR', lambda: _service().confirm(req.pair_id, _get_sid()))


def handle_vote_reset(data=None):
    req = PairRequest.from_payload(data)
    return _run('vote-reset', 'RESET_ERROR', lambda: _service().reset(req.pair_id, _get_sid()))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the pairing and voting event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
    socketio.on_event('pair:create', handle_pair_create, namespace=namespace)
    socketio.on_event('pair:join', handle_pair_join, namespace=namespace)
    socketio.on_event('pair:status', handle_pair_status, namespace=namespace)
    socketio.on_event('pair:leave', handle_pair_leave, namespace=namespace)
    socketio.on_event('vote:update', handle_vote_update, namespace=namespace)
    socketio.on_event('vote:confirm', handle_vote_confirm, namespace=namespace)
    socketio.on_event('vote:reset', handle_vote_reset, namespace=namespace)
