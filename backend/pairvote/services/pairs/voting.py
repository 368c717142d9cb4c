"""Pair session state machine.

Every operation runs under the registry lock and returns an Outcome: the ack
for the caller plus the broadcasts the transport should deliver to the pair's
room. Rejections are raised as PairError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pairvote.models import PairSession
from .errors import (
    INVALID_PAIR_ID,
    INVALID_PAIR_OR_MEMBER,
    NOT_IN_PAIR,
    PAIR_FULL,
    PAIR_NOT_FOUND,
    PairError,
)
from .registry import PairRegistry
from .results import coerce_value, compute_result


@dataclass
class Broadcast:
    pair_id: str
    event: str
    payload: Dict[str, Any]


@dataclass
class Outcome:
    reply: Dict[str, Any]
    broadcasts: List[Broadcast] = field(default_factory=list)
    # Room the caller should join, and rooms it should leave
    enter_room: Optional[str] = None
    exit_rooms: List[str] = field(default_factory=list)


class PairService:

    def __init__(self, registry: PairRegistry, value_min=0, value_max=100, logger=None):
        self.registry = registry
        self.value_min = value_min
        self.value_max = value_max
        self.logger = logger or logging.getLogger(__name__)

    # ---- helpers ----

    def _member_pair(self, pair_id, sid: str) -> PairSession:
        pair = self.registry.get(pair_id)
        if pair is None or not pair.has_member(sid):
            raise PairError(INVALID_PAIR_OR_MEMBER)
        self.registry.touch(pair)
        return pair

    @staticmethod
    def _ready(pair: PairSession) -> Broadcast:
        return Broadcast(pair.pair_id, 'pair:ready', {'pairId': pair.pair_id, 'count': pair.count})

    def _depart(self, pair: PairSession, sid: str, outcome: Outcome) -> None:
        """Take ``sid`` out of ``pair``; shared by leave, disconnect and switching pairs."""
        self.registry.remove_member(pair, sid)
        outcome.exit_rooms.append(pair.pair_id)
        if pair.pair_id not in self.registry:
            self.logger.info(f"[pair-closed] pair={pair.pair_id} last member {sid} left")
            return
        # The pairing is no longer complete, so the round starts over
        pair.clear_confirmations()
        self.registry.touch(pair)
        outcome.broadcasts.append(
            Broadcast(pair.pair_id, 'pair:member_left', {'pairId': pair.pair_id, 'count': pair.count})
        )
        outcome.broadcasts.append(self._ready(pair))

    def _leave_previous(self, previous: Optional[PairSession], sid: str, outcome: Outcome) -> None:
        if previous is not None:
            self.logger.info(f"[pair-switch] sid={sid} leaving pair={previous.pair_id}")
            self._depart(previous, sid, outcome)

    # ---- operations ----

    def create(self, sid: str) -> Outcome:
        with self.registry.lock:
            previous = self.registry.pair_for(sid)
            pair = self.registry.create(sid)
            outcome = Outcome(reply={'ok': True, 'pairId': pair.pair_id, 'role': pair.role_of(sid), 'count': pair.count})
            self._leave_previous(previous, sid, outcome)
            outcome.enter_room = pair.pair_id
        self.logger.info(f"[pair-create] pair={pair.pair_id} sid={sid}")
        return outcome

    def join(self, pair_id, sid: str) -> Outcome:
        if not isinstance(pair_id, str) or not pair_id:
            raise PairError(INVALID_PAIR_ID)
        with self.registry.lock:
            pair = self.registry.get(pair_id)
            if pair is None:
                raise PairError(PAIR_NOT_FOUND)
            if pair.has_member(sid):
                self.registry.touch(pair)
                return Outcome(reply={'ok': True, 'role': pair.role_of(sid), 'count': pair.count})
            if pair.is_full:
                raise PairError(PAIR_FULL)

            outcome = Outcome(reply={})
            self._leave_previous(self.registry.pair_for(sid), sid, outcome)
            self.registry.add_member(pair, sid)
            self.registry.touch(pair)
            outcome.enter_room = pair.pair_id
            outcome.broadcasts.append(self._ready(pair))
            outcome.reply = {'ok': True, 'role': pair.role_of(sid), 'count': pair.count}
        self.logger.info(f"[pair-join] pair={pair_id} sid={sid} count={outcome.reply['count']}")
        return outcome

    def status(self, pair_id) -> Outcome:
        with self.registry.lock:
            pair = self.registry.get(pair_id)
            if pair is None:
                raise PairError(PAIR_NOT_FOUND)
            self.registry.touch(pair)
            return Outcome(reply={'ok': True, 'count': pair.count})

    def leave(self, pair_id, sid: str) -> Outcome:
        with self.registry.lock:
            pair = self.registry.get(pair_id)
            if pair is None:
                raise PairError(PAIR_NOT_FOUND)
            if not pair.has_member(sid):
                raise PairError(NOT_IN_PAIR)
            outcome = Outcome(reply={'ok': True})
            self._depart(pair, sid, outcome)
        self.logger.info(f"[pair-leave] pair={pair_id} sid={sid}")
        return outcome

    def disconnect(self, sid: str) -> Outcome:
        """Cleanup for a dropped connection; a sid with no pair is a no-op."""
        outcome = Outcome(reply={'ok': True})
        with self.registry.lock:
            pair = self.registry.pair_for(sid)
            if pair is not None:
                self._depart(pair, sid, outcome)
        return outcome

    def update_value(self, pair_id, sid: str, raw_value: Any) -> Outcome:
        with self.registry.lock:
            pair = self._member_pair(pair_id, sid)
            pair.values[sid] = coerce_value(raw_value, self.value_min, self.value_max)
            # A changed vote voids the caller's confirmation and any agreed result
            pair.confirmed.discard(sid)
            pair.last_result = None
        return Outcome(reply={'ok': True})

    def confirm(self, pair_id, sid: str) -> Outcome:
        outcome = Outcome(reply={'ok': True})
        with self.registry.lock:
            pair = self._member_pair(pair_id, sid)
            pair.confirmed.add(sid)
            if not pair.all_confirmed():
                return outcome
            result = compute_result(pair)
            if result is None:
                # Someone confirmed without a value; both must confirm again
                pair.clear_confirmations()
                self.logger.info(f"[vote-incomplete] pair={pair_id} confirmations cleared")
                return outcome
            pair.last_result = result
            outcome.broadcasts.append(
                Broadcast(pair.pair_id, 'vote:result', {'pairId': pair.pair_id, **result.to_dict()})
            )
        self.logger.info(f"[vote-result] pair={pair_id} a={result.a} b={result.b} avg={result.avg}")
        return outcome

    def reset(self, pair_id, sid: str) -> Outcome:
        with self.registry.lock:
            pair = self._member_pair(pair_id, sid)
            pair.values.clear()
            pair.clear_confirmations()
            outcome = Outcome(
                reply={'ok': True},
                broadcasts=[Broadcast(pair.pair_id, 'vote:reset', {'pairId': pair.pair_id})],
            )
        self.logger.info(f"[vote-reset] pair={pair_id} by sid={sid}")
        return outcome
