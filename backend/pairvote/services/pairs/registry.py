"""PairRegistry: owns every live PairSession.

Sessions are keyed by pair id. A secondary index maps each connection sid to
the one pair it belongs to, so disconnect cleanup does not scan the registry.
Callers hold ``registry.lock`` around any lookup-and-mutate sequence.
"""

import threading
import time
from typing import Callable, Dict, List, Optional

from pairvote.models import PairSession, generate_pair_id
from .errors import PAIR_ID_EXHAUSTED, PairError


class PairRegistry:

    def __init__(
        self,
        id_bytes: int = 3,
        max_attempts: int = 8,
        id_factory: Optional[Callable[[int], str]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.id_bytes = id_bytes
        self.max_attempts = max_attempts
        self.id_factory = id_factory or generate_pair_id
        self.clock = clock
        # pair_id -> PairSession
        self.pairs: Dict[str, PairSession] = {}
        # sid -> pair_id
        self.sid_pairs: Dict[str, str] = {}
        self.lock = threading.RLock()

    def __len__(self):
        return len(self.pairs)

    def __contains__(self, pair_id):
        return pair_id in self.pairs

    def _new_pair_id(self) -> str:
        for _ in range(self.max_attempts):
            pair_id = self.id_factory(self.id_bytes)
            if pair_id not in self.pairs:
                return pair_id
        raise PairError(PAIR_ID_EXHAUSTED)

    def create(self, founder: str) -> PairSession:
        """Create a pair whose sole member is ``founder``."""
        with self.lock:
            now = self.clock()
            pair = PairSession(
                pair_id=self._new_pair_id(),
                founder=founder,
                members=[founder],
                created_at=now,
                touched_at=now,
            )
            self.pairs[pair.pair_id] = pair
            self.sid_pairs[founder] = pair.pair_id
            return pair

    def get(self, pair_id) -> Optional[PairSession]:
        if not isinstance(pair_id, str):
            return None
        return self.pairs.get(pair_id)

    def pair_for(self, sid: str) -> Optional[PairSession]:
        pair_id = self.sid_pairs.get(sid)
        return self.pairs.get(pair_id) if pair_id else None

    def add_member(self, pair: PairSession, sid: str) -> None:
        with self.lock:
            pair.add_member(sid)
            self.sid_pairs[sid] = pair.pair_id

    def remove_member(self, pair: PairSession, sid: str) -> bool:
        """Drop ``sid`` from ``pair``; an emptied pair is removed outright."""
        with self.lock:
            if not pair.remove_member(sid):
                return False
            if self.sid_pairs.get(sid) == pair.pair_id:
                del self.sid_pairs[sid]
            if pair.is_empty:
                self.remove(pair.pair_id)
            return True

    def remove(self, pair_id: str) -> Optional[PairSession]:
        with self.lock:
            pair = self.pairs.pop(pair_id, None)
            if pair is None:
                return None
            for sid in pair.members:
                if self.sid_pairs.get(sid) == pair_id:
                    del self.sid_pairs[sid]
            return pair

    def touch(self, pair: PairSession) -> None:
        pair.touch(self.clock())

    def sweep_idle(self, max_age: float, now: Optional[float] = None) -> List[PairSession]:
        """Remove pairs with no activity for ``max_age`` seconds and return them."""
        now = self.clock() if now is None else now
        with self.lock:
            stale = [p for p in self.pairs.values() if now - p.touched_at >= max_age]
            for pair in stale:
                self.remove(pair.pair_id)
            return stale
