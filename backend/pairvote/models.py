import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

MAX_MEMBERS = 2
ROLE_FOUNDER = 'A'
ROLE_JOINER = 'B'


def generate_pair_id(nbytes=3):
    """Generate a short, hard-to-guess pair id (hex, two chars per byte)."""
    return secrets.token_hex(nbytes)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class VoteResult:
    a: float
    b: float
    avg: int
    at: str

    def to_dict(self):
        return {'a': self.a, 'b': self.b, 'avg': self.avg, 'at': self.at}


@dataclass
class PairSession:
    pair_id: str
    founder: str
    # Insertion ordered; the first member's value is reported as "a"
    members: List[str] = field(default_factory=list)
    values: Dict[str, float] = field(default_factory=dict)
    confirmed: Set[str] = field(default_factory=set)
    last_result: Optional[VoteResult] = None
    created_at: float = field(default_factory=time.time)
    touched_at: float = field(default_factory=time.time)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= MAX_MEMBERS

    @property
    def is_empty(self) -> bool:
        return not self.members

    def has_member(self, sid: str) -> bool:
        return sid in self.members

    def role_of(self, sid: str) -> str:
        return ROLE_FOUNDER if sid == self.founder else ROLE_JOINER

    def add_member(self, sid: str) -> None:
        if sid not in self.members:
            self.members.append(sid)

    def remove_member(self, sid: str) -> bool:
        if sid not in self.members:
            return False
        self.members.remove(sid)
        self.confirmed.discard(sid)
        return True

    def clear_confirmations(self) -> None:
        self.confirmed.clear()
        self.last_result = None

    def all_confirmed(self) -> bool:
        return len(self.members) == MAX_MEMBERS and self.confirmed == set(self.members)

    def touch(self, now: Optional[float] = None) -> None:
        self.touched_at = time.time() if now is None else now
