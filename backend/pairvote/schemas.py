"""Inbound event payloads.

Socket.IO hands handlers whatever JSON the client sent. These dataclasses
pin each event to the fields it uses before anything reaches the services.
"""

from dataclasses import dataclass
from typing import Any, Optional


def _fields(data) -> dict:
    return data if isinstance(data, dict) else {}


def _pair_id(data) -> Optional[str]:
    value = _fields(data).get('pairId')
    if isinstance(value, str) and value:
        return value
    return None


@dataclass(frozen=True)
class PairRequest:
    """pair:join, pair:status, pair:leave, vote:confirm and vote:reset."""
    pair_id: Optional[str]

    @classmethod
    def from_payload(cls, data):
        return cls(pair_id=_pair_id(data))


@dataclass(frozen=True)
class VoteUpdateRequest:
    pair_id: Optional[str]
    value: Any = None

    @classmethod
    def from_payload(cls, data):
        return cls(pair_id=_pair_id(data), value=_fields(data).get('value'))
