"""Pair session services: registry, voting rounds, idle sweep.

Socket handlers call into PairService and relay the Outcome it returns
(ack reply plus room broadcasts). Nothing in here emits on its own.
"""

from .errors import PairError
from .registry import PairRegistry
from .voting import Broadcast, Outcome, PairService

__all__ = ['Broadcast', 'Outcome', 'PairError', 'PairRegistry', 'PairService']
