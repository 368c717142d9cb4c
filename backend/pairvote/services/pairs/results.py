import math
from typing import Any, Optional

from pairvote.models import PairSession, VoteResult, utc_timestamp


def coerce_value(raw: Any, low: float = 0, high: float = 100) -> float:
    """Coerce a submitted slider value into [low, high].

    Input that is not a number is treated as 0 rather than rejected; numeric
    strings are parsed. Integral values come back as ``int``.
    """
    if isinstance(raw, bool):
        value = float(raw)
    elif isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            # Integers too large for a float still clamp by sign
            value = math.inf if raw > 0 else -math.inf
    elif isinstance(raw, str):
        try:
            value = float(raw.strip() or 0)
        except ValueError:
            value = 0.0
    else:
        value = 0.0
    if math.isnan(value):
        value = 0.0
    value = max(low, min(high, value))
    return int(value) if float(value).is_integer() else value


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_result(pair: PairSession) -> Optional[VoteResult]:
    """Combine both members' values, or None when the round is incomplete."""
    if len(pair.members) != 2:
        return None
    first, second = pair.members
    a = pair.values.get(first)
    b = pair.values.get(second)
    if a is None or b is None:
        return None
    return VoteResult(a=a, b=b, avg=round_half_up((a + b) / 2), at=utc_timestamp())
