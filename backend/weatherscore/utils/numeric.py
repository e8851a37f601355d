# weatherscore/utils/numeric.py
from __future__ import annotations

import math
from typing import Optional


def coerce_float(value) -> Optional[float]:
    """
    Best-effort float conversion that returns None for missing, unparsable or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


__all__ = ["coerce_float"]
