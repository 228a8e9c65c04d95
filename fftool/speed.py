"""
Playback speed decomposition into atempo stages
"""

import math

from .exceptions import InvalidFactor
from .models import SpeedPlan

# atempo accepts multipliers in this range only
MIN_STAGE = 0.5
MAX_STAGE = 2.0
STAGE_PRECISION = 4


def decompose(factor: float) -> SpeedPlan:
    """Split a speed multiplier into a chain of stages within [0.5, 2.0]

    Full 2.0 (or 0.5) stages are peeled off while the remainder is strictly
    outside the range; the remainder becomes the last stage. Rounding is only
    applied to the emitted stages.
    """
    try:
        factor = float(factor)
    except (TypeError, ValueError):
        raise InvalidFactor(factor)
    if not math.isfinite(factor) or factor <= 0:
        raise InvalidFactor(factor)

    if factor == 1.0:
        return SpeedPlan(factor=factor, stages=[1.0])

    stages = []
    remaining = factor
    if factor >= 1.0:
        while remaining > MAX_STAGE:
            stages.append(MAX_STAGE)
            remaining /= MAX_STAGE
    else:
        while remaining < MIN_STAGE:
            stages.append(MIN_STAGE)
            remaining /= MIN_STAGE
    stages.append(remaining)

    return SpeedPlan(factor=factor, stages=[round(s, STAGE_PRECISION) for s in stages])


def format_factor(factor: float) -> str:
    """Factor as written into setpts expressions"""
    return f"{factor:g}"


def video_speed_filter(factor: float) -> str:
    return f"setpts=PTS/{format_factor(factor)}"
