"""Axis normalization helpers

Raw samples are signed 16-bit values. Positive and negative halves are scaled
separately so both extremes land exactly on +/-1.0.
"""
from typing import Sequence

AXIS_MAX = 32767
AXIS_MIN = -32768


def normalize(raw: int) -> float:
    if raw >= 0:
        return min(raw, AXIS_MAX) / float(AXIS_MAX)
    return max(raw, AXIS_MIN) / float(-AXIS_MIN)


def throttle_remap(raw: int) -> float:
    """Map a bipolar axis onto 0..1 (full down = 0.0, full up = 1.0)."""
    m = (normalize(raw) + 1.0) / 2.0
    return max(0.0, min(1.0, m))


def axis_value(sample: Sequence[int], index: int) -> float:
    # axis count can shrink after a device swap
    if index < 0 or index >= len(sample):
        return 0.0
    return normalize(sample[index])


def throttle_value(sample: Sequence[int], index: int) -> float:
    if index < 0 or index >= len(sample):
        return throttle_remap(0)
    return throttle_remap(sample[index])


def to_raw(value: float) -> int:
    """Convert a -1..1 float reading (pygame) back to the signed 16-bit range."""
    iv = int(round(value * -AXIS_MIN))
    return max(AXIS_MIN, min(AXIS_MAX, iv))
