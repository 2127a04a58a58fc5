"""Easing and frame-rate-independent smoothing helpers.

All smoothing in the simulator goes through ``damp_factor`` so that a value
chasing a target behaves the same at 30 Hz, 60 Hz or 144 Hz.
"""

import math

# Longest tick integrated in one step; longer gaps are clamped
MAX_TICK_SECONDS = 3600.0


def sanitize_dt(dt: float) -> float:
    """Clamp a tick length into [0, MAX_TICK_SECONDS].

    Negative and non-finite lengths become 0, so a glitched clock skips a
    tick instead of poisoning the state.
    """
    if not math.isfinite(dt) or dt < 0.0:
        return 0.0
    return min(dt, MAX_TICK_SECONDS)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation between two scalars."""
    return start + (end - start) * t


def damp_factor(rate: float, dt: float) -> float:
    """Fraction of the remaining gap to close this tick.

    ``1 - exp(-rate * dt)``: applying it every tick gives the same
    trajectory regardless of how ``dt`` is partitioned.

    Args:
        rate: Response rate in 1/s (higher is snappier).
        dt: Elapsed time in seconds.

    Returns:
        Factor in [0, 1).
    """
    if rate <= 0.0 or not math.isfinite(dt) or dt <= 0.0:
        return 0.0
    return 1.0 - math.exp(-rate * dt)


def damp(current: float, target: float, rate: float, dt: float) -> float:
    """Move ``current`` toward ``target`` by exponential decay."""
    return current + (target - current) * damp_factor(rate, dt)


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1].

    Zero slope at both ends so transitions start and stop without a jolt.
    """
    t = clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - math.pow(-2.0 * t + 2.0, 3) / 2.0
