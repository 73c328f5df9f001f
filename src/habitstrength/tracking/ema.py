"""Exponential moving average step for habit strength.

Strength follows the classic period-based EMA:
    alpha = 2 / (N + 1)
    S_n = S_{n-1} × (1 - alpha) + C_n × alpha

where C_n is the day's completion value (0-100). With N = 32 the score
has an influence window of about one month: a single missed day costs a
few points, while a month of misses drains most of the strength.

Frozen days are not steps at all. The replay loop skips them, so this
module has no notion of a freeze.
"""

from __future__ import annotations

# Smoothing window in days (~1 month)
DEFAULT_PERIOD = 32


def ema_alpha(period: float) -> float:
    """
    Smoothing factor for an EMA period.

    Args:
        period: Effective smoothing window in days, must be positive

    Returns:
        alpha = 2 / (period + 1)

    Example:
        >>> ema_alpha(7)
        0.25
        >>> ema_alpha(1)  # no smoothing: strength jumps to the completion value
        1.0
    """
    if period <= 0:
        raise ValueError(f"EMA period must be positive, got {period}")
    return 2 / (period + 1)


def update_strength(
    previous_strength: float,
    completion_value: float,
    period: float = DEFAULT_PERIOD,
) -> float:
    """
    Apply one day of smoothing.

    Args:
        previous_strength: Unfloored strength before the day
        completion_value: Normalized completion for the day (0-100)
        period: EMA period, default 32

    Returns:
        Unfloored strength after the day

    Example:
        >>> update_strength(0.0, 100.0, period=7)
        25.0
        >>> update_strength(25.0, 0.0, period=7)
        18.75
    """
    alpha = ema_alpha(period)
    return previous_strength * (1 - alpha) + completion_value * alpha
