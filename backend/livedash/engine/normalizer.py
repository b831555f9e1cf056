# backend/livedash/engine/normalizer.py
from __future__ import annotations

from typing import Iterable, Tuple

from .errors import ConfigurationError

CHANNEL_FLOOR = 10.0
CHANNEL_TOTAL = 100.0
CHANNEL_PRECISION = 1


def normalize(
    shares: Iterable[Tuple[str, float]],
    *,
    floor: float = CHANNEL_FLOOR,
    total: float = CHANNEL_TOTAL,
    precision: int = CHANNEL_PRECISION,
) -> Tuple[Tuple[str, float], ...]:
    """
    Rescale ``(name, raw)`` pairs so the values sum to ``total``.

    Each raw value is floored at ``floor`` first (no channel collapses to zero
    or below), then scaled by ``total / sum(floored)`` and rounded to
    ``precision`` decimals. The rounding residual goes to the largest share,
    so the rounded values add up to ``total`` exactly. Order is preserved.
    """
    if floor <= 0:
        raise ConfigurationError(f"floor must be positive, got {floor}")
    if total <= 0:
        raise ConfigurationError(f"total must be positive, got {total}")

    floored = [(name, max(floor, float(raw))) for name, raw in shares]
    if not floored:
        return ()

    raw_sum = sum(v for _, v in floored)
    scale = total / raw_sum
    values = [round(v * scale, precision) for _, v in floored]

    residual = round(total - sum(values), precision)
    if residual:
        biggest = max(range(len(values)), key=lambda i: values[i])
        values[biggest] = round(values[biggest] + residual, precision)

    return tuple((name, v) for (name, _), v in zip(floored, values))


def share_sum_ok(values: Iterable[float], *, total: float = CHANNEL_TOTAL, tolerance: float = 0.1) -> bool:
    return abs(sum(values) - total) <= tolerance + 1e-9
