# backend/livedash/engine/random_walk.py
"""
Bounded random walk.

Every mutable series in the store moves through ``step``: draw ``u`` in
[0, 1), shift it by ``center`` and scale by ``spread``, add it to the current
value, round if the series has a precision, and clamp into [minimum, maximum].

``center`` is the skew knob. 0.5 gives a symmetric walk; 0.45 puts the
perturbation in [-0.45*spread, 0.55*spread).
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .errors import ConfigurationError


class RandomSource(Protocol):
    def random(self) -> float: ...


class SequenceRandom:
    """Replays fixed draws in [0, 1), cycling when exhausted."""

    def __init__(self, draws: Sequence[float]):
        if not draws:
            raise ConfigurationError("SequenceRandom needs at least one draw")
        self._draws = list(draws)
        self._i = 0

    def random(self) -> float:
        u = self._draws[self._i % len(self._draws)]
        self._i += 1
        return u


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


def finite(x: float) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x)


@dataclass(frozen=True)
class WalkSpec:
    spread: float
    minimum: float
    maximum: float
    center: float = 0.5
    precision: Optional[int] = None

    def __post_init__(self) -> None:
        if not (finite(self.minimum) and finite(self.maximum)):
            raise ConfigurationError(f"bounds must be finite, got [{self.minimum}, {self.maximum}]")
        if self.minimum > self.maximum:
            raise ConfigurationError(f"min > max: [{self.minimum}, {self.maximum}]")
        if not finite(self.spread) or self.spread <= 0:
            raise ConfigurationError(f"spread must be positive, got {self.spread}")
        if not finite(self.center) or not 0.0 <= self.center <= 1.0:
            raise ConfigurationError(f"center must be within [0, 1], got {self.center}")
        if self.precision is not None and self.precision < 0:
            raise ConfigurationError(f"precision must be >= 0, got {self.precision}")

    def contains(self, value: float) -> bool:
        return finite(value) and self.minimum <= value <= self.maximum

    def advance(self, current: float, rng: RandomSource) -> float:
        return step(
            current,
            self.spread,
            self.minimum,
            self.maximum,
            center=self.center,
            precision=self.precision,
            rng=rng,
        )


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def step(
    current: float,
    spread: float,
    minimum: float,
    maximum: float,
    *,
    center: float = 0.5,
    precision: Optional[int] = None,
    rng: RandomSource,
) -> float:
    """
    Advance ``current`` by one bounded random-walk step.

    Never raises for finite bounds and never returns NaN/inf: a non-finite
    ``current`` restarts from the lower bound, a non-finite draw counts as
    no movement. Rounding is applied before clamping so the result is always
    inside [minimum, maximum].
    """
    if not finite(current):
        current = minimum
    u = rng.random()
    drift = (u - center) * spread if finite(u) else 0.0
    if not finite(drift):
        drift = 0.0
    nxt = current + drift
    if precision is not None:
        nxt = round(nxt, precision)
    return clamp(nxt, minimum, maximum)
