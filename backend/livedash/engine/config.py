# backend/livedash/engine/config.py
"""
Simulation tuning.

Defaults reproduce the reference dashboard: four KPIs, a 12-month timeline,
five pipeline stages and a four-channel acquisition mix, ticking every 5s.
Every config object validates on construction; a bad bound fails here rather than being
clamped later.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import ConfigurationError
from .normalizer import CHANNEL_FLOOR, CHANNEL_PRECISION
from .random_walk import WalkSpec, finite

KPI_PRECISION = 2
KPI_SKEW_CENTER = 0.45
DEFAULT_TICK_INTERVAL_MS = 5000

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
PIPELINE_STAGES = ("Discover", "Evaluate", "Decide", "Adopt", "Expand")


@dataclass(frozen=True)
class KpiSeed:
    label: str
    prefix: str
    suffix: str
    baseline: float
    delta: float
    caption: str
    spread: float = 0.35
    # Fixed floor; when None the floor is floor_ratio * baseline.
    floor: Optional[float] = None
    floor_ratio: float = 0.75
    ceiling_ratio: float = 2.0
    center: float = KPI_SKEW_CENTER

    def __post_init__(self) -> None:
        if self.baseline <= 0:
            raise ConfigurationError(f"{self.label}: baseline must be positive")
        if self.floor is None and not 0 < self.floor_ratio <= 1:
            raise ConfigurationError(f"{self.label}: floor_ratio must be in (0, 1]")
        if self.ceiling_ratio < 1:
            raise ConfigurationError(f"{self.label}: ceiling_ratio must be >= 1")
        if self.floor is not None and self.floor > self.baseline:
            raise ConfigurationError(f"{self.label}: floor {self.floor} above baseline {self.baseline}")
        # Building the WalkSpec runs the bound/spread checks.
        self.walk()

    @property
    def min_value(self) -> float:
        # Bounds sit on the KPI rounding grid so clamping never leaves it.
        raw = self.floor if self.floor is not None else self.baseline * self.floor_ratio
        return round(raw, KPI_PRECISION)

    @property
    def max_value(self) -> float:
        return round(self.baseline * self.ceiling_ratio, KPI_PRECISION)

    def walk(self) -> WalkSpec:
        return WalkSpec(
            spread=self.spread,
            minimum=self.min_value,
            maximum=self.max_value,
            center=self.center,
            precision=KPI_PRECISION,
        )


DEFAULT_KPIS: Tuple[KpiSeed, ...] = (
    KpiSeed("Net Revenue", "$", "M", 4.2, 8.6, "vs. previous quarter"),
    KpiSeed("Active Users", "", "k", 128, 5.3, "daily active growth"),
    KpiSeed("Net Promoter", "", "", 71, 2.1, "customer satisfaction"),
    # Rate KPI: tighter spread and its own fixed floor.
    KpiSeed("Churn Rate", "", "%", 1.9, -0.8, "month-over-month", spread=0.15, floor=1.2),
)


@dataclass(frozen=True)
class SeedRange:
    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ConfigurationError(f"seed range low > high: [{self.low}, {self.high}]")


def _check_seed(name: str, seed: SeedRange, walk: WalkSpec) -> None:
    if seed.low < walk.minimum or seed.high > walk.maximum:
        raise ConfigurationError(
            f"{name}: seed range [{seed.low}, {seed.high}] outside bounds [{walk.minimum}, {walk.maximum}]"
        )


@dataclass(frozen=True)
class TimelineConfig:
    periods: Tuple[str, ...] = MONTHS
    engagement: WalkSpec = WalkSpec(spread=6, minimum=35, maximum=98)
    velocity: WalkSpec = WalkSpec(spread=5, minimum=25, maximum=92)
    sentiment: WalkSpec = WalkSpec(spread=4, minimum=18, maximum=88, center=0.45)
    engagement_seed: SeedRange = SeedRange(60, 90)
    velocity_seed: SeedRange = SeedRange(45, 70)
    sentiment_seed: SeedRange = SeedRange(40, 60)

    def __post_init__(self) -> None:
        if not self.periods:
            raise ConfigurationError("timeline needs at least one period")
        if len(set(self.periods)) != len(self.periods):
            raise ConfigurationError("timeline periods must be unique")
        _check_seed("engagement", self.engagement_seed, self.engagement)
        _check_seed("velocity", self.velocity_seed, self.velocity)
        _check_seed("sentiment", self.sentiment_seed, self.sentiment)


@dataclass(frozen=True)
class PipelineConfig:
    stages: Tuple[str, ...] = PIPELINE_STAGES
    walk: WalkSpec = WalkSpec(spread=4, minimum=22, maximum=90)
    seed: SeedRange = SeedRange(40, 70)

    def __post_init__(self) -> None:
        if not self.stages:
            raise ConfigurationError("pipeline needs at least one stage")
        _check_seed("pipeline", self.seed, self.walk)


@dataclass(frozen=True)
class ChannelConfig:
    seeds: Tuple[Tuple[str, float], ...] = (
        ("Product Led", 38.0),
        ("Enterprise", 27.0),
        ("Partner", 19.0),
        ("Community", 16.0),
    )
    spread: float = 2.2
    floor: float = CHANNEL_FLOOR
    precision: int = CHANNEL_PRECISION

    def __post_init__(self) -> None:
        if not self.seeds:
            raise ConfigurationError("channel mix needs at least one channel")
        if not finite(self.spread) or self.spread <= 0:
            raise ConfigurationError(f"channel spread must be positive, got {self.spread}")
        if not finite(self.floor) or self.floor <= 0:
            raise ConfigurationError(f"channel floor must be positive, got {self.floor}")
        names = [name for name, _ in self.seeds]
        if len(set(names)) != len(names):
            raise ConfigurationError("channel names must be unique")


@dataclass(frozen=True)
class SimulationConfig:
    kpis: Tuple[KpiSeed, ...] = DEFAULT_KPIS
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    channels: ChannelConfig = field(default_factory=ChannelConfig)

    def __post_init__(self) -> None:
        labels = [k.label for k in self.kpis]
        if len(set(labels)) != len(labels):
            raise ConfigurationError("KPI labels must be unique")
