# backend/livedash/engine/models.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Kpi:
    label: str
    prefix: str
    suffix: str
    baseline: float
    value: float
    delta: float
    caption: str

    def with_value(self, value: float) -> "Kpi":
        return replace(self, value=value)


@dataclass(frozen=True)
class TimelinePoint:
    period: str
    engagement: float
    velocity: float
    sentiment: float


@dataclass(frozen=True)
class PipelineStage:
    stage: str
    value: float


@dataclass(frozen=True)
class ChannelShare:
    name: str
    value: float


@dataclass(frozen=True)
class Snapshot:
    """
    Everything a consumer may read after a tick.

    ``tick`` counts applied advances since session start (0 = seeded state).
    Tuples keep the snapshot immutable end to end.
    """

    tick: int
    generated_at: datetime
    kpis: Tuple[Kpi, ...]
    timeline: Tuple[TimelinePoint, ...]
    pipeline: Tuple[PipelineStage, ...]
    channel_mix: Tuple[ChannelShare, ...]

    def kpi(self, label: str) -> Kpi:
        for k in self.kpis:
            if k.label == label:
                return k
        raise KeyError(label)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "generatedAt": self.generated_at.isoformat(),
            "kpis": [
                {
                    "label": k.label,
                    "prefix": k.prefix,
                    "suffix": k.suffix,
                    "baseline": k.baseline,
                    "value": k.value,
                    "delta": k.delta,
                    "caption": k.caption,
                }
                for k in self.kpis
            ],
            "timeline": [
                {
                    "period": p.period,
                    "engagement": p.engagement,
                    "velocity": p.velocity,
                    "sentiment": p.sentiment,
                }
                for p in self.timeline
            ],
            "pipeline": [{"stage": s.stage, "value": s.value} for s in self.pipeline],
            "channelMix": [{"name": c.name, "value": c.value} for c in self.channel_mix],
        }
