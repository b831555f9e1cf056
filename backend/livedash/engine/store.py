# backend/livedash/engine/store.py
"""
Metrics state store.

Sole owner of the simulated series. ``advance`` builds the next snapshot off
to the side, checks it, then publishes it with one reference swap, so a reader
never sees a half-applied tick.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Tuple

from .config import SimulationConfig
from .errors import InvariantViolation
from .models import ChannelShare, Kpi, PipelineStage, Snapshot, TimelinePoint
from .normalizer import normalize, share_sum_ok
from .random_walk import RandomSource, make_rng

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MetricsStateStore:
    def __init__(self, config: Optional[SimulationConfig] = None, rng: Optional[RandomSource] = None):
        self.config = config or SimulationConfig()
        self.rng = rng or make_rng()
        self._lock = threading.Lock()
        self._snapshot = self._seed()

    # ---------- read side ----------
    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def get_snapshot(self) -> Snapshot:
        return self._snapshot

    # ---------- write side ----------
    def advance(self) -> Snapshot:
        with self._lock:
            prev = self._snapshot
            nxt = Snapshot(
                tick=prev.tick + 1,
                generated_at=_utcnow(),
                kpis=self._advance_kpis(prev.kpis),
                timeline=self._advance_timeline(prev.timeline),
                pipeline=self._advance_pipeline(prev.pipeline),
                channel_mix=self._advance_channels(prev.channel_mix),
            )
            self.check_invariants(nxt)
            self._snapshot = nxt
        logger.debug("tick %d applied", nxt.tick)
        return nxt

    def reset(self) -> Snapshot:
        with self._lock:
            self._snapshot = self._seed()
        logger.info("metrics store reset to seeded state")
        return self._snapshot

    # ---------- seeding ----------
    def _uniform(self, low: float, high: float) -> float:
        return low + self.rng.random() * (high - low)

    def _seed(self) -> Snapshot:
        cfg = self.config
        tl = cfg.timeline
        kpis = tuple(
            Kpi(
                label=s.label,
                prefix=s.prefix,
                suffix=s.suffix,
                baseline=s.baseline,
                value=s.baseline,
                delta=s.delta,
                caption=s.caption,
            )
            for s in cfg.kpis
        )
        timeline = tuple(
            TimelinePoint(
                period=period,
                engagement=self._uniform(tl.engagement_seed.low, tl.engagement_seed.high),
                velocity=self._uniform(tl.velocity_seed.low, tl.velocity_seed.high),
                sentiment=self._uniform(tl.sentiment_seed.low, tl.sentiment_seed.high),
            )
            for period in tl.periods
        )
        pipeline = tuple(
            PipelineStage(
                stage=stage,
                value=float(round(self._uniform(cfg.pipeline.seed.low, cfg.pipeline.seed.high))),
            )
            for stage in cfg.pipeline.stages
        )
        channel_mix = tuple(
            ChannelShare(name=name, value=value)
            for name, value in normalize(
                cfg.channels.seeds,
                floor=cfg.channels.floor,
                precision=cfg.channels.precision,
            )
        )
        return Snapshot(
            tick=0,
            generated_at=_utcnow(),
            kpis=kpis,
            timeline=timeline,
            pipeline=pipeline,
            channel_mix=channel_mix,
        )

    # ---------- per-series advance ----------
    def _advance_kpis(self, kpis: Tuple[Kpi, ...]) -> Tuple[Kpi, ...]:
        walks = {s.label: s.walk() for s in self.config.kpis}
        return tuple(k.with_value(walks[k.label].advance(k.value, self.rng)) for k in kpis)

    def _advance_timeline(self, timeline: Tuple[TimelinePoint, ...]) -> Tuple[TimelinePoint, ...]:
        tl = self.config.timeline
        return tuple(
            TimelinePoint(
                period=p.period,
                engagement=tl.engagement.advance(p.engagement, self.rng),
                velocity=tl.velocity.advance(p.velocity, self.rng),
                sentiment=tl.sentiment.advance(p.sentiment, self.rng),
            )
            for p in timeline
        )

    def _advance_pipeline(self, pipeline: Tuple[PipelineStage, ...]) -> Tuple[PipelineStage, ...]:
        walk = self.config.pipeline.walk
        return tuple(PipelineStage(stage=s.stage, value=walk.advance(s.value, self.rng)) for s in pipeline)

    def _advance_channels(self, channels: Tuple[ChannelShare, ...]) -> Tuple[ChannelShare, ...]:
        cfg = self.config.channels
        raw = [(c.name, c.value + (self.rng.random() - 0.5) * cfg.spread) for c in channels]
        return tuple(
            ChannelShare(name=name, value=value)
            for name, value in normalize(raw, floor=cfg.floor, precision=cfg.precision)
        )

    # ---------- invariants ----------
    def check_invariants(self, snap: Snapshot) -> None:
        for kpi, seed in zip(snap.kpis, self.config.kpis):
            if not seed.walk().contains(kpi.value):
                raise InvariantViolation(
                    f"{kpi.label}={kpi.value} outside [{seed.min_value}, {seed.max_value}]"
                )
        tl = self.config.timeline
        for p in snap.timeline:
            for name, walk in (("engagement", tl.engagement), ("velocity", tl.velocity), ("sentiment", tl.sentiment)):
                value = getattr(p, name)
                if not walk.contains(value):
                    raise InvariantViolation(f"{p.period}.{name}={value} outside [{walk.minimum}, {walk.maximum}]")
        pw = self.config.pipeline.walk
        for s in snap.pipeline:
            if not pw.contains(s.value):
                raise InvariantViolation(f"{s.stage}={s.value} outside [{pw.minimum}, {pw.maximum}]")
        if not share_sum_ok(c.value for c in snap.channel_mix):
            total = sum(c.value for c in snap.channel_mix)
            raise InvariantViolation(f"channel mix sums to {total}, expected 100")
