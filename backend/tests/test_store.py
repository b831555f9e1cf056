# backend/tests/test_store.py
import dataclasses
import random
import pytest

from livedash.engine.config import (
    MONTHS,
    PIPELINE_STAGES,
    ChannelConfig,
    KpiSeed,
    PipelineConfig,
    SeedRange,
    SimulationConfig,
    TimelineConfig,
)
from livedash.engine.errors import ConfigurationError, InvariantViolation
from livedash.engine.models import ChannelShare
from livedash.engine.random_walk import SequenceRandom, WalkSpec
from livedash.engine.store import MetricsStateStore

TICKS = 400


def _assert_in_bounds(snap, config):
    for kpi, seed in zip(snap.kpis, config.kpis):
        assert seed.min_value <= kpi.value <= seed.max_value, kpi
        assert kpi.value == round(kpi.value, 2)
    for p in snap.timeline:
        assert 35 <= p.engagement <= 98
        assert 25 <= p.velocity <= 92
        assert 18 <= p.sentiment <= 88
    for s in snap.pipeline:
        assert 22 <= s.value <= 90
    assert sum(c.value for c in snap.channel_mix) == pytest.approx(100.0, abs=0.1)


def test_seeded_state(store):
    snap = store.snapshot
    assert snap.tick == 0
    assert [k.label for k in snap.kpis] == ["Net Revenue", "Active Users", "Net Promoter", "Churn Rate"]
    assert [k.value for k in snap.kpis] == [4.2, 128, 71, 1.9]
    assert [p.period for p in snap.timeline] == list(MONTHS)
    assert [s.stage for s in snap.pipeline] == list(PIPELINE_STAGES)
    assert all(40 <= s.value <= 70 and s.value == int(s.value) for s in snap.pipeline)
    assert [(c.name, c.value) for c in snap.channel_mix] == [
        ("Product Led", 38.0), ("Enterprise", 27.0), ("Partner", 19.0), ("Community", 16.0),
    ]


def test_every_tick_respects_bounds(store):
    _assert_in_bounds(store.snapshot, store.config)
    for n in range(1, TICKS + 1):
        snap = store.advance()
        assert snap.tick == n
        _assert_in_bounds(snap, store.config)


def test_order_is_fixed_across_ticks(store):
    before = store.snapshot
    for _ in range(25):
        store.advance()
    after = store.snapshot
    assert [p.period for p in after.timeline] == [p.period for p in before.timeline]
    assert [s.stage for s in after.pipeline] == [s.stage for s in before.pipeline]
    assert [c.name for c in after.channel_mix] == [c.name for c in before.channel_mix]


def test_churn_never_below_its_floor():
    # Always draw the lowest perturbation: every KPI walks straight down.
    store = MetricsStateStore(rng=SequenceRandom([0.0]))
    for _ in range(400):
        snap = store.advance()
        assert snap.kpi("Churn Rate").value >= 1.2
    assert snap.kpi("Churn Rate").value == 1.2
    assert snap.kpi("Net Revenue").value == pytest.approx(3.15)
    assert snap.kpi("Active Users").value == pytest.approx(96.0)


def test_kpi_bounds_stay_on_rounding_grid():
    # 4.2 * 0.75 is not exactly 3.15 in floating point
    store = MetricsStateStore(rng=SequenceRandom([0.0]))
    for _ in range(50):
        snap = store.advance()
    v = snap.kpi("Net Revenue").value
    assert v == 3.15
    assert v == round(v, 2)
    high = MetricsStateStore(rng=SequenceRandom([0.999]))
    for _ in range(50):
        snap = high.advance()
    assert all(k.value == round(k.value, 2) for k in snap.kpis)


def test_kpis_cap_at_ceiling():
    store = MetricsStateStore(rng=SequenceRandom([0.999]))
    for _ in range(500):
        snap = store.advance()
    assert snap.kpi("Net Revenue").value == pytest.approx(8.4)
    assert snap.kpi("Churn Rate").value == pytest.approx(3.8)


def test_prior_snapshot_is_untouched(store):
    first = store.snapshot
    values = first.as_dict()
    second = store.advance()
    assert second is not first
    assert first.as_dict() == values
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.kpis[0].value = 0.0


def test_failed_invariant_keeps_previous_snapshot(store, monkeypatch):
    store.advance()
    published = store.snapshot

    def broken(channels):
        return tuple(ChannelShare(c.name, 40.0) for c in channels)

    monkeypatch.setattr(store, "_advance_channels", broken)
    with pytest.raises(InvariantViolation):
        store.advance()
    assert store.snapshot is published


def test_check_invariants_flags_out_of_band_values(store):
    snap = store.snapshot
    bad_point = dataclasses.replace(snap.timeline[0], engagement=99.0)
    with pytest.raises(InvariantViolation):
        store.check_invariants(dataclasses.replace(snap, timeline=(bad_point,) + snap.timeline[1:]))
    bad_kpi = snap.kpis[3].with_value(1.1)
    with pytest.raises(InvariantViolation):
        store.check_invariants(dataclasses.replace(snap, kpis=snap.kpis[:3] + (bad_kpi,)))


def test_reset_returns_to_tick_zero(store):
    for _ in range(5):
        store.advance()
    snap = store.reset()
    assert snap.tick == 0
    assert snap.kpi("Net Revenue").value == 4.2


def test_same_seed_same_series():
    a = MetricsStateStore(rng=random.Random(5))
    b = MetricsStateStore(rng=random.Random(5))
    for _ in range(10):
        sa, sb = a.advance(), b.advance()
    assert sa.kpis == sb.kpis
    assert sa.timeline == sb.timeline
    assert sa.channel_mix == sb.channel_mix


def test_custom_config_is_honoured():
    config = SimulationConfig(
        kpis=(KpiSeed("Uptime", "", "%", 99.0, 0.1, "rolling", spread=0.05, floor=98.0, ceiling_ratio=1.01),),
        timeline=TimelineConfig(periods=("Q1", "Q2")),
        pipeline=PipelineConfig(stages=("Lead", "Won")),
        channels=ChannelConfig(seeds=(("A", 60.0), ("B", 40.0))),
    )
    store = MetricsStateStore(config, random.Random(3))
    for _ in range(100):
        snap = store.advance()
        assert 98.0 <= snap.kpis[0].value <= 99.99
    assert [p.period for p in snap.timeline] == ["Q1", "Q2"]
    assert sum(c.value for c in snap.channel_mix) == pytest.approx(100.0, abs=0.1)


@pytest.mark.parametrize(
    "build",
    [
        lambda: KpiSeed("x", "", "", 0.0, 0.0, ""),
        lambda: KpiSeed("x", "", "", 2.0, 0.0, "", floor=3.0),
        lambda: KpiSeed("x", "", "", 2.0, 0.0, "", spread=0.0),
        lambda: SeedRange(5, 1),
        lambda: TimelineConfig(engagement_seed=SeedRange(10, 50)),
        lambda: TimelineConfig(periods=("Jan", "Jan")),
        lambda: PipelineConfig(walk=WalkSpec(spread=4, minimum=50, maximum=60)),
        lambda: ChannelConfig(seeds=(("A", 50.0), ("A", 50.0))),
        lambda: ChannelConfig(spread=0),
        lambda: ChannelConfig(spread=float("nan")),
        lambda: ChannelConfig(floor=float("nan")),
        lambda: SimulationConfig(kpis=(KpiSeed("x", "", "", 1.0, 0.0, ""),) * 2),
    ],
)
def test_bad_configuration_fails_at_construction(build):
    with pytest.raises(ConfigurationError):
        build()
