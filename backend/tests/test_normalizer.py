# backend/tests/test_normalizer.py
import random
import pytest

from livedash.engine.errors import ConfigurationError
from livedash.engine.normalizer import normalize, share_sum_ok

SEEDS = [("Product Led", 38.0), ("Enterprise", 27.0), ("Partner", 19.0), ("Community", 16.0)]


def _sum(shares):
    return sum(v for _, v in shares)


def test_seeded_mix_after_one_perturbed_tick():
    bumps = [1.0, -0.4, 0.3, -0.2]
    raw = [(name, v + b) for (name, v), b in zip(SEEDS, bumps)]
    raw_sum = _sum(raw)
    out = normalize(raw)

    assert [name for name, _ in out] == [name for name, _ in SEEDS]
    assert _sum(out) == pytest.approx(100.0, abs=0.1)
    assert dict(out) == pytest.approx({"Product Led": 38.7, "Enterprise": 26.4, "Partner": 19.2, "Community": 15.7})
    for _, v in out:
        assert v >= round(10 * 100 / raw_sum, 1)


def test_floor_applies_before_rescale():
    out = dict(normalize([("a", 70.0), ("b", 5.0), ("c", 15.0), ("d", -3.0)]))
    # b and d are lifted to 10 -> floored sum 105
    assert out["b"] == pytest.approx(9.5)
    assert out["d"] == pytest.approx(9.5)
    assert sum(out.values()) == pytest.approx(100.0, abs=0.1)


def test_rounding_residual_goes_to_largest_share():
    out = normalize([("a", 1.0), ("b", 1.0), ("c", 1.0)], floor=0.5)
    assert [v for _, v in out] == pytest.approx([33.4, 33.3, 33.3])
    assert _sum(out) == pytest.approx(100.0)


def test_already_normalized_set_is_unchanged():
    once = normalize(SEEDS)
    twice = normalize(once)
    assert [v for _, v in twice] == pytest.approx([v for _, v in once], abs=0.1)
    assert [v for _, v in once] == pytest.approx([38.0, 27.0, 19.0, 16.0])


def test_random_inputs_always_sum_to_100():
    rng = random.Random(99)
    for _ in range(500):
        raw = [(str(i), rng.uniform(-20, 80)) for i in range(rng.randint(1, 8))]
        out = normalize(raw)
        assert share_sum_ok(v for _, v in out)
        assert all(v > 0 for _, v in out)


def test_empty_input_and_bad_floor():
    assert normalize([]) == ()
    with pytest.raises(ConfigurationError):
        normalize(SEEDS, floor=0)
