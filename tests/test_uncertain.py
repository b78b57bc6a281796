"""Tests for uncertain values and the ensemble substrate."""

import dataclasses

import numpy as np
import pytest

from laplace_e.errors import EnsembleSizeError, InvalidIntervalError
from laplace_e.sim.sampler import UniformSampler
from laplace_e.sim.uncertain import EnsembleSubstrate, UncertainValue, _has_equal_weights


def make_substrate(ensemble_size=10000, seed=42):
    return EnsembleSubstrate(ensemble_size, UniformSampler(seed))


def test_uncertain_value_normalizes_weights():
    """Weights are renormalized to sum to 1."""
    u = UncertainValue([1.0, 2.0], [2.0, 2.0])

    np.testing.assert_allclose(u.weights, [0.5, 0.5])
    assert u.size == 2
    assert u.mean() == pytest.approx(1.5)


def test_uncertain_value_validation():
    """Empty ensembles, negative weights and length mismatches are rejected."""
    with pytest.raises(EnsembleSizeError):
        UncertainValue([], [])

    with pytest.raises(ValueError):
        UncertainValue([1.0, 2.0], [1.0, -0.5])

    with pytest.raises(ValueError):
        UncertainValue([1.0, 2.0], [1.0])

    with pytest.raises(ValueError):
        UncertainValue([1.0], [0.0])


def test_uncertain_value_immutable():
    """Neither the value nor its arrays can be modified."""
    u = UncertainValue([1.0, 2.0], [0.5, 0.5])

    with pytest.raises(dataclasses.FrozenInstanceError):
        u.values = np.array([3.0])

    with pytest.raises(ValueError):
        u.values[0] = 10.0


def test_substrate_size_validation():
    """Ensemble size must be a positive integer."""
    with pytest.raises(EnsembleSizeError):
        EnsembleSubstrate(0)

    with pytest.raises(EnsembleSizeError):
        EnsembleSubstrate(-5)

    sub = make_substrate(100)
    with pytest.raises(EnsembleSizeError):
        sub.from_uniform(0.0, 1.0, 0)

    with pytest.raises(InvalidIntervalError):
        sub.from_uniform(1.0, 1.0)


def test_from_uniform_moments():
    """Uniform(0, 1) ensemble has mean ~1/2, second moment ~1/3."""
    sub = make_substrate(20000)
    u = sub.from_uniform(0.0, 1.0)

    assert u.size == 20000
    np.testing.assert_allclose(u.weights, 1.0 / 20000)
    assert sub.nth_moment(u, 1) == pytest.approx(0.5, abs=0.02)
    assert sub.nth_moment(u, 2) == pytest.approx(1.0 / 3.0, abs=0.02)
    assert sub.nth_moment(u, 0) == pytest.approx(1.0)


def test_mean_error_shrinks_with_ensemble_size():
    """Larger ensembles estimate the mean more tightly."""
    sub = make_substrate(100000, seed=5)

    small_errors = [abs(sub.from_uniform(0.0, 1.0, 100).mean() - 0.5) for _ in range(20)]
    large_errors = [abs(sub.from_uniform(0.0, 1.0, 100000).mean() - 0.5) for _ in range(20)]

    assert np.mean(large_errors) < np.mean(small_errors)
    assert max(large_errors) < 0.01


def test_nth_moment_order_validation():
    """Moment order must be a non-negative integer."""
    u = make_substrate(10).from_uniform(0.0, 1.0)

    for bad in (-1, 1.5, True):
        with pytest.raises(ValueError):
            u.nth_moment(bad)


def test_probability_greater_than():
    """P(U > 0.5) ~ 1/2; thresholds outside the support give 0 or 1."""
    sub = make_substrate(10000)
    u = sub.from_uniform(0.0, 1.0)

    assert sub.probability_greater_than(u, 0.5) == pytest.approx(0.5, abs=0.03)
    assert sub.probability_greater_than(u, 1.0) == 0.0
    assert sub.probability_greater_than(u, -1.0) == 1.0


def test_probability_is_strict():
    """Members equal to the threshold do not count."""
    u = UncertainValue([1.0, 2.0], [0.5, 0.5])

    assert u.probability_gt(1.0) == pytest.approx(0.5)
    assert u.probability_gt(2.0) == 0.0


def test_point_value():
    """A point value is a single member of weight 1."""
    p = make_substrate(10).point(3.0)

    assert p.size == 1
    assert p.mean() == 3.0
    assert p.variance() == 0.0


def test_mixture_of_points():
    """Mixing two points gives a two-point distribution with the given weights."""
    sub = make_substrate(10)
    m = sub.mixture(sub.point(1.0), sub.point(0.0), 0.3)

    np.testing.assert_allclose(m.values, [0.0, 1.0])
    np.testing.assert_allclose(m.weights, [0.7, 0.3])
    assert m.mean() == pytest.approx(0.3)


def test_mixture_extremes():
    """p = 1 reproduces the first input, p = 0 the second."""
    sub = make_substrate(1000)
    a = sub.from_uniform(0.0, 1.0)
    b = sub.from_uniform(5.0, 6.0)

    all_a = sub.mixture(a, b, 1.0)
    all_b = sub.mixture(a, b, 0.0)

    np.testing.assert_array_equal(all_a.values, np.sort(a.values))
    np.testing.assert_allclose(all_a.weights, 1.0 / 1000)
    assert all_a.mean() == pytest.approx(a.mean())

    np.testing.assert_array_equal(all_b.values, np.sort(b.values))
    assert all_b.mean() == pytest.approx(b.mean())


def test_mixture_probability_validation():
    """Probabilities outside [0, 1] are rejected."""
    sub = make_substrate(10)

    for bad in (-0.1, 1.5, float("nan")):
        with pytest.raises(ValueError):
            sub.mixture(sub.point(1.0), sub.point(0.0), bad)


def test_mixture_is_capped():
    """Mixing two full ensembles does not grow past the substrate size."""
    sub = make_substrate(2000)
    a = sub.from_uniform(0.0, 1.0)
    b = sub.from_uniform(10.0, 11.0)

    m = sub.mixture(a, b, 0.25)

    assert m.size <= 2000
    assert m.weights.sum() == pytest.approx(1.0)
    assert np.all(m.weights >= 0)
    # 0.25 * 0.5 + 0.75 * 10.5
    assert m.mean() == pytest.approx(8.0, abs=0.5)


def test_add_point_shifts_exactly():
    """Adding a point shifts every member without resampling."""
    sub = make_substrate(100)
    u = sub.from_uniform(0.0, 1.0)

    shifted = sub.add(sub.point(2.0), u)

    assert shifted.size == 100
    np.testing.assert_allclose(shifted.values, np.sort(u.values) + 2.0)
    assert shifted.mean() == pytest.approx(u.mean() + 2.0)


def test_add_discrete_is_exact():
    """Small discrete distributions are convolved exactly and merged."""
    sub = make_substrate(10)
    coin = sub.mixture(sub.point(1.0), sub.point(0.0), 0.5)

    total = sub.add(coin, coin)

    np.testing.assert_allclose(total.values, [0.0, 1.0, 2.0])
    np.testing.assert_allclose(total.weights, [0.25, 0.5, 0.25])


def test_add_independent_ensembles():
    """Sum of two uniforms has mean 1 and variance 1/6 (not the comonotone 1/3)."""
    sub = make_substrate(5000, seed=11)
    total = sub.add(sub.from_uniform(0.0, 1.0), sub.from_uniform(0.0, 1.0))

    assert total.size == 5000
    assert total.mean() == pytest.approx(1.0, abs=0.03)
    assert total.variance() == pytest.approx(1.0 / 6.0, abs=0.02)


def test_add_does_not_mutate_inputs():
    """Operations return new values and leave their inputs untouched."""
    sub = make_substrate(500)
    a = sub.from_uniform(0.0, 1.0)
    before = a.values.copy()

    sub.add(a, sub.from_uniform(0.0, 1.0))
    sub.mixture(a, sub.point(0.0), 0.5)

    np.testing.assert_array_equal(a.values, before)


def test_probability_exact_when_whole_ensemble_exceeds():
    """A large ensemble entirely above the threshold mixes in no leftover weight."""
    sub = make_substrate(10000)
    u = sub.from_uniform(2.0, 3.0)

    p = sub.probability_greater_than(u, 1.0)
    assert p == 1.0

    increment = sub.mixture(sub.point(1.0), sub.point(0.0), 1.0 - p)
    assert increment.size == 1
    assert increment.values[0] == 0.0


def test_from_uniform_rejects_oversized_request():
    """A per-call size above the substrate size is refused."""
    sub = make_substrate(100)

    with pytest.raises(EnsembleSizeError):
        sub.from_uniform(0.0, 1.0, 5000)

    assert sub.from_uniform(0.0, 1.0, 100).size == 100
    assert sub.from_uniform(0.0, 1.0, 10).size == 10


def test_equal_weight_check_is_relative():
    """Tiny absolute deviations still count as unequal for small weights."""
    assert _has_equal_weights(np.full(4, 0.25))
    assert _has_equal_weights(np.full(100000, 1e-5))

    w = np.full(4, 0.25)
    w[0] += 1e-8
    w[1] -= 1e-8
    assert not _has_equal_weights(w)

    w = np.full(100000, 1e-5)
    w[:50000] -= 5e-9
    w[50000:] += 5e-9
    assert not _has_equal_weights(w)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
