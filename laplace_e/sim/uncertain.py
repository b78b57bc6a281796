"""
Uncertain values represented as finite weighted ensembles.

An ``UncertainValue`` approximates a probability distribution over the reals
by ``(value, weight)`` members whose weights are non-negative and sum to 1.
The ``EnsembleSubstrate`` fixes the maximum ensemble size and owns the random
source needed to create and combine values:

- ``from_uniform``: fresh ensemble of independent uniform draws
- ``point``: distribution concentrated at one scalar
- ``add``: distribution of the sum of independent draws
- ``probability_greater_than``: weight strictly above a threshold
- ``mixture``: probability-weighted blend of two distributions
- ``nth_moment``: raw moment, n = 1 gives the mean

Combined ensembles are compacted (zero weights dropped, equal values merged)
and resampled down to the substrate size when they would outgrow it.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Optional

import numpy as np

from laplace_e.config import get_logger
from laplace_e.errors import EnsembleSizeError
from laplace_e.sim.sampler import UniformSampler

logger = get_logger(__name__)


def _check_order(n) -> None:
    if isinstance(n, bool) or not isinstance(n, Integral) or n < 0:
        raise ValueError(f"moment order must be a non-negative integer, got {n!r}")


def _has_equal_weights(weights: np.ndarray) -> bool:
    # relative tolerance only; weights of large ensembles are far below 1e-8
    return bool(np.allclose(weights, 1.0 / weights.size, rtol=1e-9, atol=0.0))


@dataclass(frozen=True, eq=False)
class UncertainValue:
    """A distribution held as an ensemble of weighted representative points."""

    values: np.ndarray
    weights: np.ndarray

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64).ravel()
        weights = np.array(self.weights, dtype=np.float64).ravel()

        if values.size == 0:
            raise EnsembleSizeError("an uncertain value needs at least one member")
        if values.shape != weights.shape:
            raise ValueError(
                f"values and weights differ in length: {values.size} != {weights.size}"
            )
        if not np.all(np.isfinite(values)):
            raise ValueError("ensemble values must be finite")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise ValueError("ensemble weights must be finite and non-negative")

        total = weights.sum()
        if total <= 0:
            raise ValueError("ensemble weights must have a positive sum")
        weights = weights / total

        values.flags.writeable = False
        weights.flags.writeable = False
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "weights", weights)

    @property
    def size(self) -> int:
        return int(self.values.size)

    def nth_moment(self, n: int) -> float:
        """Raw moment E[X**n]."""
        _check_order(n)
        return float(np.sum(self.weights * self.values ** n))

    def mean(self) -> float:
        return self.nth_moment(1)

    def variance(self) -> float:
        mu = self.mean()
        return float(np.sum(self.weights * (self.values - mu) ** 2))

    def probability_gt(self, threshold: float) -> float:
        """P(X > threshold), exact when all or none of the members exceed it."""
        above = self.values > threshold
        if above.all():
            return 1.0
        if not above.any():
            return 0.0
        p = float(np.sum(self.weights[above]))
        return min(max(p, 0.0), 1.0)

    def __repr__(self):
        return f"UncertainValue(size={self.size}, mean={self.mean():.6g})"


class EnsembleSubstrate:
    """
    Factory and arithmetic for ``UncertainValue`` ensembles of bounded size.

    Addition pairs members index-wise once the exact outer sum would exceed
    ``ensemble_size``. Pairing is only valid for independent ensembles; every
    ``from_uniform`` call draws a fresh ensemble and operands are shuffled
    before pairing, so no two paired ensembles share an ancestor ordering.
    """

    def __init__(self, ensemble_size: int, sampler: Optional[UniformSampler] = None):
        """
        Parameters
        ----------
        ensemble_size : int
            Maximum number of members kept in any ensemble (M)
        sampler : UniformSampler, optional
            Random source. If None, a time-seeded sampler is created.
        """
        if isinstance(ensemble_size, bool) or not isinstance(ensemble_size, Integral):
            raise EnsembleSizeError(f"ensemble_size must be an integer, got {ensemble_size!r}")
        if ensemble_size <= 0:
            raise EnsembleSizeError(f"ensemble_size must be positive, got {ensemble_size}")

        self.ensemble_size = int(ensemble_size)
        self.sampler = sampler if sampler is not None else UniformSampler()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def from_uniform(
        self, min_value: float, max_value: float, ensemble_size: Optional[int] = None
    ) -> UncertainValue:
        """Ensemble of independent Uniform(min, max) draws with equal weights."""
        size = self.ensemble_size if ensemble_size is None else ensemble_size
        if size <= 0:
            raise EnsembleSizeError(f"ensemble_size must be positive, got {size}")
        if size > self.ensemble_size:
            raise EnsembleSizeError(
                f"ensemble_size {size} exceeds the substrate size {self.ensemble_size}"
            )
        values = self.sampler.draw_many(min_value, max_value, size)
        return UncertainValue(values, np.full(size, 1.0 / size))

    def point(self, value: float) -> UncertainValue:
        """Degenerate distribution concentrated at ``value``."""
        return UncertainValue(np.array([value]), np.array([1.0]))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, a: UncertainValue, b: UncertainValue) -> UncertainValue:
        """Distribution of X + Y for independent X ~ a, Y ~ b."""
        if a.size * b.size <= self.ensemble_size:
            values = np.add.outer(a.values, b.values).ravel()
            weights = np.multiply.outer(a.weights, b.weights).ravel()
            return self._finish(values, weights)

        left = self._equal_weight_members(a)
        right = self._equal_weight_members(b)
        size = self.ensemble_size
        return self._finish(left + right, np.full(size, 1.0 / size))

    def mixture(
        self,
        value_if_true: UncertainValue,
        value_if_false: UncertainValue,
        probability_of_true: float,
    ) -> UncertainValue:
        """``value_if_true`` with probability p, otherwise ``value_if_false``."""
        p = float(probability_of_true)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"probability_of_true must be in [0, 1], got {probability_of_true}")

        values = np.concatenate([value_if_true.values, value_if_false.values])
        weights = np.concatenate([
            p * value_if_true.weights,
            (1.0 - p) * value_if_false.weights,
        ])
        return self._finish(values, weights)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def probability_greater_than(self, a: UncertainValue, threshold: float) -> float:
        return a.probability_gt(threshold)

    def nth_moment(self, a: UncertainValue, n: int) -> float:
        return a.nth_moment(n)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _equal_weight_members(self, u: UncertainValue) -> np.ndarray:
        """Exactly ``ensemble_size`` equally weighted members, in random order."""
        size = self.ensemble_size
        if u.size == size and _has_equal_weights(u.weights):
            return self.sampler.rng.permutation(u.values)
        return self.sampler.choice(u.values, size, u.weights)

    def _finish(self, values: np.ndarray, weights: np.ndarray) -> UncertainValue:
        """Compact an ensemble and cap it at ``ensemble_size`` members."""
        keep = weights > 0
        values, weights = values[keep], weights[keep]

        support, inverse = np.unique(values, return_inverse=True)
        merged = np.bincount(inverse.ravel(), weights=weights, minlength=support.size)

        if support.size > self.ensemble_size:
            size = self.ensemble_size
            logger.debug(f"Resampling ensemble of {support.size} members down to {size}")
            merged = merged / merged.sum()
            support = self.sampler.choice(support, size, merged)
            merged = np.full(size, 1.0 / size)

        return UncertainValue(support, merged)

    def __repr__(self):
        return f"EnsembleSubstrate(ensemble_size={self.ensemble_size}, sampler={self.sampler!r})"
