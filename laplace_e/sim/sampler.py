"""Uniform random sampling from an explicitly owned generator."""

import math
import time
from typing import Optional, Tuple, Union

import numpy as np

from laplace_e.config import get_logger
from laplace_e.errors import EnsembleSizeError, InvalidIntervalError

logger = get_logger(__name__)


def _check_interval(min_value: float, max_value: float) -> None:
    if not (math.isfinite(min_value) and math.isfinite(max_value)):
        raise InvalidIntervalError(
            f"interval bounds must be finite, got [{min_value}, {max_value})"
        )
    if min_value >= max_value:
        raise InvalidIntervalError(
            f"min must be < max, got min={min_value}, max={max_value}"
        )


class UniformSampler:
    """
    Independent draws from Uniform(min, max).

    Each sampler owns its own ``numpy.random.Generator``; nothing touches the
    global NumPy random state. When no seed is given the seed is taken from
    wall-clock time and kept on ``self.seed`` so the run can be reproduced.
    """

    def __init__(
        self,
        seed: Optional[Union[int, Tuple[int, Tuple[int, ...]], np.random.SeedSequence]] = None,
    ):
        """
        Initialize the sampler.

        Parameters
        ----------
        seed : int, (entropy, spawn_key) tuple or SeedSequence, optional
            Explicit seed for deterministic runs. If None, uses time.time_ns().
            Spawned children report an (entropy, spawn_key) tuple as their
            seed; passing it back replays the child's stream.
        """
        if isinstance(seed, np.random.SeedSequence):
            self._seed_seq = np.random.SeedSequence(
                seed.entropy,
                spawn_key=seed.spawn_key,
                n_children_spawned=seed.n_children_spawned,
            )
        elif isinstance(seed, tuple):
            entropy, spawn_key = seed
            self._seed_seq = np.random.SeedSequence(entropy, spawn_key=tuple(spawn_key))
        else:
            if seed is None:
                seed = time.time_ns()
                logger.debug(f"Seeding sampler from wall clock: {seed}")
            self._seed_seq = np.random.SeedSequence(seed)

        if self._seed_seq.spawn_key:
            self.seed = (self._seed_seq.entropy, tuple(self._seed_seq.spawn_key))
        else:
            self.seed = self._seed_seq.entropy

        self.rng = np.random.default_rng(self._seed_seq)

    def draw(self, min_value: float, max_value: float) -> float:
        """Return one sample from Uniform(min_value, max_value), in [min, max)."""
        _check_interval(min_value, max_value)
        return float(self.rng.uniform(min_value, max_value))

    def draw_many(self, min_value: float, max_value: float, size: int) -> np.ndarray:
        """Return ``size`` independent samples from Uniform(min_value, max_value)."""
        _check_interval(min_value, max_value)
        if size <= 0:
            raise EnsembleSizeError(f"size must be positive, got {size}")
        return self.rng.uniform(min_value, max_value, size)

    def choice(self, values: np.ndarray, size: int, weights: np.ndarray) -> np.ndarray:
        """Weighted resampling with replacement."""
        if size <= 0:
            raise EnsembleSizeError(f"size must be positive, got {size}")
        return self.rng.choice(values, size=size, replace=True, p=weights)

    def spawn(self) -> "UniformSampler":
        """Return a child sampler with an independent stream."""
        return UniformSampler(self._seed_seq.spawn(1)[0])

    def __repr__(self):
        return f"UniformSampler(seed={self.seed})"
