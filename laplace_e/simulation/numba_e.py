#!/usr/bin/env python3
"""
Numba-compiled simple estimator of e, and a benchmark against pure Python.

The kernel mirrors NaiveMonteCarloEstimator: a serial double loop over
repetitions and draws. It seeds Numba's internal generator inside the
compiled function, so a given seed always gives the same estimate.

# Example: python -m laplace_e.simulation.numba_e
"""

import time
from typing import Dict, Optional

import numpy as np
from numba import njit

from laplace_e.config import get_logger
from laplace_e.errors import IterationLimitExceeded
from laplace_e.sim.naive import NaiveMonteCarloEstimator
from laplace_e.sim.sampler import UniformSampler

logger = get_logger(__name__)

# Returned by the kernel when a trial hits max_draws
LIMIT_SENTINEL = -1.0


@njit  # JIT compiles the Python loops into machine code
def naive_e_kernel(repetitions: int, threshold: float, max_draws: int, seed: int) -> float:
    np.random.seed(seed)

    total_count = 0
    for _ in range(repetitions):
        rolling_sum = 0.0
        count = 0
        while rolling_sum <= threshold:
            if count >= max_draws:
                return LIMIT_SENTINEL
            rolling_sum += np.random.random()
            count += 1
        total_count += count

    return total_count / repetitions


def estimate_naive_numba(
    repetitions: int = 50000,
    seed: Optional[int] = None,
    threshold: float = 1.0,
    max_draws: int = 10000,
) -> float:
    """
    Simple estimate of e computed by the compiled kernel.

    Args:
        repetitions: Number of independent trials
        seed: Kernel seed. If None, taken from a time-seeded UniformSampler
        threshold: Value the rolling sum must strictly exceed
        max_draws: Cap on draws within a single trial

    Returns:
        Estimate of e
    """
    if repetitions <= 0:
        raise ValueError("repetitions must be positive")
    if not threshold > 0:
        raise ValueError("threshold must be positive")
    if max_draws <= 0:
        raise ValueError("max_draws must be positive")

    if seed is None:
        seed = int(UniformSampler().rng.integers(0, 2**32 - 1))

    # np.random.seed only accepts 32-bit seeds
    result = naive_e_kernel(repetitions, float(threshold), max_draws, seed % 2**32)
    if result == LIMIT_SENTINEL:
        raise IterationLimitExceeded(
            f"rolling sum stayed <= {threshold} after {max_draws} draws"
        )
    return result


def run_benchmark(repetitions: int = 50000, seed: int = 42) -> Dict[str, float]:
    """
    Time the pure-Python simple estimator against the compiled kernel.

    Returns:
        Dict with 'python_seconds', 'numba_seconds', 'speedup',
        'python_e', 'numba_e'
    """
    if repetitions <= 0:
        raise ValueError("repetitions must be positive")

    # Warm-up to exclude JIT compilation time from benchmark
    logger.info("Warming up Numba JIT...")
    estimate_naive_numba(1000, seed=seed)

    t0 = time.perf_counter()
    python_e = NaiveMonteCarloEstimator(UniformSampler(seed)).estimate(repetitions)
    python_seconds = time.perf_counter() - t0

    t0 = time.perf_counter()
    numba_e = estimate_naive_numba(repetitions, seed=seed)
    numba_seconds = time.perf_counter() - t0

    speedup = python_seconds / numba_seconds if numba_seconds > 0 else np.nan

    logger.info(f"[Simple estimator benchmark] repetitions={repetitions:,d}")
    logger.info(f"  Python : {python_seconds:.3f} s  e ~ {python_e:.6f}")
    logger.info(f"  Numba  : {numba_seconds:.3f} s  e ~ {numba_e:.6f}")
    logger.info(f"  Speedup: {speedup:.2f}x")

    return {
        "python_seconds": python_seconds,
        "numba_seconds": numba_seconds,
        "speedup": speedup,
        "python_e": python_e,
        "numba_e": numba_e,
    }


if __name__ == "__main__":
    run_benchmark()
