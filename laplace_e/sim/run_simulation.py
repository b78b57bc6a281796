"""
Run both e estimators from one configuration.

Each estimator gets its own child sampler spawned from the run seed, so the
two share no mutable state and produce the same numbers whether they run
one after the other or concurrently.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional

from joblib import Parallel, delayed

from laplace_e.config import Settings, cfg, get_logger
from laplace_e.sim.laplace import DistributionalEstimator
from laplace_e.sim.naive import NaiveMonteCarloEstimator
from laplace_e.sim.sampler import UniformSampler
from laplace_e.sim.uncertain import EnsembleSubstrate

logger = get_logger(__name__)


@dataclass
class EstimatorConfig:
    """Configuration for one run of both estimators."""

    repetitions: int = 50000
    steps: int = 10
    ensemble_size: int = 10000
    threshold: float = 1.0
    max_draws: int = 10000
    random_seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.repetitions <= 0:
            raise ValueError("repetitions must be positive")
        if self.steps <= 0:
            raise ValueError("steps must be positive")
        if self.ensemble_size <= 0:
            raise ValueError("ensemble_size must be positive")
        if not self.threshold > 0:
            raise ValueError("threshold must be positive")
        if self.max_draws <= 0:
            raise ValueError("max_draws must be positive")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "EstimatorConfig":
        """Build a config from Settings; keyword overrides that are None are ignored."""
        if settings is None:
            settings = cfg

        values = dict(
            repetitions=settings.N_REPETITIONS,
            steps=settings.N_STEPS,
            ensemble_size=settings.ENSEMBLE_SIZE,
            threshold=settings.THRESHOLD,
            max_draws=settings.MAX_DRAWS,
            random_seed=settings.RANDOM_SEED,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _timed(fn, *args):
    t0 = time.perf_counter()
    value = fn(*args)
    return value, time.perf_counter() - t0


def run_laplace(config: EstimatorConfig, sampler: UniformSampler) -> float:
    substrate = EnsembleSubstrate(config.ensemble_size, sampler)
    estimator = DistributionalEstimator(substrate, threshold=config.threshold)
    return estimator.estimate(config.steps)


def run_simple(config: EstimatorConfig, sampler: UniformSampler) -> float:
    estimator = NaiveMonteCarloEstimator(
        sampler, threshold=config.threshold, max_draws=config.max_draws
    )
    return estimator.estimate(config.repetitions)


def run_estimators(config: Optional[EstimatorConfig] = None, parallel: bool = False) -> Dict:
    """
    Run the Laplace and simple estimators.

    Args:
        config: EstimatorConfig. If None, built from the global settings
        parallel: Run both estimators concurrently (joblib threading backend)

    Returns:
        Dict with 'laplace_e', 'simple_e', 'seed', 'laplace_seconds', 'simple_seconds'
    """
    if config is None:
        config = EstimatorConfig.from_settings()

    root = UniformSampler(config.random_seed)
    laplace_sampler = root.spawn()
    simple_sampler = root.spawn()

    logger.info(
        f"Running estimators: steps={config.steps}, ensemble_size={config.ensemble_size}, "
        f"repetitions={config.repetitions}, seed={root.seed}"
    )

    jobs = [
        (run_laplace, config, laplace_sampler),
        (run_simple, config, simple_sampler),
    ]

    if parallel:
        outputs = Parallel(n_jobs=2, backend="threading")(
            delayed(_timed)(*job) for job in jobs
        )
    else:
        outputs = [_timed(*job) for job in jobs]

    (laplace_e, laplace_seconds), (simple_e, simple_seconds) = outputs

    logger.info(f"Laplace e = {laplace_e:.6f} ({laplace_seconds:.3f} s)")
    logger.info(f"Simple e  = {simple_e:.6f} ({simple_seconds:.3f} s)")

    return {
        "laplace_e": laplace_e,
        "simple_e": simple_e,
        "seed": root.seed,
        "laplace_seconds": laplace_seconds,
        "simple_seconds": simple_seconds,
    }
