"""Estimators of e and the uncertain-value substrate they use."""

from laplace_e.sim.sampler import UniformSampler
from laplace_e.sim.uncertain import EnsembleSubstrate, UncertainValue
from laplace_e.sim.naive import NaiveMonteCarloEstimator
from laplace_e.sim.laplace import DistributionalEstimator, RollingState, StepRecord
from laplace_e.sim.run_simulation import EstimatorConfig, run_estimators
from laplace_e.sim.analysis import ConvergenceAnalyzer

__all__ = [
    "UniformSampler",
    "EnsembleSubstrate",
    "UncertainValue",
    "NaiveMonteCarloEstimator",
    "DistributionalEstimator",
    "RollingState",
    "StepRecord",
    "EstimatorConfig",
    "run_estimators",
    "ConvergenceAnalyzer",
]
