"""
Distribution-native ("Laplace") estimate of e.

Instead of repeating scalar trials, the rolling sum is carried as an
uncertain value. At step i the probability p_i that the sum of the first i
uniforms already exceeds 1 is read off the ensemble, and the count grows by a
Bernoulli(1 - p_i) mixture. The mean count after n steps is

    sum_{i<n} P(U_1 + ... + U_i <= 1) = sum_{i<n} 1 / i!

which converges to e after about 8 steps.
"""

from dataclasses import dataclass
from typing import List, Optional

from laplace_e.config import get_logger
from laplace_e.sim.uncertain import EnsembleSubstrate, UncertainValue

logger = get_logger(__name__)


@dataclass(frozen=True)
class RollingState:
    """Uncertain rolling sum and uncertain draw count."""

    sum: UncertainValue
    count: UncertainValue


@dataclass(frozen=True)
class StepRecord:
    """Diagnostics for one update step."""

    step: int
    p_exceeded: float
    count_mean: float
    sum_mean: float
    count_size: int
    sum_size: int


class DistributionalEstimator:
    """Estimate e in O(steps) ensemble operations."""

    def __init__(self, substrate: Optional[EnsembleSubstrate] = None, threshold: float = 1.0):
        """
        Parameters
        ----------
        substrate : EnsembleSubstrate, optional
            Ensemble arithmetic. If None, uses 10000 members and a time-seeded sampler.
        threshold : float, default 1.0
            Value the rolling sum must exceed for counting to stop
        """
        if not threshold > 0:
            raise ValueError("threshold must be positive")

        self.substrate = substrate if substrate is not None else EnsembleSubstrate(10_000)
        self.threshold = threshold

    def initial_state(self) -> RollingState:
        zero = self.substrate.point(0.0)
        return RollingState(sum=zero, count=zero)

    def step(self, state: RollingState) -> RollingState:
        """Advance the rolling state by one uniform draw."""
        sub = self.substrate

        p = sub.probability_greater_than(state.sum, self.threshold)
        increment = sub.mixture(sub.point(1.0), sub.point(0.0), 1.0 - p)
        count = sub.add(state.count, increment)
        rolling_sum = sub.add(state.sum, sub.from_uniform(0.0, 1.0))

        return RollingState(sum=rolling_sum, count=count)

    def trace(self, steps: int = 10) -> List[StepRecord]:
        """Run ``steps`` updates and record diagnostics after each one."""
        if steps <= 0:
            raise ValueError("steps must be positive")

        records = []
        state = self.initial_state()
        for i in range(steps):
            p = state.sum.probability_gt(self.threshold)
            state = self.step(state)
            records.append(StepRecord(
                step=i + 1,
                p_exceeded=p,
                count_mean=state.count.mean(),
                sum_mean=state.sum.mean(),
                count_size=state.count.size,
                sum_size=state.sum.size,
            ))
        return records

    def run(self, steps: int = 10) -> RollingState:
        """Final rolling state after ``steps`` updates."""
        if steps <= 0:
            raise ValueError("steps must be positive")

        state = self.initial_state()
        for i in range(steps):
            state = self.step(state)
            logger.debug(
                f"step {i + 1}: E[count]={state.count.mean():.6f}, "
                f"E[sum]={state.sum.mean():.4f}"
            )
        return state

    def estimate(self, steps: int = 10) -> float:
        """Mean of the count distribution after ``steps`` updates."""
        state = self.run(steps)
        return self.substrate.nth_moment(state.count, 1)
