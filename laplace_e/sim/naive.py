"""Brute-force Monte Carlo estimate of e by repeated scalar trials."""

from typing import Optional

from laplace_e.config import get_logger
from laplace_e.errors import IterationLimitExceeded
from laplace_e.sim.sampler import UniformSampler

logger = get_logger(__name__)


class NaiveMonteCarloEstimator:
    """
    Estimate e as the expected number of Uniform(0, 1) draws whose rolling
    sum first exceeds 1.

    Each trial keeps a scalar rolling sum and counts draws until the sum
    strictly exceeds ``threshold``. The estimate is the mean count over all
    repetitions, which approaches e as the number of repetitions grows.
    """

    def __init__(
        self,
        sampler: Optional[UniformSampler] = None,
        threshold: float = 1.0,
        max_draws: int = 10_000,
    ):
        """
        Initialize the estimator.

        Parameters
        ----------
        sampler : UniformSampler, optional
            Random source. If None, a time-seeded sampler is created.
        threshold : float, default 1.0
            Value the rolling sum must strictly exceed
        max_draws : int, default 10000
            Cap on draws within a single trial
        """
        if not threshold > 0:
            raise ValueError("threshold must be positive")
        if max_draws <= 0:
            raise ValueError("max_draws must be positive")

        self.sampler = sampler if sampler is not None else UniformSampler()
        self.threshold = threshold
        self.max_draws = max_draws

    def trial(self) -> int:
        """Run one repetition and return the number of draws it took."""
        rolling_sum = 0.0
        count = 0

        while rolling_sum <= self.threshold:
            if count >= self.max_draws:
                raise IterationLimitExceeded(
                    f"rolling sum stayed <= {self.threshold} after {self.max_draws} draws"
                )
            rolling_sum += self.sampler.draw(0.0, 1.0)
            count += 1

        return count

    def estimate(self, repetitions: int = 50_000) -> float:
        """
        Mean number of draws needed to exceed the threshold.

        Parameters
        ----------
        repetitions : int, default 50000
            Number of independent trials

        Returns
        -------
        float
            Estimate of e
        """
        if repetitions <= 0:
            raise ValueError("repetitions must be positive")

        total_count = 0
        for _ in range(repetitions):
            total_count += self.trial()

        estimate = total_count / repetitions
        logger.debug(f"Simple estimate over {repetitions} repetitions: {estimate:.6f}")
        return estimate
