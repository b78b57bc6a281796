"""Convergence analysis for the e estimators."""

import math
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from laplace_e.config import get_logger
from laplace_e.sim.laplace import DistributionalEstimator
from laplace_e.sim.naive import NaiveMonteCarloEstimator
from laplace_e.sim.sampler import UniformSampler
from laplace_e.sim.uncertain import EnsembleSubstrate

logger = get_logger(__name__)


def _laplace_once(steps: int, ensemble_size: int, sampler: UniformSampler) -> float:
    estimator = DistributionalEstimator(EnsembleSubstrate(ensemble_size, sampler))
    return estimator.estimate(steps)


def _simple_once(repetitions: int, sampler: UniformSampler) -> float:
    return NaiveMonteCarloEstimator(sampler).estimate(repetitions)


class ConvergenceAnalyzer:
    """
    Sweep estimator parameters and summarize the error against math.e.
    """

    def __init__(
        self,
        ensemble_size: int = 10000,
        seed: Optional[int] = None,
        n_jobs: int = 1,
        progress_bar: bool = False,
    ):
        """
        Parameters
        ----------
        ensemble_size : int, default 10000
            Ensemble size used for every distributional run
        seed : int, optional
            Root seed; every run draws from its own spawned child sampler
        n_jobs : int, default 1
            Number of joblib workers
        progress_bar : bool, default False
            Whether to show a tqdm progress bar
        """
        if ensemble_size <= 0:
            raise ValueError("ensemble_size must be positive")
        if n_jobs <= 0:
            raise ValueError("n_jobs must be positive")

        self.ensemble_size = ensemble_size
        self.root = UniformSampler(seed)
        self.n_jobs = n_jobs
        self.progress_bar = progress_bar

    def _run(self, tasks: List[tuple], desc: str) -> List[float]:
        # Samplers are spawned up front so results do not depend on n_jobs.
        results = Parallel(n_jobs=self.n_jobs, backend="threading", return_as="generator")(
            delayed(fn)(*args) for fn, *args in tasks
        )
        if self.progress_bar:
            results = tqdm(results, total=len(tasks), desc=desc)
        return list(results)

    def sweep_steps(self, steps_list: Iterable[int], n_replicates: int = 1) -> pd.DataFrame:
        """
        Run the distributional estimator for each step count.

        Returns
        -------
        pd.DataFrame
            Columns: steps, replicate, estimate, abs_error
        """
        if n_replicates <= 0:
            raise ValueError("n_replicates must be positive")

        keys = []
        tasks = []
        for steps in steps_list:
            for replicate in range(n_replicates):
                keys.append((steps, replicate))
                tasks.append((_laplace_once, steps, self.ensemble_size, self.root.spawn()))

        estimates = self._run(tasks, desc="Sweeping steps")

        df = pd.DataFrame(keys, columns=["steps", "replicate"])
        df["estimate"] = estimates
        df["abs_error"] = (df["estimate"] - math.e).abs()
        return df

    def replicate_naive(self, repetitions: int = 50000, n_replicates: int = 10) -> pd.DataFrame:
        """
        Repeat the simple estimator to measure its Monte Carlo error.

        Returns
        -------
        pd.DataFrame
            Columns: repetitions, replicate, estimate, abs_error
        """
        if n_replicates <= 0:
            raise ValueError("n_replicates must be positive")

        tasks = [(_simple_once, repetitions, self.root.spawn()) for _ in range(n_replicates)]
        estimates = self._run(tasks, desc="Simple replicates")

        df = pd.DataFrame({
            "repetitions": repetitions,
            "replicate": np.arange(n_replicates),
            "estimate": estimates,
        })
        df["abs_error"] = (df["estimate"] - math.e).abs()
        return df

    @staticmethod
    def get_summary(df: pd.DataFrame, by: str = "steps") -> pd.DataFrame:
        """
        Aggregate replicates per parameter value.

        Returns
        -------
        pd.DataFrame
            Columns: <by>, mean, std, mae, bias
        """
        grouped = df.groupby(by)["estimate"]
        summary = pd.DataFrame({
            "mean": grouped.mean(),
            "std": grouped.std(ddof=0),
            "mae": df.groupby(by)["abs_error"].mean(),
        })
        summary["bias"] = summary["mean"] - math.e
        return summary.reset_index()
