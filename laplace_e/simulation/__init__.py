"""Compiled kernels and benchmarks."""

from laplace_e.simulation.numba_e import estimate_naive_numba, run_benchmark

__all__ = ["estimate_naive_numba", "run_benchmark"]
