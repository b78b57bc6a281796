"""
Monte Carlo estimation of Euler's number.

This package provides tools for:
- Drawing uniform samples from an explicitly owned generator
- Representing uncertain values as weighted sample ensembles
- Estimating e by repeated scalar trials (simple estimator)
- Estimating e by propagating distributions (Laplace estimator)
- Convergence sweeps and a numba-compiled benchmark
"""

__version__ = "0.1.0"

from laplace_e.config import Settings, cfg, get_logger, logger

__all__ = ["Settings", "cfg", "get_logger", "logger"]
