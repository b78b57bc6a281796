"""Exceptions raised by the e estimators."""


class LaplaceEError(Exception):
    """Base class for all package errors."""


class InvalidIntervalError(LaplaceEError, ValueError):
    """Uniform interval with min >= max or non-finite bounds."""


class EnsembleSizeError(LaplaceEError, ValueError):
    """Non-positive ensemble (or sample) size."""


class IterationLimitExceeded(LaplaceEError, RuntimeError):
    """A single trial needed more draws than the configured cap."""
