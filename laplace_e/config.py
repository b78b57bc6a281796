"""Configuration and logging for the Monte Carlo e estimators."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration class using Pydantic BaseSettings.
    
    Supports loading from environment variables prefixed with ``LAPLACE_E_``.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="LAPLACE_E_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # Simple (naive) estimator
    N_REPETITIONS: int = 50000
    MAX_DRAWS: int = 10000
    
    # Laplace (distributional) estimator
    N_STEPS: int = 10  # converges around 8
    ENSEMBLE_SIZE: int = 10000
    
    # Shared
    THRESHOLD: float = 1.0
    RANDOM_SEED: Optional[int] = None  # None -> seeded from wall-clock time
    
    # Output / execution
    RESULTS_DIR: str = "results"
    N_JOBS: int = 2
    
    @field_validator("N_REPETITIONS", "MAX_DRAWS", "N_STEPS", "ENSEMBLE_SIZE", "N_JOBS")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value
    
    @field_validator("THRESHOLD")
    @classmethod
    def _check_threshold(cls, value: float) -> float:
        if not value > 0:
            raise ValueError("THRESHOLD must be positive")
        return value
    
    @property
    def results_dir(self) -> Path:
        """Get results directory as Path object."""
        return Path(self.RESULTS_DIR)
    
    @property
    def random_seed(self) -> Optional[int]:
        """Alias for RANDOM_SEED."""
        return self.RANDOM_SEED


# Global configuration instance
cfg = Settings()


# Logging configuration
_logging_configured = False


def get_logger(name: str = "laplace-e") -> logging.Logger:
    """Get or create a logger with consistent configuration.
    
    Configures logging.basicConfig once (INFO level) on first call.
    Subsequent calls return loggers with the same configuration.
    
    Args:
        name: Logger name (typically module name)
    
    Returns:
        Configured logger instance
    """
    global _logging_configured
    
    if not _logging_configured:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        _logging_configured = True
    
    return logging.getLogger(name)


# Global logger instance
logger = get_logger("laplace-e")
