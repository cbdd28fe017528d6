"""
Frozen configuration settings for lookback option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Tolerances live in config/tolerances.py.
"""

import os
from dataclasses import dataclass, field

from lookback_pricing.config.tolerances import (
    LOOKBACK_PARITY_TOLERANCE,
    MC_ANALYTIC_RELATIVE_TOLERANCE,
    ZERO_RATE_THRESHOLD,
)

# =============================================================================
# Simulation Configuration
# =============================================================================

_DEFAULT_SEED = 1897


def _resolve_seed() -> int:
    """
    Resolve the default Monte Carlo seed with environment variable override.

    Priority:
    1. LOOKBACK_SEED environment variable (if set)
    2. Default: 1897

    Returns
    -------
    int
        Seed used when callers do not pass one explicitly
    """
    env_seed = os.environ.get("LOOKBACK_SEED")
    if env_seed:
        try:
            return int(env_seed)
        except ValueError as e:
            raise ValueError(
                f"CRITICAL: LOOKBACK_SEED must be an integer, got {env_seed!r}"
            ) from e
    return _DEFAULT_SEED


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    n_paths : int
        Number of Monte Carlo paths
    n_steps : int
        Number of time steps of the simulation grid
    seed : int
        Random seed for reproducibility. Override with LOOKBACK_SEED.
    antithetic : bool
        Whether reference simulators pair each draw with its negative
    """

    n_paths: int = 20_000
    n_steps: int = 1_000
    seed: int = field(default_factory=_resolve_seed)
    antithetic: bool = False


# =============================================================================
# Analytic Pricing Configuration
# =============================================================================

@dataclass(frozen=True)
class AnalyticConfig:
    """
    Immutable analytic pricing configuration.

    Attributes
    ----------
    zero_rate_threshold : float
        |r| below which the r -> 0 limit branch is used
    parity_tolerance : float
        Fixed-strike parity tolerance
    """

    zero_rate_threshold: float = ZERO_RATE_THRESHOLD
    parity_tolerance: float = LOOKBACK_PARITY_TOLERANCE


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable validation configuration.

    Attributes
    ----------
    mc_relative_tolerance : float
        Accepted relative gap between MC and closed-form prices
    """

    mc_relative_tolerance: float = MC_ANALYTIC_RELATIVE_TOLERANCE


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from lookback_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.n_paths
    20000
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    analytic: AnalyticConfig = field(default_factory=AnalyticConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)


# Singleton instance - import this
SETTINGS = Settings()
