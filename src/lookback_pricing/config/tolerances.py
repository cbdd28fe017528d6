"""
Centralized tolerance framework for lookback option pricing.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Asymptotic): Continuity-correction and limit-branch agreement
    Tier 3 (Stochastic): CLT-derived, path-dependent calculations

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
    [T1] Broadie, Glasserman & Kou (1999) "Connecting discrete and continuous
         path-dependent options"
"""

import numpy as np
from typing import Final

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds: lookback prices are non-negative
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: |r| below this switches the floating-strike formulas to the r -> 0 limit.
#: The general branch carries a σ²/(2r) prefactor.
ZERO_RATE_THRESHOLD: Final[float] = 1e-8

#: Fixed-strike parity identity (exact algebra, float64 accumulation only)
LOOKBACK_PARITY_TOLERANCE: Final[float] = 1e-8

#: Agreement of limit and general branches at |r| = ZERO_RATE_THRESHOLD.
#: Cancellation in the general branch costs ~eps / threshold relative digits.
RATE_CONTINUITY_TOLERANCE: Final[float] = 1e-5

#: Published textbook values quoted to two decimals
HULL_EXAMPLE_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Tier 2: Asymptotic Tolerances
# =============================================================================

#: Corrected price vs continuous price once θ = β σ √(T/m) is negligible
CONTINUITY_CORRECTION_LIMIT_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated relative volatility of payoff
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(10_000), 4)
    0.006
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: Continuously monitored MC (full grid) vs closed form, relative.
#: The grid misses the extremum between steps, so a discretization bias of
#: order β σ √dt adds to the sampling error.
MC_ANALYTIC_RELATIVE_TOLERANCE: Final[float] = 0.05

#: Discretely monitored MC vs continuity-corrected analytic, relative
MC_CORRECTED_RELATIVE_TOLERANCE: Final[float] = 0.05


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "zero_rate_threshold": ZERO_RATE_THRESHOLD,
    "lookback_parity": LOOKBACK_PARITY_TOLERANCE,
    "rate_continuity": RATE_CONTINUITY_TOLERANCE,
    "hull_example": HULL_EXAMPLE_TOLERANCE,
    # Tier 2: Asymptotic
    "continuity_correction_limit": CONTINUITY_CORRECTION_LIMIT_TOLERANCE,
    # Tier 3: Stochastic
    "mc_analytic_relative": MC_ANALYTIC_RELATIVE_TOLERANCE,
    "mc_corrected_relative": MC_CORRECTED_RELATIVE_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
