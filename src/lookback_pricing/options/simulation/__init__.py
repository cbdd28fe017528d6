"""
Monte Carlo simulation for lookback pricing.

Provides:
- Black-Scholes and Bachelier path generation
- Reference simulators implementing the PathSimulator protocol
- Monte Carlo pricing engine and fixing-count convergence analysis
- Control-variate estimator for fixed-strike lookbacks
"""

from lookback_pricing.options.simulation.control_variate import (
    ControlVariateEstimator,
    ControlVariateResult,
    DegenerateSampleError,
)
from lookback_pricing.options.simulation.gbm import (
    BachelierParams,
    GBMParams,
    PathResult,
    generate_bachelier_paths,
    generate_brownian_increments,
    generate_gbm_paths,
    validate_gbm_simulation,
)
from lookback_pricing.options.simulation.models import (
    BachelierSimulation,
    BlackScholesParameters,
    BlackScholesSimulation,
    PathSimulator,
)
from lookback_pricing.options.simulation.monte_carlo import (
    LookbackMonteCarloEngine,
    MCResult,
    fixing_convergence_analysis,
    price_lookback_mc,
)

__all__ = [
    # Paths
    "BachelierParams",
    "GBMParams",
    "PathResult",
    "generate_bachelier_paths",
    "generate_brownian_increments",
    "generate_gbm_paths",
    "validate_gbm_simulation",
    # Simulators
    "BachelierSimulation",
    "BlackScholesParameters",
    "BlackScholesSimulation",
    "PathSimulator",
    # Monte Carlo
    "LookbackMonteCarloEngine",
    "MCResult",
    "fixing_convergence_analysis",
    "price_lookback_mc",
    # Control variate
    "ControlVariateEstimator",
    "ControlVariateResult",
    "DegenerateSampleError",
]
