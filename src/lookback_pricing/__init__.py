"""
lookback-pricing: Analytic and Monte Carlo pricing of lookback options.

Quick Start
-----------
>>> from lookback_pricing import lookback_call_fixed_strike, discrete_lookback_call_fixed_strike
>>> continuous = lookback_call_fixed_strike(100.0, 0.1, 0.3, 0.5, 100.0)
>>> discrete = discrete_lookback_call_fixed_strike(100.0, 0.1, 0.3, 0.5, 100.0, 1000)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Contracts
# =============================================================================
from lookback_pricing.options.payoffs.base import (
    MarketParams,
    OptionSpec,
    OptionType,
    StrikeType,
)
from lookback_pricing.options.payoffs.lookback import LookbackOption
from lookback_pricing.options.payoffs.monitoring import (
    build_monitoring_times,
    running_max,
    running_min,
)

# =============================================================================
# Closed-form Pricing
# =============================================================================
from lookback_pricing.options.pricing import (
    BGK_BETA,
    discrete_lookback_call_fixed_strike,
    discrete_lookback_call_floating_strike,
    discrete_lookback_price,
    discrete_lookback_put_fixed_strike,
    discrete_lookback_put_floating_strike,
    fixed_strike_parity_check,
    lookback_call_fixed_strike,
    lookback_call_floating_strike,
    lookback_price,
    lookback_put_fixed_strike,
    lookback_put_floating_strike,
)

# =============================================================================
# Monte Carlo
# =============================================================================
from lookback_pricing.options.simulation import (
    BachelierParams,
    BachelierSimulation,
    BlackScholesSimulation,
    ControlVariateEstimator,
    ControlVariateResult,
    DegenerateSampleError,
    GBMParams,
    LookbackMonteCarloEngine,
    MCResult,
    PathSimulator,
    fixing_convergence_analysis,
    price_lookback_mc,
)

# =============================================================================
# Configuration
# =============================================================================
from lookback_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Contracts
    "MarketParams",
    "OptionSpec",
    "OptionType",
    "StrikeType",
    "LookbackOption",
    "build_monitoring_times",
    "running_max",
    "running_min",
    # Closed form
    "BGK_BETA",
    "discrete_lookback_call_fixed_strike",
    "discrete_lookback_call_floating_strike",
    "discrete_lookback_price",
    "discrete_lookback_put_fixed_strike",
    "discrete_lookback_put_floating_strike",
    "fixed_strike_parity_check",
    "lookback_call_fixed_strike",
    "lookback_call_floating_strike",
    "lookback_price",
    "lookback_put_fixed_strike",
    "lookback_put_floating_strike",
    # Monte Carlo
    "BachelierParams",
    "BachelierSimulation",
    "BlackScholesSimulation",
    "ControlVariateEstimator",
    "ControlVariateResult",
    "DegenerateSampleError",
    "GBMParams",
    "LookbackMonteCarloEngine",
    "MCResult",
    "PathSimulator",
    "fixing_convergence_analysis",
    "price_lookback_mc",
    # Config
    "SETTINGS",
]
