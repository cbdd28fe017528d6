"""
Closed-form lookback pricing.

Provides:
- Continuous-monitoring prices for the four lookback flavours,
  with the r -> 0 limit handled analytically
- Broadie-Glasserman-Kou continuity correction for discrete monitoring
"""

from lookback_pricing.options.pricing.continuity_correction import (
    BGK_BETA,
    correction_shift,
    discrete_lookback_call_fixed_strike,
    discrete_lookback_call_floating_strike,
    discrete_lookback_price,
    discrete_lookback_put_fixed_strike,
    discrete_lookback_put_floating_strike,
)
from lookback_pricing.options.pricing.lookback_analytic import (
    fixed_strike_parity_check,
    lookback_call_fixed_strike,
    lookback_call_floating_strike,
    lookback_price,
    lookback_put_fixed_strike,
    lookback_put_floating_strike,
)

__all__ = [
    # Continuous monitoring
    "fixed_strike_parity_check",
    "lookback_call_fixed_strike",
    "lookback_call_floating_strike",
    "lookback_price",
    "lookback_put_fixed_strike",
    "lookback_put_floating_strike",
    # Discrete monitoring
    "BGK_BETA",
    "correction_shift",
    "discrete_lookback_call_fixed_strike",
    "discrete_lookback_call_floating_strike",
    "discrete_lookback_price",
    "discrete_lookback_put_fixed_strike",
    "discrete_lookback_put_floating_strike",
]
