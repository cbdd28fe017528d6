"""
Discretely monitored lookback prices via the Broadie-Glasserman-Kou
continuity correction.

A maximum observed on m equally spaced fixings behaves, to first order, like
a continuously observed maximum shifted down by the factor e^(-θ), with

    θ = β σ √(T / m),   β = -ζ(1/2) / √(2π) ≈ 0.5826

so the discrete price is recovered from the continuous closed form evaluated
at a shifted spot. As m -> ∞, θ -> 0 and the continuous price is recovered.

References
----------
[T1] Broadie, Glasserman & Kou (1999). Connecting discrete and continuous
     path-dependent options. Finance and Stochastics 3, 55-82.
"""

from typing import Final, Optional

import numpy as np

from lookback_pricing.options.payoffs.base import OptionType, StrikeType
from lookback_pricing.options.pricing.lookback_analytic import (
    lookback_call_floating_strike,
    lookback_put_floating_strike,
)

#: -ζ(1/2) / √(2π)
BGK_BETA: Final[float] = 0.5826


def correction_shift(volatility: float, maturity: float, fixing_count: int) -> float:
    """
    Continuity-correction shift θ = β σ √(T / m).

    Parameters
    ----------
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)
    fixing_count : int
        Number of monitoring intervals m; 0 means continuous monitoring

    Returns
    -------
    float
        θ, zero for continuous monitoring
    """
    if fixing_count < 0:
        raise ValueError(f"CRITICAL: fixing_count must be >= 0, got {fixing_count}")
    if fixing_count == 0 or maturity <= 0.0 or volatility <= 0.0:
        return 0.0
    return BGK_BETA * volatility * np.sqrt(maturity / fixing_count)


def discrete_lookback_put_floating_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    fixing_count: int,
) -> float:
    """
    Approximate price of a discretely monitored floating-strike lookback put.

    [T1] P_m = e^(-θ) P(S e^θ) + (e^(-θ) - 1) S

    Parameters
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)
    fixing_count : int
        Number of monitoring intervals; 0 returns the continuous price

    Returns
    -------
    float
        Approximate discrete-monitoring price
    """
    theta = correction_shift(volatility, maturity, fixing_count)
    continuous = lookback_put_floating_strike(spot * np.exp(theta), rate, volatility, maturity)
    return float(np.exp(-theta) * continuous + (np.exp(-theta) - 1.0) * spot)


def discrete_lookback_call_floating_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    fixing_count: int,
) -> float:
    """
    Approximate price of a discretely monitored floating-strike lookback call.

    [T1] C_m = e^θ C(S e^(-θ)) - (e^θ - 1) S

    Parameters
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)
    fixing_count : int
        Number of monitoring intervals; 0 returns the continuous price

    Returns
    -------
    float
        Approximate discrete-monitoring price
    """
    theta = correction_shift(volatility, maturity, fixing_count)
    continuous = lookback_call_floating_strike(spot * np.exp(-theta), rate, volatility, maturity)
    return float(np.exp(theta) * continuous - (np.exp(theta) - 1.0) * spot)


def discrete_lookback_call_fixed_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    strike: float,
    fixing_count: int,
) -> float:
    """
    Approximate price of a discretely monitored fixed-strike lookback call.

    [T1] C_m(K) = P_m,float(max(S, K)) + S - K e^(-rT)
    """
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    if maturity <= 0.0 or volatility <= 0.0:
        return 0.0

    floating_put = discrete_lookback_put_floating_strike(
        max(spot, strike), rate, volatility, maturity, fixing_count
    )
    return floating_put + spot - strike * np.exp(-rate * maturity)


def discrete_lookback_put_fixed_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    strike: float,
    fixing_count: int,
) -> float:
    """
    Approximate price of a discretely monitored fixed-strike lookback put.

    [T1] P_m(K) = C_m,float(min(S, K)) + K e^(-rT) - S
    """
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    if maturity <= 0.0 or volatility <= 0.0:
        return 0.0

    floating_call = discrete_lookback_call_floating_strike(
        min(spot, strike), rate, volatility, maturity, fixing_count
    )
    return floating_call + strike * np.exp(-rate * maturity) - spot


def discrete_lookback_price(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
    strike_type: StrikeType,
    fixing_count: int,
    strike: Optional[float] = None,
) -> float:
    """
    Approximate discretely monitored price of any lookback flavour.

    Parameters
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)
    option_type : OptionType
        Call or put
    strike_type : StrikeType
        Fixed or floating
    fixing_count : int
        Number of monitoring intervals; 0 returns the continuous price
    strike : float, optional
        Strike, required for fixed-strike contracts

    Returns
    -------
    float
        Approximate option price
    """
    if strike_type == StrikeType.FLOATING:
        if option_type == OptionType.CALL:
            return discrete_lookback_call_floating_strike(
                spot, rate, volatility, maturity, fixing_count
            )
        return discrete_lookback_put_floating_strike(
            spot, rate, volatility, maturity, fixing_count
        )

    if strike is None:
        raise ValueError("CRITICAL: fixed-strike lookback requires a strike")
    if option_type == OptionType.CALL:
        return discrete_lookback_call_fixed_strike(
            spot, rate, volatility, maturity, strike, fixing_count
        )
    return discrete_lookback_put_fixed_strike(
        spot, rate, volatility, maturity, strike, fixing_count
    )
