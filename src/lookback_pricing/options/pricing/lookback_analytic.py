"""
Closed-form prices of continuously monitored lookback options.

Black-Scholes dynamics, no dividends, contract starting today so the running
extremum is initialised at the spot.

References
----------
[T1] Goldman, Sosin & Gatto (1979). Path dependent options: buy at the low,
     sell at the high.
[T1] Conze & Viswanathan (1991). Path dependent options: the case of
     lookback options.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives, Ch. 26.
"""

from typing import Optional

import numpy as np
from scipy import stats

from lookback_pricing.config.settings import SETTINGS
from lookback_pricing.options.payoffs.base import OptionType, StrikeType


def _is_degenerate(volatility: float, maturity: float) -> bool:
    """No optionality left when there is no time or no diffusion."""
    return maturity <= 0.0 or volatility <= 0.0


def lookback_call_floating_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
) -> float:
    """
    Price a continuously monitored floating-strike lookback call.

    [T1] With d = (r + σ²/2)√T / σ:
         C = S N(d) - S e^(-rT) N(d - σ√T)
             + S e^(-rT) σ²/(2r) [N(-d + 2r√T/σ) - e^(rT) N(-d)]

    [T1] Limit r -> 0, with a = σ√T / 2:
         C = S [N(a) - N(-a)] + S [σ√T n(a) - σ²T/2 N(-a)]

    Parameters
    ----------
    spot : float
        Current spot price (also the running minimum)
    rate : float
        Risk-free rate (decimal, any sign)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)

    Returns
    -------
    float
        Call price, 0 when maturity or volatility is non-positive

    Examples
    --------
    >>> price = lookback_call_floating_strike(100.0, 0.1, 0.3, 0.5)
    >>> print(f"Price: {price:.4f}")
    """
    if _is_degenerate(volatility, maturity):
        return 0.0

    sqrt_t = np.sqrt(maturity)
    vol_sqrt_t = volatility * sqrt_t

    if abs(rate) < SETTINGS.analytic.zero_rate_threshold:
        a = 0.5 * vol_sqrt_t
        n_a = stats.norm.pdf(a)
        N_a = stats.norm.cdf(a)
        N_neg_a = stats.norm.cdf(-a)

        base = spot * (N_a - N_neg_a)
        # Limit of the σ²/(2r) term
        limit_term = spot * (vol_sqrt_t * n_a - 0.5 * volatility**2 * maturity * N_neg_a)
        return float(base + limit_term)

    discount = np.exp(-rate * maturity)
    d = (rate + 0.5 * volatility**2) * sqrt_t / volatility

    term1 = spot * stats.norm.cdf(d)
    term2 = -discount * spot * stats.norm.cdf(d - vol_sqrt_t)
    bracket = stats.norm.cdf(-d + 2.0 * rate * sqrt_t / volatility) - np.exp(
        rate * maturity
    ) * stats.norm.cdf(-d)
    term3 = discount * volatility**2 / (2.0 * rate) * spot * bracket

    return float(term1 + term2 + term3)


def lookback_put_floating_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
) -> float:
    """
    Price a continuously monitored floating-strike lookback put.

    [T1] With d = (r + σ²/2)√T / σ:
         P = -S N(-d) + S e^(-rT) N(-d + σ√T)
             + S e^(-rT) σ²/(2r) [e^(rT) N(d) - N(d - 2r√T/σ)]

    [T1] Limit r -> 0, with a = σ√T / 2:
         P = S [N(a) - N(-a)] + S [σ√T n(a) + σ²T/2 N(a)]

    Parameters
    ----------
    spot : float
        Current spot price (also the running maximum)
    rate : float
        Risk-free rate (decimal, any sign)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity (years)

    Returns
    -------
    float
        Put price, 0 when maturity or volatility is non-positive
    """
    if _is_degenerate(volatility, maturity):
        return 0.0

    sqrt_t = np.sqrt(maturity)
    vol_sqrt_t = volatility * sqrt_t

    if abs(rate) < SETTINGS.analytic.zero_rate_threshold:
        a = 0.5 * vol_sqrt_t
        n_a = stats.norm.pdf(a)
        N_a = stats.norm.cdf(a)
        N_neg_a = stats.norm.cdf(-a)

        base = spot * (N_a - N_neg_a)
        limit_term = spot * (vol_sqrt_t * n_a + 0.5 * volatility**2 * maturity * N_a)
        return float(base + limit_term)

    discount = np.exp(-rate * maturity)
    d = (rate + 0.5 * volatility**2) * sqrt_t / volatility

    term1 = -spot * stats.norm.cdf(-d)
    term2 = discount * spot * stats.norm.cdf(-d + vol_sqrt_t)
    bracket = np.exp(rate * maturity) * stats.norm.cdf(d) - stats.norm.cdf(
        d - 2.0 * rate * sqrt_t / volatility
    )
    term3 = discount * volatility**2 / (2.0 * rate) * spot * bracket

    return float(term1 + term2 + term3)


def lookback_call_fixed_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    strike: float,
) -> float:
    """
    Price a continuously monitored fixed-strike lookback call.

    [T1] Lookback parity (Hull Ch. 26):
         C_fixed(K) = P_float(max(S, K)) + S - K e^(-rT)

    The floating put is struck at the running maximum reset to max(S, K).
    """
    _validate_strike(strike)
    if _is_degenerate(volatility, maturity):
        return 0.0

    reset_max = max(spot, strike)
    floating_put = lookback_put_floating_strike(reset_max, rate, volatility, maturity)
    return floating_put + spot - strike * np.exp(-rate * maturity)


def lookback_put_fixed_strike(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    strike: float,
) -> float:
    """
    Price a continuously monitored fixed-strike lookback put.

    [T1] Lookback parity (Hull Ch. 26):
         P_fixed(K) = C_float(min(S, K)) + K e^(-rT) - S
    """
    _validate_strike(strike)
    if _is_degenerate(volatility, maturity):
        return 0.0

    reset_min = min(spot, strike)
    floating_call = lookback_call_floating_strike(reset_min, rate, volatility, maturity)
    return floating_call + strike * np.exp(-rate * maturity) - spot


def lookback_price(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
    strike_type: StrikeType,
    strike: Optional[float] = None,
) -> float:
    """
    Price a continuously monitored lookback of any flavour.

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
    strike : float, optional
        Strike, required for fixed-strike contracts

    Returns
    -------
    float
        Option price
    """
    if strike_type == StrikeType.FLOATING:
        if option_type == OptionType.CALL:
            return lookback_call_floating_strike(spot, rate, volatility, maturity)
        return lookback_put_floating_strike(spot, rate, volatility, maturity)

    if strike is None:
        raise ValueError("CRITICAL: fixed-strike lookback requires a strike")
    if option_type == OptionType.CALL:
        return lookback_call_fixed_strike(spot, rate, volatility, maturity, strike)
    return lookback_put_fixed_strike(spot, rate, volatility, maturity, strike)


def fixed_strike_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    strike: float,
    tolerance: Optional[float] = None,
) -> tuple[bool, float]:
    """
    Verify the fixed-strike lookback call/put difference.

    [T1] C - P = P_float(max(S, K)) - C_float(min(S, K)) + 2S - 2K e^(-rT)

    Parameters
    ----------
    call_price : float
        Fixed-strike lookback call price
    put_price : float
        Fixed-strike lookback put price
    spot : float
        Spot price
    rate : float
        Risk-free rate
    volatility : float
        Volatility
    maturity : float
        Time to maturity
    strike : float
        Fixed strike
    tolerance : float, optional
        Acceptable error. Defaults to SETTINGS.analytic.parity_tolerance

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    if tolerance is None:
        tolerance = SETTINGS.analytic.parity_tolerance

    expected_diff = (
        lookback_put_floating_strike(max(spot, strike), rate, volatility, maturity)
        - lookback_call_floating_strike(min(spot, strike), rate, volatility, maturity)
        + 2.0 * spot
        - 2.0 * strike * np.exp(-rate * maturity)
    )
    error = abs((call_price - put_price) - expected_diff)
    return error < tolerance, error


def _validate_strike(strike: float) -> None:
    """Validate fixed strike."""
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
