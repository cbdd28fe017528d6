"""
Monte Carlo lookback pricing engine.

Turns per-path time-0 values of a product into a price with standard error
and confidence interval, and compares discretely monitored Monte Carlo
prices with their continuity-corrected and continuous closed forms.

[T1] MC converges to the expected discounted payoff at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence

import numpy as np
import pandas as pd

from lookback_pricing.config.settings import SETTINGS
from lookback_pricing.options.payoffs.base import OptionSpec, OptionType, StrikeType
from lookback_pricing.options.payoffs.lookback import LookbackOption
from lookback_pricing.options.pricing.continuity_correction import discrete_lookback_price
from lookback_pricing.options.pricing.lookback_analytic import lookback_price
from lookback_pricing.options.simulation.gbm import GBMParams
from lookback_pricing.options.simulation.models import BlackScholesSimulation, PathSimulator

logger = logging.getLogger(__name__)


class MonteCarloProduct(Protocol):
    """Anything valued path by path on a simulator."""

    def value(self, evaluation_time: float, simulator: PathSimulator) -> np.ndarray: ...


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Option price (mean of per-path time-0 values)
    standard_error : float
        Standard error of the estimate
    confidence_interval : tuple[float, float]
        95% confidence interval
    n_paths : int
        Number of paths used
    values : np.ndarray
        Per-path discounted values at time 0
    """

    price: float
    standard_error: float
    confidence_interval: tuple[float, float]
    n_paths: int
    values: np.ndarray

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of 95% confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


class LookbackMonteCarloEngine:
    """
    Monte Carlo pricing engine over one simulation.

    Every product priced by the same engine sees the same paths, so price
    differences between products are free of independent sampling noise.

    Parameters
    ----------
    simulator : PathSimulator
        Source of paths, numeraire and weights

    Examples
    --------
    >>> params = GBMParams(spot=100.0, rate=0.1, volatility=0.3, horizon=0.5)
    >>> engine = LookbackMonteCarloEngine(
    ...     BlackScholesSimulation.simulate(params, n_paths=20000, n_steps=1000, seed=1897)
    ... )
    >>> result = engine.price(LookbackOption.call_fixed_strike(0.5, 100.0))  # doctest: +SKIP
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")  # doctest: +SKIP
    """

    def __init__(self, simulator: PathSimulator):
        self.simulator = simulator

    def price(self, product: MonteCarloProduct) -> MCResult:
        """
        Price a product from its per-path time-0 values.

        Parameters
        ----------
        product : MonteCarloProduct
            Object exposing value(evaluation_time, simulator)

        Returns
        -------
        MCResult
            Monte Carlo pricing result
        """
        values = np.asarray(product.value(0.0, self.simulator), dtype=float)
        result = self._compute_result(values)
        logger.debug(
            "Priced %r: %.6f ± %.6f on %d paths",
            product,
            result.price,
            result.standard_error,
            result.n_paths,
        )
        return result

    def price_spec(self, spec: OptionSpec) -> MCResult:
        """Price the plain Monte Carlo lookback described by spec."""
        return self.price(LookbackOption(spec))

    def price_multiple(self, specs: Sequence[OptionSpec]) -> pd.DataFrame:
        """
        Price several lookbacks on the same paths.

        Parameters
        ----------
        specs : Sequence[OptionSpec]
            Contracts to price

        Returns
        -------
        pd.DataFrame
            One row per contract; contracts the simulator cannot value
            carry an "error" entry instead of prices
        """
        rows = []
        for spec in specs:
            row = {
                "option_type": spec.option_type.value,
                "strike_type": spec.strike_type.value,
                "strike": spec.strike,
                "maturity": spec.maturity,
                "monitoring_count": spec.monitoring_count,
            }
            try:
                result = self.price_spec(spec)
            except ValueError as e:
                logger.warning("Could not price %r: %s", spec, e)
                row["error"] = str(e)
            else:
                row.update({
                    "price": result.price,
                    "standard_error": result.standard_error,
                    "ci_lower": result.confidence_interval[0],
                    "ci_upper": result.confidence_interval[1],
                })
            rows.append(row)

        return pd.DataFrame(rows)

    @staticmethod
    def _compute_result(values: np.ndarray) -> MCResult:
        """
        Compute MC result from per-path time-0 values.

        Parameters
        ----------
        values : np.ndarray
            Discounted per-path values

        Returns
        -------
        MCResult
            Complete MC result with statistics
        """
        n = len(values)
        if n == 0:
            raise ValueError("CRITICAL: no path values to average")

        price = float(values.mean())
        se = float(values.std(ddof=1) / np.sqrt(n)) if n > 1 else 0.0

        # 95% confidence interval (z = 1.96)
        ci_lower = price - 1.96 * se
        ci_upper = price + 1.96 * se

        return MCResult(
            price=price,
            standard_error=se,
            confidence_interval=(ci_lower, ci_upper),
            n_paths=n,
            values=values,
        )


def price_lookback_mc(
    spot: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
    strike_type: StrikeType,
    strike: Optional[float] = None,
    monitoring_count: int = 0,
    n_paths: Optional[int] = None,
    n_steps: Optional[int] = None,
    seed: Optional[int] = None,
) -> MCResult:
    """
    Convenience function to price a lookback via Black-Scholes MC.

    Parameters
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to maturity in years (also the simulation horizon)
    option_type : OptionType
        CALL or PUT
    strike_type : StrikeType
        FIXED or FLOATING
    strike : float, optional
        Strike for fixed-strike contracts
    monitoring_count : int, default 0
        0 for the full grid, n > 0 for n + 1 fixings
    n_paths : int, optional
        Number of paths (default from SETTINGS)
    n_steps : int, optional
        Number of time steps (default from SETTINGS)
    seed : int, optional
        Random seed (default from SETTINGS)

    Returns
    -------
    MCResult
        Monte Carlo pricing result
    """
    config = SETTINGS.simulation
    params = GBMParams(spot=spot, rate=rate, volatility=volatility, horizon=maturity)
    simulation = BlackScholesSimulation.simulate(
        params,
        n_paths=n_paths if n_paths is not None else config.n_paths,
        n_steps=n_steps if n_steps is not None else config.n_steps,
        seed=seed if seed is not None else config.seed,
        antithetic=config.antithetic,
    )
    spec = OptionSpec(
        maturity=maturity,
        option_type=option_type,
        strike_type=strike_type,
        strike=strike,
        monitoring_count=monitoring_count,
    )
    return LookbackMonteCarloEngine(simulation).price_spec(spec)


def fixing_convergence_analysis(
    simulator: PathSimulator,
    maturity: float,
    option_type: OptionType,
    strike_type: StrikeType,
    fixing_counts: Iterable[int],
    strike: Optional[float] = None,
) -> dict:
    """
    Compare discrete-monitoring prices across fixing counts.

    For each fixing count m the Monte Carlo price on m + 1 fixings is set
    against the continuity-corrected closed form and the continuous closed
    form. As m grows both discrete prices approach the continuous ones.

    Parameters
    ----------
    simulator : PathSimulator
        Black-Scholes simulation whose horizon equals maturity
    maturity : float
        Option maturity
    option_type : OptionType
        Call or put
    strike_type : StrikeType
        Fixed or floating
    fixing_counts : Iterable[int]
        Positive fixing counts to test
    strike : float, optional
        Strike for fixed-strike contracts

    Returns
    -------
    dict
        "results" rows, plus the continuous MC and closed-form prices
    """
    parameters = simulator.black_scholes_parameters()
    if parameters is None:
        raise ValueError("CRITICAL: fixing convergence analysis needs Black-Scholes dynamics")

    spot = float(np.mean(simulator.asset_value(0.0)))
    engine = LookbackMonteCarloEngine(simulator)
    base = OptionSpec(maturity, option_type, strike_type, strike)

    continuous_analytic = lookback_price(
        spot, parameters.rate, parameters.volatility, maturity, option_type, strike_type, strike
    )
    continuous_mc = engine.price_spec(base).price

    results = []
    for m in fixing_counts:
        if m <= 0:
            raise ValueError(f"CRITICAL: fixing counts must be > 0, got {m}")
        mc_result = engine.price_spec(OptionSpec(maturity, option_type, strike_type, strike, 0, m))
        corrected = discrete_lookback_price(
            spot,
            parameters.rate,
            parameters.volatility,
            maturity,
            option_type,
            strike_type,
            m,
            strike,
        )
        results.append(
            {
                "fixing_count": m,
                "mc_price": mc_result.price,
                "standard_error": mc_result.standard_error,
                "corrected_analytic_price": corrected,
                "continuous_analytic_price": continuous_analytic,
                "corrected_error": abs(mc_result.price - corrected),
                "continuous_error": abs(mc_result.price - continuous_analytic),
            }
        )

    return {
        "results": results,
        "continuous_mc_price": continuous_mc,
        "continuous_analytic_price": continuous_analytic,
    }
