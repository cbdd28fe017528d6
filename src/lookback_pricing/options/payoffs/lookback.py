"""
Monte Carlo lookback products.

One product class covers the four flavours (call/put x fixed/floating);
the flavour selects a payoff rule, while monitoring-grid construction and
extremum tracking are shared (see monitoring.py).

Discounting follows the numeraire convention of the simulator:

    V(t) = payoff / N(T) * w(T) * N(t) / w(t)

where N is the numeraire and w the per-path Monte Carlo weights.
"""

from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from lookback_pricing.options.payoffs.base import (
    OptionSpec,
    OptionType,
    StrikeType,
)
from lookback_pricing.options.payoffs.monitoring import (
    build_monitoring_times,
    running_extremum,
)

if TYPE_CHECKING:
    from lookback_pricing.options.simulation.models import PathSimulator

#: (extremum, terminal value, strike) -> undiscounted payoff per path
PayoffRule = Callable[[np.ndarray, np.ndarray, Optional[float]], np.ndarray]


def _floating_call(running_min: np.ndarray, terminal: np.ndarray, strike: Optional[float]) -> np.ndarray:
    return np.maximum(terminal - running_min, 0.0)


def _floating_put(running_max: np.ndarray, terminal: np.ndarray, strike: Optional[float]) -> np.ndarray:
    return np.maximum(running_max - terminal, 0.0)


def _fixed_call(running_max: np.ndarray, terminal: np.ndarray, strike: Optional[float]) -> np.ndarray:
    return np.maximum(running_max - strike, 0.0)


def _fixed_put(running_min: np.ndarray, terminal: np.ndarray, strike: Optional[float]) -> np.ndarray:
    return np.maximum(strike - running_min, 0.0)


PAYOFF_RULES: dict[tuple[OptionType, StrikeType], PayoffRule] = {
    (OptionType.CALL, StrikeType.FLOATING): _floating_call,
    (OptionType.PUT, StrikeType.FLOATING): _floating_put,
    (OptionType.CALL, StrikeType.FIXED): _fixed_call,
    (OptionType.PUT, StrikeType.FIXED): _fixed_put,
}


class LookbackOption:
    """
    Monte Carlo lookback option valued on externally simulated paths.

    Parameters
    ----------
    spec : OptionSpec
        Contract description (flavour, maturity, strike, monitoring)

    Examples
    --------
    >>> spec = OptionSpec(maturity=0.5, option_type=OptionType.CALL,
    ...                   strike_type=StrikeType.FIXED, strike=100.0)
    >>> option = LookbackOption(spec)
    >>> values = option.value(0.0, simulator)  # doctest: +SKIP
    >>> price = values.mean()  # doctest: +SKIP
    """

    def __init__(self, spec: OptionSpec):
        self.spec = spec
        self._rule = PAYOFF_RULES[(spec.option_type, spec.strike_type)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.spec!r})"

    def monitoring_times(self, simulator: "PathSimulator") -> np.ndarray:
        """Times at which the running extremum is sampled."""
        return build_monitoring_times(
            self.spec.monitoring_count, simulator.time_discretization()
        )

    def payoff(self, simulator: "PathSimulator") -> np.ndarray:
        """
        Undiscounted payoff at maturity, per path.

        Parameters
        ----------
        simulator : PathSimulator
            Source of asset values

        Returns
        -------
        np.ndarray
            Payoff per path, shape (n_paths,)
        """
        spec = self.spec
        extremum = running_extremum(
            spec.extremum,
            self.monitoring_times(simulator),
            simulator,
            spec.underlying_index,
        )
        terminal = simulator.asset_value(spec.maturity, spec.underlying_index)
        return self._rule(extremum, terminal, spec.strike)

    def value(self, evaluation_time: float, simulator: "PathSimulator") -> np.ndarray:
        """
        Discounted value at evaluation_time, per path.

        [T1] V(t) = payoff / N(T) * w(T) * N(t) / w(t)

        Parameters
        ----------
        evaluation_time : float
            Time at which the value is expressed, 0 <= t <= maturity
        simulator : PathSimulator
            Source of asset values, numeraire and weights

        Returns
        -------
        np.ndarray
            Value per path; its mean is the price when evaluation_time == 0

        Raises
        ------
        ValueError
            If evaluation_time is negative or after maturity
        """
        maturity = self.spec.maturity
        if evaluation_time < 0:
            raise ValueError(f"CRITICAL: evaluation_time must be >= 0, got {evaluation_time}")
        if evaluation_time > maturity:
            raise ValueError(
                f"CRITICAL: evaluation_time {evaluation_time} is after maturity {maturity}"
            )

        values = self.payoff(simulator)

        # Discount payoff from maturity into the normalized measure...
        values = values / simulator.numeraire(maturity) * simulator.monte_carlo_weights(maturity)

        # ...and re-express it at the evaluation time
        return (
            values
            * simulator.numeraire(evaluation_time)
            / simulator.monte_carlo_weights(evaluation_time)
        )

    def price(self, simulator: "PathSimulator") -> float:
        """Time-0 price: sample mean of value(0, simulator)."""
        return float(np.mean(self.value(0.0, simulator)))

    @classmethod
    def call_fixed_strike(
        cls,
        maturity: float,
        strike: float,
        monitoring_count: int = 0,
        underlying_index: int = 0,
    ) -> "LookbackOption":
        """Fixed-strike lookback call: max(max S - K, 0)."""
        return cls(OptionSpec(maturity, OptionType.CALL, StrikeType.FIXED, strike,
                              underlying_index, monitoring_count))

    @classmethod
    def put_fixed_strike(
        cls,
        maturity: float,
        strike: float,
        monitoring_count: int = 0,
        underlying_index: int = 0,
    ) -> "LookbackOption":
        """Fixed-strike lookback put: max(K - min S, 0)."""
        return cls(OptionSpec(maturity, OptionType.PUT, StrikeType.FIXED, strike,
                              underlying_index, monitoring_count))

    @classmethod
    def call_floating_strike(
        cls,
        maturity: float,
        monitoring_count: int = 0,
        underlying_index: int = 0,
    ) -> "LookbackOption":
        """Floating-strike lookback call: S(T) - min S."""
        return cls(OptionSpec(maturity, OptionType.CALL, StrikeType.FLOATING, None,
                              underlying_index, monitoring_count))

    @classmethod
    def put_floating_strike(
        cls,
        maturity: float,
        monitoring_count: int = 0,
        underlying_index: int = 0,
    ) -> "LookbackOption":
        """Floating-strike lookback put: max S - S(T)."""
        return cls(OptionSpec(maturity, OptionType.PUT, StrikeType.FLOATING, None,
                              underlying_index, monitoring_count))
