"""
Reference path simulators.

The lookback products consume paths through the PathSimulator protocol only:
asset values, numeraire and Monte Carlo weights per time, the time grid,
and constant broadcast. Any Monte Carlo engine exposing these methods can
price the products; the two classes below wrap pre-generated paths.

Model introspection is an explicit capability: black_scholes_parameters()
returns the model's rate and volatility for Black-Scholes dynamics and None
for anything else.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from lookback_pricing.options.simulation.gbm import (
    BachelierParams,
    GBMParams,
    PathResult,
    generate_bachelier_paths,
    generate_gbm_paths,
)

logger = logging.getLogger(__name__)

#: Grid lookup tolerance, relative to the horizon
_TIME_TOLERANCE = 1e-12


@dataclass(frozen=True)
class BlackScholesParameters:
    """
    Constant parameters of Black-Scholes dynamics.

    Attributes
    ----------
    rate : float
        Risk-free rate
    volatility : float
        Lognormal volatility
    """

    rate: float
    volatility: float


@runtime_checkable
class PathSimulator(Protocol):
    """Interface of a Monte Carlo simulation consumed by lookback products."""

    @property
    def n_paths(self) -> int: ...

    def time_discretization(self) -> np.ndarray: ...

    def asset_value(self, time: float, underlying_index: int = 0) -> np.ndarray: ...

    def numeraire(self, time: float) -> np.ndarray: ...

    def monte_carlo_weights(self, time: float) -> np.ndarray: ...

    def constant_vector(self, value: float) -> np.ndarray: ...

    def black_scholes_parameters(self) -> Optional[BlackScholesParameters]: ...


class _PathSimulation:
    """
    Single-asset simulation backed by a PathResult.

    Numeraire is the bank account e^(rt); each path carries weight 1/n_paths.
    """

    def __init__(self, result: PathResult):
        self.result = result
        self._times = np.asarray(result.times, dtype=float)
        self._rate = result.params.rate

    @property
    def n_paths(self) -> int:
        """Number of simulated paths."""
        return self.result.n_paths

    @property
    def horizon(self) -> float:
        """Last simulated time."""
        return float(self._times[-1])

    def time_discretization(self) -> np.ndarray:
        """Simulation times, a copy of the grid."""
        return self._times.copy()

    def time_index(self, time: float) -> int:
        """
        Grid index used for time: the last grid time not after it.

        Raises
        ------
        ValueError
            If time lies outside [0, horizon]
        """
        tol = _TIME_TOLERANCE * max(self.horizon, 1.0)
        if time < self._times[0] - tol or time > self.horizon + tol:
            raise ValueError(
                f"CRITICAL: time {time} outside simulated range [{self._times[0]}, {self.horizon}]"
            )
        index = int(np.searchsorted(self._times, time + tol, side="right")) - 1
        return max(index, 0)

    def asset_value(self, time: float, underlying_index: int = 0) -> np.ndarray:
        """Simulated asset value at time for all paths."""
        if underlying_index != 0:
            raise ValueError(
                f"CRITICAL: single-asset simulation, got underlying_index={underlying_index}"
            )
        return self.result.paths[:, self.time_index(time)]

    def numeraire(self, time: float) -> np.ndarray:
        """Bank account numeraire e^(rt) for all paths."""
        return self.constant_vector(np.exp(self._rate * time))

    def monte_carlo_weights(self, time: float) -> np.ndarray:
        """Equal path weights 1/n_paths."""
        return self.constant_vector(1.0 / self.n_paths)

    def constant_vector(self, value: float) -> np.ndarray:
        """Broadcast a scalar to every path."""
        return np.full(self.n_paths, value, dtype=float)

    def black_scholes_parameters(self) -> Optional[BlackScholesParameters]:
        """Black-Scholes parameters, or None for other dynamics."""
        return None


class BlackScholesSimulation(_PathSimulation):
    """
    Black-Scholes Monte Carlo simulation.

    Examples
    --------
    >>> params = GBMParams(spot=100.0, rate=0.1, volatility=0.3, horizon=0.5)
    >>> simulation = BlackScholesSimulation.simulate(params, n_paths=20000, n_steps=1000, seed=1897)
    >>> simulation.asset_value(0.5).shape
    (20000,)
    """

    def __init__(self, result: PathResult):
        if not isinstance(result.params, GBMParams):
            raise TypeError(
                f"BlackScholesSimulation requires GBMParams, got {type(result.params).__name__}"
            )
        super().__init__(result)

    @classmethod
    def simulate(
        cls,
        params: GBMParams,
        n_paths: int,
        n_steps: int,
        seed: Optional[int] = None,
        antithetic: bool = False,
        increments: Optional[np.ndarray] = None,
    ) -> "BlackScholesSimulation":
        """Generate paths and wrap them."""
        logger.debug(
            "Simulating %d Black-Scholes paths on %d steps (seed=%s)", n_paths, n_steps, seed
        )
        return cls(generate_gbm_paths(params, n_paths, n_steps, seed, antithetic, increments))

    def black_scholes_parameters(self) -> Optional[BlackScholesParameters]:
        """Rate and volatility of the simulated dynamics."""
        params = self.result.params
        return BlackScholesParameters(rate=params.rate, volatility=params.volatility)


class BachelierSimulation(_PathSimulation):
    """
    Bachelier Monte Carlo simulation.

    Not of Black-Scholes type, so black_scholes_parameters() returns None.
    """

    def __init__(self, result: PathResult):
        if not isinstance(result.params, BachelierParams):
            raise TypeError(
                f"BachelierSimulation requires BachelierParams, got {type(result.params).__name__}"
            )
        super().__init__(result)

    @classmethod
    def simulate(
        cls,
        params: BachelierParams,
        n_paths: int,
        n_steps: int,
        seed: Optional[int] = None,
        antithetic: bool = False,
        increments: Optional[np.ndarray] = None,
    ) -> "BachelierSimulation":
        """Generate paths and wrap them."""
        logger.debug(
            "Simulating %d Bachelier paths on %d steps (seed=%s)", n_paths, n_steps, seed
        )
        return cls(generate_bachelier_paths(params, n_paths, n_steps, seed, antithetic, increments))
