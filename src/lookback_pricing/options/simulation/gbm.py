"""
Path generation for the reference simulators.

Implements path simulation on a uniform grid for:
- Black-Scholes (geometric Brownian motion), exact log-normal scheme
- Bachelier (arithmetic Brownian motion with drift rS), exact Gaussian scheme

Both models can be driven by one matrix of standard normal increments so
that products are compared on the same Brownian paths.

[T1] Black-Scholes SDE: dS = rS dt + σS dW
[T1] Bachelier SDE:     dS = rS dt + σ dW

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 3
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class GBMParams:
    """
    Parameters for Black-Scholes simulation.

    Attributes
    ----------
    spot : float
        Initial spot price
    rate : float
        Risk-free rate (annualized, decimal)
    volatility : float
        Lognormal volatility (annualized, decimal)
    horizon : float
        Last simulated time in years
    """

    spot: float
    rate: float
    volatility: float
    horizon: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.spot <= 0:
            raise ValueError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if self.volatility < 0:
            raise ValueError(f"CRITICAL: volatility must be >= 0, got {self.volatility}")
        if self.horizon <= 0:
            raise ValueError(f"CRITICAL: horizon must be > 0, got {self.horizon}")

    @property
    def drift(self) -> float:
        """Risk-neutral log drift: r - σ²/2."""
        return self.rate - 0.5 * self.volatility**2

    @property
    def forward(self) -> float:
        """Forward price at the horizon: S * exp(rT)."""
        return self.spot * np.exp(self.rate * self.horizon)


@dataclass(frozen=True)
class BachelierParams:
    """
    Parameters for Bachelier simulation.

    Attributes
    ----------
    spot : float
        Initial spot price
    rate : float
        Risk-free rate (annualized, decimal)
    volatility : float
        Absolute (normal) volatility, in price units per √year
    horizon : float
        Last simulated time in years
    """

    spot: float
    rate: float
    volatility: float
    horizon: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.spot <= 0:
            raise ValueError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if self.volatility < 0:
            raise ValueError(f"CRITICAL: volatility must be >= 0, got {self.volatility}")
        if self.horizon <= 0:
            raise ValueError(f"CRITICAL: horizon must be > 0, got {self.horizon}")

    @property
    def forward(self) -> float:
        """Forward price at the horizon: S * exp(rT)."""
        return self.spot * np.exp(self.rate * self.horizon)


ModelParams = Union[GBMParams, BachelierParams]


@dataclass(frozen=True)
class PathResult:
    """
    Result of path generation.

    Attributes
    ----------
    paths : np.ndarray
        Simulated paths, shape (n_paths, n_steps + 1)
    times : np.ndarray
        Time points, shape (n_steps + 1,)
    params : GBMParams or BachelierParams
        Parameters used for simulation
    seed : int, optional
        Random seed used
    antithetic : bool
        Whether antithetic variates were used
    """

    paths: np.ndarray
    times: np.ndarray
    params: ModelParams
    seed: Optional[int] = None
    antithetic: bool = False

    @property
    def n_paths(self) -> int:
        """Number of paths."""
        return self.paths.shape[0]

    @property
    def n_steps(self) -> int:
        """Number of time steps."""
        return self.paths.shape[1] - 1

    @property
    def terminal_values(self) -> np.ndarray:
        """Terminal values of all paths."""
        return self.paths[:, -1]


def generate_brownian_increments(
    n_paths: int,
    n_steps: int,
    seed: Optional[int] = None,
    antithetic: bool = False,
) -> np.ndarray:
    """
    Draw standard normal increments, shape (n_paths, n_steps).

    Parameters
    ----------
    n_paths : int
        Number of paths
    n_steps : int
        Number of time steps
    seed : int, optional
        Random seed for reproducibility
    antithetic : bool, default False
        Second half of the paths uses -Z of the first half

    Returns
    -------
    np.ndarray
        Standard normal draws
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    if n_steps <= 0:
        raise ValueError(f"CRITICAL: n_steps must be > 0, got {n_steps}")
    if antithetic and n_paths % 2 != 0:
        raise ValueError(f"CRITICAL: n_paths must be even for antithetic, got {n_paths}")

    rng = np.random.default_rng(seed)

    if antithetic:
        z = rng.standard_normal((n_paths // 2, n_steps))
        return np.vstack([z, -z])
    return rng.standard_normal((n_paths, n_steps))


def _check_increments(z: np.ndarray, n_paths: int, n_steps: int) -> None:
    if z.shape != (n_paths, n_steps):
        raise ValueError(
            f"CRITICAL: increments must have shape ({n_paths}, {n_steps}), got {z.shape}"
        )


def generate_gbm_paths(
    params: GBMParams,
    n_paths: int,
    n_steps: int,
    seed: Optional[int] = None,
    antithetic: bool = False,
    increments: Optional[np.ndarray] = None,
) -> PathResult:
    """
    Generate Black-Scholes paths on a uniform grid.

    [T1] Exact log-normal simulation:
    S(t+dt) = S(t) * exp((r - σ²/2)dt + σ√dt * Z)

    Parameters
    ----------
    params : GBMParams
        Model parameters (spot, rate, volatility, horizon)
    n_paths : int
        Number of paths to simulate
    n_steps : int
        Number of time steps per path
    seed : int, optional
        Random seed for reproducibility
    antithetic : bool, default False
        Use antithetic variates for variance reduction
    increments : np.ndarray, optional
        Pre-drawn standard normals of shape (n_paths, n_steps); seed and
        antithetic are ignored when given

    Returns
    -------
    PathResult
        Simulated paths and metadata

    Examples
    --------
    >>> params = GBMParams(spot=100, rate=0.1, volatility=0.3, horizon=0.5)
    >>> result = generate_gbm_paths(params, n_paths=10000, n_steps=500, seed=1897)
    >>> result.terminal_values.mean()  # Should be close to forward price
    """
    z = (
        generate_brownian_increments(n_paths, n_steps, seed, antithetic)
        if increments is None
        else increments
    )
    _check_increments(z, n_paths, n_steps)

    dt = params.horizon / n_steps
    times = np.linspace(0.0, params.horizon, n_steps + 1)

    log_returns = params.drift * dt + params.volatility * np.sqrt(dt) * z

    # S(t) = S(0) * exp(cumulative log-returns)
    paths = np.empty((n_paths, n_steps + 1))
    paths[:, 0] = params.spot
    paths[:, 1:] = params.spot * np.exp(np.cumsum(log_returns, axis=1))

    return PathResult(paths=paths, times=times, params=params, seed=seed, antithetic=antithetic)


def generate_bachelier_paths(
    params: BachelierParams,
    n_paths: int,
    n_steps: int,
    seed: Optional[int] = None,
    antithetic: bool = False,
    increments: Optional[np.ndarray] = None,
) -> PathResult:
    """
    Generate Bachelier paths on a uniform grid.

    [T1] Exact Gaussian transition of dS = rS dt + σ dW:
    S(t+dt) = S(t) e^(r dt) + σ √((e^(2r dt) - 1) / (2r)) * Z

    The variance factor tends to √dt as r -> 0. Paths may become negative.

    Parameters
    ----------
    params : BachelierParams
        Model parameters (spot, rate, normal volatility, horizon)
    n_paths : int
        Number of paths to simulate
    n_steps : int
        Number of time steps per path
    seed : int, optional
        Random seed for reproducibility
    antithetic : bool, default False
        Use antithetic variates for variance reduction
    increments : np.ndarray, optional
        Pre-drawn standard normals of shape (n_paths, n_steps)

    Returns
    -------
    PathResult
        Simulated paths and metadata
    """
    z = (
        generate_brownian_increments(n_paths, n_steps, seed, antithetic)
        if increments is None
        else increments
    )
    _check_increments(z, n_paths, n_steps)

    dt = params.horizon / n_steps
    times = np.linspace(0.0, params.horizon, n_steps + 1)

    growth = np.exp(params.rate * dt)
    r_dt = params.rate * dt
    # expm1(2x) / (2x) -> 1 as x -> 0
    variance_factor = np.expm1(2.0 * r_dt) / (2.0 * r_dt) if r_dt != 0.0 else 1.0
    step_vol = params.volatility * np.sqrt(dt * variance_factor)

    paths = np.empty((n_paths, n_steps + 1))
    paths[:, 0] = params.spot
    for k in range(n_steps):
        paths[:, k + 1] = paths[:, k] * growth + step_vol * z[:, k]

    return PathResult(paths=paths, times=times, params=params, seed=seed, antithetic=antithetic)


def validate_gbm_simulation(
    params: GBMParams,
    n_paths: int = 100_000,
    n_steps: int = 50,
    seed: int = 42,
) -> dict:
    """
    Validate Black-Scholes simulation against theoretical moments.

    [T1] Under the risk-neutral measure:
    - E[S(T)] = S(0) * exp(rT) (forward price)
    - Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    params : GBMParams
        Model parameters
    n_paths : int, default 100000
        Number of paths for validation
    n_steps : int, default 50
        Number of time steps
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    terminal = generate_gbm_paths(params, n_paths, n_steps, seed, antithetic=True).terminal_values

    expected_mean = params.forward
    expected_log_var = params.volatility**2 * params.horizon

    simulated_mean = terminal.mean()
    simulated_log_var = np.log(terminal / params.spot).var()
    se_mean = terminal.std() / np.sqrt(n_paths)

    return {
        "n_paths": n_paths,
        "theoretical_mean": expected_mean,
        "simulated_mean": simulated_mean,
        "mean_error_pct": abs(simulated_mean - expected_mean) / expected_mean * 100,
        "mean_z_score": (simulated_mean - expected_mean) / se_mean,
        "theoretical_log_variance": expected_log_var,
        "simulated_log_variance": simulated_log_var,
        "validation_passed": abs(simulated_mean - expected_mean) / expected_mean < 0.01,
    }
