"""
Centralized pytest fixtures for lookback-pricing test suite.

Fixture Categories:
1. Market Parameters - Reference scenario (S0=100, r=10%, σ=30%, T=0.5, K=100)
2. Simulations - Session-scoped Black-Scholes and Bachelier path sets
3. Hand-built paths - Small deterministic path sets for exact payoff checks
"""

from dataclasses import dataclass

import numpy as np
import pytest

from lookback_pricing.options.simulation.gbm import (
    BachelierParams,
    GBMParams,
    PathResult,
    generate_brownian_increments,
)
from lookback_pricing.options.simulation.models import (
    BachelierSimulation,
    BlackScholesSimulation,
)

# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class LookbackScenario:
    """Reference lookback scenario."""

    spot: float = 100.0
    rate: float = 0.10
    volatility: float = 0.30
    maturity: float = 0.5
    strike: float = 100.0


SCENARIO = LookbackScenario()

#: Simulation sizes shared by the session fixtures
N_PATHS: int = 20_000
N_STEPS: int = 500
SEED: int = 1897


@pytest.fixture(scope="session")
def scenario() -> LookbackScenario:
    """Reference market and contract parameters."""
    return SCENARIO


@pytest.fixture(scope="session")
def gbm_params() -> GBMParams:
    """Black-Scholes parameters of the reference scenario."""
    return GBMParams(
        spot=SCENARIO.spot,
        rate=SCENARIO.rate,
        volatility=SCENARIO.volatility,
        horizon=SCENARIO.maturity,
    )


# =============================================================================
# SIMULATIONS
# =============================================================================

@pytest.fixture(scope="session")
def brownian_increments() -> np.ndarray:
    """One Brownian driver shared by both models."""
    return generate_brownian_increments(N_PATHS, N_STEPS, seed=SEED)


@pytest.fixture(scope="session")
def bs_simulation(gbm_params: GBMParams, brownian_increments: np.ndarray) -> BlackScholesSimulation:
    """Black-Scholes simulation of the reference scenario."""
    return BlackScholesSimulation.simulate(
        gbm_params, N_PATHS, N_STEPS, increments=brownian_increments
    )


@pytest.fixture(scope="session")
def bachelier_simulation(brownian_increments: np.ndarray) -> BachelierSimulation:
    """Bachelier simulation on the same Brownian driver (normal vol = 30)."""
    params = BachelierParams(
        spot=SCENARIO.spot,
        rate=SCENARIO.rate,
        volatility=SCENARIO.volatility * SCENARIO.spot,
        horizon=SCENARIO.maturity,
    )
    return BachelierSimulation.simulate(params, N_PATHS, N_STEPS, increments=brownian_increments)


# =============================================================================
# HAND-BUILT PATHS
# =============================================================================

@pytest.fixture
def make_simulation():
    """Factory wrapping explicit paths (n_paths, n_times) on a uniform grid."""

    def _make(paths, horizon: float = 1.0, rate: float = 0.0) -> BlackScholesSimulation:
        paths = np.asarray(paths, dtype=float)
        times = np.linspace(0.0, horizon, paths.shape[1])
        params = GBMParams(spot=float(paths[0, 0]), rate=rate, volatility=0.2, horizon=horizon)
        return BlackScholesSimulation(PathResult(paths=paths, times=times, params=params))

    return _make


@pytest.fixture
def three_paths() -> np.ndarray:
    """Three paths on five times (0, 0.25, 0.5, 0.75, 1)."""
    return np.array(
        [
            [100.0, 110.0, 90.0, 105.0, 120.0],  # up at the end
            [100.0, 95.0, 80.0, 85.0, 90.0],  # down all the way
            [100.0, 130.0, 100.0, 70.0, 100.0],  # wide swing, back to start
        ]
    )
