"""
Monitoring grids and pathwise running extrema.

The extremum of a lookback is sampled on a subsequence of the simulation
grid. With monitoring_count == 0 every grid time is used, which approximates
continuous monitoring; with n > 0 the n + 1 fixings are spread as evenly as
the grid allows.

Running extrema are left folds over the monitoring times:

    M_k = max(M_{k-1}, S(t_k)),   M_{-1} = 0
    m_k = min(m_{k-1}, S(t_k)),   m_{-1} = +inf

Each fold step is an elementwise operation across paths, so paths are
independent while times must be consumed in increasing order.
"""

from functools import reduce
from typing import TYPE_CHECKING, Sequence

import numpy as np

from lookback_pricing.options.payoffs.base import ExtremumKind

if TYPE_CHECKING:
    from lookback_pricing.options.simulation.models import PathSimulator


def build_monitoring_times(monitoring_count: int, time_grid: Sequence[float]) -> np.ndarray:
    """
    Derive the monitoring times for a lookback from the simulation grid.

    Logical fixing i in [0, n] maps to grid index round(i * (len(grid) - 1) / n).
    When n exceeds the grid resolution some grid indices repeat; the repeated
    times are kept and simply re-observe the same value.

    Parameters
    ----------
    monitoring_count : int
        0 for the full grid, n > 0 for n + 1 fixings
    time_grid : Sequence[float]
        Simulation times, increasing, starting at 0

    Returns
    -------
    np.ndarray
        Non-decreasing monitoring times from grid[0] to grid[-1]

    Examples
    --------
    >>> build_monitoring_times(2, [0.0, 0.25, 0.5, 0.75, 1.0]).tolist()
    [0.0, 0.5, 1.0]
    """
    if monitoring_count < 0:
        raise ValueError(f"CRITICAL: monitoring_count must be >= 0, got {monitoring_count}")

    grid = np.asarray(time_grid, dtype=float)
    if grid.ndim != 1 or grid.size == 0:
        raise ValueError("CRITICAL: time grid must be a non-empty 1-d sequence")

    if monitoring_count == 0:
        return grid.copy()

    last = grid.size - 1
    # Round half up, as the grid mapping is defined on non-negative reals
    indices = np.floor(np.arange(monitoring_count + 1) * last / monitoring_count + 0.5)
    return grid[indices.astype(int)]


def running_max(
    times: Sequence[float],
    simulator: "PathSimulator",
    underlying_index: int = 0,
) -> np.ndarray:
    """
    Pathwise running maximum of the underlying over the monitoring times.

    The accumulator starts at zero, which assumes non-negative trajectories.

    Parameters
    ----------
    times : Sequence[float]
        Monitoring times in increasing order
    simulator : PathSimulator
        Source of per-path asset values
    underlying_index : int, default 0
        Simulated asset to observe

    Returns
    -------
    np.ndarray
        Maximum per path, shape (n_paths,)
    """
    return reduce(
        np.maximum,
        (simulator.asset_value(t, underlying_index) for t in times),
        simulator.constant_vector(0.0),
    )


def running_min(
    times: Sequence[float],
    simulator: "PathSimulator",
    underlying_index: int = 0,
) -> np.ndarray:
    """
    Pathwise running minimum of the underlying over the monitoring times.

    Parameters
    ----------
    times : Sequence[float]
        Monitoring times in increasing order
    simulator : PathSimulator
        Source of per-path asset values
    underlying_index : int, default 0
        Simulated asset to observe

    Returns
    -------
    np.ndarray
        Minimum per path, shape (n_paths,)
    """
    return reduce(
        np.minimum,
        (simulator.asset_value(t, underlying_index) for t in times),
        simulator.constant_vector(np.inf),
    )


def running_extremum(
    kind: ExtremumKind,
    times: Sequence[float],
    simulator: "PathSimulator",
    underlying_index: int = 0,
) -> np.ndarray:
    """Dispatch to running_max or running_min."""
    if kind == ExtremumKind.MAX:
        return running_max(times, simulator, underlying_index)
    return running_min(times, simulator, underlying_index)
