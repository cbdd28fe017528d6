"""
Base types for lookback option payoffs.

Provides the option flavour enumerations and the immutable contract and
market descriptions shared by the analytic and Monte Carlo pricers.

[T1] Floating-strike call: S(T) - min S
[T1] Floating-strike put:  max S - S(T)
[T1] Fixed-strike call:    max(max S - K, 0)
[T1] Fixed-strike put:     max(K - min S, 0)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


class StrikeType(Enum):
    """Lookback strike convention."""

    FIXED = "fixed"  # Extremum against a fixed strike K
    FLOATING = "floating"  # Terminal value against the extremum


class ExtremumKind(Enum):
    """Which running extremum a payoff needs."""

    MAX = "max"
    MIN = "min"


@dataclass(frozen=True)
class MarketParams:
    """
    Immutable Black-Scholes market parameters.

    Attributes
    ----------
    spot : float
        Initial underlying value S0
    rate : float
        Continuously compounded risk-free rate (any real)
    volatility : float
        Lognormal volatility σ
    """

    spot: float
    rate: float
    volatility: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.spot <= 0:
            raise ValueError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if self.volatility <= 0:
            raise ValueError(f"CRITICAL: volatility must be > 0, got {self.volatility}")


@dataclass(frozen=True)
class OptionSpec:
    """
    Immutable lookback contract description.

    Attributes
    ----------
    maturity : float
        Maturity T in years
    option_type : OptionType
        Call or put
    strike_type : StrikeType
        Fixed or floating strike
    strike : float, optional
        Strike K, required for fixed-strike contracts only
    underlying_index : int
        Which simulated asset the contract is written on
    monitoring_count : int
        0 monitors on the full simulation grid (continuous approximation),
        n > 0 samples the extremum on n + 1 fixings
    """

    maturity: float
    option_type: OptionType
    strike_type: StrikeType
    strike: Optional[float] = None
    underlying_index: int = 0
    monitoring_count: int = 0

    def __post_init__(self) -> None:
        """Validate contract."""
        if self.maturity <= 0:
            raise ValueError(f"CRITICAL: maturity must be > 0, got {self.maturity}")
        if self.monitoring_count < 0:
            raise ValueError(
                f"CRITICAL: monitoring_count must be >= 0, got {self.monitoring_count}"
            )
        if self.underlying_index < 0:
            raise ValueError(
                f"CRITICAL: underlying_index must be >= 0, got {self.underlying_index}"
            )
        if self.strike_type == StrikeType.FIXED:
            if self.strike is None:
                raise ValueError("CRITICAL: fixed-strike lookback requires a strike")
            if self.strike <= 0:
                raise ValueError(f"CRITICAL: strike must be > 0, got {self.strike}")
        elif self.strike is not None:
            raise ValueError(
                f"CRITICAL: floating-strike lookback takes no strike, got {self.strike}"
            )

    @property
    def is_continuously_monitored(self) -> bool:
        """True when the extremum is tracked on the full simulation grid."""
        return self.monitoring_count == 0

    @property
    def extremum(self) -> ExtremumKind:
        """
        Running extremum the payoff depends on.

        Floating call and fixed put need the minimum; floating put and
        fixed call need the maximum.
        """
        needs_min = (self.option_type == OptionType.CALL) == (
            self.strike_type == StrikeType.FLOATING
        )
        return ExtremumKind.MIN if needs_min else ExtremumKind.MAX

    def continuous(self) -> "OptionSpec":
        """Same contract monitored on the full simulation grid."""
        return replace(self, monitoring_count=0)
