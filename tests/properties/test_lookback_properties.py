"""
Property-based tests for continuously monitored lookback closed forms.

Properties tested:
1. Non-negativity of all four flavours
2. Fixed-strike parity for any strike
3. Homogeneity of degree one in (spot, strike)
4. Floating lookbacks dominate the at-the-money fixed legs they reset to

References:
    [T1] Hull (2018) Ch. 26
    [T1] Conze & Viswanathan (1991)
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from lookback_pricing.config.tolerances import LOOKBACK_PARITY_TOLERANCE
from lookback_pricing.options.pricing.lookback_analytic import (
    fixed_strike_parity_check,
    lookback_call_fixed_strike,
    lookback_call_floating_strike,
    lookback_put_fixed_strike,
    lookback_put_floating_strike,
)

# =============================================================================
# Strategy Definitions
# =============================================================================

spot_strategy = st.floats(min_value=1.0, max_value=1000.0, allow_nan=False, allow_infinity=False)

# Strike as a multiple of spot
moneyness_strategy = st.floats(min_value=0.5, max_value=2.0, allow_nan=False, allow_infinity=False)

# Either branch: exactly zero (limit) or clear of the threshold (general)
rate_strategy = st.one_of(
    st.floats(min_value=-0.05, max_value=-1e-4),
    st.just(0.0),
    st.floats(min_value=1e-4, max_value=0.15),
)

vol_strategy = st.floats(min_value=0.05, max_value=1.0, allow_nan=False, allow_infinity=False)
time_strategy = st.floats(min_value=0.05, max_value=5.0, allow_nan=False, allow_infinity=False)
scale_strategy = st.floats(min_value=0.1, max_value=10.0, allow_nan=False, allow_infinity=False)


# =============================================================================
# Bound Properties
# =============================================================================

class TestNonNegativity:
    """[T1] Lookback payoffs are non-negative, so are their prices."""

    @given(spot=spot_strategy, rate=rate_strategy, vol=vol_strategy, time=time_strategy)
    @settings(max_examples=200)
    def test_floating_non_negative(self, spot: float, rate: float, vol: float, time: float) -> None:
        """Floating call and put are >= 0."""
        assert lookback_call_floating_strike(spot, rate, vol, time) >= 0.0
        assert lookback_put_floating_strike(spot, rate, vol, time) >= 0.0

    @given(
        spot=spot_strategy,
        moneyness=moneyness_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
    )
    @settings(max_examples=200)
    def test_fixed_non_negative(
        self, spot: float, moneyness: float, rate: float, vol: float, time: float
    ) -> None:
        """Fixed call and put are >= 0 up to cancellation at strike scale."""
        strike = spot * moneyness
        tolerance = 1e-10 * strike
        assert lookback_call_fixed_strike(spot, rate, vol, time, strike) >= -tolerance
        assert lookback_put_fixed_strike(spot, rate, vol, time, strike) >= -tolerance


# =============================================================================
# Parity
# =============================================================================

class TestParityProperty:
    """[T1] Fixed-strike parity holds everywhere."""

    @given(
        spot=spot_strategy,
        moneyness=moneyness_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
    )
    @settings(max_examples=200)
    def test_parity(self, spot: float, moneyness: float, rate: float, vol: float, time: float) -> None:
        """C - P equals the floating-leg identity."""
        strike = spot * moneyness
        call = lookback_call_fixed_strike(spot, rate, vol, time, strike)
        put = lookback_put_fixed_strike(spot, rate, vol, time, strike)
        holds, error = fixed_strike_parity_check(
            call, put, spot, rate, vol, time, strike,
            tolerance=LOOKBACK_PARITY_TOLERANCE * max(1.0, strike),
        )
        assert holds, f"Parity error {error:.3e}"


# =============================================================================
# Scaling
# =============================================================================

class TestHomogeneity:
    """[T1] V(λS, λK) = λ V(S, K)."""

    @given(
        spot=spot_strategy,
        moneyness=moneyness_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
        scale=scale_strategy,
    )
    @settings(max_examples=200)
    def test_scaling(
        self, spot: float, moneyness: float, rate: float, vol: float, time: float, scale: float
    ) -> None:
        """Scaling spot and strike scales every flavour."""
        strike = spot * moneyness
        abs_tol = 1e-9 * spot * scale

        assert lookback_call_floating_strike(scale * spot, rate, vol, time) == pytest.approx(
            scale * lookback_call_floating_strike(spot, rate, vol, time), rel=1e-9, abs=abs_tol
        )
        assert lookback_put_floating_strike(scale * spot, rate, vol, time) == pytest.approx(
            scale * lookback_put_floating_strike(spot, rate, vol, time), rel=1e-9, abs=abs_tol
        )
        assert lookback_call_fixed_strike(
            scale * spot, rate, vol, time, scale * strike
        ) == pytest.approx(
            scale * lookback_call_fixed_strike(spot, rate, vol, time, strike),
            rel=1e-9,
            abs=abs_tol,
        )
        assert lookback_put_fixed_strike(
            scale * spot, rate, vol, time, scale * strike
        ) == pytest.approx(
            scale * lookback_put_fixed_strike(spot, rate, vol, time, strike),
            rel=1e-9,
            abs=abs_tol,
        )


class TestOrdering:
    """Floating legs vs at-the-money fixed legs."""

    @given(spot=spot_strategy, rate=rate_strategy, vol=vol_strategy, time=time_strategy)
    @settings(max_examples=200)
    def test_atm_fixed_call_exceeds_floating_put(
        self, spot: float, rate: float, vol: float, time: float
    ) -> None:
        """[T1] K = S: C_fixed - P_float = S(1 - e^(-rT)), positive for r > 0."""
        call = lookback_call_fixed_strike(spot, rate, vol, time, spot)
        put = lookback_put_floating_strike(spot, rate, vol, time)
        if rate > 0:
            assert call > put
        elif rate < 0:
            assert call < put
        else:
            assert call == pytest.approx(put)
