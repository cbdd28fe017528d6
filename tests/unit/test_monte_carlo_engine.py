"""
Tests for the Monte Carlo engine - options/simulation/monte_carlo.py.
"""

import numpy as np
import pytest

from lookback_pricing.options.payoffs.base import OptionSpec, OptionType, StrikeType
from lookback_pricing.options.payoffs.lookback import LookbackOption
from lookback_pricing.options.simulation.monte_carlo import (
    LookbackMonteCarloEngine,
    MCResult,
    fixing_convergence_analysis,
    price_lookback_mc,
)


class TestMCResult:
    """Tests for result statistics."""

    def test_compute_result(self) -> None:
        """Mean, standard error and 95% interval."""
        values = np.array([1.0, 2.0, 3.0, 4.0])
        result = LookbackMonteCarloEngine._compute_result(values)
        se = np.std(values, ddof=1) / 2.0
        assert result.price == pytest.approx(2.5)
        assert result.standard_error == pytest.approx(se)
        assert result.confidence_interval == pytest.approx((2.5 - 1.96 * se, 2.5 + 1.96 * se))
        assert result.ci_width == pytest.approx(2 * 1.96 * se)
        assert result.n_paths == 4

    def test_single_path_has_zero_error(self) -> None:
        """One value gives no error estimate."""
        result = LookbackMonteCarloEngine._compute_result(np.array([5.0]))
        assert result.standard_error == 0.0

    def test_empty_values_raise(self) -> None:
        """No paths, no price."""
        with pytest.raises(ValueError, match="no path values"):
            LookbackMonteCarloEngine._compute_result(np.array([]))

    def test_relative_error_of_zero_price(self) -> None:
        """Relative error is infinite at zero price."""
        result = MCResult(0.0, 0.1, (-0.2, 0.2), 10, np.zeros(10))
        assert result.relative_error == float("inf")


class TestEngine:
    """Tests for LookbackMonteCarloEngine."""

    def test_price_matches_product_price(self, make_simulation, three_paths) -> None:
        """Engine price equals the product's own mean."""
        simulation = make_simulation(three_paths, rate=0.05)
        option = LookbackOption.call_floating_strike(1.0)
        result = LookbackMonteCarloEngine(simulation).price(option)
        assert result.price == pytest.approx(option.price(simulation))
        assert result.n_paths == 3

    def test_price_spec(self, make_simulation, three_paths) -> None:
        """price_spec wraps the spec in a LookbackOption."""
        simulation = make_simulation(three_paths)
        spec = OptionSpec(1.0, OptionType.PUT, StrikeType.FIXED, 95.0)
        engine = LookbackMonteCarloEngine(simulation)
        assert engine.price_spec(spec).price == pytest.approx(15.0)

    def test_same_paths_for_every_product(self, bs_simulation, scenario) -> None:
        """[T1] Coarser monitoring never raises the fixed call on shared paths."""
        engine = LookbackMonteCarloEngine(bs_simulation)
        continuous = engine.price(LookbackOption.call_fixed_strike(scenario.maturity, 100.0))
        discrete = engine.price(LookbackOption.call_fixed_strike(scenario.maturity, 100.0, 10))
        assert np.all(discrete.values <= continuous.values)


class TestConvenience:
    """Tests for price_lookback_mc and fixing_convergence_analysis."""

    def test_price_lookback_mc(self) -> None:
        """Convenience pricer runs end to end and is reproducible."""
        kwargs = dict(
            spot=100.0,
            rate=0.1,
            volatility=0.3,
            maturity=0.5,
            option_type=OptionType.CALL,
            strike_type=StrikeType.FLOATING,
            n_paths=2_000,
            n_steps=50,
            seed=7,
        )
        first = price_lookback_mc(**kwargs)
        second = price_lookback_mc(**kwargs)
        assert first.price > 0
        assert first.n_paths == 2_000
        assert first.price == second.price

    def test_fixing_convergence_rows(self, bs_simulation, scenario) -> None:
        """One row per fixing count with both analytic references."""
        report = fixing_convergence_analysis(
            bs_simulation,
            scenario.maturity,
            OptionType.CALL,
            StrikeType.FIXED,
            [10, 50],
            strike=scenario.strike,
        )
        rows = report["results"]
        assert [row["fixing_count"] for row in rows] == [10, 50]
        for row in rows:
            assert row["corrected_analytic_price"] < row["continuous_analytic_price"]
            assert row["continuous_analytic_price"] == report["continuous_analytic_price"]
        assert rows[0]["mc_price"] <= rows[1]["mc_price"] <= report["continuous_mc_price"]

    def test_fixing_convergence_requires_black_scholes(self, bachelier_simulation) -> None:
        """Closed forms need Black-Scholes dynamics."""
        with pytest.raises(ValueError, match="Black-Scholes"):
            fixing_convergence_analysis(
                bachelier_simulation, 0.5, OptionType.CALL, StrikeType.FLOATING, [10]
            )

    def test_fixing_convergence_rejects_zero_count(self, bs_simulation) -> None:
        """Fixing counts must be positive."""
        with pytest.raises(ValueError, match="fixing counts"):
            fixing_convergence_analysis(
                bs_simulation, 0.5, OptionType.CALL, StrikeType.FLOATING, [0]
            )


class TestPriceMultiple:
    """Batch pricing into a DataFrame."""

    def test_rows_per_spec(self, make_simulation, three_paths) -> None:
        """One row per contract, prices match single pricing."""
        simulation = make_simulation(three_paths)
        engine = LookbackMonteCarloEngine(simulation)
        specs = [
            OptionSpec(1.0, OptionType.CALL, StrikeType.FLOATING),
            OptionSpec(1.0, OptionType.PUT, StrikeType.FIXED, 95.0, monitoring_count=2),
        ]
        frame = engine.price_multiple(specs)

        assert len(frame) == 2
        assert list(frame["strike_type"]) == ["floating", "fixed"]
        assert frame.loc[0, "price"] == pytest.approx(70.0 / 3.0)
        assert frame.loc[1, "price"] == pytest.approx(engine.price_spec(specs[1]).price)
        assert "error" not in frame.columns

    def test_errors_recorded(self, make_simulation, three_paths) -> None:
        """Unpriceable contracts carry the error message."""
        engine = LookbackMonteCarloEngine(make_simulation(three_paths))
        specs = [
            OptionSpec(1.0, OptionType.CALL, StrikeType.FLOATING),
            OptionSpec(1.0, OptionType.CALL, StrikeType.FLOATING, underlying_index=1),
        ]
        frame = engine.price_multiple(specs)

        assert frame["error"].isna().iloc[0]
        assert "single-asset" in frame.loc[1, "error"]
        assert np.isnan(frame.loc[1, "price"])
