"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_lookback_properties: closed-form invariants (bounds, parity, scaling)
    test_correction_properties: continuity-correction invariants
    test_extremum_properties: running-extremum and payoff invariants on random paths
"""
