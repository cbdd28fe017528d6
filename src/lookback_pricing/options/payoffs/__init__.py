"""Lookback payoff definitions, monitoring grids and extremum tracking."""
