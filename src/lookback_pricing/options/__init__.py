"""Lookback option payoffs, closed-form pricing and Monte Carlo simulation."""
