"""Configuration: frozen settings and tolerance tiers."""
