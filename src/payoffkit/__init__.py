"""payoffkit: deterministic loan amortization and debt payoff calculators."""

__version__ = "0.1.0"
