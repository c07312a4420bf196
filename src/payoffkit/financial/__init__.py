"""Debt calculators: models and month-by-month payoff simulators."""

from .models import Debt, LoanTerms, MonthlySnapshot

__all__ = [
    "Debt",
    "LoanTerms",
    "MonthlySnapshot",
]
