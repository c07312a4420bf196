"""Financial calculators: loan amortization, debt payoff, credit cards, mortgages."""

from .amortization import (
    AmortizationSchedule,
    LoanSummary,
    amortize_loan,
    calculate_loan_amortization,
    calculate_monthly_payment,
    calculate_remaining_balance,
)
from .credit_card import (
    CreditCardInputs,
    CreditCardPayoffResult,
    PayoffScenario,
    calculate_credit_card_payoff,
)
from .debt_payoff import (
    ComparisonResult,
    DebtSchedule,
    PayoffMonth,
    PayoffResult,
    PayoffStrategy,
    calculate_debt_payoff,
    compare_payoff_strategies,
)
from .mortgage import (
    AffordabilityResult,
    MortgageAmortizationEntry,
    MortgageInputs,
    MortgageSummary,
    calculate_affordable_home,
    calculate_mortgage,
)

__all__ = [
    "AffordabilityResult",
    "AmortizationSchedule",
    "ComparisonResult",
    "CreditCardInputs",
    "CreditCardPayoffResult",
    "DebtSchedule",
    "LoanSummary",
    "MortgageAmortizationEntry",
    "MortgageInputs",
    "MortgageSummary",
    "PayoffMonth",
    "PayoffResult",
    "PayoffScenario",
    "PayoffStrategy",
    "amortize_loan",
    "calculate_affordable_home",
    "calculate_credit_card_payoff",
    "calculate_debt_payoff",
    "calculate_loan_amortization",
    "calculate_monthly_payment",
    "calculate_mortgage",
    "calculate_remaining_balance",
    "compare_payoff_strategies",
]
