"""Core debt data models.

Inputs (debts, loan terms) and the per-month snapshot shared by every
payoff simulator. Monetary values stay unrounded floats; rounding to cents
happens only when a result is reported (see ``to_cents``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from payoffkit.core.exceptions import InvalidInputError

# Balances below half a cent are treated as paid off
PAYOFF_TOLERANCE = 0.005


def to_cents(amount: float) -> float:
    """Round a monetary amount to cents, half-up."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def monthly_rate(annual_rate: float) -> float:
    """Annual percentage rate -> monthly decimal rate (18 -> 0.015)."""
    return annual_rate / 100 / 12


def add_months(start: date, months: int) -> date:
    """Return the first day of the month ``months`` after ``start``."""
    month = start.month - 1 + months
    year = start.year + month // 12
    return date(year, month % 12 + 1, 1)


def _require_non_negative(label: str, **values: float) -> None:
    for field_name, value in values.items():
        if value < 0:
            raise InvalidInputError(f"{label}: {field_name} must be >= 0, got {value}")


@dataclass
class Debt:
    """One liability in a multi-debt payoff plan.

    Attributes:
        name: Display label. Not used in any calculation, may be empty.
        balance: Remaining principal.
        interest_rate: Nominal annual rate in percent (18 for 18%).
        minimum_payment: Required monthly payment.
    """

    name: str
    balance: float
    interest_rate: float
    minimum_payment: float

    def __post_init__(self):
        _require_non_negative(
            f"Debt {self.name!r}",
            balance=self.balance,
            interest_rate=self.interest_rate,
            minimum_payment=self.minimum_payment,
        )


@dataclass
class LoanTerms:
    """Static description of a single amortizing loan.

    Attributes:
        principal: Amount borrowed.
        annual_interest_rate: Annual rate in percent.
        term_months: Scheduled number of payments.
        extra_payment: Flat amount added to every monthly payment.
        monthly_payment: Overrides the formula payment when set.
        start_date: Month of the first payment, used for payoff dates.
    """

    principal: float
    annual_interest_rate: float
    term_months: int
    extra_payment: float = 0.0
    monthly_payment: float | None = None
    start_date: date | None = None

    def __post_init__(self):
        _require_non_negative(
            "Loan",
            principal=self.principal,
            annual_interest_rate=self.annual_interest_rate,
            extra_payment=self.extra_payment,
        )
        if self.term_months <= 0:
            raise InvalidInputError(f"Loan: term_months must be > 0, got {self.term_months}")
        if self.monthly_payment is not None and self.monthly_payment < 0:
            raise InvalidInputError(f"Loan: monthly_payment must be >= 0, got {self.monthly_payment}")

    @property
    def monthly_rate(self) -> float:
        return monthly_rate(self.annual_interest_rate)


@dataclass(frozen=True)
class MonthlySnapshot:
    """One month of a balance's life.

    ``starting_balance + interest_paid - payment == ending_balance``. The
    principal portion is negative for a month where the payment did not
    cover the interest.
    """

    month: int
    starting_balance: float
    payment: float
    interest_paid: float
    principal_paid: float
    ending_balance: float

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "starting_balance": to_cents(self.starting_balance),
            "payment": to_cents(self.payment),
            "interest_paid": to_cents(self.interest_paid),
            "principal_paid": to_cents(self.principal_paid),
            "ending_balance": to_cents(self.ending_balance),
        }


def schedule_totals(schedule: list[MonthlySnapshot]) -> tuple[float, float]:
    """Return (total_interest, total_paid) for a schedule."""
    total_interest = sum(row.interest_paid for row in schedule)
    total_paid = sum(row.payment for row in schedule)
    return total_interest, total_paid
