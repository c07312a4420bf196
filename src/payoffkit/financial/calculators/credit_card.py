"""Credit card payoff: minimum payments only vs. a fixed monthly payment.

The card issuer's minimum is the larger of a percentage of the balance and a
dollar floor, so it shrinks as the balance does. That is what makes
minimum-only payoff so slow; the fixed-payment scenario shows the difference.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from payoffkit.core.exceptions import InvalidInputError
from payoffkit.financial.models import MonthlySnapshot, add_months, monthly_rate, schedule_totals, to_cents

from .amortization import DEFAULT_MAX_MONTHS, run_amortization


@dataclass
class CreditCardInputs:
    """Credit card balance and payment rules.

    Attributes:
        balance: Current statement balance.
        interest_rate: APR in percent.
        minimum_payment_percent: Issuer minimum as percent of the balance.
        minimum_payment_floor: Issuer minimum in dollars.
        fixed_payment: Optional fixed monthly payment to compare against.
        start_date: Month of the first payment.
    """

    balance: float
    interest_rate: float
    minimum_payment_percent: float = 2.0
    minimum_payment_floor: float = 25.0
    fixed_payment: float | None = None
    start_date: date | None = None

    def __post_init__(self):
        if self.balance < 0:
            raise InvalidInputError(f"balance must be >= 0, got {self.balance}")
        if self.interest_rate < 0:
            raise InvalidInputError(f"interest_rate must be >= 0, got {self.interest_rate}")
        if self.minimum_payment_percent <= 0 or self.minimum_payment_percent > 100:
            raise InvalidInputError(f"minimum_payment_percent must be in (0, 100], got {self.minimum_payment_percent}")
        if self.minimum_payment_floor < 0:
            raise InvalidInputError(f"minimum_payment_floor must be >= 0, got {self.minimum_payment_floor}")
        if self.fixed_payment is not None and self.fixed_payment <= 0:
            raise InvalidInputError(f"fixed_payment must be > 0, got {self.fixed_payment}")

    def minimum_payment(self, balance: float) -> float:
        """Issuer minimum for a statement balance."""
        return max(self.minimum_payment_floor, balance * self.minimum_payment_percent / 100)


@dataclass
class PayoffScenario:
    """One way of paying the card down."""

    name: str
    schedule: list[MonthlySnapshot] = field(default_factory=list)
    payoff_date: date | None = None

    @property
    def first_payment(self) -> float:
        return self.schedule[0].payment if self.schedule else 0.0

    @property
    def total_months(self) -> int:
        return len(self.schedule)

    @property
    def total_interest_paid(self) -> float:
        return schedule_totals(self.schedule)[0]

    @property
    def total_paid(self) -> float:
        return schedule_totals(self.schedule)[1]

    def to_dict(self, include_schedule: bool = False) -> dict:
        data = {
            "name": self.name,
            "first_payment": to_cents(self.first_payment),
            "total_months": self.total_months,
            "total_interest_paid": to_cents(self.total_interest_paid),
            "total_paid": to_cents(self.total_paid),
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
        }
        if include_schedule:
            data["schedule"] = [row.to_dict() for row in self.schedule]
        return data


@dataclass
class CreditCardPayoffResult:
    """Minimum-only scenario, and the fixed-payment scenario when requested."""

    inputs: CreditCardInputs
    minimum_only: PayoffScenario
    fixed_payment: PayoffScenario | None = None

    @property
    def interest_savings(self) -> float:
        if self.fixed_payment is None:
            return 0.0
        return self.minimum_only.total_interest_paid - self.fixed_payment.total_interest_paid

    @property
    def months_saved(self) -> int:
        if self.fixed_payment is None:
            return 0
        return self.minimum_only.total_months - self.fixed_payment.total_months

    def to_dict(self, include_schedule: bool = False) -> dict:
        return {
            "balance": to_cents(self.inputs.balance),
            "interest_rate": self.inputs.interest_rate,
            "minimum_only": self.minimum_only.to_dict(include_schedule=include_schedule),
            "fixed_payment": (
                self.fixed_payment.to_dict(include_schedule=include_schedule) if self.fixed_payment else None
            ),
            "interest_savings": to_cents(self.interest_savings),
            "months_saved": self.months_saved,
        }

    def format_table(self) -> str:
        """Format the scenarios as a text table."""
        lines = []
        lines.append("=" * 75)
        lines.append("  Credit Card Payoff")
        lines.append("=" * 75)
        lines.append(f"\nBalance: ${self.inputs.balance:,.2f} at {self.inputs.interest_rate}% APR")
        lines.append("")
        lines.append("-" * 75)
        lines.append(f"{'Scenario':<24} {'First Pmt':>12} {'Months':>8} {'Interest':>13} {'Total Paid':>14}")
        lines.append("-" * 75)
        for s in filter(None, [self.minimum_only, self.fixed_payment]):
            lines.append(
                f"{s.name:<24} ${s.first_payment:>11,.2f} {s.total_months:>8} "
                f"${s.total_interest_paid:>12,.2f} ${s.total_paid:>13,.2f}"
            )
        lines.append("-" * 75)
        if self.fixed_payment is not None:
            lines.append(
                f"\nFixed payment saves ${self.interest_savings:,.2f} interest and {self.months_saved} months"
            )
        return "\n".join(lines)


def _scenario(
    name: str,
    inputs: CreditCardInputs,
    payment_for: Callable[[float], float],
    max_months: int,
) -> PayoffScenario:
    rate = monthly_rate(inputs.interest_rate)
    schedule = run_amortization(inputs.balance, rate, payment_for, max_months=max_months, label=name)
    scenario = PayoffScenario(name=name, schedule=schedule)
    if inputs.start_date and schedule:
        scenario.payoff_date = add_months(inputs.start_date, len(schedule) - 1)
    return scenario


def calculate_credit_card_payoff(
    inputs: CreditCardInputs,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> CreditCardPayoffResult:
    """Compare minimum-only payments with a fixed monthly payment.

    The minimum is recomputed each month from the starting balance; interest
    accrues before the payment is applied.

    Raises:
        NonConvergingError: A scenario's payment never covers the interest.
    """
    rate = monthly_rate(inputs.interest_rate)

    minimum_only = _scenario("Minimum payments", inputs, inputs.minimum_payment, max_months)

    fixed = None
    if inputs.fixed_payment is not None:
        payment = inputs.fixed_payment
        fixed = _scenario(f"Fixed ${payment:,.0f}/mo", inputs, lambda _: payment, max_months)

    result = CreditCardPayoffResult(inputs=inputs, minimum_only=minimum_only, fixed_payment=fixed)
    logger.debug(
        f"Card ${inputs.balance:,.2f} at {inputs.interest_rate}% ({rate:.5f}/mo): minimum-only "
        f"{minimum_only.total_months} months, ${minimum_only.total_interest_paid:,.2f} interest"
    )
    return result
