"""Loan amortization engine.

Simulates a single loan month by month under a fixed payment plus an optional
extra payment:
- Fixed (annuity) monthly payment
- Full schedule with interest/principal split per month
- Remaining balance after k payments, without building the schedule
- Months and interest saved by an extra payment

The month step here is shared by the credit card and mortgage calculators.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from payoffkit.core.exceptions import InvalidInputError, NonConvergingError
from payoffkit.financial.models import (
    PAYOFF_TOLERANCE,
    LoanTerms,
    MonthlySnapshot,
    add_months,
    monthly_rate,
    schedule_totals,
    to_cents,
)

DEFAULT_MAX_MONTHS = 1200  # 100 years


@dataclass
class LoanSummary:
    """Headline numbers for an amortized loan."""

    monthly_payment: float  # Scheduled payment, without the extra payment
    total_monthly_payment: float  # Scheduled payment + extra
    total_months: int
    total_interest_paid: float
    total_paid: float
    payoff_date: date | None = None
    # vs. the same loan with no extra payment; None when that loan never pays off
    months_saved: int | None = 0
    interest_saved: float | None = 0.0

    def to_dict(self) -> dict:
        return {
            "monthly_payment": to_cents(self.monthly_payment),
            "total_monthly_payment": to_cents(self.total_monthly_payment),
            "total_months": self.total_months,
            "total_interest_paid": to_cents(self.total_interest_paid),
            "total_paid": to_cents(self.total_paid),
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
            "months_saved": self.months_saved,
            "interest_saved": to_cents(self.interest_saved) if self.interest_saved is not None else None,
        }


@dataclass
class AmortizationSchedule:
    """Full month-by-month schedule plus summary for one loan."""

    terms: LoanTerms
    summary: LoanSummary
    schedule: list[MonthlySnapshot] = field(default_factory=list)

    @property
    def monthly_payment(self) -> float:
        return self.summary.monthly_payment

    def interest_by_year(self) -> dict[int, float]:
        """Interest grouped by loan year (year 1 = months 1-12)."""
        totals: dict[int, float] = {}
        for row in self.schedule:
            year = (row.month - 1) // 12 + 1
            totals[year] = totals.get(year, 0.0) + row.interest_paid
        return totals

    def to_dict(self, include_schedule: bool = True) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "loan": {
                "principal": to_cents(self.terms.principal),
                "annual_interest_rate": self.terms.annual_interest_rate,
                "term_months": self.terms.term_months,
                "extra_payment": to_cents(self.terms.extra_payment),
            },
            "summary": self.summary.to_dict(),
            "interest_by_year": {year: to_cents(v) for year, v in self.interest_by_year().items()},
        }
        if include_schedule:
            data["schedule"] = [row.to_dict() for row in self.schedule]
        return data

    def format_table(self, max_rows: int | None = None) -> str:
        """Format the summary and schedule as a text table."""
        s = self.summary
        lines = []
        lines.append("=" * 75)
        lines.append("  Loan Amortization")
        lines.append("=" * 75)
        lines.append(f"\nPrincipal: ${self.terms.principal:,.2f} at {self.terms.annual_interest_rate}%")
        lines.append(f"Monthly Payment: ${s.monthly_payment:,.2f}")
        if self.terms.extra_payment > 0:
            lines.append(f"Extra Payment: ${self.terms.extra_payment:,.2f}/mo")
            if s.months_saved is not None:
                lines.append(f"Saves {s.months_saved} months and ${s.interest_saved:,.2f} interest")
            else:
                lines.append("Without the extra payment the loan never pays off")
        lines.append(f"Payoff: {s.total_months} months, ${s.total_interest_paid:,.2f} interest")
        lines.append("")

        lines.append("-" * 75)
        lines.append(f"{'Month':<8} {'Start':>14} {'Payment':>12} {'Interest':>12} {'Principal':>12} {'End':>14}")
        lines.append("-" * 75)
        rows = self.schedule if max_rows is None else self.schedule[:max_rows]
        for row in rows:
            lines.append(
                f"{row.month:<8} {row.starting_balance:>14,.2f} {row.payment:>12,.2f} "
                f"{row.interest_paid:>12,.2f} {row.principal_paid:>12,.2f} {row.ending_balance:>14,.2f}"
            )
        if len(rows) < len(self.schedule):
            lines.append(f"... {len(self.schedule) - len(rows)} more months")
        lines.append("-" * 75)

        return "\n".join(lines)


def calculate_monthly_payment(principal: float, annual_rate: float, term_months: int) -> float:
    """Calculate the fixed monthly payment for an amortizing loan.

    Args:
        principal: Loan amount
        annual_rate: Annual interest rate in percent (e.g., 5 for 5%)
        term_months: Number of monthly payments

    Returns:
        Monthly payment amount, unrounded
    """
    if principal < 0:
        raise InvalidInputError(f"principal must be >= 0, got {principal}")
    if annual_rate < 0:
        raise InvalidInputError(f"annual_rate must be >= 0, got {annual_rate}")
    if term_months <= 0:
        raise InvalidInputError(f"term_months must be > 0, got {term_months}")
    if principal == 0:
        return 0.0

    rate = monthly_rate(annual_rate)
    if rate == 0:
        return principal / term_months

    factor = (1 + rate) ** term_months
    return principal * rate * factor / (factor - 1)


def _split_payment(balance: float, rate: float, payment: float) -> tuple[float, float]:
    """Return (interest, principal_paid) for one month.

    The principal portion is capped at the balance; a residue smaller than
    half a cent is folded into this month.
    """
    interest = balance * rate
    principal_paid = min(payment - interest, balance)
    if balance - principal_paid < PAYOFF_TOLERANCE:
        principal_paid = balance
    return interest, principal_paid


def amortize_month(month: int, balance: float, rate: float, payment: float) -> MonthlySnapshot:
    """Apply one monthly payment to a balance."""
    interest, principal_paid = _split_payment(balance, rate, payment)
    return MonthlySnapshot(
        month=month,
        starting_balance=balance,
        payment=interest + principal_paid,
        interest_paid=interest,
        principal_paid=principal_paid,
        ending_balance=balance - principal_paid,
    )


def run_amortization(
    balance: float,
    rate: float,
    payment_for: Callable[[float], float],
    max_months: int = DEFAULT_MAX_MONTHS,
    label: str = "Loan",
) -> list[MonthlySnapshot]:
    """Simulate a balance to zero.

    Args:
        balance: Starting balance
        rate: Monthly decimal rate
        payment_for: Returns the payment due for a starting balance
        max_months: Safety cap on the schedule length
        label: Name used in errors and log messages

    Raises:
        NonConvergingError: A payment does not exceed its month's interest, or
            the cap is reached.
    """
    schedule: list[MonthlySnapshot] = []
    month = 0
    while balance > 0:
        if month >= max_months:
            logger.warning(f"{label}: balance ${balance:,.2f} remains after {max_months} months")
            raise NonConvergingError(f"{label} is not paid off within {max_months} months", months_simulated=month)

        month += 1
        payment = payment_for(balance)
        interest = balance * rate
        if payment <= interest:
            logger.warning(f"{label}: payment ${payment:,.2f} <= interest ${interest:,.2f} in month {month}")
            raise NonConvergingError(
                f"{label}: payment ${payment:,.2f} does not cover monthly interest ${interest:,.2f}",
                months_simulated=month - 1,
            )

        row = amortize_month(month, balance, rate, payment)
        schedule.append(row)
        balance = row.ending_balance

    return schedule


def _scheduled_payment(terms: LoanTerms) -> float:
    if terms.monthly_payment is not None:
        return terms.monthly_payment
    return calculate_monthly_payment(terms.principal, terms.annual_interest_rate, terms.term_months)


def _build_schedule(terms: LoanTerms, payment: float, max_months: int) -> list[MonthlySnapshot]:
    cap = max(max_months, terms.term_months * 2)
    return run_amortization(terms.principal, terms.monthly_rate, lambda _: payment, max_months=cap)


def amortize_loan(terms: LoanTerms, max_months: int = DEFAULT_MAX_MONTHS) -> AmortizationSchedule:
    """Build the full amortization schedule for a loan.

    Args:
        terms: Loan terms (principal, rate, term, extra payment)
        max_months: Safety cap; never applied below twice the term

    Returns:
        AmortizationSchedule with schedule and summary

    Raises:
        NonConvergingError: The payment never reduces the balance.
    """
    base_payment = _scheduled_payment(terms)
    total_payment = base_payment + terms.extra_payment

    schedule = _build_schedule(terms, total_payment, max_months)
    total_interest, total_paid = schedule_totals(schedule)

    summary = LoanSummary(
        monthly_payment=base_payment,
        total_monthly_payment=total_payment,
        total_months=len(schedule),
        total_interest_paid=total_interest,
        total_paid=total_paid,
    )
    if terms.start_date and schedule:
        summary.payoff_date = add_months(terms.start_date, len(schedule) - 1)

    if terms.extra_payment > 0 and schedule:
        try:
            baseline = _build_schedule(terms, base_payment, max_months)
        except NonConvergingError:
            logger.debug(f"Scheduled payment ${base_payment:,.2f} alone never pays the loan off")
            summary.months_saved = None
            summary.interest_saved = None
        else:
            baseline_interest, _ = schedule_totals(baseline)
            summary.months_saved = len(baseline) - len(schedule)
            summary.interest_saved = baseline_interest - total_interest

    logger.debug(
        f"Amortized ${terms.principal:,.2f} at {terms.annual_interest_rate}%: "
        f"{summary.total_months} months, ${total_interest:,.2f} interest"
    )

    return AmortizationSchedule(terms=terms, summary=summary, schedule=schedule)


def calculate_loan_amortization(
    principal: float,
    annual_interest_rate: float,
    term_months: int,
    extra_payment: float = 0.0,
    *,
    monthly_payment: float | None = None,
    start_date: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> AmortizationSchedule:
    """Calculate the full amortization schedule from plain loan parameters.

    Args:
        principal: Loan amount
        annual_interest_rate: Annual rate in percent
        term_months: Scheduled number of payments
        extra_payment: Flat amount added to every payment
        monthly_payment: Payment to use instead of the formula payment
        start_date: Month of the first payment
        max_months: Safety cap on the schedule length

    Returns:
        AmortizationSchedule with schedule and summary
    """
    terms = LoanTerms(
        principal=principal,
        annual_interest_rate=annual_interest_rate,
        term_months=term_months,
        extra_payment=extra_payment,
        monthly_payment=monthly_payment,
        start_date=start_date,
    )
    return amortize_loan(terms, max_months=max_months)


def calculate_remaining_balance(terms: LoanTerms, months_elapsed: int) -> float:
    """Project the balance after ``months_elapsed`` payments.

    Runs the same monthly step as ``amortize_loan`` so the result equals
    ``schedule[months_elapsed - 1].ending_balance`` exactly.
    """
    if months_elapsed < 0:
        raise InvalidInputError(f"months_elapsed must be >= 0, got {months_elapsed}")

    payment = _scheduled_payment(terms) + terms.extra_payment
    rate = terms.monthly_rate
    balance = terms.principal
    if balance > 0 and payment <= balance * rate:
        raise NonConvergingError(
            f"Loan: payment ${payment:,.2f} does not cover monthly interest ${balance * rate:,.2f}"
        )

    for _ in range(months_elapsed):
        if balance <= 0:
            break
        _, principal_paid = _split_payment(balance, rate, payment)
        balance = balance - principal_paid

    return balance
