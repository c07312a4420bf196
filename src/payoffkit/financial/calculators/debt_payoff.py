"""Multi-debt payoff simulator (avalanche and snowball).

Pays several debts down at once under a fixed monthly budget:
- Every active debt is charged its minimum payment
- The extra payment, plus minimums freed by debts already paid off
  ("rollover"), goes to the highest-priority debt; whatever that debt does
  not need cascades to the next one in the same month
- AVALANCHE targets the highest interest rate, SNOWBALL the smallest balance

The monthly budget (all minimums + extra) stays constant until the final
month, so no money is created or lost along the way.
"""

import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from loguru import logger

from payoffkit.core.exceptions import InvalidInputError, NonConvergingError
from payoffkit.financial.models import (
    PAYOFF_TOLERANCE,
    Debt,
    MonthlySnapshot,
    add_months,
    monthly_rate,
    schedule_totals,
    to_cents,
)

from .amortization import DEFAULT_MAX_MONTHS


class PayoffStrategy(Enum):
    """Order in which extra money is thrown at debts.

    AVALANCHE: Highest interest rate first (least total interest).
    SNOWBALL: Smallest balance first (quickest individual payoffs).
    """

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"

    @classmethod
    def parse(cls, value: "PayoffStrategy | str") -> "PayoffStrategy":
        """Accept an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise InvalidInputError(f"Unknown payoff strategy {value!r} (expected one of: {choices})") from None


@dataclass
class _DebtState:
    """Working copy of one debt during a simulation run."""

    index: int
    debt: Debt
    balance: float
    rate: float  # monthly decimal
    schedule: list[MonthlySnapshot] = field(default_factory=list)
    payoff_month: int | None = None


def _priority_key(strategy: PayoffStrategy) -> Callable[[_DebtState], float]:
    """Resolve a strategy to its sort key. Sorting is stable, so ties keep input order."""
    match strategy:
        case PayoffStrategy.AVALANCHE:
            return lambda state: -state.debt.interest_rate
        case PayoffStrategy.SNOWBALL:
            return lambda state: state.balance


@dataclass
class DebtSchedule:
    """One debt's payoff timeline within a multi-debt plan."""

    name: str
    starting_balance: float
    interest_rate: float
    minimum_payment: float
    payoff_month: int | None  # None when the debt was already paid at input
    schedule: list[MonthlySnapshot] = field(default_factory=list)

    @property
    def total_interest_paid(self) -> float:
        return schedule_totals(self.schedule)[0]

    @property
    def total_paid(self) -> float:
        return schedule_totals(self.schedule)[1]

    def to_dict(self, include_schedule: bool = True) -> dict:
        data = {
            "name": self.name,
            "starting_balance": to_cents(self.starting_balance),
            "interest_rate": self.interest_rate,
            "minimum_payment": to_cents(self.minimum_payment),
            "payoff_month": self.payoff_month,
            "total_interest_paid": to_cents(self.total_interest_paid),
            "total_paid": to_cents(self.total_paid),
        }
        if include_schedule:
            data["schedule"] = [row.to_dict() for row in self.schedule]
        return data


@dataclass(frozen=True)
class PayoffMonth:
    """Totals across all debts for one month."""

    month: int
    target: str  # Debt that received the pooled payment first
    total_payment: float
    total_interest: float
    remaining_balance: float


@dataclass
class PayoffResult:
    """Outcome of one strategy run."""

    strategy: PayoffStrategy
    extra_payment: float
    monthly_budget: float
    debts: list[DebtSchedule] = field(default_factory=list)
    months: list[PayoffMonth] = field(default_factory=list)
    payoff_order: list[str] = field(default_factory=list)
    payoff_date: date | None = None

    @property
    def total_months(self) -> int:
        return len(self.months)

    @property
    def total_interest_paid(self) -> float:
        return sum(d.total_interest_paid for d in self.debts)

    @property
    def total_paid(self) -> float:
        return sum(d.total_paid for d in self.debts)

    def to_dict(self, include_schedule: bool = False) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "strategy": self.strategy.value,
            "extra_payment": to_cents(self.extra_payment),
            "monthly_budget": to_cents(self.monthly_budget),
            "total_months": self.total_months,
            "total_interest_paid": to_cents(self.total_interest_paid),
            "total_paid": to_cents(self.total_paid),
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
            "payoff_order": list(self.payoff_order),
            "debts": [d.to_dict(include_schedule=include_schedule) for d in self.debts],
        }

    def format_table(self) -> str:
        """Format the payoff plan as a text table."""
        lines = []
        lines.append("=" * 75)
        lines.append(f"  Debt Payoff Plan ({self.strategy.value.title()})")
        lines.append("=" * 75)
        lines.append(f"\nMonthly Budget: ${self.monthly_budget:,.2f} (extra ${self.extra_payment:,.2f})")
        lines.append(f"Debt Free In: {self.total_months} months")
        lines.append(f"Total Interest: ${self.total_interest_paid:,.2f}")
        lines.append("")

        lines.append("-" * 75)
        lines.append(f"{'Debt':<20} {'Balance':>12} {'Rate':>7} {'Minimum':>10} {'Paid Off':>9} {'Interest':>12}")
        lines.append("-" * 75)
        for d in self.debts:
            paid_off = f"mo {d.payoff_month}" if d.payoff_month else "-"
            lines.append(
                f"{d.name:<20} ${d.starting_balance:>11,.2f} {d.interest_rate:>6.2f}% "
                f"${d.minimum_payment:>9,.2f} {paid_off:>9} ${d.total_interest_paid:>11,.2f}"
            )
        lines.append("-" * 75)

        return "\n".join(lines)


def _validate_debts(debts: list[Debt]) -> None:
    for position, debt in enumerate(debts):
        if not isinstance(debt, Debt):
            raise InvalidInputError(f"Debt list entry {position} is not a Debt: {debt!r}")


def _simulate_month(
    month: int,
    states: list[_DebtState],
    priority: Callable[[_DebtState], float],
    pool: float,
) -> tuple[PayoffMonth, list[_DebtState]]:
    """Advance every active debt by one month.

    Returns the month's totals and the debts that reached zero.
    """
    active = [s for s in states if s.balance > 0]
    ordered = sorted(active, key=priority)

    interest = {s.index: s.balance * s.rate for s in active}
    due = {s.index: s.balance + interest[s.index] for s in active}

    paid: dict[int, float] = {}
    for s in active:
        paid[s.index] = min(s.debt.minimum_payment, due[s.index])
        # Minimum not needed by a nearly-paid debt joins the pool
        pool += s.debt.minimum_payment - paid[s.index]

    for s in ordered:
        if pool <= 0:
            break
        applied = min(pool, due[s.index] - paid[s.index])
        paid[s.index] += applied
        pool -= applied

    cleared = []
    for s in active:
        ending = due[s.index] - paid[s.index]
        if ending < PAYOFF_TOLERANCE:
            paid[s.index] = due[s.index]
            ending = 0.0
        s.schedule.append(
            MonthlySnapshot(
                month=month,
                starting_balance=s.balance,
                payment=paid[s.index],
                interest_paid=interest[s.index],
                principal_paid=paid[s.index] - interest[s.index],
                ending_balance=ending,
            )
        )
        s.balance = ending
        if ending == 0.0:
            s.payoff_month = month
            cleared.append(s)

    totals = PayoffMonth(
        month=month,
        target=ordered[0].debt.name,
        total_payment=sum(paid.values()),
        total_interest=sum(interest.values()),
        remaining_balance=sum(s.balance for s in states),
    )
    return totals, cleared


def calculate_debt_payoff(
    debts: list[Debt],
    strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE,
    extra_payment: float = 0.0,
    start_date: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> PayoffResult:
    """Simulate paying off all debts under one strategy.

    Args:
        debts: Debts to pay off. Never modified.
        strategy: AVALANCHE or SNOWBALL (enum or string value)
        extra_payment: Monthly amount on top of all minimums
        start_date: Month of the first payment, used for the payoff date
        max_months: Safety cap on the simulation length

    Returns:
        PayoffResult with per-debt schedules, monthly totals and summary

    Raises:
        InvalidInputError: Malformed debt list, negative extra payment, or
            unknown strategy.
        NonConvergingError: The monthly budget never pays the debts off.
    """
    strategy = PayoffStrategy.parse(strategy)
    if extra_payment < 0:
        raise InvalidInputError(f"extra_payment must be >= 0, got {extra_payment}")
    _validate_debts(debts)

    states = [
        _DebtState(index=i, debt=d, balance=float(d.balance), rate=monthly_rate(d.interest_rate))
        for i, d in enumerate(debts)
    ]
    active = [s for s in states if s.balance > 0]
    monthly_budget = sum(s.debt.minimum_payment for s in active) + extra_payment

    first_interest = sum(s.balance * s.rate for s in active)
    if active and monthly_budget <= first_interest:
        logger.warning(f"Budget ${monthly_budget:,.2f}/mo <= interest ${first_interest:,.2f}/mo")
        raise NonConvergingError(
            f"Monthly budget ${monthly_budget:,.2f} does not cover monthly interest ${first_interest:,.2f}"
        )

    priority = _priority_key(strategy)
    months: list[PayoffMonth] = []
    payoff_order: list[str] = []
    rollover = 0.0
    month = 0

    while any(s.balance > 0 for s in states):
        if month >= max_months:
            remaining = sum(s.balance for s in states)
            logger.warning(f"{strategy.value}: ${remaining:,.2f} remains after {max_months} months")
            raise NonConvergingError(
                f"Debts are not paid off within {max_months} months ({strategy.value})",
                months_simulated=month,
            )

        month += 1
        totals, cleared = _simulate_month(month, states, priority, extra_payment + rollover)
        months.append(totals)
        for s in cleared:
            payoff_order.append(s.debt.name)
            rollover += s.debt.minimum_payment
            logger.debug(f"{strategy.value}: {s.debt.name or f'debt {s.index}'} paid off in month {month}")

    result = PayoffResult(
        strategy=strategy,
        extra_payment=extra_payment,
        monthly_budget=monthly_budget,
        debts=[
            DebtSchedule(
                name=s.debt.name,
                starting_balance=s.debt.balance,
                interest_rate=s.debt.interest_rate,
                minimum_payment=s.debt.minimum_payment,
                payoff_month=s.payoff_month,
                schedule=s.schedule,
            )
            for s in states
        ],
        months=months,
        payoff_order=payoff_order,
    )
    if start_date and months:
        result.payoff_date = add_months(start_date, len(months) - 1)

    logger.info(
        f"{strategy.value}: {len(debts)} debts paid off in {result.total_months} months, "
        f"${result.total_interest_paid:,.2f} interest"
    )
    return result


@dataclass
class ComparisonResult:
    """Avalanche and snowball runs over the same debts."""

    avalanche: PayoffResult
    snowball: PayoffResult

    @property
    def results(self) -> dict[str, PayoffResult]:
        return {
            PayoffStrategy.AVALANCHE.value: self.avalanche,
            PayoffStrategy.SNOWBALL.value: self.snowball,
        }

    @property
    def interest_savings(self) -> float:
        """Interest avalanche saves over snowball."""
        return self.snowball.total_interest_paid - self.avalanche.total_interest_paid

    @property
    def months_difference(self) -> int:
        """Months avalanche finishes ahead of snowball (negative when behind)."""
        return self.snowball.total_months - self.avalanche.total_months

    @property
    def recommended_strategy(self) -> PayoffStrategy:
        """Avalanche when it saves at least a cent, else snowball for the quicker early wins."""
        if to_cents(self.interest_savings) > 0:
            return PayoffStrategy.AVALANCHE
        return PayoffStrategy.SNOWBALL

    def to_dict(self, include_schedule: bool = False) -> dict:
        return {
            "avalanche": self.avalanche.to_dict(include_schedule=include_schedule),
            "snowball": self.snowball.to_dict(include_schedule=include_schedule),
            "interest_savings": to_cents(self.interest_savings),
            "months_difference": self.months_difference,
            "recommended_strategy": self.recommended_strategy.value,
        }

    def format_table(self) -> str:
        """Format both strategies side by side."""
        lines = []
        lines.append("=" * 60)
        lines.append("  Avalanche vs Snowball")
        lines.append("=" * 60)
        lines.append(f"{'':<22} {'Avalanche':>17} {'Snowball':>17}")
        lines.append("-" * 60)
        a, s = self.avalanche, self.snowball
        lines.append(f"{'Months to debt free':<22} {a.total_months:>17} {s.total_months:>17}")
        lines.append(f"{'Total interest':<22} {a.total_interest_paid:>17,.2f} {s.total_interest_paid:>17,.2f}")
        lines.append(f"{'Total paid':<22} {a.total_paid:>17,.2f} {s.total_paid:>17,.2f}")
        lines.append(f"{'First target':<22} {_first_target(a):>17} {_first_target(s):>17}")
        lines.append("-" * 60)
        lines.append(f"\nAvalanche saves ${self.interest_savings:,.2f} interest, {self.months_difference} months")
        lines.append(f"Recommended: {self.recommended_strategy.value}")
        return "\n".join(lines)


def _first_target(result: PayoffResult) -> str:
    return result.months[0].target if result.months else "-"


def compare_payoff_strategies(
    debts: list[Debt],
    extra_payment: float = 0.0,
    start_date: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> ComparisonResult:
    """Run avalanche and snowball over independent copies of the same debts.

    Args:
        debts: Debts to pay off. Never modified.
        extra_payment: Monthly amount on top of all minimums
        start_date: Month of the first payment
        max_months: Safety cap on each simulation

    Returns:
        ComparisonResult with both runs and the interest/time deltas
    """
    runs = {}
    for strategy in PayoffStrategy:
        runs[strategy] = calculate_debt_payoff(
            copy.deepcopy(debts),
            strategy=strategy,
            extra_payment=extra_payment,
            start_date=start_date,
            max_months=max_months,
        )

    comparison = ComparisonResult(avalanche=runs[PayoffStrategy.AVALANCHE], snowball=runs[PayoffStrategy.SNOWBALL])
    logger.info(
        f"Avalanche saves ${comparison.interest_savings:,.2f} vs snowball "
        f"({comparison.avalanche.total_months} vs {comparison.snowball.total_months} months)"
    )
    return comparison
