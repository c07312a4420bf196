"""Mortgage calculator and home affordability.

Layers the housing costs around a plain amortizing loan:
- Principal & interest from the amortization engine
- Property tax, homeowner's insurance and HOA dues (flat monthly escrow)
- PMI while the loan-to-value ratio is above the threshold (80% by default)

Affordability inverts the same payment: the largest home price whose total
housing payment fits both the front-end and back-end debt-to-income limits.
"""

from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from payoffkit.core.exceptions import InvalidInputError
from payoffkit.financial.models import LoanTerms, to_cents

from .amortization import DEFAULT_MAX_MONTHS, amortize_loan, calculate_monthly_payment

DEFAULT_PMI_LTV_THRESHOLD = 80.0
DEFAULT_FRONT_END_RATIO = 28.0  # Housing / gross income
DEFAULT_BACK_END_RATIO = 36.0  # Housing + other debts / gross income


@dataclass
class MortgageInputs:
    """Home purchase and loan terms.

    Attributes:
        home_price: Purchase price.
        down_payment: Cash paid up front; the rest is borrowed.
        annual_interest_rate: Mortgage rate in percent.
        term_years: Loan term in years.
        property_tax_rate: Annual property tax as percent of the home price.
        annual_home_insurance: Homeowner's insurance per year.
        pmi_rate: Annual PMI as percent of the original loan amount.
        monthly_hoa: HOA dues per month.
        extra_payment: Extra principal paid every month.
        start_date: Month of the first payment.
    """

    home_price: float
    down_payment: float
    annual_interest_rate: float
    term_years: int = 30
    property_tax_rate: float = 0.0
    annual_home_insurance: float = 0.0
    pmi_rate: float = 0.0
    monthly_hoa: float = 0.0
    extra_payment: float = 0.0
    start_date: date | None = None

    def __post_init__(self):
        for name in (
            "home_price",
            "down_payment",
            "annual_interest_rate",
            "property_tax_rate",
            "annual_home_insurance",
            "pmi_rate",
            "monthly_hoa",
            "extra_payment",
        ):
            if getattr(self, name) < 0:
                raise InvalidInputError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.term_years <= 0:
            raise InvalidInputError(f"term_years must be > 0, got {self.term_years}")
        if self.down_payment > self.home_price:
            raise InvalidInputError(
                f"down_payment ${self.down_payment:,.2f} exceeds home_price ${self.home_price:,.2f}"
            )

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def term_months(self) -> int:
        return self.term_years * 12

    @property
    def down_payment_percent(self) -> float:
        if self.home_price == 0:
            return 0.0
        return self.down_payment / self.home_price * 100


@dataclass(frozen=True)
class MortgageAmortizationEntry:
    """One month of a mortgage, escrow included."""

    month: int
    starting_balance: float
    principal_and_interest: float
    interest_paid: float
    principal_paid: float
    ending_balance: float
    property_tax: float
    insurance: float
    pmi: float
    hoa: float

    @property
    def total_payment(self) -> float:
        return self.principal_and_interest + self.property_tax + self.insurance + self.pmi + self.hoa

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "starting_balance": to_cents(self.starting_balance),
            "principal_and_interest": to_cents(self.principal_and_interest),
            "interest_paid": to_cents(self.interest_paid),
            "principal_paid": to_cents(self.principal_paid),
            "ending_balance": to_cents(self.ending_balance),
            "property_tax": to_cents(self.property_tax),
            "insurance": to_cents(self.insurance),
            "pmi": to_cents(self.pmi),
            "hoa": to_cents(self.hoa),
            "total_payment": to_cents(self.total_payment),
        }


@dataclass
class MortgageSummary:
    """Monthly breakdown and lifetime totals for a mortgage."""

    inputs: MortgageInputs
    loan_amount: float
    monthly_principal_and_interest: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_pmi: float  # First-month PMI, 0 if none
    monthly_hoa: float
    total_months: int
    total_interest_paid: float
    pmi_removal_month: int | None = None  # First month without PMI
    payoff_date: date | None = None
    schedule: list[MortgageAmortizationEntry] = field(default_factory=list)

    @property
    def total_monthly_payment(self) -> float:
        """First month's full housing payment (PITI + PMI + HOA)."""
        return (
            self.monthly_principal_and_interest
            + self.monthly_property_tax
            + self.monthly_insurance
            + self.monthly_pmi
            + self.monthly_hoa
        )

    @property
    def total_pmi_paid(self) -> float:
        return sum(row.pmi for row in self.schedule)

    @property
    def total_cost(self) -> float:
        """Everything paid over the life of the loan, down payment included."""
        return self.inputs.down_payment + sum(row.total_payment for row in self.schedule)

    def to_dict(self, include_schedule: bool = False) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "home_price": to_cents(self.inputs.home_price),
            "down_payment": to_cents(self.inputs.down_payment),
            "loan_amount": to_cents(self.loan_amount),
            "monthly": {
                "principal_and_interest": to_cents(self.monthly_principal_and_interest),
                "property_tax": to_cents(self.monthly_property_tax),
                "insurance": to_cents(self.monthly_insurance),
                "pmi": to_cents(self.monthly_pmi),
                "hoa": to_cents(self.monthly_hoa),
                "total": to_cents(self.total_monthly_payment),
            },
            "total_months": self.total_months,
            "total_interest_paid": to_cents(self.total_interest_paid),
            "total_pmi_paid": to_cents(self.total_pmi_paid),
            "total_cost": to_cents(self.total_cost),
            "pmi_removal_month": self.pmi_removal_month,
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
        }
        if include_schedule:
            data["schedule"] = [row.to_dict() for row in self.schedule]
        return data

    def format_table(self) -> str:
        """Format the monthly breakdown as text."""
        lines = []
        lines.append("=" * 50)
        lines.append("  Mortgage Summary")
        lines.append("=" * 50)
        lines.append(f"\nHome Price: ${self.inputs.home_price:,.0f}")
        lines.append(f"Down Payment: ${self.inputs.down_payment:,.0f} ({self.inputs.down_payment_percent:.1f}%)")
        lines.append(f"Loan Amount: ${self.loan_amount:,.0f}")
        lines.append("")
        lines.append("-" * 50)
        for label, amount in [
            ("Principal & Interest", self.monthly_principal_and_interest),
            ("Property Tax", self.monthly_property_tax),
            ("Insurance", self.monthly_insurance),
            ("PMI", self.monthly_pmi),
            ("HOA", self.monthly_hoa),
        ]:
            if amount > 0:
                lines.append(f"{label:<30} ${amount:>15,.2f}")
        lines.append("-" * 50)
        lines.append(f"{'Total Monthly Payment':<30} ${self.total_monthly_payment:>15,.2f}")
        lines.append("")
        lines.append(f"Payoff: {self.total_months} months, ${self.total_interest_paid:,.0f} interest")
        if self.pmi_removal_month:
            lines.append(f"PMI drops off in month {self.pmi_removal_month}")
        return "\n".join(lines)


def _check_pmi_threshold(pmi_ltv_threshold: float) -> None:
    if not 0 < pmi_ltv_threshold < 100:
        raise InvalidInputError(f"pmi_ltv_threshold must be in (0, 100), got {pmi_ltv_threshold}")


def calculate_mortgage(
    inputs: MortgageInputs,
    pmi_ltv_threshold: float = DEFAULT_PMI_LTV_THRESHOLD,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> MortgageSummary:
    """Calculate monthly payment breakdown and full schedule for a mortgage.

    Args:
        inputs: Home price, down payment, rate and housing costs
        pmi_ltv_threshold: PMI is charged while balance / home price exceeds this percent
        max_months: Safety cap on the schedule length

    Returns:
        MortgageSummary with breakdown, totals and schedule
    """
    _check_pmi_threshold(pmi_ltv_threshold)
    loan = amortize_loan(
        LoanTerms(
            principal=inputs.loan_amount,
            annual_interest_rate=inputs.annual_interest_rate,
            term_months=inputs.term_months,
            extra_payment=inputs.extra_payment,
            start_date=inputs.start_date,
        ),
        max_months=max_months,
    )

    monthly_tax = inputs.home_price * inputs.property_tax_rate / 100 / 12
    monthly_insurance = inputs.annual_home_insurance / 12
    pmi_amount = inputs.loan_amount * inputs.pmi_rate / 100 / 12
    pmi_cutoff = inputs.home_price * pmi_ltv_threshold / 100

    schedule: list[MortgageAmortizationEntry] = []
    pmi_removal_month = None
    for row in loan.schedule:
        pmi = pmi_amount if row.starting_balance > pmi_cutoff else 0.0
        if pmi == 0.0 and schedule and schedule[-1].pmi > 0:
            pmi_removal_month = row.month
        schedule.append(
            MortgageAmortizationEntry(
                month=row.month,
                starting_balance=row.starting_balance,
                principal_and_interest=row.payment,
                interest_paid=row.interest_paid,
                principal_paid=row.principal_paid,
                ending_balance=row.ending_balance,
                property_tax=monthly_tax,
                insurance=monthly_insurance,
                pmi=pmi,
                hoa=inputs.monthly_hoa,
            )
        )

    summary = MortgageSummary(
        inputs=inputs,
        loan_amount=inputs.loan_amount,
        monthly_principal_and_interest=loan.summary.total_monthly_payment,
        monthly_property_tax=monthly_tax,
        monthly_insurance=monthly_insurance,
        monthly_pmi=schedule[0].pmi if schedule else 0.0,
        monthly_hoa=inputs.monthly_hoa,
        total_months=loan.summary.total_months,
        total_interest_paid=loan.summary.total_interest_paid,
        pmi_removal_month=pmi_removal_month,
        payoff_date=loan.summary.payoff_date,
        schedule=schedule,
    )

    logger.debug(
        f"Mortgage ${inputs.loan_amount:,.0f} at {inputs.annual_interest_rate}%: "
        f"${summary.total_monthly_payment:,.2f}/mo, PMI until month {pmi_removal_month}"
    )
    return summary


@dataclass
class AffordabilityResult:
    """Largest home price the income supports."""

    max_home_price: float
    max_loan_amount: float
    down_payment: float
    max_monthly_payment: float  # Housing budget allowed by the ratios
    monthly_principal_and_interest: float
    limiting_ratio: str  # "front_end" or "back_end"

    def to_dict(self) -> dict:
        return {
            "max_home_price": to_cents(self.max_home_price),
            "max_loan_amount": to_cents(self.max_loan_amount),
            "down_payment": to_cents(self.down_payment),
            "max_monthly_payment": to_cents(self.max_monthly_payment),
            "monthly_principal_and_interest": to_cents(self.monthly_principal_and_interest),
            "limiting_ratio": self.limiting_ratio,
        }


def _max_loan(available: float, down_payment: float, payment_factor: float, tax_factor: float) -> float:
    """Largest loan with ``loan * payment_factor + price * tax_factor <= available``."""
    return (available - down_payment * tax_factor) / (payment_factor + tax_factor)


def calculate_affordable_home(
    annual_income: float,
    monthly_debts: float,
    down_payment: float,
    annual_interest_rate: float,
    term_years: int = 30,
    property_tax_rate: float = 0.0,
    annual_home_insurance: float = 0.0,
    pmi_rate: float = 0.0,
    monthly_hoa: float = 0.0,
    front_end_ratio: float = DEFAULT_FRONT_END_RATIO,
    back_end_ratio: float = DEFAULT_BACK_END_RATIO,
    pmi_ltv_threshold: float = DEFAULT_PMI_LTV_THRESHOLD,
) -> AffordabilityResult:
    """Solve for the most expensive home the income supports.

    The housing payment (P&I + tax + insurance + PMI + HOA) may not exceed
    ``front_end_ratio`` percent of gross monthly income, and housing plus
    ``monthly_debts`` may not exceed ``back_end_ratio`` percent.

    Returns:
        AffordabilityResult; a zero loan when the budget cannot carry one.
    """
    if annual_income <= 0:
        raise InvalidInputError(f"annual_income must be > 0, got {annual_income}")
    for name, value in [
        ("monthly_debts", monthly_debts),
        ("down_payment", down_payment),
        ("property_tax_rate", property_tax_rate),
        ("annual_home_insurance", annual_home_insurance),
        ("pmi_rate", pmi_rate),
        ("monthly_hoa", monthly_hoa),
    ]:
        if value < 0:
            raise InvalidInputError(f"{name} must be >= 0, got {value}")
    for name, ratio in [("front_end_ratio", front_end_ratio), ("back_end_ratio", back_end_ratio)]:
        if not 0 < ratio <= 100:
            raise InvalidInputError(f"{name} must be in (0, 100], got {ratio}")
    _check_pmi_threshold(pmi_ltv_threshold)

    monthly_income = annual_income / 12
    front_limit = monthly_income * front_end_ratio / 100
    back_limit = monthly_income * back_end_ratio / 100 - monthly_debts
    if front_limit <= back_limit:
        housing_budget, limiting_ratio = front_limit, "front_end"
    else:
        housing_budget, limiting_ratio = back_limit, "back_end"

    term_months = term_years * 12
    payment_factor = calculate_monthly_payment(1.0, annual_interest_rate, term_months)
    tax_factor = property_tax_rate / 100 / 12
    pmi_factor = pmi_rate / 100 / 12
    available = housing_budget - annual_home_insurance / 12 - monthly_hoa

    loan = _max_loan(available, down_payment, payment_factor, tax_factor)
    if pmi_factor > 0 and loan > 0 and loan / (loan + down_payment) * 100 > pmi_ltv_threshold:
        with_pmi = _max_loan(available, down_payment, payment_factor + pmi_factor, tax_factor)
        if with_pmi / (with_pmi + down_payment) * 100 > pmi_ltv_threshold:
            loan = with_pmi
        else:
            # PMI pushes the loan below the threshold; borrow exactly up to it instead
            loan = down_payment * pmi_ltv_threshold / (100 - pmi_ltv_threshold)

    if loan <= 0:
        logger.warning(f"Housing budget ${housing_budget:,.2f}/mo cannot carry a loan")
        loan = 0.0

    logger.debug(f"Affordability: ${housing_budget:,.2f}/mo housing ({limiting_ratio}) -> ${loan:,.0f} loan")

    return AffordabilityResult(
        max_home_price=down_payment + loan,
        max_loan_amount=loan,
        down_payment=down_payment,
        max_monthly_payment=max(housing_budget, 0.0),
        monthly_principal_and_interest=loan * payment_factor,
        limiting_ratio=limiting_ratio,
    )
