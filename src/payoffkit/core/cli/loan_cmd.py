"""payoffkit loan: amortize a single loan."""

from __future__ import annotations

from datetime import datetime

import click

from payoffkit.core.config_schema import PayoffKitConfig

from .common import START_DATE, calculation_errors, emit, to_date


@click.command()
@click.option("--principal", "-p", type=float, required=True, help="Amount borrowed.")
@click.option("--rate", "-r", type=float, required=True, help="Annual interest rate in percent (5 = 5%).")
@click.option("--term", "-t", "term_months", type=int, required=True, help="Term in months.")
@click.option("--extra", type=float, default=0.0, show_default=True, help="Extra payment every month.")
@click.option("--payment", type=float, default=None, help="Use this monthly payment instead of the formula payment.")
@click.option("--start", type=START_DATE, default=None, help="Month of the first payment (YYYY-MM).")
@click.option("--rows", type=int, default=12, show_default=True, help="Schedule rows to print in the table.")
@click.option("--schedule", "include_schedule", is_flag=True, help="Include the full schedule in JSON output.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_obj
def loan(
    settings: PayoffKitConfig,
    principal: float,
    rate: float,
    term_months: int,
    extra: float,
    payment: float | None,
    start: datetime | None,
    rows: int,
    include_schedule: bool,
    as_json: bool,
) -> None:
    """Amortize a loan and show the payment schedule."""
    from payoffkit.financial.calculators.amortization import calculate_loan_amortization

    with calculation_errors():
        result = calculate_loan_amortization(
            principal,
            rate,
            term_months,
            extra,
            monthly_payment=payment,
            start_date=to_date(start),
            max_months=settings.simulation.max_months,
        )
    emit(result, as_json, include_schedule, max_rows=rows)
