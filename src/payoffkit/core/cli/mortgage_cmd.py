"""payoffkit mortgage / afford: housing payments and affordability."""

from __future__ import annotations

import json
from datetime import datetime

import click

from payoffkit.core.config_schema import PayoffKitConfig

from .common import START_DATE, calculation_errors, emit, to_date


def _housing_cost_options(func):
    """Options shared by both housing commands."""
    for option in reversed(
        [
            click.option("--rate", "-r", type=float, required=True, help="Mortgage rate in percent."),
            click.option("--years", type=int, default=30, show_default=True, help="Loan term in years."),
            click.option("--tax-rate", type=float, default=0.0, help="Annual property tax, percent of price."),
            click.option("--insurance", type=float, default=0.0, help="Homeowner's insurance per year."),
            click.option("--pmi-rate", type=float, default=0.0, help="Annual PMI, percent of the loan."),
            click.option("--hoa", type=float, default=0.0, help="HOA dues per month."),
            click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table."),
        ]
    ):
        func = option(func)
    return func


@click.command()
@click.option("--price", type=float, required=True, help="Home price.")
@click.option("--down", type=float, required=True, help="Down payment.")
@_housing_cost_options
@click.option("--extra", type=float, default=0.0, show_default=True, help="Extra principal every month.")
@click.option("--start", type=START_DATE, default=None, help="Month of the first payment (YYYY-MM).")
@click.option("--schedule", "include_schedule", is_flag=True, help="Include the schedule in JSON output.")
@click.pass_obj
def mortgage(
    settings: PayoffKitConfig,
    price: float,
    down: float,
    rate: float,
    years: int,
    tax_rate: float,
    insurance: float,
    pmi_rate: float,
    hoa: float,
    as_json: bool,
    extra: float,
    start: datetime | None,
    include_schedule: bool,
) -> None:
    """Break down the monthly mortgage payment (PITI, PMI, HOA)."""
    from payoffkit.financial.calculators.mortgage import MortgageInputs, calculate_mortgage

    with calculation_errors():
        inputs = MortgageInputs(
            home_price=price,
            down_payment=down,
            annual_interest_rate=rate,
            term_years=years,
            property_tax_rate=tax_rate,
            annual_home_insurance=insurance,
            pmi_rate=pmi_rate,
            monthly_hoa=hoa,
            extra_payment=extra,
            start_date=to_date(start),
        )
        result = calculate_mortgage(
            inputs,
            pmi_ltv_threshold=settings.mortgage.pmi_ltv_threshold,
            max_months=settings.simulation.max_months,
        )
    emit(result, as_json, include_schedule)


@click.command()
@click.option("--income", type=float, required=True, help="Gross annual income.")
@click.option("--debts", "monthly_debts", type=float, default=0.0, help="Other monthly debt payments.")
@click.option("--down", type=float, default=0.0, help="Down payment available.")
@_housing_cost_options
@click.pass_obj
def afford(
    settings: PayoffKitConfig,
    income: float,
    monthly_debts: float,
    down: float,
    rate: float,
    years: int,
    tax_rate: float,
    insurance: float,
    pmi_rate: float,
    hoa: float,
    as_json: bool,
) -> None:
    """Estimate the most expensive home the income supports."""
    from payoffkit.financial.calculators.mortgage import calculate_affordable_home

    ratios = settings.mortgage
    with calculation_errors():
        result = calculate_affordable_home(
            annual_income=income,
            monthly_debts=monthly_debts,
            down_payment=down,
            annual_interest_rate=rate,
            term_years=years,
            property_tax_rate=tax_rate,
            annual_home_insurance=insurance,
            pmi_rate=pmi_rate,
            monthly_hoa=hoa,
            front_end_ratio=ratios.front_end_ratio,
            back_end_ratio=ratios.back_end_ratio,
            pmi_ltv_threshold=ratios.pmi_ltv_threshold,
        )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    click.echo(f"Max home price: ${result.max_home_price:,.0f}")
    click.echo(f"Max loan:       ${result.max_loan_amount:,.0f}")
    click.echo(f"Housing budget: ${result.max_monthly_payment:,.2f}/mo ({result.limiting_ratio.replace('_', '-')} limit)")
