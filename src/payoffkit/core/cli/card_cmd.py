"""payoffkit credit-card: minimum payments vs. a fixed payment."""

from __future__ import annotations

from datetime import datetime

import click

from payoffkit.core.config_schema import PayoffKitConfig

from .common import START_DATE, calculation_errors, emit, to_date


@click.command("credit-card")
@click.option("--balance", "-b", type=float, required=True, help="Current card balance.")
@click.option("--rate", "-r", type=float, required=True, help="APR in percent.")
@click.option("--min-percent", type=float, default=None, help="Issuer minimum as percent of balance [config].")
@click.option("--min-floor", type=float, default=None, help="Issuer minimum in dollars [config].")
@click.option("--payment", type=float, default=None, help="Fixed monthly payment to compare against.")
@click.option("--start", type=START_DATE, default=None, help="Month of the first payment (YYYY-MM).")
@click.option("--schedule", "include_schedule", is_flag=True, help="Include schedules in JSON output.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_obj
def credit_card(
    settings: PayoffKitConfig,
    balance: float,
    rate: float,
    min_percent: float | None,
    min_floor: float | None,
    payment: float | None,
    start: datetime | None,
    include_schedule: bool,
    as_json: bool,
) -> None:
    """Show how long minimum payments take, and what a fixed payment saves."""
    from payoffkit.financial.calculators.credit_card import CreditCardInputs, calculate_credit_card_payoff

    defaults = settings.credit_card
    with calculation_errors():
        inputs = CreditCardInputs(
            balance=balance,
            interest_rate=rate,
            minimum_payment_percent=min_percent if min_percent is not None else defaults.minimum_payment_percent,
            minimum_payment_floor=min_floor if min_floor is not None else defaults.minimum_payment_floor,
            fixed_payment=payment,
            start_date=to_date(start),
        )
        result = calculate_credit_card_payoff(inputs, max_months=settings.simulation.max_months)
    emit(result, as_json, include_schedule)
