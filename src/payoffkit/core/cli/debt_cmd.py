"""payoffkit payoff / compare: multi-debt payoff plans."""

from __future__ import annotations

from datetime import datetime

import click

from payoffkit.core.config_schema import PayoffKitConfig

from .common import START_DATE, calculation_errors, collect_debts, emit, to_date

_debt_option = click.option(
    "--debt",
    "debt_specs",
    multiple=True,
    metavar="NAME:BALANCE:RATE:MINIMUM",
    help="A debt to pay off. Repeat for each debt.",
)
_file_option = click.option(
    "--file",
    "debts_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file listing debts (name, balance, interest_rate, minimum_payment).",
)


@click.command()
@_debt_option
@_file_option
@click.option(
    "--strategy",
    type=click.Choice(["avalanche", "snowball"], case_sensitive=False),
    default="avalanche",
    show_default=True,
)
@click.option("--extra", type=float, default=0.0, show_default=True, help="Monthly amount on top of all minimums.")
@click.option("--start", type=START_DATE, default=None, help="Month of the first payment (YYYY-MM).")
@click.option("--schedule", "include_schedule", is_flag=True, help="Include per-debt schedules in JSON output.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_obj
def payoff(
    settings: PayoffKitConfig,
    debt_specs: tuple[str, ...],
    debts_file: str | None,
    strategy: str,
    extra: float,
    start: datetime | None,
    include_schedule: bool,
    as_json: bool,
) -> None:
    """Plan paying off several debts with the avalanche or snowball method."""
    from payoffkit.financial.calculators.debt_payoff import calculate_debt_payoff

    debts = collect_debts(debt_specs, debts_file)
    with calculation_errors():
        result = calculate_debt_payoff(
            debts,
            strategy=strategy,
            extra_payment=extra,
            start_date=to_date(start),
            max_months=settings.simulation.max_months,
        )
    emit(result, as_json, include_schedule)


@click.command()
@_debt_option
@_file_option
@click.option("--extra", type=float, default=0.0, show_default=True, help="Monthly amount on top of all minimums.")
@click.option("--start", type=START_DATE, default=None, help="Month of the first payment (YYYY-MM).")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_obj
def compare(
    settings: PayoffKitConfig,
    debt_specs: tuple[str, ...],
    debts_file: str | None,
    extra: float,
    start: datetime | None,
    as_json: bool,
) -> None:
    """Compare avalanche and snowball payoff side by side."""
    from payoffkit.financial.calculators.debt_payoff import compare_payoff_strategies

    debts = collect_debts(debt_specs, debts_file)
    with calculation_errors():
        result = compare_payoff_strategies(
            debts,
            extra_payment=extra,
            start_date=to_date(start),
            max_months=settings.simulation.max_months,
        )
    emit(result, as_json)
