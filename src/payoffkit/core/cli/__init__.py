"""payoffkit CLI: entry point for the loan, debt, credit card and mortgage commands."""

import click

from payoffkit import __version__
from payoffkit.core.utils.logging import setup_logging

from .common import load_settings


@click.group()
@click.version_option(version=__version__, package_name="payoffkit")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML or JSON config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """payoffkit: loan amortization and debt payoff calculators."""
    settings = load_settings(config_file)
    setup_logging(settings.logging, level=log_level)
    ctx.obj = settings


# Register subcommands
from .card_cmd import credit_card
from .debt_cmd import compare, payoff
from .loan_cmd import loan
from .mortgage_cmd import afford, mortgage

main.add_command(loan)
main.add_command(payoff)
main.add_command(compare)
main.add_command(credit_card)
main.add_command(mortgage)
main.add_command(afford)
