"""Shared setup logic for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any

import click
import yaml

from payoffkit.core.config import Config
from payoffkit.core.config_schema import PayoffKitConfig
from payoffkit.core.exceptions import PayoffKitError
from payoffkit.financial.models import Debt

START_DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m"])


def load_settings(config_file: str | None = None) -> PayoffKitConfig:
    """Load and validate configuration, turning config errors into CLI errors."""
    try:
        return Config(config_file=config_file).validated()
    except PayoffKitError as e:
        raise click.ClickException(str(e)) from e


def to_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def parse_debt(spec: str) -> Debt:
    """Parse ``NAME:BALANCE:RATE:MINIMUM`` (the name may itself contain colons)."""
    parts = spec.rsplit(":", 3)
    if len(parts) != 4:
        raise click.BadParameter(f"expected NAME:BALANCE:RATE:MINIMUM, got {spec!r}", param_hint="--debt")
    name, balance, rate, minimum = parts
    try:
        return Debt(name=name, balance=float(balance), interest_rate=float(rate), minimum_payment=float(minimum))
    except ValueError as e:
        raise click.BadParameter(f"{spec!r}: {e}", param_hint="--debt") from e


def load_debts_file(path: str) -> list[Debt]:
    """Load debts from a YAML file: a list of mappings, or a mapping with a ``debts`` list."""
    with open(path) as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("debts", [])
    if not isinstance(data, list):
        raise click.BadParameter(f"{path}: expected a list of debts", param_hint="--file")

    debts = []
    for position, entry in enumerate(data):
        try:
            debts.append(
                Debt(
                    name=str(entry.get("name", f"Debt {position + 1}")),
                    balance=float(entry["balance"]),
                    interest_rate=float(entry["interest_rate"]),
                    minimum_payment=float(entry["minimum_payment"]),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise click.BadParameter(f"{path}: debt {position + 1} is invalid ({e})", param_hint="--file") from e
    return debts


def collect_debts(debt_specs: tuple[str, ...], debts_file: str | None) -> list[Debt]:
    """Combine ``--file`` debts with ``--debt`` options, file first."""
    debts = load_debts_file(debts_file) if debts_file else []
    debts.extend(parse_debt(spec) for spec in debt_specs)
    if not debts:
        raise click.UsageError("No debts given. Use --debt NAME:BALANCE:RATE:MINIMUM or --file.")
    return debts


@contextmanager
def calculation_errors() -> Iterator[None]:
    """Report payoffkit errors as a CLI error (exit code 1) instead of a traceback."""
    try:
        yield
    except PayoffKitError as e:
        raise click.ClickException(str(e)) from e


def emit(result: Any, as_json: bool, include_schedule: bool = False, **table_kwargs: Any) -> None:
    """Print a result as JSON or as its text table."""
    if as_json:
        click.echo(json.dumps(result.to_dict(include_schedule=include_schedule), indent=2))
    else:
        click.echo(result.format_table(**table_kwargs))
