"""Command‑line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can print the summary figures, the full amortization
schedule or the compact print overview of a loan. Schedules can be exported
to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .data_models import LedgerRow, LoanParameters, PaymentPlan, RateMode
from .engine import compute_plan
from .formatter import print_overview, print_schedule, print_summary
from .utils import parse_date, parse_loan_parameters

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Index",
    "Due_Date",
    "Opening_Balance",
    "Payment",
    "Principal",
    "Interest",
    "Closing_Balance",
    "Cumulative_Interest",
    "Cumulative_Principal",
    "Cumulative_Paid",
]


def build_parameters_from_options(
    principal: str,
    rate: str,
    term: str,
    rate_mode: str,
) -> LoanParameters:
    """Validate command-line values, failing with a usage error when unusable."""
    parameters = parse_loan_parameters(principal, rate, term, rate_mode)
    if parameters is None:
        raise click.UsageError(
            "No result: principal and period must be positive numbers and the rate a non-negative number"
        )
    return parameters


def parse_start_date(value: Optional[str]) -> Optional[date]:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start-date")


def plan_to_dict(plan: PaymentPlan) -> Dict[str, Any]:
    params = plan.parameters
    return {
        "parameters": {
            "principal": params.principal,
            "annual_rate_percent": params.annual_rate_percent,
            "rate_mode": params.rate_mode.value,
            "periods": params.periods,
        },
        "start_date": plan.start_date.isoformat(),
        "summary": plan.summary.as_dict(),
        "schedule": [row.as_dict() for row in plan.rows],
    }


def export_to_json(path: Path, plan: PaymentPlan) -> None:
    """Export summary and schedule to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(plan_to_dict(plan), f, indent=2)


def export_to_csv(path: Path, rows: List[LedgerRow]) -> None:
    """Export the schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in rows:
            writer.writerow(
                [
                    row.index,
                    row.due_date.isoformat(),
                    row.opening_balance,
                    row.payment,
                    row.principal_portion,
                    row.interest_portion,
                    row.closing_balance,
                    row.cumulative_interest,
                    row.cumulative_principal,
                    row.cumulative_paid,
                ]
            )


def loan_options(func):
    """Attach the options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Amount borrowed"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, help="Repayment period in months"),
        click.option(
            "--rate-mode",
            "rate_mode",
            type=click.Choice([m.value for m in RateMode], case_sensitive=False),
            default=RateMode.NOMINAL.value,
            show_default=True,
            help="Whether the annual rate is nominal or effective",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command‑line loan amortization calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: str, term: str, rate_mode: str, output: Optional[str]) -> None:
    """Compute and print the summary figures for a loan."""
    parameters = build_parameters_from_options(principal, rate, term, rate_mode)
    plan = compute_plan(parameters)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": plan.summary.as_dict()}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(plan)


@cli.command()
@loan_options
@click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD); defaults to today")
@click.option("--max-rows", "max_rows", type=int, default=120, show_default=True, help="Rows printed to the terminal")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    term: str,
    rate_mode: str,
    start_date: Optional[str],
    max_rows: int,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    parameters = build_parameters_from_options(principal, rate, term, rate_mode)
    plan = compute_plan(parameters, parse_start_date(start_date))
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, plan)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, list(plan.rows))
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        logger.info("Exported %s schedule rows to %s", len(plan.rows), path)
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(plan)
    rows = list(plan.rows)
    # Limit schedule length printed to avoid flooding the terminal
    if max_rows > 0 and len(rows) > max_rows:
        click.echo(f"Schedule has {len(rows)} rows; showing first {max_rows} rows.")
        rows = rows[:max_rows]
    print_schedule(rows)


@cli.command()
@loan_options
@click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD); defaults to today")
@click.option("--with-schedule", is_flag=True, help="Append the full schedule below the overview")
def overview(
    principal: str,
    rate: str,
    term: str,
    rate_mode: str,
    start_date: Optional[str],
    with_schedule: bool,
) -> None:
    """Print the compact loan overview meant for paper."""
    parameters = build_parameters_from_options(principal, rate, term, rate_mode)
    plan = compute_plan(parameters, parse_start_date(start_date))
    print_overview(plan)
    if with_schedule:
        print_schedule(plan.rows)


if __name__ == "__main__":
    cli()
