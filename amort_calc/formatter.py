"""Output helpers for the amortization calculator.

This module formats the raw numbers produced by the engine for display
(euro amounts with Belgian grouping, percentages, dates) and renders
summaries, schedules and the print overview as plain text tables. The web
templates reuse the same formatting functions as Jinja filters.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

import click

from .data_models import LedgerRow, PaymentPlan


def _localize(number: str) -> str:
    # "1,234.56" -> "1.234,56"
    return number.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float) -> str:
    """Format an amount in euro, e.g. ``€ 1.234,56``."""
    text = _localize(f"{abs(value):,.2f}")
    sign = "-" if round(value, 2) < 0 else ""
    return f"€ {sign}{text}"


def format_percent(value: float, digits: int = 4) -> str:
    """Format a percentage value (``0.5`` -> ``0,5000 %``)."""
    return f"{_localize(f'{value:.{digits}f}')} %"


def format_years(value: float) -> str:
    return f"{_localize(f'{value:.2f}')} years"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def overview_lines(plan: PaymentPlan) -> List[str]:
    """Return the lines of the print overview for a plan."""
    params = plan.parameters
    return [
        f"Amount borrowed: {format_currency(params.principal)}",
        f"Monthly payment: {format_currency(plan.summary.monthly_payment)}",
        f"Annual rate ({params.rate_mode.value}): {_localize(f'{params.annual_rate_percent:g}')} %",
        f"Period: {params.periods} months",
        f"Total interest: {format_currency(plan.summary.total_interest)}",
    ]


def print_summary(plan: PaymentPlan) -> None:
    """Print the summary figures of a plan in a human‑readable format."""
    summary = plan.summary
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Monthly payment    : {format_currency(summary.monthly_payment)}")
    click.echo(f"Monthly rate       : {format_percent(summary.periodic_rate_percent)}")
    click.echo(f"Period             : {format_years(summary.period_years)}")
    click.echo(f"Total interest     : {format_currency(summary.total_interest)}")
    click.echo("-" * 72)


def print_overview(plan: PaymentPlan) -> None:
    """Print the compact overview used on the printed page."""
    click.echo("Loan overview")
    click.echo("=" * 72)
    for line in overview_lines(plan):
        click.echo(f"- {line}")
    click.echo("=" * 72)


def print_schedule(rows: Iterable[LedgerRow]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "No",
        "Due date",
        "Balance",
        "Payment",
        "Principal",
        "Interest",
        "Remaining",
        "Cum.Interest",
        "Cum.Principal",
        "Cum.Paid",
    ]
    click.echo("\t".join(headers))
    for row in rows:
        cells = [
            str(row.index),
            format_date(row.due_date),
            f"{row.opening_balance:.2f}",
            f"{row.payment:.2f}",
            f"{row.principal_portion:.2f}",
            f"{row.interest_portion:.2f}",
            f"{row.closing_balance:.2f}",
            f"{row.cumulative_interest:.2f}",
            f"{row.cumulative_principal:.2f}",
            f"{row.cumulative_paid:.2f}",
        ]
        click.echo("\t".join(cells))
