"""Core calculation engine for the amortization calculator.

This module implements the financial logic behind the calculator: converting
an annual rate (nominal or effective) into a monthly rate, computing the
fixed annuity installment and building the month-by-month amortization
schedule. All functions are pure. ``compute_plan`` is the single entry point
the command line and web front-ends call whenever an input changes.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterator, List, Optional

from .data_models import LedgerRow, LoanParameters, PaymentPlan, PaymentSummary, RateMode
from .utils import add_months

logger = logging.getLogger(__name__)


def monthly_rate_of(annual_rate_percent: float, rate_mode: RateMode) -> float:
    """Return the monthly interest rate as a fraction.

    A nominal annual rate is simply divided by twelve. An effective annual
    rate already includes compounding, so the monthly rate is the one that
    compounds back to it over twelve months:

        i = (1 + r) ** (1 / 12) - 1

    A zero annual rate gives a zero monthly rate in both modes.
    """
    annual = annual_rate_percent / 100
    if rate_mode is RateMode.EFFECTIVE:
        return (1 + annual) ** (1 / 12) - 1
    return annual / 12


def compute_monthly_payment(principal: float, monthly_rate: float, periods: int) -> float:
    """Return the fixed monthly installment that repays ``principal``.

    The formula is:

        payment = P * i / (1 - (1 + i) ** -n)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if periods <= 0:
        raise ValueError("Periods must be positive")
    if monthly_rate <= 0:
        return principal / periods
    return principal * (monthly_rate / (1 - (1 + monthly_rate) ** -periods))


def iter_schedule(
    principal: float,
    monthly_rate: float,
    payment: float,
    periods: int,
    start_date: date,
) -> Iterator[LedgerRow]:
    """Yield the amortization schedule one month at a time.

    Payments fall at the end of each period, so the first due date is one
    month after ``start_date`` and each later one is one month after the
    previous due date. Once a due date has been clamped to a shorter month
    (Jan 31 -> Feb 28) later dates keep that day. The principal portion is
    capped at the outstanding balance, which keeps the final closing balance
    from going negative. Iteration stops after ``periods`` rows or as soon as
    the loan is paid off, whichever comes first.
    """
    balance = principal
    due = start_date
    cumulative_interest = 0.0
    cumulative_principal = 0.0

    for n in range(1, periods + 1):
        due = add_months(due, 1)
        interest = balance * monthly_rate
        principal_portion = min(payment - interest, balance)
        actual_payment = principal_portion + interest
        closing = max(balance - principal_portion, 0.0)

        cumulative_interest += interest
        cumulative_principal += principal_portion

        yield LedgerRow(
            index=n,
            due_date=due,
            opening_balance=balance,
            payment=actual_payment,
            principal_portion=principal_portion,
            interest_portion=interest,
            closing_balance=closing,
            cumulative_interest=cumulative_interest,
            cumulative_principal=cumulative_principal,
            cumulative_paid=actual_payment * n,
        )

        balance = closing
        if balance <= 0:
            break


def build_schedule(
    principal: float,
    monthly_rate: float,
    payment: float,
    periods: int,
    start_date: Optional[date] = None,
) -> List[LedgerRow]:
    """Return the full amortization schedule as a list.

    ``start_date`` defaults to today.
    """
    if periods <= 0:
        raise ValueError("Periods must be positive")
    start = start_date or date.today()
    rows = list(iter_schedule(principal, monthly_rate, payment, periods, start))
    logger.debug(
        "Built schedule of %s rows (requested %s) starting %s",
        len(rows),
        periods,
        start.isoformat(),
    )
    return rows


def _summary_at_rate(parameters: LoanParameters, rate: float) -> PaymentSummary:
    payment = compute_monthly_payment(parameters.principal, rate, parameters.periods)
    return PaymentSummary(
        monthly_payment=payment,
        periodic_rate_percent=rate * 100,
        period_years=parameters.periods / 12,
        total_interest=payment * parameters.periods - parameters.principal,
    )


def summarize(parameters: LoanParameters) -> PaymentSummary:
    """Compute the headline figures for a loan."""
    rate = monthly_rate_of(parameters.annual_rate_percent, parameters.rate_mode)
    return _summary_at_rate(parameters, rate)


def compute_plan(parameters: LoanParameters, start_date: Optional[date] = None) -> PaymentPlan:
    """Compute the summary and schedule for a loan.

    Parameters
    ----------
    parameters: LoanParameters
        Validated loan inputs.
    start_date: date, optional
        The date the loan starts; the first installment is due one month
        later. Defaults to today.

    Returns
    -------
    PaymentPlan
        The monthly rate, summary figures and schedule rows.
    """
    start = start_date or date.today()
    rate = monthly_rate_of(parameters.annual_rate_percent, parameters.rate_mode)
    summary = _summary_at_rate(parameters, rate)
    rows = build_schedule(
        parameters.principal,
        rate,
        summary.monthly_payment,
        parameters.periods,
        start,
    )
    return PaymentPlan(
        parameters=parameters,
        monthly_rate=rate,
        summary=summary,
        rows=tuple(rows),
        start_date=start,
    )
