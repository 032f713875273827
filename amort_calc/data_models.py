"""Data models for the amortization calculator.

This module defines the dataclasses passed between the calculation engine and
the presentation layers: the validated loan parameters, a single row of the
amortization schedule, the summary figures and the complete payment plan.
Every model is frozen. A plan is recomputed from scratch whenever the inputs
change, so nothing here carries identity or mutable state.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Dict, Tuple


class RateMode(str, Enum):
    """How the annual rate converts into a monthly rate.

    ``NOMINAL`` divides the annual percentage by twelve. ``EFFECTIVE`` treats
    the annual percentage as already compounded and takes the twelfth root.
    """

    NOMINAL = "nominal"
    EFFECTIVE = "effective"

    @classmethod
    def parse(cls, value: object) -> "RateMode":
        """Return the mode for ``value``.

        Accepts the mode names in any case as well as the numeric codes used
        by the form's select box (``"0"`` nominal, ``"1"`` effective).
        """
        if isinstance(value, RateMode):
            return value
        text = str(value).strip().lower()
        if text in ("1", cls.EFFECTIVE.value):
            return cls.EFFECTIVE
        if text in ("0", "", cls.NOMINAL.value):
            return cls.NOMINAL
        raise ValueError(f"Invalid rate mode: {value}")


@dataclass(frozen=True)
class LoanParameters:
    """Validated inputs of a loan.

    Attributes
    ----------
    principal: float
        The amount borrowed. Must be positive.
    annual_rate_percent: float
        The annual rate as a percentage (``6`` means 6 %). Must not be
        negative.
    rate_mode: RateMode
        Whether ``annual_rate_percent`` is nominal or effective.
    periods: int
        Number of monthly installments. Must be positive.

    User input should go through ``utils.parse_loan_parameters`` which
    returns ``None`` for unusable values. Building an instance directly with
    values that break the invariants is a programming error and raises
    ``ValueError``.
    """

    principal: float
    annual_rate_percent: float
    rate_mode: RateMode
    periods: int

    def __post_init__(self) -> None:
        if not math.isfinite(self.principal) or self.principal <= 0:
            raise ValueError("Principal must be a positive finite number")
        if not math.isfinite(self.annual_rate_percent) or self.annual_rate_percent < 0:
            raise ValueError("Annual rate must be a non-negative finite number")
        if isinstance(self.periods, bool) or not isinstance(self.periods, int) or self.periods <= 0:
            raise ValueError("Periods must be a positive integer")
        if not isinstance(self.rate_mode, RateMode):
            raise ValueError(f"Invalid rate mode: {self.rate_mode}")


@dataclass(frozen=True)
class LedgerRow:
    """One month of the amortization schedule.

    ``opening_balance`` of a row always equals ``closing_balance`` of the row
    before it; the first row opens at the principal. ``payment`` is the fixed
    installment except on a final row where the remaining balance is smaller
    than the regular principal portion.

    ``cumulative_paid`` is ``payment * index``, a projection that assumes
    every earlier installment equalled this row's payment. It is not the sum
    of the actual payments.
    """

    index: int
    due_date: date
    opening_balance: float
    payment: float
    principal_portion: float
    interest_portion: float
    closing_balance: float
    cumulative_interest: float
    cumulative_principal: float
    cumulative_paid: float

    def as_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["due_date"] = self.due_date.isoformat()
        return data


@dataclass(frozen=True)
class PaymentSummary:
    """Headline figures shown next to the loan form."""

    monthly_payment: float
    periodic_rate_percent: float  # monthly rate, in percent
    period_years: float
    total_interest: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PaymentPlan:
    """The summary and schedule derived from one set of loan parameters."""

    parameters: LoanParameters
    monthly_rate: float
    summary: PaymentSummary
    rows: Tuple[LedgerRow, ...]
    start_date: date
