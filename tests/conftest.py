"""Shared fixtures.

Reference loan: 10 000 borrowed at 6 % nominal over 12 months, starting
15 January 2025.
"""

from datetime import date

import pytest
from click.testing import CliRunner

from amort_calc.data_models import LoanParameters, RateMode
from amort_calc_web.app import app as flask_app


@pytest.fixture
def reference_loan() -> LoanParameters:
    return LoanParameters(
        principal=10000.0,
        annual_rate_percent=6.0,
        rate_mode=RateMode.NOMINAL,
        periods=12,
    )


@pytest.fixture
def start_date() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def client():
    flask_app.config.update(TESTING=True)
    with flask_app.test_client() as client:
        yield client
