from datetime import date

from amort_calc.engine import compute_plan
from amort_calc.formatter import (
    format_currency,
    format_date,
    format_percent,
    format_years,
    overview_lines,
    print_schedule,
    print_summary,
)


def test_currency_uses_belgian_grouping():
    assert format_currency(1234.5) == "€ 1.234,50"
    assert format_currency(860.664) == "€ 860,66"
    assert format_currency(-12.3) == "€ -12,30"


def test_currency_negative_zero_has_no_sign():
    assert format_currency(-0.001) == "€ 0,00"


def test_percent_and_years():
    assert format_percent(0.5) == "0,5000 %"
    assert format_years(1.5) == "1,50 years"


def test_date():
    assert format_date(date(2025, 2, 5)) == "05/02/2025"


def test_overview_lines(reference_loan, start_date):
    lines = overview_lines(compute_plan(reference_loan, start_date))
    assert lines == [
        "Amount borrowed: € 10.000,00",
        "Monthly payment: € 860,66",
        "Annual rate (nominal): 6 %",
        "Period: 12 months",
        "Total interest: € 327,97",
    ]


def test_print_summary_and_schedule(capsys, reference_loan, start_date):
    plan = compute_plan(reference_loan, start_date)
    print_summary(plan)
    print_schedule(plan.rows[:2])
    out = capsys.readouterr().out
    assert "Monthly payment    : € 860,66" in out
    assert "Monthly rate       : 0,5000 %" in out
    assert "1\t15/02/2025\t10000.00\t860.66\t810.66\t50.00" in out
    assert out.count("\n") == 10
