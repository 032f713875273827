import logging
import os
from typing import Optional

from flask import Flask, jsonify, redirect, render_template, request, url_for

from amort_calc.data_models import PaymentPlan, RateMode
from amort_calc.engine import compute_plan, summarize
from amort_calc.formatter import (
    format_currency,
    format_date,
    format_percent,
    format_years,
    overview_lines,
)
from amort_calc.utils import parse_date, parse_loan_parameters

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["SCHEDULE_PREVIEW_ROWS"] = int(os.environ.get("SCHEDULE_PREVIEW_ROWS", "600"))
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

app.jinja_env.filters["currency"] = format_currency
app.jinja_env.filters["percent"] = format_percent
app.jinja_env.filters["years"] = format_years
app.jinja_env.filters["due_date"] = format_date

FORM_FIELDS = ("principal", "rate", "term", "rate_mode", "start_date")


def _form_values(source) -> dict:
    values = {name: source.get(name, "").strip() for name in FORM_FIELDS}
    values["rate_mode"] = values["rate_mode"] or RateMode.NOMINAL.value
    return values


def _form_to_parameters(values: dict):
    return parse_loan_parameters(
        values["principal"],
        values["rate"],
        values["term"],
        values["rate_mode"],
    )


def _start_date(values: dict):
    # An unreadable start date falls back to today, as an empty field does.
    try:
        return parse_date(values["start_date"])
    except ValueError:
        logger.info("Ignoring invalid start date %r", values["start_date"])
        return None


def _run_plan(values: dict) -> Optional[PaymentPlan]:
    parameters = _form_to_parameters(values)
    if parameters is None:
        logger.info("No result for loan input %s", values)
        return None
    return compute_plan(parameters, _start_date(values))


def _schedule_view(plan: PaymentPlan):
    limit = app.config["SCHEDULE_PREVIEW_ROWS"]
    rows = list(plan.rows)
    if limit and len(rows) > limit:
        return rows[:limit], len(rows) - limit
    return rows, 0


def _serialize_row(row) -> dict:
    """Convert a ledger row into a JSON-serialisable dictionary for the table."""
    data = row.as_dict()
    data["display"] = {
        "due_date": format_date(row.due_date),
        "opening_balance": format_currency(row.opening_balance),
        "payment": format_currency(row.payment),
        "principal_portion": format_currency(row.principal_portion),
        "interest_portion": format_currency(row.interest_portion),
        "closing_balance": format_currency(row.closing_balance),
        "cumulative_interest": format_currency(row.cumulative_interest),
        "cumulative_principal": format_currency(row.cumulative_principal),
        "cumulative_paid": format_currency(row.cumulative_paid),
    }
    return data


def _serialize_summary(summary) -> dict:
    data = summary.as_dict()
    data["display"] = {
        "monthly_payment": format_currency(round(summary.monthly_payment, 2)),
        "periodic_rate_percent": format_percent(summary.periodic_rate_percent),
        "period_years": format_years(summary.period_years),
        "total_interest": format_currency(summary.total_interest),
    }
    return data


@app.route("/", methods=["GET", "POST"])
def index():
    values = _form_values(request.form if request.method == "POST" else request.args)
    plan = None
    schedule = None
    truncated = 0
    show_schedule = False

    if request.method == "POST":
        plan = _run_plan(values)
        show_schedule = plan is not None and request.form.get("action") == "schedule"
        if show_schedule:
            schedule, truncated = _schedule_view(plan)

    return render_template(
        "index.html",
        values=values,
        rate_modes=list(RateMode),
        plan=plan,
        schedule=schedule,
        truncated=truncated,
        show_schedule=show_schedule,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.get("/api/summary")
def api_summary():
    values = _form_values(request.args)
    parameters = _form_to_parameters(values)
    if parameters is None:
        return jsonify({"result": None})
    return jsonify({"result": _serialize_summary(summarize(parameters))})


@app.get("/api/schedule")
def api_schedule():
    values = _form_values(request.args)
    plan = _run_plan(values)
    if plan is None:
        return jsonify({"result": None})
    rows, truncated = _schedule_view(plan)
    return jsonify(
        {
            "result": {
                "summary": _serialize_summary(plan.summary),
                "start_date": plan.start_date.isoformat(),
                "rows": [_serialize_row(row) for row in rows],
                "truncated": truncated,
            }
        }
    )


@app.get("/print")
def print_view():
    values = _form_values(request.args)
    plan = _run_plan(values)
    if plan is None:
        return redirect(url_for("index"))
    return render_template(
        "print.html",
        plan=plan,
        overview=overview_lines(plan),
        schedule=plan.rows,
        asset_version=app.config["ASSET_VERSION"],
    )


if __name__ == "__main__":
    print("Starting amortization calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
