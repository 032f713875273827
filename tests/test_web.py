LOAN = {"principal": "10000", "rate": "6", "term": "12", "rate_mode": "nominal", "start_date": "2025-01-15"}


def test_index_starts_empty(client):
    response = client.get("/")
    assert response.status_code == 200
    page = response.get_data(as_text=True)
    assert 'id="pmt" readonly value=""' in page
    assert 'id="scheduleWrapper" class="schedule-wrapper" hidden' in page


def test_post_shows_summary_without_schedule(client):
    response = client.post("/", data={**LOAN, "action": "run"})
    page = response.get_data(as_text=True)
    assert "€ 860,66" in page
    assert "0,5000 %" in page
    assert "1,00 years" in page
    assert "15/02/2025" not in page


def test_post_schedule_action_renders_table(client):
    response = client.post("/", data={**LOAN, "action": "schedule"})
    page = response.get_data(as_text=True)
    assert "15/02/2025" in page
    assert "15/01/2026" in page
    assert "/print?" in page
    assert 'style="visibility: hidden"' not in page


def test_post_invalid_input_resets_outputs(client):
    response = client.post("/", data={**LOAN, "term": "0", "action": "schedule"})
    page = response.get_data(as_text=True)
    assert response.status_code == 200
    assert 'id="pmt" readonly value=""' in page
    assert "€" not in page


def test_api_summary(client):
    response = client.get("/api/summary", query_string=LOAN)
    result = response.get_json()["result"]
    assert abs(result["monthly_payment"] - 860.66) < 0.01
    assert result["period_years"] == 1.0
    assert result["display"]["total_interest"] == "€ 327,97"


def test_api_summary_no_result(client):
    response = client.get("/api/summary", query_string={**LOAN, "principal": "abc"})
    assert response.status_code == 200
    assert response.get_json() == {"result": None}


def test_api_schedule_effective_single_period(client):
    query = {"principal": "5000", "rate": "5", "term": "1", "rate_mode": "1", "start_date": "2025-01-15"}
    result = client.get("/api/schedule", query_string=query).get_json()["result"]
    assert result["start_date"] == "2025-01-15"
    assert len(result["rows"]) == 1
    assert result["rows"][0]["due_date"] == "2025-02-15"
    assert result["rows"][0]["display"]["payment"] == "€ 5.020,37"
    assert abs(result["rows"][0]["closing_balance"]) < 1e-9


def test_api_schedule_truncates_preview(client):
    client.application.config["SCHEDULE_PREVIEW_ROWS"] = 12
    try:
        query = {"principal": "200000", "rate": "3", "term": "360"}
        result = client.get("/api/schedule", query_string=query).get_json()["result"]
    finally:
        client.application.config["SCHEDULE_PREVIEW_ROWS"] = 600
    assert len(result["rows"]) == 12
    assert result["truncated"] == 348


def test_print_view(client):
    response = client.get("/print", query_string=LOAN)
    page = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "<li>Amount borrowed: € 10.000,00</li>" in page
    assert "<li>Total interest: € 327,97</li>" in page
    assert "15/01/2026" in page


def test_print_view_redirects_without_result(client):
    response = client.get("/print", query_string={**LOAN, "rate": "-1"})
    assert response.status_code == 302


def test_script_ignores_superseded_responses(client):
    script = client.get("/static/app.js").get_data(as_text=True)
    assert "const seq = ++latest;" in script
    assert "current: seq === latest" in script
    assert script.count("if (!current) return;") == 2
