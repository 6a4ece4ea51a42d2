"""Report generation and listing (staff only)."""

from datetime import datetime, timedelta

import pytest

pytestmark = pytest.mark.integration


def _generate(client, user, report_type, period="custom", **bounds):
    payload = {"type": report_type, "period": period}
    if period == "custom":
        now = datetime.utcnow()
        payload.setdefault("startDate", (now - timedelta(days=1)).isoformat())
        payload.setdefault("endDate", (now + timedelta(days=1)).isoformat())
    payload.update(bounds)
    return client.post("/api/reports", headers=user["headers"], json=payload)


def _case(client, staff, title, status=None):
    resp = client.post(
        "/api/cases",
        headers=staff["headers"],
        json={"title": title, "parties": [{"name": "A", "role": "plaintiff"}]},
    )
    case = resp.json()["data"]
    if status:
        client.put(f"/api/cases/{case['caseId']}", headers=staff["headers"], json={"status": status})
    return case


def test_reports_are_staff_only(client, judge, lawyer):
    for user in (judge, lawyer):
        assert client.get("/api/reports", headers=user["headers"]).status_code == 403
        assert _generate(client, user, "case_progress").status_code == 403


def test_case_progress_counts_by_status(client, staff):
    _case(client, staff, "A")
    _case(client, staff, "B")
    _case(client, staff, "C", status="completed")
    _case(client, staff, "D", status="dismissed")

    resp = _generate(client, staff, "case_progress")
    assert resp.status_code == 200
    report = resp.json()["data"]
    assert report["reportId"]
    assert report["type"] == "case_progress"
    assert report["data"] == {"pending": 2, "completed": 1, "dismissed": 1}


def test_judge_performance_counts_completed_hearings(client, staff, judge, other_judge, case, schedule):
    def completed_hearing(by):
        hearing = schedule(case["caseId"], [], by=by).json()["data"]
        resp = client.put(
            f"/api/hearings/{hearing['hearingId']}", headers=by["headers"], json={"status": "completed"}
        )
        assert resp.status_code == 200

    completed_hearing(other_judge)
    completed_hearing(other_judge)
    completed_hearing(judge)
    schedule(case["caseId"], [])  # still scheduled, not counted

    data = _generate(client, staff, "judge_performance").json()["data"]["data"]
    assert data == [
        {"judgeId": other_judge["user"]["userId"], "judgeName": "Judge Judy", "count": 2},
        {"judgeId": judge["user"]["userId"], "judgeName": "Judge Dredd", "count": 1},
    ]


def test_resource_utilization_buckets_by_start_time(client, staff, case, schedule):
    schedule(case["caseId"], [], startTime="09:30", endTime="10:30")
    schedule(case["caseId"], [], startTime="09:30", endTime="11:00", date="2025-03-06")
    schedule(case["caseId"], [], startTime="14:00", endTime="15:00")

    data = _generate(client, staff, "resource_utilization").json()["data"]["data"]
    assert data == {"09:30": 2, "14:00": 1}


def test_window_excludes_rows_created_outside_it(client, staff):
    _case(client, staff, "Now")
    resp = _generate(
        client, staff, "case_progress",
        startDate="2000-01-01T00:00:00", endDate="2000-12-31T23:59:59",
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["data"] == {}


def test_calendar_period_window_is_persisted(client, staff):
    resp = _generate(client, staff, "case_progress", period="monthly")
    assert resp.status_code == 200
    report = resp.json()["data"]
    start = datetime.fromisoformat(report["startDate"])
    end = datetime.fromisoformat(report["endDate"])
    assert start.day == 1 and start.hour == 0
    assert start <= datetime.utcnow() <= end


@pytest.mark.parametrize(
    "bounds",
    [{"startDate": None, "endDate": None}, {"endDate": None}, {"startDate": None}],
)
def test_custom_period_requires_both_bounds(client, staff, bounds):
    resp = _generate(client, staff, "case_progress", **bounds)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.parametrize(
    "payload",
    [{"type": "revenue", "period": "daily"}, {"type": "case_progress", "period": "hourly"}, {}],
)
def test_unknown_type_or_period_is_400(client, staff, payload):
    assert client.post("/api/reports", headers=staff["headers"], json=payload).status_code == 400


def test_list_returns_latest_ten(client, staff):
    for _ in range(12):
        assert _generate(client, staff, "case_progress", period="daily").status_code == 200

    reports = client.get("/api/reports", headers=staff["headers"]).json()["data"]
    assert len(reports) == 10
    stamps = [r["createdAt"] for r in reports]
    assert stamps == sorted(stamps, reverse=True)


def test_blank_bounds_are_ignored_for_calendar_periods(client, staff):
    resp = _generate(client, staff, "case_progress", period="monthly", startDate="", endDate="")
    assert resp.status_code == 200
    report = resp.json()["data"]
    assert report["startDate"] and report["endDate"]
    assert datetime.fromisoformat(report["startDate"]).day == 1


def test_blank_bounds_for_custom_period_are_400(client, staff):
    resp = _generate(client, staff, "case_progress", startDate="", endDate="  ")
    assert resp.status_code == 400
