"""Unauthenticated, redacted case views."""

import pytest

pytestmark = pytest.mark.integration


def test_public_list_is_redacted(client, case):
    resp = client.get("/api/public/cases")
    assert resp.status_code == 200
    cases = resp.json()["data"]
    assert len(cases) == 1
    assert set(cases[0]) == {"caseId", "title", "status", "priority", "createdAt"}
    assert cases[0]["title"] == "Smith v. Jones"


def test_public_list_is_capped_at_50(client, staff):
    for i in range(52):
        resp = client.post(
            "/api/cases",
            headers=staff["headers"],
            json={"title": f"Case {i}", "parties": [{"name": "A", "role": "plaintiff"}]},
        )
        assert resp.status_code == 201
    assert len(client.get("/api/public/cases").json()["data"]) == 50


def test_public_detail_of_dismissed_case(client, staff, lawyer, case, schedule):
    client.post(
        f"/api/cases/{case['caseId']}/documents",
        headers=lawyer["headers"],
        json={"name": "Sealed.pdf", "url": "https://files.courtdesk.org/sealed.pdf"},
    )
    assert schedule(case["caseId"], [lawyer["user"]["userId"]]).status_code == 201
    client.put(f"/api/cases/{case['caseId']}", headers=staff["headers"], json={"status": "dismissed"})

    resp = client.get(f"/api/public/cases/{case['caseId']}")
    assert resp.status_code == 200
    detail = resp.json()["data"]

    assert detail["status"] == "dismissed"
    assert "documents" not in detail
    assert detail["parties"] == [
        {"name": "Smith", "role": "plaintiff"},
        {"name": "Jones", "role": "defendant"},
    ]

    (hearing,) = detail["hearings"]
    assert set(hearing) == {
        "hearingId", "caseTitle", "date", "startTime", "endTime", "judgeName", "lawyerNames", "status",
    }
    assert hearing["lawyerNames"] == ["Atticus Finch"]
    assert hearing["judgeName"] == "Judge Dredd"
    assert "sealed.pdf" not in resp.text


def test_public_detail_missing_case_is_404(client):
    resp = client.get("/api/public/cases/missing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Case not found"}
