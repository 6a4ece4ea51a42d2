"""Case store through the HTTP API: creation, visibility, status and documents."""

import pytest

pytestmark = pytest.mark.integration


def _create(client, headers, title, **extra):
    payload = {"title": title, "parties": [{"name": "A", "role": "plaintiff"}]}
    payload.update(extra)
    resp = client.post("/api/cases", headers=headers, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _set_status(client, headers, case_id, status):
    return client.put(f"/api/cases/{case_id}", headers=headers, json={"status": status})


def test_staff_creates_case_without_description(client, staff):
    resp = client.post(
        "/api/cases",
        headers=staff["headers"],
        json={
            "title": "Smith v. Jones",
            "priority": "high",
            "parties": [{"name": "Smith", "role": "plaintiff"}, {"name": "Jones", "role": "defendant"}],
        },
    )
    assert resp.status_code == 201
    case = resp.json()["data"]
    assert case["caseId"]
    assert case["title"] == "Smith v. Jones"
    assert case["status"] == "pending"
    assert case["priority"] == "high"
    assert case["description"] == ""
    assert [p["name"] for p in case["parties"]] == ["Smith", "Jones"]
    assert case["documents"] == []


def test_priority_defaults_to_medium(client, staff):
    assert _create(client, staff["headers"], "Doe v. Roe")["priority"] == "medium"


@pytest.mark.parametrize("who", ["judge", "lawyer"])
def test_only_staff_create_cases(client, request, who):
    user = request.getfixturevalue(who)
    resp = client.post(
        "/api/cases",
        headers=user["headers"],
        json={"title": "X", "parties": [{"name": "A", "role": "plaintiff"}]},
    )
    assert resp.status_code == 403
    assert resp.json()["success"] is False


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "No parties", "parties": []},
        {"title": "", "parties": [{"name": "A", "role": "plaintiff"}]},
        {"parties": [{"name": "A", "role": "plaintiff"}]},
        {"title": "Bad priority", "priority": "asap", "parties": [{"name": "A", "role": "plaintiff"}]},
        {"title": "Party without role", "parties": [{"name": "A"}]},
    ],
)
def test_invalid_case_payload_is_400(client, staff, payload):
    resp = client.post("/api/cases", headers=staff["headers"], json=payload)
    assert resp.status_code == 400


def test_lawyer_and_judge_lists_hide_completed_cases(client, staff, judge, lawyer):
    open_case = _create(client, staff["headers"], "Open matter")
    done_case = _create(client, staff["headers"], "Closed matter")
    dismissed = _create(client, staff["headers"], "Dismissed matter")
    assert _set_status(client, staff["headers"], done_case["caseId"], "completed").status_code == 200
    assert _set_status(client, staff["headers"], dismissed["caseId"], "dismissed").status_code == 200

    for user in (lawyer, judge):
        ids = {c["caseId"] for c in client.get("/api/cases", headers=user["headers"]).json()["data"]}
        assert open_case["caseId"] in ids
        assert dismissed["caseId"] in ids
        assert done_case["caseId"] not in ids

    staff_ids = {c["caseId"] for c in client.get("/api/cases", headers=staff["headers"]).json()["data"]}
    assert staff_ids == {open_case["caseId"], done_case["caseId"], dismissed["caseId"]}


def test_status_update_is_staff_only(client, staff, judge, case):
    resp = _set_status(client, judge["headers"], case["caseId"], "in_progress")
    assert resp.status_code == 403

    resp = _set_status(client, staff["headers"], case["caseId"], "in_progress")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "in_progress"
    assert resp.json()["message"] == "Case status updated to in_progress"


def test_status_update_validates_value_and_case(client, staff, case):
    assert _set_status(client, staff["headers"], case["caseId"], "archived").status_code == 400

    resp = _set_status(client, staff["headers"], "no-such-case", "completed")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Case not found"}


def test_any_user_can_attach_documents(client, lawyer, case):
    for name in ("Complaint.pdf", "Answer.pdf"):
        resp = client.post(
            f"/api/cases/{case['caseId']}/documents",
            headers=lawyer["headers"],
            json={"name": name, "url": f"https://files.courtdesk.org/{name}"},
        )
        assert resp.status_code == 200

    docs = resp.json()["data"]["documents"]
    assert [d["name"] for d in docs] == ["Complaint.pdf", "Answer.pdf"]
    assert all(d["uploadedAt"] for d in docs)


def test_document_requires_name_and_url(client, lawyer, case):
    resp = client.post(
        f"/api/cases/{case['caseId']}/documents", headers=lawyer["headers"], json={"name": "x.pdf"}
    )
    assert resp.status_code == 400


def test_document_on_missing_case_is_404(client, lawyer):
    resp = client.post(
        "/api/cases/nope/documents", headers=lawyer["headers"], json={"name": "x.pdf", "url": "https://x"}
    )
    assert resp.status_code == 404


def test_case_detail_includes_hearings_in_date_order(client, judge, lawyer, case, schedule):
    later = schedule(case["caseId"], [lawyer["user"]["userId"]], date="2025-04-01")
    earlier = schedule(case["caseId"], [], date="2025-03-01", startTime="14:00", endTime="15:00")
    assert later.status_code == earlier.status_code == 201

    resp = client.get(f"/api/cases/{case['caseId']}", headers=lawyer["headers"])
    assert resp.status_code == 200
    detail = resp.json()["data"]
    assert detail["caseId"] == case["caseId"]
    assert [h["date"] for h in detail["hearings"]] == ["2025-03-01", "2025-04-01"]
    assert detail["parties"][0]["contact"] == "smith@mail.com"


def test_case_detail_missing_is_404(client, staff):
    assert client.get("/api/cases/missing", headers=staff["headers"]).status_code == 404
