# tests/test_complaint_api.py
import sqlite3
import uuid
import pytest
from repository.complaint_repository import ComplaintRepository
from tests.helpers import bbc_complaint, submit_complaint

UNKNOWN_ID = "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"


def ipso_complaint(**overrides) -> dict:
    payload = {
        "originUrl": "https://www.ipso.co.uk/make-a-complaint/",
        "where": "ipso",
        "privacyPolicyAccepted": True,
        "interceptedData": {
            "complaintDetails": {
                "title": "Misleading headline",
                "fields": ["First <b>point</b>", "Second point"],
            },
            "contactDetails": {
                "email_address": "c@example.com",
                "first_name": "Sam",
                "last_name": "Doe",
                "terms-and-conditions": True,
            },
            "codeBreaches": [
                {"clause": "1", "details": "Accuracy"},
                {"clause": "2", "details": "Privacy"},
            ],
        },
    }
    payload.update(overrides)
    return payload


def test_bbc_complaint_round_trip_is_redacted_and_sanitized(client):
    complaint_id = submit_complaint(
        client, bbc_complaint(title="<script>alert(1)</script>Headline", emailaddress="me@x.org")
    )
    assert uuid.UUID(complaint_id).version == 4

    res = client.get(f"/complaint/{complaint_id}")
    assert res.status_code == 200
    view = res.json()["complaint"]
    assert view["id"] == complaint_id
    assert view["originUrl"] == "[REDACTED]"
    assert view["title"] == "alert(1)Headline"
    assert view["programme"] == "News"
    assert view["source"] == "BBC"
    assert "emailaddress" not in view
    assert view["ipsoFields"] is None


def test_intercept_aliases_accept_the_same_payload(client):
    for path in ("/intercept", "/intercept/v2"):
        res = client.post(path, json=bbc_complaint())
        assert res.status_code == 200
        assert res.json()["message"] == "Data stored successfully."


def test_ipso_complaint_keeps_fields_and_breaches_in_order(client):
    complaint_id = submit_complaint(client, ipso_complaint())
    view = client.get(f"/complaint/{complaint_id}").json()["complaint"]
    assert view["source"] == "IPSO"
    assert view["title"] == "Misleading headline"
    assert view["description"] == "First point\nSecond point"
    assert view["ipsoFields"] == [
        {"field_order": 0, "field_value": "First point"},
        {"field_order": 1, "field_value": "Second point"},
    ]
    assert view["ipsoCodeBreaches"] == [
        {"clause": "1", "details": "Accuracy"},
        {"clause": "2", "details": "Privacy"},
    ]


def test_privacy_policy_must_be_accepted(client):
    for accepted in (False, None, "yes"):
        res = client.post("/complaint", json=bbc_complaint() | {"privacyPolicyAccepted": accepted})
        assert res.status_code == 400
        assert res.json() == {"error": "Privacy policy must be accepted."}


def test_missing_body_parts_are_rejected(client):
    res = client.post("/complaint", json={"privacyPolicyAccepted": True, "originUrl": "u"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request body."}


def test_unknown_source_is_rejected(client):
    res = client.post("/complaint", json=bbc_complaint() | {"where": "ofcom"})
    assert res.status_code == 400
    assert res.json() == {"error": "Unsupported complaint source."}


def test_ipso_without_contact_details_is_rejected(client):
    payload = ipso_complaint()
    del payload["interceptedData"]["contactDetails"]
    res = client.post("/complaint", json=payload)
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required IPSO data."}


def test_complaint_lookup_validates_the_id(client):
    res = client.get("/complaint/not-a-uuid")
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid UUID format."}
    res = client.get(f"/complaint/{UNKNOWN_ID}")
    assert res.status_code == 404
    assert res.json() == {"error": "No data found for the provided UUID."}


def test_replies_are_listed_oldest_first(client):
    complaint_id = submit_complaint(client)
    for text in ("first", "second <i>reply</i>", "third"):
        res = client.post(
            "/replies",
            json={"intercept_id": complaint_id, "bbc_reply": text, "bbc_ref_number": "CAS-1"},
        )
        assert res.status_code == 200
        assert res.json()["message"] == "Reply stored successfully."

    replies = client.get(f"/replies/{complaint_id}").json()
    assert [r["bbc_reply"] for r in replies] == ["first", "second reply", "third"]
    assert all(r["intercept_id"] == complaint_id for r in replies)
    assert all(r["bbc_ref_number"] == "CAS-1" for r in replies)


def test_replies_for_an_unknown_complaint_are_empty(client):
    res = client.get(f"/replies/{UNKNOWN_ID}")
    assert res.status_code == 200
    assert res.json() == []


def test_reply_validation(client):
    res = client.post("/replies", json={"intercept_id": UNKNOWN_ID})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required fields."}

    res = client.post("/replies", json={"intercept_id": "abc", "bbc_reply": "x"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid TACC Record ID format."}

    res = client.post("/replies", json={"intercept_id": UNKNOWN_ID, "bbc_reply": "x"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid intercept_id. No matching record found."}


def test_problematic_articles_start_empty(client):
    res = client.get("/problematic")
    assert res.status_code == 200
    assert res.json() == []


async def test_problematic_articles_are_newest_first(db):
    repo = ComplaintRepository(db)
    await db.execute(
        "INSERT INTO problematic_article (URL, title, timestamp) VALUES (?, ?, ?)",
        ("https://a.example/1", "Old", "2024-01-01T00:00:00.000Z"),
    )
    await db.execute(
        "INSERT INTO problematic_article (URL, title) VALUES (?, ?)",
        ("https://a.example/2", "New"),
    )
    rows = await repo.problematic_articles()
    assert [r["URL"] for r in rows] == ["https://a.example/2", "https://a.example/1"]


async def test_failed_child_insert_rolls_back_the_whole_complaint(db):
    repo = ComplaintRepository(db)
    complaint_id = str(uuid.uuid4())
    row = {"id": complaint_id, "source": "IPSO", "originUrl": "u", "title": "t"}
    with pytest.raises(sqlite3.Error):
        await repo.create(row, ipso_fields=["a", "b"], breaches=[(object(), "bad")])

    assert await repo.exists(complaint_id) is False
    assert await repo.ipso_fields(complaint_id) == []


async def test_deleting_a_complaint_cascades_to_its_children(db):
    repo = ComplaintRepository(db)
    complaint_id = str(uuid.uuid4())
    row = {"id": complaint_id, "source": "IPSO", "originUrl": "u", "title": "t"}
    await repo.create(row, ipso_fields=["a"], breaches=[("1", "d")])
    cur = await db.execute("DELETE FROM intercepted_data WHERE id = ?", (complaint_id,))
    assert cur.rowcount == 1
    assert await repo.ipso_fields(complaint_id) == []
    assert await repo.code_breaches(complaint_id) == []
