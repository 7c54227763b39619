"""Tests for form administration endpoints."""

import json
import uuid
from datetime import datetime, timezone

import pytest

from factories import make_form, make_submission
from skforms.db.models import Form, FormSubmission

FIELDS = [
    {"id": "f1", "name": "Full Name", "label": "Full Name", "type": "text", "required": True},
    {"id": "f2", "name": "fee", "label": "Registration Fee", "type": "gcashReceipt"},
]


@pytest.mark.asyncio
async def test_create_form(client, db, event):
    res = await client.post(
        "/forms",
        json={
            "title": "Basketball League Registration",
            "fields": FIELDS,
            "gcash_receipt": True,
            "publish_status": "PUBLISHED",
            "submission_limit": 50,
            "event_id": str(event.id),
        },
    )

    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "Basketball League Registration"
    assert body["publish_status"] == "PUBLISHED"
    assert body["event_id"] == str(event.id)
    assert [f["name"] for f in body["fields"]] == ["Full Name", "fee"]
    assert body["fields"][0]["required"] is True
    assert body["fields_parse_failed"] is False
    assert body["submission_count"] == 0

    stored = db.get(Form, uuid.UUID(body["id"]))
    assert stored.fields.startswith("[")


@pytest.mark.asyncio
async def test_create_form_defaults_to_draft(client):
    res = await client.post("/forms", json={"title": "Survey"})

    assert res.status_code == 201
    assert res.json()["publish_status"] == "DRAFT"
    assert res.json()["fields"] == []


@pytest.mark.asyncio
async def test_create_form_rejects_duplicate_field_names(client, db):
    fields = [
        {"id": "a", "name": "email", "type": "email"},
        {"id": "b", "name": "email", "type": "text"},
    ]

    res = await client.post("/forms", json={"title": "Dupes", "fields": fields})

    assert res.status_code == 400
    assert "email" in res.json()["detail"]
    assert db.query(Form).count() == 0


@pytest.mark.asyncio
async def test_create_form_unknown_event(client):
    res = await client.post("/forms", json={"title": "Orphan", "event_id": str(uuid.uuid4())})

    assert res.status_code == 404


@pytest.mark.asyncio
async def test_create_form_invalid_publish_status(client):
    res = await client.post("/forms", json={"title": "Bad", "publish_status": "ARCHIVED"})

    assert res.status_code == 400


@pytest.mark.asyncio
async def test_get_form_with_corrupt_fields(client, db):
    form = make_form(db, fields="{this is not json")

    res = await client.get(f"/forms/{form.id}")

    assert res.status_code == 200
    assert res.json()["fields"] == []
    assert res.json()["fields_parse_failed"] is True


@pytest.mark.asyncio
async def test_get_form_normalizes_double_encoded_fields(client, db):
    form = make_form(db, fields=json.dumps(json.dumps(FIELDS)))
    make_submission(db, form, {"Full Name": "Juan"})

    res = await client.get(f"/forms/{form.id}")

    body = res.json()
    assert [f["id"] for f in body["fields"]] == ["f1", "f2"]
    assert body["submission_count"] == 1


@pytest.mark.asyncio
async def test_get_form_not_found(client):
    res = await client.get(f"/forms/{uuid.uuid4()}")

    assert res.status_code == 404


@pytest.mark.asyncio
async def test_list_forms_filters(client, db):
    make_form(db, title="Published")
    make_form(db, title="Draft", publish_status="DRAFT")
    make_form(db, title="Closed", is_active=False)

    res = await client.get("/forms", params={"publish_status": "PUBLISHED", "active_only": True})

    assert res.status_code == 200
    assert [f["title"] for f in res.json()] == ["Published"]


@pytest.mark.asyncio
async def test_update_form_is_partial(client, db):
    form = make_form(db, fields=FIELDS)

    res = await client.put(f"/forms/{form.id}", json={"title": "Renamed", "is_active": None})

    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Renamed"
    assert body["is_active"] is True
    assert [f["id"] for f in body["fields"]] == ["f1", "f2"]


@pytest.mark.asyncio
async def test_update_form_keeps_fields_on_explicit_null(client, db):
    form = make_form(db, fields=FIELDS)

    res = await client.put(f"/forms/{form.id}", json={"title": "Renamed", "fields": None})

    assert res.status_code == 200
    assert res.json()["title"] == "Renamed"
    assert [f["id"] for f in res.json()["fields"]] == ["f1", "f2"]
    db.refresh(form)
    assert [f["id"] for f in json.loads(form.fields)] == ["f1", "f2"]


@pytest.mark.asyncio
async def test_update_form_rejects_duplicates_without_changes(client, db):
    form = make_form(db, title="Keep Me", fields=FIELDS)

    res = await client.put(
        f"/forms/{form.id}",
        json={"title": "Changed", "fields": [{"name": "x"}, {"name": "x"}]},
    )

    assert res.status_code == 400
    db.refresh(form)
    assert form.title == "Keep Me"


@pytest.mark.asyncio
async def test_update_form_clears_deadline(client, db):
    form = make_form(db, submission_deadline=datetime(2024, 7, 1, tzinfo=timezone.utc))

    res = await client.put(f"/forms/{form.id}", json={"submission_deadline": None})

    assert res.status_code == 200
    assert res.json()["submission_deadline"] is None


@pytest.mark.asyncio
async def test_delete_form_removes_submissions(client, db):
    form = make_form(db)
    make_submission(db, form, {"Full Name": "Juan"})

    res = await client.delete(f"/forms/{form.id}")

    assert res.status_code == 204
    assert db.query(Form).count() == 0
    assert db.query(FormSubmission).count() == 0
    assert (await client.get(f"/forms/{form.id}")).status_code == 404
