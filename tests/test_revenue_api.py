from decimal import Decimal

import pytest

from factories import make_form, make_submission

GCASH_FIELDS = [
    {"id": "f1", "name": "Full Name", "label": "Full Name", "type": "text"},
    {"id": "f2", "name": "payment", "label": "Entry Fee", "type": "gcashReceipt"},
]


@pytest.mark.asyncio
async def test_sync_gcash_endpoint(client, db, event, program):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    make_submission(
        db,
        form,
        {"Full Name": "Juan", "payment_amount": "75", "payment_receipt": "/uploads/submissions/r.png"},
        status="APPROVED",
    )
    orphan_form = make_form(db, fields=GCASH_FIELDS)
    make_submission(db, orphan_form, {"payment_amount": "50"}, status="APPROVED")

    res = await client.post("/revenue/sync-gcash")

    assert res.status_code == 200
    assert res.json() == {
        "message": "GCash revenue sync completed",
        "created": 1,
        "skipped": 0,
        "total_processed": 2,
        "unlinked": 1,
        "failed": 0,
    }

    again = await client.post("/revenue/sync-gcash")
    assert again.json()["created"] == 0
    assert again.json()["skipped"] == 1

    listing = await client.get("/revenue", params={"source": "GCASH"})
    assert listing.status_code == 200
    revenues = listing.json()
    assert len(revenues) == 1
    assert revenues[0]["title"] == "GCash Payment - Entry Fee"
    assert Decimal(str(revenues[0]["amount"])) == Decimal("75")
    assert revenues[0]["program_id"] == str(program.id)


@pytest.mark.asyncio
async def test_sync_gcash_with_nothing_to_do(client):
    res = await client.post("/revenue/sync-gcash")

    assert res.status_code == 200
    assert res.json()["total_processed"] == 0
