"""Tests for GCash revenue reconciliation."""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from factories import make_form, make_submission, make_user
from skforms.db.enums import FormSubmissionStatus, RevenueSource, RevenueStatus
from skforms.db.models import Revenue
from skforms.services import revenue_sync_service

APPROVED = FormSubmissionStatus.APPROVED.value

GCASH_FIELDS = [
    {"id": "f1", "name": "Full Name", "label": "Full Name", "type": "text"},
    {"id": "f2", "name": "fee", "label": "Registration Fee", "type": "gcashReceipt"},
]


def _paid(amount="150", **extra):
    return {
        "Full Name": "Juan Dela Cruz",
        "fee_amount": amount,
        "fee_receipt": "/uploads/submissions/fee-1717243200000-gcash.png",
        **extra,
    }


def test_sync_creates_revenue_for_approved_payment(db, event, program):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    submission = make_submission(db, form, _paid("1,500.5"), status=APPROVED)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert (result.created, result.skipped, result.total_processed, result.unlinked) == (1, 0, 1, 0)
    revenue = db.query(Revenue).one()
    assert revenue.title == "GCash Payment - Registration Fee"
    assert revenue.description == "Automatic revenue from form submission by Juan Dela Cruz"
    assert revenue.amount == Decimal("1500.50")
    assert revenue.source == RevenueSource.GCASH.value
    assert revenue.status == RevenueStatus.APPROVED.value
    assert revenue.program_id == program.id
    assert revenue.form_submission_id == submission.id
    assert revenue.receipt == "/uploads/submissions/fee-1717243200000-gcash.png"


def test_sync_is_idempotent(db, event):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    make_submission(db, form, _paid(), status=APPROVED)

    revenue_sync_service.sync_gcash_revenue(db)
    second = revenue_sync_service.sync_gcash_revenue(db)

    assert second.created == 0
    assert second.skipped == 1
    assert second.total_processed == 1
    assert db.query(Revenue).count() == 1


def test_sync_ignores_unreviewed_and_rejected(db, event):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    make_submission(db, form, _paid())
    make_submission(db, form, _paid(), status=FormSubmissionStatus.REJECTED.value)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert result.total_processed == 0
    assert db.query(Revenue).count() == 0


def test_sync_counts_unlinked_when_form_has_no_event(db):
    form = make_form(db, fields=GCASH_FIELDS)
    make_submission(db, form, _paid(), status=APPROVED)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert result.unlinked == 1
    assert result.created == 0
    assert db.query(Revenue).count() == 0


def test_sync_skips_invalid_amounts_silently(db, event):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    for amount in ("", "abc", "0", "-20"):
        make_submission(db, form, _paid(amount), status=APPROVED)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert result.total_processed == 4
    assert result.created == 0
    assert result.skipped == 0
    assert db.query(Revenue).count() == 0


def test_sync_books_one_revenue_per_submission(db, event):
    fields = GCASH_FIELDS + [
        {"id": "f3", "name": "shirt", "label": "Shirt Payment", "type": "gcashReceipt"}
    ]
    form = make_form(db, fields=fields, event=event)
    make_submission(db, form, _paid(shirt_amount="250"), status=APPROVED)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert result.created == 1
    assert result.skipped == 1
    assert db.query(Revenue).one().title == "GCash Payment - Registration Fee"


def test_sync_ignores_forms_without_gcash_fields(db, event):
    form = make_form(db, event=event)
    make_submission(db, form, _paid(), status=APPROVED)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert result.total_processed == 1
    assert result.created == 0


def test_sync_reads_double_encoded_form_fields(db, event):
    form = make_form(db, fields=json.dumps(json.dumps(GCASH_FIELDS)), event=event)
    make_submission(db, form, _paid(), status=APPROVED)

    assert revenue_sync_service.sync_gcash_revenue(db).created == 1


def test_sync_payer_falls_back_to_linked_user(db, event):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    user = make_user(db, name="Ana Reyes")
    make_submission(db, form, {"fee_amount": "100"}, status=APPROVED, user=user)

    revenue_sync_service.sync_gcash_revenue(db)

    revenue = db.query(Revenue).one()
    assert revenue.description == "Automatic revenue from form submission by Ana Reyes"
    assert revenue.receipt is None


def test_sync_processes_oldest_first(db, event, monkeypatch):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    newer = make_submission(db, form, _paid("200"), status=APPROVED, submitted_at=now)
    older = make_submission(
        db, form, _paid("100"), status=APPROVED, submitted_at=now - timedelta(days=3)
    )
    seen = []
    original = revenue_sync_service.sync_submission_revenue

    def recording(db, submission):
        seen.append(submission.id)
        return original(db, submission)

    monkeypatch.setattr(revenue_sync_service, "sync_submission_revenue", recording)

    revenue_sync_service.sync_gcash_revenue(db)

    assert seen == [older.id, newer.id]


def test_sync_continues_after_failed_write(db, event, monkeypatch):
    form = make_form(db, fields=GCASH_FIELDS, event=event)
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    first = make_submission(
        db, form, _paid("100"), status=APPROVED, submitted_at=now - timedelta(days=1)
    )
    second = make_submission(db, form, _paid("200"), status=APPROVED, submitted_at=now)
    real_commit = db.commit
    calls = []

    def flaky_commit():
        calls.append(1)
        if len(calls) == 1:
            raise SQLAlchemyError("numeric field overflow")
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)

    result = revenue_sync_service.sync_gcash_revenue(db)

    assert (result.created, result.failed, result.total_processed) == (1, 1, 2)
    booked = db.query(Revenue).all()
    assert [r.form_submission_id for r in booked] == [second.id]

    monkeypatch.setattr(db, "commit", real_commit)
    rerun = revenue_sync_service.sync_gcash_revenue(db)

    assert (rerun.created, rerun.skipped, rerun.failed) == (1, 1, 0)
    assert {r.form_submission_id for r in db.query(Revenue).all()} == {first.id, second.id}


def test_revenue_title_defaults_label():
    assert revenue_sync_service.revenue_title("") == "GCash Payment - Payment"
    assert revenue_sync_service.revenue_title(None) == "GCash Payment - Payment"
    assert revenue_sync_service.revenue_title("Fee") == "GCash Payment - Fee"


def test_list_revenues_filters_by_source(db, program):
    db.add_all(
        [
            Revenue(
                title="Cash",
                amount=Decimal("10"),
                source=RevenueSource.CASH.value,
                date=datetime(2024, 1, 1, tzinfo=timezone.utc),
                program_id=program.id,
            ),
            Revenue(
                title="GCash",
                amount=Decimal("20"),
                source=RevenueSource.GCASH.value,
                date=datetime(2024, 2, 1, tzinfo=timezone.utc),
                program_id=program.id,
            ),
        ]
    )
    db.commit()

    assert [r.title for r in revenue_sync_service.list_revenues(db)] == ["GCash", "Cash"]
    gcash = revenue_sync_service.list_revenues(db, source=RevenueSource.GCASH.value)
    assert [r.title for r in gcash] == ["GCash"]
