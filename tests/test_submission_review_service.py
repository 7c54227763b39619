"""Tests for submission review and status notification."""

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from factories import make_form, make_submission, make_user
from skforms.db.enums import FormSubmissionStatus
from skforms.services import email_service, submission_review_service
from skforms.services.email_service import EmailSendResult
from skforms.services.form_submission_service import InvalidStatusError, SubmissionNotFoundError

APPROVED = FormSubmissionStatus.APPROVED.value
REJECTED = FormSubmissionStatus.REJECTED.value
REVIEWED_AT = datetime(2024, 6, 15, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def sent(monkeypatch):
    """Capture outgoing emails instead of calling Resend."""
    calls = []

    async def fake_send_email(**kwargs):
        calls.append(kwargs)
        return EmailSendResult(success=True, message_id="msg_123")

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return calls


@pytest.mark.asyncio
async def test_review_approves_and_notifies_submitter(db, event, sent):
    form = make_form(db, event=event)
    submission = make_submission(
        db, form, {"Full Name": "Juan", "Enter Your Name": "Juan", "email": "juan@example.com"}
    )

    result = await submission_review_service.review_submission(
        db, submission.id, APPROVED, reviewed_by="Kagawad Reyes", reviewed_at=REVIEWED_AT
    )

    assert result.submission.status == APPROVED
    assert result.submission.reviewed_by == "Kagawad Reyes"
    assert result.notification.sent is True
    assert result.notification.recipient_found is True
    assert result.notification.error is None

    assert len(sent) == 1
    email = sent[0]
    assert email["to"] == "juan@example.com"
    assert email["subject"] == "Your submission has been approved - Your Submission"
    assert "Hello Juan," in email["html"]
    assert "Basketball League" in email["html"]
    assert "Kagawad Reyes" in email["html"]
    assert "6/15/2024" in email["html"]
    assert email["idempotency_key"].startswith(f"submission-status/{submission.id}/APPROVED/")
    assert email["text"]


@pytest.mark.asyncio
async def test_review_defaults_reviewer_and_clears_blank_notes(db, sent):
    form = make_form(db)
    submission = make_submission(db, form, {})

    result = await submission_review_service.review_submission(
        db, submission.id, REJECTED, notes=""
    )

    assert result.submission.status == REJECTED
    assert result.submission.reviewed_by == "Admin"
    assert result.submission.reviewed_at is not None
    assert result.submission.notes is None


@pytest.mark.asyncio
async def test_review_without_email_skips_notification(db, sent):
    form = make_form(db)
    submission = make_submission(db, form, {"Full Name": "Juan"})

    result = await submission_review_service.review_submission(db, submission.id, APPROVED)

    assert result.submission.status == APPROVED
    assert result.notification.sent is False
    assert result.notification.recipient_found is False
    assert sent == []


@pytest.mark.asyncio
async def test_review_invalid_recipient_email_is_reported(db, sent):
    form = make_form(db)
    submission = make_submission(db, form, {"email": "not-an-address"})

    result = await submission_review_service.review_submission(db, submission.id, APPROVED)

    assert result.submission.status == APPROVED
    assert result.notification.sent is False
    assert result.notification.recipient_found is True
    assert result.notification.error == "Invalid recipient email address"
    assert sent == []


@pytest.mark.asyncio
async def test_review_prefers_linked_user_email(db, sent):
    form = make_form(db)
    user = make_user(db, name="Ana Reyes", email="ana@example.com")
    submission = make_submission(db, form, {"email": "other@example.com"}, user=user)

    await submission_review_service.review_submission(db, submission.id, REJECTED)

    assert sent[0]["to"] == "ana@example.com"
    assert "Hello Ana Reyes," in sent[0]["html"]
    assert sent[0]["subject"] == "Your submission has been rejected - Your Submission"


@pytest.mark.asyncio
async def test_send_failure_does_not_undo_review(db, monkeypatch):
    async def failing_send_email(**kwargs):
        return EmailSendResult(success=False, error="Resend API error: 422")

    monkeypatch.setattr(email_service, "send_email", failing_send_email)
    form = make_form(db)
    submission = make_submission(db, form, {"email": "juan@example.com"})

    result = await submission_review_service.review_submission(db, submission.id, APPROVED)

    db.refresh(submission)
    assert submission.status == APPROVED
    assert result.notification.sent is False
    assert result.notification.error == "Resend API error: 422"


@pytest.mark.asyncio
async def test_transport_exception_is_reported_not_raised(db, monkeypatch):
    async def exploding_send_email(**kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(email_service, "send_email", exploding_send_email)
    form = make_form(db)
    submission = make_submission(db, form, {"email": "juan@example.com"})

    result = await submission_review_service.review_submission(db, submission.id, APPROVED)

    assert result.submission.status == APPROVED
    assert result.notification.sent is False
    assert result.notification.error == "connection reset"


@pytest.mark.asyncio
async def test_recipient_lookup_failure_is_reported_not_raised(db, monkeypatch, sent):
    def broken_lookup(submission):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(submission_review_service, "resolve_recipient", broken_lookup)
    form = make_form(db)
    submission = make_submission(db, form, {"email": "juan@example.com"})

    result = await submission_review_service.review_submission(db, submission.id, REJECTED)

    db.refresh(submission)
    assert submission.status == REJECTED
    assert result.notification.sent is False
    assert result.notification.recipient_found is False
    assert result.notification.error == "connection lost"
    assert sent == []


@pytest.mark.asyncio
async def test_repeated_review_notifies_again(db, sent):
    form = make_form(db)
    submission = make_submission(db, form, {"email": "juan@example.com"})

    await submission_review_service.review_submission(db, submission.id, APPROVED)
    await submission_review_service.review_submission(db, submission.id, APPROVED)

    assert len(sent) == 2


def test_apply_review_rejects_invalid_status(db):
    form = make_form(db)
    submission = make_submission(db, form, {})

    with pytest.raises(InvalidStatusError):
        submission_review_service.apply_review(db, submission.id, "PENDING")

    db.refresh(submission)
    assert submission.status == FormSubmissionStatus.PENDING.value
    assert submission.reviewed_at is None


def test_apply_review_unknown_submission(db):
    with pytest.raises(SubmissionNotFoundError):
        submission_review_service.apply_review(db, uuid.uuid4(), APPROVED)


def test_resolve_recipient_uses_data_aliases(db):
    form = make_form(db)
    submission = make_submission(
        db, form, {"Enter your Email Address": "maria@example.com", "Name": "Maria"}
    )

    recipient = submission_review_service.resolve_recipient(submission)

    assert recipient.email == "maria@example.com"
    assert recipient.name == "Maria"
