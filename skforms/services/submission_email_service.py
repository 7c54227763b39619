"""Submission status email.

Builds the subject and HTML body sent to a submitter after their submission
is approved or rejected. Template variables use ``{{name}}`` placeholders and
every submitted value is HTML-escaped before substitution.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from skforms.core.config import settings
from skforms.db.enums import FormSubmissionStatus

VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

SUBMISSION_TITLE = "Your Submission"

APPROVED_COLOR = "#10B981"
REJECTED_COLOR = "#EF4444"

SUBJECT_TEMPLATE = "Your submission has been {{status_text}} - {{submission_title}}"

BODY_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Submission Status Update</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
        <h2 style="margin: 0; font-size: 18px; font-weight: 600;">Republic of the Philippines</h2>
        <h2 style="margin: 0; font-size: 18px; font-weight: 600;">Province of Sorsogon</h2>
        <h2 style="margin: 0; font-size: 18px; font-weight: 600;">Municipality of Casiguran</h2>
        <h1 style="margin: 10px 0; font-size: 24px; font-weight: 700;">BARANGAY TULAY</h1>
        <h3 style="margin: 0 0 20px 0; font-size: 16px; font-weight: 600;">Sangguniang Kabataan</h3>
        <div style="border-top: 2px solid rgba(255,255,255,0.3); padding-top: 20px;">
            <h1 style="margin: 0; font-size: 20px;">Submission Status Update</h1>
            <p style="margin: 10px 0 0 0; opacity: 0.9;">Your submission has been reviewed and processed</p>
        </div>
    </div>
    <div style="background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px;">
        <h2>Hello {{recipient_name}},</h2>
        <p>Your submission has been <strong>{{status_text}}</strong> by our review team.</p>
        <div style="display: inline-block; padding: 8px 16px; border-radius: 20px; color: white; font-weight: bold; margin: 10px 0; background-color: {{status_color}};">
            {{status}}
        </div>
        <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid {{status_color}};">
            <h3>Submission Details:</h3>
            <ul>
                <li><strong>Form:</strong> {{form_title}}</li>
                <li><strong>Submission:</strong> {{submission_title}}</li>
                {{optional_rows}}
            </ul>
        </div>
        {{status_message}}
        <a href="{{dashboard_url}}" style="display: inline-block; padding: 12px 24px; background: {{status_color}}; color: white; text-decoration: none; border-radius: 6px; font-weight: bold; margin: 20px 0;">View Dashboard</a>
    </div>
    <div style="text-align: center; margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px;">
        <p style="margin: 0; font-weight: bold; color: #374151; font-size: 16px;">Thank you.</p>
        <p style="margin: 5px 0 0 0; font-weight: bold; color: #374151; font-size: 16px;">Sangguniang Kabataan</p>
        <p style="margin: 5px 0 20px 0; font-weight: 600; color: #374151; font-size: 14px;">Barangay Tulay, Casiguran, Sorsogon</p>
        <p style="margin: 0; color: #6b7280; font-size: 12px;">This is an automated message from the SK Program Management System.</p>
        <p style="margin: 5px 0 0 0; color: #6b7280; font-size: 12px;">Please do not reply to this email. For inquiries, contact the SK Office.</p>
    </div>
</body>
</html>"""

APPROVED_MESSAGE = """<div style="background: #f0fdf4; border: 1px solid #bbf7d0; padding: 15px; border-radius: 6px; margin: 20px 0;">
            <p style="margin: 0; color: #166534;"><strong>Congratulations!</strong> Your submission has been approved. You will receive further instructions soon.</p>
        </div>"""

REJECTED_MESSAGE = """<div style="background: #fef2f2; border: 1px solid #fecaca; padding: 15px; border-radius: 6px; margin: 20px 0;">
            <p style="margin: 0; color: #dc2626;"><strong>Note:</strong> If you have any questions about this decision, please contact the review team.</p>
        </div>"""


@dataclass(frozen=True)
class StatusEmailContext:
    recipient_email: str
    recipient_name: str
    form_title: str
    status: str
    reviewer_name: str
    review_date: str
    event_name: str | None = None
    event_date: str | None = None
    notes: str | None = None
    submission_title: str = SUBMISSION_TITLE


def render_template(subject: str, body: str, variables: dict[str, str]) -> tuple[str, str]:
    """Substitute ``{{name}}`` placeholders; missing variables become empty."""

    def replace_var(match: re.Match) -> str:
        return variables.get(match.group(1), "")

    return VARIABLE_PATTERN.sub(replace_var, subject), VARIABLE_PATTERN.sub(replace_var, body)


def _detail_row(label: str, value: str | None) -> str:
    if not value:
        return ""
    return f"<li><strong>{label}:</strong> {html.escape(value)}</li>"


def build_status_email(context: StatusEmailContext) -> tuple[str, str]:
    """Return ``(subject, html_body)`` for a review outcome."""
    approved = context.status == FormSubmissionStatus.APPROVED.value
    optional_rows = "\n                ".join(
        row
        for row in (
            _detail_row("Event", context.event_name),
            _detail_row("Event Date", context.event_date),
            _detail_row("Reviewed by", context.reviewer_name),
            _detail_row("Review date", context.review_date),
            _detail_row("Notes", context.notes),
        )
        if row
    )

    subject, body = render_template(
        SUBJECT_TEMPLATE,
        BODY_TEMPLATE,
        {
            "recipient_name": html.escape(context.recipient_name),
            "status": html.escape(context.status.upper()),
            "status_text": "approved" if approved else "rejected",
            "status_color": APPROVED_COLOR if approved else REJECTED_COLOR,
            "form_title": html.escape(context.form_title),
            "submission_title": html.escape(context.submission_title),
            "optional_rows": optional_rows,
            "status_message": APPROVED_MESSAGE if approved else REJECTED_MESSAGE,
            "dashboard_url": html.escape(f"{settings.FRONTEND_URL.rstrip('/')}/dashboard", quote=True),
        },
    )
    # The subject is plain text; undo escaping applied for the HTML body.
    return html.unescape(subject), body
