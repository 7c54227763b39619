"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    submission_id: str | None = None,
    form_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict.

    Only identifiers go in here. Submitted answers and email addresses are
    never part of the log context.
    """
    context: dict[str, Any] = {}
    if submission_id:
        context["submission_id"] = submission_id
    if form_id:
        context["form_id"] = form_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
