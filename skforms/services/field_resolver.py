"""Resolve logical values out of raw submission data.

Form authors label their inputs freely ("Full Name", "Enter your Full Name",
"fullName", ...), so consumers that need "the submitter's name" or "the
amount paid" look the value up through an ordered alias list. The first alias
present with a non-empty value wins; there is no fuzzy matching.

Alias lists themselves live in ``field_aliases``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import PurePosixPath
from typing import Any

from skforms.services.upload_service import safe_filename

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)")
_STAMPED_NAME = re.compile(r"^\d+-(?P<name>.+)$")
_STORED_UPLOAD_NAME = re.compile(r"^.*-\d+-(?P<name>.+)$")

# Revenue.amount is NUMERIC(12, 2)
MAX_PAYMENT_AMOUNT = Decimal("9999999999.99")


class AliasConflictError(ValueError):
    """An alias table lists the same key twice, or under two purposes."""


@dataclass(frozen=True)
class AliasTable:
    """Ordered map of canonical purpose -> accepted raw keys."""

    entries: Mapping[str, tuple[str, ...]]

    def aliases(self, purpose: str) -> tuple[str, ...]:
        return self.entries[purpose]

    def purposes(self) -> tuple[str, ...]:
        return tuple(self.entries)

    def resolve(self, data: Mapping[str, Any], purpose: str, fallback: Any = None) -> Any:
        return resolve_value(data, self.aliases(purpose), fallback)

    def resolve_all(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve every purpose; purposes without a match are left out."""
        resolved: dict[str, Any] = {}
        for purpose, aliases in self.entries.items():
            value = resolve_value(data, aliases)
            if value is not None:
                resolved[purpose] = value
        return resolved


def build_alias_table(
    definitions: Mapping[str, Sequence[str]],
    *,
    exclusive: bool = False,
) -> AliasTable:
    """Validate and freeze an alias table.

    Every alias must be a non-empty string and appear once per purpose. With
    ``exclusive=True`` an alias may also belong to only one purpose, which is
    what a record mapping (one raw key -> one attribute) needs.
    """
    owners: dict[str, str] = {}
    entries: dict[str, tuple[str, ...]] = {}
    for purpose, aliases in definitions.items():
        if isinstance(aliases, str):
            raise AliasConflictError(f"Aliases for {purpose!r} must be a sequence, not a string")
        seen: set[str] = set()
        for alias in aliases:
            if not isinstance(alias, str) or not alias:
                raise AliasConflictError(f"Empty alias for {purpose!r}")
            if alias in seen:
                raise AliasConflictError(f"Alias {alias!r} listed twice for {purpose!r}")
            seen.add(alias)
            if exclusive and alias in owners:
                raise AliasConflictError(
                    f"Alias {alias!r} is ambiguous between {owners[alias]!r} and {purpose!r}"
                )
            owners.setdefault(alias, purpose)
        entries[purpose] = tuple(aliases)
    return AliasTable(entries=entries)


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return bool(value)
    return True


def resolve_value(data: Mapping[str, Any], aliases: Sequence[str], fallback: Any = None) -> Any:
    """Return the value of the first alias with a non-empty value, else ``fallback``."""
    for alias in aliases:
        value = data.get(alias)
        if has_value(value):
            return value.strip() if isinstance(value, str) else value
    return fallback


# =============================================================================
# Submission data decoding
# =============================================================================


@dataclass(frozen=True)
class SubmissionData:
    values: dict[str, Any]
    parse_failed: bool = False


def parse_submission_data(raw: object) -> SubmissionData:
    """Decode a stored submission ``data`` value into a dict. Never raises."""
    if isinstance(raw, dict):
        return SubmissionData(values=raw)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return SubmissionData(values={})
    if not isinstance(raw, str):
        return SubmissionData(values={}, parse_failed=True)

    try:
        parsed = json.loads(raw)
        if isinstance(parsed, str):
            parsed = json.loads(parsed)
    except (TypeError, ValueError):
        logger.debug("Submission data is not valid JSON")
        return SubmissionData(values={}, parse_failed=True)

    if not isinstance(parsed, dict):
        return SubmissionData(values={}, parse_failed=True)
    return SubmissionData(values=parsed)


# =============================================================================
# Payment fields
# =============================================================================


def payment_amount_key(field_name: str) -> str:
    return f"{field_name}_amount"


def payment_receipt_key(field_name: str) -> str:
    return f"{field_name}_receipt"


def parse_amount(value: Any) -> Decimal | None:
    """Parse a submitted payment amount.

    Returns None when the amount is missing, non-numeric, not finite, not
    positive or too large to book. Strings may carry thousands separators and trailing text
    ("1,500.00 php"); only the leading number is read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        amount = Decimal(str(value))
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip().replace(",", ""))
        if not match:
            return None
        try:
            amount = Decimal(match.group(0))
        except InvalidOperation:
            return None
    else:
        return None

    if amount <= 0 or amount > MAX_PAYMENT_AMOUNT:
        return None
    return amount


def resolve_payment(data: Mapping[str, Any], field_name: str) -> tuple[Decimal | None, str | None]:
    """Amount and receipt path submitted for a GCash receipt field."""
    amount = parse_amount(data.get(payment_amount_key(field_name)))
    receipt = data.get(payment_receipt_key(field_name))
    if not isinstance(receipt, str) or not receipt.strip():
        receipt = None
    return amount, receipt


# =============================================================================
# Uploaded files
# =============================================================================


def _original_file_name(field_name: str, basename: str) -> str:
    """Recover the uploaded name from ``{field}-{timestamp}-{name}``."""
    prefix = f"{safe_filename(field_name)}-"
    if basename.startswith(prefix):
        match = _STAMPED_NAME.match(basename[len(prefix):])
        if match:
            return match.group("name")
    match = _STORED_UPLOAD_NAME.match(basename)
    return match.group("name") if match else basename


def extract_uploaded_files(data: Mapping[str, Any], url_prefix: str) -> list[dict[str, str]]:
    """List submission values that point at stored uploads."""
    prefix = url_prefix.rstrip("/") + "/"
    files: list[dict[str, str]] = []
    for key, value in data.items():
        if not isinstance(value, str) or not value.startswith(prefix):
            continue
        basename = PurePosixPath(value).name
        files.append(
            {"field_name": key, "file_path": value, "file_name": _original_file_name(key, basename)}
        )
    return files
