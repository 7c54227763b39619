"""Form field schema normalization.

Stored ``Form.fields`` values come in several shapes: a list (already
decoded), JSON text of a list, JSON text of JSON text of a list (forms saved by
an older editor double-encoded their field list), or garbage. Everything that
reads a form's fields goes through ``normalize_fields`` so downstream code
always sees a list of ``FieldDescriptor`` with non-empty ids.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from skforms.db.enums import FieldType
from skforms.db.models import Form

logger = logging.getLogger(__name__)


class FieldDescriptor(BaseModel):
    """Canonical description of one form input."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str = ""
    label: str = ""
    type: str = FieldType.TEXT.value
    required: bool = False
    options: list[str] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    placeholder: str = ""
    qr_code_image: str | None = Field(default=None, alias="qrCodeImage")

    @property
    def is_payment(self) -> bool:
        return self.type == FieldType.GCASH_RECEIPT.value


# =============================================================================
# Stored representation (tagged variant)
# =============================================================================


@dataclass(frozen=True)
class JsonArrayFields:
    """Field list already decoded into Python objects."""

    items: list[Any]


@dataclass(frozen=True)
class RawStringFields:
    """JSON text that still has to be decoded (once or twice)."""

    text: str


@dataclass(frozen=True)
class CorruptFields:
    """Stored value that cannot yield a field list."""

    reason: str


StoredFields = Union[JsonArrayFields, RawStringFields, CorruptFields]


@dataclass(frozen=True)
class FieldsParseResult:
    fields: list[FieldDescriptor]
    parse_failed: bool = False
    reason: str | None = None


def classify_stored_fields(stored: object) -> StoredFields:
    """Tag a raw stored ``fields`` value with its shape."""
    if stored is None:
        return JsonArrayFields(items=[])
    if isinstance(stored, list):
        return JsonArrayFields(items=stored)
    if isinstance(stored, str):
        if not stored.strip():
            return JsonArrayFields(items=[])
        return RawStringFields(text=stored)
    return CorruptFields(reason=f"unsupported stored type {type(stored).__name__}")


def decode_stored_fields(stored: StoredFields) -> JsonArrayFields | CorruptFields:
    """Resolve a RawStringFields into a decoded list, parsing at most twice."""
    if not isinstance(stored, RawStringFields):
        return stored

    try:
        parsed = json.loads(stored.text)
        if isinstance(parsed, str):
            parsed = json.loads(parsed)
    except (TypeError, ValueError) as exc:
        return CorruptFields(reason=f"invalid JSON: {exc}")

    if isinstance(parsed, list):
        return JsonArrayFields(items=parsed)
    return CorruptFields(reason=f"decoded value is {type(parsed).__name__}, not a list")


# =============================================================================
# Element coercion
# =============================================================================


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_options(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    options: list[str] = []
    for option in value:
        if isinstance(option, dict):
            text = _as_text(option.get("value")) or _as_text(option.get("label"))
        else:
            text = _as_text(option)
        if text:
            options.append(text)
    return options


def _descriptor_from_item(item: dict[str, Any], index: int) -> FieldDescriptor:
    qr_code_image = item.get("qrCodeImage", item.get("qr_code_image"))
    return FieldDescriptor(
        id=_as_text(item.get("id")) or f"field-{index}",
        name=_as_text(item.get("name")),
        label=_as_text(item.get("label")),
        type=_as_text(item.get("type")) or FieldType.TEXT.value,
        required=_as_bool(item.get("required")),
        options=_as_options(item.get("options")),
        min=_as_number(item.get("min")),
        max=_as_number(item.get("max")),
        placeholder=_as_text(item.get("placeholder")),
        qr_code_image=_as_text(qr_code_image) or None,
    )


# =============================================================================
# Public API
# =============================================================================


def normalize_fields(stored: object, *, form_id: object | None = None) -> FieldsParseResult:
    """Turn a stored ``fields`` value into canonical descriptors. Never raises."""
    decoded = decode_stored_fields(classify_stored_fields(stored))
    if isinstance(decoded, CorruptFields):
        logger.warning(
            "Could not parse fields for form %s, treating as empty: %s",
            form_id,
            decoded.reason,
        )
        return FieldsParseResult(fields=[], parse_failed=True, reason=decoded.reason)

    fields: list[FieldDescriptor] = []
    for index, item in enumerate(decoded.items):
        if isinstance(item, FieldDescriptor):
            fields.append(item)
        elif isinstance(item, dict):
            fields.append(_descriptor_from_item(item, index))
        else:
            logger.debug("Dropping non-object field entry at index %s", index)
    return FieldsParseResult(fields=fields)


def get_form_fields(form: Form) -> list[FieldDescriptor]:
    return normalize_fields(form.fields, form_id=form.id).fields


def payment_fields(fields: list[FieldDescriptor]) -> list[FieldDescriptor]:
    return [field for field in fields if field.is_payment]


def find_duplicate_field_names(fields: list[FieldDescriptor]) -> list[str]:
    """Names used by more than one field (blank names are ignored)."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for field in fields:
        if not field.name:
            continue
        if field.name in seen and field.name not in duplicates:
            duplicates.append(field.name)
        seen.add(field.name)
    return duplicates


def serialize_fields(fields: list[FieldDescriptor]) -> str:
    """Canonical single-encoded JSON text for ``Form.fields``."""
    return json.dumps(
        [field.model_dump(by_alias=True, exclude_none=True) for field in fields],
        ensure_ascii=False,
    )
