"""
Category-driven dynamic form fields.

A category names the extra fields every payment in it must carry; these
helpers reshape and validate a form's values against that list.
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from paybox.errors import ValidationError


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def missing_fields(required: Sequence[str], values: Mapping[str, Any]) -> list[str]:
    """Return required names that are absent or blank, in ``required`` order."""
    return [name for name in required if _blank(values.get(name))]


def reshape_fields(required: Sequence[str], values: Mapping[str, Any]) -> dict[str, str]:
    """Re-key ``values`` to a (new) category's required names.

    Values for names still required are kept, names no longer required are
    dropped, newly required names start empty.
    """
    return {
        name: "" if values.get(name) is None else str(values[name])
        for name in required
    }


def validate_fields(required: Sequence[str], values: Mapping[str, Any]) -> dict[str, str]:
    """Return the record's dynamic field map or raise naming every missing field."""
    missing = missing_fields(required, values)
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            detail={"missing_fields": missing},
        )
    return {name: str(values[name]).strip() for name in required}
