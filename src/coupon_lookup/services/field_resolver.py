"""Merge decoded tag pairs with top-level row fields into coupon fields."""

import copy
from collections.abc import Mapping
from typing import Any

from coupon_lookup.parsing.tags import split_list_value


# Top-level columns consumed by resolution; anything else is passed through.
ID_COLUMNS = ("ID", "Id")
TEXT_COLUMNS = {
    "Name": "name",
    "Description": "description",
    "Price": "price",
    "Code": "code",
}
FALLBACK_EXPIRATION_COLUMNS = ("ExpiresOn", "ExpireDate")
KNOWN_COLUMNS = frozenset(
    (
        *ID_COLUMNS,
        *TEXT_COLUMNS,
        *FALLBACK_EXPIRATION_COLUMNS,
        "Tags",
        "VirtualCode",
    )
)

EXPIRATION_TAGS = ("ExpiresOn", "ExpireDate", "Expiration")
EXPIRATION_TIME_TAG = "ExpiresAt"
VIRTUAL_CODE_TAGS = ("VirtualCode", "OnlineCode", "WebCode")
GENERIC_CODE_TAG = "Code"
LIST_TAGS = {
    "ProductCodes": "eligible_products",
    "CategoryCodes": "eligible_categories",
    "ValidServiceMethods": "valid_service_methods",
}
TEXT_TAGS = {
    "MinOrder": "minimum_order",
    "ServiceMethod": "service_method",
    "TimeRestriction": "time_restriction",
    "ValidHours": "valid_hours",
}
KNOWN_TAGS = frozenset(
    (
        *EXPIRATION_TAGS,
        EXPIRATION_TIME_TAG,
        *VIRTUAL_CODE_TAGS,
        GENERIC_CODE_TAG,
        *LIST_TAGS,
        *TEXT_TAGS,
    )
)


def as_text(value: Any) -> str | None:
    """Render an upstream scalar as text; empty or non-scalar means absent."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value or None
    return None


def _first_present(
    source: Mapping[str, Any], keys: tuple[str, ...]
) -> str | None:
    for key in keys:
        text = as_text(source.get(key))
        if text is not None:
            return text
    return None


def _resolve_expiration(
    top_level: Mapping[str, Any], tags: Mapping[str, str]
) -> tuple[str | None, str | None]:
    """Return (date, time); the time only accompanies a Tags.ExpiresOn date."""
    expires_on = as_text(tags.get("ExpiresOn"))
    if expires_on is not None:
        return expires_on, as_text(tags.get(EXPIRATION_TIME_TAG))

    tag_date = _first_present(tags, EXPIRATION_TAGS[1:])
    if tag_date is not None:
        return tag_date, None

    return _first_present(top_level, FALLBACK_EXPIRATION_COLUMNS), None


def _resolve_virtual_code(
    top_level: Mapping[str, Any],
    tags: Mapping[str, str],
    code: str | None,
) -> str | None:
    virtual_code = _first_present(tags, VIRTUAL_CODE_TAGS)
    if virtual_code is not None:
        return virtual_code
    # A generic Code tag never shadows a top-level Code.
    if code is None:
        generic = as_text(tags.get(GENERIC_CODE_TAG))
        if generic is not None:
            return generic
    return as_text(top_level.get("VirtualCode"))


def resolve_fields(
    top_level: Mapping[str, Any], tags: Mapping[str, str]
) -> dict[str, Any]:
    """Build canonical coupon fields from one row and its decoded tags.

    Pure: neither input is mutated and the result is a fresh mapping keyed
    by Coupon field names, including ``extra_fields`` for uninterpreted
    columns and ``extra_tags`` for uninterpreted tag keys.

    Args:
        top_level: The row's column-to-value mapping.
        tags: The row's decoded Tags pairs.

    Returns:
        Keyword arguments suitable for building a Coupon (minus the derived
        hints, category, identity and display price).
    """
    fields: dict[str, Any] = {
        attr: as_text(top_level.get(column))
        for column, attr in TEXT_COLUMNS.items()
    }
    fields["id"] = _first_present(top_level, ID_COLUMNS)

    raw_tags = top_level.get("Tags")
    fields["tags"] = raw_tags if isinstance(raw_tags, str) else None

    expiration_date, expiration_time = _resolve_expiration(top_level, tags)
    fields["expiration_date"] = expiration_date
    fields["expiration_time"] = expiration_time

    fields["virtual_code"] = _resolve_virtual_code(
        top_level, tags, fields["code"]
    )

    for tag, attr in LIST_TAGS.items():
        value = tags.get(tag)
        fields[attr] = tuple(split_list_value(value)) if value else ()

    for tag, attr in TEXT_TAGS.items():
        fields[attr] = as_text(tags.get(tag))

    fields["extra_fields"] = {
        column: copy.deepcopy(value)
        for column, value in top_level.items()
        if column not in KNOWN_COLUMNS
    }
    fields["extra_tags"] = {
        key: value for key, value in tags.items() if key not in KNOWN_TAGS
    }
    return fields
