"""Coupon identity, price formatting and display helpers."""

import hashlib
import re
from collections.abc import Mapping
from typing import Any

from coupon_lookup.core.models import Coupon, SavingsAmount
from coupon_lookup.services.field_resolver import as_text
from coupon_lookup.services.hints import build_hint_text


DEFAULT_CURRENCY_SYMBOL = "$"
SPECIAL_OFFER_MARKERS = ("special", "limited", "exclusive")

_FALLBACK_NAME = "coupon"
_DIGEST_LENGTH = 12

DOLLAR_SAVINGS_PATTERNS = (
    re.compile(r"\$(\d+(?:\.\d{2})?)\s*(?:off|savings?)", re.IGNORECASE),
    re.compile(r"save\s*\$(\d+(?:\.\d{2})?)", re.IGNORECASE),
)
PERCENT_SAVINGS_PATTERNS = (
    re.compile(r"(\d+)%\s*off", re.IGNORECASE),
    re.compile(r"save\s*(\d+)%", re.IGNORECASE),
)
NO_PRICE_LABEL = "Deal"


def _content_digest(
    name: str | None, description: str | None, price: str | None
) -> str:
    material = "\x1f".join(part or "" for part in (name, description, price))
    return hashlib.sha256(material.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]


def coupon_identity(fields: Mapping[str, Any]) -> str:
    """Return the display identity for resolved coupon fields.

    Business identifiers win in the order Id, Code, VirtualCode. Without
    one, the identity is the name plus a digest of name, description and
    price, so identical input always yields the same identity.

    Args:
        fields: Resolved fields keyed by Coupon attribute name.

    Returns:
        A non-empty identity string.
    """
    for key in ("id", "code", "virtual_code"):
        value = as_text(fields.get(key))
        if value:
            return value

    name = as_text(fields.get("name"))
    digest = _content_digest(
        name,
        as_text(fields.get("description")),
        as_text(fields.get("price")),
    )
    return f"{name or _FALLBACK_NAME}-{digest}"


def format_price(
    price: Any, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> str:
    """Prefix a price with the currency symbol unless it already has one.

    Absent or empty prices format as an empty string.
    """
    text = as_text(price)
    if not text:
        return ""
    if currency_symbol in text:
        return text
    return f"{currency_symbol}{text}"


def coupon_code(coupon: Coupon) -> str:
    """Return the code a customer should enter, preferring the online code."""
    return coupon.virtual_code or coupon.code or ""


def is_special_offer(coupon: Coupon) -> bool:
    """Check whether the raw Tags mark the coupon as a special offer."""
    if not coupon.tags:
        return False
    tags = coupon.tags.lower()
    return any(marker in tags for marker in SPECIAL_OFFER_MARKERS)


def is_valid_coupon(coupon: Coupon) -> bool:
    """Check that a coupon has a name and at least one business identifier."""
    return bool(
        coupon.name and (coupon.code or coupon.virtual_code or coupon.id)
    )


def _first_group(
    patterns: tuple[re.Pattern[str], ...], text: str
) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def savings_amount(
    coupon: Coupon, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> SavingsAmount:
    """Pick the headline savings for a coupon from its name and description.

    Dollar savings ("$5 off", "save $5") win over percentages ("50% off",
    "save 25%"); otherwise the coupon price is shown, or "Deal" when there
    is none.
    """
    text = build_hint_text(coupon.name, coupon.description)

    dollars = _first_group(DOLLAR_SAVINGS_PATTERNS, text)
    if dollars is not None:
        return SavingsAmount(
            amount=f"{currency_symbol}{dollars}", type="dollar"
        )

    percent = _first_group(PERCENT_SAVINGS_PATTERNS, text)
    if percent is not None:
        return SavingsAmount(amount=f"{percent}%", type="percent")

    price = format_price(coupon.price, currency_symbol)
    return SavingsAmount(amount=price or NO_PRICE_LABEL, type="price")
