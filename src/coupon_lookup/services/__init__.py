"""Services for the coupon lookup core."""

from coupon_lookup.services.classifier import classify_coupon
from coupon_lookup.services.decoder import CouponDecoder
from coupon_lookup.services.field_resolver import resolve_fields
from coupon_lookup.services.hints import HintExtractor, extract_menu_item_hints
from coupon_lookup.services.lookup import CouponLookupService, MenuFetcher
from coupon_lookup.services.normalizer import coupon_identity, format_price
from coupon_lookup.services.rate_limiter import (
    SlidingWindowRateLimiter,
    client_identity,
    run_periodic_cleanup,
)


__all__ = [
    "CouponDecoder",
    "CouponLookupService",
    "HintExtractor",
    "MenuFetcher",
    "SlidingWindowRateLimiter",
    "classify_coupon",
    "client_identity",
    "coupon_identity",
    "extract_menu_item_hints",
    "format_price",
    "resolve_fields",
    "run_periodic_cleanup",
]
