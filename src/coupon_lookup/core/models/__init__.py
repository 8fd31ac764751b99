"""Data models for the coupon lookup core."""

from coupon_lookup.core.models.coupon import (
    Coupon,
    CouponCategory,
    CouponFeed,
    SavingsAmount,
    Scalar,
    StoreInfo,
    TagEntry,
)
from coupon_lookup.core.models.lookup import LookupResult
from coupon_lookup.core.models.rate_limit import RateLimitDecision


__all__ = [
    "Coupon",
    "CouponCategory",
    "CouponFeed",
    "LookupResult",
    "RateLimitDecision",
    "SavingsAmount",
    "Scalar",
    "StoreInfo",
    "TagEntry",
]
