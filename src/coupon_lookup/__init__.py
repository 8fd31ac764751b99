"""Coupon lookup core: menu feed decoding and request rate limiting."""
