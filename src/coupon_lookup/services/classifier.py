"""Late-night versus regular classification of coupons."""

import re

from coupon_lookup.core.models import CouponCategory


LATE_NIGHT_KEYWORDS = (
    "late night",
    "late-night",
    "after 10",
    "after 11",
    "after midnight",
    "night owl",
    "midnight",
    "10pm",
    "11pm",
    "night only",
    "evening",
    "after dark",
)

# "late" only as a whole word, so "chocolate" stays regular.
LATE_WORD_PATTERN = re.compile(r"\blate\b")


def classify_coupon(
    text: str | None,
    keywords: tuple[str, ...] = LATE_NIGHT_KEYWORDS,
) -> CouponCategory:
    """Bucket a coupon by its name and description text.

    Every input gets exactly one category; text without a late-night
    keyword or the word "late", including empty text, is regular.
    """
    lowered = (text or "").lower()
    if any(keyword in lowered for keyword in keywords):
        return CouponCategory.LATE_NIGHT
    if LATE_WORD_PATTERN.search(lowered):
        return CouponCategory.LATE_NIGHT
    return CouponCategory.REGULAR
