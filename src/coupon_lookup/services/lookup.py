"""Rate-limited store lookup combining the limiter and the decoder."""

import logging
import re
from typing import Any, Protocol

from coupon_lookup.core.errors import InvalidStoreIdError
from coupon_lookup.core.logger import async_log_with_context, log_with_context
from coupon_lookup.core.models import LookupResult, RateLimitDecision
from coupon_lookup.services.decoder import CouponDecoder
from coupon_lookup.services.rate_limiter import SlidingWindowRateLimiter


STORE_ID_PATTERN = re.compile(r"\d{1,10}", re.ASCII)


def validate_store_id(store_id: object) -> str:
    """Return the trimmed store ID if it is 1-10 digits.

    Raises:
        InvalidStoreIdError: If the ID is missing, not a string, or not
            purely numeric within that length.
    """
    if not isinstance(store_id, str):
        raise InvalidStoreIdError(store_id)
    trimmed = store_id.strip()
    if not STORE_ID_PATTERN.fullmatch(trimmed):
        raise InvalidStoreIdError(store_id)
    return trimmed


class MenuFetcher(Protocol):
    """Transport that retrieves a store's raw menu payload."""

    async def fetch_menu(self, store_id: str) -> Any: ...


class CouponLookupService:
    """Answers coupon lookups for a store on behalf of a caller."""

    def __init__(
        self,
        fetcher: MenuFetcher,
        limiter: SlidingWindowRateLimiter,
        decoder: CouponDecoder | None = None,
    ) -> None:
        """Initialize lookup service.

        Args:
            fetcher: Transport for menu payloads; its errors propagate.
            limiter: Shared limiter consulted before every fetch.
            decoder: Decoder for menu payloads.
        """
        self._fetcher = fetcher
        self._limiter = limiter
        self._decoder = decoder or CouponDecoder()

    @async_log_with_context(operation="coupon_lookup")
    async def lookup(
        self,
        identity: str,
        store_id: str,
        logger: logging.LoggerAdapter[logging.Logger] | None = None,
    ) -> LookupResult:
        """Fetch and decode a store's coupons if the caller is under quota.

        The request is counted before fetching and given back if the fetch
        or decode fails, so only successful lookups use up quota.

        Args:
            identity: Caller identity for rate limiting.
            store_id: Store whose menu should be fetched.
            logger: Injected by the logging decorator.

        Returns:
            Decoded coupons and store info, or an empty rate-limited result.

        Raises:
            InvalidStoreIdError: If store_id is not 1-10 digits.
            DecodeFault: If the fetched payload is not key/value data.
        """
        store_id = validate_store_id(store_id)

        decision = self._limiter.check(identity)
        if not decision.allowed:
            if logger is not None:
                logger.info(
                    "[RATE_LIMIT] Lookup for store %s denied; resets at %s",
                    store_id,
                    decision.reset_at.isoformat(),
                )
            return LookupResult(store_id=store_id, rate_limit=decision)

        try:
            payload = await self._fetcher.fetch_menu(store_id)
            feed = self._decoder.decode_feed(payload)
        except Exception:
            if decision.recorded_at is not None:
                self._limiter.release(identity, decision.recorded_at)
            raise

        if logger is not None:
            logger.info(
                "[LOOKUP] Store %s returned %d coupons (%d lookups left)",
                store_id,
                len(feed.coupons),
                decision.remaining,
            )
        return LookupResult(
            store_id=store_id,
            coupons=feed.coupons,
            store_info=feed.store_info,
            rate_limit=decision,
        )

    @log_with_context(operation="coupon_quota")
    def quota(self, identity: str) -> RateLimitDecision:
        """Report the caller's remaining quota without using any of it."""
        return self._limiter.peek(identity)
