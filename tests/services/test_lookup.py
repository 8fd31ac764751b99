"""Tests for the rate-limited lookup service."""

from __future__ import annotations

from datetime import timedelta

import pytest

from coupon_lookup.core.errors import DecodeFault, InvalidStoreIdError
from coupon_lookup.services.lookup import CouponLookupService, validate_store_id
from coupon_lookup.services.rate_limiter import SlidingWindowRateLimiter


MENU = {
    "StoreID": "4336",
    "Market": "UNITED_STATES",
    "Coupons": {
        "Columns": ["ID", "Name", "Price", "Tags"],
        "Data": [["9193", "Mix & Match", "6.99", "ServiceMethod=Carryout"]],
    },
}


class _FakeFetcher:
    def __init__(self, payload=MENU) -> None:
        self.payload = payload
        self.calls: list[str] = []

    async def fetch_menu(self, store_id: str):
        self.calls.append(store_id)
        return self.payload


class _FailingFetcher:
    async def fetch_menu(self, store_id: str):
        raise ConnectionError(f"store {store_id} unreachable")


def _limiter(quota: int = 2) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(quota=quota, window=timedelta(minutes=10))


@pytest.mark.asyncio
async def test_lookup_decodes_coupons_and_store_info() -> None:
    fetcher = _FakeFetcher()
    service = CouponLookupService(fetcher, _limiter())

    result = await service.lookup("client", "4336")

    assert fetcher.calls == ["4336"]
    assert result.limited is False
    assert result.rate_limit.remaining == 1
    assert [c.identity for c in result.coupons] == ["9193"]
    assert result.coupons[0].service_method == "Carryout"
    assert result.store_info is not None
    assert result.store_info.market == "UNITED_STATES"


@pytest.mark.asyncio
async def test_lookup_denied_without_fetching() -> None:
    fetcher = _FakeFetcher()
    service = CouponLookupService(fetcher, _limiter(quota=1))

    await service.lookup("client", "4336")
    result = await service.lookup("client", "4336")

    assert fetcher.calls == ["4336"]
    assert result.limited is True
    assert result.coupons == []
    assert result.store_info is None
    assert result.rate_limit.remaining == 0


@pytest.mark.asyncio
async def test_lookup_propagates_fetch_errors() -> None:
    service = CouponLookupService(_FailingFetcher(), _limiter())

    with pytest.raises(ConnectionError):
        await service.lookup("client", "4336")


@pytest.mark.asyncio
async def test_lookup_raises_decode_fault_for_garbage_payload() -> None:
    service = CouponLookupService(_FakeFetcher(payload="<html>"), _limiter())

    with pytest.raises(DecodeFault):
        await service.lookup("client", "4336")


@pytest.mark.asyncio
async def test_quota_report_does_not_consume() -> None:
    service = CouponLookupService(_FakeFetcher(), _limiter(quota=2))

    before = service.quota("client")
    await service.lookup("client", "4336")
    after = service.quota("client")

    assert before.remaining == 2
    assert after.remaining == 1
    assert after.allowed is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "store_id", ["", "   ", "abc", "43a6", "../4336", "-1", "12345678901", None]
)
async def test_invalid_store_id_rejected_before_limiter(store_id) -> None:
    fetcher = _FakeFetcher()
    service = CouponLookupService(fetcher, _limiter(quota=2))

    with pytest.raises(InvalidStoreIdError):
        await service.lookup("client", store_id)

    assert fetcher.calls == []
    assert service.quota("client").remaining == 2


@pytest.mark.asyncio
async def test_store_id_is_trimmed_before_fetching() -> None:
    fetcher = _FakeFetcher()
    service = CouponLookupService(fetcher, _limiter())

    result = await service.lookup("client", " 4336 ")

    assert fetcher.calls == ["4336"]
    assert result.store_id == "4336"


@pytest.mark.parametrize(
    ("store_id", "expected"),
    [("1", "1"), ("4336", "4336"), ("1234567890", "1234567890"), ("\t42\n", "42")],
)
def test_validate_store_id_accepts_digits(store_id, expected) -> None:
    assert validate_store_id(store_id) == expected


@pytest.mark.parametrize("store_id", ["12345678901", "٤٣٣٦", "4 336", 4336])
def test_validate_store_id_rejects(store_id) -> None:
    with pytest.raises(InvalidStoreIdError) as excinfo:
        validate_store_id(store_id)

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.store_id == store_id


@pytest.mark.asyncio
async def test_failed_fetch_gives_quota_back() -> None:
    service = CouponLookupService(_FailingFetcher(), _limiter(quota=2))

    for _ in range(3):
        with pytest.raises(ConnectionError):
            await service.lookup("client", "4336")

    assert service.quota("client").remaining == 2


@pytest.mark.asyncio
async def test_decode_fault_gives_quota_back() -> None:
    service = CouponLookupService(_FakeFetcher(payload="<html>"), _limiter(quota=1))

    with pytest.raises(DecodeFault):
        await service.lookup("client", "4336")

    assert service.quota("client").remaining == 1
