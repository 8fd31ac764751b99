"""Result model for a rate-limited menu lookup."""

from pydantic import BaseModel, ConfigDict, Field

from coupon_lookup.core.models.coupon import Coupon, StoreInfo
from coupon_lookup.core.models.rate_limit import RateLimitDecision


class LookupResult(BaseModel):
    """What the caller gets back from one store lookup."""

    model_config = ConfigDict(frozen=True)

    store_id: str
    coupons: list[Coupon] = Field(default_factory=list)
    store_info: StoreInfo | None = Field(
        default=None, description="None when the lookup was rate limited"
    )
    rate_limit: RateLimitDecision

    @property
    def limited(self) -> bool:
        """True when the request was denied before fetching."""
        return not self.rate_limit.allowed
