"""Data models for decoded menu coupons and store metadata."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


Scalar = str | int | float | bool | None


def freeze_value(value: Any) -> Any:
    """Return a read-only copy: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType(
            {key: freeze_value(item) for key, item in value.items()}
        )
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze_value(item) for item in value)
    return value


def thaw_value(value: Any) -> Any:
    """Inverse of freeze_value for serialization."""
    if isinstance(value, Mapping):
        return {key: thaw_value(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_value(item) for item in value]
    if isinstance(value, frozenset):
        return [thaw_value(item) for item in value]
    return value


class CouponCategory(str, Enum):
    """Display bucket assigned to every coupon."""

    LATE_NIGHT = "late_night"
    REGULAR = "regular"


class TagEntry(BaseModel):
    """A single ``Key=Value`` token decoded from a coupon's Tags field."""

    key: str
    value: str

    model_config = ConfigDict(frozen=True)


class Coupon(BaseModel):
    """A fully resolved coupon, ready for display.

    Field aliases follow the upstream feed's spelling so records can be
    dumped back out with ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = Field(default=None, alias="Id")
    name: str | None = Field(default=None, alias="Name")
    description: str | None = Field(default=None, alias="Description")
    price: str | None = Field(default=None, alias="Price")
    code: str | None = Field(default=None, alias="Code")
    virtual_code: str | None = Field(default=None, alias="VirtualCode")
    tags: str | None = Field(
        default=None, alias="Tags", description="Raw Tags string"
    )
    expiration_date: str | None = Field(default=None, alias="ExpirationDate")
    expiration_time: str | None = Field(default=None, alias="ExpirationTime")
    eligible_products: tuple[str, ...] = Field(
        default=(), alias="EligibleProducts"
    )
    eligible_categories: tuple[str, ...] = Field(
        default=(), alias="EligibleCategories"
    )
    minimum_order: str | None = Field(default=None, alias="MinimumOrder")
    service_method: str | None = Field(default=None, alias="ServiceMethod")
    valid_service_methods: tuple[str, ...] = Field(
        default=(), alias="ValidServiceMethods"
    )
    time_restriction: str | None = Field(default=None, alias="TimeRestriction")
    valid_hours: str | None = Field(default=None, alias="ValidHours")
    menu_item_hints: tuple[str, ...] = Field(default=(), alias="MenuItemHints")
    category: CouponCategory = Field(
        default=CouponCategory.REGULAR, alias="Category"
    )

    identity: str = Field(description="Stable display identity")
    display_price: str = Field(
        default="", description="Price with a currency symbol, or empty"
    )

    extra_fields: Mapping[str, Any] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Upstream columns this model does not interpret",
    )
    extra_tags: Mapping[str, str] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Tag keys this model does not interpret",
    )

    @field_validator("extra_fields", "extra_tags", mode="after")
    @classmethod
    def freeze_passthrough(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        """Store passthrough maps read-only, nested containers included."""
        return freeze_value(value)

    @field_serializer("extra_fields", "extra_tags")
    def dump_passthrough(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw_value(value)


class SavingsAmount(BaseModel):
    """Headline savings shown for a coupon."""

    model_config = ConfigDict(frozen=True)

    amount: str = Field(description="e.g. '$5', '50%', '$9.99' or 'Deal'")
    type: Literal["dollar", "percent", "price"]


class StoreInfo(BaseModel):
    """Store metadata copied verbatim from the menu payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    store_id: Scalar = Field(default=None, alias="StoreID")
    business_date: Scalar = Field(default=None, alias="BusinessDate")
    market: Scalar = Field(default=None, alias="Market")
    store_as_of_time: Scalar = Field(default=None, alias="StoreAsOfTime")
    status: Scalar = Field(default=None, alias="Status")
    language_code: Scalar = Field(default=None, alias="LanguageCode")


class CouponFeed(BaseModel):
    """Decoded coupons together with the store they belong to."""

    model_config = ConfigDict(frozen=True)

    coupons: list[Coupon] = Field(default_factory=list)
    store_info: StoreInfo = Field(default_factory=StoreInfo)
