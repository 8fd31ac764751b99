"""Decode pipeline turning a menu payload into typed coupons."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from coupon_lookup.core.errors import DecodeFault
from coupon_lookup.core.logger import get_logger
from coupon_lookup.core.models import Coupon, CouponFeed, StoreInfo
from coupon_lookup.parsing.columns import find_coupon_block, unmarshal_rows
from coupon_lookup.parsing.tags import decode_tags
from coupon_lookup.services.classifier import classify_coupon
from coupon_lookup.services.field_resolver import resolve_fields
from coupon_lookup.services.hints import HintExtractor, build_hint_text
from coupon_lookup.services.normalizer import (
    DEFAULT_CURRENCY_SYMBOL,
    coupon_identity,
    format_price,
)


STORE_INFO_KEYS = (
    "StoreID",
    "BusinessDate",
    "Market",
    "StoreAsOfTime",
    "Status",
    "LanguageCode",
)


def coerce_payload(payload: Any) -> Mapping[str, Any]:
    """Return the payload as a mapping, parsing JSON text when needed.

    Raises:
        DecodeFault: If the payload cannot be read as key/value data.
    """
    if isinstance(payload, Mapping):
        return payload

    if isinstance(payload, (str, bytes, bytearray)):
        try:
            parsed = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise DecodeFault(
                f"Menu payload is not valid JSON: {error}",
                payload_type=type(payload).__name__,
            ) from error
        if isinstance(parsed, Mapping):
            return parsed
        raise DecodeFault(
            "Menu payload JSON is not an object",
            payload_type=type(parsed).__name__,
        )

    raise DecodeFault(
        "Menu payload is not a mapping",
        payload_type=type(payload).__name__,
    )


def extract_store_info(payload: Mapping[str, Any]) -> StoreInfo:
    """Copy store metadata from the top level of the payload."""
    values = {key: payload.get(key) for key in STORE_INFO_KEYS}
    try:
        return StoreInfo.model_validate(values)
    except ValidationError:
        # Non-scalar metadata is not ours to interpret.
        return StoreInfo.model_validate(
            {
                key: value
                for key, value in values.items()
                if value is None or isinstance(value, (str, int, float, bool))
            }
        )


class CouponDecoder:
    """Builds Coupon records from the menu feed's columnar coupon block.

    Decoding holds no state between calls: each row becomes one coupon
    from its own values only, and the output keeps the input row order.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        hint_extractor: HintExtractor | None = None,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        """Initialize the decoder.

        Args:
            logger: Logger for diagnostics. Defaults to this module's logger.
            hint_extractor: Extractor for MenuItemHints.
            currency_symbol: Symbol used for display prices.
        """
        self._logger = logger or get_logger(__name__)
        self._hint_extractor = hint_extractor or HintExtractor()
        self._currency_symbol = currency_symbol

    def decode_row(self, row: Mapping[str, Any]) -> Coupon:
        """Resolve, enrich and normalize a single unmarshaled row."""
        fields = resolve_fields(row, decode_tags(row.get("Tags")))

        text = build_hint_text(fields["name"], fields["description"])
        fields["menu_item_hints"] = tuple(self._hint_extractor.extract(text))
        fields["category"] = classify_coupon(text)
        fields["identity"] = coupon_identity(fields)
        fields["display_price"] = format_price(
            fields["price"], self._currency_symbol
        )
        return Coupon(**fields)

    def decode(self, payload: Any) -> list[Coupon]:
        """Decode every coupon in a menu payload.

        Args:
            payload: The menu response as a mapping or JSON text.

        Returns:
            Coupons in row order; empty when the payload carries no coupons.

        Raises:
            DecodeFault: If the payload is not key/value data at all.
        """
        return self._decode_coupons(coerce_payload(payload))

    def decode_feed(self, payload: Any) -> CouponFeed:
        """Decode coupons and store metadata from a menu payload.

        Raises:
            DecodeFault: If the payload is not key/value data at all.
        """
        data = coerce_payload(payload)
        return CouponFeed(
            coupons=self._decode_coupons(data),
            store_info=extract_store_info(data),
        )

    def _decode_coupons(self, data: Mapping[str, Any]) -> list[Coupon]:
        block = find_coupon_block(data)
        if block is None:
            self._logger.info("Menu payload has no coupon block")
            return []

        rows = unmarshal_rows(block, logger=self._logger)
        coupons = [self.decode_row(row) for row in rows]
        self._logger.debug("Decoded %d coupons", len(coupons))
        return coupons
