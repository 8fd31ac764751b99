"""Unmarshaling of the menu feed's columnar coupon block."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from coupon_lookup.core.logger import get_logger


COUPON_BLOCK_KEYS = ("Coupons", "coupons", "Coupon")


def find_coupon_block(payload: Mapping[str, Any]) -> Any:
    """Return the first coupon block present in the payload, if any."""
    for key in COUPON_BLOCK_KEYS:
        block = payload.get(key)
        if block:
            return block
    return None


def _is_row_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def unmarshal_rows(
    block: Any,
    logger: logging.Logger | None = None,
) -> list[dict[str, Any]]:
    """Zip ``Columns`` with each ``Data`` row into one mapping per row.

    Values are matched to columns by position. A missing or malformed block
    means the store has no deals and yields an empty list. Rows that are
    not sequences are skipped; short rows leave trailing columns as None
    and surplus values are dropped.

    Args:
        block: The ``{"Columns": [...], "Data": [[...]]}`` coupon block.
        logger: Logger for skipped-row diagnostics.

    Returns:
        One dict per usable row, in input order.
    """
    logger = logger or get_logger(__name__)

    if not isinstance(block, Mapping):
        return []

    columns = block.get("Columns")
    rows = block.get("Data")
    if not _is_row_sequence(columns) or not _is_row_sequence(rows):
        return []

    column_names = [str(column) for column in columns]
    records: list[dict[str, Any]] = []
    for index, row in enumerate(rows):
        if not _is_row_sequence(row):
            logger.debug("Skipping coupon row %d: not a sequence", index)
            continue
        if len(row) != len(column_names):
            logger.debug(
                "Coupon row %d has %d values for %d columns",
                index,
                len(row),
                len(column_names),
            )
        records.append(
            {
                column: row[position] if position < len(row) else None
                for position, column in enumerate(column_names)
            }
        )

    return records
