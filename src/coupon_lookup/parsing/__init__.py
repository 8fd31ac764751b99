"""Parsers for the menu feed's columnar block and Tags mini-language."""

from coupon_lookup.parsing.columns import find_coupon_block, unmarshal_rows
from coupon_lookup.parsing.tags import (
    TagLexer,
    decode_tags,
    lex_tags,
    split_list_value,
)


__all__ = [
    "TagLexer",
    "decode_tags",
    "find_coupon_block",
    "lex_tags",
    "split_list_value",
    "unmarshal_rows",
]
