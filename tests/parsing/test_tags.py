"""Tests for the Tags mini-language lexer."""

from __future__ import annotations

import pytest

from coupon_lookup.core.models import TagEntry
from coupon_lookup.parsing.tags import (
    TagLexer,
    decode_tags,
    lex_tags,
    split_list_value,
)


def test_lex_tags_returns_pairs_in_source_order() -> None:
    entries = lex_tags("ExpiresOn=2025-12-31,VirtualCode=LP99")

    assert entries == [
        TagEntry(key="ExpiresOn", value="2025-12-31"),
        TagEntry(key="VirtualCode", value="LP99"),
    ]


def test_value_keeps_everything_after_first_equals() -> None:
    assert decode_tags("Formula=a=b=c") == {"Formula": "a=b=c"}


def test_generic_code_key_is_not_confused_with_virtual_code() -> None:
    tags = decode_tags("VirtualCode=V1,Code=C1")

    assert tags["VirtualCode"] == "V1"
    assert tags["Code"] == "C1"


def test_last_repeat_wins_in_mapping_but_all_are_lexed() -> None:
    raw = "ServiceMethod=Carryout,ServiceMethod=Delivery"

    assert decode_tags(raw) == {"ServiceMethod": "Delivery"}
    assert len(lex_tags(raw)) == 2


def test_tokens_without_equals_or_key_are_dropped() -> None:
    assert decode_tags("Local,=orphan,,MinOrder=10") == {"MinOrder": "10"}


def test_empty_value_is_kept() -> None:
    assert decode_tags("ValidHours=") == {"ValidHours": ""}


def test_key_is_trimmed_but_value_is_verbatim() -> None:
    assert decode_tags(" ExpireDate= 12/31 ") == {"ExpireDate": " 12/31 "}


def test_malformed_dates_are_stored_verbatim() -> None:
    assert decode_tags("ExpiresOn=not-a-date") == {"ExpiresOn": "not-a-date"}


@pytest.mark.parametrize("raw", [None, "", 42, ["ExpiresOn=2025-01-01"]])
def test_non_string_or_empty_input_decodes_to_nothing(raw) -> None:
    assert lex_tags(raw) == []
    assert decode_tags(raw) == {}


def test_lexer_can_be_used_directly() -> None:
    assert TagLexer("A=1").entries() == [TagEntry(key="A", value="1")]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("S2PIZZA", ["S2PIZZA"]),
        ("14SCREEN:P12IPAZA:14SCREEN", ["14SCREEN", "P12IPAZA", "14SCREEN"]),
        ("A::B", ["A", "", "B"]),
        (":", ["", ""]),
    ],
)
def test_split_list_value_keeps_every_segment(value, expected) -> None:
    result = split_list_value(value)

    assert result == expected
    assert len(result) == value.count(":") + 1
