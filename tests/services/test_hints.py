"""Tests for menu item hint extraction."""

from __future__ import annotations

from coupon_lookup.services.hints import (
    HintExtractor,
    build_hint_text,
    extract_menu_item_hints,
)


def test_specific_and_generic_keywords_both_match() -> None:
    hints = extract_menu_item_hints("Large Pizza Deal Large pizza $9.99")

    assert hints[:2] == ["large pizza", "pizza"]
    assert "Price: $9.99" in hints


def test_price_tokens_with_and_without_fraction() -> None:
    hints = extract_menu_item_hints("Was $12, now $7.99 or $5.")

    assert [h for h in hints if h.startswith("Price:")] == [
        "Price: $12",
        "Price: $7.99",
        "Price: $5",
    ]


def test_quantity_tokens_are_case_insensitive_with_plural() -> None:
    hints = extract_menu_item_hints("Get 8 Pieces of wings or 2 orders")

    assert "Quantity: 8 Pieces" in hints
    assert "Quantity: 2 orders" in hints


def test_urgency_phrases_get_marker() -> None:
    hints = extract_menu_item_hints("Flash Sale - today only!")

    assert "⏰ today only" in hints
    assert "⏰ flash sale" in hints


def test_hints_are_deduplicated_in_first_seen_order() -> None:
    text = "Pizza $5 and more pizza for $5"

    first = extract_menu_item_hints(text)
    second = extract_menu_item_hints(text)

    assert first == second == ["pizza", "Price: $5"]
    assert len(first) == len(set(first))


def test_empty_text_has_no_hints() -> None:
    assert extract_menu_item_hints("") == []
    assert extract_menu_item_hints(None) == []


def test_custom_tables() -> None:
    extractor = HintExtractor(keywords=("Calzone",), urgency_phrases=())

    assert extractor.extract("One calzone, 2 items") == [
        "calzone",
        "Quantity: 2 items",
    ]


def test_build_hint_text_skips_empty_parts() -> None:
    assert build_hint_text("Name", None) == "Name"
    assert build_hint_text("", "Desc") == "Desc"
    assert build_hint_text("Name", "Desc") == "Name Desc"
    assert build_hint_text(None, None) == ""
