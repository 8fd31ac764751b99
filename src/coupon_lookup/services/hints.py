"""Menu item hint extraction from coupon names and descriptions."""

import re


# Specific phrases precede the generic words they contain; both are kept.
MENU_ITEM_KEYWORDS = (
    "large pizza",
    "medium pizza",
    "small pizza",
    "specialty pizza",
    "cheese pizza",
    "pepperoni pizza",
    "hand tossed",
    "thin crust",
    "pan pizza",
    "boneless wings",
    "traditional wings",
    "cheesy bread",
    "bread",
    "pizza",
    "wings",
    "pasta",
    "sandwich",
    "sandwiches",
    "breadsticks",
    "soda",
    "drink",
    "beverages",
    "dessert",
    "cookie",
    "brownies",
    "salad",
    "sides",
    "supreme",
    "pepperoni",
    "chicken",
    "beef",
    "italian sausage",
    "delivery",
    "carryout",
    "pickup",
    "topping",
    "toppings",
)

URGENCY_PHRASES = (
    "today only",
    "limited time",
    "ends tonight",
    "ends at midnight",
    "ends today",
    "while supplies last",
    "limited offer",
    "ends soon",
    "expires today",
    "flash sale",
    "hourly special",
    "lunch special",
    "dinner special",
    "happy hour",
)

URGENCY_MARKER = "⏰"

PRICE_PATTERN = re.compile(r"\$\d+(?:\.\d+)?")
QUANTITY_PATTERN = re.compile(
    r"\b\d+\s*(?:piece|pc|order|item)s?\b", re.IGNORECASE
)


def build_hint_text(name: str | None, description: str | None) -> str:
    """Join the non-empty name and description with a space."""
    return " ".join(part for part in (name, description) if part)


class HintExtractor:
    """Finds menu items, prices, quantities and urgency phrases in text.

    Holds only immutable tables, so one instance can serve any number of
    concurrent callers.
    """

    def __init__(
        self,
        keywords: tuple[str, ...] = MENU_ITEM_KEYWORDS,
        urgency_phrases: tuple[str, ...] = URGENCY_PHRASES,
    ) -> None:
        """Initialize hint extractor.

        Args:
            keywords: Lower-case menu phrases, most specific first.
            urgency_phrases: Lower-case time-sensitive phrases.
        """
        self._keywords = tuple(k.lower() for k in keywords)
        self._urgency_phrases = tuple(p.lower() for p in urgency_phrases)

    def keyword_hints(self, text: str) -> list[str]:
        lowered = text.lower()
        return [k for k in self._keywords if k in lowered]

    @staticmethod
    def price_hints(text: str) -> list[str]:
        return [f"Price: {m.group(0)}" for m in PRICE_PATTERN.finditer(text)]

    @staticmethod
    def quantity_hints(text: str) -> list[str]:
        return [
            f"Quantity: {m.group(0)}" for m in QUANTITY_PATTERN.finditer(text)
        ]

    def urgency_hints(self, text: str) -> list[str]:
        lowered = text.lower()
        return [
            f"{URGENCY_MARKER} {phrase}"
            for phrase in self._urgency_phrases
            if phrase in lowered
        ]

    def extract(self, text: str | None) -> list[str]:
        """Return de-duplicated hints in first-seen order.

        Args:
            text: Name and description joined by ``build_hint_text``.

        Returns:
            Keyword hints, then price, quantity and urgency hints.
        """
        if not text:
            return []

        hints = [
            *self.keyword_hints(text),
            *self.price_hints(text),
            *self.quantity_hints(text),
            *self.urgency_hints(text),
        ]
        return list(dict.fromkeys(hints))


_default_extractor = HintExtractor()


def extract_menu_item_hints(text: str | None) -> list[str]:
    """Extract hints with the default keyword and phrase tables."""
    return _default_extractor.extract(text)
