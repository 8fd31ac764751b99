"""Lexer for the ``Key=Value,Key2=Value2`` mini-language in coupon Tags."""

from enum import Enum

from coupon_lookup.core.models import TagEntry


TOKEN_SEPARATOR = ","
KEY_VALUE_SEPARATOR = "="
LIST_SEPARATOR = ":"


class _State(Enum):
    KEY = "key"
    VALUE = "value"


class TagLexer:
    """Single-pass state machine over a raw Tags string.

    A comma always ends a token; the grammar has no quoting or escaping.
    Inside a token the first ``=`` switches from reading the key to reading
    the value, so later ``=`` characters belong to the value. Tokens with
    no ``=`` or an empty key carry no pair and are dropped.
    """

    def __init__(self, raw: str) -> None:
        self._raw = raw

    def entries(self) -> list[TagEntry]:
        """Return every decoded pair in source order, repeats included."""
        entries: list[TagEntry] = []
        state = _State.KEY
        key_chars: list[str] = []
        value_chars: list[str] = []

        for char in self._raw:
            if char == TOKEN_SEPARATOR:
                self._emit(entries, state, key_chars, value_chars)
                state = _State.KEY
                key_chars = []
                value_chars = []
            elif state is _State.KEY and char == KEY_VALUE_SEPARATOR:
                state = _State.VALUE
            elif state is _State.KEY:
                key_chars.append(char)
            else:
                value_chars.append(char)

        self._emit(entries, state, key_chars, value_chars)
        return entries

    @staticmethod
    def _emit(
        entries: list[TagEntry],
        state: _State,
        key_chars: list[str],
        value_chars: list[str],
    ) -> None:
        if state is not _State.VALUE:
            return
        key = "".join(key_chars).strip()
        if not key:
            return
        entries.append(TagEntry(key=key, value="".join(value_chars)))


def lex_tags(raw: object) -> list[TagEntry]:
    """Decode a raw Tags value into ordered pairs.

    Args:
        raw: The upstream Tags field. Anything other than a string
            (absent, null, numeric) decodes to no pairs.

    Returns:
        Pairs in source order; repeated keys appear once per occurrence.
    """
    if not isinstance(raw, str) or not raw:
        return []
    return TagLexer(raw).entries()


def decode_tags(raw: object) -> dict[str, str]:
    """Decode a raw Tags value into a mapping; the last repeat of a key wins."""
    return {entry.key: entry.value for entry in lex_tags(raw)}


def split_list_value(value: str) -> list[str]:
    """Split a colon-delimited tag value, keeping order, repeats and blanks."""
    return value.split(LIST_SEPARATOR)
