from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from .components import PartialAddress
from .errors import ParseError
from .normalize import (
    Directional,
    PostalCommunity,
    State,
    StreetPostType,
    StreetPreModifier,
    StreetPreType,
    StreetSeparator,
    SubaddressType,
)

# A fraction, a word (apostrophes allowed inside), or a single punctuation mark.
_TOKEN_PATTERN = re.compile(r"\d+/\d+|[^\W_]+(?:'[^\W_]+)*|\S")
_FRACTION_PATTERN = re.compile(r"\d+/\d+")
_ZIP_PATTERN = re.compile(r"\d{5}")
_IDENTIFIER_SEPARATORS = {"#", "&", "-", "."}


@dataclass(frozen=True)
class _Token:
    text: str
    start: int

    @property
    def is_word(self) -> bool:
        return self.text[0].isalnum()


class _Cursor:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = [_Token(m.group(0), m.start()) for m in _TOKEN_PATTERN.finditer(text)]
        self.position = 0

    def peek(self, offset: int = 0) -> Optional[_Token]:
        index = self.position + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def peek_word(self, offset: int = 0) -> Optional[str]:
        token = self.peek(offset)
        if token is not None and token.is_word:
            return token.text
        return None

    def take(self, count: int = 1) -> None:
        self.position += count

    def skip(self, *marks: str) -> None:
        while self.peek() is not None and self.peek().text in marks:  # type: ignore[union-attr]
            self.take()

    def remainder(self) -> str:
        token = self.peek()
        return "" if token is None else self.text[token.start :]

    def community(self) -> int:
        """Number of word tokens forming a postal community here, or 0."""
        first = self.peek_word()
        if first is None:
            return 0
        second = self.peek_word(1)
        if second is not None and PostalCommunity.match_mixed(f"{first} {second}"):
            return 2
        if PostalCommunity.match_mixed(first):
            return 1
        return 0

    def at_state(self) -> bool:
        # Two letter codes collide with unit identifiers, so a state must end
        # the address or be followed by a zip code.
        word = self.peek_word()
        if word is None or State.match_mixed(word) is None:
            return False
        following = self.peek(1)
        return following is None or following.text == "," or bool(_ZIP_PATTERN.fullmatch(following.text))

    def at_zip(self) -> bool:
        word = self.peek_word()
        return word is not None and bool(_ZIP_PATTERN.fullmatch(word))


def _is_post_type(word: Optional[str]) -> bool:
    return word is not None and StreetPostType.match_mixed(word) is not None


def _ends_street_name(cursor: _Cursor) -> bool:
    word = cursor.peek_word()
    if word is None or cursor.community():
        return True
    if not _is_post_type(word):
        return False
    # "MOUNTAIN VIEW AVE": a post type followed by another post type is part
    # of the name, unless the second word is really a unit designator.
    following = cursor.peek_word(1)
    if _is_post_type(following) and SubaddressType.match_mixed(following) is None:
        return False
    return True


def _parse_number(cursor: _Cursor) -> int:
    word = cursor.peek_word()
    if word is None or not word.isdigit():
        raise ParseError("address_number", cursor.remainder())
    cursor.take()
    # Ranges such as "2501-2503" are recorded under their first number.
    if cursor.peek() is not None and cursor.peek().text == "-" and (cursor.peek_word(1) or "").isdigit():  # type: ignore[union-attr]
        cursor.take(2)
    return int(word)


def _parse_directional(cursor: _Cursor) -> Optional[Directional]:
    word = cursor.peek_word()
    if word is None:
        return None
    consumed = 1
    # Dotted forms like "N.W." arrive as N . W .
    if cursor.peek(1) is not None and cursor.peek(1).text == ".":  # type: ignore[union-attr]
        consumed = 2
        second = cursor.peek_word(2)
        if word.upper() in ("N", "S") and second is not None and second.upper() in ("E", "W"):
            word = word + second
            consumed = 4 if cursor.peek(3) is not None and cursor.peek(3).text == "." else 3  # type: ignore[union-attr]
    directional = Directional.match_abbreviated(word)
    if directional is None or cursor.peek_word(consumed) is None:
        return None
    cursor.take(consumed)
    return directional


def _names_street(word: Optional[str]) -> bool:
    return word is not None and not _is_post_type(word)


def _parse_pre_modifier(cursor: _Cursor) -> Optional[StreetPreModifier]:
    # "OLD" in "OLD HIGHWAY 99" but not the street in "100 OLD ST".
    modifier = StreetPreModifier.match_mixed(cursor.peek_word())
    following = cursor.peek_word(1)
    if modifier is None or cursor.peek_word(2) is None:
        return None
    if not (_names_street(following) or StreetPreType.match_mixed(following)):
        return None
    cursor.take()
    return modifier


def _parse_pre_type(cursor: _Cursor) -> Optional[StreetPreType]:
    pre_type = StreetPreType.match_mixed(cursor.peek_word())
    if pre_type is None or not _names_street(cursor.peek_word(1)):
        return None
    cursor.take()
    return pre_type


def _parse_separator(cursor: _Cursor) -> Optional[StreetSeparator]:
    first, second = cursor.peek_word(), cursor.peek_word(1)
    if first is None or second is None or cursor.peek_word(2) is None:
        return None
    separator = StreetSeparator.match_mixed(f"{first} {second}")
    if separator is not None:
        cursor.take(2)
    return separator


def _parse_street_name(cursor: _Cursor) -> str:
    first = cursor.peek_word()
    if first is None:
        raise ParseError("street_name", cursor.remainder())
    words = [first]
    cursor.take()
    while not _ends_street_name(cursor):
        words.append(cursor.peek_word())  # type: ignore[arg-type]
        cursor.take()
    return " ".join(words).upper()


def _parse_subaddress_identifier(cursor: _Cursor) -> Optional[str]:
    words: List[str] = []
    while True:
        token = cursor.peek()
        if token is None or token.text == ",":
            break
        if token.text in _IDENTIFIER_SEPARATORS:
            cursor.take()
            continue
        if not token.is_word or cursor.community() or cursor.at_state() or cursor.at_zip():
            break
        words.append(token.text)
        cursor.take()
    return " ".join(words) or None


def parse_address(address_text: str) -> PartialAddress:
    cursor = _Cursor(address_text)

    # House number
    number = _parse_number(cursor)

    # Fractional suffix
    suffix = None
    word = cursor.peek_word()
    if word is not None and _FRACTION_PATTERN.fullmatch(word):
        suffix = word
        cursor.take()

    # Directional
    directional = _parse_directional(cursor)

    # Words ahead of the street name
    pre_modifier = _parse_pre_modifier(cursor)
    pre_type = _parse_pre_type(cursor)
    separator = _parse_separator(cursor)

    # Street name, then the post type its lookahead stopped on
    street_name = _parse_street_name(cursor)
    post_type = StreetPostType.match_mixed(cursor.peek_word())
    if post_type is not None:
        cursor.take()
        cursor.skip(".")

    # Unit
    cursor.skip(".", "#")
    subaddress_type = SubaddressType.match_mixed(cursor.peek_word())
    if subaddress_type is not None:
        cursor.take()
    identifier = _parse_subaddress_identifier(cursor)

    # Community, state and zip
    cursor.skip(",")
    community = None
    width = cursor.community()
    if width:
        words = [cursor.peek_word(offset) for offset in range(width)]
        community = PostalCommunity.match_mixed(" ".join(words))  # type: ignore[arg-type]
        cursor.take(width)
    else:
        # An unrecognized city is dropped.
        while cursor.peek_word() is not None and not (cursor.at_state() or cursor.at_zip()):
            cursor.take()

    cursor.skip(",")
    state = None
    if cursor.at_state():
        state = State.match_mixed(cursor.peek_word())
        cursor.take()

    cursor.skip(",")
    postal_code = None
    if cursor.at_zip():
        postal_code = int(cursor.peek_word())  # type: ignore[arg-type]
        cursor.take()

    if cursor.peek() is not None:
        logger.debug("Ignoring trailing text {!r} in {!r}", cursor.remainder(), address_text)

    return PartialAddress(
        address_number=number,
        address_number_suffix=suffix,
        pre_directional=directional,
        pre_modifier=pre_modifier,
        pre_type=pre_type,
        separator=separator,
        street_name=street_name,
        post_type=post_type,
        subaddress_type=subaddress_type,
        subaddress_identifier=identifier,
        zip=postal_code,
        postal_community=community,
        state=state,
    )
