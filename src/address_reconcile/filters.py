from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any, List, Sequence, TypeVar

from .normalize import Directional, StreetPostType

T = TypeVar("T")


class MatchStatus(Enum):
    MATCHING = "matching"
    DIVERGENT = "divergent"
    MISSING = "missing"

    @classmethod
    def parse(cls, text: str) -> "MatchStatus":
        return cls(text.strip().lower())


class _Choice(Enum):
    @classmethod
    def parse(cls, text: str):
        key = text.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"unknown {cls.__name__} {text!r}; expected one of: {choices}") from None

    @classmethod
    def choices(cls) -> List[str]:
        return [member.name.lower() for member in cls]


class MatchFilter(_Choice):
    """Predicates over address match records."""

    MISSING = "missing"
    DIVERGENT = "divergent"
    MATCHING = "matching"
    SUBADDRESS = "subaddress_type"
    FLOOR = "floor"
    BUILDING = "building"
    STATUS = "status"

    def accepts(self, record: Any) -> bool:
        if self is MatchFilter.MISSING:
            return record.match_status is MatchStatus.MISSING
        if self is MatchFilter.MATCHING:
            return record.match_status is MatchStatus.MATCHING
        if self is MatchFilter.DIVERGENT:
            return record.match_status is MatchStatus.DIVERGENT
        # Field filters select divergent records that disagree on that field.
        return (
            record.match_status is MatchStatus.DIVERGENT
            and getattr(record, self.value) is not None
        )

    def select(self, records: Sequence[T]) -> List[T]:
        return [record for record in records if self.accepts(record)]


class FireFilter(_Choice):
    MISSING = "missing"
    DIVERGENT = "divergent"
    MATCHING = "matching"

    def select(self, records: Sequence[T]) -> List[T]:
        status = MatchStatus(self.value)
        return [record for record in records if record.match_status is status]  # type: ignore[attr-defined]


class PartialFilter(_Choice):
    """Match status filter for partial-address records, which carry no field detail."""

    MISSING = "missing"
    DIVERGENT = "divergent"
    MATCHING = "matching"

    def select(self, records: Sequence[T]) -> List[T]:
        status = MatchStatus(self.value)
        return [record for record in records if record.match_status is status]  # type: ignore[attr-defined]


class BusinessFilter(_Choice):
    MISSING = "missing"
    NONMISSING = "nonmissing"
    DIVERGENT = "divergent"
    MATCHING = "matching"
    UNIQUE = "unique"
    MULTIPLE = "multiple"

    def select(self, records: Sequence[T]) -> List[T]:
        if self in (BusinessFilter.UNIQUE, BusinessFilter.MULTIPLE):
            counts = Counter(record.company_name for record in records)  # type: ignore[attr-defined]
            want_unique = self is BusinessFilter.UNIQUE
            return [
                record
                for record in records
                if (counts[record.company_name] == 1) == want_unique  # type: ignore[attr-defined]
            ]
        if self is BusinessFilter.NONMISSING:
            return [r for r in records if r.match_status is not MatchStatus.MISSING]  # type: ignore[attr-defined]
        status = MatchStatus(self.value)
        return [r for r in records if r.match_status is status]  # type: ignore[attr-defined]


class AddressField(_Choice):
    """Address fields that collections can be filtered on."""

    LABEL = "label"
    STREET_NAME = "street_name"
    PRE_DIRECTIONAL = "pre_directional"
    POST_TYPE = "post_type"

    def matches(self, address: Any, value: str) -> bool:
        wanted = value.strip().upper()
        if self is AddressField.LABEL:
            return address.label() == wanted
        if self is AddressField.STREET_NAME:
            return address.street_name == wanted
        if self is AddressField.PRE_DIRECTIONAL:
            directional = Directional.match_mixed(wanted)
            return directional is not None and address.pre_directional is directional
        post_type = StreetPostType.match_mixed(wanted)
        return post_type is not None and address.post_type is post_type
