"""Dispatch range export for LexisNexis.

LexisNexis wants serviceable address numbers on a street expressed as closed
ranges. Numbers from the include set are served, numbers from the exclude set
are not, and each maximal run of includes in number order becomes one row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from .components import Address, Addresses
from .records import RecordCollection

LEXISNEXIS_COLUMNS = [
    "StNumFrom",
    "StNumTo",
    "StPreDirection",
    "StName",
    "StType",
    "StPostDirection",
    "City",
    "Beat",
    "Area",
    "District",
    "Zone",
    "Zipcode",
    "CommonPlace",
    "StNum",
]


@dataclass(frozen=True)
class LexisNexisRangeItem:
    address_number: int
    include: bool


@dataclass(frozen=True)
class LexisNexisRange:
    items: Tuple[LexisNexisRangeItem, ...] = ()

    @classmethod
    def from_numbers(cls, include: Iterable[int], exclude: Iterable[int]) -> "LexisNexisRange":
        items = [LexisNexisRangeItem(number, True) for number in include]
        items.extend(LexisNexisRangeItem(number, False) for number in exclude)
        # sorted() is stable, so an include sorts ahead of an equal exclude.
        items = sorted(items, key=lambda item: item.address_number)
        return cls(items=tuple(items))

    @classmethod
    def from_addresses(cls, include: Iterable[Address], exclude: Iterable[Address]) -> "LexisNexisRange":
        return cls.from_numbers(
            (address.address_number for address in include),
            (address.address_number for address in exclude),
        )

    def ranges(self) -> List[Tuple[int, int]]:
        found: List[Tuple[int, int]] = []
        open_range = False
        low = high = 0
        for item in self.items:
            if item.include:
                if open_range:
                    high = item.address_number
                else:
                    open_range = True
                    low = high = item.address_number
            elif open_range:
                found.append((low, high))
                open_range = False
        if open_range:
            found.append((low, high))
        return found


@dataclass(frozen=True)
class LexisNexisRequired:
    number_from: int
    number_to: int
    street_name: str
    post_type: str
    postal_community: str
    zip: int


@dataclass(frozen=True)
class LexisNexisOptions:
    pre_directional: Optional[str] = None
    post_directional: Optional[str] = None
    beat: Optional[str] = None
    area: Optional[str] = None
    district: Optional[str] = None
    zone: Optional[str] = None
    common_place: Optional[str] = None
    address_number: Optional[int] = None


@dataclass(frozen=True)
class LexisNexisItem:
    required: LexisNexisRequired
    options: LexisNexisOptions = field(default_factory=LexisNexisOptions)

    @classmethod
    def build(cls, required: LexisNexisRequired, options: LexisNexisOptions | None = None) -> "LexisNexisItem":
        return cls(required=required, options=options or LexisNexisOptions())

    def as_row(self) -> Dict[str, object]:
        required, options = self.required, self.options
        return {
            "StNumFrom": required.number_from,
            "StNumTo": required.number_to,
            "StPreDirection": options.pre_directional,
            "StName": required.street_name,
            "StType": required.post_type,
            "StPostDirection": options.post_directional,
            "City": required.postal_community,
            "Beat": options.beat,
            "Area": options.area,
            "District": options.district,
            "Zone": options.zone,
            "Zipcode": required.zip,
            "CommonPlace": options.common_place,
            "StNum": options.address_number,
        }


def _same_street(left: Address, right: Address) -> bool:
    return (
        left.street_name == right.street_name
        and left.post_type == right.post_type
        and left.pre_directional == right.pre_directional
        and left.pre_modifier == right.pre_modifier
        and left.pre_type == right.pre_type
    )


class LexisNexis(RecordCollection[LexisNexisItem]):
    @classmethod
    def from_addresses(cls, include: Addresses, exclude: Addresses) -> "LexisNexis":
        items = []
        seen = set()
        for address in include:
            street = address.complete_street_name()
            if street in seen:
                continue
            seen.add(street)
            served = [a for a in include if _same_street(a, address)]
            excluded = [a for a in exclude if _same_street(a, address)]
            for low, high in LexisNexisRange.from_addresses(served, excluded).ranges():
                required = LexisNexisRequired(
                    number_from=low,
                    number_to=high,
                    street_name=address.street_name,
                    post_type=address.post_type.abbreviate(),
                    postal_community=address.postal_community.label(),
                    zip=address.zip,
                )
                options = LexisNexisOptions(
                    pre_directional=address.pre_directional.abbreviate() if address.pre_directional else None,
                )
                items.append(LexisNexisItem.build(required, options))
        logger.info("Compressed {} streets into {} LexisNexis ranges", len(seen), len(items))
        return cls.of(items)
