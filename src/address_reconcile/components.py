from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple

from .errors import ConversionError
from .filters import AddressField
from .normalize import (
    AddressStatus,
    Directional,
    PostalCommunity,
    State,
    StreetPostType,
    StreetPreModifier,
    StreetPreType,
    StreetSeparator,
    SubaddressType,
    standardize_street,
)
from .records import RecordCollection


class AddressLike(Protocol):
    """Anything carrying the identity and descriptive fields of an address."""

    address_number: int
    address_number_suffix: Optional[str]
    pre_directional: Optional[Directional]
    pre_modifier: Optional[StreetPreModifier]
    pre_type: Optional[StreetPreType]
    separator: Optional[StreetSeparator]
    street_name: str
    post_type: StreetPostType
    subaddress_type: Optional[SubaddressType]
    subaddress_identifier: Optional[str]
    floor: Optional[int]
    building: Optional[str]
    zip: int
    postal_community: PostalCommunity
    state: State
    status: AddressStatus

    def label(self) -> str:
        ...


class Located(Protocol):
    latitude: float
    longitude: float


def display(value: object) -> Optional[str]:
    """Render a field value the way match reports print it."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.label()  # type: ignore[attr-defined]
    return str(value)


def _street_prefix(address: object) -> List[Optional[str]]:
    """Pre-modifier, pre-type and separator, the words written ahead of a street name."""
    return [display(getattr(address, name)) for name in ("pre_modifier", "pre_type", "separator")]


def _subaddress_parts(
    subaddress_type: Optional[SubaddressType],
    identifier: Optional[str],
    building: Optional[str],
) -> List[str]:
    if subaddress_type and identifier:
        return [subaddress_type.abbreviate(), identifier]
    if identifier:
        return [f"#{identifier}"]
    if subaddress_type:
        return [subaddress_type.abbreviate()]
    if building:
        return ["BLDG", building]
    return []


@dataclass(frozen=True)
class PartialAddress:
    """A parse result or query template. Absent fields are unknown."""

    address_number: Optional[int] = None
    address_number_suffix: Optional[str] = None
    pre_directional: Optional[Directional] = None
    pre_modifier: Optional[StreetPreModifier] = None
    pre_type: Optional[StreetPreType] = None
    separator: Optional[StreetSeparator] = None
    street_name: Optional[str] = None
    post_type: Optional[StreetPostType] = None
    subaddress_type: Optional[SubaddressType] = None
    subaddress_identifier: Optional[str] = None
    floor: Optional[int] = None
    building: Optional[str] = None
    zip: Optional[int] = None
    postal_community: Optional[PostalCommunity] = None
    state: Optional[State] = None
    status: Optional[AddressStatus] = None

    def label(self) -> str:
        parts = [
            None if self.address_number is None else str(self.address_number),
            self.address_number_suffix,
            self.pre_directional.abbreviate() if self.pre_directional else None,
            *_street_prefix(self),
            self.street_name,
            self.post_type.abbreviate() if self.post_type else None,
            self.subaddress_type.abbreviate() if self.subaddress_type else None,
            self.subaddress_identifier,
        ]
        return " ".join(part for part in parts if part)

    def standardize(self) -> "PartialAddress":
        street_name, post_type = standardize_street(
            self.pre_directional, self.street_name, self.post_type
        )
        return replace(self, street_name=street_name, post_type=post_type)


class MismatchField(Enum):
    SUBADDRESS_TYPE = "subaddress_type"
    FLOOR = "floor"
    BUILDING = "building"
    STATUS = "status"


@dataclass(frozen=True)
class Mismatch:
    field: MismatchField
    message: str

    @classmethod
    def between(cls, field: MismatchField, left: object, right: object) -> "Mismatch":
        return cls(field=field, message=f"{display(left)} not equal to {display(right)}")


@dataclass(frozen=True)
class AddressMatch:
    coincident: bool
    mismatches: Tuple[Mismatch, ...] = ()

    def message(self, field: MismatchField) -> Optional[str]:
        for mismatch in self.mismatches:
            if mismatch.field is field:
                return mismatch.message
        return None


_IDENTITY_FIELDS = (
    "address_number",
    "address_number_suffix",
    "pre_directional",
    "pre_modifier",
    "pre_type",
    "separator",
    "street_name",
    "post_type",
    "subaddress_identifier",
    "zip",
    "postal_community",
    "state",
)


def coincident(left: AddressLike, right: AddressLike) -> AddressMatch:
    """Compare identity fields, then grade the descriptive ones."""
    for name in _IDENTITY_FIELDS:
        if getattr(left, name) != getattr(right, name):
            return AddressMatch(coincident=False)

    mismatches = []
    for field in MismatchField:
        ours = getattr(left, field.value)
        theirs = getattr(right, field.value)
        if ours != theirs:
            mismatches.append(Mismatch.between(field, ours, theirs))
    return AddressMatch(coincident=True, mismatches=tuple(mismatches))


@dataclass(frozen=True)
class Address:
    address_number: int
    street_name: str
    post_type: StreetPostType
    zip: int
    postal_community: PostalCommunity
    state: State
    status: AddressStatus = AddressStatus.OTHER
    address_number_suffix: Optional[str] = None
    pre_directional: Optional[Directional] = None
    pre_modifier: Optional[StreetPreModifier] = None
    pre_type: Optional[StreetPreType] = None
    separator: Optional[StreetSeparator] = None
    subaddress_type: Optional[SubaddressType] = None
    subaddress_identifier: Optional[str] = None
    floor: Optional[int] = None
    building: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0
    object_id: int = 0

    @classmethod
    def from_partial(
        cls,
        partial: PartialAddress,
        *,
        latitude: float = 0.0,
        longitude: float = 0.0,
        object_id: int = 0,
    ) -> "Address":
        """Promote a partial address, raising ConversionError on the first gap."""
        for name in ("address_number", "street_name", "post_type", "zip", "postal_community", "state"):
            if getattr(partial, name) in (None, ""):
                raise ConversionError(name, getattr(partial, name))
        return cls(
            address_number=partial.address_number,  # type: ignore[arg-type]
            address_number_suffix=partial.address_number_suffix,
            pre_directional=partial.pre_directional,
            pre_modifier=partial.pre_modifier,
            pre_type=partial.pre_type,
            separator=partial.separator,
            street_name=partial.street_name,  # type: ignore[arg-type]
            post_type=partial.post_type,  # type: ignore[arg-type]
            subaddress_type=partial.subaddress_type,
            subaddress_identifier=partial.subaddress_identifier,
            floor=partial.floor,
            building=partial.building,
            zip=partial.zip,  # type: ignore[arg-type]
            postal_community=partial.postal_community,  # type: ignore[arg-type]
            state=partial.state,  # type: ignore[arg-type]
            status=partial.status or AddressStatus.OTHER,
            latitude=latitude,
            longitude=longitude,
            object_id=object_id,
        )

    def coincident(self, other: AddressLike) -> AddressMatch:
        return coincident(self, other)

    def complete_street_name(self) -> str:
        parts = [
            self.pre_directional.abbreviate() if self.pre_directional else None,
            *_street_prefix(self),
            self.street_name,
            self.post_type.abbreviate(),
        ]
        return " ".join(part for part in parts if part)

    def label(self) -> str:
        parts = [str(self.address_number)]
        if self.address_number_suffix:
            parts.append(self.address_number_suffix)
        parts.append(self.complete_street_name())
        parts.extend(
            _subaddress_parts(self.subaddress_type, self.subaddress_identifier, self.building)
        )
        return " ".join(parts)

    def distance(self, other: Located) -> float:
        # Planar distance; the coordinates cover a single county.
        return math.hypot(self.latitude - other.latitude, self.longitude - other.longitude)

    def standardize(self) -> "Address":
        street_name, post_type = standardize_street(
            self.pre_directional, self.street_name, self.post_type
        )
        return replace(self, street_name=street_name, post_type=post_type)

    def as_row(self) -> Dict[str, object]:
        return {
            "object_id": self.object_id,
            "address_number": self.address_number,
            "address_number_suffix": self.address_number_suffix,
            "pre_directional": display(self.pre_directional),
            "pre_modifier": display(self.pre_modifier),
            "pre_type": display(self.pre_type),
            "separator": display(self.separator),
            "street_name": self.street_name,
            "post_type": display(self.post_type),
            "subaddress_type": display(self.subaddress_type),
            "subaddress_identifier": self.subaddress_identifier,
            "floor": self.floor,
            "building": self.building,
            "zip": self.zip,
            "postal_community": display(self.postal_community),
            "state": display(self.state),
            "status": display(self.status),
            "label": self.label(),
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


ADDRESS_COLUMNS = [
    "object_id",
    "address_number",
    "address_number_suffix",
    "pre_directional",
    "pre_modifier",
    "pre_type",
    "separator",
    "street_name",
    "post_type",
    "subaddress_type",
    "subaddress_identifier",
    "floor",
    "building",
    "zip",
    "postal_community",
    "state",
    "status",
    "label",
    "latitude",
    "longitude",
]


class Addresses(RecordCollection[Address]):
    """An ordered, immutable collection of addresses from one source."""

    def duplicates(self) -> "Addresses":
        """Every record whose label occurs more than once, grouped by label."""
        labels = [address.label() for address in self.records]
        counts = Counter(labels)
        groups: Dict[str, List[Address]] = {}
        for label, address in zip(labels, self.records):
            if counts[label] > 1:
                groups.setdefault(label, []).append(address)
        return Addresses.of(address for group in groups.values() for address in group)

    def filter_field(self, field: AddressField, value: str) -> "Addresses":
        return Addresses.of(a for a in self.records if field.matches(a, value))

    def street_names(self) -> List[str]:
        """Distinct complete street names, first-seen order."""
        return list(dict.fromkeys(address.complete_street_name() for address in self.records))

    def orphan_streets(self, other: "Addresses") -> List[str]:
        known = set(other.street_names())
        return [street for street in self.street_names() if street not in known]

    def standardize(self) -> "Addresses":
        return Addresses.of(address.standardize() for address in self.records)
