from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, TypeVar

from .components import Address, AddressLike, MismatchField, PartialAddress
from .filters import MatchStatus
from .records import MatchPartialRecord, MatchRecord

S = TypeVar("S")
C = TypeVar("C")
R = TypeVar("R")


class MatchStrategy(ABC, Generic[S, C, R]):
    """How one subject is compared against one candidate.

    Every strategy shares the same outcome rule: each candidate the subject
    coincides with yields a record, and a subject that coincides with nothing
    yields exactly one missing record.
    """

    name: str

    @abstractmethod
    def match(self, subject: S, candidate: C) -> Optional[R]:
        raise NotImplementedError

    @abstractmethod
    def missing(self, subject: S) -> R:
        raise NotImplementedError

    def select(self, records: List[R]) -> List[R]:
        return records

    def records(self, subject: S, candidates: Iterable[C]) -> List[R]:
        found: List[R] = []
        for candidate in candidates:
            record = self.match(subject, candidate)
            if record is not None:
                found.append(record)
        if not found:
            return [self.missing(subject)]
        return self.select(found)


class AddressStrategy(MatchStrategy[Address, AddressLike, MatchRecord]):
    name = "address"

    def match(self, subject: Address, candidate: AddressLike) -> Optional[MatchRecord]:
        result = subject.coincident(candidate)
        if not result.coincident:
            return None
        return MatchRecord(
            match_status=MatchStatus.DIVERGENT if result.mismatches else MatchStatus.MATCHING,
            address_label=subject.label(),
            self_id=subject.object_id,
            other_id=getattr(candidate, "object_id", None),
            subaddress_type=result.message(MismatchField.SUBADDRESS_TYPE),
            floor=result.message(MismatchField.FLOOR),
            building=result.message(MismatchField.BUILDING),
            status=result.message(MismatchField.STATUS),
            longitude=subject.longitude,
            latitude=subject.latitude,
        )

    def missing(self, subject: Address) -> MatchRecord:
        return MatchRecord(
            match_status=MatchStatus.MISSING,
            address_label=subject.label(),
            self_id=subject.object_id,
            longitude=subject.longitude,
            latitude=subject.latitude,
        )


class PartialAddressStrategy(MatchStrategy[PartialAddress, Address, MatchPartialRecord]):
    name = "partial"

    def match(self, subject: PartialAddress, candidate: Address) -> Optional[MatchPartialRecord]:
        status = MatchStatus.MISSING
        if subject.address_number == candidate.address_number:
            status = MatchStatus.MATCHING

        # Street identity: a conflicting field means a different address.
        if status is MatchStatus.MATCHING:
            if subject.pre_directional is not None and subject.pre_directional != candidate.pre_directional:
                status = MatchStatus.MISSING
            elif subject.pre_modifier is not None and subject.pre_modifier != candidate.pre_modifier:
                status = MatchStatus.MISSING
            elif subject.pre_type is not None and subject.pre_type != candidate.pre_type:
                status = MatchStatus.MISSING
            elif subject.street_name is not None and subject.street_name.strip() != candidate.street_name:
                status = MatchStatus.MISSING
            elif subject.post_type is not None and subject.post_type != candidate.post_type:
                status = MatchStatus.MISSING

        # Only the first descriptive field the candidate carries is compared.
        if status is MatchStatus.MATCHING:
            if subject.subaddress_identifier != candidate.subaddress_identifier:
                status = MatchStatus.DIVERGENT
            elif candidate.subaddress_identifier is None and subject.building != candidate.building:
                status = MatchStatus.DIVERGENT
            elif (
                candidate.subaddress_identifier is None
                and candidate.building is None
                and subject.floor != candidate.floor
            ):
                status = MatchStatus.DIVERGENT

        if status is MatchStatus.MISSING:
            return None
        return MatchPartialRecord(
            match_status=status,
            address_label=subject.label(),
            other_label=candidate.label(),
            other_id=candidate.object_id,
            longitude=candidate.longitude,
            latitude=candidate.latitude,
        )

    def missing(self, subject: PartialAddress) -> MatchPartialRecord:
        return MatchPartialRecord(match_status=MatchStatus.MISSING, address_label=subject.label())

    def select(self, records: List[MatchPartialRecord]) -> List[MatchPartialRecord]:
        matching = [r for r in records if r.match_status is MatchStatus.MATCHING]
        return matching or records
