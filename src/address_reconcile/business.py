from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from loguru import logger

from .components import AddressLike, Located
from .engine import EngineConfig, ReconciliationEngine
from .filters import BusinessFilter, MatchStatus
from .normalize import Directional, PostalCommunity, State, StreetPostType
from .records import RecordCollection, optional_text, optional_float
from .strategies import MatchStrategy


@dataclass(frozen=True)
class BusinessLicense:
    """An active business license as exported from EnerGov."""

    business_type: str
    license: str
    expires: str
    address_number: int
    street_name: str
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    dba: Optional[str] = None
    pre_directional: Optional[Directional] = None
    post_type: Optional[StreetPostType] = None
    subaddress_identifier: Optional[str] = None
    postal_community: Optional[PostalCommunity] = None
    state: Optional[State] = None
    zip: Optional[int] = None

    def __post_init__(self) -> None:
        if self.company_name is not None:
            object.__setattr__(self, "company_name", self.company_name.strip())

    def label(self) -> str:
        parts = [
            str(self.address_number),
            self.pre_directional.abbreviate() if self.pre_directional else None,
            self.street_name.strip(),
            self.post_type.abbreviate() if self.post_type else None,
            self.subaddress_identifier,
        ]
        return " ".join(part for part in parts if part)

    def same_street_address(self, address: AddressLike) -> bool:
        # City and state on licenses are self-reported and left out of identity.
        return (
            self.address_number == address.address_number
            and self.pre_directional == address.pre_directional
            and self.street_name.strip() == address.street_name
            and self.post_type == address.post_type
        )


@dataclass(frozen=True)
class BusinessMatchRecord:
    match_status: MatchStatus
    business_address_label: str
    business_type: str
    license: str
    expires: str
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    dba: Optional[str] = None
    other_address_label: Optional[str] = None
    address_latitude: Optional[float] = None
    address_longitude: Optional[float] = None

    @classmethod
    def for_license(
        cls,
        business: BusinessLicense,
        match_status: MatchStatus,
        address: Optional[AddressLike] = None,
    ) -> "BusinessMatchRecord":
        located: Optional[Located] = address  # type: ignore[assignment]
        return cls(
            match_status=match_status,
            business_address_label=business.label(),
            company_name=business.company_name,
            contact_name=business.contact_name,
            business_type=business.business_type,
            dba=business.dba,
            license=business.license,
            expires=business.expires,
            other_address_label=address.label() if address is not None else None,
            address_latitude=located.latitude if located is not None else None,
            address_longitude=located.longitude if located is not None else None,
        )

    def as_row(self) -> Dict[str, object]:
        row = asdict(self)
        row["match_status"] = self.match_status.value
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "BusinessMatchRecord":
        return cls(
            match_status=MatchStatus.parse(row["match_status"]),
            business_address_label=row["business_address_label"],
            company_name=optional_text(row.get("company_name")),
            contact_name=optional_text(row.get("contact_name")),
            business_type=row["business_type"],
            dba=optional_text(row.get("dba")),
            license=row["license"],
            expires=row["expires"],
            other_address_label=optional_text(row.get("other_address_label")),
            address_latitude=optional_float(row.get("address_latitude")),
            address_longitude=optional_float(row.get("address_longitude")),
        )


BUSINESS_RECORD_COLUMNS = [
    "match_status",
    "business_address_label",
    "company_name",
    "contact_name",
    "business_type",
    "dba",
    "license",
    "expires",
    "other_address_label",
    "address_latitude",
    "address_longitude",
]


class BusinessStrategy(MatchStrategy[BusinessLicense, AddressLike, BusinessMatchRecord]):
    name = "business"

    def match(self, subject: BusinessLicense, candidate: AddressLike) -> Optional[BusinessMatchRecord]:
        if not subject.same_street_address(candidate):
            return None
        status = MatchStatus.MATCHING
        if subject.subaddress_identifier != candidate.subaddress_identifier or subject.zip != candidate.zip:
            status = MatchStatus.DIVERGENT
        return BusinessMatchRecord.for_license(subject, status, candidate)

    def missing(self, subject: BusinessLicense) -> BusinessMatchRecord:
        return BusinessMatchRecord.for_license(subject, MatchStatus.MISSING)

    def select(self, records: List[BusinessMatchRecord]) -> List[BusinessMatchRecord]:
        # One license needs only one address; the first exact match is enough.
        for record in records:
            if record.match_status is MatchStatus.MATCHING:
                return [record]
        return records


class BusinessLicenses(RecordCollection[BusinessLicense]):
    def deduplicate(self) -> "BusinessLicenses":
        """Keep the first record seen for each license number."""
        seen = set()
        kept = []
        for business in self.records:
            if business.license not in seen:
                seen.add(business.license)
                kept.append(business)
        if len(kept) < len(self.records):
            logger.info("Removed {} duplicate licenses", len(self.records) - len(kept))
        return BusinessLicenses.of(kept)

    def filter_name(self, name: str) -> "BusinessLicenses":
        return BusinessLicenses.of(b for b in self.records if b.company_name == name.strip())


class BusinessMatchRecords(RecordCollection[BusinessMatchRecord]):
    @classmethod
    def new(cls, business: BusinessLicense, addresses: Iterable[AddressLike]) -> "BusinessMatchRecords":
        return cls.of(BusinessStrategy().records(business, addresses))

    @classmethod
    def compare(
        cls,
        businesses: Iterable[BusinessLicense],
        addresses: Iterable[AddressLike],
        config: EngineConfig | None = None,
    ) -> "BusinessMatchRecords":
        engine = ReconciliationEngine(config)
        return cls.of(engine.compare(BusinessStrategy(), businesses, addresses))

    @classmethod
    def chain(
        cls, business: BusinessLicense, targets: Sequence[Sequence[AddressLike]]
    ) -> "BusinessMatchRecords":
        """Try each target in priority order.

        The first target that matches wins. Failing that, the first target
        with divergent records wins, and only then is the license missing.
        """
        divergent: Optional[BusinessMatchRecords] = None
        for addresses in targets:
            records = cls.new(business, addresses)
            matched = records.filter(BusinessFilter.MATCHING)
            if len(matched):
                return matched
            diverged = records.filter(BusinessFilter.DIVERGENT)
            if divergent is None and len(diverged):
                divergent = diverged
        if divergent is not None:
            return divergent
        return cls.of([BusinessMatchRecord.for_license(business, MatchStatus.MISSING)])

    @classmethod
    def compare_chain(
        cls,
        businesses: Iterable[BusinessLicense],
        targets: Sequence[Iterable[AddressLike]],
        config: EngineConfig | None = None,
    ) -> "BusinessMatchRecords":
        shared = [tuple(addresses) for addresses in targets]
        subjects = list(businesses)
        engine = ReconciliationEngine(config)
        records = engine.map(lambda business: list(cls.chain(business, shared)), subjects, "business")
        logger.info("Matched {} licenses across {} address sources", len(subjects), len(shared))
        return cls.of(records)

    def filter(self, predicate: BusinessFilter) -> "BusinessMatchRecords":
        return BusinessMatchRecords.of(predicate.select(self.records))
