from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from .components import Address, PartialAddress
from .engine import EngineConfig, ReconciliationEngine
from .filters import FireFilter, MatchStatus
from .records import RecordCollection
from .strategies import MatchStrategy, PartialAddressStrategy


@dataclass(frozen=True)
class FireInspection:
    name: str
    address: PartialAddress
    occupancy_class: Optional[str] = None
    subclass: Optional[str] = None


@dataclass(frozen=True)
class FireInspectionMatchRecord:
    match_status: MatchStatus
    name: str
    address_label: str
    other_label: Optional[str] = None
    longitude: Optional[float] = None
    latitude: Optional[float] = None

    def as_row(self) -> Dict[str, object]:
        row = asdict(self)
        row["match_status"] = self.match_status.value
        return row


FIRE_RECORD_COLUMNS = [
    "match_status",
    "name",
    "address_label",
    "other_label",
    "longitude",
    "latitude",
]


class FireInspectionStrategy(MatchStrategy[FireInspection, Address, FireInspectionMatchRecord]):
    """Partial address matching, carrying the inspected business name along."""

    name = "fire"

    def __init__(self) -> None:
        self.partial = PartialAddressStrategy()

    def _record(
        self, inspection: FireInspection, status: MatchStatus, other: Optional[Address]
    ) -> FireInspectionMatchRecord:
        return FireInspectionMatchRecord(
            match_status=status,
            name=inspection.name,
            address_label=inspection.address.label(),
            other_label=other.label() if other is not None else None,
            longitude=other.longitude if other is not None else None,
            latitude=other.latitude if other is not None else None,
        )

    def match(self, subject: FireInspection, candidate: Address) -> Optional[FireInspectionMatchRecord]:
        record = self.partial.match(subject.address, candidate)
        if record is None:
            return None
        return self._record(subject, record.match_status, candidate)

    def missing(self, subject: FireInspection) -> FireInspectionMatchRecord:
        return self._record(subject, MatchStatus.MISSING, None)

    def select(self, records: List[FireInspectionMatchRecord]) -> List[FireInspectionMatchRecord]:
        return self.partial.select(records)  # type: ignore[arg-type,return-value]


class FireInspectionMatchRecords(RecordCollection[FireInspectionMatchRecord]):
    @classmethod
    def compare(
        cls,
        inspections: Iterable[FireInspection],
        addresses: Iterable[Address],
        config: EngineConfig | None = None,
    ) -> "FireInspectionMatchRecords":
        engine = ReconciliationEngine(config)
        return cls.of(engine.compare(FireInspectionStrategy(), inspections, addresses))

    def filter(self, predicate: FireFilter) -> "FireInspectionMatchRecords":
        return FireInspectionMatchRecords.of(predicate.select(self.records))
