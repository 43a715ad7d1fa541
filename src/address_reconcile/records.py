from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Tuple, TypeVar

from .filters import MatchStatus

R = TypeVar("R")


@dataclass(frozen=True)
class RecordCollection(Generic[R]):
    """Immutable ordered wrapper shared by every record collection."""

    records: Tuple[R, ...] = ()

    @classmethod
    def of(cls, records: Iterable[R]):
        return cls(records=tuple(records))

    def __iter__(self) -> Iterator[R]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> R:
        return self.records[index]

    def as_rows(self) -> List[Dict[str, object]]:
        return [record.as_row() for record in self.records]  # type: ignore[attr-defined]


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None or value.strip() == "":
        return None
    return value


def optional_int(value: Optional[str]) -> Optional[int]:
    text = optional_text(value)
    return None if text is None else int(float(text))


def optional_float(value: Optional[str]) -> Optional[float]:
    text = optional_text(value)
    return None if text is None else float(text)


@dataclass(frozen=True)
class MatchRecord:
    match_status: MatchStatus
    address_label: str
    self_id: int
    other_id: Optional[int] = None
    subaddress_type: Optional[str] = None
    floor: Optional[str] = None
    building: Optional[str] = None
    status: Optional[str] = None
    longitude: float = 0.0
    latitude: float = 0.0

    def as_row(self) -> Dict[str, object]:
        row = asdict(self)
        row["match_status"] = self.match_status.value
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "MatchRecord":
        return cls(
            match_status=MatchStatus.parse(row["match_status"]),
            address_label=row["address_label"],
            self_id=int(float(row["self_id"])),
            other_id=optional_int(row.get("other_id")),
            subaddress_type=optional_text(row.get("subaddress_type")),
            floor=optional_text(row.get("floor")),
            building=optional_text(row.get("building")),
            status=optional_text(row.get("status")),
            longitude=float(row["longitude"]),
            latitude=float(row["latitude"]),
        )


MATCH_RECORD_COLUMNS = [
    "match_status",
    "address_label",
    "self_id",
    "other_id",
    "subaddress_type",
    "floor",
    "building",
    "status",
    "longitude",
    "latitude",
]


@dataclass(frozen=True)
class MatchPartialRecord:
    """Outcome of matching one parsed free-text address against one source."""

    match_status: MatchStatus
    address_label: str
    other_label: Optional[str] = None
    other_id: Optional[int] = None
    longitude: Optional[float] = None
    latitude: Optional[float] = None

    def as_row(self) -> Dict[str, object]:
        row = asdict(self)
        row["match_status"] = self.match_status.value
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "MatchPartialRecord":
        return cls(
            match_status=MatchStatus.parse(row["match_status"]),
            address_label=row["address_label"],
            other_label=optional_text(row.get("other_label")),
            other_id=optional_int(row.get("other_id")),
            longitude=optional_float(row.get("longitude")),
            latitude=optional_float(row.get("latitude")),
        )


PARTIAL_RECORD_COLUMNS = [
    "match_status",
    "address_label",
    "other_label",
    "other_id",
    "longitude",
    "latitude",
]


@dataclass(frozen=True)
class AddressDelta:
    """A label shared by two sources whose coordinates moved."""

    label: str
    delta: float
    latitude: float
    longitude: float

    def as_row(self) -> Dict[str, object]:
        return asdict(self)


DELTA_COLUMNS = ["label", "delta", "latitude", "longitude"]
