from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from loguru import logger

from .components import Address, AddressLike, PartialAddress
from .config import Settings
from .filters import MatchFilter, PartialFilter
from .records import AddressDelta, MatchPartialRecord, MatchRecord, RecordCollection
from .reporting import NullReporter, ProgressReporter
from .strategies import AddressStrategy, MatchStrategy, PartialAddressStrategy

S = TypeVar("S")
C = TypeVar("C")
R = TypeVar("R")


@dataclass
class EngineConfig:
    max_workers: Optional[int] = None
    reporter: ProgressReporter = field(default_factory=NullReporter)

    @classmethod
    def from_settings(cls, settings: Settings, reporter: Optional[ProgressReporter] = None) -> "EngineConfig":
        return cls(max_workers=settings.max_workers, reporter=reporter or NullReporter())


class ReconciliationEngine:
    """Runs per-subject work on a thread pool and joins results in subject order."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def map(self, task: Callable[[S], List[R]], subjects: Sequence[S], description: str) -> List[R]:
        reporter = self.config.reporter
        reporter.start(len(subjects), description)
        results: List[R] = []
        try:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                for fragment in executor.map(task, subjects):
                    results.extend(fragment)
                    reporter.advance()
        finally:
            reporter.close()
        return results

    def compare(
        self, strategy: MatchStrategy[S, C, R], subjects: Iterable[S], candidates: Iterable[C]
    ) -> List[R]:
        subjects = list(subjects)
        shared = tuple(candidates)
        records = self.map(lambda subject: strategy.records(subject, shared), subjects, strategy.name)
        logger.info(
            "Compared {} {} subjects against {} candidates into {} records",
            len(subjects),
            strategy.name,
            len(shared),
            len(records),
        )
        return records


class MatchRecords(RecordCollection[MatchRecord]):
    @classmethod
    def new(cls, subject: Address, candidates: Iterable[AddressLike]) -> "MatchRecords":
        return cls.of(AddressStrategy().records(subject, candidates))

    @classmethod
    def compare(
        cls,
        subjects: Iterable[Address],
        candidates: Iterable[AddressLike],
        config: EngineConfig | None = None,
    ) -> "MatchRecords":
        engine = ReconciliationEngine(config)
        return cls.of(engine.compare(AddressStrategy(), subjects, candidates))

    def filter(self, predicate: MatchFilter) -> "MatchRecords":
        return MatchRecords.of(predicate.select(self.records))


class MatchPartialRecords(RecordCollection[MatchPartialRecord]):
    @classmethod
    def new(cls, subject: PartialAddress, candidates: Iterable[Address]) -> "MatchPartialRecords":
        return cls.of(PartialAddressStrategy().records(subject, candidates))

    @classmethod
    def compare(
        cls,
        subjects: Iterable[PartialAddress],
        candidates: Iterable[Address],
        config: EngineConfig | None = None,
    ) -> "MatchPartialRecords":
        engine = ReconciliationEngine(config)
        return cls.of(engine.compare(PartialAddressStrategy(), subjects, candidates))

    def filter(self, predicate: PartialFilter) -> "MatchPartialRecords":
        return MatchPartialRecords.of(predicate.select(self.records))


class AddressDeltas(RecordCollection[AddressDelta]):
    """Addresses sharing a label across two sources whose positions drifted apart."""

    @staticmethod
    def between(subject: Address, others: Sequence[Address], minimum: float = 0.0) -> List[AddressDelta]:
        label = subject.label()
        deltas = []
        for other in others:
            if other.label() != label:
                continue
            delta = subject.distance(other)
            if delta > minimum:
                deltas.append(
                    AddressDelta(
                        label=label,
                        delta=delta,
                        latitude=subject.latitude,
                        longitude=subject.longitude,
                    )
                )
        return deltas

    @classmethod
    def compute(
        cls,
        subjects: Iterable[Address],
        others: Iterable[Address],
        minimum: float = 0.0,
        config: EngineConfig | None = None,
    ) -> "AddressDeltas":
        shared = tuple(others)
        engine = ReconciliationEngine(config)
        deltas = engine.map(lambda subject: cls.between(subject, shared, minimum), list(subjects), "drift")
        logger.info("Found {} addresses drifting more than {}", len(deltas), minimum)
        return cls.of(deltas)

