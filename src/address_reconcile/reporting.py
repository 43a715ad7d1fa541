from __future__ import annotations

from typing import Optional, Protocol

from tqdm import tqdm


class ProgressReporter(Protocol):
    """Observer for batch progress. Reporting never affects results."""

    def start(self, total: int, description: str) -> None:
        ...

    def advance(self, count: int = 1) -> None:
        ...

    def close(self) -> None:
        ...


class NullReporter:
    def start(self, total: int, description: str) -> None:
        pass

    def advance(self, count: int = 1) -> None:
        pass

    def close(self) -> None:
        pass


class TqdmReporter:
    """Terminal progress bar for CLI batches."""

    def __init__(self, unit: str = "rec") -> None:
        self.unit = unit
        self._bar: Optional[tqdm] = None

    def start(self, total: int, description: str) -> None:
        self.close()
        self._bar = tqdm(total=total, desc=description, unit=self.unit, leave=True)

    def advance(self, count: int = 1) -> None:
        if self._bar is not None:
            self._bar.update(count)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
