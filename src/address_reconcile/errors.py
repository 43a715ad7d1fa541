from __future__ import annotations

from typing import Iterable, Optional


class AddressReconcileError(Exception):
    """Base class for errors raised by address_reconcile."""


class ParseError(AddressReconcileError):
    def __init__(self, rule: str, remainder: str) -> None:
        self.rule = rule
        self.remainder = remainder
        super().__init__(f"could not parse {rule} from {remainder!r}")


class ConversionError(AddressReconcileError):
    """A mandatory address field is missing or did not resolve to the vocabulary."""

    def __init__(self, field: str, value: Optional[object] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} is required (got {value!r})")


class SchemaError(AddressReconcileError):
    def __init__(self, source: str, missing: Iterable[str]) -> None:
        self.source = source
        self.missing = tuple(missing)
        super().__init__(f"{source} is missing columns: {', '.join(self.missing)}")
