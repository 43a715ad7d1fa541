"""Address normalization and cross-dataset reconciliation."""

from .business import BusinessLicense, BusinessLicenses, BusinessMatchRecord, BusinessMatchRecords
from .components import Address, Addresses, AddressMatch, Mismatch, MismatchField, PartialAddress
from .engine import AddressDeltas, EngineConfig, MatchPartialRecords, MatchRecords
from .errors import AddressReconcileError, ConversionError, ParseError, SchemaError
from .filters import AddressField, BusinessFilter, FireFilter, MatchFilter, MatchStatus, PartialFilter
from .lexisnexis import LexisNexis, LexisNexisItem, LexisNexisRange
from .parser import parse_address
from .records import MatchPartialRecord, MatchRecord

__all__ = [
    "Address",
    "AddressDeltas",
    "AddressField",
    "AddressMatch",
    "AddressReconcileError",
    "Addresses",
    "BusinessFilter",
    "BusinessLicense",
    "BusinessLicenses",
    "BusinessMatchRecord",
    "BusinessMatchRecords",
    "ConversionError",
    "EngineConfig",
    "FireFilter",
    "LexisNexis",
    "LexisNexisItem",
    "LexisNexisRange",
    "MatchFilter",
    "MatchPartialRecord",
    "MatchPartialRecords",
    "MatchRecord",
    "MatchRecords",
    "MatchStatus",
    "Mismatch",
    "MismatchField",
    "ParseError",
    "PartialAddress",
    "PartialFilter",
    "SchemaError",
    "parse_address",
]
