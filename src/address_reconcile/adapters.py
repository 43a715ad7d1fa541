"""CSV adapters between source exports and the address model.

Each source system names its columns differently. Readers rename and coerce
rows into ``Address``, ``BusinessLicense`` and ``FireInspection`` values,
dropping rows whose mandatory fields do not resolve and counting the drops.
"""

from __future__ import annotations

import csv
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, TypeVar

from loguru import logger

from .business import (
    BUSINESS_RECORD_COLUMNS,
    BusinessLicense,
    BusinessLicenses,
    BusinessMatchRecord,
    BusinessMatchRecords,
)
from .components import ADDRESS_COLUMNS, Address, Addresses, PartialAddress
from .engine import MatchRecords
from .errors import ConversionError, ParseError, SchemaError
from .fire import FireInspection
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
    canonicalize_zip,
)
from .parser import parse_address
from .records import MATCH_RECORD_COLUMNS, MatchRecord

T = TypeVar("T")

# Characters that trigger formula execution in spreadsheet applications
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")

# ArcGIS writes this for empty attribute values.
_ARCGIS_NULL = "<Null>"


class AddressSchema(Enum):
    GRANTS_PASS = "grants_pass"
    JOSEPHINE_COUNTY = "josephine_county"
    CANONICAL = "canonical"

    @property
    def columns(self) -> Dict[str, str]:
        """Address field name to source column name."""
        return _SCHEMA_COLUMNS[self]


_SCHEMA_COLUMNS: Dict[AddressSchema, Dict[str, str]] = {
    AddressSchema.GRANTS_PASS: {
        "address_number": "Add_Number",
        "address_number_suffix": "AddNum_Suf",
        "pre_directional": "St_PreDir",
        "street_name": "St_Name",
        "post_type": "St_PosTyp",
        "subaddress_type": "SubAddType",
        "subaddress_identifier": "SubAddID",
        "floor": "Floor",
        "building": "Building",
        "zip": "Post_Code",
        "status": "STATUS",
        "postal_community": "Post_Comm",
        "state": "State",
        "latitude": "latitude",
        "longitude": "longitude",
        "object_id": "OBJECTID",
    },
    AddressSchema.JOSEPHINE_COUNTY: {
        "address_number": "add_number",
        "address_number_suffix": "addnum_suf",
        "pre_directional": "st_predir",
        "pre_modifier": "st_premod",
        "pre_type": "st_pretyp",
        "street_name": "st_name",
        "post_type": "st_postyp",
        "subaddress_type": "unittype",
        "subaddress_identifier": "unit",
        "postal_community": "uninc_comm",
        "zip": "post_code",
        "state": "state",
        "latitude": "latitude",
        "longitude": "longitude",
        "object_id": "OBJECTID",
    },
    AddressSchema.CANONICAL: {name: name for name in ADDRESS_COLUMNS if name != "label"},
}

# Columns a source may leave out entirely.
_OPTIONAL_COLUMNS = {"object_id", "pre_modifier", "pre_type", "separator"}

BUSINESS_LICENSE_COLUMNS = [
    "CompanyName",
    "ContactName",
    "BusinessType",
    "dba",
    "LICENSENUMBER",
    "EXPIRATIONDATE",
    "ADDRESSLINE1",
    "ADDRESSLINE2",
    "PREDIRECTION",
    "STREETTYPE",
    "UNITORSUITE",
    "CITY",
    "STATE",
    "POSTALCODE",
]

FIRE_INSPECTION_COLUMNS = ["Name", "Address", "Class", "Subclass"]


def _cell(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value == _ARCGIS_NULL:
        return None
    return value


def _integer(field: str, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        raise ConversionError(field, value) from None


def _optional_integer(field: str, value: Optional[str], line: int) -> Optional[int]:
    """Like _integer, but an unreadable value is dropped instead of the row."""
    try:
        return _integer(field, value)
    except ConversionError:
        logger.debug("Ignoring unreadable {} {!r} on line {}", field, value, line)
        return None


def _coordinate(field: str, value: Optional[str]) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except ValueError:
        raise ConversionError(field, value) from None


def _upper(value: Optional[str]) -> Optional[str]:
    return value.upper() if value is not None else None


def _rows(path: Path, required: Iterable[str]) -> Iterator[Dict[str, str]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise SchemaError(path.name, list(required))
        missing = [column for column in required if column not in reader.fieldnames]
        if missing:
            raise SchemaError(path.name, missing)
        yield from reader


def _convert_rows(
    path: Path,
    required: Iterable[str],
    convert: Callable[[Dict[str, str], int], T],
    description: str,
) -> List[T]:
    converted: List[T] = []
    dropped = 0
    for line, row in enumerate(_rows(path, required), start=2):
        try:
            converted.append(convert(row, line))
        except (ConversionError, ParseError) as error:
            dropped += 1
            logger.debug("Dropping {} line {}: {}", path.name, line, error)
    logger.info("Read {} {} from {}", len(converted), description, path.name)
    if dropped:
        logger.warning("Dropped {} rows from {} that could not be converted", dropped, path.name)
    return converted


def address_from_row(row: Mapping[str, str], schema: AddressSchema, line: int = 0) -> Address:
    columns = schema.columns

    def value(name: str) -> Optional[str]:
        column = columns.get(name)
        return _cell(row.get(column)) if column else None

    floor = _optional_integer("floor", value("floor"), line)
    if schema is AddressSchema.JOSEPHINE_COUNTY and floor == 0:
        floor = None

    partial = PartialAddress(
        address_number=_integer("address_number", value("address_number")),
        address_number_suffix=value("address_number_suffix"),
        pre_directional=Directional.match_mixed(value("pre_directional")),
        pre_modifier=StreetPreModifier.match_mixed(value("pre_modifier")),
        pre_type=StreetPreType.match_mixed(value("pre_type")),
        separator=StreetSeparator.match_mixed(value("separator")),
        street_name=_upper(value("street_name")),
        post_type=StreetPostType.match_mixed(value("post_type")),
        subaddress_type=SubaddressType.match_mixed(value("subaddress_type")),
        subaddress_identifier=_upper(value("subaddress_identifier")),
        floor=floor,
        building=_upper(value("building")),
        zip=canonicalize_zip(value("zip")),
        postal_community=PostalCommunity.match_mixed(value("postal_community")),
        state=State.match_mixed(value("state")),
        status=AddressStatus.resolve(value("status")),
    )
    if schema is AddressSchema.JOSEPHINE_COUNTY:
        partial = partial.standardize()

    object_id = _integer("object_id", value("object_id"))
    return Address.from_partial(
        partial,
        latitude=_coordinate("latitude", value("latitude")),
        longitude=_coordinate("longitude", value("longitude")),
        object_id=line if object_id is None else object_id,
    )


def read_addresses(path: Path, schema: AddressSchema) -> Addresses:
    required = [column for name, column in schema.columns.items() if name not in _OPTIONAL_COLUMNS]
    records = _convert_rows(
        path,
        required,
        lambda row, line: address_from_row(row, schema, line),
        "addresses",
    )
    return Addresses.of(records)


def business_license_from_row(row: Mapping[str, str], line: int = 0) -> BusinessLicense:
    number = _integer("address_number", _cell(row.get("ADDRESSLINE1")))
    street_name = _cell(row.get("ADDRESSLINE2"))
    if number is None:
        raise ConversionError("address_number", row.get("ADDRESSLINE1"))
    if street_name is None:
        raise ConversionError("street_name", row.get("ADDRESSLINE2"))
    return BusinessLicense(
        company_name=_cell(row.get("CompanyName")),
        contact_name=_cell(row.get("ContactName")),
        business_type=_cell(row.get("BusinessType")) or "",
        dba=_cell(row.get("dba")),
        license=_cell(row.get("LICENSENUMBER")) or "",
        expires=_cell(row.get("EXPIRATIONDATE")) or "",
        address_number=number,
        street_name=street_name.upper(),
        pre_directional=Directional.match_mixed(_cell(row.get("PREDIRECTION"))),
        post_type=StreetPostType.match_mixed(_cell(row.get("STREETTYPE"))),
        subaddress_identifier=_upper(_cell(row.get("UNITORSUITE"))),
        postal_community=PostalCommunity.match_mixed(_cell(row.get("CITY"))),
        state=State.match_mixed(_cell(row.get("STATE"))),
        zip=canonicalize_zip(_cell(row.get("POSTALCODE"))),
    )


def read_business_licenses(path: Path) -> BusinessLicenses:
    records = _convert_rows(path, BUSINESS_LICENSE_COLUMNS, business_license_from_row, "business licenses")
    return BusinessLicenses.of(records)


def fire_inspection_from_row(row: Mapping[str, str], line: int = 0) -> FireInspection:
    address = parse_address(row.get("Address") or "")
    if address.subaddress_identifier is not None:
        address = replace(address, subaddress_identifier=address.subaddress_identifier.upper())
    return FireInspection(
        name=(row.get("Name") or "").strip(),
        address=address,
        occupancy_class=_cell(row.get("Class")),
        subclass=_cell(row.get("Subclass")),
    )


def read_fire_inspections(path: Path) -> List[FireInspection]:
    return _convert_rows(path, FIRE_INSPECTION_COLUMNS, fire_inspection_from_row, "fire inspections")


def read_match_records(path: Path) -> MatchRecords:
    return MatchRecords.of(MatchRecord.from_row(row) for row in _rows(path, MATCH_RECORD_COLUMNS))


def read_business_match_records(path: Path) -> BusinessMatchRecords:
    return BusinessMatchRecords.of(
        BusinessMatchRecord.from_row(row) for row in _rows(path, BUSINESS_RECORD_COLUMNS)
    )


def _sanitize_cell(value: object) -> object:
    """Prefix values that spreadsheets would run as formulas with a single quote."""
    if isinstance(value, str) and value and value[0] in _FORMULA_PREFIXES:
        return f"'{value}"
    return value


def write_rows(output_path: Path, rows: Iterable[Mapping[str, Any]], *, columns: List[str]) -> int:
    """Write rows to a CSV file.

    Args:
        output_path: Path to write the CSV file.
        rows: Iterable of row dicts keyed by column name.
        columns: Column names, in output order.

    Returns:
        Number of rows written.
    """
    count = 0
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _sanitize_cell(v) for k, v in row.items()})
            count += 1
    logger.info("Wrote {} rows to {}", count, output_path)
    return count
