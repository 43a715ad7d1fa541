from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional, Tuple


class Directional(Enum):
    """Street name pre-directional, valued by its postal abbreviation."""

    NORTHEAST = "NE"
    NORTHWEST = "NW"
    SOUTHEAST = "SE"
    SOUTHWEST = "SW"
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    def label(self) -> str:
        return self.value

    def abbreviate(self) -> str:
        return self.value

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["Directional"]:
        if not text:
            return None
        return _DIRECTIONAL_BY_ABBREVIATION.get(text.strip().upper())

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["Directional"]:
        if not text:
            return None
        token = text.strip().upper()
        if token in DIRECTIONAL_NORMALIZATION:
            return _DIRECTIONAL_BY_ABBREVIATION[DIRECTIONAL_NORMALIZATION[token]]
        return cls.match_abbreviated(token)


_DIRECTIONAL_BY_ABBREVIATION: Dict[str, Directional] = {d.value: d for d in Directional}

DIRECTIONAL_NORMALIZATION: Dict[str, str] = {
    "NORTH": "N",
    "N.": "N",
    "SOUTH": "S",
    "S.": "S",
    "EAST": "E",
    "E.": "E",
    "WEST": "W",
    "W.": "W",
    "NORTHEAST": "NE",
    "NE.": "NE",
    "N.E.": "NE",
    "NORTHWEST": "NW",
    "NW.": "NW",
    "N.W.": "NW",
    "SOUTHEAST": "SE",
    "SE.": "SE",
    "S.E.": "SE",
    "SOUTHWEST": "SW",
    "SW.": "SW",
    "S.W.": "SW",
}


class StreetPostType(Enum):
    """Street name post type, valued by the full USPS Publication 28 name.

    PARK and FALL are excluded: local streets carry those words as names.
    """

    ALLEY = "ALLEY"
    AVENUE = "AVENUE"
    BEND = "BEND"
    BOULEVARD = "BOULEVARD"
    CIRCLE = "CIRCLE"
    COURT = "COURT"
    COVE = "COVE"
    CREST = "CREST"
    CROSSING = "CROSSING"
    DRIVE = "DRIVE"
    EXPRESSWAY = "EXPRESSWAY"
    FREEWAY = "FREEWAY"
    GARDEN = "GARDEN"
    GARDENS = "GARDENS"
    GLEN = "GLEN"
    GROVE = "GROVE"
    HEIGHTS = "HEIGHTS"
    HIGHWAY = "HIGHWAY"
    HOLLOW = "HOLLOW"
    LANE = "LANE"
    LOOP = "LOOP"
    MEADOWS = "MEADOWS"
    PARKWAY = "PARKWAY"
    PATH = "PATH"
    PIKE = "PIKE"
    PLACE = "PLACE"
    PLAZA = "PLAZA"
    POINT = "POINT"
    RIDGE = "RIDGE"
    ROAD = "ROAD"
    ROUTE = "ROUTE"
    ROW = "ROW"
    SQUARE = "SQUARE"
    STREET = "STREET"
    TERRACE = "TERRACE"
    TRAIL = "TRAIL"
    VIEW = "VIEW"
    VISTA = "VISTA"
    WALK = "WALK"
    WAY = "WAY"

    def label(self) -> str:
        return self.value

    def abbreviate(self) -> str:
        return _POST_TYPE_ABBREVIATIONS[self]

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["StreetPostType"]:
        if not text:
            return None
        return _POST_TYPE_BY_ABBREVIATION.get(text.strip().upper().rstrip("."))

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["StreetPostType"]:
        if not text:
            return None
        token = text.strip().upper().rstrip(".")
        if token in _POST_TYPE_BY_NAME:
            return _POST_TYPE_BY_NAME[token]
        if token in POST_TYPE_MISSPELLINGS:
            return cls(POST_TYPE_MISSPELLINGS[token])
        return cls.match_abbreviated(token)


_POST_TYPE_ABBREVIATIONS: Dict[StreetPostType, str] = {
    StreetPostType.ALLEY: "ALY",
    StreetPostType.AVENUE: "AVE",
    StreetPostType.BEND: "BND",
    StreetPostType.BOULEVARD: "BLVD",
    StreetPostType.CIRCLE: "CIR",
    StreetPostType.COURT: "CT",
    StreetPostType.COVE: "CV",
    StreetPostType.CREST: "CRST",
    StreetPostType.CROSSING: "XING",
    StreetPostType.DRIVE: "DR",
    StreetPostType.EXPRESSWAY: "EXPY",
    StreetPostType.FREEWAY: "FWY",
    StreetPostType.GARDEN: "GDN",
    StreetPostType.GARDENS: "GDNS",
    StreetPostType.GLEN: "GLN",
    StreetPostType.GROVE: "GRV",
    StreetPostType.HEIGHTS: "HTS",
    StreetPostType.HIGHWAY: "HWY",
    StreetPostType.HOLLOW: "HOLW",
    StreetPostType.LANE: "LN",
    StreetPostType.LOOP: "LOOP",
    StreetPostType.MEADOWS: "MDWS",
    StreetPostType.PARKWAY: "PKWY",
    StreetPostType.PATH: "PATH",
    StreetPostType.PIKE: "PIKE",
    StreetPostType.PLACE: "PL",
    StreetPostType.PLAZA: "PLZ",
    StreetPostType.POINT: "PT",
    StreetPostType.RIDGE: "RDG",
    StreetPostType.ROAD: "RD",
    StreetPostType.ROUTE: "RTE",
    StreetPostType.ROW: "ROW",
    StreetPostType.SQUARE: "SQ",
    StreetPostType.STREET: "ST",
    StreetPostType.TERRACE: "TER",
    StreetPostType.TRAIL: "TRL",
    StreetPostType.VIEW: "VW",
    StreetPostType.VISTA: "VIS",
    StreetPostType.WALK: "WALK",
    StreetPostType.WAY: "WAY",
}

assert set(_POST_TYPE_ABBREVIATIONS) == set(StreetPostType)

_POST_TYPE_BY_ABBREVIATION: Dict[str, StreetPostType] = {
    abbreviation: post_type for post_type, abbreviation in _POST_TYPE_ABBREVIATIONS.items()
}
_POST_TYPE_BY_NAME: Dict[str, StreetPostType] = {p.value: p for p in StreetPostType}

# Spellings observed in business license and fire inspection exports.
POST_TYPE_MISSPELLINGS: Dict[str, str] = {
    "AV": "AVENUE",
    "AVN": "AVENUE",
    "AVENU": "AVENUE",
    "BLV": "BOULEVARD",
    "BOUL": "BOULEVARD",
    "BOULV": "BOULEVARD",
    "CRT": "COURT",
    "CIRC": "CIRCLE",
    "DRV": "DRIVE",
    "DRIV": "DRIVE",
    "HIWAY": "HIGHWAY",
    "HIWY": "HIGHWAY",
    "HWAY": "HIGHWAY",
    "LA": "LANE",
    "PKY": "PARKWAY",
    "PARKWY": "PARKWAY",
    "STR": "STREET",
    "STRT": "STREET",
    "TERR": "TERRACE",
    "TRAILS": "TRAIL",
    "WY": "WAY",
}


class SubaddressType(Enum):
    """Secondary unit designators from USPS Publication 28, Appendix C2."""

    APARTMENT = "APARTMENT"
    BASEMENT = "BASEMENT"
    BUILDING = "BUILDING"
    DEPARTMENT = "DEPARTMENT"
    FLOOR = "FLOOR"
    FRONT = "FRONT"
    HANGER = "HANGER"
    KEY = "KEY"
    LOBBY = "LOBBY"
    LOT = "LOT"
    LOWER = "LOWER"
    OFFICE = "OFFICE"
    PENTHOUSE = "PENTHOUSE"
    PIER = "PIER"
    REAR = "REAR"
    ROOM = "ROOM"
    SIDE = "SIDE"
    SLIP = "SLIP"
    SPACE = "SPACE"
    STOP = "STOP"
    SUITE = "SUITE"
    TRAILER = "TRAILER"
    UNIT = "UNIT"
    UPPER = "UPPER"
    # Shared rooms common to apartment complexes.
    REC = "REC"
    LAUNDRY = "LAUNDRY"

    def label(self) -> str:
        return self.value

    def abbreviate(self) -> str:
        return _SUBADDRESS_ABBREVIATIONS[self]

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["SubaddressType"]:
        if not text:
            return None
        return _SUBADDRESS_BY_ABBREVIATION.get(text.strip().upper().rstrip("."))

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["SubaddressType"]:
        if not text:
            return None
        token = text.strip().upper().rstrip(".")
        if token in _SUBADDRESS_BY_NAME:
            return _SUBADDRESS_BY_NAME[token]
        if token in SUBADDRESS_MISSPELLINGS:
            return cls(SUBADDRESS_MISSPELLINGS[token])
        return cls.match_abbreviated(token)


_SUBADDRESS_ABBREVIATIONS: Dict[SubaddressType, str] = {
    SubaddressType.APARTMENT: "APT",
    SubaddressType.BASEMENT: "BSMT",
    SubaddressType.BUILDING: "BLDG",
    SubaddressType.DEPARTMENT: "DEPT",
    SubaddressType.FLOOR: "FL",
    SubaddressType.FRONT: "FRNT",
    SubaddressType.HANGER: "HNGR",
    SubaddressType.KEY: "KEY",
    SubaddressType.LOBBY: "LBBY",
    SubaddressType.LOT: "LOT",
    SubaddressType.LOWER: "LOWR",
    SubaddressType.OFFICE: "OFC",
    SubaddressType.PENTHOUSE: "PH",
    SubaddressType.PIER: "PIER",
    SubaddressType.REAR: "REAR",
    SubaddressType.ROOM: "RM",
    SubaddressType.SIDE: "SIDE",
    SubaddressType.SLIP: "SLIP",
    SubaddressType.SPACE: "SPC",
    SubaddressType.STOP: "STOP",
    SubaddressType.SUITE: "STE",
    SubaddressType.TRAILER: "TRLR",
    SubaddressType.UNIT: "UNIT",
    SubaddressType.UPPER: "UPPR",
    SubaddressType.REC: "REC",
    SubaddressType.LAUNDRY: "LAUN",
}

assert set(_SUBADDRESS_ABBREVIATIONS) == set(SubaddressType)

_SUBADDRESS_BY_ABBREVIATION: Dict[str, SubaddressType] = {
    abbreviation: kind for kind, abbreviation in _SUBADDRESS_ABBREVIATIONS.items()
}
_SUBADDRESS_BY_NAME: Dict[str, SubaddressType] = {s.value: s for s in SubaddressType}

SUBADDRESS_MISSPELLINGS: Dict[str, str] = {
    "APPT": "APARTMENT",
    "APTS": "APARTMENT",
    "BLD": "BUILDING",
    "BUILDG": "BUILDING",
    "FLR": "FLOOR",
    "HANGAR": "HANGER",
    "OFFC": "OFFICE",
    "SP": "SPACE",
    "SPC": "SPACE",
    "SUIT": "SUITE",
    "STES": "SUITE",
    "TRL": "TRAILER",
}


class StreetPreModifier(Enum):
    OLD = "OLD"
    UPPER = "UPPER"
    LOWER = "LOWER"
    RIGHT = "RIGHT"
    LEFT = "LEFT"
    NORTHBOUND = "NORTHBOUND"

    def label(self) -> str:
        return self.value

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["StreetPreModifier"]:
        return cls.match_mixed(text)

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["StreetPreModifier"]:
        if not text:
            return None
        token = text.strip().upper()
        for modifier in cls:
            if modifier.value == token:
                return modifier
        return None


class StreetPreType(Enum):
    """Types written ahead of the street name, as in "HIGHWAY 199".

    Only the forms in local use are listed, so "PARK" and "FALL" stay street
    names.
    """

    AVENUE = "AVENUE"
    HIGHWAY = "HIGHWAY"
    INTERSTATE = "INTERSTATE"
    MOUNT = "MOUNT"

    def label(self) -> str:
        return self.value

    def abbreviate(self) -> str:
        return _PRE_TYPE_ABBREVIATIONS[self]

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["StreetPreType"]:
        if not text:
            return None
        return _PRE_TYPE_BY_ABBREVIATION.get(text.strip().upper().rstrip("."))

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["StreetPreType"]:
        if not text:
            return None
        token = text.strip().upper().rstrip(".")
        for pre_type in cls:
            if pre_type.value == token:
                return pre_type
        return cls.match_abbreviated(token)


_PRE_TYPE_ABBREVIATIONS: Dict[StreetPreType, str] = {
    StreetPreType.AVENUE: "AVE",
    StreetPreType.HIGHWAY: "HWY",
    StreetPreType.INTERSTATE: "I",
    StreetPreType.MOUNT: "MT",
}

# "I" alone is too common a street name to read as Interstate.
_PRE_TYPE_BY_ABBREVIATION: Dict[str, StreetPreType] = {
    abbreviation: kind
    for kind, abbreviation in _PRE_TYPE_ABBREVIATIONS.items()
    if kind is not StreetPreType.INTERSTATE
}


class StreetSeparator(Enum):
    OF_THE = "OF THE"

    def label(self) -> str:
        return self.value

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["StreetSeparator"]:
        return cls.match_mixed(text)

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["StreetSeparator"]:
        if not text:
            return None
        token = _collapse(text)
        for separator in cls:
            if separator.value == token:
                return separator
        return None


class AddressStatus(Enum):
    """Local status of an address assignment."""

    CURRENT = "Current"
    PENDING = "Pending"
    RETIRED = "Retired"
    TEMPORARY = "Temporary"
    VIRTUAL = "Virtual"
    OTHER = "Other"

    def label(self) -> str:
        return self.value.upper()

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["AddressStatus"]:
        if not text:
            return None
        token = text.strip().upper()
        for status in cls:
            if status.value.upper() == token:
                return status
        return None

    @classmethod
    def resolve(cls, text: Optional[str]) -> "AddressStatus":
        """Blank or unclassified status text is a valid state and maps to OTHER."""
        return cls.match_mixed(text) or cls.OTHER


class PostalCommunity(Enum):
    """Postal communities encountered locally. New variants are added as needed."""

    GRANTS_PASS = "GRANTS PASS"
    MEDFORD = "MEDFORD"
    MERLIN = "MERLIN"
    CAVE_JUNCTION = "CAVE JUNCTION"
    ROGUE_RIVER = "ROGUE RIVER"
    WILDERVILLE = "WILDERVILLE"

    def label(self) -> str:
        return self.value

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["PostalCommunity"]:
        if not text:
            return None
        return COMMUNITY_ALIASES.get(_collapse(text))

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["PostalCommunity"]:
        if not text:
            return None
        token = _collapse(text)
        for community in cls:
            if community.value == token:
                return community
        return cls.match_abbreviated(token)


COMMUNITY_ALIASES: Dict[str, PostalCommunity] = {
    "GP": PostalCommunity.GRANTS_PASS,
    "GRANTSPASS": PostalCommunity.GRANTS_PASS,
    "CJ": PostalCommunity.CAVE_JUNCTION,
}


class State(Enum):
    """US states and territories, valued by postal code."""

    ALABAMA = "AL"
    ALASKA = "AK"
    AMERICAN_SAMOA = "AS"
    ARIZONA = "AZ"
    ARKANSAS = "AR"
    CALIFORNIA = "CA"
    COLORADO = "CO"
    CONNECTICUT = "CT"
    DELAWARE = "DE"
    DISTRICT_OF_COLUMBIA = "DC"
    FLORIDA = "FL"
    GEORGIA = "GA"
    GUAM = "GU"
    HAWAII = "HI"
    IDAHO = "ID"
    ILLINOIS = "IL"
    INDIANA = "IN"
    IOWA = "IA"
    KANSAS = "KS"
    KENTUCKY = "KY"
    LOUISIANA = "LA"
    MAINE = "ME"
    MARYLAND = "MD"
    MASSACHUSETTS = "MA"
    MICHIGAN = "MI"
    MINNESOTA = "MN"
    MISSISSIPPI = "MS"
    MISSOURI = "MO"
    MONTANA = "MT"
    NEBRASKA = "NE"
    NEVADA = "NV"
    NEW_HAMPSHIRE = "NH"
    NEW_JERSEY = "NJ"
    NEW_MEXICO = "NM"
    NEW_YORK = "NY"
    NORTH_CAROLINA = "NC"
    NORTH_DAKOTA = "ND"
    NORTHERN_MARIANA_ISLANDS = "MP"
    OHIO = "OH"
    OKLAHOMA = "OK"
    OREGON = "OR"
    PENNSYLVANIA = "PA"
    PUERTO_RICO = "PR"
    RHODE_ISLAND = "RI"
    SOUTH_CAROLINA = "SC"
    SOUTH_DAKOTA = "SD"
    TENNESSEE = "TN"
    TEXAS = "TX"
    UTAH = "UT"
    VERMONT = "VT"
    VIRGINIA = "VA"
    VIRGIN_ISLANDS = "VI"
    WASHINGTON = "WA"
    WEST_VIRGINIA = "WV"
    WISCONSIN = "WI"
    WYOMING = "WY"

    def label(self) -> str:
        return self.value

    @classmethod
    def match_abbreviated(cls, text: Optional[str]) -> Optional["State"]:
        if not text:
            return None
        return _STATE_BY_CODE.get(text.strip().upper().rstrip("."))

    @classmethod
    def match_mixed(cls, text: Optional[str]) -> Optional["State"]:
        if not text:
            return None
        token = _collapse(text).rstrip(".")
        name = token.replace(" ", "_")
        if name in cls.__members__:
            return cls[name]
        if token in STATE_MISSPELLINGS:
            return _STATE_BY_CODE[STATE_MISSPELLINGS[token]]
        return cls.match_abbreviated(token)


_STATE_BY_CODE: Dict[str, State] = {s.value: s for s in State}

STATE_MISSPELLINGS: Dict[str, str] = {
    "ORE": "OR",
    "OREG": "OR",
    "CALIF": "CA",
    "WASH": "WA",
}

ZIP_CODE_PATTERN = re.compile(r"\d{5}")


def _collapse(text: str) -> str:
    return " ".join(text.upper().split())


def canonicalize_zip(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    match = ZIP_CODE_PATTERN.search(str(value))
    if match:
        return int(match.group(0))
    return None


# County records that carry the post type inside the street name, keyed by
# the complete street name as the county writes it.
LEGACY_COMPLETE_STREETS: Dict[str, Tuple[str, StreetPostType]] = {
    "NE BEAVILLA VIEW": ("BEAVILLA", StreetPostType.VIEW),
    "COLUMBIA CREST": ("COLUMBIA", StreetPostType.CREST),
    "SE FORMOSA GARDENS": ("FORMOSA", StreetPostType.GARDENS),
    "SE HILLTOP VIEW": ("HILLTOP", StreetPostType.VIEW),
    "MARILEE ROW": ("MARILEE", StreetPostType.ROW),
    "MEADOW GLEN": ("MEADOW", StreetPostType.GLEN),
    "ROBERTSON CREST": ("ROBERTSON", StreetPostType.CREST),
    "NE QUAIL CROSSING": ("QUAIL", StreetPostType.CROSSING),
}


def standardize_street(
    directional: Optional[Directional],
    street_name: Optional[str],
    post_type: Optional[StreetPostType],
) -> Tuple[Optional[str], Optional[StreetPostType]]:
    """Rewrite a county street name and post type into city conventions."""
    if street_name is None:
        return None, post_type
    name = _collapse(street_name)
    if post_type is None:
        key = f"{directional.label()} {name}" if directional else name
        if key in LEGACY_COMPLETE_STREETS:
            return LEGACY_COMPLETE_STREETS[key]
    return name, post_type
