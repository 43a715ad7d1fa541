from dataclasses import replace

import pytest

from address_reconcile.components import Address, Addresses, MismatchField, PartialAddress
from address_reconcile.errors import ConversionError
from address_reconcile.filters import AddressField
from address_reconcile.normalize import (
    AddressStatus,
    Directional,
    PostalCommunity,
    State,
    StreetPostType,
    StreetPreModifier,
    StreetPreType,
    StreetSeparator,
    SubaddressType,
)


def build_address(**overrides) -> Address:
    fields = dict(
        address_number=1035,
        pre_directional=Directional.NORTHEAST,
        street_name="6TH",
        post_type=StreetPostType.STREET,
        zip=97526,
        postal_community=PostalCommunity.GRANTS_PASS,
        state=State.OREGON,
        status=AddressStatus.CURRENT,
        latitude=42.44,
        longitude=-123.32,
        object_id=1,
    )
    fields.update(overrides)
    return Address(**fields)


def test_label_renders_canonical_order():
    assert build_address().label() == "1035 NE 6TH ST"
    assert build_address(address_number_suffix="1/2").label() == "1035 1/2 NE 6TH ST"
    assert build_address(pre_directional=None).label() == "1035 6TH ST"


def test_label_renders_words_ahead_of_street_name():
    highway = build_address(
        pre_directional=None,
        pre_modifier=StreetPreModifier.OLD,
        pre_type=StreetPreType.HIGHWAY,
        street_name="99",
    )
    assert highway.label() == "1035 OLD HIGHWAY 99 ST"
    assert highway.complete_street_name() == "OLD HIGHWAY 99 ST"
    assert highway.as_row()["pre_type"] == "HIGHWAY"

    giants = build_address(
        pre_type=StreetPreType.AVENUE, separator=StreetSeparator.OF_THE, street_name="GIANTS"
    )
    assert giants.label() == "1035 NE AVENUE OF THE GIANTS ST"
    assert not giants.coincident(replace(giants, separator=None)).coincident


def test_label_subaddress_forms():
    assert (
        build_address(subaddress_type=SubaddressType.SUITE, subaddress_identifier="4").label()
        == "1035 NE 6TH ST STE 4"
    )
    assert build_address(subaddress_identifier="B").label() == "1035 NE 6TH ST #B"
    assert build_address(subaddress_type=SubaddressType.REAR).label() == "1035 NE 6TH ST REAR"
    assert build_address(building="C").label() == "1035 NE 6TH ST BLDG C"
    assert build_address(subaddress_identifier="B", building="C").label() == "1035 NE 6TH ST #B"


def test_label_changes_with_identity_fields():
    address = build_address()
    assert replace(address).label() == address.label()
    changed = [
        replace(address, address_number=1036),
        replace(address, address_number_suffix="1/2"),
        replace(address, pre_directional=Directional.NORTHWEST),
        replace(address, pre_modifier=StreetPreModifier.OLD),
        replace(address, pre_type=StreetPreType.HIGHWAY),
        replace(address, street_name="7TH"),
        replace(address, post_type=StreetPostType.AVENUE),
        replace(address, subaddress_identifier="B"),
    ]
    assert all(other.label() != address.label() for other in changed)


def test_coincident_ignores_descriptive_fields():
    left = build_address(floor=1, status=AddressStatus.CURRENT)
    right = build_address(floor=2, status=AddressStatus.RETIRED, object_id=2)
    result = left.coincident(right)
    assert result.coincident
    assert [m.field for m in result.mismatches] == [MismatchField.FLOOR, MismatchField.STATUS]
    assert result.message(MismatchField.FLOOR) == "1 not equal to 2"
    assert result.message(MismatchField.STATUS) == "CURRENT not equal to RETIRED"
    assert result.message(MismatchField.BUILDING) is None


def test_coincident_requires_identity_fields():
    left = build_address()
    for other in (
        build_address(zip=97527),
        build_address(state=State.WASHINGTON),
        build_address(postal_community=PostalCommunity.MERLIN),
        build_address(subaddress_identifier="B"),
    ):
        assert not left.coincident(other).coincident
        assert left.coincident(other).coincident == other.coincident(left).coincident


def test_coincident_is_symmetric():
    addresses = [
        build_address(),
        build_address(floor=3),
        build_address(pre_directional=None),
        build_address(subaddress_type=SubaddressType.UNIT, subaddress_identifier="2"),
    ]
    for a in addresses:
        for b in addresses:
            assert a.coincident(b).coincident == b.coincident(a).coincident


def test_distance_is_planar():
    left = build_address(latitude=0.0, longitude=0.0)
    right = build_address(latitude=3.0, longitude=4.0)
    assert left.distance(right) == pytest.approx(5.0)


def test_from_partial_names_missing_field():
    partial = PartialAddress(address_number=1035, street_name="6TH", zip=97526)
    with pytest.raises(ConversionError) as excinfo:
        Address.from_partial(partial)
    assert excinfo.value.field == "post_type"


def test_from_partial_defaults_status_to_other():
    partial = PartialAddress(
        address_number=1035,
        street_name="6TH",
        post_type=StreetPostType.STREET,
        zip=97526,
        postal_community=PostalCommunity.GRANTS_PASS,
        state=State.OREGON,
    )
    address = Address.from_partial(partial, latitude=1.0, longitude=2.0, object_id=7)
    assert address.status is AddressStatus.OTHER
    assert address.object_id == 7


def test_standardize_rewrites_legacy_street():
    partial = PartialAddress(pre_directional=Directional.NORTHEAST, street_name="BEAVILLA VIEW")
    standardized = partial.standardize()
    assert standardized.street_name == "BEAVILLA"
    assert standardized.post_type is StreetPostType.VIEW
    assert partial.street_name == "BEAVILLA VIEW"


def test_duplicates_groups_repeated_labels():
    first = build_address(object_id=1)
    other = build_address(address_number=10, object_id=2)
    second = build_address(object_id=3, floor=2)
    duplicates = Addresses.of([first, other, second]).duplicates()
    assert [a.object_id for a in duplicates] == [1, 3]


def test_filter_field_and_orphan_streets():
    addresses = Addresses.of(
        [
            build_address(),
            build_address(street_name="RAMSEY", post_type=StreetPostType.AVENUE, pre_directional=None),
        ]
    )
    assert len(addresses.filter_field(AddressField.POST_TYPE, "avenue")) == 1
    assert len(addresses.filter_field(AddressField.PRE_DIRECTIONAL, "NE")) == 1
    assert len(addresses.filter_field(AddressField.LABEL, "1035 ne 6th st")) == 1

    reference = Addresses.of([build_address(address_number=2)])
    assert addresses.orphan_streets(reference) == ["RAMSEY AVE"]
