import pytest

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
    canonicalize_zip,
    standardize_street,
)


@pytest.mark.parametrize(
    "vocabulary",
    [
        Directional,
        StreetPreModifier,
        StreetPreType,
        StreetSeparator,
        StreetPostType,
        SubaddressType,
        AddressStatus,
        PostalCommunity,
        State,
    ],
)
def test_every_label_matches_back_to_its_variant(vocabulary):
    for variant in vocabulary:
        assert vocabulary.match_mixed(variant.label()) is variant
        assert vocabulary.match_mixed(variant.label().lower()) is variant


def test_abbreviated_matching_ignores_full_words():
    assert Directional.match_abbreviated("NE") is Directional.NORTHEAST
    assert Directional.match_abbreviated("NORTHEAST") is None
    assert Directional.match_mixed("northeast") is Directional.NORTHEAST
    assert Directional.match_mixed("N.E.") is Directional.NORTHEAST


def test_post_type_spellings():
    assert StreetPostType.match_abbreviated("ave") is StreetPostType.AVENUE
    assert StreetPostType.match_mixed("Avenue") is StreetPostType.AVENUE
    assert StreetPostType.match_mixed("AV") is StreetPostType.AVENUE
    assert StreetPostType.match_mixed("St.") is StreetPostType.STREET
    assert StreetPostType.AVENUE.abbreviate() == "AVE"
    assert StreetPostType.CROSSING.abbreviate() == "XING"


def test_park_and_fall_are_not_post_types():
    assert StreetPostType.match_mixed("PARK") is None
    assert StreetPostType.match_mixed("FALL") is None


def test_unrecognized_input_is_none():
    assert StreetPostType.match_mixed("BANANA") is None
    assert SubaddressType.match_mixed("") is None
    assert State.match_mixed(None) is None
    assert PostalCommunity.match_mixed("Chicago") is None


def test_subaddress_abbreviations():
    assert SubaddressType.match_mixed("ste") is SubaddressType.SUITE
    assert SubaddressType.match_mixed("Apartment") is SubaddressType.APARTMENT
    assert SubaddressType.LAUNDRY.abbreviate() == "LAUN"


def test_status_defaults_to_other():
    assert AddressStatus.match_mixed("retired") is AddressStatus.RETIRED
    assert AddressStatus.match_mixed("gone") is None
    assert AddressStatus.resolve("gone") is AddressStatus.OTHER
    assert AddressStatus.resolve(None) is AddressStatus.OTHER


def test_community_aliases():
    assert PostalCommunity.match_mixed("grants  pass") is PostalCommunity.GRANTS_PASS
    assert PostalCommunity.match_mixed("GP") is PostalCommunity.GRANTS_PASS


def test_state_by_name_or_code():
    assert State.match_mixed("Oregon") is State.OREGON
    assert State.match_mixed("or") is State.OREGON
    assert State.match_mixed("new york") is State.NEW_YORK
    assert State.match_abbreviated("Oregon") is None


def test_canonicalize_zip_handles_zip4():
    assert canonicalize_zip("97526-1234") == 97526
    assert canonicalize_zip("975") is None


def test_standardize_street_splits_legacy_county_names():
    assert standardize_street(Directional.NORTHEAST, "BEAVILLA VIEW", None) == (
        "BEAVILLA",
        StreetPostType.VIEW,
    )
    assert standardize_street(None, "meadow  glen", None) == ("MEADOW", StreetPostType.GLEN)
    assert standardize_street(None, "ROGUE RIVER", StreetPostType.HIGHWAY) == (
        "ROGUE RIVER",
        StreetPostType.HIGHWAY,
    )
