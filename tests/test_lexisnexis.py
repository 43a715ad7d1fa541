from address_reconcile.components import Address, Addresses
from address_reconcile.lexisnexis import LEXISNEXIS_COLUMNS, LexisNexis, LexisNexisRange
from address_reconcile.normalize import Directional, PostalCommunity, State, StreetPostType


def build_address(address_number: int, street_name: str = "6TH", **overrides) -> Address:
    fields = dict(
        address_number=address_number,
        pre_directional=Directional.NORTHEAST,
        street_name=street_name,
        post_type=StreetPostType.STREET,
        zip=97526,
        postal_community=PostalCommunity.GRANTS_PASS,
        state=State.OREGON,
    )
    fields.update(overrides)
    return Address(**fields)


def test_contiguous_includes_form_one_range():
    assert LexisNexisRange.from_numbers([10, 11, 12], []).ranges() == [(10, 12)]
    assert LexisNexisRange.from_numbers([1, 3, 5, 7], []).ranges() == [(1, 7)]


def test_exclude_run_splits_includes():
    ranges = LexisNexisRange.from_numbers([100, 101, 102, 105], [103, 104]).ranges()
    assert ranges == [(100, 102), (105, 105)]


def test_excludes_split_ranges():
    ranges = LexisNexisRange.from_numbers([1, 3, 5, 9, 11], [7]).ranges()
    assert ranges == [(1, 5), (9, 11)]


def test_ranges_cover_every_include_and_no_exclude():
    include = [101, 103, 107, 111, 113, 121]
    exclude = [105, 109, 115, 119]
    ranges = LexisNexisRange.from_numbers(reversed(include), exclude).ranges()

    for number in include:
        assert any(low <= number <= high for low, high in ranges)
    for number in exclude:
        assert not any(low <= number <= high for low, high in ranges)
    assert ranges == [(101, 103), (107, 107), (111, 113), (121, 121)]


def test_equal_include_and_exclude_keep_degenerate_range():
    assert LexisNexisRange.from_numbers([5, 9], [5]).ranges() == [(5, 5), (9, 9)]


def test_no_includes_no_ranges():
    assert LexisNexisRange.from_numbers([], [1, 2]).ranges() == []


def test_from_addresses_groups_by_complete_street():
    include = Addresses.of(
        [
            build_address(100),
            build_address(110),
            build_address(130),
            build_address(5, "RAMSEY", pre_directional=None, post_type=StreetPostType.AVENUE),
        ]
    )
    exclude = Addresses.of([build_address(120), build_address(110, "7TH")])
    rows = LexisNexis.from_addresses(include, exclude).as_rows()

    assert [list(row) for row in rows] == [LEXISNEXIS_COLUMNS] * 3
    assert [(row["StNumFrom"], row["StNumTo"], row["StName"]) for row in rows] == [
        (100, 110, "6TH"),
        (130, 130, "6TH"),
        (5, 5, "RAMSEY"),
    ]
    assert rows[0]["StPreDirection"] == "NE"
    assert rows[0]["StType"] == "ST"
    assert rows[0]["City"] == "GRANTS PASS"
    assert rows[0]["Zipcode"] == 97526
    assert rows[2]["StPreDirection"] is None
    assert rows[2]["StType"] == "AVE"
