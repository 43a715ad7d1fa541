import pytest

from address_reconcile.components import Address, PartialAddress
from address_reconcile.engine import AddressDeltas, EngineConfig, MatchPartialRecords, MatchRecords
from address_reconcile.filters import MatchFilter, MatchStatus, PartialFilter
from address_reconcile.normalize import (
    AddressStatus,
    Directional,
    PostalCommunity,
    State,
    StreetPostType,
    StreetPreType,
)
from address_reconcile.parser import parse_address


def build_address(object_id: int, address_number: int, street_name: str, **overrides) -> Address:
    fields = dict(
        address_number=address_number,
        street_name=street_name,
        post_type=StreetPostType.STREET,
        zip=97526,
        postal_community=PostalCommunity.GRANTS_PASS,
        state=State.OREGON,
        status=AddressStatus.CURRENT,
        pre_directional=Directional.NORTHEAST,
        latitude=42.0 + object_id / 1000,
        longitude=-123.0,
        object_id=object_id,
    )
    fields.update(overrides)
    return Address(**fields)


class RecordingReporter:
    def __init__(self):
        self.events = []

    def start(self, total, description):
        self.events.append(("start", total, description))

    def advance(self, count=1):
        self.events.append(("advance", count))

    def close(self):
        self.events.append(("close",))


def test_new_yields_missing_record_when_nothing_coincides():
    subject = build_address(1, 1035, "6TH")
    records = MatchRecords.new(subject, [build_address(9, 1036, "6TH")])
    assert len(records) == 1
    assert records[0].match_status is MatchStatus.MISSING
    assert records[0].self_id == 1
    assert records[0].other_id is None


def test_new_reports_divergent_fields():
    subject = build_address(1, 1035, "6TH", floor=1)
    candidates = [
        build_address(7, 1035, "6TH", floor=1),
        build_address(8, 1035, "6TH", floor=2, status=AddressStatus.RETIRED),
    ]
    records = MatchRecords.new(subject, candidates)
    assert [r.match_status for r in records] == [MatchStatus.MATCHING, MatchStatus.DIVERGENT]
    assert [r.other_id for r in records] == [7, 8]
    assert records[1].floor == "1 not equal to 2"
    assert records[1].status == "CURRENT not equal to RETIRED"
    assert records[1].building is None


def test_compare_preserves_subject_order():
    subjects = [build_address(i, 1000 + i, "6TH") for i in range(1, 30)]
    candidates = [build_address(100 + i, 1000 + i, "6TH") for i in range(1, 30, 2)]
    records = MatchRecords.compare(subjects, candidates, EngineConfig(max_workers=4))

    assert [r.self_id for r in records] == [s.object_id for s in subjects]
    for record in records:
        if record.self_id % 2:
            assert record.match_status is MatchStatus.MATCHING
            assert record.other_id == 100 + record.self_id
        else:
            assert record.match_status is MatchStatus.MISSING


def test_compare_every_subject_appears_at_least_once():
    subjects = [build_address(1, 1035, "6TH"), build_address(2, 10, "RAMSEY")]
    candidates = [build_address(5, 1035, "6TH"), build_address(6, 1035, "6TH", floor=3)]
    records = MatchRecords.compare(subjects, candidates)
    assert [r.self_id for r in records] == [1, 1, 2]
    assert {r.self_id for r in records} == {1, 2}


def test_compare_drives_reporter():
    reporter = RecordingReporter()
    subjects = [build_address(1, 1, "6TH"), build_address(2, 2, "6TH")]
    MatchRecords.compare(subjects, [], EngineConfig(reporter=reporter))
    assert reporter.events == [
        ("start", 2, "address"),
        ("advance", 1),
        ("advance", 1),
        ("close",),
    ]


@pytest.mark.parametrize("predicate", list(MatchFilter))
def test_filter_is_idempotent(predicate):
    subject = build_address(1, 1035, "6TH", floor=1, building="A")
    candidates = [
        build_address(2, 1035, "6TH", floor=1, building="A"),
        build_address(3, 1035, "6TH", floor=2, building="A"),
        build_address(4, 1035, "6TH", floor=1, building="B", status=AddressStatus.PENDING),
    ]
    records = MatchRecords.compare([subject, build_address(9, 99, "6TH")], candidates)
    once = records.filter(predicate)
    assert once.filter(predicate) == once
    assert all(predicate.accepts(record) for record in once)


def test_field_filters_select_divergent_fields():
    subject = build_address(1, 1035, "6TH", floor=1, building="A")
    candidates = [
        build_address(3, 1035, "6TH", floor=2, building="A"),
        build_address(4, 1035, "6TH", floor=1, building="B"),
    ]
    records = MatchRecords.compare([subject], candidates)
    assert [r.other_id for r in records.filter(MatchFilter.FLOOR)] == [3]
    assert [r.other_id for r in records.filter(MatchFilter.BUILDING)] == [4]
    assert len(records.filter(MatchFilter.STATUS)) == 0


def test_partial_match_states():
    candidates = [
        build_address(1, 1035, "6TH", subaddress_identifier="B"),
        build_address(2, 1035, "6TH", subaddress_identifier="C"),
        build_address(3, 1035, "7TH"),
    ]
    matching = MatchPartialRecords.new(parse_address("1035 NE 6TH ST #B"), candidates)
    assert [(r.match_status, r.other_id) for r in matching] == [(MatchStatus.MATCHING, 1)]
    assert matching[0].other_label == "1035 NE 6TH ST #B"

    divergent = MatchPartialRecords.new(parse_address("1035 NE 6TH ST #D"), candidates)
    assert [(r.match_status, r.other_id) for r in divergent] == [
        (MatchStatus.DIVERGENT, 1),
        (MatchStatus.DIVERGENT, 2),
    ]

    missing = MatchPartialRecords.new(parse_address("1035 NE 8TH ST"), candidates)
    assert len(missing) == 1
    assert missing[0].match_status is MatchStatus.MISSING
    assert missing[0].other_label is None
    assert missing[0].address_label == "1035 NE 8TH ST"


def test_partial_unspecified_street_fields_are_not_compared():
    candidates = [build_address(1, 1035, "6TH")]
    records = MatchPartialRecords.new(PartialAddress(address_number=1035), candidates)
    assert records[0].match_status is MatchStatus.MATCHING


def test_partial_building_compared_without_identifier():
    candidates = [build_address(1, 1035, "6TH", building="A")]
    records = MatchPartialRecords.new(
        PartialAddress(address_number=1035, street_name="6TH", building="B"), candidates
    )
    assert records[0].match_status is MatchStatus.DIVERGENT


def test_partial_compare_filters():
    candidates = [build_address(1, 1035, "6TH")]
    subjects = [parse_address("1035 NE 6TH ST"), parse_address("200 NE 6TH ST")]
    records = MatchPartialRecords.compare(subjects, candidates)
    assert [r.match_status for r in records] == [MatchStatus.MATCHING, MatchStatus.MISSING]
    assert len(records.filter(PartialFilter.MISSING)) == 1
    assert [r.other_id for r in records.filter(PartialFilter.MATCHING)] == [1]


def test_partial_filter_by_divergent_status():
    candidates = [build_address(1, 1035, "6TH", subaddress_identifier="B")]
    records = MatchPartialRecords.new(parse_address("1035 NE 6TH ST #D"), candidates)
    assert [r.other_id for r in records.filter(PartialFilter.DIVERGENT)] == [1]
    assert len(records.filter(PartialFilter.MATCHING)) == 0
    assert PartialFilter.parse("Divergent") is PartialFilter.DIVERGENT


def test_partial_conflicting_directional_is_missing():
    candidates = [build_address(1, 1035, "6TH")]
    records = MatchPartialRecords.new(parse_address("1035 NW 6TH ST"), candidates)
    assert [(r.match_status, r.other_id) for r in records] == [(MatchStatus.MISSING, None)]


def test_partial_conflicting_post_type_is_missing():
    candidates = [build_address(1, 1035, "6TH")]
    records = MatchPartialRecords.new(parse_address("1035 NE 6TH AVE"), candidates)
    assert [(r.match_status, r.other_id) for r in records] == [(MatchStatus.MISSING, None)]


def test_partial_conflicting_pre_type_is_missing():
    candidates = [build_address(1, 1900, "199", pre_directional=None, pre_type=StreetPreType.HIGHWAY)]
    highway = MatchPartialRecords.new(parse_address("1900 HIGHWAY 199"), candidates)
    assert highway[0].match_status is MatchStatus.MATCHING
    assert highway[0].other_label == "1900 HIGHWAY 199 ST"

    records = MatchPartialRecords.new(
        PartialAddress(address_number=1900, pre_type=StreetPreType.AVENUE), candidates
    )
    assert records[0].match_status is MatchStatus.MISSING


def test_partial_floor_compared_without_identifier_or_building():
    candidates = [build_address(1, 1035, "6TH", floor=1)]
    records = MatchPartialRecords.new(
        PartialAddress(address_number=1035, street_name="6TH", floor=2), candidates
    )
    assert records[0].match_status is MatchStatus.DIVERGENT


def test_partial_floor_ignored_when_candidate_has_building():
    candidates = [build_address(1, 1035, "6TH", building="A", floor=1)]
    records = MatchPartialRecords.new(
        PartialAddress(address_number=1035, street_name="6TH", building="A", floor=2), candidates
    )
    assert records[0].match_status is MatchStatus.MATCHING


def test_deltas_report_moved_labels():
    subjects = [
        build_address(1, 1035, "6TH", latitude=0.0, longitude=0.0),
        build_address(2, 10, "6TH", latitude=0.0, longitude=0.0),
        build_address(3, 20, "6TH", latitude=0.0, longitude=0.0),
    ]
    others = [
        build_address(11, 1035, "6TH", latitude=3.0, longitude=4.0),
        build_address(12, 10, "6TH", latitude=0.0, longitude=0.0),
    ]
    deltas = AddressDeltas.compute(subjects, others)
    assert len(deltas) == 1
    assert deltas[0].label == "1035 NE 6TH ST"
    assert deltas[0].delta == pytest.approx(5.0)
    assert all(d.delta > 0.0 for d in deltas)

    assert len(AddressDeltas.compute(subjects, others, minimum=5.0)) == 0
