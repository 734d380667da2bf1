import pytest

from voterdesk.config import PACKAGE_DATA_DIR
from voterdesk.utils.reference_data import (
    PANCHAYAT_SAMITI,
    ZILLA_PARISHAD,
    ReferenceData,
    filter_reservations,
    normalize_reservation_category,
    parse_seat_no,
)


@pytest.fixture()
def reference():
    return ReferenceData.from_files(
        PACKAGE_DATA_DIR / "reservations.json",
        PACKAGE_DATA_DIR / "ward-composition.json",
    )


@pytest.mark.parametrize("raw, expected", [
    ("सर्वसाधारण", ("General", False)),
    ("सर्वसाधारण (महिला)", ("General", True)),
    ("अनुसूचित जाती (महिला)", ("SC", True)),
    ("अनुसूचित जमाती", ("ST", False)),
    ("इतर मागास वर्ग महिला", ("OBC", True)),
    ("OBC women", ("OBC", True)),
    ("Scheduled Tribe", ("ST", False)),
    ("Scheduled Caste", ("SC", False)),
    ("Other Backward Caste (Women)", ("OBC", True)),
    ("xyz", ("Other", False)),
    ("", ("Other", False)),
])
def test_normalize_reservation_category(raw, expected):
    assert normalize_reservation_category(raw) == expected


@pytest.mark.parametrize("text, expected", [
    ("११९", 119),
    ("गट क्र. 60", 60),
    ("61 - पेरणोली", 61),
])
def test_parse_seat_no(text, expected):
    assert parse_seat_no(text) == expected


def test_parse_seat_no_without_digits():
    with pytest.raises(ValueError):
        parse_seat_no("उत्तूर")


def test_raw_category_text_is_normalized_on_load(reference):
    seat = next(s for s in reference.seats if s["id"] == "zp-62")

    assert seat["category"] == "SC"
    assert seat["isWomenReserved"] is True
    assert seat["seatNo"] == 62


def test_filter_by_type_and_women(reference):
    zp_women = filter_reservations(reference.seats, {
        "electionType": ZILLA_PARISHAD,
        "isWomenReserved": True,
    })

    assert sorted(s["id"] for s in zp_women) == ["zp-60", "zp-62"]


def test_false_women_filter_is_applied(reference):
    seats = filter_reservations(reference.seats, {"isWomenReserved": False})

    assert all(not s["isWomenReserved"] for s in seats)
    assert len(seats) == 2


def test_search_text_matches_several_fields(reference):
    assert {s["id"] for s in filter_reservations(reference.seats, {"searchText": "उत्तूर"})} == {
        "zp-60",
        "ps-ajara-119",
    }
    assert [s["id"] for s in filter_reservations(reference.seats, {"searchText": "st"})] == ["ps-ajara-120"]


def test_seat_summary(reference):
    assert reference.seat_summary(reference.seats) == {"zp": 3, "ps": 2}
    ps_only = [s for s in reference.seats if s["electionType"] == PANCHAYAT_SAMITI]
    assert reference.seat_summary(ps_only) == {"zp": 0, "ps": 2}


def test_wards_for_division(reference):
    assert reference.wards_for_division(60) == [
        {"no": 119, "name": "119 - उत्तूर"},
        {"no": 120, "name": "120 - बहिरेवाडी"},
    ]
    assert reference.wards_for_division(999) is None


def test_village_entry_is_case_insensitive(reference):
    entry = reference.village_entry(" पेरणोली ")

    assert entry["ps"]["wardNumber"] == 121
    assert reference.village_entry("nowhere") is None
