import json

from voterdesk.utils.demographics import aggregate_demographics
from voterdesk.utils.surnames import SurnameLookup

ENTRIES = [
    {"surname": "अ", "religion": "Hindu", "religionMr": "हिंदू", "community": "Maratha", "communityMr": "मराठा"},
    {"surname": "Patil", "religion": "Hindu", "religionMr": "हिंदू", "community": "Maratha", "communityMr": "मराठा"},
    {"surname": "ब", "religion": "Muslim", "religionMr": "मुस्लिम", "community": "Muslim", "communityMr": "मुस्लिम"},
]


def test_lookup_is_normalized_exact_match():
    lookup = SurnameLookup(ENTRIES)

    assert len(lookup) == 3
    assert lookup.lookup("  PATIL ").religion == "Hindu"
    assert lookup.lookup("Pati") is None
    assert lookup.lookup("") is None


def test_lookup_from_file(tmp_path):
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps({"surnames": ENTRIES}, ensure_ascii=False), encoding="utf-8")

    lookup = SurnameLookup.from_file(path)

    assert lookup.lookup("ब").community_mr == "मुस्लिम"


def test_same_family_name_counts_once_per_voter():
    result = aggregate_demographics(["अ ब", "अ क"], SurnameLookup(ENTRIES))

    assert result["religion"] == [{"name": "Hindu", "nameMr": "हिंदू", "count": 2, "percentage": 100.0}]
    assert result["totalVoters"] == 2


def test_unknown_surnames_are_reported_on_both_axes():
    result = aggregate_demographics(["अ ब", "क ड", "ब ल", "ब म"], SurnameLookup(ENTRIES))

    assert [r["name"] for r in result["religion"]] == ["Muslim", "Hindu", "Unknown"]
    unknown = result["community"][-1]
    assert unknown == {"name": "Unknown", "nameMr": "अज्ञात", "count": 1, "percentage": 25.0}


def test_blank_names_are_not_part_of_the_base():
    result = aggregate_demographics(["अ ब", None, "", "   "], SurnameLookup(ENTRIES))

    assert result["totalVoters"] == 1
    assert result["religion"][0]["percentage"] == 100.0


def test_ties_keep_first_seen_order():
    result = aggregate_demographics(["ब x", "अ y"], SurnameLookup(ENTRIES))

    assert [r["name"] for r in result["religion"]] == ["Muslim", "Hindu"]


def test_community_list_is_cut_to_eight():
    entries = [
        {"surname": f"s{i}", "religion": "Hindu", "community": f"C{i}"}
        for i in range(10)
    ]
    names = [f"s{i} name" for i in range(10)]

    result = aggregate_demographics(names, SurnameLookup(entries))

    assert len(result["community"]) == 8
    assert len(result["religion"]) == 1


def test_no_voters():
    assert aggregate_demographics([], SurnameLookup(ENTRIES)) == {
        "religion": [],
        "community": [],
        "totalVoters": 0,
    }
