"""
Reservation seats and ward composition.

Both datasets are JSON files produced offline from the official PDFs and
are only read here, once, when the app starts.
"""
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from flask import current_app

EXTENSION_KEY = "reference_data"

ZILLA_PARISHAD = "Zilla Parishad"
PANCHAYAT_SAMITI = "Panchayat Samiti"
ELECTION_TYPES = (ZILLA_PARISHAD, PANCHAYAT_SAMITI)

RESERVATION_CATEGORIES = ("General", "SC", "ST", "OBC", "VJNT", "SBC", "EWS", "Other")

_MARATHI_DIGITS = str.maketrans("०१२३४५६७८९", "0123456789")
_WOMEN_RE = re.compile(r"महिला|mahila|women", re.IGNORECASE)
_PUNCT_RE = re.compile(r"[.:\-–—]")
_SPACES_RE = re.compile(r"\s+")

# Checked in order; the first matching category wins
_CATEGORY_PATTERNS = (
    ("General", re.compile(r"सर्वसाधारण|खुला|ओपन|\bgeneral\b|\bopen\b", re.IGNORECASE)),
    ("SC", re.compile(r"अनुसूचित\s*जाती|अनसूचीत\s*जाती|अनु\s*जा|\bsc\b|scheduled\s*caste", re.IGNORECASE)),
    ("ST", re.compile(r"अनुसूचित\s*जमाती|अनु\s*ज|\bst\b|scheduled\s*tribe", re.IGNORECASE)),
    ("OBC", re.compile(
        r"इतर\s*मागास|इ\s*मा\s*व|नागरिकांचा\s*मागास|\bobc\b|other\s*backward",
        re.IGNORECASE,
    )),
    ("VJNT", re.compile(r"वि\s*जा|विमुक्त\s*जाती|भटक्या\s*जमाती|\bvj\s*/?\s*nt\b", re.IGNORECASE)),
    ("SBC", re.compile(r"विशेष\s*मागास|\bsbc\b|special\s*backward", re.IGNORECASE)),
    ("EWS", re.compile(r"ईडब्ल्यूएस|आर्थिकदृष्ट्या\s*दुर्बल|\bews\b", re.IGNORECASE)),
)


def normalize_reservation_category(raw: str) -> tuple[str, bool]:
    """
    Map category text as printed in the reservation order ("अनुसूचित जाती (महिला)",
    "OBC women", ...) to (category, is_women_reserved).
    """
    text = _SPACES_RE.sub(" ", _PUNCT_RE.sub(" ", raw or "")).strip()
    is_women = bool(_WOMEN_RE.search(text))
    text = _SPACES_RE.sub(" ", _WOMEN_RE.sub("", text).replace("(", " ").replace(")", " ")).strip()

    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category, is_women
    return "Other", is_women


def parse_seat_no(text: str) -> int:
    """First integer in the text, Marathi digits included."""
    match = re.search(r"\d+", (text or "").translate(_MARATHI_DIGITS))
    if not match:
        raise ValueError(f'No seat number found in text: "{text}"')
    return int(match.group(0))


def _normalize_seat(seat: dict) -> dict:
    seat = dict(seat)
    if not seat.get("category") and seat.get("rawCategoryText"):
        category, is_women = normalize_reservation_category(seat["rawCategoryText"])
        seat["category"] = category
        seat.setdefault("isWomenReserved", is_women)
    if "seatNo" not in seat and seat.get("seatNumber"):
        try:
            seat["seatNo"] = parse_seat_no(str(seat["seatNumber"]))
        except ValueError:
            seat["seatNo"] = None
    seat.setdefault("isWomenReserved", False)
    return seat


def filter_reservations(seats: list[dict], filters: dict[str, Any]) -> list[dict]:
    result = list(seats)

    if filters.get("electionType"):
        result = [s for s in result if s.get("electionType") == filters["electionType"]]

    if filters.get("category"):
        result = [s for s in result if s.get("category") == filters["category"]]

    if filters.get("isWomenReserved") is not None:
        result = [s for s in result if s.get("isWomenReserved") == filters["isWomenReserved"]]

    if filters.get("divisionName"):
        needle = filters["divisionName"].lower()
        result = [s for s in result if needle in (s.get("divisionName") or "").lower()]

    if filters.get("taluka"):
        result = [s for s in result if s.get("taluka") == filters["taluka"]]

    if filters.get("searchText"):
        needle = filters["searchText"].lower()
        result = [
            s for s in result
            if needle in (s.get("divisionName") or "").lower()
            or needle in str(s.get("seatNumber") or "")
            or needle in (s.get("category") or "").lower()
            or needle in (s.get("taluka") or "").lower()
        ]

    return result


@dataclass
class ReferenceData:
    reservation_meta: dict = field(default_factory=dict)
    seats: list = field(default_factory=list)
    ward_composition: dict = field(default_factory=dict)

    @classmethod
    def from_files(cls, reservations_path: str | Path, ward_path: str | Path) -> "ReferenceData":
        with open(reservations_path, encoding="utf-8") as fh:
            reservations = json.load(fh)
        with open(ward_path, encoding="utf-8") as fh:
            wards = json.load(fh)

        seats = [_normalize_seat(s) for s in reservations.get("reservations", [])]
        return cls(
            reservation_meta=reservations.get("metadata", {}),
            seats=seats,
            ward_composition=wards,
        )

    def seat_summary(self, seats: list[dict]) -> dict:
        return {
            "zp": sum(1 for s in seats if s.get("electionType") == ZILLA_PARISHAD),
            "ps": sum(1 for s in seats if s.get("electionType") == PANCHAYAT_SAMITI),
        }

    def wards_for_division(self, division_no: int) -> list[dict] | None:
        """PS wards under the electoral division with this number, None if unknown."""
        for taluka in self.ward_composition.get("ps", {}).get("talukas", []):
            for division in taluka.get("divisions", []):
                if division.get("number") == division_no:
                    return [
                        {"no": ward["number"], "name": f"{ward['number']} - {ward['name']}"}
                        for ward in division.get("wards", [])
                    ]
        return None

    def village_entry(self, village: str) -> dict | None:
        return self.ward_composition.get("villageIndex", {}).get(village.strip().lower())


def init_reference_data(app) -> None:
    data = ReferenceData.from_files(
        app.config["RESERVATIONS_PATH"], app.config["WARD_COMPOSITION_PATH"]
    )
    app.logger.info("Loaded %d reservation seats", len(data.seats))
    app.extensions[EXTENSION_KEY] = data


def get_reference_data() -> ReferenceData:
    return current_app.extensions[EXTENSION_KEY]
