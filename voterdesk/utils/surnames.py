"""
Surname to religion/community lookup.

The table is curated offline and shipped as JSON:

    {"surnames": [{"surname": "पाटील", "religion": "Hindu", "religionMr": "हिंदू",
                   "community": "General", "communityMr": "सर्वसाधारण"}, ...]}

It is loaded once per process and never mutated afterwards, so request
handlers can share it freely.
"""
import json
from dataclasses import dataclass
from pathlib import Path

from flask import current_app

EXTENSION_KEY = "surname_lookup"


@dataclass(frozen=True)
class SurnameInfo:
    religion: str
    religion_mr: str
    community: str
    community_mr: str


def normalize_surname(surname: str | None) -> str:
    if not surname:
        return ""
    return surname.strip().casefold()


class SurnameLookup:
    def __init__(self, entries):
        mapping = {}
        for entry in entries:
            key = normalize_surname(entry.get("surname"))
            if not key:
                continue
            mapping[key] = SurnameInfo(
                religion=entry["religion"],
                religion_mr=entry.get("religionMr", entry["religion"]),
                community=entry["community"],
                community_mr=entry.get("communityMr", entry["community"]),
            )
        self._mapping = mapping

    @classmethod
    def from_file(cls, path: str | Path) -> "SurnameLookup":
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        return cls(data.get("surnames", []))

    def __len__(self) -> int:
        return len(self._mapping)

    def lookup(self, surname: str | None) -> SurnameInfo | None:
        """Exact match on the normalized token; no fuzzy or prefix matching."""
        return self._mapping.get(normalize_surname(surname))


def init_surname_lookup(app) -> None:
    path = app.config["SURNAME_MAPPING_PATH"]
    lookup = SurnameLookup.from_file(path)
    app.logger.info("Loaded %d surname mappings from %s", len(lookup), path)
    app.extensions[EXTENSION_KEY] = lookup


def get_surname_lookup() -> SurnameLookup:
    return current_app.extensions[EXTENSION_KEY]
