from collections.abc import Iterable

from .names import first_token
from .surnames import SurnameLookup

UNKNOWN = "Unknown"
UNKNOWN_MR = "अज्ञात"
TOP_COMMUNITIES = 8


def _ranked(counts: dict, total: int, limit: int | None = None) -> list[dict]:
    # sorted() is stable, so equal counts keep first-encountered order
    rows = sorted(counts.items(), key=lambda item: item[1]["count"], reverse=True)
    if limit is not None:
        rows = rows[:limit]
    return [
        {
            "name": name,
            "nameMr": data["nameMr"],
            "count": data["count"],
            "percentage": round(data["count"] / total * 100, 1),
        }
        for name, data in rows
    ]


def _bump(counts: dict, name: str, name_mr: str) -> None:
    entry = counts.setdefault(name, {"count": 0, "nameMr": name_mr})
    entry["count"] += 1


def aggregate_demographics(names: Iterable[str | None], lookup: SurnameLookup) -> dict:
    """
    Estimate religion and community distributions from family names.

    Voters without a usable name are skipped and do not count towards the
    percentage base. Religion is reported in full, community is cut to the
    top 8 groups.
    """
    religion_counts: dict = {}
    community_counts: dict = {}
    total = 0

    for name in names:
        surname = first_token(name)
        if not surname:
            continue
        total += 1

        info = lookup.lookup(surname)
        if info is None:
            _bump(religion_counts, UNKNOWN, UNKNOWN_MR)
            _bump(community_counts, UNKNOWN, UNKNOWN_MR)
            continue

        _bump(religion_counts, info.religion, info.religion_mr)
        _bump(community_counts, info.community, info.community_mr)

    if total == 0:
        return {"religion": [], "community": [], "totalVoters": 0}

    return {
        "religion": _ranked(religion_counts, total),
        "community": _ranked(community_counts, total, limit=TOP_COMMUNITIES),
        "totalVoters": total,
    }
