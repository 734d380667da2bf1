import math
import re
from collections.abc import Iterable

from sqlalchemy import case, func

from ..models.voter import Voter
from .names import first_token

MIN_FAMILY_SIZE = 2
_NON_DIGITS_RE = re.compile(r"[^0-9]")


def count_where(condition):
    """SUM(CASE WHEN ... THEN 1 ELSE 0 END), 0 on an empty selection."""
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def is_male():
    return Voter.gender == Voter.GENDER_MALE


def is_female():
    return Voter.gender == Voter.GENDER_FEMALE


def is_other_gender():
    return (Voter.gender.is_(None)) | (Voter.gender.notin_(Voter.KNOWN_GENDERS))


def percent(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def household_key(serial_number: str | None) -> str | None:
    """Serial numbers look like "123/4"; the part up to the slash identifies the house."""
    if not serial_number:
        return None
    slash = serial_number.find("/")
    return serial_number if slash < 0 else serial_number[: slash + 1]


def cluster_families(voters: Iterable[Voter], limit: int) -> list[dict]:
    """
    Group voters by family name (first token) and keep groups with at
    least two members, largest first.
    """
    groups: dict[str, dict] = {}
    for voter in voters:
        surname = first_token(voter.name)
        if not surname:
            continue
        group = groups.setdefault(
            surname,
            {"count": 0, "households": set(), "ages": [], "male": 0, "female": 0},
        )
        group["count"] += 1
        house = household_key(voter.serial_number)
        if house is not None:
            group["households"].add(house)
        if voter.age is not None:
            group["ages"].append(voter.age)
        if voter.gender == Voter.GENDER_MALE:
            group["male"] += 1
        elif voter.gender == Voter.GENDER_FEMALE:
            group["female"] += 1

    families = []
    for surname, group in groups.items():
        if group["count"] < MIN_FAMILY_SIZE:
            continue
        ages = group["ages"]
        families.append({
            "surname": surname,
            "voterCount": group["count"],
            "householdEstimate": len(group["households"]),
            "avgAge": round_half_up(sum(ages) / len(ages)) if ages else None,
            "maleCount": group["male"],
            "femaleCount": group["female"],
            "youngest": min(ages) if ages else None,
            "oldest": max(ages) if ages else None,
        })

    families.sort(key=lambda f: f["voterCount"], reverse=True)
    return families[:limit]


def serial_sort_key(voter: Voter):
    """Numeric serial first (digits only), voters without one last, then by name."""
    digits = _NON_DIGITS_RE.sub("", voter.serial_number or "")
    if not digits:
        return (1, 0, voter.name or "")
    return (0, int(digits), voter.name or "")


def top_tokens(names: Iterable[str | None], tokenizer, total: int,
               min_count: int = 3, limit: int = 10) -> list[dict]:
    counts: dict[str, int] = {}
    for name in names:
        token = tokenizer(name)
        if token:
            counts[token] = counts.get(token, 0) + 1

    ranked = sorted(
        ((token, count) for token, count in counts.items() if count >= min_count),
        key=lambda item: item[1],
        reverse=True,
    )
    return [
        {"name": token, "count": count, "percentage": percent(count, total)}
        for token, count in ranked[:limit]
    ]
