"""
Declarative filters for voter queries.

Every endpoint declares the query parameters it accepts and how each one
matches its column. Values are always bound as SQL parameters.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from sqlalchemy import and_, false, func, true

from ..models.voter import Voter


class MatchMode(Enum):
    EXACT = "exact"
    IEXACT = "iexact"
    CONTAINS = "contains"
    INTEGER = "integer"
    AGE_BAND = "age_band"


# Presets offered by the village voter list; upper bound None means open-ended
AGE_BANDS = {
    "18-21": (18, 21),
    "22-35": (22, 35),
    "36-50": (36, 50),
    "51-60": (51, 60),
    "60+": (61, None),
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int | None:
    """Leading integer of the input ("12abc" -> 12), None when there is none."""
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class FilterField:
    param: str
    column: Any
    mode: MatchMode

    def clause(self, value: Any):
        if self.mode is MatchMode.EXACT:
            return self.column == value
        if self.mode is MatchMode.IEXACT:
            return func.lower(self.column) == func.lower(value)
        if self.mode is MatchMode.CONTAINS:
            return self.column.ilike(f"%{value}%")
        if self.mode is MatchMode.INTEGER:
            number = parse_int(value)
            # Not a number: nothing can match, the request itself is still fine
            return false() if number is None else self.column == number
        if self.mode is MatchMode.AGE_BAND:
            band = AGE_BANDS.get(value)
            if band is None:
                return None
            low, high = band
            return self.column >= low if high is None else self.column.between(low, high)
        raise ValueError(f"Unsupported match mode {self.mode}")


class VoterFilterSet:
    """
    The filters one endpoint understands.

    `exclusive` lists params in precedence order of which at most one is
    applied (the first one present).
    """

    def __init__(self, *fields: FilterField, exclusive: tuple[str, ...] = ()):
        params = [f.param for f in fields]
        if len(params) != len(set(params)):
            raise ValueError(f"Duplicate filter params: {params}")
        unknown = set(exclusive) - set(params)
        if unknown:
            raise ValueError(f"Exclusive params not declared: {sorted(unknown)}")

        self.fields = fields
        self.exclusive = exclusive

    def active(self, args: Mapping[str, Any]) -> dict[str, Any]:
        """Params present with a non-empty value, after exclusivity is applied."""
        present = {
            f.param: args.get(f.param)
            for f in self.fields
            if args.get(f.param) not in (None, "")
        }
        winner = next((p for p in self.exclusive if p in present), None)
        for param in self.exclusive:
            if param != winner:
                present.pop(param, None)
        return present

    def build(self, args: Mapping[str, Any]) -> list:
        present = self.active(args)
        clauses = []
        for field in self.fields:
            if field.param not in present:
                continue
            clause = field.clause(present[field.param])
            if clause is not None:
                clauses.append(clause)
        return clauses

    def where(self, args: Mapping[str, Any]):
        clauses = self.build(args)
        return and_(*clauses) if clauses else true()


DIVISION = FilterField("division", Voter.zp_division_no, MatchMode.INTEGER)
WARD = FilterField("ward", Voter.ps_ward_no, MatchMode.INTEGER)

SEARCH_FILTERS = VoterFilterSet(
    FilterField("name", Voter.name, MatchMode.CONTAINS),
    FilterField("village", Voter.village, MatchMode.CONTAINS),
    DIVISION,
    WARD,
)

VILLAGE_LIST_FILTERS = VoterFilterSet(DIVISION, WARD)

VILLAGE_VOTER_FILTERS = VoterFilterSet(
    FilterField("name", Voter.village, MatchMode.EXACT),
    DIVISION,
    WARD,
    FilterField("ageGroup", Voter.age, MatchMode.AGE_BAND),
)

# Export takes the village as "name", the per-village reports as "village"
EXPORT_FILTERS = VoterFilterSet(
    FilterField("name", Voter.village, MatchMode.EXACT),
    DIVISION,
    WARD,
)

VILLAGE_SCOPE_FILTERS = VoterFilterSet(
    FilterField("village", Voter.village, MatchMode.EXACT),
    DIVISION,
    WARD,
)

DEMOGRAPHICS_FILTERS = VoterFilterSet(
    FilterField("village", Voter.village, MatchMode.IEXACT),
    DIVISION,
    WARD,
)

ANALYTICS_FILTERS = VoterFilterSet(DIVISION, WARD, exclusive=("ward", "division"))
