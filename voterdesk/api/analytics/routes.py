from flask import Blueprint, request, current_app
from flasgger import swag_from
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from ...models.voter import Voter
from ...schemas.voter import (
    ScopeArgsSchema,
    DemographicsArgsSchema,
    FamilyStatsArgsSchema,
    VillageAnalyticsArgsSchema,
)
from ...utils.demographics import aggregate_demographics
from ...utils.filters import ANALYTICS_FILTERS, DEMOGRAPHICS_FILTERS, VILLAGE_SCOPE_FILTERS
from ...utils.names import first_token, last_token
from ...utils.surnames import get_surname_lookup
from ...utils.validation import load_or_abort
from ...utils.voter_stats import (
    cluster_families,
    count_where,
    is_female,
    is_male,
    is_other_gender,
    percent,
    top_tokens,
)

analytics_bp = Blueprint("analytics", __name__)

FAMILY_MAX_LIMIT = 50

scope_args_schema = ScopeArgsSchema()
demographics_args_schema = DemographicsArgsSchema()
family_stats_args_schema = FamilyStatsArgsSchema()
village_analytics_args_schema = VillageAnalyticsArgsSchema()

SCOPE_PARAMS = [
    {"name": "division", "in": "query", "type": "string", "required": False,
     "description": "ZP electoral division number"},
    {"name": "ward", "in": "query", "type": "string", "required": False,
     "description": "PS ward number"},
]

VILLAGE_PARAM = {"name": "village", "in": "query", "type": "string", "required": True}


def _database_error(message: str, error: str = "Database error"):
    db.session.rollback()
    current_app.logger.exception(message)
    return {"error": error}, 500


def _age_between(low: int, high: int):
    return Voter.age.between(low, high)


@analytics_bp.get("/analytics")
@swag_from({
    "tags": ["Analytics"],
    "summary": "Gender and age breakdown, overall or for a division/ward",
    "description": "When both are given only ward is applied. Per-village rows are included when scoped.",
    "parameters": SCOPE_PARAMS,
    "responses": {
        200: {"description": "{total, gender, ageGroups, specialCategories, villages}"},
        404: {"description": "No data found for the specified criteria"},
        500: {"description": "Database error"},
    },
})
def analytics():
    args = load_or_abort(scope_args_schema, request.args.to_dict())
    scoped = bool(ANALYTICS_FILTERS.active(args))
    where = ANALYTICS_FILTERS.where(args)

    try:
        stats = (
            db.session.query(
                func.count(Voter.id).label("total"),
                count_where(is_male()).label("male"),
                count_where(is_female()).label("female"),
                count_where(is_other_gender()).label("other"),
                count_where(_age_between(18, 25)).label("age_18_25"),
                count_where(_age_between(26, 40)).label("age_26_40"),
                count_where(_age_between(41, 60)).label("age_41_60"),
                count_where(Voter.age > 60).label("age_60_plus"),
                count_where(_age_between(18, 21)).label("first_time"),
                count_where(Voter.age >= 60).label("senior"),
            )
            .filter(where)
            .one()
        )

        if stats.total == 0:
            return {"error": "No data found for the specified criteria"}, 404

        villages = None
        if scoped:
            rows = (
                db.session.query(
                    Voter.village,
                    func.count(Voter.id).label("total"),
                    count_where(is_male()).label("male"),
                    count_where(is_female()).label("female"),
                )
                .filter(where)
                .group_by(Voter.village)
                .order_by(func.count(Voter.id).desc())
                .all()
            )
            villages = [
                {"name": row.village, "total": row.total, "male": row.male, "female": row.female}
                for row in rows
            ]
    except SQLAlchemyError:
        return _database_error("DB error during analytics")

    total = stats.total
    return {
        "total": total,
        "gender": {
            "male": stats.male,
            "female": stats.female,
            "other": stats.other,
            "malePercent": percent(stats.male, total),
            "femalePercent": percent(stats.female, total),
            "otherPercent": percent(stats.other, total),
        },
        "ageGroups": {
            "18-25": stats.age_18_25,
            "26-40": stats.age_26_40,
            "41-60": stats.age_41_60,
            "60+": stats.age_60_plus,
        },
        "specialCategories": {
            "firstTimeVoters": stats.first_time,
            "seniorVoters": stats.senior,
        },
        "villages": villages,
    }, 200


@analytics_bp.get("/demographics")
@swag_from({
    "tags": ["Analytics"],
    "summary": "Religion and community estimate for a village",
    "description": (
        "Each voter's family name (first word of the roll name) is matched against the "
        "surname table. Unmatched names are reported as Unknown."
    ),
    "parameters": [VILLAGE_PARAM, *SCOPE_PARAMS],
    "responses": {
        200: {"description": "{religion, community, totalVoters}"},
        400: {"description": "Village parameter is required"},
        500: {"description": "Failed to fetch demographics data"},
    },
})
def demographics():
    args = load_or_abort(demographics_args_schema, request.args.to_dict())

    try:
        rows = db.session.query(Voter.name).filter(DEMOGRAPHICS_FILTERS.where(args)).all()
    except SQLAlchemyError:
        return _database_error("DB error during demographics", "Failed to fetch demographics data")

    return aggregate_demographics((row.name for row in rows), get_surname_lookup()), 200


@analytics_bp.get("/family-stats")
@swag_from({
    "tags": ["Analytics"],
    "summary": "Family clusters in a village",
    "description": (
        "Voters sharing a family name are grouped; groups of two or more are returned, "
        "largest first, with an estimate of distinct households."
    ),
    "parameters": [
        VILLAGE_PARAM,
        *SCOPE_PARAMS,
        {"name": "limit", "in": "query", "type": "integer", "default": 20, "maximum": FAMILY_MAX_LIMIT},
    ],
    "responses": {
        200: {"description": "{village, totalFamilies, families}"},
        400: {"description": "Please provide village name"},
        500: {"description": "Database error"},
    },
})
def family_stats():
    args = load_or_abort(family_stats_args_schema, request.args.to_dict())
    limit = min(max(args["limit"], 1), FAMILY_MAX_LIMIT)

    try:
        voters = Voter.query.filter(VILLAGE_SCOPE_FILTERS.where(args)).all()
    except SQLAlchemyError:
        return _database_error("DB error during family stats")

    families = cluster_families(voters, limit)
    return {
        "village": args["village"],
        "totalFamilies": len(families),
        "families": families,
    }, 200


def _male_female(male, female) -> dict:
    return {"male": male, "female": female}


@analytics_bp.get("/village-analytics")
@swag_from({
    "tags": ["Analytics"],
    "summary": "Detailed profile of one village",
    "description": (
        "Top surnames (last word of the name), age statistics, age bands split by gender, "
        "common first words of names and first-time/senior voters by gender."
    ),
    "parameters": [VILLAGE_PARAM, *SCOPE_PARAMS],
    "responses": {
        200: {"description": "Village profile"},
        400: {"description": "Village name required"},
        500: {"description": "Failed to fetch analytics"},
    },
})
def village_analytics():
    args = load_or_abort(village_analytics_args_schema, request.args.to_dict())
    where = VILLAGE_SCOPE_FILTERS.where(args)

    bands = {
        "age18_21": _age_between(18, 21),
        "age22_25": _age_between(22, 25),
        "age26_35": _age_between(26, 35),
        "age36_45": _age_between(36, 45),
        "age46_60": _age_between(46, 60),
        "age60plus": Voter.age > 60,
    }

    try:
        band_columns = []
        for key, condition in bands.items():
            band_columns += [
                count_where(condition).label(key),
                count_where(condition & is_male()).label(f"{key}_male"),
                count_where(condition & is_female()).label(f"{key}_female"),
            ]
        age_stats = (
            db.session.query(
                *band_columns,
                count_where(Voter.age >= 80).label("super_seniors"),
                func.avg(Voter.age).label("avg_age"),
                func.min(Voter.age).label("min_age"),
                func.max(Voter.age).label("max_age"),
            )
            .filter(where, Voter.age.isnot(None))
            .one()
        )
        gender = (
            db.session.query(
                func.count(Voter.id).label("total"),
                count_where(is_male()).label("male"),
                count_where(is_female()).label("female"),
                count_where(is_other_gender()).label("other"),
            )
            .filter(where)
            .one()
        )
        names = [
            row.name
            for row in db.session.query(Voter.name).filter(where, Voter.name.isnot(None), Voter.name != "")
        ]
    except SQLAlchemyError:
        return _database_error("DB error during village analytics", "Failed to fetch analytics")

    total = gender.total
    avg_age = round(float(age_stats.avg_age), 1) if age_stats.avg_age is not None else 0

    return {
        "village": args["village"],
        "total": total,
        "topSurnames": top_tokens(names, last_token, total),
        "ageStats": {
            "avgAge": avg_age,
            "minAge": age_stats.min_age or 0,
            "maxAge": age_stats.max_age or 0,
            "firstTimeVoters": age_stats.age18_21,
            "young22to25": age_stats.age22_25,
            "age26to35": age_stats.age26_35,
            "age36to45": age_stats.age36_45,
            "age46to60": age_stats.age46_60,
            "seniorCitizens": age_stats.age60plus,
            "superSeniors": age_stats.super_seniors,
        },
        "ageGroupsByGender": {
            key: _male_female(getattr(age_stats, f"{key}_male"), getattr(age_stats, f"{key}_female"))
            for key in bands
        },
        "genderStats": {
            "male": gender.male,
            "female": gender.female,
            "other": gender.other,
        },
        "topFirstNames": top_tokens(names, first_token, total),
        "firstTimeVotersByGender": _male_female(age_stats.age18_21_male, age_stats.age18_21_female),
        "seniorVotersByGender": _male_female(age_stats.age60plus_male, age_stats.age60plus_female),
    }, 200
