from flask import Blueprint, request, current_app
from flasgger import swag_from
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from ...models.voter import Voter
from ...schemas.voter import (
    SearchArgsSchema,
    VillageArgsSchema,
    ExportArgsSchema,
    VoterSchema,
    ExportVoterSchema,
)
from ...utils.filters import (
    SEARCH_FILTERS,
    VILLAGE_LIST_FILTERS,
    VILLAGE_VOTER_FILTERS,
    EXPORT_FILTERS,
)
from ...utils.pagination import clamp_page
from ...utils.validation import load_or_abort
from ...utils.voter_stats import count_where, is_male, is_female, serial_sort_key

voters_bp = Blueprint("voters", __name__)

SEARCH_MAX_LIMIT = 100
VILLAGE_MAX_LIMIT = 200
EXPORT_CAP = 20000
MIN_EPIC_LENGTH = 5

search_args_schema = SearchArgsSchema()
village_args_schema = VillageArgsSchema()
export_args_schema = ExportArgsSchema()

voter_schema = VoterSchema()
voter_many_schema = VoterSchema(many=True)
village_voter_many_schema = VoterSchema(
    many=True,
    only=("epic_id", "name", "age", "gender", "zp_division", "ps_ward", "serial_number"),
)
export_many_schema = ExportVoterSchema(many=True)

SCOPE_PARAMS = [
    {"name": "division", "in": "query", "type": "string", "required": False,
     "description": "ZP electoral division number"},
    {"name": "ward", "in": "query", "type": "string", "required": False,
     "description": "PS ward number"},
]


def _database_error(message: str):
    db.session.rollback()
    current_app.logger.exception(message)
    return {"error": "Database error"}, 500


@voters_bp.get("/search")
@swag_from({
    "tags": ["Voters"],
    "summary": "Search voters by name or village",
    "parameters": [
        {"name": "name", "in": "query", "type": "string", "required": False},
        {"name": "village", "in": "query", "type": "string", "required": False},
        *SCOPE_PARAMS,
        {"name": "page", "in": "query", "type": "integer", "default": 1},
        {"name": "limit", "in": "query", "type": "integer", "default": 50, "maximum": SEARCH_MAX_LIMIT},
    ],
    "responses": {
        200: {"description": "{total, page, limit, totalPages, voters}"},
        400: {"description": "Neither name nor village given", "schema": {"$ref": "#/definitions/ErrorResponse"}},
        500: {"description": "Database error"},
    },
})
def search():
    args = load_or_abort(search_args_schema, request.args.to_dict())
    page = clamp_page(args["page"], args["limit"], default_limit=50, max_limit=SEARCH_MAX_LIMIT)
    where = SEARCH_FILTERS.where(args)

    try:
        total = db.session.query(func.count(Voter.id)).filter(where).scalar()
        voters = (
            Voter.query.filter(where)
            .order_by(Voter.name)
            .limit(page.limit)
            .offset(page.offset)
            .all()
        )
    except SQLAlchemyError:
        return _database_error("DB error during voter search")

    return {"total": total, **page.meta(total), "voters": voter_many_schema.dump(voters)}, 200


@voters_bp.get("/epic/<string:epic_id>")
@swag_from({
    "tags": ["Voters"],
    "summary": "Look up one voter by EPIC id",
    "parameters": [{"name": "epic_id", "in": "path", "type": "string", "required": True}],
    "responses": {
        200: {"description": "{found: true, voter}", "schema": {"$ref": "#/definitions/Voter"}},
        400: {"description": "Invalid EPIC ID"},
        404: {"description": "{found: false, message}"},
        500: {"description": "Database error"},
    },
})
def by_epic(epic_id: str):
    epic_id = epic_id.upper().strip()
    if len(epic_id) < MIN_EPIC_LENGTH:
        return {"error": "Invalid EPIC ID"}, 400

    try:
        voter = Voter.query.filter_by(epic_id=epic_id).first()
    except SQLAlchemyError:
        return _database_error("DB error during EPIC lookup")

    if voter is None:
        return {"found": False, "message": "Voter not found"}, 404

    return {"found": True, "voter": voter_schema.dump(voter)}, 200


def _list_villages(args):
    rows = (
        db.session.query(
            Voter.village,
            Voter.zp_division_no,
            Voter.ps_ward_no,
            func.count(Voter.id).label("total"),
            count_where(is_male()).label("male"),
            count_where(is_female()).label("female"),
        )
        .filter(Voter.village.isnot(None), Voter.village != "")
        .filter(VILLAGE_LIST_FILTERS.where(args))
        .group_by(Voter.village, Voter.zp_division_no, Voter.ps_ward_no)
        .order_by(func.count(Voter.id).desc())
        .all()
    )
    return {
        "total": len(rows),
        "villages": [
            {
                "name": row.village,
                "divisionNo": row.zp_division_no,
                "wardNo": row.ps_ward_no,
                "total": row.total,
                "male": row.male,
                "female": row.female,
            }
            for row in rows
        ],
    }


def _village_voters(args):
    page = clamp_page(args["page"], args["limit"], default_limit=50, max_limit=VILLAGE_MAX_LIMIT)
    where = VILLAGE_VOTER_FILTERS.where(args)

    stats = (
        db.session.query(
            func.count(Voter.id).label("total"),
            count_where(is_male()).label("male"),
            count_where(is_female()).label("female"),
        )
        .filter(where)
        .one()
    )
    voters = (
        Voter.query.filter(where)
        .order_by(Voter.name)
        .limit(page.limit)
        .offset(page.offset)
        .all()
    )
    return {
        "village": args["name"],
        "stats": {"total": stats.total, "male": stats.male, "female": stats.female},
        **page.meta(stats.total),
        "voters": village_voter_many_schema.dump(voters),
    }


@voters_bp.get("/village")
@swag_from({
    "tags": ["Voters"],
    "summary": "List villages, or the voters of one village",
    "description": (
        "With list=true returns every village with its division/ward numbers and gender counts. "
        "Otherwise name is required and the village's voters are returned page by page."
    ),
    "parameters": [
        {"name": "list", "in": "query", "type": "boolean", "default": False},
        {"name": "name", "in": "query", "type": "string", "required": False},
        *SCOPE_PARAMS,
        {"name": "ageGroup", "in": "query", "type": "string",
         "enum": ["18-21", "22-35", "36-50", "51-60", "60+"]},
        {"name": "page", "in": "query", "type": "integer", "default": 1},
        {"name": "limit", "in": "query", "type": "integer", "default": 50, "maximum": VILLAGE_MAX_LIMIT},
    ],
    "responses": {
        200: {"description": "Village list or paginated village voters with stats"},
        400: {"description": "Please provide village name"},
        500: {"description": "Database error"},
    },
})
def village():
    args = load_or_abort(village_args_schema, request.args.to_dict())

    try:
        if args["list"]:
            return _list_villages(args), 200
        return _village_voters(args), 200
    except SQLAlchemyError:
        return _database_error("DB error during village query")


@voters_bp.get("/village/export")
@swag_from({
    "tags": ["Voters"],
    "summary": "Full voter list of a village for printing",
    "description": f"Unpaginated, ordered by serial number then name, at most {EXPORT_CAP} rows.",
    "parameters": [
        {"name": "name", "in": "query", "type": "string", "required": True},
        *SCOPE_PARAMS,
    ],
    "responses": {
        200: {"description": "{village, count, voters}"},
        400: {"description": "Village name required"},
        500: {"description": "Database error"},
    },
})
def village_export():
    args = load_or_abort(export_args_schema, request.args.to_dict())

    try:
        # Serials are free text ("12", "12/3", "A-7"), so ordering happens here
        keys = db.session.execute(
            db.select(Voter.id, Voter.serial_number, Voter.name).where(EXPORT_FILTERS.where(args))
        ).all()
        ids = [row.id for row in sorted(keys, key=serial_sort_key)[:EXPORT_CAP]]
        position = {voter_id: i for i, voter_id in enumerate(ids)}
        voters = sorted(
            Voter.query.filter(Voter.id.in_(ids)).all() if ids else [],
            key=lambda v: position[v.id],
        )
    except SQLAlchemyError:
        return _database_error("DB error during village export")

    return {
        "village": args["name"],
        "count": len(voters),
        "voters": export_many_schema.dump(voters),
    }, 200
