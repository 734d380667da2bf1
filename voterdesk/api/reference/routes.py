from flask import Blueprint, request
from flasgger import swag_from

from ...schemas.reference import ReservationFilterSchema, VillageLookupSchema
from ...utils.reference_data import ELECTION_TYPES, RESERVATION_CATEGORIES, filter_reservations, get_reference_data
from ...utils.validation import load_or_abort

reference_bp = Blueprint("reference", __name__)

reservation_filter_schema = ReservationFilterSchema()
village_lookup_schema = VillageLookupSchema()


@reference_bp.get("/reservations")
@swag_from({
    "tags": ["Reference"],
    "summary": "Reserved seats for ZP divisions and PS wards",
    "parameters": [
        {"name": "electionType", "in": "query", "type": "string", "enum": list(ELECTION_TYPES)},
        {"name": "category", "in": "query", "type": "string", "enum": list(RESERVATION_CATEGORIES)},
        {"name": "isWomenReserved", "in": "query", "type": "boolean"},
        {"name": "divisionName", "in": "query", "type": "string"},
        {"name": "taluka", "in": "query", "type": "string"},
        {"name": "searchText", "in": "query", "type": "string"},
    ],
    "responses": {
        200: {"description": "{metadata, total, summary: {zp, ps}, reservations}"},
        400: {"description": "Validation error", "schema": {"$ref": "#/definitions/ErrorResponse"}},
    },
})
def reservations():
    filters = load_or_abort(reservation_filter_schema, request.args.to_dict())
    data = get_reference_data()

    seats = filter_reservations(data.seats, filters)
    return {
        "metadata": data.reservation_meta,
        "total": len(seats),
        "summary": data.seat_summary(seats),
        "reservations": seats,
    }, 200


@reference_bp.get("/ward-composition")
@swag_from({
    "tags": ["Reference"],
    "summary": "ZP divisions and PS wards with their villages",
    "responses": {200: {"description": "{metadata, zp, ps, villageIndex}"}},
})
def ward_composition():
    return get_reference_data().ward_composition, 200


@reference_bp.get("/ward-composition/divisions/<int:division_no>/wards")
@swag_from({
    "tags": ["Reference"],
    "summary": "PS wards under one electoral division",
    "parameters": [{"name": "division_no", "in": "path", "type": "integer", "required": True}],
    "responses": {
        200: {"description": "{division, wards}"},
        404: {"description": "Division not found"},
    },
})
def division_wards(division_no: int):
    wards = get_reference_data().wards_for_division(division_no)
    if wards is None:
        return {"error": "Division not found"}, 404
    return {"division": division_no, "wards": wards}, 200


@reference_bp.get("/ward-composition/villages")
@swag_from({
    "tags": ["Reference"],
    "summary": "Which division and ward a village belongs to",
    "parameters": [{"name": "name", "in": "query", "type": "string", "required": True}],
    "responses": {
        200: {"description": "Village index entry"},
        400: {"description": "Please provide village name"},
        404: {"description": "Village not found"},
    },
})
def village_lookup():
    args = load_or_abort(village_lookup_schema, request.args.to_dict())
    entry = get_reference_data().village_entry(args["name"])
    if entry is None:
        return {"error": "Village not found"}, 404
    return {"village": args["name"].strip(), **entry}, 200
