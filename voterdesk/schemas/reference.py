from marshmallow import Schema, fields, validate, EXCLUDE

from ..utils.reference_data import ELECTION_TYPES, RESERVATION_CATEGORIES
from ..utils.validation import not_blank


class ReservationFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    electionType = fields.Str(load_default=None, validate=validate.OneOf(ELECTION_TYPES))
    category = fields.Str(load_default=None, validate=validate.OneOf(RESERVATION_CATEGORIES))
    isWomenReserved = fields.Bool(load_default=None)
    divisionName = fields.Str(load_default=None)
    taluka = fields.Str(load_default=None)
    searchText = fields.Str(load_default=None)


class VillageLookupSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(
        required=True,
        validate=not_blank("Please provide village name"),
        error_messages={"required": "Please provide village name"},
    )
