from marshmallow import Schema, fields, validates_schema, ValidationError, EXCLUDE

from ..extensions import ma
from ..utils.validation import not_blank


# ---- Request arguments ----

class _ArgsSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class ScopeArgsSchema(_ArgsSchema):
    # Kept as text: the filter layer parses the leading integer
    division = fields.Str(load_default=None)
    ward = fields.Str(load_default=None)


class SearchArgsSchema(ScopeArgsSchema):
    name = fields.Str(load_default=None)
    village = fields.Str(load_default=None)
    page = fields.Int(load_default=1)
    limit = fields.Int(load_default=50)

    @validates_schema
    def name_or_village(self, data, **kwargs):
        if not data.get("name") and not data.get("village"):
            raise ValidationError("Please provide name or village to search")


class VillageArgsSchema(ScopeArgsSchema):
    name = fields.Str(load_default=None)
    list = fields.Bool(load_default=False)
    ageGroup = fields.Str(load_default=None)
    page = fields.Int(load_default=1)
    limit = fields.Int(load_default=50)

    @validates_schema
    def name_unless_listing(self, data, **kwargs):
        if not data.get("list") and not data.get("name"):
            raise ValidationError("Please provide village name", field_name="name")


def _required_village(message: str) -> fields.Str:
    return fields.Str(
        required=True,
        validate=not_blank(message),
        error_messages={"required": message},
    )


class ExportArgsSchema(ScopeArgsSchema):
    name = _required_village("Village name required")


class DemographicsArgsSchema(ScopeArgsSchema):
    village = _required_village("Village parameter is required")


class FamilyStatsArgsSchema(ScopeArgsSchema):
    village = _required_village("Please provide village name")
    limit = fields.Int(load_default=20)


class VillageAnalyticsArgsSchema(ScopeArgsSchema):
    village = _required_village("Village name required")


# ---- Responses ----

class VoterSchema(ma.Schema):
    epic_id = fields.Str(data_key="epicId")
    name = fields.Str(allow_none=True)
    age = fields.Int(allow_none=True)
    gender = fields.Str(allow_none=True)
    village = fields.Str(allow_none=True)
    zp_division = fields.Str(data_key="division", allow_none=True)
    zp_division_no = fields.Int(data_key="divisionNo", allow_none=True)
    ps_ward = fields.Str(data_key="ward", allow_none=True)
    ps_ward_no = fields.Int(data_key="wardNo", allow_none=True)
    taluka = fields.Str(allow_none=True)
    serial_number = fields.Str(data_key="serialNumber", allow_none=True)


class ExportVoterSchema(ma.Schema):
    """Printable roll row; division and ward are the numbers here."""
    serial_number = fields.Str(data_key="serialNumber", allow_none=True)
    name = fields.Str(allow_none=True)
    age = fields.Int(allow_none=True)
    gender = fields.Str(allow_none=True)
    epic_id = fields.Str(data_key="epicId")
    zp_division_no = fields.Int(data_key="division", allow_none=True)
    ps_ward_no = fields.Int(data_key="ward", allow_none=True)
