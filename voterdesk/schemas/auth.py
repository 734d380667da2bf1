from marshmallow import Schema, fields, EXCLUDE

from ..extensions import ma


class ValidateCodeSchema(Schema):
    """Login body; a missing code is answered by the route, not as a field error."""
    class Meta:
        unknown = EXCLUDE

    code = fields.Str(load_default=None, allow_none=True)


class TokenArgsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    token = fields.Str(load_default=None)


class AccessGrantSchema(ma.Schema):
    name = fields.Str(attribute="display_name")
    division_access = fields.Raw(data_key="divisionAccess", allow_none=True)
    ward_access = fields.Raw(data_key="wardAccess", allow_none=True)
    expiry_date = fields.DateTime(data_key="expiresAt", allow_none=True)
    uses_remaining = fields.Method("get_uses_remaining", data_key="usesRemaining")

    def get_uses_remaining(self, obj):
        return obj.uses_remaining()
