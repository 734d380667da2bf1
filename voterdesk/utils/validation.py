from flask import abort
from marshmallow import ValidationError


def _first_message(errors) -> str:
    if isinstance(errors, dict):
        for value in errors.values():
            return _first_message(value)
    if isinstance(errors, (list, tuple)) and errors:
        return _first_message(errors[0])
    if isinstance(errors, str):
        return errors
    return "Validation error"


def load_or_abort(schema, payload):
    """
    Deserialize request data with a marshmallow schema, or answer 400 with
    the first error as the message and the full error map as details.
    """
    try:
        return schema.load(payload)
    except ValidationError as err:
        abort(
            400,
            description={
                "code": "VALIDATION_ERROR",
                "message": _first_message(err.messages),
                "errors": err.messages,
            },
        )


def not_blank(message: str):
    """Validator rejecting empty and whitespace-only strings."""
    def _validate(value: str) -> None:
        if not value or not value.strip():
            raise ValidationError(message)
    return _validate
