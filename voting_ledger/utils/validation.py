import uuid
from flask import abort
from marshmallow import ValidationError


def _abort_validation(errors):
    abort(
        400,
        description={
            "code": "VALIDATION_ERROR",
            "message": "Validation error",
            "errors": errors,
        },
    )


def validate_or_abort(schema, payload):
    """Load `payload` through `schema`, aborting with a 400 envelope on failure."""
    try:
        return schema.load(payload)
    except ValidationError as err:
        _abort_validation(err.messages)


def parse_uuid_or_abort(value, field: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        _abort_validation({field: ["Not a valid UUID."]})


def parse_bool_arg(value) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")
