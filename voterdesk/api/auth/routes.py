from flask import Blueprint, request, current_app
from flasgger import swag_from
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from ...models.access_code import AccessCode
from ...schemas.auth import ValidateCodeSchema, TokenArgsSchema, AccessGrantSchema
from ...utils.audit import audit_log
from ...utils.clock import utcnow
from ...utils.validation import load_or_abort

auth_bp = Blueprint("auth", __name__)

validate_code_schema = ValidateCodeSchema()
token_args_schema = TokenArgsSchema()
access_grant_schema = AccessGrantSchema()

LOGIN_REJECTIONS = {
    AccessCode.REASON_INACTIVE: "This access code has been deactivated",
    AccessCode.REASON_EXPIRED: "This access code has expired",
    AccessCode.REASON_USAGE_LIMIT: "This access code has reached its usage limit",
}

VERIFY_FLAGS = {
    AccessCode.REASON_INACTIVE: "deactivated",
    AccessCode.REASON_EXPIRED: "expired",
    AccessCode.REASON_USAGE_LIMIT: "usageLimitReached",
}


def _reject(action: str, message: str, access_code_id: int | None = None, details: dict | None = None):
    audit_log(action=action, access_code_id=access_code_id, details=details)
    db.session.commit()
    return {"valid": False, "error": message}, 401


@auth_bp.post("/validate-code")
@swag_from({
    "tags": ["Auth"],
    "summary": "Log in with an access code",
    "description": (
        "Checks the code (unknown, inactive, expired, usage limit, in that order). "
        "On success one use is consumed and a signed session token is returned."
    ),
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"code": {"type": "string", "example": "DEMO2025"}},
            "required": ["code"],
        },
    }],
    "responses": {
        200: {"description": "Code accepted, token returned"},
        400: {"description": "No code provided"},
        401: {"description": "Invalid, deactivated, expired or exhausted code"},
        500: {"description": "Server error"},
    },
})
def login():
    payload = request.get_json(silent=True) or {}
    payload = load_or_abort(validate_code_schema, payload)

    raw_code = payload.get("code")
    if not raw_code or not raw_code.strip():
        return {"valid": False, "error": "No code provided"}, 400

    normalized = AccessCode.normalize(raw_code)

    try:
        code = AccessCode.find_by_code(normalized)
        if code is None:
            return _reject("ACCESS_CODE_REJECTED", "Invalid access code",
                           details={"code": normalized, "reason": "unknown"})

        now = utcnow()
        reason = code.rejection_reason(now)
        if reason is not None:
            return _reject("ACCESS_CODE_REJECTED", LOGIN_REJECTIONS[reason],
                           access_code_id=code.id, details={"reason": reason})

        # Another login may have taken the last use since the checks above
        if not AccessCode.consume_use(code.id, now):
            db.session.rollback()
            return _reject(
                "ACCESS_CODE_REJECTED",
                LOGIN_REJECTIONS[AccessCode.REASON_USAGE_LIMIT],
                access_code_id=code.id,
                details={"reason": AccessCode.REASON_USAGE_LIMIT},
            )

        audit_log(action="ACCESS_CODE_ACCEPTED", access_code_id=code.id)
        db.session.commit()
        db.session.refresh(code)

        token = create_access_token(identity=str(code.id), additional_claims={"code": normalized})
        return {"valid": True, "token": token, **access_grant_schema.dump(code)}, 200

    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("DB error during access-code login")
        return {"valid": False, "error": "Server error"}, 500


@auth_bp.get("/validate-code")
@swag_from({
    "tags": ["Auth"],
    "summary": "Verify a session token",
    "description": (
        "Re-checks the code behind a token without consuming a use. "
        "Reports deactivated, expired or usageLimitReached when one of those checks fails."
    ),
    "parameters": [
        {"name": "token", "in": "query", "type": "string", "required": False},
    ],
    "responses": {
        200: {"description": "{valid: true, ...} or {valid: false, <reason>: true}"},
    },
})
def verify():
    args = load_or_abort(token_args_schema, request.args.to_dict())
    token = args.get("token")
    if not token:
        return {"valid": False}, 200

    try:
        claims = decode_token(token)
        code_id = int(claims["sub"])
        claimed_code = claims["code"]
    except (PyJWTError, JWTExtendedException, KeyError, ValueError, TypeError):
        return {"valid": False}, 200

    try:
        code = db.session.get(AccessCode, code_id)
        if code is None or AccessCode.normalize(code.code) != claimed_code:
            return {"valid": False}, 200

        reason = code.rejection_reason(utcnow())
        if reason is not None:
            return {"valid": False, VERIFY_FLAGS[reason]: True}, 200

        grant = access_grant_schema.dump(code)
        grant.pop("expiresAt", None)
        return {"valid": True, **grant}, 200

    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("DB error during token verify")
        return {"valid": False}, 200
