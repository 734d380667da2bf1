from typing import Optional, Dict, Any
from flask import request

from ..extensions import db
from ..models.audit_log import AuditLog


def audit_log(
    action: str,
    entity_type: Optional[str] = "AUTH",
    access_code_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Stage an audit row on the current session; the caller commits."""
    ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    ua = request.headers.get("User-Agent")

    log = AuditLog(
        access_code_id=access_code_id,
        action=action,
        entity_type=entity_type,
        ip_address=ip,
        user_agent=ua[:255] if ua else None,
        details=details or None,
    )
    db.session.add(log)
