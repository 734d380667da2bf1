from sqlalchemy.dialects.postgresql import JSONB
from ..extensions import db
from ..utils.clock import utcnow


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)

    # Which access code was involved (nullable for unknown codes)
    access_code_id = db.Column(db.Integer, nullable=True, index=True)

    # What happened
    action = db.Column(db.String(80), nullable=False, index=True)  # e.g. ACCESS_CODE_ACCEPTED
    entity_type = db.Column(db.String(50), nullable=True, index=True)  # e.g. AUTH

    # Request context
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    details = db.Column(db.JSON().with_variant(JSONB, "postgresql"), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
