from datetime import datetime
from sqlalchemy import or_
from ..extensions import db
from ..utils.clock import utcnow


class AccessCode(db.Model):
    """
    Shared access code handed out to customers. Codes are created and
    deactivated out of band; the API only consumes uses and reads state.
    """
    __tablename__ = "access_codes"

    REASON_INACTIVE = "inactive"
    REASON_EXPIRED = "expired"
    REASON_USAGE_LIMIT = "usage_limit"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(64), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False)
    customer_name = db.Column(db.String(255), nullable=True)

    # Scope of premium access: lists of ZP division / PS ward numbers
    division_access = db.Column(db.JSON, nullable=True)
    ward_access = db.Column(db.JSON, nullable=True)

    expiry_date = db.Column(db.DateTime, nullable=True)
    max_uses = db.Column(db.Integer, nullable=True)
    current_uses = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_used_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @staticmethod
    def normalize(code: str) -> str:
        return code.strip().upper()

    @classmethod
    def find_by_code(cls, code: str) -> "AccessCode | None":
        return cls.query.filter(db.func.upper(cls.code) == cls.normalize(code)).first()

    @property
    def display_name(self) -> str:
        if self.customer_name:
            return f"{self.name} - {self.customer_name}"
        return self.name

    def is_expired(self, now: datetime) -> bool:
        return self.expiry_date is not None and now > self.expiry_date

    def uses_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def rejection_reason(self, now: datetime) -> str | None:
        """
        First failing check, evaluated in a fixed order:
        inactive, expired, usage limit. None when the code is usable.
        """
        if not self.is_active:
            return self.REASON_INACTIVE
        if self.is_expired(now):
            return self.REASON_EXPIRED
        if self.uses_exhausted():
            return self.REASON_USAGE_LIMIT
        return None

    def uses_remaining(self) -> int | None:
        if self.max_uses is None:
            return None
        return max(self.max_uses - self.current_uses, 0)

    @classmethod
    def consume_use(cls, code_id: int, now: datetime | None = None) -> bool:
        """
        Increment-and-check in a single UPDATE so concurrent logins can
        never push current_uses past max_uses. Returns False when the row
        no longer satisfies the active/expiry/cap conditions.
        """
        now = now or utcnow()
        updated = (
            cls.query
            .filter(
                cls.id == code_id,
                cls.is_active.is_(True),
                or_(cls.expiry_date.is_(None), cls.expiry_date >= now),
                or_(cls.max_uses.is_(None), cls.current_uses < cls.max_uses),
            )
            .update(
                {
                    cls.current_uses: cls.current_uses + 1,
                    cls.last_used_at: now,
                },
                synchronize_session=False,
            )
        )
        return updated == 1
