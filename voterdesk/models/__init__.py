from .voter import Voter  # noqa: F401
from .access_code import AccessCode  # noqa: F401
from .audit_log import AuditLog  # noqa: F401

# Import ALL models so SQLAlchemy registers them

__all__ = [
    "Voter",
    "AccessCode",
    "AuditLog",
]
