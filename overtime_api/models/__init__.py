from .audit_log import AuditLog
from .overtime_record import OvertimeRecord
from .rate_limit import RateLimitEntry
from .session_token import SessionToken
from .user import User

__all__ = ["User", "OvertimeRecord", "SessionToken", "AuditLog", "RateLimitEntry"]
