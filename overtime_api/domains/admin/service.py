from __future__ import annotations

import re
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from overtime.models import EmployeeTotals, GlobalStats, round_half_up
from overtime_api.models.audit_log import AuditLog
from overtime_api.models.overtime_record import OvertimeRecord
from overtime_api.models.user import User


def escape_like(term: str) -> str:
    """Make ``%``, ``_`` and the escape character match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def global_stats(db: Session) -> GlobalStats:
    total_employees = db.query(func.count(User.id)).scalar() or 0
    total_hours, total_value = db.query(
        func.coalesce(func.sum(OvertimeRecord.net_hours), 0),
        func.coalesce(func.sum(OvertimeRecord.total_value), 0),
    ).one()
    return GlobalStats.build(total_employees, float(total_hours), float(total_value))


def employee_totals(db: Session, search: Optional[str] = None) -> List[EmployeeTotals]:
    """Every profile with its summed net hours and value, ordered by name.

    ``search`` matches name or email case-insensitively, or the CPF digits.
    """
    query = (
        db.query(
            User,
            func.coalesce(func.sum(OvertimeRecord.net_hours), 0),
            func.coalesce(func.sum(OvertimeRecord.total_value), 0),
            func.count(OvertimeRecord.id),
        )
        .outerjoin(OvertimeRecord, OvertimeRecord.user_id == User.id)
        .group_by(User.id)
    )
    if search:
        pattern = f"%{escape_like(search.lower())}%"
        clauses = [
            func.lower(User.full_name).like(pattern, escape="\\"),
            func.lower(User.email).like(pattern, escape="\\"),
        ]
        digits = re.sub(r"\D", "", search)
        if digits:
            clauses.append(User.cpf.contains(digits))
        query = query.filter(or_(*clauses))

    return [
        EmployeeTotals(
            user_id=user.id,
            full_name=user.full_name,
            email=user.email,
            cpf=user.cpf,
            total_hours=round_half_up(float(hours)),
            total_value=round_half_up(float(value)),
            record_count=count,
        )
        for user, hours, value, count in query.order_by(User.full_name).all()
    ]


def latest_audit_logs(db: Session, limit: int = 100) -> List[AuditLog]:
    return db.query(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit).all()
