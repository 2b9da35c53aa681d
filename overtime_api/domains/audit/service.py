from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from overtime_api.models.audit_log import AuditLog
from overtime_api.models.overtime_record import OvertimeRecord

AUDIT_RETENTION = timedelta(days=365)


def snapshot_record(record: OvertimeRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "date": record.date.isoformat(),
        "start_time": record.start_time.strftime("%H:%M"),
        "end_time": record.end_time.strftime("%H:%M"),
        "total_hours": float(record.total_hours),
        "lunch_discount": bool(record.lunch_discount),
        "net_hours": float(record.net_hours),
        "hourly_rate": float(record.hourly_rate),
        "total_value": float(record.total_value),
    }


def record_audit(
    db: Session,
    action: str,
    record: OvertimeRecord,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction."""
    entry = AuditLog(
        user_id=record.user_id,
        action=action,
        table_name=OvertimeRecord.__tablename__,
        record_id=record.id,
        old_values=old_values,
        new_values=new_values,
    )
    db.add(entry)
    return entry


def purge_audit_logs(db: Session, now: datetime | None = None) -> int:
    cutoff = (now or datetime.utcnow()) - AUDIT_RETENTION
    return db.query(AuditLog).filter(AuditLog.created_at < cutoff).delete(synchronize_session=False)
