from __future__ import annotations

from calendar import monthrange
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Query, Session

from overtime.calculator import OvertimeCalculator
from overtime.models import RecordRow, ShiftInput, ValidationResult
from overtime.validation import validate_shift
from overtime_api.core.config import Settings
from overtime_api.core.logging import get_logger
from overtime_api.core.observability import records_rejected, records_saved
from overtime_api.domains.audit.service import record_audit, snapshot_record
from overtime_api.models.overtime_record import OvertimeRecord
from overtime_api.models.user import User

logger = get_logger(__name__)


class RecordNotFound(LookupError):
    pass


def month_bounds(month: str) -> Tuple[date, date]:
    """``YYYY-MM`` -> first and last day of that month."""
    try:
        year_text, month_text = month.split("-")
        year, month_number = int(year_text), int(month_text)
        _, last_day = monthrange(year, month_number)
    except ValueError:
        raise ValueError("Mês inválido, use o formato AAAA-MM") from None
    return date(year, month_number, 1), date(year, month_number, last_day)


def to_row(record: OvertimeRecord) -> RecordRow:
    return RecordRow(
        work_date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        total_hours=float(record.total_hours),
        lunch_discount=bool(record.lunch_discount),
        net_hours=float(record.net_hours),
        total_value=float(record.total_value),
        hourly_rate=float(record.hourly_rate),
    )


def records_for_user(db: Session, user_id: str, month: Optional[str] = None) -> Query:
    query = db.query(OvertimeRecord).filter(OvertimeRecord.user_id == user_id)
    if month:
        start, end = month_bounds(month)
        query = query.filter(OvertimeRecord.date >= start, OvertimeRecord.date <= end)
    return query.order_by(OvertimeRecord.date.desc(), OvertimeRecord.start_time.desc())


def get_visible_record(db: Session, record_id: str, user: User) -> OvertimeRecord:
    """Owners see their own rows; admins see every row."""
    query = db.query(OvertimeRecord).filter(OvertimeRecord.id == record_id)
    if not user.is_admin:
        query = query.filter(OvertimeRecord.user_id == user.id)
    record = query.one_or_none()
    if record is None:
        raise RecordNotFound(record_id)
    return record


def get_owned_record(db: Session, record_id: str, user: User) -> OvertimeRecord:
    """Only the owner may change a row, admins included."""
    record = (
        db.query(OvertimeRecord)
        .filter(OvertimeRecord.id == record_id, OvertimeRecord.user_id == user.id)
        .one_or_none()
    )
    if record is None:
        raise RecordNotFound(record_id)
    return record


def check_submission(
    work_date: str,
    start_time: str,
    end_time: str,
    lunch_discount: Optional[bool],
    calculator: OvertimeCalculator,
    settings: Settings,
    today: date,
) -> ValidationResult:
    result = validate_shift(
        work_date,
        start_time,
        end_time,
        lunch_discount,
        calculator,
        today=today,
        allow_overnight=settings.allow_overnight_shifts,
    )
    if not result.ok:
        records_rejected.add(1, {"code": result.error.value})
        logger.info("overtime_rejected", code=result.error.value, date=work_date, start=start_time, end=end_time)
    return result


def _apply(record: OvertimeRecord, result: ValidationResult) -> None:
    shift: ShiftInput = result.value
    calculation = result.calculation
    record.date = shift.work_date
    record.start_time = shift.start_time
    record.end_time = shift.end_time
    record.total_hours = calculation.total_hours
    record.lunch_discount = calculation.lunch_discount
    record.net_hours = calculation.net_hours
    record.hourly_rate = calculation.hourly_rate
    record.total_value = calculation.total_value


def create_record(db: Session, user: User, result: ValidationResult) -> OvertimeRecord:
    result.raise_for_error()
    record = OvertimeRecord(user_id=user.id)
    _apply(record, result)
    db.add(record)
    db.flush()
    record_audit(db, "INSERT", record, new_values=snapshot_record(record))
    db.commit()
    db.refresh(record)
    records_saved.add(1, {"action": "create"})
    logger.info("overtime_created", record_id=record.id, user_id=user.id, net_hours=float(record.net_hours))
    return record


def update_record(db: Session, record: OvertimeRecord, result: ValidationResult) -> OvertimeRecord:
    result.raise_for_error()
    before = snapshot_record(record)
    _apply(record, result)
    db.flush()
    record_audit(db, "UPDATE", record, old_values=before, new_values=snapshot_record(record))
    db.commit()
    db.refresh(record)
    records_saved.add(1, {"action": "update"})
    logger.info("overtime_updated", record_id=record.id, user_id=record.user_id)
    return record


def delete_record(db: Session, record: OvertimeRecord) -> None:
    record_id, user_id = record.id, record.user_id
    record_audit(db, "DELETE", record, old_values=snapshot_record(record))
    db.delete(record)
    db.commit()
    logger.info("overtime_deleted", record_id=record_id, user_id=user_id)


def rows_for_user(db: Session, user_id: str, month: Optional[str] = None) -> List[RecordRow]:
    return [to_row(record) for record in records_for_user(db, user_id, month)]

