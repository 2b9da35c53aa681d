from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from overtime.calculator import OvertimeCalculator
from overtime.csv_io import records_to_csv
from overtime.models import summarize
from overtime_api.core.config import Settings
from overtime_api.db.session import get_session
from overtime_api.domains.auth.dependencies import get_app_settings, get_current_user
from overtime_api.domains.overtime import service
from overtime_api.models.overtime_record import OvertimeRecord
from overtime_api.models.user import User

router = APIRouter(prefix="/overtime", tags=["overtime"])


def get_today() -> date:
    return date.today()


class OvertimeCreate(BaseModel):
    date: str
    start_time: str
    end_time: str
    lunch_discount: bool | None = None


class OvertimeUpdate(BaseModel):
    date: str
    start_time: str
    end_time: str
    lunch_discount: bool = False


class CalculationOut(BaseModel):
    total_hours: float
    net_hours: float
    total_value: float
    lunch_discount: bool
    hourly_rate: float


class PreviewOut(BaseModel):
    valid: bool
    code: str | None = None
    message: str | None = None
    calculation: CalculationOut | None = None


class OvertimeOut(BaseModel):
    id: str
    user_id: str
    date: date
    start_time: str
    end_time: str
    total_hours: float
    lunch_discount: bool
    net_hours: float
    hourly_rate: float
    total_value: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SummaryOut(BaseModel):
    total_hours: float
    total_value: float
    record_count: int


def serialize(record: OvertimeRecord) -> OvertimeOut:
    return OvertimeOut(
        id=record.id,
        user_id=record.user_id,
        date=record.date,
        start_time=record.start_time.strftime("%H:%M"),
        end_time=record.end_time.strftime("%H:%M"),
        total_hours=float(record.total_hours),
        lunch_discount=bool(record.lunch_discount),
        net_hours=float(record.net_hours),
        hourly_rate=float(record.hourly_rate),
        total_value=float(record.total_value),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _calculator(settings: Settings, hourly_rate: float | None = None) -> OvertimeCalculator:
    return OvertimeCalculator(
        hourly_rate=hourly_rate if hourly_rate is not None else settings.hourly_rate,
        auto_lunch_threshold=settings.auto_lunch_threshold_hours,
    )


def _month_query(month: str | None, db: Session, user_id: str):
    try:
        return service.records_for_user(db, user_id, month)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _load(loader, db: Session, record_id: str, user: User) -> OvertimeRecord:
    try:
        return loader(db, record_id, user)
    except service.RecordNotFound:
        raise HTTPException(status_code=404, detail="Overtime record not found") from None


@router.post("/preview", response_model=PreviewOut)
def preview(
    payload: OvertimeCreate,
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
) -> PreviewOut:
    result = service.check_submission(
        payload.date,
        payload.start_time,
        payload.end_time,
        payload.lunch_discount,
        _calculator(settings),
        settings,
        today,
    )
    calculation = CalculationOut(**vars(result.calculation)) if result.calculation else None
    return PreviewOut(
        valid=result.ok,
        code=result.error.value if result.error else None,
        message=result.message or None,
        calculation=calculation,
    )


@router.get("", response_model=list[OvertimeOut])
def list_records(
    month: str | None = Query(default=None, description="YYYY-MM"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[OvertimeOut]:
    return [serialize(record) for record in _month_query(month, db, user.id)]


@router.get("/summary", response_model=SummaryOut)
def my_summary(
    month: str | None = Query(default=None, description="YYYY-MM"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SummaryOut:
    records = _month_query(month, db, user.id)
    summary = summarize(service.to_row(record) for record in records)
    return SummaryOut(**vars(summary))


@router.get("/export.csv")
def export_my_records(
    month: str | None = Query(default=None, description="YYYY-MM"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> Response:
    rows = [service.to_row(record) for record in _month_query(month, db, user.id)]
    return Response(
        content=records_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="horas_extras.csv"'},
    )


@router.post("", response_model=OvertimeOut, status_code=201)
def create_overtime(
    payload: OvertimeCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
) -> OvertimeOut:
    result = service.check_submission(
        payload.date,
        payload.start_time,
        payload.end_time,
        payload.lunch_discount,
        _calculator(settings),
        settings,
        today,
    )
    return serialize(service.create_record(db, user, result))


@router.get("/{record_id}", response_model=OvertimeOut)
def get_overtime(
    record_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> OvertimeOut:
    return serialize(_load(service.get_visible_record, db, record_id, user))


@router.put("/{record_id}", response_model=OvertimeOut)
def update_overtime(
    record_id: str,
    payload: OvertimeUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
) -> OvertimeOut:
    record = _load(service.get_owned_record, db, record_id, user)
    result = service.check_submission(
        payload.date,
        payload.start_time,
        payload.end_time,
        payload.lunch_discount,
        _calculator(settings, hourly_rate=float(record.hourly_rate)),
        settings,
        today,
    )
    return serialize(service.update_record(db, record, result))


@router.delete("/{record_id}", status_code=204)
def delete_overtime(
    record_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    record = _load(service.get_owned_record, db, record_id, user)
    service.delete_record(db, record)
    return None
