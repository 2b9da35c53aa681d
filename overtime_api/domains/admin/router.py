from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from overtime.csv_io import records_to_csv, summary_to_csv
from overtime.models import top_employees
from overtime.security import inspect_input, sanitize_input
from overtime.statement import StatementContext, render_statement_pdf
from overtime_api.core.logging import get_logger
from overtime_api.db.session import get_session
from overtime_api.domains.admin import service as admin_service
from overtime_api.domains.auth.dependencies import require_admin
from overtime_api.domains.overtime import service as overtime_service
from overtime_api.domains.overtime.router import OvertimeOut, get_today, serialize
from overtime_api.models.user import User

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = get_logger(__name__)


class StatsOut(BaseModel):
    total_employees: int
    total_hours: float
    total_value: float
    average_hours: float


class EmployeeStatsOut(BaseModel):
    user_id: str
    full_name: str
    email: str
    cpf: str
    total_hours: float
    total_value: float
    record_count: int


class AuditLogOut(BaseModel):
    id: str
    user_id: str | None
    action: str
    table_name: str | None
    record_id: str | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    created_at: datetime | None


def _employee(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return user


def _rows(db: Session, user_id: str, month: str | None):
    try:
        return overtime_service.rows_for_user(db, user_id, month)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_session)) -> StatsOut:
    return StatsOut(**vars(admin_service.global_stats(db)))


@router.get("/employees", response_model=list[EmployeeStatsOut])
def employees(
    search: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_session),
) -> list[EmployeeStatsOut]:
    term = sanitize_input(search)
    safe, message = inspect_input(term, "search")
    if not safe:
        raise HTTPException(status_code=400, detail=message)
    return [EmployeeStatsOut(**vars(totals)) for totals in admin_service.employee_totals(db, term or None)]


@router.get("/top-employees", response_model=list[EmployeeStatsOut])
def top(
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_session),
) -> list[EmployeeStatsOut]:
    ranked = top_employees(admin_service.employee_totals(db), limit=limit)
    return [EmployeeStatsOut(**vars(totals)) for totals in ranked]


@router.get("/employees/{user_id}/records", response_model=list[OvertimeOut])
def employee_records(
    user_id: str,
    month: str | None = Query(default=None, description="YYYY-MM"),
    db: Session = Depends(get_session),
) -> list[OvertimeOut]:
    _employee(db, user_id)
    try:
        records = overtime_service.records_for_user(db, user_id, month).all()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return [serialize(record) for record in records]


@router.get("/employees/{user_id}/records.csv")
def employee_records_csv(
    user_id: str,
    month: str | None = Query(default=None, description="YYYY-MM"),
    db: Session = Depends(get_session),
) -> Response:
    employee = _employee(db, user_id)
    rows = _rows(db, user_id, month)
    filename = f"horas_extras_{employee.cpf}.csv"
    return Response(
        content=records_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/employees/{user_id}/statement.pdf")
def employee_statement(
    user_id: str,
    month: str | None = Query(default=None, description="YYYY-MM"),
    db: Session = Depends(get_session),
    today: date = Depends(get_today),
) -> Response:
    employee = _employee(db, user_id)
    rows = _rows(db, user_id, month)
    if month:
        year, month_number = month.split("-")
        period_label = f"{month_number}/{year}"
    else:
        period_label = "Todos os registros"
    context = StatementContext(
        full_name=employee.full_name,
        email=employee.email,
        cpf=employee.cpf,
        period_label=period_label,
        issued_on=today,
    )
    logger.info("statement_rendered", user_id=user_id, records=len(rows))
    return Response(
        content=render_statement_pdf(context, rows),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="extrato_{employee.cpf}.pdf"'},
    )


@router.get("/report.csv")
def summary_report(
    db: Session = Depends(get_session),
    today: date = Depends(get_today),
) -> Response:
    content = summary_to_csv(admin_service.employee_totals(db), today)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="relatorio_horas_extras_{today.isoformat()}.csv"'},
    )


@router.get("/audit-logs", response_model=list[AuditLogOut])
def audit_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_session),
) -> list[AuditLogOut]:
    return [
        AuditLogOut(
            id=entry.id,
            user_id=entry.user_id,
            action=entry.action,
            table_name=entry.table_name,
            record_id=entry.record_id,
            old_values=entry.old_values,
            new_values=entry.new_values,
            created_at=entry.created_at,
        )
        for entry in admin_service.latest_audit_logs(db, limit)
    ]
