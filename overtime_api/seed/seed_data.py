from datetime import date, time, timedelta

from sqlalchemy.orm import Session

from overtime.calculator import OvertimeCalculator
from overtime_api.domains.auth.dependencies import hash_password
from overtime_api.models import OvertimeRecord, User
from overtime_api.models.user import ROLE_ADMIN, ROLE_EMPLOYEE

# (days ago, start, end)
SAMPLE_SHIFTS = [
    (1, time(18, 0), time(21, 0)),
    (3, time(8, 0), time(18, 0)),
    (8, time(22, 0), time(2, 0)),
]


def seed(session: Session, hourly_rate: float = 15.57, today: date | None = None) -> None:
    today = today or date.today()
    admin = User(
        email="admin@redejb.com.br",
        hashed_password=hash_password("admin-dev-pass"),
        full_name="Administrador REDE JB",
        cpf="52998224725",
        role=ROLE_ADMIN,
    )
    employee = User(
        email="colaborador@redejb.com.br",
        hashed_password=hash_password("colaborador-dev"),
        full_name="Ana Souza",
        cpf="11144477735",
        role=ROLE_EMPLOYEE,
    )
    session.add_all([admin, employee])
    session.flush()

    calculator = OvertimeCalculator(hourly_rate=hourly_rate)
    for days_ago, start, end in SAMPLE_SHIFTS:
        calculation = calculator.calculate(start, end)
        session.add(
            OvertimeRecord(
                user_id=employee.id,
                date=today - timedelta(days=days_ago),
                start_time=start,
                end_time=end,
                total_hours=calculation.total_hours,
                lunch_discount=calculation.lunch_discount,
                net_hours=calculation.net_hours,
                hourly_rate=calculation.hourly_rate,
                total_value=calculation.total_value,
            )
        )
    session.commit()
