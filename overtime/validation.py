from __future__ import annotations

from datetime import date, time
from typing import Optional, Union

from .calculator import OvertimeCalculator, minutes_since_midnight
from .models import OvertimeCalculation, OvertimeErrorCode, ShiftInput, ValidationResult
from .security import is_valid_date, is_valid_time, sanitize_input

MESSAGES = {
    OvertimeErrorCode.MISSING_FIELD: "Todos os campos são obrigatórios",
    OvertimeErrorCode.INVALID_DATE: "Data inválida",
    OvertimeErrorCode.INVALID_TIME: "Horário inválido",
    OvertimeErrorCode.FUTURE_DATE: "Não é possível registrar horas extras para datas futuras",
    OvertimeErrorCode.INVALID_TIME_RANGE: "Horário de fim deve ser posterior ao horário de início",
    OvertimeErrorCode.NON_POSITIVE_HOURS: "O total de horas válidas deve ser maior que zero",
}

FieldValue = Union[str, date, time, None]


def _fail(code: OvertimeErrorCode) -> ValidationResult:
    return ValidationResult.failure(code, MESSAGES[code])


def _as_text(value: FieldValue) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, date):
        return value.isoformat()
    return sanitize_input(value)


def _parse_clock(text: str) -> time:
    hour, minute = text.split(":")
    return time(int(hour), int(minute))


def validate(
    work_date: FieldValue,
    start_time: FieldValue,
    end_time: FieldValue,
    calculation: Optional[OvertimeCalculation],
    *,
    today: Optional[date] = None,
    allow_overnight: bool = True,
) -> ValidationResult:
    """Check a shift in a fixed order and stop at the first problem.

    With ``allow_overnight`` an end time earlier than the start time is a shift
    crossing midnight, and only a zero-length shift is rejected. Without it the
    two times are compared as same-day clock values.
    """
    date_text = _as_text(work_date)
    start_text = _as_text(start_time)
    end_text = _as_text(end_time)

    if not date_text or not start_text or not end_text:
        return _fail(OvertimeErrorCode.MISSING_FIELD)
    if not is_valid_date(date_text):
        return _fail(OvertimeErrorCode.INVALID_DATE)
    if not is_valid_time(start_text) or not is_valid_time(end_text):
        return _fail(OvertimeErrorCode.INVALID_TIME)

    parsed_date = date.fromisoformat(date_text)
    if parsed_date > (today or date.today()):
        return _fail(OvertimeErrorCode.FUTURE_DATE)

    start_minutes = minutes_since_midnight(start_text)
    end_minutes = minutes_since_midnight(end_text)
    if allow_overnight:
        if start_minutes == end_minutes:
            return _fail(OvertimeErrorCode.INVALID_TIME_RANGE)
    elif start_minutes >= end_minutes:
        return _fail(OvertimeErrorCode.INVALID_TIME_RANGE)

    if calculation is None or calculation.net_hours <= 0:
        return _fail(OvertimeErrorCode.NON_POSITIVE_HOURS)

    shift = ShiftInput(
        work_date=parsed_date,
        start_time=_parse_clock(start_text),
        end_time=_parse_clock(end_text),
        lunch_discount=calculation.lunch_discount,
    )
    return ValidationResult.success(value=shift, calculation=calculation)


def validate_shift(
    work_date: FieldValue,
    start_time: FieldValue,
    end_time: FieldValue,
    lunch_discount: Optional[bool],
    calculator: OvertimeCalculator,
    *,
    today: Optional[date] = None,
    allow_overnight: bool = True,
) -> ValidationResult:
    """Sanitize, calculate and validate in one pass, as the entry form does.

    The calculation is attached even when validation fails so callers can
    still show the figures next to the error.
    """
    start_text = _as_text(start_time)
    end_text = _as_text(end_time)
    calculation = None
    if is_valid_time(start_text) and is_valid_time(end_text):
        calculation = calculator.calculate(start_text, end_text, lunch_discount)
    result = validate(
        work_date,
        start_text,
        end_text,
        calculation,
        today=today,
        allow_overnight=allow_overnight,
    )
    result.calculation = calculation
    return result
