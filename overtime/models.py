from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Iterable, List, Optional


LUNCH_BREAK_HOURS = 1.0


def round_half_up(value: float) -> float:
    """Round to cents the way the payroll sheet does (half rounds up)."""
    return math.floor(value * 100 + 0.5) / 100


class OvertimeErrorCode(str, Enum):
    MISSING_FIELD = "MissingField"
    INVALID_DATE = "InvalidDate"
    INVALID_TIME = "InvalidTime"
    FUTURE_DATE = "FutureDate"
    INVALID_TIME_RANGE = "InvalidTimeRange"
    NON_POSITIVE_HOURS = "NonPositiveHours"


class OvertimeError(Exception):
    def __init__(self, code: OvertimeErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class ShiftInput:
    work_date: date
    start_time: time
    end_time: time
    lunch_discount: bool = False

    @property
    def start_text(self) -> str:
        return self.start_time.strftime("%H:%M")

    @property
    def end_text(self) -> str:
        return self.end_time.strftime("%H:%M")


@dataclass(frozen=True)
class OvertimeCalculation:
    total_hours: float
    net_hours: float
    total_value: float
    lunch_discount: bool
    hourly_rate: float


@dataclass
class ValidationResult:
    ok: bool
    error: Optional[OvertimeErrorCode] = None
    message: str = ""
    value: Optional[ShiftInput] = None
    calculation: Optional[OvertimeCalculation] = None

    @classmethod
    def success(
        cls, value: Optional[ShiftInput] = None, calculation: Optional[OvertimeCalculation] = None
    ) -> "ValidationResult":
        return cls(ok=True, value=value, calculation=calculation)

    @classmethod
    def failure(cls, error: OvertimeErrorCode, message: str) -> "ValidationResult":
        return cls(ok=False, error=error, message=message)

    def raise_for_error(self) -> "ValidationResult":
        if not self.ok and self.error is not None:
            raise OvertimeError(self.error, self.message)
        return self


@dataclass
class OvertimeSummary:
    total_hours: float = 0.0
    total_value: float = 0.0
    record_count: int = 0


@dataclass
class EmployeeTotals:
    user_id: str
    full_name: str
    email: str = ""
    cpf: str = ""
    total_hours: float = 0.0
    total_value: float = 0.0
    record_count: int = 0


@dataclass
class RecordRow:
    """Flat view of a stored record, used by the exporters."""

    work_date: date
    start_time: time
    end_time: time
    total_hours: float
    lunch_discount: bool
    net_hours: float
    total_value: float
    hourly_rate: float = 0.0


def summarize(rows: Iterable[RecordRow]) -> OvertimeSummary:
    summary = OvertimeSummary()
    for row in rows:
        summary.total_hours += row.net_hours
        summary.total_value += row.total_value
        summary.record_count += 1
    summary.total_hours = round_half_up(summary.total_hours)
    summary.total_value = round_half_up(summary.total_value)
    return summary


@dataclass
class GlobalStats:
    total_employees: int = 0
    total_hours: float = 0.0
    total_value: float = 0.0
    average_hours: float = 0.0

    @classmethod
    def build(cls, total_employees: int, total_hours: float, total_value: float) -> "GlobalStats":
        average = total_hours / total_employees if total_employees else 0.0
        return cls(
            total_employees=total_employees,
            total_hours=round_half_up(total_hours),
            total_value=round_half_up(total_value),
            average_hours=round_half_up(average),
        )


def top_employees(employees: Iterable[EmployeeTotals], limit: int = 5) -> List[EmployeeTotals]:
    """Employees with at least one record, most net hours first."""
    with_records = [e for e in employees if e.record_count]
    return sorted(with_records, key=lambda e: e.total_hours, reverse=True)[:limit]
