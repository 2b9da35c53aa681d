from __future__ import annotations

import csv
import io
from datetime import date, time
from pathlib import Path
from typing import IO, Iterable

from .models import EmployeeTotals, RecordRow


RECORD_HEADERS = [
    "Data",
    "Período",
    "Total Horas",
    "Desconto Almoço",
    "Horas Válidas",
    "Valor",
]

SUMMARY_HEADERS = [
    "Nome",
    "Email",
    "CPF",
    "Total de Horas Extras",
    "Valor Total (R$)",
    "Data do Relatório",
]


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def _fixed(value: float) -> str:
    return f"{float(value):.2f}"


def write_records(handle: IO[str], rows: Iterable[RecordRow]) -> None:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(RECORD_HEADERS)
    for row in rows:
        writer.writerow(
            [
                format_date(row.work_date),
                f"{format_clock(row.start_time)} - {format_clock(row.end_time)}",
                _fixed(row.total_hours),
                "Sim" if row.lunch_discount else "Não",
                _fixed(row.net_hours),
                _fixed(row.total_value),
            ]
        )


def records_to_csv(rows: Iterable[RecordRow]) -> str:
    buffer = io.StringIO()
    write_records(buffer, rows)
    return buffer.getvalue()


def export_records(path: Path, rows: Iterable[RecordRow]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        write_records(handle, rows)
    return path


def summary_to_csv(employees: Iterable[EmployeeTotals], report_date: date) -> str:
    """One line per employee followed by a grand-total line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(SUMMARY_HEADERS)
    total_hours = 0.0
    total_value = 0.0
    stamp = format_date(report_date)
    for employee in employees:
        total_hours += employee.total_hours
        total_value += employee.total_value
        writer.writerow(
            [
                employee.full_name,
                employee.email,
                employee.cpf,
                _fixed(employee.total_hours),
                _fixed(employee.total_value),
                stamp,
            ]
        )
    writer.writerow(["", "", "", _fixed(total_hours), _fixed(total_value), "TOTAL GERAL"])
    return buffer.getvalue()
