from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .csv_io import format_clock, format_date
from .models import RecordRow, summarize

EMPLOYER_NAME = "REDE JB"


@dataclass(frozen=True)
class StatementContext:
    full_name: str
    email: str
    cpf: str
    period_label: str
    issued_on: date


def _money(value: float) -> str:
    whole, cents = f"{value:,.2f}".split(".")
    return f"R$ {whole.replace(',', '.')},{cents}"


def _hours(value: float) -> str:
    return f"{value:.2f}h"


def _format_cpf(cpf: str) -> str:
    if len(cpf) != 11:
        return cpf
    return f"{cpf[:3]}.{cpf[3:6]}.{cpf[6:9]}-{cpf[9:]}"


def _build_story(context: StatementContext, rows: Sequence[RecordRow]) -> List[Any]:
    styles = getSampleStyleSheet()
    header_style = ParagraphStyle("statement_header", parent=styles["Heading3"], fontSize=11)
    body_style = ParagraphStyle("statement_body", parent=styles["Normal"], fontSize=9.5)

    story: List[Any] = [Paragraph("EXTRATO DE HORAS EXTRAS", styles["Title"])]
    story.append(
        Table(
            [
                [
                    Paragraph(f"<b>{EMPLOYER_NAME}</b><br/>Emitido em {format_date(context.issued_on)}", body_style),
                    Paragraph(
                        (
                            f"<b>{escape(context.full_name)}</b><br/>"
                            f"{escape(context.email)}<br/>CPF: {_format_cpf(context.cpf)}<br/>"
                            f"Período: {context.period_label}"
                        ),
                        body_style,
                    ),
                ]
            ],
            colWidths=[3.35 * inch, 3.35 * inch],
        )
    )
    story.append(HRFlowable(width="100%"))
    story.append(Spacer(1, 10))
    story.append(Paragraph("Registros", header_style))

    table_rows: List[List[str]] = [["Data", "Período", "Total", "Almoço", "Válidas", "Valor/h", "Valor"]]
    for row in rows:
        table_rows.append(
            [
                format_date(row.work_date),
                f"{format_clock(row.start_time)} - {format_clock(row.end_time)}",
                _hours(row.total_hours),
                "Sim" if row.lunch_discount else "Não",
                _hours(row.net_hours),
                _money(row.hourly_rate),
                _money(row.total_value),
            ]
        )
    if len(table_rows) == 1:
        table_rows.append(["Nenhum registro", "", "", "", "", "", ""])

    summary = summarize(rows)
    table_rows.append(["Total", "", "", "", _hours(summary.total_hours), "", _money(summary.total_value)])

    records_table = Table(table_rows, repeatRows=1)
    records_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                ("LINEABOVE", (0, -1), (-1, -1), 0.75, colors.black),
                ("LEFTPADDING", (0, 0), (-1, -1), 6),
                ("RIGHTPADDING", (0, 0), (-1, -1), 6),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    story.append(records_table)
    return story


def render_statement_pdf(context: StatementContext, rows: Sequence[RecordRow]) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=f"Horas extras - {context.full_name}",
    )
    doc.build(_build_story(context, rows))
    return buffer.getvalue()
