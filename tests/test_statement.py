from datetime import date, time

from overtime.models import RecordRow
from overtime.statement import StatementContext, render_statement_pdf


def context(**overrides):
    values = dict(
        full_name="Ana Souza",
        email="ana@redejb.com.br",
        cpf="52998224725",
        period_label="06/2024",
        issued_on=date(2024, 6, 10),
    )
    values.update(overrides)
    return StatementContext(**values)


def test_statement_renders_a_pdf():
    rows = [RecordRow(date(2024, 6, 3), time(8, 0), time(18, 0), 10.0, True, 9.0, 140.13, 15.57)]

    pdf = render_statement_pdf(context(), rows)

    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_statement_without_records_and_with_markup_in_name():
    pdf = render_statement_pdf(context(full_name="Ana <b>& Cia"), [])

    assert pdf.startswith(b"%PDF")
