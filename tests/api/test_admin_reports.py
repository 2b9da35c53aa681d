import pytest

from overtime_api.domains.admin.service import escape_like

SHIFT = {"date": "2024-06-03", "start_time": "08:00", "end_time": "18:00", "lunch_discount": True}


@pytest.fixture
def populated(client, employee, admin, register):
    """Ana with two records, Bruno with one, Carla with none."""
    ana_headers, ana_id = employee
    bruno_headers, bruno_id = register("bruno@redejb.com.br", "11144477735", full_name="Bruno Lima")
    _, carla_id = register("carla@redejb.com.br", "39053344705", full_name="Carla Dias")
    client.post("/overtime", json=SHIFT, headers=ana_headers)
    client.post(
        "/overtime",
        json={"date": "2024-05-10", "start_time": "18:00", "end_time": "21:00", "lunch_discount": False},
        headers=ana_headers,
    )
    client.post(
        "/overtime",
        json={"date": "2024-06-07", "start_time": "18:00", "end_time": "20:00", "lunch_discount": False},
        headers=bruno_headers,
    )
    admin_headers, _ = admin
    return {"admin": admin_headers, "ana": ana_id, "bruno": bruno_id, "carla": carla_id, "ana_headers": ana_headers}


def test_admin_routes_reject_employees(client, employee):
    headers, user_id = employee

    for path in (
        "/admin/stats",
        "/admin/employees",
        "/admin/top-employees",
        f"/admin/employees/{user_id}/records",
        "/admin/report.csv",
        "/admin/audit-logs",
    ):
        response = client.get(path, headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"


def test_stats_cover_every_profile(client, populated):
    stats = client.get("/admin/stats", headers=populated["admin"]).json()

    # admin + Ana + Bruno + Carla
    assert stats["total_employees"] == 4
    assert stats["total_hours"] == 14.0
    assert stats["total_value"] == 217.98
    assert stats["average_hours"] == 3.5


def test_stats_on_an_empty_system(client, admin):
    headers, _ = admin

    stats = client.get("/admin/stats", headers=headers).json()

    assert stats == {"total_employees": 1, "total_hours": 0.0, "total_value": 0.0, "average_hours": 0.0}


def test_employee_list_has_totals_and_is_sorted_by_name(client, populated):
    employees = client.get("/admin/employees", headers=populated["admin"]).json()

    assert [e["full_name"] for e in employees] == ["Ana Souza", "Bruno Lima", "Carla Dias", "Zeca Admin"]
    ana = employees[0]
    assert ana["total_hours"] == 12.0
    assert ana["total_value"] == 186.84
    assert ana["record_count"] == 2
    assert employees[2]["record_count"] == 0


@pytest.mark.parametrize(
    "term,expected",
    [
        ("bruno", ["Bruno Lima"]),
        ("CARLA@", ["Carla Dias"]),
        ("529.982", ["Ana Souza"]),
        ("redejb", ["Ana Souza", "Bruno Lima", "Carla Dias", "Zeca Admin"]),
        ("ninguém", []),
        ("_", []),
        ("%", []),
        ("ana_souza", []),
    ],
)
def test_employee_search(client, populated, term, expected):
    response = client.get("/admin/employees", params={"search": term}, headers=populated["admin"])

    assert [e["full_name"] for e in response.json()] == expected


def test_suspicious_search_is_refused(client, populated):
    response = client.get(
        "/admin/employees", params={"search": "' OR 1=1 --"}, headers=populated["admin"]
    )

    assert response.status_code == 400


def test_top_employees_ranks_by_hours(client, populated):
    top = client.get("/admin/top-employees?limit=5", headers=populated["admin"]).json()

    assert [e["full_name"] for e in top] == ["Ana Souza", "Bruno Lima"]


def test_employee_records_by_month(client, populated):
    path = f"/admin/employees/{populated['ana']}/records"

    everything = client.get(path, headers=populated["admin"]).json()
    june = client.get(path, params={"month": "2024-06"}, headers=populated["admin"]).json()

    assert [r["date"] for r in everything] == ["2024-06-03", "2024-05-10"]
    assert [r["date"] for r in june] == ["2024-06-03"]


def test_unknown_employee_is_404(client, admin):
    headers, _ = admin

    assert client.get("/admin/employees/missing/records", headers=headers).status_code == 404
    assert client.get("/admin/employees/missing/statement.pdf", headers=headers).status_code == 404


def test_employee_csv_export(client, populated):
    response = client.get(
        f"/admin/employees/{populated['bruno']}/records.csv", headers=populated["admin"]
    )

    assert response.status_code == 200
    assert "horas_extras_11144477735.csv" in response.headers["content-disposition"]
    assert response.text.splitlines()[1] == "07/06/2024,18:00 - 20:00,2.00,Não,2.00,31.14"


def test_statement_pdf(client, populated):
    response = client.get(
        f"/admin/employees/{populated['ana']}/statement.pdf",
        params={"month": "2024-06"},
        headers=populated["admin"],
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_summary_report_csv(client, populated):
    response = client.get("/admin/report.csv", headers=populated["admin"])

    lines = response.text.splitlines()
    assert lines[0] == "Nome,Email,CPF,Total de Horas Extras,Valor Total (R$),Data do Relatório"
    assert lines[1] == "Ana Souza,ana@redejb.com.br,52998224725,12.00,186.84,10/06/2024"
    assert lines[-1] == ",,,14.00,217.98,TOTAL GERAL"
    assert len(lines) == 6


def test_audit_log_listing(client, populated):
    entries = client.get("/admin/audit-logs", headers=populated["admin"]).json()

    assert len(entries) == 3
    assert {entry["action"] for entry in entries} == {"INSERT"}
    assert all(entry["table_name"] == "overtime_records" for entry in entries)
    assert len(client.get("/admin/audit-logs?limit=1", headers=populated["admin"]).json()) == 1


def test_wildcards_in_search_match_literally(client, admin, register):
    headers, _ = admin
    register("maria_lima@redejb.com.br", "39053344705", full_name="Maria Lima")
    register("mariana@redejb.com.br", "11144477735", full_name="Mariana Costa")

    response = client.get("/admin/employees", params={"search": "maria_"}, headers=headers)

    assert [e["email"] for e in response.json()] == ["maria_lima@redejb.com.br"]


def test_escape_like():
    assert escape_like(r"10%_a\b") == r"10\%\_a\\b"
