from contextlib import contextmanager
from datetime import datetime, timedelta

import pytest

from overtime_api import cli
from overtime_api.db.session import init_db
from overtime_api.models import AuditLog, OvertimeRecord, User


@pytest.fixture(autouse=True)
def ops_database(monkeypatch, testing_engine, session_factory):
    @contextmanager
    def testing_scope():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    monkeypatch.setattr(cli, "session_scope", testing_scope)
    monkeypatch.setattr(cli, "init_db", lambda: init_db(testing_engine))


def test_seed_loads_users_once(capsys, db):
    assert cli.main(["seed"]) == 0
    assert cli.main(["seed"]) == 1

    users = {user.email: user for user in db.query(User).all()}
    assert users["admin@redejb.com.br"].is_admin
    assert not users["colaborador@redejb.com.br"].is_admin
    records = db.query(OvertimeRecord).all()
    assert len(records) == 3
    assert all(float(record.net_hours) > 0 for record in records)
    assert "skipping seed" in capsys.readouterr().out


def test_grant_admin(capsys, client, employee, db):
    assert cli.main(["grant-admin", "ANA@redejb.com.br"]) == 0
    assert db.query(User).filter(User.email == "ana@redejb.com.br").one().is_admin

    assert cli.main(["grant-admin", "nobody@redejb.com.br"]) == 1
    assert "No user with email" in capsys.readouterr().out


def test_cleanup_purges_old_audit_rows(capsys, db):
    db.add_all(
        [
            AuditLog(action="INSERT", created_at=datetime.utcnow() - timedelta(days=400)),
            AuditLog(action="INSERT", created_at=datetime.utcnow() - timedelta(days=10)),
        ]
    )
    db.commit()

    assert cli.main(["cleanup"]) == 0

    assert db.query(AuditLog).count() == 1
    assert "Removed 1 audit log(s)" in capsys.readouterr().out


def test_export_writes_employee_csv(tmp_path, client, employee):
    headers, _ = employee
    client.post(
        "/overtime",
        json={"date": "2024-06-03", "start_time": "18:00", "end_time": "20:00", "lunch_discount": False},
        headers=headers,
    )
    output = tmp_path / "ana.csv"

    assert cli.main(["export", "ana@redejb.com.br", str(output), "--month", "2024-06"]) == 0

    assert output.read_text(encoding="utf-8").splitlines()[1] == "03/06/2024,18:00 - 20:00,2.00,Não,2.00,31.14"


def test_export_rejects_a_bad_month(capsys, tmp_path, client, employee):
    output = tmp_path / "ana.csv"

    assert cli.main(["export", "ana@redejb.com.br", str(output), "--month", "2024-13"]) == 1

    assert "Mês inválido" in capsys.readouterr().out
    assert not output.exists()
