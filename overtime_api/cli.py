from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from sqlalchemy import func

from overtime.csv_io import export_records
from overtime_api.core.config import get_settings
from overtime_api.core.logging import configure_logging, get_logger
from overtime_api.db.session import init_db, session_scope
from overtime_api.domains.audit.service import purge_audit_logs
from overtime_api.domains.auth.throttle import purge_expired, retention_for
from overtime_api.domains.overtime.service import rows_for_user
from overtime_api.models.user import ROLE_ADMIN, User
from overtime_api.seed.seed_data import seed

logger = get_logger(__name__)


def _find_user(session, email: str) -> User | None:
    return session.query(User).filter(func.lower(User.email) == email.strip().lower()).one_or_none()


def cmd_init_db(args: argparse.Namespace) -> int:
    init_db()
    print("Database tables created")
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    init_db()
    with session_scope() as session:
        if session.query(User).count():
            print("Database already has users, skipping seed")
            return 1
        seed(session, hourly_rate=get_settings().hourly_rate)
    print("Seeded admin@redejb.com.br and colaborador@redejb.com.br")
    return 0


def cmd_grant_admin(args: argparse.Namespace) -> int:
    with session_scope() as session:
        user = _find_user(session, args.email)
        if user is None:
            print(f"No user with email {args.email}")
            return 1
        user.role = ROLE_ADMIN
    logger.info("admin_granted", email=args.email)
    print(f"{args.email} is now an admin")
    return 0


def cmd_cleanup(args: argparse.Namespace) -> int:
    now = datetime.utcnow()
    with session_scope() as session:
        audit_rows = purge_audit_logs(session, now)
        throttle_rows = purge_expired(session, now, retention_for(get_settings().signup_window_minutes))
    logger.info("cleanup_complete", audit_logs=audit_rows, rate_limits=throttle_rows)
    print(f"Removed {audit_rows} audit log(s) and {throttle_rows} rate limit row(s)")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    with session_scope() as session:
        user = _find_user(session, args.email)
        if user is None:
            print(f"No user with email {args.email}")
            return 1
        try:
            rows = rows_for_user(session, user.id, args.month)
        except ValueError as exc:
            print(exc)
            return 1
    path = export_records(Path(args.output), rows)
    print(f"Exported {len(rows)} record(s) to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="REDE JB overtime service operations")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="Load development users and records").set_defaults(func=cmd_seed)

    grant = sub.add_parser("grant-admin", help="Give a user the admin role")
    grant.add_argument("email")
    grant.set_defaults(func=cmd_grant_admin)

    sub.add_parser(
        "cleanup", help="Purge audit logs older than a year and stale rate limit rows"
    ).set_defaults(func=cmd_cleanup)

    export = sub.add_parser("export", help="Write one employee's records to CSV")
    export.add_argument("email")
    export.add_argument("output", help="Destination CSV path")
    export.add_argument("--month", help="YYYY-MM")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(get_settings().log_level)
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
