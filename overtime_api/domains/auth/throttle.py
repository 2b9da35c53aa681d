from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from overtime_api.models.rate_limit import RateLimitEntry

RETENTION = timedelta(hours=1)


def window_start_for(now: datetime, window_minutes: int) -> datetime:
    """Floor ``now`` to the start of its fixed window."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = int((now - midnight).total_seconds() // 60)
    return midnight + timedelta(minutes=elapsed - elapsed % window_minutes)


def retention_for(window_minutes: int) -> timedelta:
    """Counters live at least an hour and never less than their own window."""
    return max(RETENTION, timedelta(minutes=window_minutes))


def purge_expired(
    db: Session, now: datetime, retention: timedelta = RETENTION, action: str | None = None
) -> int:
    query = db.query(RateLimitEntry).filter(RateLimitEntry.window_start < now - retention)
    if action is not None:
        query = query.filter(RateLimitEntry.action == action)
    return query.delete(synchronize_session=False)


def check_rate_limit(
    db: Session,
    identifier: str,
    action: str,
    max_attempts: int = 5,
    window_minutes: int = 15,
    now: datetime | None = None,
) -> bool:
    """Count one attempt for ``identifier``/``action`` and report whether it is allowed.

    Stale windows for ``action`` are purged on every call. The counter row is keyed by the
    window start, so a new window starts from zero.
    """
    now = now or datetime.utcnow()
    purge_expired(db, now, retention_for(window_minutes), action=action)
    window_start = window_start_for(now, window_minutes)

    entry = (
        db.query(RateLimitEntry)
        .filter(
            RateLimitEntry.identifier == identifier,
            RateLimitEntry.action == action,
            RateLimitEntry.window_start == window_start,
        )
        .one_or_none()
    )
    if entry is not None and entry.attempts >= max_attempts:
        db.commit()
        return False

    if entry is None:
        db.add(RateLimitEntry(identifier=identifier, action=action, attempts=1, window_start=window_start))
    else:
        entry.attempts += 1
    db.commit()
    return True
