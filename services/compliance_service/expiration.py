"""
Expiration Calculator

Derives certification expiry from a skill's validity window. The result is
persisted at certification time and never recomputed, so editing a skill's
validity_months does not move existing expiry dates.
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Protocol


class HasValidity(Protocol):
    validity_months: int | None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps (SQLite drops tzinfo)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    """
    Advance a timestamp by calendar months.

    The day of month is clamped to the last day of the target month,
    so Jan 31 + 1 month is the last day of February.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def calculate_expires_at(skill: HasValidity, achieved_at: datetime) -> datetime | None:
    """
    Calculate when a certification expires.

    Args:
        skill: Skill (ORM row or record) with validity_months
        achieved_at: When the skill was achieved

    Returns:
        Expiry timestamp, or None if the skill never expires
    """
    validity_months = skill.validity_months
    if not validity_months or validity_months <= 0:
        return None
    return add_months(achieved_at, validity_months)


def is_certification_active(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """Check if a certification has not expired yet."""
    if expires_at is None:
        return True  # Never expires
    return ensure_utc(expires_at) >= ensure_utc(now or utcnow())


def is_expiring_soon(
    expires_at: datetime | None,
    days_threshold: int = 30,
    now: datetime | None = None,
) -> bool:
    """
    Check if a still-active certification expires within the threshold.

    Already expired certifications are not "expiring soon".
    """
    if expires_at is None:
        return False

    now = ensure_utc(now or utcnow())
    expires_at = ensure_utc(expires_at)
    if expires_at < now:
        return False
    return expires_at <= now + timedelta(days=days_threshold)
