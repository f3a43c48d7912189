"""Date-aware helpers for DBS certificate status."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from .enums import DBSStatus


def effective_status(stored_status: str, expiry_date: Optional[date], today: date) -> str:
    """Return ``expired`` once ``expiry_date`` has passed, otherwise the stored status."""

    if expiry_date is not None and expiry_date < today:
        return DBSStatus.EXPIRED.value
    return stored_status


def is_expiring_soon(expiry_date: Optional[date], today: date, window_days: int) -> bool:
    """Return True when the certificate expires within the next ``window_days`` days."""

    if expiry_date is None:
        return False
    return today <= expiry_date <= today + timedelta(days=window_days)


__all__ = ["effective_status", "is_expiring_soon"]
