"""Staleness classification of issues."""

from datetime import datetime, timedelta, timezone


def is_stale(updated_at: datetime, stale_days: int, now: datetime = None) -> bool:
    """
    Decide whether an issue last updated at ``updated_at`` is stale.

    An issue is stale when its last update is strictly earlier than ``now``
    minus ``stale_days`` days. An update exactly ``stale_days`` days ago is not
    stale yet.

    Args:
        updated_at (datetime): Last update of the issue. Naive values are UTC.
        stale_days (int): Staleness threshold in days.
        now (datetime): Reference moment. Defaults to the current time, read on
            every call.

    Returns:
        bool: True if the issue is stale.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        cutoff = _as_utc(now) - timedelta(days=stale_days)
    except OverflowError:
        # Threshold reaches past the earliest representable date.
        cutoff = datetime.min.replace(tzinfo=timezone.utc)
    return _as_utc(updated_at) < cutoff


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
