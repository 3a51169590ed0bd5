"""Human-relative time labels shown next to jobs, bids and activity items."""

from __future__ import annotations

from datetime import datetime, timezone

_HOUR = 3600


def format_time_ago(moment: datetime, now: datetime | None = None) -> str:
    """Return ``Just now`` / ``{h}h ago`` / ``{d}d ago`` / ``{w}w ago``.

    Each unit is the floor of the elapsed time.  Naive datetimes are taken
    as UTC.  Timestamps in the future read as ``Just now``.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    hours = int((now - moment).total_seconds() // _HOUR)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"

    days = hours // 24
    if days < 7:
        return f"{days}d ago"

    return f"{days // 7}w ago"
