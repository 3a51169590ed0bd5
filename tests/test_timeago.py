"""Unit tests for relative time labels."""

from datetime import datetime, timedelta, timezone

from marketplace.core.timeago import format_time_ago

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


class TestFormatTimeAgo:
    """Labels use the floor of elapsed hours, days and weeks."""

    def test_under_an_hour_is_just_now(self) -> None:
        assert format_time_ago(NOW - timedelta(minutes=59, seconds=59), NOW) == "Just now"

    def test_hours(self) -> None:
        assert format_time_ago(NOW - timedelta(hours=1), NOW) == "1h ago"
        assert format_time_ago(NOW - timedelta(hours=23, minutes=59), NOW) == "23h ago"

    def test_days(self) -> None:
        assert format_time_ago(NOW - timedelta(hours=24), NOW) == "1d ago"
        assert format_time_ago(NOW - timedelta(days=6, hours=23), NOW) == "6d ago"

    def test_weeks(self) -> None:
        assert format_time_ago(NOW - timedelta(days=7), NOW) == "1w ago"
        assert format_time_ago(NOW - timedelta(days=20), NOW) == "2w ago"

    def test_future_timestamp_is_just_now(self) -> None:
        assert format_time_ago(NOW + timedelta(hours=3), NOW) == "Just now"

    def test_naive_datetimes_are_utc(self) -> None:
        naive = (NOW - timedelta(hours=5)).replace(tzinfo=None)
        assert format_time_ago(naive, NOW) == "5h ago"
