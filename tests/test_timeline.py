"""Tests for timeline grouping and gallery statistics."""

from __future__ import annotations

import time
from datetime import UTC, date, datetime, timedelta

import pytest

from flashfind.application.timeline import compute_statistics, format_day, group_by_day

NOW = datetime(2026, 10, 19, 18, 0, tzinfo=UTC)
LOCAL_NOON = datetime(2026, 10, 19, 12, 0).astimezone()


@pytest.fixture
def new_york_time(monkeypatch):
    """Run the test with the process timezone set to America/New_York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestGroupByDay:
    def test_groups_newest_first(self, make_image):
        images = [
            make_image(1, "sunset-beach.jpg", uploaded_at=LOCAL_NOON - timedelta(days=1)),
            make_image(2, "mountain-lake.png", uploaded_at=LOCAL_NOON - timedelta(hours=1)),
            make_image(3, "city-night.jpg", uploaded_at=LOCAL_NOON),
        ]

        groups = group_by_day(images)

        assert [g.day for g in groups] == [date(2026, 10, 19), date(2026, 10, 18)]
        assert [e.id for e in groups[0].images] == [3, 2]
        assert groups[0].count == 2
        assert groups[1].formatted_date == "October 18, 2026"

    def test_utc_timestamps_grouped_by_local_day(self, make_image):
        uploaded = datetime(2026, 10, 19, 23, 30, tzinfo=UTC)

        groups = group_by_day([make_image(1, "sunset-beach.jpg", uploaded_at=uploaded)])

        assert [g.day for g in groups] == [uploaded.astimezone().date()]

    def test_late_evening_upload_stays_on_local_day(self, make_image, new_york_time):
        # 00:30 UTC on the 20th is 20:30 on the 19th in New York
        images = [
            make_image(1, "sunset-beach.jpg", uploaded_at=datetime(2026, 10, 20, 0, 30, tzinfo=UTC)),
            make_image(2, "city-night.jpg", uploaded_at=datetime(2026, 10, 19, 14, 0, tzinfo=UTC)),
        ]

        groups = group_by_day(images)

        assert [g.day for g in groups] == [date(2026, 10, 19)]
        assert [e.id for e in groups[0].images] == [1, 2]

    def test_empty(self):
        assert group_by_day([]) == []


class TestFormatDay:
    def test_no_zero_padding(self):
        assert format_day(date(2026, 3, 5)) == "March 5, 2026"


class TestStatistics:
    def test_counters(self, make_image):
        images = [
            make_image(1, "sunset-beach.jpg", uploaded_at=NOW - timedelta(hours=2), category="travel"),
            make_image(2, "beach-party.png", uploaded_at=NOW - timedelta(days=3), category="travel"),
            make_image(3, "city-night.jpg", uploaded_at=NOW - timedelta(days=10), category="urban"),
        ]

        stats = compute_statistics(images, now=NOW)

        assert stats.total_images == 3
        assert stats.total_tags == 6
        assert stats.recent_uploads == 1
        assert stats.avg_tags_per_image == 2.0
        assert stats.top_tags[0] == ("beach", 2)
        assert stats.top_tags[1:3] == [("city", 1), ("night", 1)]
        assert stats.categories == {"travel": 2, "urban": 1}

    def test_empty_collection(self):
        stats = compute_statistics([], now=NOW)
        assert stats.total_images == 0
        assert stats.avg_tags_per_image == 0.0
        assert stats.to_dict()["top_tags"] == []

    def test_to_dict(self, make_image):
        stats = compute_statistics([make_image(1, "sunset-beach.jpg", uploaded_at=NOW)], now=NOW)
        data = stats.to_dict()
        assert data["recent_uploads"] == 1
        assert {"tag": "beach", "count": 1} in data["top_tags"]
