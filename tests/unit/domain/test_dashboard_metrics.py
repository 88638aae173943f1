"""Tests for dashboard reporting rules."""

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.domain.policies.dashboard_metrics import (
    MetricsWindow,
    QueueStats,
    agreement_pct,
    complete_queue_listing,
    display_name,
    resolution_hours,
)
from helpdesk.domain.value_objects.enums import QUEUE_NAMES

# Wednesday
NOW = datetime(2026, 10, 21, 15, 30, tzinfo=timezone.utc)


def test_window_starts():
    w = MetricsWindow.at(NOW)
    assert w.day_start == datetime(2026, 10, 21, tzinfo=timezone.utc)
    assert w.week_start == datetime(2026, 10, 18, tzinfo=timezone.utc)  # Sunday
    assert w.month_start == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert w.trend_start == NOW - timedelta(hours=24)


def test_week_starts_on_the_same_sunday():
    sunday = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)
    assert MetricsWindow.at(sunday).week_start == datetime(2026, 10, 18, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "seconds, hours",
    [(None, 0.0), (0, 0.0), (3 * 3600, 3.0), (5000, 1.4)],
)
def test_resolution_hours(seconds, hours):
    assert resolution_hours(seconds) == hours


def test_agreement_pct():
    assert agreement_pct(3, 4) == 75
    assert agreement_pct(2, 3) == 67
    assert agreement_pct(0, 0) == 0


def test_display_name():
    assert display_name("technical-support") == "Technical Support"
    assert display_name("escalation") == "Escalation"


def test_queue_listing_is_complete_and_ordered():
    found = {"escalation": QueueStats("escalation", "Escalation", total=2, critical=1)}
    listing = complete_queue_listing(found)
    assert [q.name for q in listing] == list(QUEUE_NAMES)
    stats = {q.name: q for q in listing}
    assert stats["escalation"].critical == 1
    assert stats["unassigned"] == QueueStats("unassigned", "Unassigned")
