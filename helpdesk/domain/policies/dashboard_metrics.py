"""DashboardMetrics — result shapes and reporting rules for the staff dashboard.

Counting happens in the store (see TicketStatsRepository); this module owns
the reporting windows, the rounding rules and the fixed queue listing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.enums import QUEUE_NAMES, UNASSIGNED_QUEUE

TREND_HOURS = 24


@dataclass(frozen=True)
class MetricsWindow:
    """Reference instants for the dashboard's period counts."""

    day_start: datetime
    week_start: datetime
    month_start: datetime
    trend_start: datetime

    @classmethod
    def at(cls, now: datetime) -> "MetricsWindow":
        """Windows relative to *now*, in now's timezone. Weeks start on Sunday."""
        day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return cls(
            day_start=day,
            week_start=day - timedelta(days=(day.weekday() + 1) % 7),
            month_start=day.replace(day=1),
            trend_start=now - timedelta(hours=TREND_HOURS),
        )


@dataclass
class Overview:
    total: int
    open: int
    resolved: int
    today: int
    this_week: int
    this_month: int


@dataclass
class DashboardMetrics:
    overview: Overview
    by_status: dict[str, int]
    by_priority: dict[str, int]
    by_queue: dict[str, int]
    by_category: dict[str, int]
    avg_resolution_hours: float
    ai_agreement_pct: int
    hourly_trend: list[dict[str, int]] = field(default_factory=list)


@dataclass
class QueueStats:
    name: str
    display_name: str
    total: int = 0
    open: int = 0
    in_progress: int = 0
    critical: int = 0
    high: int = 0


@dataclass
class AgentStats:
    """Workload of one assignee, keyed by the stored assigned_to value."""

    agent: str
    assigned_total: int
    assigned_open: int
    resolved_this_month: int


def queue_name(ticket: Ticket) -> str:
    return ticket.queue.value if ticket.queue else UNASSIGNED_QUEUE


def display_name(queue: str) -> str:
    return " ".join(w.capitalize() for w in queue.split("-"))


def resolution_hours(avg_seconds: float | None) -> float:
    """Average resolution time in hours, one decimal; 0.0 when nothing resolved."""
    if not avg_seconds:
        return 0.0
    return round(float(avg_seconds) / 3600, 1)


def agreement_pct(agreed: int, classified: int) -> int:
    """Share of classified tickets whose effective category matches the suggestion."""
    if not classified:
        return 0
    return round(agreed / classified * 100)


def complete_queue_listing(found: dict[str, QueueStats]) -> list[QueueStats]:
    """All known queues in fixed order; queues with no tickets get zero counts."""
    return [found.get(name) or QueueStats(name=name, display_name=display_name(name))
            for name in QUEUE_NAMES]
