"""Pytest configuration and shared fixtures."""

from collections import Counter
from datetime import datetime, timezone

import pytest

from helpdesk.application.ports.ticket_repo import TicketFilter, TicketRepository
from helpdesk.application.ports.ticket_stats import TicketStatsRepository
from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.policies.dashboard_metrics import (
    AgentStats,
    DashboardMetrics,
    Overview,
    QueueStats,
    agreement_pct,
    complete_queue_listing,
    display_name,
    queue_name,
    resolution_hours,
)
from helpdesk.domain.value_objects.enums import Category, Priority, Queue, TicketStatus


class InMemoryTicketRepository(TicketRepository):
    def __init__(self):
        self.tickets = {}
        self._comment_seq = 0

    async def save(self, ticket):
        ticket.id = len(self.tickets) + 1
        self.tickets[ticket.id] = ticket
        return ticket

    async def get_by_id(self, ticket_id):
        return self.tickets.get(ticket_id)

    async def get_by_customer_email(self, email):
        found = [t for t in self.tickets.values() if t.customer_email == email]
        return sorted(found, key=lambda t: t.created_at, reverse=True)

    async def search(self, filters: TicketFilter, offset=0, limit=20):
        found = [
            t for t in self.tickets.values()
            if (filters.status is None or t.status == filters.status)
            and (filters.priority is None or t.priority == filters.priority)
            and (filters.category is None or t.category == filters.category)
            and (filters.queue is None or queue_name(t) == filters.queue)
        ]
        found.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return found[offset:offset + limit], len(found)

    async def get_many(self, ticket_ids):
        return [self.tickets[i] for i in sorted(set(ticket_ids)) if i in self.tickets]

    async def update(self, ticket):
        self.tickets[ticket.id] = ticket
        return ticket

    async def add_comment(self, ticket_id, comment):
        self._comment_seq += 1
        comment.id = self._comment_seq
        return comment


class InMemoryTicketStatsRepository(TicketStatsRepository):
    """Counts over the in-memory repository's tickets, mirroring the SQL queries."""

    def __init__(self, repo: InMemoryTicketRepository):
        self._repo = repo

    async def dashboard(self, window):
        tickets = list(self._repo.tickets.values())
        resolved = [
            (t.resolved_at - t.created_at).total_seconds()
            for t in tickets
            if t.status in (TicketStatus.RESOLVED, TicketStatus.CLOSED) and t.resolved_at
        ]
        classified = [t for t in tickets if t.is_classified()]
        hourly = Counter(
            t.created_at.astimezone(timezone.utc).hour
            for t in tickets if t.created_at >= window.trend_start
        )
        return DashboardMetrics(
            overview=Overview(
                total=len(tickets),
                open=sum(1 for t in tickets if t.status == TicketStatus.OPEN),
                resolved=sum(1 for t in tickets if t.status == TicketStatus.RESOLVED),
                today=sum(1 for t in tickets if t.created_at >= window.day_start),
                this_week=sum(1 for t in tickets if t.created_at >= window.week_start),
                this_month=sum(1 for t in tickets if t.created_at >= window.month_start),
            ),
            by_status=dict(Counter(t.status.value for t in tickets)),
            by_priority=dict(Counter(t.priority.value for t in tickets)),
            by_queue=dict(Counter(queue_name(t) for t in tickets)),
            by_category=dict(Counter(t.category.value for t in tickets)),
            avg_resolution_hours=resolution_hours(
                sum(resolved) / len(resolved) if resolved else None
            ),
            ai_agreement_pct=agreement_pct(
                sum(1 for t in classified if t.ai_agrees_on_category()), len(classified)
            ),
            hourly_trend=[{"hour": h, "count": hourly[h]} for h in sorted(hourly)],
        )

    async def queues(self):
        found = {}
        for t in self._repo.tickets.values():
            name = queue_name(t)
            q = found.setdefault(name, QueueStats(name=name, display_name=display_name(name)))
            q.total += 1
            q.open += t.status == TicketStatus.OPEN
            q.in_progress += t.status == TicketStatus.IN_PROGRESS
            if t.status != TicketStatus.CLOSED:
                q.critical += t.priority == Priority.CRITICAL
                q.high += t.priority == Priority.HIGH
        return complete_queue_listing(found)

    async def agents(self, month_start):
        stats = {}
        for t in self._repo.tickets.values():
            if t.assigned_to is None:
                continue
            a = stats.setdefault(t.assigned_to, AgentStats(t.assigned_to, 0, 0, 0))
            a.assigned_total += 1
            a.assigned_open += t.status in (TicketStatus.OPEN, TicketStatus.IN_PROGRESS)
            a.resolved_this_month += (
                t.status == TicketStatus.RESOLVED
                and t.resolved_at is not None
                and t.resolved_at >= month_start
            )
        return [stats[k] for k in sorted(stats)]


@pytest.fixture
def ticket_repo():
    return InMemoryTicketRepository()


@pytest.fixture
def ticket_stats(ticket_repo):
    return InMemoryTicketStatsRepository(ticket_repo)


@pytest.fixture
def remote_result():
    return ClassificationResult(
        suggested_priority=Priority.HIGH,
        suggested_category=Category.TECHNICAL,
        suggested_queue=Queue.TECHNICAL_SUPPORT,
        confidence=0.92,
        reasoning="Login failures point to an authentication problem",
        classified_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )
