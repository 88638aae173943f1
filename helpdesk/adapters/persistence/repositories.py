"""SQLAlchemy repository implementations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, extract, func, literal_column, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.models import CommentModel, TicketModel
from helpdesk.application.ports.ticket_repo import TicketFilter, TicketRepository
from helpdesk.application.ports.ticket_stats import TicketStatsRepository
from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.policies.dashboard_metrics import (
    AgentStats,
    DashboardMetrics,
    MetricsWindow,
    Overview,
    QueueStats,
    agreement_pct,
    complete_queue_listing,
    display_name,
    resolution_hours,
)
from helpdesk.domain.value_objects.enums import (
    UNASSIGNED_QUEUE,
    Category,
    Priority,
    Queue,
    TicketStatus,
    queue_from_name,
)

# ─── Mappers ─────────────────────────────────────────────────────────


def _comment_to_domain(m: CommentModel) -> Comment:
    return Comment(
        id=m.id,
        author=m.author,
        content=m.content,
        is_internal=m.is_internal,
        created_at=m.created_at,
    )


def _classification_to_domain(m: TicketModel) -> ClassificationResult | None:
    if m.ai_category is None:
        return None
    return ClassificationResult(
        suggested_priority=Priority(m.ai_priority),
        suggested_category=Category(m.ai_category),
        suggested_queue=Queue(m.ai_queue),
        confidence=m.ai_confidence,
        reasoning=m.ai_reasoning,
        classified_at=m.ai_classified_at,
    )


def _ticket_to_domain(m: TicketModel) -> Ticket:
    return Ticket(
        id=m.id,
        title=m.title,
        description=m.description,
        customer_email=m.customer_email,
        customer_name=m.customer_name,
        priority=Priority(m.priority),
        category=Category(m.category),
        queue=queue_from_name(m.queue),
        status=TicketStatus(m.status),
        assigned_to=m.assigned_to,
        ai_classification=_classification_to_domain(m),
        comments=[_comment_to_domain(c) for c in m.comments],
        created_at=m.created_at,
        updated_at=m.updated_at,
        resolved_at=m.resolved_at,
        closed_at=m.closed_at,
    )


def _classification_columns(c: ClassificationResult | None) -> dict:
    if c is None:
        return dict(
            ai_priority=None, ai_category=None, ai_queue=None,
            ai_confidence=None, ai_reasoning=None, ai_classified_at=None,
        )
    return dict(
        ai_priority=c.suggested_priority.value,
        ai_category=c.suggested_category.value,
        ai_queue=c.suggested_queue.value,
        ai_confidence=c.confidence,
        ai_reasoning=c.reasoning,
        ai_classified_at=c.classified_at,
    )


def _workflow_columns(ticket: Ticket) -> dict:
    return dict(
        priority=ticket.priority.value,
        category=ticket.category.value,
        queue=ticket.queue.value if ticket.queue else UNASSIGNED_QUEUE,
        status=ticket.status.value,
        assigned_to=ticket.assigned_to,
        updated_at=ticket.updated_at,
        resolved_at=ticket.resolved_at,
        closed_at=ticket.closed_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, ticket: Ticket) -> Ticket:
        m = TicketModel(
            title=ticket.title,
            description=ticket.description,
            customer_email=ticket.customer_email,
            customer_name=ticket.customer_name,
            created_at=ticket.created_at,
            **_workflow_columns(ticket),
            **_classification_columns(ticket.ai_classification),
        )
        self._s.add(m)
        await self._s.flush()
        ticket.id = m.id
        return ticket

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        m = await self._s.get(TicketModel, ticket_id)
        return _ticket_to_domain(m) if m else None

    async def get_by_customer_email(self, email: str) -> list[Ticket]:
        result = await self._s.execute(
            select(TicketModel)
            .where(TicketModel.customer_email == email)
            .order_by(TicketModel.created_at.desc())
        )
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def search(
        self, filters: TicketFilter, offset: int = 0, limit: int = 20
    ) -> tuple[list[Ticket], int]:
        conditions = []
        if filters.status is not None:
            conditions.append(TicketModel.status == filters.status.value)
        if filters.priority is not None:
            conditions.append(TicketModel.priority == filters.priority.value)
        if filters.category is not None:
            conditions.append(TicketModel.category == filters.category.value)
        if filters.queue is not None:
            conditions.append(TicketModel.queue == filters.queue)

        total = (
            await self._s.execute(select(func.count(TicketModel.id)).where(*conditions))
        ).scalar() or 0

        result = await self._s.execute(
            select(TicketModel)
            .where(*conditions)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_ticket_to_domain(m) for m in result.scalars()], total

    async def get_many(self, ticket_ids: list[int]) -> list[Ticket]:
        if not ticket_ids:
            return []
        result = await self._s.execute(
            select(TicketModel)
            .where(TicketModel.id.in_(ticket_ids))
            .order_by(TicketModel.id)
        )
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def update(self, ticket: Ticket) -> Ticket:
        await self._s.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id)
            .values(
                **_workflow_columns(ticket),
                **_classification_columns(ticket.ai_classification),
            )
        )
        await self._s.flush()
        return ticket

    async def add_comment(self, ticket_id: int, comment: Comment) -> Comment:
        m = CommentModel(
            ticket_id=ticket_id,
            author=comment.author,
            content=comment.content,
            is_internal=comment.is_internal,
            created_at=comment.created_at,
        )
        self._s.add(m)
        await self._s.flush()
        comment.id = m.id
        return comment


# ─── Aggregate queries ───────────────────────────────────────────────

_OPEN = TicketStatus.OPEN.value
_IN_PROGRESS = TicketStatus.IN_PROGRESS.value
_RESOLVED = TicketStatus.RESOLVED.value
_CLOSED = TicketStatus.CLOSED.value


def _counted(condition=None):
    count = func.count(TicketModel.id)
    return count if condition is None else count.filter(condition)


def overview_query(window: MetricsWindow):
    return select(
        _counted(),
        _counted(TicketModel.status == _OPEN),
        _counted(TicketModel.status == _RESOLVED),
        _counted(TicketModel.created_at >= window.day_start),
        _counted(TicketModel.created_at >= window.week_start),
        _counted(TicketModel.created_at >= window.month_start),
    )


def count_by_query(column):
    return select(column, _counted()).group_by(column)


def resolution_query():
    seconds = extract("epoch", TicketModel.resolved_at - TicketModel.created_at)
    return select(func.avg(seconds)).where(
        TicketModel.status.in_([_RESOLVED, _CLOSED]),
        TicketModel.resolved_at.is_not(None),
    )


def agreement_query():
    return select(
        _counted(TicketModel.ai_category.is_not(None)),
        _counted(TicketModel.ai_category == TicketModel.category),
    )


def hourly_trend_query(since: datetime):
    # Literal zone so SELECT and GROUP BY render the same expression.
    hour = extract(
        "hour", func.timezone(literal_column("'UTC'"), TicketModel.created_at)
    ).label("hour")
    return (
        select(hour, _counted())
        .where(TicketModel.created_at >= since)
        .group_by(hour)
        .order_by(hour)
    )


def queue_query():
    not_closed = TicketModel.status != _CLOSED
    return select(
        TicketModel.queue,
        _counted(),
        _counted(TicketModel.status == _OPEN),
        _counted(TicketModel.status == _IN_PROGRESS),
        _counted(and_(not_closed, TicketModel.priority == Priority.CRITICAL.value)),
        _counted(and_(not_closed, TicketModel.priority == Priority.HIGH.value)),
    ).group_by(TicketModel.queue)


def agent_query(month_start: datetime):
    return (
        select(
            TicketModel.assigned_to,
            _counted(),
            _counted(TicketModel.status.in_([_OPEN, _IN_PROGRESS])),
            _counted(
                and_(TicketModel.status == _RESOLVED, TicketModel.resolved_at >= month_start)
            ),
        )
        .where(TicketModel.assigned_to.is_not(None))
        .group_by(TicketModel.assigned_to)
        .order_by(TicketModel.assigned_to)
    )


class SqlTicketStatsRepository(TicketStatsRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def _count_by(self, column) -> dict[str, int]:
        rows = (await self._s.execute(count_by_query(column))).all()
        return {row[0]: row[1] for row in rows}

    async def dashboard(self, window: MetricsWindow) -> DashboardMetrics:
        overview = (await self._s.execute(overview_query(window))).one()
        avg_seconds = (await self._s.execute(resolution_query())).scalar()
        classified, agreed = (await self._s.execute(agreement_query())).one()
        trend = (await self._s.execute(hourly_trend_query(window.trend_start))).all()

        return DashboardMetrics(
            overview=Overview(*overview),
            by_status=await self._count_by(TicketModel.status),
            by_priority=await self._count_by(TicketModel.priority),
            by_queue=await self._count_by(TicketModel.queue),
            by_category=await self._count_by(TicketModel.category),
            avg_resolution_hours=resolution_hours(avg_seconds),
            ai_agreement_pct=agreement_pct(agreed, classified),
            hourly_trend=[{"hour": int(hour), "count": count} for hour, count in trend],
        )

    async def queues(self) -> list[QueueStats]:
        rows = (await self._s.execute(queue_query())).all()
        found = {
            name: QueueStats(name, display_name(name), total, open_, in_progress, critical, high)
            for name, total, open_, in_progress, critical, high in rows
        }
        return complete_queue_listing(found)

    async def agents(self, month_start: datetime) -> list[AgentStats]:
        rows = (await self._s.execute(agent_query(month_start))).all()
        return [AgentStats(*row) for row in rows]
