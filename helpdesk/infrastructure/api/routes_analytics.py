"""Admin endpoints — dashboard metrics, queue and agent workload, bulk triage."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator

from helpdesk.application.ports.staff_directory import StaffMember
from helpdesk.application.ports.ticket_stats import TicketStatsRepository
from helpdesk.application.use_cases.manage_tickets import (
    AssignTicketsUseCase,
    BulkResult,
    TransferTicketsUseCase,
)
from helpdesk.domain.policies.dashboard_metrics import MetricsWindow
from helpdesk.infrastructure.api.dependencies import (
    get_assign_tickets_uc,
    get_ticket_stats,
    get_transfer_tickets_uc,
)
from helpdesk.infrastructure.api.routes_tickets import check_queue_name
from helpdesk.infrastructure.api.security import require_staff

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_staff)])


class _BulkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    ticket_ids: list[int] = Field(alias="ticketIds", min_length=1)


class AssignRequest(_BulkRequest):
    # Defaults to the calling staff member.
    assigned_to: str | None = Field(default=None, alias="assignedTo", min_length=1)


class TransferRequest(_BulkRequest):
    queue: str

    @field_validator("queue")
    @classmethod
    def known_queue(cls, value: str) -> str:
        return check_queue_name(value)


def _bulk_response(result: BulkResult, message: str) -> dict:
    return {
        "updated": len(result.tickets),
        "ticketIds": [t.id for t in result.tickets],
        "notFound": result.missing,
        "message": message,
    }


@router.get("/metrics")
async def dashboard_metrics(stats: TicketStatsRepository = Depends(get_ticket_stats)):
    """Aggregate stats for the dashboard."""
    metrics = await stats.dashboard(MetricsWindow.at(datetime.now(timezone.utc)))

    return {
        "overview": asdict(metrics.overview),
        "by_status": metrics.by_status,
        "by_priority": metrics.by_priority,
        "by_queue": metrics.by_queue,
        "by_category": metrics.by_category,
        "performance": {
            "avg_resolution_hours": metrics.avg_resolution_hours,
            "ai_agreement_pct": metrics.ai_agreement_pct,
        },
        "hourly_trend": metrics.hourly_trend,
    }


@router.get("/queues")
async def queues(stats: TicketStatsRepository = Depends(get_ticket_stats)):
    """Per-queue workload."""
    return {"queues": [asdict(q) for q in await stats.queues()]}


@router.get("/agents")
async def agents(stats: TicketStatsRepository = Depends(get_ticket_stats)):
    """Per-assignee workload; resolved counts cover the current month."""
    month_start = MetricsWindow.at(datetime.now(timezone.utc)).month_start
    return {"agents": [asdict(a) for a in await stats.agents(month_start)]}


@router.post("/assign")
async def assign_tickets(
    body: AssignRequest,
    staff: StaffMember = Depends(require_staff),
    uc: AssignTicketsUseCase = Depends(get_assign_tickets_uc),
):
    """Assign tickets and mark them in progress. Unknown ids are reported, not fatal."""
    assignee = body.assigned_to or staff.id
    result = await uc.execute(body.ticket_ids, assignee)
    return _bulk_response(result, f"{len(result.tickets)} tickets assigned to {assignee}")


@router.post("/transfer")
async def transfer_tickets(
    body: TransferRequest,
    uc: TransferTicketsUseCase = Depends(get_transfer_tickets_uc),
):
    """Move tickets to another queue and clear their assignee."""
    result = await uc.execute(body.ticket_ids, body.queue)
    return _bulk_response(result, f"{len(result.tickets)} tickets transferred to {body.queue}")
