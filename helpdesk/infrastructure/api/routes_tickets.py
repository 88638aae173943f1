"""Ticket endpoints — public intake and status lookup; staff triage behind a bearer token."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from helpdesk.application.ports.staff_directory import StaffMember
from helpdesk.application.ports.ticket_repo import TicketFilter
from helpdesk.application.use_cases.manage_tickets import (
    AddCommentUseCase,
    ListTicketsUseCase,
    NewTicket,
    ReclassifyTicketUseCase,
    SubmitTicketUseCase,
    TicketNotFound,
    TicketUpdate,
    UpdateTicketUseCase,
)
from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.entities.ticket import TITLE_MAX_LENGTH, Ticket
from helpdesk.domain.policies.dashboard_metrics import queue_name
from helpdesk.domain.value_objects.enums import QUEUE_NAMES, Category, Priority, TicketStatus
from helpdesk.infrastructure.api.dependencies import (
    get_add_comment_uc,
    get_list_tickets_uc,
    get_reclassify_ticket_uc,
    get_submit_ticket_uc,
    get_update_ticket_uc,
)
from helpdesk.infrastructure.api.security import require_staff

router = APIRouter(prefix="/tickets", tags=["tickets"])

EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"


def check_queue_name(value: str | None) -> str | None:
    if value is not None and value not in QUEUE_NAMES:
        raise ValueError(f"Unknown queue: {value}")
    return value


# ── Request schemas ─────────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class TicketCreateRequest(_CamelModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1)
    customer_email: str = Field(alias="customerEmail", pattern=EMAIL_PATTERN)
    customer_name: str = Field(alias="customerName", min_length=1)
    category: Category | None = None
    priority: Priority | None = None


class TicketUpdateRequest(_CamelModel):
    status: TicketStatus | None = None
    priority: Priority | None = None
    category: Category | None = None
    queue: str | None = None  # Queue value or "unassigned"
    assigned_to: str | None = Field(default=None, alias="assignedTo")

    @field_validator("queue")
    @classmethod
    def known_queue(cls, value: str | None) -> str | None:
        return check_queue_name(value)


class CommentRequest(_CamelModel):
    # Defaults to the calling staff member.
    author: str | None = Field(default=None, min_length=1)
    content: str = Field(min_length=1)
    is_internal: bool = Field(default=False, alias="isInternal")


# ── Routes ──────────────────────────────────────────────────────────


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    body: TicketCreateRequest,
    uc: SubmitTicketUseCase = Depends(get_submit_ticket_uc),
):
    """Public intake: classify and store a new ticket."""
    ticket = await uc.execute(
        NewTicket(
            title=body.title,
            description=body.description,
            customer_email=body.customer_email,
            customer_name=body.customer_name,
            category=body.category,
            priority=body.priority,
        )
    )
    return serialize_ticket(ticket)


@router.get("", dependencies=[Depends(require_staff)])
async def list_tickets(
    status_: TicketStatus | None = Query(default=None, alias="status"),
    priority: Priority | None = None,
    category: Category | None = None,
    queue: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    uc: ListTicketsUseCase = Depends(get_list_tickets_uc),
):
    """List tickets, newest first, with optional filters."""
    if queue is not None and queue not in QUEUE_NAMES:
        raise HTTPException(status_code=422, detail=f"Unknown queue: {queue}")

    result = await uc.execute(
        TicketFilter(status=status_, priority=priority, category=category, queue=queue),
        page=page,
        limit=limit,
    )
    return {
        "total": result.total,
        "page": result.page,
        "limit": result.limit,
        "pages": result.pages,
        "tickets": [serialize_ticket(t) for t in result.tickets],
    }


@router.get("/customer/{email}")
async def customer_tickets(email: str, uc: ListTicketsUseCase = Depends(get_list_tickets_uc)):
    """Ticket status lookup for a customer (summary fields only)."""
    tickets = await uc.for_customer(email)
    return {
        "total": len(tickets),
        "tickets": [
            {
                "id": t.id,
                "title": t.title,
                "status": t.status.value,
                "priority": t.priority.value,
                "category": t.category.value,
                "createdAt": t.created_at.isoformat(),
                "updatedAt": t.updated_at.isoformat(),
            }
            for t in tickets
        ],
    }


@router.get("/{ticket_id}", dependencies=[Depends(require_staff)])
async def get_ticket(ticket_id: int, uc: ListTicketsUseCase = Depends(get_list_tickets_uc)):
    try:
        ticket = await uc.get(ticket_id)
    except TicketNotFound:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return serialize_ticket(ticket)


@router.put("/{ticket_id}", dependencies=[Depends(require_staff)])
async def update_ticket(
    ticket_id: int,
    body: TicketUpdateRequest,
    uc: UpdateTicketUseCase = Depends(get_update_ticket_uc),
):
    """Staff update of workflow fields. An explicit null assignedTo unassigns."""
    changes = TicketUpdate(
        status=body.status,
        priority=body.priority,
        category=body.category,
        queue=body.queue,
        assigned_to=body.assigned_to,
        unassign="assigned_to" in body.model_fields_set and body.assigned_to is None,
    )
    try:
        ticket = await uc.execute(ticket_id, changes)
    except TicketNotFound:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return serialize_ticket(ticket)


@router.post("/{ticket_id}/comments")
async def add_comment(
    ticket_id: int,
    body: CommentRequest,
    staff: StaffMember = Depends(require_staff),
    uc: AddCommentUseCase = Depends(get_add_comment_uc),
):
    author = body.author or staff.name
    try:
        ticket = await uc.execute(ticket_id, author, body.content, body.is_internal)
    except TicketNotFound:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return serialize_ticket(ticket)


@router.post("/{ticket_id}/reclassify", dependencies=[Depends(require_staff)])
async def reclassify_ticket(
    ticket_id: int,
    uc: ReclassifyTicketUseCase = Depends(get_reclassify_ticket_uc),
):
    """Re-run classification; only the stored suggestion changes."""
    try:
        ticket = await uc.execute(ticket_id)
    except TicketNotFound:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return serialize_ticket(ticket)


# ── Serialization ───────────────────────────────────────────────────


def serialize_classification(c: ClassificationResult) -> dict:
    return {
        "suggestedPriority": c.suggested_priority.value,
        "suggestedCategory": c.suggested_category.value,
        "suggestedQueue": c.suggested_queue.value,
        "confidence": c.confidence,
        "reasoning": c.reasoning,
        "classifiedAt": c.classified_at.isoformat(),
    }


def serialize_ticket(t: Ticket) -> dict:
    """Convert a Ticket entity to an API response dict."""
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "customerEmail": t.customer_email,
        "customerName": t.customer_name,
        "priority": t.priority.value,
        "category": t.category.value,
        "queue": queue_name(t),
        "status": t.status.value,
        "assignedTo": t.assigned_to,
        "aiClassification": (
            serialize_classification(t.ai_classification) if t.ai_classification else None
        ),
        "comments": [
            {
                "id": c.id,
                "author": c.author,
                "content": c.content,
                "isInternal": c.is_internal,
                "createdAt": c.created_at.isoformat(),
            }
            for c in t.comments
        ],
        "createdAt": t.created_at.isoformat(),
        "updatedAt": t.updated_at.isoformat(),
        "resolvedAt": t.resolved_at.isoformat() if t.resolved_at else None,
        "closedAt": t.closed_at.isoformat() if t.closed_at else None,
    }
