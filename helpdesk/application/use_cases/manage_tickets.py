"""Ticket use cases — intake, triage updates, comments and reclassification."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from helpdesk.application.ports.ticket_repo import TicketFilter, TicketRepository
from helpdesk.application.use_cases.classify_ticket import ClassificationService
from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.enums import Category, Priority, TicketStatus, queue_from_name

logger = logging.getLogger(__name__)


class TicketNotFound(LookupError):
    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} not found")


@dataclass
class NewTicket:
    """Intake form as submitted by a customer."""

    title: str
    description: str
    customer_email: str
    customer_name: str
    category: Category | None = None
    priority: Priority | None = None


@dataclass
class TicketUpdate:
    """Partial staff update; None leaves a field untouched."""

    status: TicketStatus | None = None
    priority: Priority | None = None
    category: Category | None = None
    queue: str | None = None  # Queue value or "unassigned"
    assigned_to: str | None = None
    unassign: bool = False


@dataclass
class TicketPage:
    tickets: list[Ticket]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


async def _load(tickets: TicketRepository, ticket_id: int) -> Ticket:
    ticket = await tickets.get_by_id(ticket_id)
    if ticket is None:
        raise TicketNotFound(ticket_id)
    return ticket


class SubmitTicketUseCase:
    """Classifies and stores a new customer ticket."""

    def __init__(self, classifier: ClassificationService, ticket_repo: TicketRepository):
        self._classifier = classifier
        self._tickets = ticket_repo

    async def execute(self, form: NewTicket) -> Ticket:
        classification = await self._classifier.classify(form.title, form.description)
        ticket = Ticket.submit(
            title=form.title,
            description=form.description,
            customer_email=form.customer_email,
            customer_name=form.customer_name,
            classification=classification,
            category=form.category,
            priority=form.priority,
        )
        ticket = await self._tickets.save(ticket)
        logger.info(
            "Ticket %s created: category=%s, priority=%s, queue=%s (confidence=%.2f)",
            ticket.id, ticket.category.value, ticket.priority.value,
            ticket.queue.value if ticket.queue else "unassigned",
            classification.confidence,
        )
        return ticket


class ReclassifyTicketUseCase:
    """Re-runs classification and replaces the stored suggestion."""

    def __init__(self, classifier: ClassificationService, ticket_repo: TicketRepository):
        self._classifier = classifier
        self._tickets = ticket_repo

    async def execute(self, ticket_id: int) -> Ticket:
        ticket = await _load(self._tickets, ticket_id)
        classification = await self._classifier.classify(ticket.title, ticket.description)
        ticket.replace_classification(classification)
        ticket = await self._tickets.update(ticket)
        logger.info(
            "Ticket %s reclassified: suggested %s/%s/%s",
            ticket_id, classification.suggested_category.value,
            classification.suggested_priority.value, classification.suggested_queue.value,
        )
        return ticket


class UpdateTicketUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, ticket_id: int, changes: TicketUpdate) -> Ticket:
        ticket = await _load(self._tickets, ticket_id)

        if changes.status is not None:
            ticket.change_status(changes.status)
        if changes.priority is not None:
            ticket.priority = changes.priority
        if changes.category is not None:
            ticket.category = changes.category
        if changes.queue is not None:
            ticket.queue = queue_from_name(changes.queue)
        if changes.unassign:
            ticket.assigned_to = None
        elif changes.assigned_to is not None:
            ticket.assigned_to = changes.assigned_to
        ticket.touch()

        return await self._tickets.update(ticket)


class AddCommentUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(
        self, ticket_id: int, author: str, content: str, is_internal: bool = False
    ) -> Ticket:
        ticket = await _load(self._tickets, ticket_id)
        comment = await self._tickets.add_comment(
            ticket_id, Comment(author=author, content=content, is_internal=is_internal)
        )
        ticket.add_comment(comment)
        return await self._tickets.update(ticket)


@dataclass
class BulkResult:
    tickets: list[Ticket]
    missing: list[int]


async def _load_many(tickets: TicketRepository, ticket_ids: list[int]) -> BulkResult:
    wanted = list(dict.fromkeys(ticket_ids))
    found = await tickets.get_many(wanted)
    found_ids = {t.id for t in found}
    return BulkResult(tickets=found, missing=[i for i in wanted if i not in found_ids])


class AssignTicketsUseCase:
    """Hands several tickets to one assignee and marks them in progress.

    Unknown ids are skipped and reported back, not treated as errors.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, ticket_ids: list[int], assignee: str) -> BulkResult:
        result = await _load_many(self._tickets, ticket_ids)
        for ticket in result.tickets:
            ticket.assigned_to = assignee
            ticket.change_status(TicketStatus.IN_PROGRESS)
            await self._tickets.update(ticket)
        logger.info(
            "%d tickets assigned to %s (%d not found)",
            len(result.tickets), assignee, len(result.missing),
        )
        return result


class TransferTicketsUseCase:
    """Moves several tickets to another queue and clears their assignee."""

    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, ticket_ids: list[int], queue: str) -> BulkResult:
        target = queue_from_name(queue)
        result = await _load_many(self._tickets, ticket_ids)
        for ticket in result.tickets:
            ticket.queue = target
            ticket.assigned_to = None
            ticket.touch()
            await self._tickets.update(ticket)
        logger.info(
            "%d tickets transferred to %s (%d not found)",
            len(result.tickets), queue, len(result.missing),
        )
        return result


class ListTicketsUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, filters: TicketFilter, page: int = 1, limit: int = 20) -> TicketPage:
        page = max(page, 1)
        limit = max(limit, 1)
        tickets, total = await self._tickets.search(filters, offset=(page - 1) * limit, limit=limit)
        return TicketPage(tickets=tickets, total=total, page=page, limit=limit)

    async def for_customer(self, email: str) -> list[Ticket]:
        return await self._tickets.get_by_customer_email(email.strip().lower())

    async def get(self, ticket_id: int) -> Ticket:
        return await _load(self._tickets, ticket_id)
