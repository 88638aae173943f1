"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.auth.static_token import StaticTokenDirectory
from helpdesk.adapters.llm.openai_adapter import OpenAIClassifier
from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.repositories import (
    SqlTicketRepository,
    SqlTicketStatsRepository,
)
from helpdesk.application.ports.staff_directory import StaffDirectory, StaffMember
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.ports.ticket_stats import TicketStatsRepository
from helpdesk.application.use_cases.classify_ticket import ClassificationService
from helpdesk.application.use_cases.manage_tickets import (
    AddCommentUseCase,
    AssignTicketsUseCase,
    ListTicketsUseCase,
    ReclassifyTicketUseCase,
    SubmitTicketUseCase,
    TransferTicketsUseCase,
    UpdateTicketUseCase,
)
from helpdesk.config import settings

# Singleton adapters (stateless)
_classification_service = ClassificationService(remote=OpenAIClassifier())
_staff_directory = StaticTokenDirectory(
    token=settings.staff_api_token,
    member=StaffMember(id=settings.staff_id, name=settings.staff_name),
)


def get_classification_service() -> ClassificationService:
    return _classification_service


def get_staff_directory() -> StaffDirectory:
    return _staff_directory


def get_ticket_repo(session: AsyncSession = Depends(get_session)) -> TicketRepository:
    return SqlTicketRepository(session)


def get_ticket_stats(session: AsyncSession = Depends(get_session)) -> TicketStatsRepository:
    return SqlTicketStatsRepository(session)


def get_submit_ticket_uc(
    classifier: ClassificationService = Depends(get_classification_service),
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> SubmitTicketUseCase:
    return SubmitTicketUseCase(classifier=classifier, ticket_repo=tickets)


def get_reclassify_ticket_uc(
    classifier: ClassificationService = Depends(get_classification_service),
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> ReclassifyTicketUseCase:
    return ReclassifyTicketUseCase(classifier=classifier, ticket_repo=tickets)


def get_update_ticket_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> UpdateTicketUseCase:
    return UpdateTicketUseCase(ticket_repo=tickets)


def get_add_comment_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> AddCommentUseCase:
    return AddCommentUseCase(ticket_repo=tickets)


def get_list_tickets_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> ListTicketsUseCase:
    return ListTicketsUseCase(ticket_repo=tickets)


def get_assign_tickets_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> AssignTicketsUseCase:
    return AssignTicketsUseCase(ticket_repo=tickets)


def get_transfer_tickets_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
) -> TransferTicketsUseCase:
    return TransferTicketsUseCase(ticket_repo=tickets)
