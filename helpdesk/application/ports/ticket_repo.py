"""Port interface for ticket persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.enums import Category, Priority, TicketStatus


@dataclass
class TicketFilter:
    status: TicketStatus | None = None
    priority: Priority | None = None
    category: Category | None = None
    queue: str | None = None  # Queue value or "unassigned"


class TicketRepository(ABC):
    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def get_by_customer_email(self, email: str) -> list[Ticket]:
        """Return the customer's tickets, newest first."""
        ...

    @abstractmethod
    async def search(
        self, filters: TicketFilter, offset: int = 0, limit: int = 20
    ) -> tuple[list[Ticket], int]:
        """Return one page of matching tickets (newest first) and the total count."""
        ...

    @abstractmethod
    async def get_many(self, ticket_ids: list[int]) -> list[Ticket]:
        """Return the tickets that exist among *ticket_ids*, in id order."""
        ...

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def add_comment(self, ticket_id: int, comment: Comment) -> Comment:
        ...
