"""Ticket entity — a customer-submitted support request."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.value_objects.enums import Category, Priority, Queue, TicketStatus

TITLE_MAX_LENGTH = 200


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Ticket:
    id: int | None
    title: str
    description: str
    customer_email: str
    customer_name: str
    category: Category
    priority: Priority = Priority.MEDIUM
    queue: Queue | None = None  # None = unassigned
    status: TicketStatus = TicketStatus.OPEN
    assigned_to: str | None = None
    ai_classification: ClassificationResult | None = None
    comments: list[Comment] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    resolved_at: datetime | None = None
    closed_at: datetime | None = None

    @classmethod
    def submit(
        cls,
        title: str,
        description: str,
        customer_email: str,
        customer_name: str,
        classification: ClassificationResult,
        category: Category | None = None,
        priority: Priority | None = None,
    ) -> "Ticket":
        """Create a new open ticket from an intake form.

        The submitter's explicit category/priority win over the suggestion;
        blanks are filled from it. The queue always comes from the
        classification.
        """
        return cls(
            id=None,
            title=title.strip(),
            description=description.strip(),
            customer_email=customer_email.strip().lower(),
            customer_name=customer_name.strip(),
            category=category or classification.suggested_category,
            priority=priority or classification.suggested_priority,
            queue=classification.suggested_queue,
            ai_classification=classification,
        )

    def replace_classification(self, classification: ClassificationResult) -> None:
        """Swap in a fresh suggestion; effective fields stay as staff set them."""
        self.ai_classification = classification
        self.touch()

    def change_status(self, status: TicketStatus, now: datetime | None = None) -> None:
        now = now or _utcnow()
        self.status = status
        if status == TicketStatus.RESOLVED:
            self.resolved_at = now
        elif status == TicketStatus.CLOSED:
            self.closed_at = now
        self.touch(now)

    def add_comment(self, comment: Comment) -> None:
        self.comments.append(comment)
        self.touch()

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or _utcnow()

    def is_classified(self) -> bool:
        return self.ai_classification is not None

    def ai_agrees_on_category(self) -> bool:
        return (
            self.ai_classification is not None
            and self.ai_classification.suggested_category == self.category
        )
