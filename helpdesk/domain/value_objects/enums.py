"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Category(str, Enum):
    TECHNICAL = "technical"
    BILLING = "billing"
    GENERAL = "general"
    FEATURE_REQUEST = "feature-request"
    BUG_REPORT = "bug-report"


class Queue(str, Enum):
    TECHNICAL_SUPPORT = "technical-support"
    BILLING_SUPPORT = "billing-support"
    GENERAL_SUPPORT = "general-support"
    ESCALATION = "escalation"


# Tickets with no queue (never classified, or moved out by staff).
UNASSIGNED_QUEUE = "unassigned"

QUEUE_NAMES: tuple[str, ...] = tuple(q.value for q in Queue) + (UNASSIGNED_QUEUE,)


def queue_from_name(name: str) -> Queue | None:
    """Stored or requested queue name to Queue; "unassigned" maps to None."""
    return None if name == UNASSIGNED_QUEUE else Queue(name)


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"
