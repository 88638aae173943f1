"""Classification result — suggested triage for a ticket's text."""

from dataclasses import dataclass
from datetime import datetime

from helpdesk.domain.value_objects.enums import Category, Priority, Queue


@dataclass(frozen=True)
class ClassificationResult:
    suggested_priority: Priority
    suggested_category: Category
    suggested_queue: Queue
    confidence: float
    reasoning: str
    classified_at: datetime

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")
        if not self.reasoning or not self.reasoning.strip():
            raise ValueError("reasoning must be a non-empty string")
