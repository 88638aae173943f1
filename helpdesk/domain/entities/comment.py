"""Comment entity — a staff note attached to a ticket."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Comment:
    author: str
    content: str
    is_internal: bool = False
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
