"""Port interface for staff authentication."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StaffMember:
    id: str
    name: str


class StaffDirectory(ABC):
    @abstractmethod
    def authenticate(self, token: str) -> StaffMember | None:
        """Return the staff member owning *token*, or None if it is not recognised."""
        ...
