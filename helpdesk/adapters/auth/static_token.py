"""Single shared staff token, configured through the environment."""

from __future__ import annotations

import secrets

from helpdesk.application.ports.staff_directory import StaffDirectory, StaffMember


class StaticTokenDirectory(StaffDirectory):
    """Accepts exactly one token. An empty configured token accepts nothing."""

    def __init__(self, token: str, member: StaffMember):
        self._token = token.strip()
        self._member = member

    def authenticate(self, token: str) -> StaffMember | None:
        if not self._token or not token:
            return None
        if secrets.compare_digest(token.encode(), self._token.encode()):
            return self._member
        return None
