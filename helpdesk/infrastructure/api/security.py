"""Staff authentication for triage and admin endpoints."""

from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from helpdesk.application.ports.staff_directory import StaffDirectory, StaffMember
from helpdesk.infrastructure.api.dependencies import get_staff_directory

# auto_error=False so a missing header is a 401 like a wrong token
_bearer = HTTPBearer(auto_error=False)


def require_staff(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    directory: StaffDirectory = Depends(get_staff_directory),
) -> StaffMember:
    """Resolve the calling staff member from an `Authorization: Bearer` header."""
    staff = directory.authenticate(credentials.credentials) if credentials else None
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return staff
