from __future__ import annotations

from dataclasses import dataclass

from mockprep.errors import AuthorizationError
from mockprep.types import Caller, UserRole


@dataclass(slots=True)
class AccessPolicy:
    caller: Caller

    def require_mock_catalog_access(self) -> None:
        role = self.caller.role
        if role == UserRole.candidate:
            return
        if role == UserRole.admin:
            return
        if role == UserRole.recruiter:
            raise AuthorizationError("You are not authorised to get Mock Job Postings!")

        raise AuthorizationError(f"unsupported role '{role}'")

    def require_candidate(self) -> str:
        """Return the caller id that every candidate-scoped query is filtered by."""
        role = self.caller.role
        if role == UserRole.candidate:
            return self.caller.id
        if role in {UserRole.recruiter, UserRole.admin}:
            raise AuthorizationError("Only candidates can take mock interviews")

        raise AuthorizationError(f"unsupported role '{role}'")

    def require_admin(self) -> None:
        role = self.caller.role
        if role == UserRole.admin:
            return
        if role in {UserRole.candidate, UserRole.recruiter}:
            raise AuthorizationError("You are not authorised!")

        raise AuthorizationError(f"unsupported role '{role}'")
