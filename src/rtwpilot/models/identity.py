"""
RTWPilot Identity Models

Users as supplied by the Identity/Session Provider. The engine uses them only
to personalise output (supervisor-note visibility) and to resolve consultant
display names; it never authenticates or authorises.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .enums import UserRole


UNKNOWN_CONSULTANT = "Unknown"


@dataclass(frozen=True)
class UserContext:
    """The current user, or one entry of the user directory."""
    id: str
    name: str
    role: UserRole = UserRole.CONSULTANT

    @property
    def display_name(self) -> str:
        """Name with role, as shown on supervisor views."""
        return f"{self.name} ({self.role.value})"


class UserDirectory:
    """
    Lookup of users by id.

    A miss is not an error: `display_name_for` returns the explicit
    "Unknown" placeholder.
    """

    def __init__(self, users: Iterable[UserContext] = ()):
        self._users: dict[str, UserContext] = {u.id: u for u in users}

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def get(self, user_id: str) -> Optional[UserContext]:
        return self._users.get(user_id)

    def display_name_for(self, user_id: str) -> str:
        user = self._users.get(user_id)
        if user is None:
            return UNKNOWN_CONSULTANT
        return user.display_name

    def users(self) -> list[UserContext]:
        return list(self._users.values())
