"""
Shared service state (set by main.py, or directly by tests).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException

from api.session import OverlayStore
from rtwpilot.config import DEFAULT_CONFIG, EngineConfig
from rtwpilot.exceptions import CaseListUnavailableError, UnknownUserError
from rtwpilot.models import Case, UserContext, UserDirectory
from rtwpilot.records import CaseRepository, StaticIdentityProvider


@dataclass
class ServiceState:
    repository: CaseRepository
    identity: StaticIdentityProvider
    config: EngineConfig = DEFAULT_CONFIG
    overlays: OverlayStore = field(default_factory=OverlayStore)

    def cases(self) -> list[Case]:
        """Current case snapshot; repository failure becomes HTTP 503."""
        try:
            return self.repository.list_cases()
        except CaseListUnavailableError as e:
            raise HTTPException(status_code=503, detail=e.to_dict())

    def directory(self) -> UserDirectory:
        return UserDirectory(self.identity.list_user_directory())

    def user(self, user_id: str) -> UserContext:
        try:
            return self.identity.get_user(user_id)
        except UnknownUserError as e:
            raise HTTPException(status_code=404, detail=e.to_dict())


_state: Optional[ServiceState] = None


def set_state(state: Optional[ServiceState]):
    global _state
    _state = state


def get_state() -> ServiceState:
    if _state is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return _state


def resolve_now(now: Optional[datetime]) -> datetime:
    """Reference instant for a request: the `now` query parameter or the clock."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now
