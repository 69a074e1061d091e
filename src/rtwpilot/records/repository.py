"""
RTWPilot Repositories

The engine's two inputs: the Case Repository (the full list of cases) and
the Identity Provider (the current user and the user directory).

Both are Protocols; the engine itself never calls them. Callers fetch a
snapshot and pass it to the derivation functions.

Usage:
    repo = FileCaseRepository("cases.yaml")
    cases = repo.list_cases()
    identity = StaticIdentityProvider(repo.list_users(), current_user_id="u-1")
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol, Union

import yaml

from ..exceptions import CaseListUnavailableError, CaseRecordError, UnknownUserError
from ..models import Case, UserContext
from .loader import load_case_file

logger = logging.getLogger(__name__)


class CaseRepository(Protocol):
    """Supplies the full list of case records."""

    def list_cases(self) -> list[Case]:
        """
        Raises:
            CaseListUnavailableError: If the case list cannot be obtained
        """
        ...


class IdentityProvider(Protocol):
    """Supplies the current user and the user directory."""

    def current_user(self) -> Optional[UserContext]:
        ...

    def list_user_directory(self) -> list[UserContext]:
        ...


# =============================================================================
# Implementations
# =============================================================================

class InMemoryCaseRepository:
    """Case repository over a fixed list, used by tests and the demo."""

    def __init__(self, cases: Iterable[Case] = (), users: Iterable[UserContext] = ()):
        self._cases = list(cases)
        self._users = list(users)

    def list_cases(self) -> list[Case]:
        return list(self._cases)

    def list_users(self) -> list[UserContext]:
        return list(self._users)

    def replace(self, cases: Iterable[Case]) -> None:
        self._cases = list(cases)


class FileCaseRepository:
    """
    Case repository backed by a YAML or JSON case file.

    The file is re-read on every call so edits show up on the next pass.
    Any failure to read or validate the file is reported as
    CaseListUnavailableError.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._users: list[UserContext] = []

    def _load(self) -> list[Case]:
        try:
            cases, users = load_case_file(self.path)
        except CaseRecordError as e:
            raise CaseListUnavailableError(
                message=f"Case file is invalid: {e.message}",
                details={"path": str(self.path), "cause": e.to_dict()},
            )
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise CaseListUnavailableError(
                message=f"Failed to read case file: {e}",
                details={"path": str(self.path), "error": str(e)},
            )
        self._users = users
        return cases

    def list_cases(self) -> list[Case]:
        return self._load()

    def list_users(self) -> list[UserContext]:
        """Users from the last successful read (loading the file if needed)."""
        if not self._users:
            self._load()
        return list(self._users)


class StaticIdentityProvider:
    """Identity provider over a fixed user list."""

    def __init__(self, users: Iterable[UserContext], current_user_id: Optional[str] = None):
        self._users = {u.id: u for u in users}
        self._current_user_id = current_user_id

    def current_user(self) -> Optional[UserContext]:
        if self._current_user_id is None:
            return None
        return self._users.get(self._current_user_id)

    def list_user_directory(self) -> list[UserContext]:
        return list(self._users.values())

    def get_user(self, user_id: str) -> UserContext:
        """
        Raises:
            UnknownUserError: If the id is not in the directory
        """
        user = self._users.get(user_id)
        if user is None:
            raise UnknownUserError(
                message=f"Unknown user: {user_id}",
                details={"user_id": user_id},
            )
        return user
