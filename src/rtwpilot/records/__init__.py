"""
RTWPilot Records

Case and user records: the pydantic schema for raw records, the loader that
turns them into domain models, and the repository interfaces.
"""
from __future__ import annotations

from .loader import (
    case_from_dict,
    case_from_record,
    cases_from_dicts,
    load_case_file,
    user_from_record,
)
from .repository import (
    CaseRepository,
    FileCaseRepository,
    IdentityProvider,
    InMemoryCaseRepository,
    StaticIdentityProvider,
)
from .schema import CaseFileSchema, CaseRecord, UserRecord

__all__ = [
    "CaseFileSchema",
    "CaseRecord",
    "UserRecord",
    "case_from_dict",
    "case_from_record",
    "cases_from_dicts",
    "load_case_file",
    "user_from_record",
    "CaseRepository",
    "FileCaseRepository",
    "IdentityProvider",
    "InMemoryCaseRepository",
    "StaticIdentityProvider",
]
