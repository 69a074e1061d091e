"""
RTWPilot Exception Hierarchy

Domain-specific exceptions for return-to-work case derivation.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: RTW_<CATEGORY>_<SPECIFIC>

Only systemic failures are meant to reach the presentation layer. Per-field
and per-case failures raised during a derivation pass are caught by the
engine and turned into diagnostics (see engine/diagnostics.py).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class RTWPilotError(Exception):
    """
    Base exception for all RTWPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (RTW_*)
        details: Additional context about the error
        case_id: Associated case ID if applicable
    """
    message: str
    code: str = "RTW_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    case_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.case_id:
            parts.append(f"(case: {self.case_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.case_id:
            result["case_id"] = self.case_id
        return result


# =============================================================================
# Temporal Errors
# =============================================================================

@dataclass
class MalformedDateError(RTWPilotError):
    """An ISO-8601 date or date-time field failed to parse."""
    code: str = "RTW_MALFORMED_DATE"


# =============================================================================
# Case Record Errors
# =============================================================================

@dataclass
class CaseRecordError(RTWPilotError):
    """A case record violates the repository schema."""
    code: str = "RTW_CASE_RECORD_INVALID"


@dataclass
class CaseListUnavailableError(RTWPilotError):
    """The case repository could not supply the case list."""
    code: str = "RTW_CASE_LIST_UNAVAILABLE"


# =============================================================================
# Identity Errors
# =============================================================================

@dataclass
class UnknownUserError(RTWPilotError):
    """Requested user is not present in the user directory."""
    code: str = "RTW_UNKNOWN_USER"


# =============================================================================
# Configuration Errors
# =============================================================================

@dataclass
class ConfigLoadError(RTWPilotError):
    """Failed to read the engine configuration file."""
    code: str = "RTW_CONFIG_LOAD_ERROR"


@dataclass
class ConfigValidationError(RTWPilotError):
    """Engine configuration failed schema validation."""
    code: str = "RTW_CONFIG_VALIDATION_ERROR"
