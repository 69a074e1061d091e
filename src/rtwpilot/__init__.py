"""
RTWPilot - Compliance Alert & Workload Derivation Engine

RTWPilot turns a snapshot of return-to-work case records into:
- Personalised notifications for the current user
- Supervisor-facing case flags for quality review
- Per-consultant workload counters and an urgent task queue

Everything is derived on demand from the cases, the user and a reference
instant. Nothing is persisted; read and dismissed state lives in a
session-local overlay keyed by notification id.

Quick Start:
    from datetime import datetime, timezone

    from rtwpilot.records import load_case_file
    from rtwpilot.engine import derive_all

    cases, users = load_case_file("cases.yaml")
    now = datetime.now(timezone.utc)
    result = derive_all(cases, users[0], users, now)

    for n in result.notifications:
        print(n.priority.value, n.title, n.message)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "RTWPilot Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    # Enums
    CaseStatus,
    FlagType,
    NotificationCategory,
    NotificationFilter,
    Priority,
    SignalKind,
    UserRole,
    WorkloadBand,
    # Input
    Case,
    RtwPlan,
    SupervisorNote,
    Task,
    UserContext,
    UserDirectory,
    Worker,
    # Derived
    CaseFlag,
    ConsultantPerformance,
    ConsultantWorkload,
    Notification,
    NotificationBadges,
    NotificationOverlay,
    Signal,
    UrgentTask,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    DerivationResult,
    DiagnosticChannel,
    derive_all,
    derive_case_flags,
    derive_notifications,
    derive_urgent_tasks,
    derive_workloads,
)

# =============================================================================
# Configuration
# =============================================================================
from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config

# =============================================================================
# Canonical JSON / Hashing
# =============================================================================
from .canon import canonical_json, content_hash, snapshot_fingerprint

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    RTWPilotError,
    MalformedDateError,
    CaseRecordError,
    CaseListUnavailableError,
    UnknownUserError,
    ConfigLoadError,
    ConfigValidationError,
)

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Version
    "__version__",
    # Enums
    "CaseStatus",
    "FlagType",
    "NotificationCategory",
    "NotificationFilter",
    "Priority",
    "SignalKind",
    "UserRole",
    "WorkloadBand",
    # Input
    "Case",
    "RtwPlan",
    "SupervisorNote",
    "Task",
    "UserContext",
    "UserDirectory",
    "Worker",
    # Derived
    "CaseFlag",
    "ConsultantPerformance",
    "ConsultantWorkload",
    "Notification",
    "NotificationBadges",
    "NotificationOverlay",
    "Signal",
    "UrgentTask",
    # Engine
    "DerivationResult",
    "DiagnosticChannel",
    "derive_all",
    "derive_case_flags",
    "derive_notifications",
    "derive_urgent_tasks",
    "derive_workloads",
    # Configuration
    "DEFAULT_CONFIG",
    "EngineConfig",
    "load_engine_config",
    # Canon
    "canonical_json",
    "content_hash",
    "snapshot_fingerprint",
    # Exceptions
    "RTWPilotError",
    "MalformedDateError",
    "CaseRecordError",
    "CaseListUnavailableError",
    "UnknownUserError",
    "ConfigLoadError",
    "ConfigValidationError",
]
