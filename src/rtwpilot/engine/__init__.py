"""
RTWPilot Engine

Pure derivation services over a snapshot of case records.

Services:
- CaseSignalExtractor: Atomic compliance signals for one case
- NotificationSynthesizer: Personalised notifications for one user
- CaseFlagGenerator: Supervisor-facing compliance flags
- WorkloadAggregator: Per-consultant counters and the urgent task queue
- DiagnosticChannel: Malformed dates and failed cases found during a pass

Usage:
    from rtwpilot.engine import (
        derive_notifications,
        derive_case_flags,
        derive_workloads,
        derive_all,
    )
"""
from __future__ import annotations

from .temporal import (
    classify_date,
    days_overdue,
    days_since,
    days_until,
    hours_until,
    is_due_today,
    is_due_today_or_tomorrow,
    is_due_tomorrow,
    is_overdue,
    is_upcoming_within,
    parse_iso_date,
    parse_iso_datetime,
    to_instant,
)
from .diagnostics import DiagnosticChannel, DiagnosticReport
from .signal_extractor import (
    CASE_ERRORS,
    CaseSignalExtractor,
    extract_signals,
    iter_case_signals,
    review_overdue_severity,
    stale_communication_severity,
    supervisor_note_priority,
    task_overdue_severity,
)
from .priority import (
    PRIORITY_RANK,
    at_least,
    priority_rank,
    priority_sort_key,
    sort_by_priority,
    sort_flags,
    sort_notifications,
)
from .notification_synthesizer import (
    NotificationSynthesizer,
    notification_from_signal,
    synthesize_notifications,
)
from .flag_generator import (
    FLAG_TYPES,
    CaseFlagGenerator,
    filter_flags,
    generate_case_flags,
)
from .workload_aggregator import (
    WorkloadAggregator,
    aggregate_performance,
    aggregate_workloads,
    derive_urgent_tasks,
    needs_attention,
    workload_band,
)
from .derivation import (
    DerivationResult,
    derive_all,
    derive_case_flags,
    derive_notifications,
    derive_workloads,
)

__all__ = [
    # Temporal
    "classify_date",
    "days_overdue",
    "days_since",
    "days_until",
    "hours_until",
    "is_due_today",
    "is_due_today_or_tomorrow",
    "is_due_tomorrow",
    "is_overdue",
    "is_upcoming_within",
    "parse_iso_date",
    "parse_iso_datetime",
    "to_instant",
    # Diagnostics
    "DiagnosticChannel",
    "DiagnosticReport",
    # Signals
    "CASE_ERRORS",
    "CaseSignalExtractor",
    "extract_signals",
    "iter_case_signals",
    "review_overdue_severity",
    "stale_communication_severity",
    "supervisor_note_priority",
    "task_overdue_severity",
    # Priority
    "PRIORITY_RANK",
    "at_least",
    "priority_rank",
    "priority_sort_key",
    "sort_by_priority",
    "sort_flags",
    "sort_notifications",
    # Notifications
    "NotificationSynthesizer",
    "notification_from_signal",
    "synthesize_notifications",
    # Flags
    "FLAG_TYPES",
    "CaseFlagGenerator",
    "filter_flags",
    "generate_case_flags",
    # Workloads
    "WorkloadAggregator",
    "aggregate_performance",
    "aggregate_workloads",
    "derive_urgent_tasks",
    "needs_attention",
    "workload_band",
    # Facade
    "DerivationResult",
    "derive_all",
    "derive_case_flags",
    "derive_notifications",
    "derive_workloads",
]
