"""
RTWPilot Workload Aggregator

Per-consultant counters for the admin dashboard and the quality-control
view, plus the supervisor's urgent task queue.

Key features:
- Groups cases by assigned consultant id (only consultants that own cases)
- Folds task and review signals into overdue/urgent counters
- Load band ("Overloaded" etc.) as a pure function of the counters
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import quote

from ..config import DEFAULT_CONFIG, EngineConfig
from ..exceptions import MalformedDateError
from ..models import (
    Case,
    CaseFlag,
    CaseStatus,
    ConsultantPerformance,
    ConsultantWorkload,
    Priority,
    SignalKind,
    UrgentTask,
    UrgentTaskType,
    WorkloadBand,
)
from .diagnostics import DiagnosticChannel
from .flag_generator import Directory, as_directory, generate_case_flags
from .signal_extractor import iter_case_signals
from .temporal import Instant, days_since, parse_iso_date

logger = logging.getLogger(__name__)


# =============================================================================
# Load bands
# =============================================================================

def workload_band(workload: ConsultantWorkload, config: EngineConfig = DEFAULT_CONFIG) -> WorkloadBand:
    """
    Label for a consultant's active (open + pending) case load.

    This is the single definition of "Overloaded"; views must not recompute
    it from other fields.
    """
    if workload.active_cases > config.workload_overloaded_above:
        return WorkloadBand.OVERLOADED
    if workload.active_cases > config.workload_high_above:
        return WorkloadBand.HIGH
    return WorkloadBand.NORMAL


def needs_attention(workload: ConsultantWorkload, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    """Alert highlight: overloaded, or too many overdue tasks."""
    return (
        workload.active_cases > config.workload_overloaded_above
        or workload.overdue_tasks > config.overdue_task_alert_above
    )


# =============================================================================
# Aggregator
# =============================================================================

@dataclass
class WorkloadAggregator:
    """
    Builds ConsultantWorkload and ConsultantPerformance records.

    Usage:
        aggregator = WorkloadAggregator()
        workloads = aggregator.aggregate(cases, now)
    """
    config: EngineConfig = DEFAULT_CONFIG

    def _injury_days(
        self,
        case: Case,
        now: Instant,
        diagnostics: DiagnosticChannel,
    ) -> Optional[int]:
        try:
            injury = parse_iso_date(case.injury_date, field="injury_date", case_id=case.id)
        except MalformedDateError as e:
            diagnostics.report_malformed_date(case.id, "injury_date", e)
            return None
        return days_since(injury, now)

    def aggregate(
        self,
        cases: Iterable[Case],
        now: Instant,
        directory: Optional[Directory] = None,
        diagnostics: Optional[DiagnosticChannel] = None,
    ) -> list[ConsultantWorkload]:
        """
        Group cases by consultant and accumulate counters.

        Output follows the order in which consultants first appear.
        """
        names = as_directory(directory) if directory is not None else None
        diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
        groups: dict[str, ConsultantWorkload] = {}

        for case, signals in iter_case_signals(cases, now, None, self.config, diagnostics):
            workload = groups.get(case.consultant)
            if workload is None:
                workload = ConsultantWorkload(
                    consultant_id=case.consultant,
                    consultant_name=(
                        names.display_name_for(case.consultant) if names is not None else None
                    ),
                    quality_score=self.config.quality_score_placeholder,
                )
                groups[case.consultant] = workload

            workload.total_cases += 1
            if case.status == CaseStatus.OPEN:
                workload.open_cases += 1
            elif case.status == CaseStatus.PENDING:
                workload.pending_cases += 1

            workload.overdue_tasks += sum(1 for s in signals if s.kind == SignalKind.TASK_OVERDUE)

            injury_days = self._injury_days(case, now, diagnostics)
            recent_injury = (
                injury_days is not None
                and injury_days <= self.config.urgent_injury_window_days
            )
            review_overdue = any(s.kind == SignalKind.REVIEW_OVERDUE for s in signals)
            if recent_injury or review_overdue:
                workload.urgent_cases += 1

        logger.debug("Aggregated workloads for %d consultants", len(groups))
        return list(groups.values())

    def performance(
        self,
        cases: Iterable[Case],
        now: Instant,
        directory: Optional[Directory] = None,
        flags: Optional[Iterable[CaseFlag]] = None,
        diagnostics: Optional[DiagnosticChannel] = None,
    ) -> list[ConsultantPerformance]:
        """
        Quality-control summary per consultant.

        overdue_actions counts overdue tasks plus overdue reviews; a case is
        flagged when it carries at least one critical flag.
        """
        cases = list(cases)
        names = as_directory(directory)
        diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
        if flags is None:
            flags = generate_case_flags(cases, names, now, self.config, diagnostics)
        critical_cases = {f.case_id for f in flags if f.severity == Priority.CRITICAL}

        groups: dict[str, ConsultantPerformance] = {}
        for case, signals in iter_case_signals(cases, now, None, self.config, diagnostics):
            perf = groups.get(case.consultant)
            if perf is None:
                perf = ConsultantPerformance(
                    consultant_id=case.consultant,
                    consultant_name=names.display_name_for(case.consultant),
                )
                groups[case.consultant] = perf

            perf.total_cases += 1
            perf.overdue_actions += sum(
                1 for s in signals
                if s.kind in (SignalKind.TASK_OVERDUE, SignalKind.REVIEW_OVERDUE)
            )
            if case.id in critical_cases and case.id not in perf.flagged_cases:
                perf.flagged_cases.append(case.id)

        return list(groups.values())

    def urgent_tasks(
        self,
        cases: Iterable[Case],
        now: Instant,
        diagnostics: Optional[DiagnosticChannel] = None,
    ) -> list[UrgentTask]:
        """
        Supervisor work queue: overdue reviews, overdue RTW tasks and new
        injuries on pending cases.

        Sorted critical first, then most days overdue, then id.
        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
        tasks: list[UrgentTask] = []

        for case, signals in iter_case_signals(cases, now, None, self.config, diagnostics):
            for signal in signals:
                if signal.kind == SignalKind.REVIEW_OVERDUE:
                    overdue = signal.days_overdue or 0
                    tasks.append(UrgentTask(
                        id=f"urgent-{signal.slug}",
                        case_id=case.id,
                        worker_name=case.worker_name,
                        consultant_id=case.consultant,
                        task_type=UrgentTaskType.OVERDUE_REVIEW,
                        priority=(
                            Priority.CRITICAL
                            if overdue > self.config.urgent_review_critical_after_days
                            else Priority.HIGH
                        ),
                        due_date=signal.due_date,
                        days_overdue=overdue,
                        description=f"RTW review overdue by {overdue} days",
                    ))
                elif signal.kind == SignalKind.TASK_OVERDUE:
                    tasks.append(UrgentTask(
                        id=f"urgent-{signal.slug}",
                        case_id=case.id,
                        worker_name=case.worker_name,
                        consultant_id=case.consultant,
                        task_type=UrgentTaskType.URGENT_RTW,
                        priority=signal.severity,
                        due_date=signal.due_date,
                        days_overdue=signal.days_overdue or 0,
                        description=signal.payload.get("title", ""),
                    ))

            if case.status != CaseStatus.PENDING:
                continue
            try:
                injury = parse_iso_date(case.injury_date, field="injury_date", case_id=case.id)
            except MalformedDateError as e:
                diagnostics.report_malformed_date(case.id, "injury_date", e)
                continue
            elapsed = days_since(injury, now)
            if elapsed <= self.config.urgent_new_injury_window_days:
                tasks.append(UrgentTask(
                    id=f"urgent-new-injury:{quote(case.id, safe='-._~')}",
                    case_id=case.id,
                    worker_name=case.worker_name,
                    consultant_id=case.consultant,
                    task_type=UrgentTaskType.COMPLIANCE_ISSUE,
                    priority=Priority.CRITICAL,
                    due_date=injury,
                    days_overdue=elapsed,
                    description="New injury requires immediate case setup and first contact",
                ))

        # First record wins for duplicate ids
        return sorted(
            {t.id: t for t in reversed(tasks)}.values(),
            key=lambda t: (t.priority != Priority.CRITICAL, -t.days_overdue, t.id),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def aggregate_workloads(
    cases: Iterable[Case],
    now: Instant,
    directory: Optional[Directory] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[ConsultantWorkload]:
    """Per-consultant workload counters (grouping order, unsorted)."""
    return WorkloadAggregator(config=config).aggregate(cases, now, directory, diagnostics)


def aggregate_performance(
    cases: Iterable[Case],
    now: Instant,
    directory: Optional[Directory] = None,
    flags: Optional[Iterable[CaseFlag]] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[ConsultantPerformance]:
    """Per-consultant quality-control summary."""
    return WorkloadAggregator(config=config).performance(cases, now, directory, flags, diagnostics)


def derive_urgent_tasks(
    cases: Iterable[Case],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[UrgentTask]:
    """Sorted urgent task queue."""
    return WorkloadAggregator(config=config).urgent_tasks(cases, now, diagnostics)
