"""
RTWPilot Derivation Facade

The functions the presentation layer calls. Each is pure: the same cases,
user and reference instant always produce the same output, so callers may
re-derive as often as they like and discard stale results.

Usage:
    from rtwpilot.engine import derive_all

    result = derive_all(cases, user, directory, now, overlay=session_overlay)
    result.notifications   # sorted, overlay applied
    result.flags           # sorted
    result.workloads       # grouping order
    result.diagnostics     # malformed dates / failed cases
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..canon import snapshot_fingerprint
from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    Case,
    CaseFlag,
    ConsultantWorkload,
    Notification,
    NotificationBadges,
    NotificationOverlay,
    UserContext,
)
from .diagnostics import DiagnosticChannel, DiagnosticReport
from .flag_generator import Directory, generate_case_flags
from .notification_synthesizer import synthesize_notifications
from .temporal import Instant, to_instant
from .workload_aggregator import aggregate_workloads

logger = logging.getLogger(__name__)


def derive_notifications(
    cases: Iterable[Case],
    user: Optional[UserContext],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    overlay: Optional[NotificationOverlay] = None,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[Notification]:
    """
    Sorted notifications for `user`, with the session overlay applied.

    The overlay is merged only after the pass completes.
    """
    notifications = synthesize_notifications(cases, user, now, config, diagnostics)
    if overlay is not None:
        notifications = overlay.apply(notifications)
    return notifications


def derive_case_flags(
    cases: Iterable[Case],
    directory: Optional[Directory],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[CaseFlag]:
    """Sorted case flags with consultant names resolved from `directory`."""
    return generate_case_flags(cases, directory, now, config, diagnostics)


def derive_workloads(
    cases: Iterable[Case],
    now: Instant,
    directory: Optional[Directory] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[ConsultantWorkload]:
    """Per-consultant counters in grouping order."""
    return aggregate_workloads(cases, now, directory, config, diagnostics)


# =============================================================================
# Combined pass
# =============================================================================

@dataclass
class DerivationResult:
    """
    Everything one derivation pass produced.

    Attributes:
        reference_instant: The `now` the pass ran against
        snapshot_hash: Fingerprint of the case snapshot
        notifications: Sorted notifications for the current user
        flags: Sorted case flags
        workloads: Consultant workloads in grouping order
        diagnostics: Problems found during the pass (each reported once)
    """
    reference_instant: Any
    snapshot_hash: str
    notifications: list[Notification] = field(default_factory=list)
    flags: list[CaseFlag] = field(default_factory=list)
    workloads: list[ConsultantWorkload] = field(default_factory=list)
    diagnostics: list[DiagnosticReport] = field(default_factory=list)

    @property
    def badges(self) -> NotificationBadges:
        return NotificationBadges.from_notifications(self.notifications)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference_instant": to_instant(self.reference_instant).isoformat(),
            "snapshot_hash": self.snapshot_hash,
            "notifications": [n.to_dict() for n in self.notifications],
            "flags": [f.to_dict() for f in self.flags],
            "workloads": [w.to_dict() for w in self.workloads],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "badges": self.badges.to_dict(),
        }


def derive_all(
    cases: Iterable[Case],
    user: Optional[UserContext],
    directory: Optional[Directory],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    overlay: Optional[NotificationOverlay] = None,
) -> DerivationResult:
    """
    Run notifications, flags and workloads over one case snapshot.

    The three derivations share a diagnostics channel, so a malformed field
    read by all of them is still reported once.
    """
    cases = list(cases)
    diagnostics = DiagnosticChannel()

    result = DerivationResult(
        reference_instant=now,
        snapshot_hash=snapshot_fingerprint(cases),
        notifications=derive_notifications(cases, user, now, config, overlay, diagnostics),
        flags=derive_case_flags(cases, directory, now, config, diagnostics),
        workloads=derive_workloads(cases, now, directory, config, diagnostics),
    )
    result.diagnostics = diagnostics.reports

    logger.debug(
        "Derivation pass over %d cases (%s): %d notifications, %d flags, %d workloads, %d diagnostics",
        len(cases),
        result.snapshot_hash[:12],
        len(result.notifications),
        len(result.flags),
        len(result.workloads),
        len(result.diagnostics),
    )
    return result
