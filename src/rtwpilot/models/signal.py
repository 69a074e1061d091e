"""
RTWPilot Signal Model

A Signal is an atomic compliance fact derived from a single case during one
derivation pass. Signals feed the notification synthesizer, the case flag
generator and the workload aggregator; they are never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional
from urllib.parse import quote

from .enums import Priority, SignalKind

# Characters left unquoted in slug parts; ":" is the part separator
_SLUG_SAFE = "-._~"


@dataclass(frozen=True)
class Signal:
    """
    One compliance event for one case.

    Attributes:
        kind: What happened
        case_id: Case the signal belongs to
        severity: Base severity before any presentation mapping
        key: Distinguishing key within (kind, case); review date string,
            task id, note id, plan boundary name, or "" for case-level signals
        anchor_at: Deterministic instant the signal is pinned to (due date,
            note timestamp, last contact, or the reference instant)
        due_date: Date the underlying item is due, if any
        days_overdue: Whole days past due (0 when not overdue)
        days_elapsed: Whole days since the anchor (stale communication,
            initial contact)
        payload: Kind-specific details used by text templates
    """
    kind: SignalKind
    case_id: str
    severity: Priority
    anchor_at: datetime
    key: str = ""
    due_date: Optional[date] = None
    days_overdue: Optional[int] = None
    days_elapsed: Optional[int] = None
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def identity(self) -> tuple[str, str, str]:
        """Deduplication identity: (kind, case_id, key)."""
        return (self.kind.value, self.case_id, self.key)

    @property
    def slug(self) -> str:
        """
        Stable textual form of the identity, used to build derived ids.

        Parts are percent-quoted and joined with ":", so distinct identities
        never collide even when case or task ids contain separators.

        e.g. "review-overdue:CASE-7:2024-06-01", "documents-missing:CASE-7"
        """
        parts = [self.kind.value.replace("_", "-"), quote(self.case_id, safe=_SLUG_SAFE)]
        if self.key:
            parts.append(quote(self.key, safe=_SLUG_SAFE))
        return ":".join(parts)
