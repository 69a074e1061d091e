"""
RTWPilot Diagnostics Channel

Collects problems found during a derivation pass without aborting it.

- A malformed date skips only the signal(s) depending on that field and is
  reported once per (case, field), however many derivations read it.
- A case whose extraction fails outright contributes no signals and is
  reported once.

Each new report is also logged at WARNING.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import MalformedDateError
from ..models import DiagnosticKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticReport:
    """One problem found during derivation."""
    kind: DiagnosticKind
    case_id: str
    message: str
    field: Optional[str] = None
    value: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "case_id": self.case_id,
            "field": self.field,
            "value": self.value,
            "message": self.message,
        }


class DiagnosticChannel:
    """
    Per-pass collector of DiagnosticReports.

    Usage:
        diagnostics = DiagnosticChannel()
        notifications = synthesize_notifications(cases, user, now, diagnostics=diagnostics)
        for report in diagnostics.reports:
            ...
    """

    def __init__(self) -> None:
        self._reports: dict[tuple[str, str, str], DiagnosticReport] = {}

    def __len__(self) -> int:
        return len(self._reports)

    @property
    def reports(self) -> list[DiagnosticReport]:
        return list(self._reports.values())

    def _record(self, report: DiagnosticReport) -> None:
        key = (report.kind.value, report.case_id, report.field or "")
        if key in self._reports:
            return
        self._reports[key] = report
        logger.warning(
            "%s in case %s%s: %s",
            report.kind.value,
            report.case_id,
            f" ({report.field})" if report.field else "",
            report.message,
        )

    def report_malformed_date(
        self,
        case_id: str,
        field: str,
        error: MalformedDateError,
    ) -> None:
        value = error.details.get("value")
        self._record(DiagnosticReport(
            kind=DiagnosticKind.MALFORMED_DATE,
            case_id=case_id,
            field=field,
            value=None if value is None else str(value),
            message=error.message,
        ))

    def report_case_failure(self, case_id: str, error: Exception) -> None:
        self._record(DiagnosticReport(
            kind=DiagnosticKind.CASE_FAILED,
            case_id=case_id,
            message=f"{type(error).__name__}: {error}",
        ))

    def malformed_fields(self, case_id: str) -> list[str]:
        """Fields of a case that failed to parse this pass."""
        return [
            r.field for r in self._reports.values()
            if r.case_id == case_id and r.kind == DiagnosticKind.MALFORMED_DATE and r.field
        ]
